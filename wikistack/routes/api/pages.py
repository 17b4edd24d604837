"""
JSON page routes for WikiStack.
"""

from typing import List

from fastapi import APIRouter, HTTPException

from ...models.page import WikiPage
from ...services.page_service import PageService

router = APIRouter()


def _serialize_page(page: WikiPage) -> dict:
    return {
        "id": page.id,
        "title": page.title,
        "url_title": page.url_title,
        "route": page.route,
        "tags": page.tags,
        "status": page.status,
        "author_id": page.author_id,
        "created_at": page.created_at.isoformat(),
        "content": page.content,
        "rendered_content": page.rendered_content,
    }


def _serialize_pages(pages: List[WikiPage]) -> List[dict]:
    return [_serialize_page(page) for page in pages]


@router.get("/pages/{url_title}")
async def get_page(url_title: str):
    page = await PageService.get_page(url_title)
    if page is None:
        raise HTTPException(status_code=404, detail="Page not found")
    return _serialize_page(page)


@router.get("/pages/{url_title}/similar")
async def get_similar_pages(url_title: str):
    """Pages sharing at least one tag with the given page."""
    page = await PageService.get_page(url_title)
    if page is None:
        raise HTTPException(status_code=404, detail="Page not found")
    return {"page": page.url_title, "similar": _serialize_pages(await PageService.find_similar(page))}


@router.get("/tags/{tag}")
async def get_pages_by_tag(tag: str):
    pages = await PageService.find_by_tag(tag)
    return {"tag": tag, "count": len(pages), "pages": _serialize_pages(pages)}
