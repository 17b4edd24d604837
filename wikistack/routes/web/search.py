"""
Search routes for WikiStack.
Handles tag search.
"""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from loguru import logger
from pydantic import ValidationError

from ...database import db_instance
from ...models.page import TagSearch
from ...services.page_service import PageService
from ...utils.template_env import get_templates

router = APIRouter()
templates = get_templates()


@router.get("/wiki/search", response_class=HTMLResponse)
async def search(request: Request, tag: str = ""):
    """Search pages by tag."""
    pages = []
    query = tag.strip()
    try:
        query = TagSearch(tag=tag).tag
        pages = await PageService.find_by_tag(query)
    except ValidationError:
        logger.info("Tag search accessed without a tag")

    return templates.TemplateResponse(
        request,
        "tagsearch.html",
        {
            "pages": pages,
            "tag": query,
            "searched": bool(query),
            "offline": not db_instance.is_connected,
        },
    )
