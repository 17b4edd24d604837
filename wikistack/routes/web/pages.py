"""
Page routes for WikiStack.
Handles the page listing, the add form, page creation, page views and
similar-page lookups.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi_csrf_protect import CsrfProtect
from fastapi_csrf_protect.exceptions import CsrfProtectError
from loguru import logger
from pydantic import ValidationError

from ...database import db_instance
from ...models.page import WikiPage
from ...services.page_service import PageService
from ...services.user_service import UserService
from ...utils.error_utils import describe_validation_error, render_error_page
from ...utils.template_env import get_templates
from ...utils.validation import is_valid_url_title

router = APIRouter()

templates = get_templates()


async def _get_page_or_404(url_title: str) -> WikiPage:
    if not is_valid_url_title(url_title):
        logger.info(f"Rejected malformed url_title: {url_title!r}")
        raise HTTPException(status_code=404, detail="Page not found")
    page = await PageService.get_page(url_title)
    if page is None:
        logger.info(f"Page not found: {url_title}")
        raise HTTPException(status_code=404, detail="Page not found")
    return page


def _render_add_form(
    request: Request,
    csrf_protect: CsrfProtect,
    form: dict,
    errors: Optional[List[dict]] = None,
    status_code: int = 200,
) -> HTMLResponse:
    csrf_token, signed_token = csrf_protect.generate_csrf_tokens()
    template = templates.TemplateResponse(
        request,
        "addpage.html",
        {
            "csrf_token": csrf_token,
            "form": form,
            "errors": errors or [],
            "offline": not db_instance.is_connected,
        },
        status_code=status_code,
    )
    csrf_protect.set_csrf_cookie(signed_token, template)
    return template


@router.api_route("/", methods=["GET", "HEAD"], response_class=HTMLResponse)
async def home(request: Request):
    """Home page listing every page."""
    pages = await PageService.list_pages()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "heading": "All pages",
            "pages": pages,
            "offline": not db_instance.is_connected,
        },
    )


@router.get("/wiki/")
async def wiki_root():
    return RedirectResponse(url="/", status_code=302)


@router.get("/wiki/add", response_class=HTMLResponse)
async def add_page_form(request: Request, csrf_protect: CsrfProtect = Depends()):
    """Form for writing a new page."""
    return _render_add_form(request, csrf_protect, form={})


@router.post("/wiki/")
async def create_page(
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    tags: str = Form(""),
    status: str = Form("open"),
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    csrf_protect: CsrfProtect = Depends(),
):
    """Create a page from the add form and redirect to it."""
    try:
        await csrf_protect.validate_csrf(request)
    except CsrfProtectError as e:
        logger.warning(f"CSRF validation failed while creating page {title!r}: {e.message}")
        return render_error_page(
            request,
            title="Form expired",
            message="The form could not be verified. Reload it and try again.",
            status_code=403,
        )

    submitted = {
        "title": title,
        "content": content,
        "tags": tags,
        "status": status,
        "name": name or "",
        "email": email or "",
    }
    try:
        page = WikiPage(title=title, content=content, tags=tags, status=status)
        author = None
        if (name and name.strip()) or (email and email.strip()):
            author = await UserService.find_or_create(name or "", email or "")
    except ValidationError as e:
        errors = describe_validation_error(e)
        logger.info(f"Rejected page submission {title!r}: {errors}")
        return _render_add_form(
            request, csrf_protect, form=submitted, errors=errors, status_code=422
        )

    if author is not None:
        page.author_id = author.id

    created = await PageService.create_page(page)
    if created is None:
        return render_error_page(
            request,
            title="Database Error",
            message="The database is currently unavailable. Please try again later.",
            status_code=503,
        )

    return RedirectResponse(url=created.route, status_code=302)


@router.get("/wiki/{url_title}", response_class=HTMLResponse)
async def get_page(request: Request, url_title: str):
    """View a specific page."""
    page = await _get_page_or_404(url_title)
    author = await UserService.get_user(page.author_id) if page.author_id else None
    return templates.TemplateResponse(
        request,
        "wikipage.html",
        {
            "page": page,
            "author": author,
        },
    )


@router.get("/wiki/{url_title}/similar", response_class=HTMLResponse)
async def similar_pages(request: Request, url_title: str):
    """List the pages sharing at least one tag with a page."""
    page = await _get_page_or_404(url_title)
    similar = await PageService.find_similar(page)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "heading": f"Pages similar to {page.title}",
            "pages": similar,
            "source_page": page,
            "offline": not db_instance.is_connected,
        },
    )
