"""
User routes for WikiStack.
Lists page authors and the pages each of them wrote.
"""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse
from loguru import logger

from ...database import db_instance
from ...services.page_service import PageService
from ...services.user_service import UserService
from ...utils.template_env import get_templates

router = APIRouter()
templates = get_templates()


@router.get("/users", response_class=HTMLResponse)
async def list_users(request: Request):
    users = await UserService.list_users()
    return templates.TemplateResponse(
        request,
        "users.html",
        {
            "users": users,
            "offline": not db_instance.is_connected,
        },
    )


@router.get("/users/{user_id}", response_class=HTMLResponse)
async def user_page(request: Request, user_id: str):
    """Show a user and the pages they wrote."""
    user = await UserService.get_user(user_id)
    if user is None:
        logger.info(f"User not found: {user_id}")
        raise HTTPException(status_code=404, detail="User not found")

    pages = await PageService.find_by_author(user_id)
    return templates.TemplateResponse(
        request,
        "userpage.html",
        {
            "user": user,
            "pages": pages,
        },
    )
