from typing import List, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from ..utils.template_env import get_templates


def render_error_page(
    request: Request,
    title: str = "Error",
    message: str = "An error occurred",
    status_code: int = 400,
    errors: Optional[List[dict]] = None,
) -> HTMLResponse:
    """Render a standardized error template."""
    templates = get_templates()
    return templates.TemplateResponse(
        request,
        "error.html",
        {
            "title": title,
            "message": message,
            "errors": errors or [],
        },
        status_code=status_code,
    )


def describe_validation_error(exc: ValidationError) -> List[dict]:
    """Flatten a pydantic ValidationError into field/message pairs for templates."""
    described = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "__root__")
        described.append({"field": location or "form", "message": error.get("msg", "Invalid value")})
    return described
