"""Jinja2 template environment and the context every page shares."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from weblist import __version__
from weblist.config import Settings

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def page_context(settings: Settings, **extra: Any) -> dict[str, Any]:
    context: dict[str, Any] = {
        "title": settings.title or "weblist",
        "theme": settings.theme,
        "hide_footer": settings.hide_footer,
        "custom_footer": settings.custom_footer,
        "brand_name": settings.brand_name,
        "brand_color": settings.brand_color,
        "version": __version__,
    }
    context.update(extra)
    return context


def render(request: Request, name: str, settings: Settings, status_code: int = 200, **extra: Any):
    return templates.TemplateResponse(
        request,
        name,
        page_context(settings, **extra),
        status_code=status_code,
    )
