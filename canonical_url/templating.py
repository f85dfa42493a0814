"""Jinja2 environment shared by the admin panel and the public pages."""
from __future__ import annotations

from pathlib import Path

from fastapi.templating import Jinja2Templates

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

TEMPLATES = Jinja2Templates(directory=str(TEMPLATE_DIR))
