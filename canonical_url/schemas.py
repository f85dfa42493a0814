"""Shared data structures used across modules."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from .store import ContentStore

META_CANONICAL_URL = "canonical_url"
META_DISCLAIMER = "disclaimer_enabled"
DISCLAIMER_ON = "true"


@dataclass(slots=True)
class RequestContext:
    """What a hook needs to know about the request it runs in."""

    store: ContentStore
    is_single: bool = False
    is_admin: bool = False


class EditPanel(NamedTuple):
    panel_id: str
    title: str
    html: str


@dataclass(slots=True)
class SeoTags:
    canonical: str
    og_url: str


class CanonicalSubmission(BaseModel):
    """The two fields posted by the canonical URL panel."""

    model_config = ConfigDict(extra="ignore")

    canonical_url: str = ""
    disclaimer_enabled: str = ""

    @field_validator("canonical_url", "disclaimer_enabled", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            value = value[-1] if value else ""
        return str(value).strip()
