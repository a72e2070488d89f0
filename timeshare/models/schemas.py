"""
Pydantic v2 request / response models for every endpoint.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


# ── Session ───────────────────────────────────────────
class SessionCreateRequest(BaseModel):
    message_url: Optional[str] = Field(None, description="URL of the selected message, if any")


class DateOptionOut(BaseModel):
    index: int
    date: datetime
    display: str
    aggregate_votes: int = Field(..., ge=0)
    local_vote: int = Field(..., ge=0, le=1)


class SessionOut(BaseModel):
    session_id: str
    mode: str  # create_event | select_dates
    options: list[DateOptionOut] = Field(default_factory=list)
    closed: bool = False


# ── Edits ─────────────────────────────────────────────
class AddDateRequest(BaseModel):
    date: datetime


# ── Send ──────────────────────────────────────────────
class QueryItem(BaseModel):
    name: str
    value: str


class MessageOut(BaseModel):
    session_id: str
    url: str
    caption: str
    query_items: list[QueryItem] = Field(default_factory=list)
    preview_lines: list[str] = Field(default_factory=list)
    image_svg: str = ""


# ── Health ────────────────────────────────────────────
class HealthResponse(BaseModel):
    status: str = "ok"
    sessions: int = 0
