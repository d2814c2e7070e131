"""
Pydantic schemas for the planner API.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SpecialType(str, Enum):
    HOLIDAY_HOMEWORK = "holiday_homework"
    WHAT_HAD_DONE = "what_had_done"


class Section(str, Enum):
    SCHOOL = "school"
    WHATIDID = "whatidid"


class StrictPayload(BaseModel):
    """Request bodies mirror the table shape; anything else is rejected."""

    model_config = ConfigDict(extra="forbid")


class EntryPayload(StrictPayload):
    # Clients post fetched rows back as-is; the row id is accepted and ignored.
    id: Optional[int] = None


class LoginRequest(StrictPayload):
    username: str
    password: str


class UserInfo(BaseModel):
    id: int
    username: str


class LoginResponse(BaseModel):
    success: Literal[True] = True
    user: UserInfo


class SchoolEntryPayload(EntryPayload):
    date: dt.date
    p1: Optional[str] = None
    p2: Optional[str] = None
    p3: Optional[str] = None
    p4: Optional[str] = None
    p5: Optional[str] = None
    p6: Optional[str] = None
    p7: Optional[str] = None
    p8: Optional[str] = None


class SchoolEntryResponse(BaseModel):
    id: Optional[int] = None
    date: dt.date
    p1: str = ""
    p2: str = ""
    p3: str = ""
    p4: str = ""
    p5: str = ""
    p6: str = ""
    p7: str = ""
    p8: str = ""


class WhatididEntryPayload(EntryPayload):
    date: dt.date
    ioqm: Optional[str] = None
    nsep: Optional[str] = None
    schol: Optional[str] = None


class WhatididEntryResponse(BaseModel):
    id: Optional[int] = None
    date: dt.date
    ioqm: str = ""
    nsep: str = ""
    schol: str = ""


class SpecialEntryPayload(EntryPayload):
    type: SpecialType
    content: Optional[str] = None


class SpecialEntryResponse(BaseModel):
    id: Optional[int] = None
    type: SpecialType
    content: str = ""


class RenderedEntryResponse(BaseModel):
    date: dt.date
    fields: dict[str, str]


class RenderedSpecialResponse(BaseModel):
    type: SpecialType
    html: str


class CalendarDayResponse(BaseModel):
    date: dt.date
    in_month: bool
    is_today: bool
    clickable: bool
    has_entry: bool = False


class CalendarMonthResponse(BaseModel):
    section: Section
    year: int
    month: int = Field(..., ge=1, le=12)
    days: list[CalendarDayResponse]


class ErrorResponse(BaseModel):
    message: str
    errors: Optional[list] = None
