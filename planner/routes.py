"""
HTTP routes for the planner API.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path

from planner.auth import authenticate
from planner.calendar_grid import month_grid
from planner.config import Settings, get_settings
from planner.db import SCHOOL_FIELDS, WHATIDID_FIELDS, DbClient, StorageError
from planner.dependencies import get_db_client
from planner.render import render_content
from planner.schemas import (
    CalendarDayResponse,
    CalendarMonthResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RenderedEntryResponse,
    RenderedSpecialResponse,
    SchoolEntryPayload,
    SchoolEntryResponse,
    Section,
    SpecialEntryPayload,
    SpecialEntryResponse,
    SpecialType,
    UserInfo,
    WhatididEntryPayload,
    WhatididEntryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)


def _empty_school(entry_date: date) -> SchoolEntryResponse:
    return SchoolEntryResponse(date=entry_date)


def _empty_whatidid(entry_date: date) -> WhatididEntryResponse:
    return WhatididEntryResponse(date=entry_date)


def _load_school(db: DbClient, entry_date: date) -> SchoolEntryResponse:
    try:
        entry = db.get_school_entry(entry_date)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to get school entry")
    if not entry:
        return _empty_school(entry_date)
    return SchoolEntryResponse(**entry.as_dict())


def _load_whatidid(db: DbClient, entry_date: date) -> WhatididEntryResponse:
    try:
        entry = db.get_whatidid_entry(entry_date)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to get whatidid entry")
    if not entry:
        return _empty_whatidid(entry_date)
    return WhatididEntryResponse(**entry.as_dict())


def _load_special(db: DbClient, entry_type: SpecialType) -> SpecialEntryResponse:
    try:
        entry = db.get_special_entry(entry_type.value)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to get special entry")
    if not entry:
        return SpecialEntryResponse(type=entry_type)
    return SpecialEntryResponse(**entry.as_dict())


@router.post("/auth/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    try:
        user = authenticate(
            db,
            payload.username,
            payload.password,
            admin_username=settings.admin_username,
        )
    except StorageError:
        raise HTTPException(status_code=500, detail="Authentication failed")
    if not user:
        logger.info("Rejected login for %r", payload.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return LoginResponse(user=UserInfo(**user.as_public_dict()))


@router.get("/school/{entry_date}", response_model=SchoolEntryResponse)
def get_school_entry(entry_date: date, db: DbClient = Depends(get_db_client)):
    return _load_school(db, entry_date)


@router.get("/school/{entry_date}/rendered", response_model=RenderedEntryResponse)
def get_school_entry_rendered(entry_date: date, db: DbClient = Depends(get_db_client)):
    entry = _load_school(db, entry_date)
    fields = {
        name: render_content(getattr(entry, name), section=Section.SCHOOL.value)
        for name in SCHOOL_FIELDS
    }
    return RenderedEntryResponse(date=entry_date, fields=fields)


@router.post("/school", response_model=SchoolEntryResponse)
def upsert_school_entry(
    payload: SchoolEntryPayload, db: DbClient = Depends(get_db_client)
):
    fields = payload.model_dump(exclude_unset=True, exclude={"id", "date"})
    try:
        entry = db.upsert_school_entry(payload.date, fields)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to save school entry")
    logger.info(
        "Saved school entry for %s (%s)", payload.date, ", ".join(fields) or "no fields"
    )
    return SchoolEntryResponse(**entry.as_dict())


@router.get("/whatidid/{entry_date}", response_model=WhatididEntryResponse)
def get_whatidid_entry(entry_date: date, db: DbClient = Depends(get_db_client)):
    return _load_whatidid(db, entry_date)


@router.get("/whatidid/{entry_date}/rendered", response_model=RenderedEntryResponse)
def get_whatidid_entry_rendered(
    entry_date: date, db: DbClient = Depends(get_db_client)
):
    entry = _load_whatidid(db, entry_date)
    fields = {
        name: render_content(getattr(entry, name), section=Section.WHATIDID.value)
        for name in WHATIDID_FIELDS
    }
    return RenderedEntryResponse(date=entry_date, fields=fields)


@router.post("/whatidid", response_model=WhatididEntryResponse)
def upsert_whatidid_entry(
    payload: WhatididEntryPayload, db: DbClient = Depends(get_db_client)
):
    fields = payload.model_dump(exclude_unset=True, exclude={"id", "date"})
    try:
        entry = db.upsert_whatidid_entry(payload.date, fields)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to save whatidid entry")
    logger.info(
        "Saved whatidid entry for %s (%s)", payload.date, ", ".join(fields) or "no fields"
    )
    return WhatididEntryResponse(**entry.as_dict())


@router.get("/special/{entry_type}", response_model=SpecialEntryResponse)
def get_special_entry(entry_type: SpecialType, db: DbClient = Depends(get_db_client)):
    return _load_special(db, entry_type)


@router.get("/special/{entry_type}/rendered", response_model=RenderedSpecialResponse)
def get_special_entry_rendered(
    entry_type: SpecialType, db: DbClient = Depends(get_db_client)
):
    entry = _load_special(db, entry_type)
    return RenderedSpecialResponse(type=entry_type, html=render_content(entry.content))


@router.post("/special", response_model=SpecialEntryResponse)
def upsert_special_entry(
    payload: SpecialEntryPayload, db: DbClient = Depends(get_db_client)
):
    fields = payload.model_dump(exclude_unset=True, exclude={"id", "type"})
    try:
        entry = db.upsert_special_entry(payload.type.value, fields)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to save special entry")
    logger.info("Saved special entry %s", payload.type.value)
    return SpecialEntryResponse(**entry.as_dict())


@router.get(
    "/calendar/{section}/{year}/{month}", response_model=CalendarMonthResponse
)
def get_calendar_month(
    section: Section,
    year: int = Path(..., ge=1000, le=9998),
    month: int = Path(..., ge=1, le=12),
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    days = month_grid(year, month, min_date=settings.calendar_min_date)
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    try:
        if section == Section.SCHOOL:
            filled = set(db.list_school_dates(first, last))
        else:
            filled = set(db.list_whatidid_dates(first, last))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to load calendar")
    return CalendarMonthResponse(
        section=section,
        year=year,
        month=month,
        days=[
            CalendarDayResponse(
                date=day.date,
                in_month=day.in_month,
                is_today=day.is_today,
                clickable=day.clickable,
                has_entry=day.date in filled,
            )
            for day in days
        ],
    )
