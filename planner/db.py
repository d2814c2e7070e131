"""
Database abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import itertools
import logging
from contextlib import contextmanager
from dataclasses import asdict, dataclass, replace
from datetime import date
from typing import Dict, Iterator, Mapping, Optional, Protocol

from sqlalchemy import Column, Date, Integer, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

SCHOOL_FIELDS = ("p1", "p2", "p3", "p4", "p5", "p6", "p7", "p8")
WHATIDID_FIELDS = ("ioqm", "nsep", "schol")
SPECIAL_TYPES = ("holiday_homework", "what_had_done")
SPECIAL_FIELDS = ("content",)


class StorageError(RuntimeError):
    """Raised when the backing store fails to read or write."""


class DbClient(Protocol):
    """Interface for database access."""

    def get_user(self, user_id: int) -> Optional["UserRecord"]:
        ...

    def get_user_by_username(self, username: str) -> Optional["UserRecord"]:
        ...

    def create_user(self, username: str, password: str) -> "UserRecord":
        ...

    def get_school_entry(self, entry_date: date) -> Optional["SchoolEntryRecord"]:
        ...

    def upsert_school_entry(
        self, entry_date: date, fields: Mapping[str, Optional[str]]
    ) -> "SchoolEntryRecord":
        ...

    def list_school_dates(self, start: date, end: date) -> list[date]:
        ...

    def get_whatidid_entry(
        self, entry_date: date
    ) -> Optional["WhatididEntryRecord"]:
        ...

    def upsert_whatidid_entry(
        self, entry_date: date, fields: Mapping[str, Optional[str]]
    ) -> "WhatididEntryRecord":
        ...

    def list_whatidid_dates(self, start: date, end: date) -> list[date]:
        ...

    def get_special_entry(self, entry_type: str) -> Optional["SpecialEntryRecord"]:
        ...

    def upsert_special_entry(
        self, entry_type: str, fields: Mapping[str, Optional[str]]
    ) -> "SpecialEntryRecord":
        ...


@dataclass
class UserRecord:
    id: int
    username: str
    password: str

    def as_public_dict(self) -> dict:
        return {"id": self.id, "username": self.username}


@dataclass
class SchoolEntryRecord:
    id: int
    date: date
    p1: str = ""
    p2: str = ""
    p3: str = ""
    p4: str = ""
    p5: str = ""
    p6: str = ""
    p7: str = ""
    p8: str = ""

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class WhatididEntryRecord:
    id: int
    date: date
    ioqm: str = ""
    nsep: str = ""
    schol: str = ""

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class SpecialEntryRecord:
    id: int
    type: str
    content: str = ""

    def as_dict(self) -> dict:
        return asdict(self)


def clean_fields(
    fields: Mapping[str, Optional[str]], allowed: tuple[str, ...]
) -> dict[str, str]:
    """
    Keep only the known text fields of a payload, storing null as "".
    """
    unknown = set(fields) - set(allowed)
    if unknown:
        raise ValueError(f"Unknown fields: {', '.join(sorted(unknown))}")
    return {name: value or "" for name, value in fields.items()}


def with_defaults(
    values: Mapping[str, str], allowed: tuple[str, ...]
) -> dict[str, str]:
    return {name: values.get(name, "") for name in allowed}


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.users: Dict[str, UserRecord] = {}
        self.school: Dict[date, SchoolEntryRecord] = {}
        self.whatidid: Dict[date, WhatididEntryRecord] = {}
        self.special: Dict[str, SpecialEntryRecord] = {}
        self._ids: Dict[str, Iterator[int]] = {}
        self._reset_ids()

    def _reset_ids(self) -> None:
        self._ids = {
            name: itertools.count(1)
            for name in ("users", "school", "whatidid", "special")
        }

    def _next_id(self, table: str) -> int:
        return next(self._ids[table])

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.users.clear()
        self.school.clear()
        self.whatidid.clear()
        self.special.clear()
        self._reset_ids()

    def get_user(self, user_id: int) -> Optional[UserRecord]:
        for user in self.users.values():
            if user.id == user_id:
                return user
        return None

    def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        return self.users.get(username)

    def create_user(self, username: str, password: str) -> UserRecord:
        if username in self.users:
            raise StorageError(f"User {username!r} already exists")
        record = UserRecord(
            id=self._next_id("users"), username=username, password=password
        )
        self.users[username] = record
        return record

    def get_school_entry(self, entry_date: date) -> Optional[SchoolEntryRecord]:
        return self.school.get(entry_date)

    def upsert_school_entry(
        self, entry_date: date, fields: Mapping[str, Optional[str]]
    ) -> SchoolEntryRecord:
        values = clean_fields(fields, SCHOOL_FIELDS)
        existing = self.school.get(entry_date)
        if existing:
            record = replace(existing, **values)
        else:
            record = SchoolEntryRecord(
                id=self._next_id("school"),
                date=entry_date,
                **with_defaults(values, SCHOOL_FIELDS),
            )
        self.school[entry_date] = record
        return record

    def list_school_dates(self, start: date, end: date) -> list[date]:
        return sorted(d for d in self.school if start <= d <= end)

    def get_whatidid_entry(self, entry_date: date) -> Optional[WhatididEntryRecord]:
        return self.whatidid.get(entry_date)

    def upsert_whatidid_entry(
        self, entry_date: date, fields: Mapping[str, Optional[str]]
    ) -> WhatididEntryRecord:
        values = clean_fields(fields, WHATIDID_FIELDS)
        existing = self.whatidid.get(entry_date)
        if existing:
            record = replace(existing, **values)
        else:
            record = WhatididEntryRecord(
                id=self._next_id("whatidid"),
                date=entry_date,
                **with_defaults(values, WHATIDID_FIELDS),
            )
        self.whatidid[entry_date] = record
        return record

    def list_whatidid_dates(self, start: date, end: date) -> list[date]:
        return sorted(d for d in self.whatidid if start <= d <= end)

    def get_special_entry(self, entry_type: str) -> Optional[SpecialEntryRecord]:
        return self.special.get(entry_type)

    def upsert_special_entry(
        self, entry_type: str, fields: Mapping[str, Optional[str]]
    ) -> SpecialEntryRecord:
        values = clean_fields(fields, SPECIAL_FIELDS)
        existing = self.special.get(entry_type)
        if existing:
            record = replace(existing, **values)
        else:
            record = SpecialEntryRecord(
                id=self._next_id("special"),
                type=entry_type,
                **with_defaults(values, SPECIAL_FIELDS),
            )
        self.special[entry_type] = record
        return record


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self.Session()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Database operation failed")
            raise StorageError(str(exc)) from exc
        finally:
            session.close()

    @staticmethod
    def _to_user_record(row: "UserRow") -> UserRecord:
        return UserRecord(id=row.id, username=row.username, password=row.password)

    @staticmethod
    def _to_school_record(row: "SchoolEntryRow") -> SchoolEntryRecord:
        return SchoolEntryRecord(
            id=row.id,
            date=row.date,
            **{name: getattr(row, name) or "" for name in SCHOOL_FIELDS},
        )

    @staticmethod
    def _to_whatidid_record(row: "WhatididEntryRow") -> WhatididEntryRecord:
        return WhatididEntryRecord(
            id=row.id,
            date=row.date,
            **{name: getattr(row, name) or "" for name in WHATIDID_FIELDS},
        )

    @staticmethod
    def _to_special_record(row: "SpecialEntryRow") -> SpecialEntryRecord:
        return SpecialEntryRecord(id=row.id, type=row.type, content=row.content or "")

    def _upsert(
        self, session: Session, row_cls, key_column, key, values: dict, defaults: dict
    ):
        """Update the row matching ``key`` or insert a new one, then commit."""
        row = session.execute(
            select(row_cls).where(key_column == key)
        ).scalar_one_or_none()
        if row:
            for name, value in values.items():
                setattr(row, name, value)
        else:
            row = row_cls(**{key_column.key: key}, **defaults)
            session.add(row)
        session.commit()
        session.refresh(row)
        return row

    def get_user(self, user_id: int) -> Optional[UserRecord]:
        with self._session() as session:
            row = session.get(UserRow, user_id)
            return self._to_user_record(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        with self._session() as session:
            row = session.execute(
                select(UserRow).where(UserRow.username == username)
            ).scalar_one_or_none()
            return self._to_user_record(row) if row else None

    def create_user(self, username: str, password: str) -> UserRecord:
        with self._session() as session:
            row = UserRow(username=username, password=password)
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_user_record(row)

    def get_school_entry(self, entry_date: date) -> Optional[SchoolEntryRecord]:
        with self._session() as session:
            row = session.execute(
                select(SchoolEntryRow).where(SchoolEntryRow.date == entry_date)
            ).scalar_one_or_none()
            return self._to_school_record(row) if row else None

    def upsert_school_entry(
        self, entry_date: date, fields: Mapping[str, Optional[str]]
    ) -> SchoolEntryRecord:
        values = clean_fields(fields, SCHOOL_FIELDS)
        with self._session() as session:
            row = self._upsert(
                session,
                SchoolEntryRow,
                SchoolEntryRow.date,
                entry_date,
                values,
                with_defaults(values, SCHOOL_FIELDS),
            )
            return self._to_school_record(row)

    def list_school_dates(self, start: date, end: date) -> list[date]:
        with self._session() as session:
            stmt = (
                select(SchoolEntryRow.date)
                .where(SchoolEntryRow.date >= start, SchoolEntryRow.date <= end)
                .order_by(SchoolEntryRow.date.asc())
            )
            return list(session.execute(stmt).scalars())

    def get_whatidid_entry(self, entry_date: date) -> Optional[WhatididEntryRecord]:
        with self._session() as session:
            row = session.execute(
                select(WhatididEntryRow).where(WhatididEntryRow.date == entry_date)
            ).scalar_one_or_none()
            return self._to_whatidid_record(row) if row else None

    def upsert_whatidid_entry(
        self, entry_date: date, fields: Mapping[str, Optional[str]]
    ) -> WhatididEntryRecord:
        values = clean_fields(fields, WHATIDID_FIELDS)
        with self._session() as session:
            row = self._upsert(
                session,
                WhatididEntryRow,
                WhatididEntryRow.date,
                entry_date,
                values,
                with_defaults(values, WHATIDID_FIELDS),
            )
            return self._to_whatidid_record(row)

    def list_whatidid_dates(self, start: date, end: date) -> list[date]:
        with self._session() as session:
            stmt = (
                select(WhatididEntryRow.date)
                .where(WhatididEntryRow.date >= start, WhatididEntryRow.date <= end)
                .order_by(WhatididEntryRow.date.asc())
            )
            return list(session.execute(stmt).scalars())

    def get_special_entry(self, entry_type: str) -> Optional[SpecialEntryRecord]:
        with self._session() as session:
            row = session.execute(
                select(SpecialEntryRow).where(SpecialEntryRow.type == entry_type)
            ).scalar_one_or_none()
            return self._to_special_record(row) if row else None

    def upsert_special_entry(
        self, entry_type: str, fields: Mapping[str, Optional[str]]
    ) -> SpecialEntryRecord:
        values = clean_fields(fields, SPECIAL_FIELDS)
        with self._session() as session:
            row = self._upsert(
                session,
                SpecialEntryRow,
                SpecialEntryRow.type,
                entry_type,
                values,
                with_defaults(values, SPECIAL_FIELDS),
            )
            return self._to_special_record(row)


Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False, unique=True)
    password = Column(String, nullable=False)


class SchoolEntryRow(Base):
    __tablename__ = "school_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, unique=True)
    p1 = Column(Text, default="")
    p2 = Column(Text, default="")
    p3 = Column(Text, default="")
    p4 = Column(Text, default="")
    p5 = Column(Text, default="")
    p6 = Column(Text, default="")
    p7 = Column(Text, default="")
    p8 = Column(Text, default="")


class WhatididEntryRow(Base):
    __tablename__ = "whatidid_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, unique=True)
    ioqm = Column(Text, default="")
    nsep = Column(Text, default="")
    schol = Column(Text, default="")


class SpecialEntryRow(Base):
    __tablename__ = "special_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # 'holiday_homework' or 'what_had_done'
    type = Column(String, nullable=False, unique=True)
    content = Column(Text, default="")
