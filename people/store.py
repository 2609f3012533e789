"""
people/store.py -- SQLAlchemy-backed persistence layer for person records.

Uses SQLAlchemy Core (not ORM) so the dataclass in people/models.py remains
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change (DATABASE_URL), not a rewrite.

Pattern: Repository + Data Mapper. PersonStore is the repository; _row_to_person
is the mapper. Route handlers never touch SQL directly.

Ownership scoping: every read/write method takes an optional owner. When it is
set the WHERE clause also matches username, so another user's record behaves
exactly like a missing one. owner=None means the unauthenticated service: all
records are visible.

Errors: any SQLAlchemyError is re-raised as core.errors.StoreFailure.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = PersonStore("sqlite:///./people.db")
    person_id = store.create_person(Person(name="Ann", username="alice"))
    people = store.list_people(owner="alice")
    store.update_person(person_id, {"title": "CTO"}, owner="alice")
    store.delete_person(person_id, owner="alice")
    store.close()
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.errors import StoreFailure
from people.models import Person

logger = logging.getLogger("peopleapi.people")

# Fields a client may write. id, username and created_at are store-owned.
UPDATABLE_FIELDS = ("name", "image", "title")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_people = Table(
    "people",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("name", Text),
    Column("image", Text),
    Column("title", Text),
    Column("username", String(255), index=True),  # NULL without auth
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Re-raise any SQLAlchemy failure inside the block as StoreFailure."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("%s failed: %s", operation, exc)
        raise StoreFailure(detail=str(exc)) from exc


def _scoped(stmt, person_id: str, owner: Optional[str]):
    """Restrict a statement to one id and, when owner is set, to that owner's rows."""
    stmt = stmt.where(_people.c.id == person_id)
    if owner is not None:
        stmt = stmt.where(_people.c.username == owner)
    return stmt


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class PersonStore:
    """Repository for Person entities."""

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def list_people(self, owner: Optional[str] = None) -> list[Person]:
        """Return people oldest first, limited to owner's records when owner is set."""
        stmt = _people.select().order_by(_people.c.created_at, _people.c.id)
        if owner is not None:
            stmt = stmt.where(_people.c.username == owner)
        with _translate_errors("list_people"), self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_person(r) for r in rows]

    def create_person(self, person: Person) -> str:
        """Insert a person and return its assigned id."""
        person_id = _new_id()
        with _translate_errors("create_person"), self.engine.connect() as conn:
            conn.execute(
                _people.insert().values(
                    id=person_id,
                    name=person.name,
                    image=person.image,
                    title=person.title,
                    username=person.username,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
        return person_id

    def get_person(self, person_id: str, owner: Optional[str] = None) -> Optional[Person]:
        """Return the person with this id, or None if absent or owned by someone else."""
        with _translate_errors("get_person"), self.engine.connect() as conn:
            row = conn.execute(_scoped(_people.select(), person_id, owner)).fetchone()
        return _row_to_person(row) if row is not None else None

    def update_person(self, person_id: str, fields: dict, owner: Optional[str] = None) -> Optional[Person]:
        """Overwrite the given fields and return the updated person, or None if not matched.

        Keys outside UPDATABLE_FIELDS are ignored, so a body cannot move a
        record to another owner. An empty update still returns the record.
        """
        values = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if values:
            with _translate_errors("update_person"), self.engine.connect() as conn:
                result = conn.execute(_scoped(_people.update(), person_id, owner).values(**values))
                conn.commit()
            if result.rowcount == 0:
                return None
        return self.get_person(person_id, owner)

    def delete_person(self, person_id: str, owner: Optional[str] = None) -> Optional[Person]:
        """Remove a person and return the removed record, or None if nothing matched."""
        with _translate_errors("delete_person"), self.engine.connect() as conn:
            row = conn.execute(_scoped(_people.select(), person_id, owner)).fetchone()
            if row is None:
                return None
            conn.execute(_scoped(_people.delete(), person_id, owner))
            conn.commit()
        return _row_to_person(row)

    def close(self) -> None:
        """Dispose of the connection pool."""
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Mapper
# ---------------------------------------------------------------------------


def _row_to_person(row) -> Person:
    return Person(
        id=row.id,
        name=row.name,
        image=row.image,
        title=row.title,
        username=row.username,
        created_at=row.created_at,
    )
