"""
store.py - Row-level persistence behind one small interface.

SupabaseStore goes through PostgREST (supabase_rest); SqlStore runs the same
operations against the local SQLAlchemy models. Both hand back plain dicts
with ISO-8601 timestamps, so services never know which one they talk to.
Errors propagate to the caller.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import DateTime

import supabase_rest
from config import PERSISTENCE_BACKEND
from database import SessionLocal

logger = logging.getLogger(__name__)


class SupabaseStore:
    """Hosted backend: every call is one HTTP request."""

    def select(self, table: str, filters: dict = None, order: str = None) -> list[dict]:
        return supabase_rest.sb_select(table, filters=filters, order=order)

    def insert(self, table: str, data: dict) -> dict:
        return supabase_rest.sb_insert(table, data)

    def update(self, table: str, filters: dict, data: dict) -> list[dict]:
        return supabase_rest.sb_update(table, filters, data)

    def delete(self, table: str, filters: dict) -> None:
        supabase_rest.sb_delete(table, filters)

    def upsert(self, table: str, data: dict, on_conflict: str) -> dict:
        return supabase_rest.sb_upsert(table, data, on_conflict)


def _to_iso(value: datetime) -> str:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _row_to_dict(row) -> dict:
    out = {}
    for column in row.__table__.columns:
        value = getattr(row, column.name)
        out[column.name] = _to_iso(value) if isinstance(value, datetime) else value
    return out


def _coerce(model, table: str, data: dict) -> dict:
    columns = model.__table__.columns
    out = {}
    for key, value in data.items():
        if key not in columns:
            raise ValueError(f"Unknown column '{key}' for table {table}")
        if isinstance(value, str) and isinstance(columns[key].type, DateTime):
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        out[key] = value
    return out


class SqlStore:
    """Local store on SQLAlchemy. Deleting a weekly goal cascades to its tasks."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or SessionLocal

    def _model(self, table: str):
        from models import TABLES
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table}")
        return TABLES[table]

    def _query(self, db, table: str, filters: dict = None, order: str = None):
        model = self._model(table)
        query = db.query(model).filter_by(**(filters or {}))
        if order:
            name, _, direction = order.partition(".")
            column = getattr(model, name)
            query = query.order_by(column.desc() if direction == "desc" else column.asc())
        return query

    def select(self, table: str, filters: dict = None, order: str = None) -> list[dict]:
        db = self._session_factory()
        try:
            return [_row_to_dict(r) for r in self._query(db, table, filters, order).all()]
        finally:
            db.close()

    def insert(self, table: str, data: dict) -> dict:
        model = self._model(table)
        db = self._session_factory()
        try:
            row = model(**_coerce(model, table, data))
            db.add(row)
            db.commit()
            db.refresh(row)
            return _row_to_dict(row)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def update(self, table: str, filters: dict, data: dict) -> list[dict]:
        model = self._model(table)
        values = _coerce(model, table, data)
        db = self._session_factory()
        try:
            rows = self._query(db, table, filters).all()
            for row in rows:
                for key, value in values.items():
                    setattr(row, key, value)
                if "updated_at" in model.__table__.columns and "updated_at" not in values:
                    row.updated_at = datetime.now(timezone.utc)
            db.commit()
            return [_row_to_dict(r) for r in rows]
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def delete(self, table: str, filters: dict) -> None:
        if not filters:
            raise ValueError("Refusing to delete without filters")
        db = self._session_factory()
        try:
            # ORM deletes so relationship cascades fire
            for row in self._query(db, table, filters).all():
                db.delete(row)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def upsert(self, table: str, data: dict, on_conflict: str) -> dict:
        keys = {k.strip(): data[k.strip()] for k in on_conflict.split(",")}
        existing = self.select(table, filters=keys)
        if existing:
            rows = self.update(table, keys, data)
            return rows[0] if rows else {}
        return self.insert(table, data)


_store = None


def get_store():
    """FastAPI dependency: the configured persistence backend."""
    global _store
    if _store is None:
        if PERSISTENCE_BACKEND == "sql":
            _store = SqlStore()
        else:
            _store = SupabaseStore()
        logger.info(f"Using {type(_store).__name__} for persistence")
    return _store
