"""Keyed document store on top of SQLAlchemy, plus the createdAt-preserving upsert."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from nhl_ingest.db import Base, build_session_factory
from nhl_ingest.ingestion.errors import StorageError
from nhl_ingest.models import Document

logger = logging.getLogger(__name__)


class _ServerTimestamp:
    """Placeholder replaced with the write time when a document is stored."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _resolve_timestamps(value: Any, stamp: str) -> Any:
    if value is SERVER_TIMESTAMP:
        return stamp
    if isinstance(value, Mapping):
        return {key: _resolve_timestamps(item, stamp) for key, item in value.items()}
    if isinstance(value, list):
        return [_resolve_timestamps(item, stamp) for item in value]
    return value


def merge_documents(existing: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge ``incoming`` onto ``existing``.

    Nested mappings merge key by key; any other value in ``incoming`` replaces
    the stored one. Keys missing from ``incoming`` are kept.
    """

    merged = dict(existing)
    for key, value in incoming.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = merge_documents(current, value)
        else:
            merged[key] = value
    return merged


class SqlDocumentStore:
    """Collections of JSON documents in a single ``documents`` table."""

    def __init__(
        self,
        engine: Engine,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        try:
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as exc:
            raise StorageError("create_tables", str(exc)) from exc
        self._session_factory = build_session_factory(engine)
        self._clock = clock

    def server_timestamp(self) -> _ServerTimestamp:
        return SERVER_TIMESTAMP

    def _find(self, db: Session, collection: str, doc_id: str) -> Document | None:
        return (
            db.query(Document)
            .filter(Document.collection == collection, Document.doc_id == doc_id)
            .one_or_none()
        )

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        with self._session_factory() as db:
            try:
                document = self._find(db, collection, doc_id)
            except SQLAlchemyError as exc:
                db.rollback()
                raise StorageError("get", f"{collection}/{doc_id}: {exc}") from exc
            if document is None:
                return None
            return dict(document.data or {})

    def set(
        self,
        collection: str,
        doc_id: str,
        data: Mapping[str, Any],
        merge: bool = True,
    ) -> dict[str, Any]:
        stamp = self._clock().isoformat()
        resolved = _resolve_timestamps(data, stamp)

        with self._session_factory() as db:
            try:
                document = self._find(db, collection, doc_id)
                if document is None:
                    body = dict(resolved)
                    db.add(Document(collection=collection, doc_id=doc_id, data=body))
                else:
                    if merge:
                        body = merge_documents(document.data or {}, resolved)
                    else:
                        body = dict(resolved)
                    document.data = body
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise StorageError("set", f"{collection}/{doc_id}: {exc}") from exc

        logger.debug("Stored %s/%s merge=%s", collection, doc_id, merge)
        return body


class UpsertStore:
    """Merge-upsert by id, keeping the first ``createdAt`` ever written."""

    def __init__(self, store) -> None:
        self.store = store

    def upsert(
        self,
        collection: str,
        doc_id: Any,
        record: Mapping[str, Any],
        *,
        preserve_created_at: bool = True,
    ) -> dict[str, Any]:
        doc_id = str(doc_id)
        outgoing = dict(record)

        # Read-then-write; safe only while a single writer touches a given id.
        if preserve_created_at:
            existing = self.store.get(collection, doc_id)
            if existing and existing.get("createdAt"):
                outgoing["createdAt"] = existing["createdAt"]
            else:
                outgoing["createdAt"] = self.store.server_timestamp()

        return self.store.set(collection, doc_id, outgoing, merge=True)
