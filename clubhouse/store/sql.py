# clubhouse/store/sql.py
"""
Document store backed by the `documents` table.

Transactions are optimistic. Reads record the version they saw; at commit
every queued write is applied with a compare-and-swap on that version and
every read that was not written is re-checked under a row lock. Any
mismatch (or a duplicate insert) raises TransactionConflict, the attempt is
rolled back and the callback runs again on fresh data, up to
`max_attempts` times.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql import func
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
)

from clubhouse.core.exceptions import NotFoundError, TransientStoreError
from clubhouse.models.document import Document
from clubhouse.store.base import (
    DocumentSnapshot,
    DocumentStore,
    Transaction,
    WriteOp,
    matches,
    resolve_server_timestamps,
    sort_snapshots,
    utc_timestamp,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
DocId = Tuple[str, str]


class TransactionConflict(Exception):
    """A document the transaction depends on changed before it committed."""


def _store_message(error: SQLAlchemyError) -> str:
    return str(getattr(error, "orig", None) or error)


class SqlTransaction(Transaction):
    def __init__(self, db: Session):
        self._db = db
        self.reads: Dict[DocId, Optional[int]] = {}
        self.writes: List[WriteOp] = []

    def get(self, collection: str, key: str) -> DocumentSnapshot:
        if self.writes:
            raise RuntimeError(
                "Transactions must perform all reads before any writes"
            )
        row = self._db.execute(
            select(Document.data, Document.version).where(
                Document.collection == collection, Document.key == key
            )
        ).first()
        version = row.version if row else None
        self.reads[(collection, key)] = version
        return DocumentSnapshot(
            collection=collection,
            key=key,
            data=dict(row.data) if row else None,
            version=version,
        )

    def set(
        self, collection: str, key: str, fields: Dict[str, Any], merge: bool = False
    ) -> None:
        self.writes.append(WriteOp("set", collection, key, dict(fields), merge=merge))

    def update(self, collection: str, key: str, fields: Dict[str, Any]) -> None:
        self.writes.append(WriteOp("update", collection, key, dict(fields)))

    def delete(self, collection: str, key: str) -> None:
        self.writes.append(WriteOp("delete", collection, key))


class SqlDocumentStore(DocumentStore):
    def __init__(self, session_factory: sessionmaker, *, max_attempts: int = 5):
        super().__init__()
        self._session_factory = session_factory
        self._max_attempts = max_attempts

    # --- reads ---

    def get(self, collection: str, key: str) -> DocumentSnapshot:
        db = self._session_factory()
        try:
            row = db.execute(
                select(Document.data, Document.version).where(
                    Document.collection == collection, Document.key == key
                )
            ).first()
        except SQLAlchemyError as e:
            raise TransientStoreError(_store_message(e)) from e
        finally:
            db.close()
        if row is None:
            return DocumentSnapshot(collection=collection, key=key, data=None)
        return DocumentSnapshot(
            collection=collection, key=key, data=dict(row.data), version=row.version
        )

    def query(
        self,
        collection: str,
        *,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[DocumentSnapshot]:
        db = self._session_factory()
        try:
            rows = db.execute(
                select(Document.key, Document.data, Document.version).where(
                    Document.collection == collection
                )
            ).all()
        except SQLAlchemyError as e:
            raise TransientStoreError(_store_message(e)) from e
        finally:
            db.close()

        # Field filters and ordering run in Python; collections are club sized
        snapshots = [
            DocumentSnapshot(
                collection=collection, key=r.key, data=dict(r.data), version=r.version
            )
            for r in rows
            if matches(r.data, where)
        ]
        if order_by:
            snapshots = sort_snapshots(snapshots, order_by, descending)
        else:
            snapshots.sort(key=lambda s: s.key)
        if limit is not None:
            snapshots = snapshots[:limit]
        return snapshots

    # --- writes ---

    def transaction(self, callback: Callable[[Transaction], T]) -> T:
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            retry=retry_if_exception_type(TransactionConflict),
            before_sleep=self._log_conflict,
        )
        try:
            result, touched = retrying(self._attempt, callback)
        except RetryError as e:
            logger.error(
                f"Transaction gave up after {self._max_attempts} conflicting attempts"
            )
            raise TransientStoreError(
                "The action kept colliding with concurrent changes. Please try again."
            ) from e

        self._notify(touched)
        return result

    def _attempt(self, callback: Callable[[Transaction], T]) -> Tuple[T, set]:
        db = self._session_factory()
        tx = SqlTransaction(db)
        try:
            result = callback(tx)
            touched = self._commit(db, tx)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Transaction failed in the store: {e}", exc_info=True)
            raise TransientStoreError(_store_message(e)) from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        return result, touched

    def _log_conflict(self, retry_state: RetryCallState) -> None:
        logger.info(
            f"Transaction conflict on attempt {retry_state.attempt_number}/"
            f"{self._max_attempts}: {retry_state.outcome.exception()}"
        )

    def batch_write(self, ops: List[WriteOp]) -> None:
        if not ops:
            return
        db = self._session_factory()
        try:
            now = utc_timestamp()
            for op in ops:
                current = self._current_version(db, (op.collection, op.key))
                self._apply(db, op, current, now)
            db.commit()
        except TransactionConflict as e:
            db.rollback()
            raise TransientStoreError(
                f"Batch write collided with a concurrent change: {e}"
            ) from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Batch write failed in the store: {e}", exc_info=True)
            raise TransientStoreError(_store_message(e)) from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

        self._notify({op.collection for op in ops})

    # --- commit machinery ---

    def _commit(self, db: Session, tx: SqlTransaction) -> set:
        now = utc_timestamp()
        expected: Dict[DocId, Optional[int]] = dict(tx.reads)
        written = set()

        for op in tx.writes:
            ident = (op.collection, op.key)
            if ident in expected:
                current = expected[ident]
            else:
                current = self._current_version(db, ident)
            expected[ident] = self._apply(db, op, current, now)
            written.add(ident)

        # Reads that were not written still have to be unchanged at commit
        for ident, version in tx.reads.items():
            if ident in written:
                continue
            if self._current_version(db, ident, lock=True) != version:
                raise TransactionConflict(f"{ident[0]}/{ident[1]} changed")

        db.commit()
        return {collection for collection, _ in written}

    def _current_version(
        self, db: Session, ident: DocId, lock: bool = False
    ) -> Optional[int]:
        stmt = select(Document.version).where(
            Document.collection == ident[0], Document.key == ident[1]
        )
        if lock:
            stmt = stmt.with_for_update()
        return db.execute(stmt).scalar()

    def _apply(
        self, db: Session, op: WriteOp, current: Optional[int], now: str
    ) -> Optional[int]:
        """Apply one write expecting `current` as the stored version; return the new one."""
        doc_id = f"{op.collection}/{op.key}"
        same_doc = and_(Document.collection == op.collection, Document.key == op.key)

        if op.op == "delete":
            if current is None:
                if db.execute(delete(Document).where(same_doc)).rowcount:
                    raise TransactionConflict(f"{doc_id} was created concurrently")
                return None
            result = db.execute(
                delete(Document).where(same_doc, Document.version == current)
            )
            if result.rowcount != 1:
                raise TransactionConflict(f"{doc_id} changed")
            return None

        fields = resolve_server_timestamps(op.fields, now)

        if op.op == "update" or op.merge:
            if current is None:
                if op.op == "update":
                    raise NotFoundError(f"No document to update: {doc_id}")
                data = fields
            else:
                stored = db.execute(
                    select(Document.data).where(same_doc, Document.version == current)
                ).scalar()
                if stored is None:
                    raise TransactionConflict(f"{doc_id} changed")
                data = {**stored, **fields}
        else:
            data = fields

        if current is None:
            try:
                db.execute(
                    insert(Document).values(
                        collection=op.collection, key=op.key, data=data, version=1
                    )
                )
            except IntegrityError as e:
                raise TransactionConflict(f"{doc_id} was created concurrently") from e
            return 1

        result = db.execute(
            update(Document)
            .where(same_doc, Document.version == current)
            .values(data=data, version=current + 1, updatedAt=func.now())
        )
        if result.rowcount != 1:
            raise TransactionConflict(f"{doc_id} changed")
        return current + 1
