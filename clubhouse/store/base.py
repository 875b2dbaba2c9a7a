# clubhouse/store/base.py
"""
Document store interface.

The store exposes named collections of key -> document maps. Writes are
either single operations, atomic batches (no reads, no retry) or
transactions: a callback receives a Transaction, reads through it, queues
writes, and everything commits together. A conflicting concurrent commit
makes the store re-invoke the callback, so callbacks must not have side
effects outside the transaction they are given.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _ServerTimestamp:
    """Sentinel replaced with the commit time when a write is applied."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def utc_timestamp() -> str:
    # Fixed width so stored values sort as strings
    now = datetime.now(timezone.utc).isoformat(timespec="microseconds")
    return now.replace("+00:00", "Z")


def resolve_server_timestamps(fields: Dict[str, Any], now: str) -> Dict[str, Any]:
    return {k: (now if v is SERVER_TIMESTAMP else v) for k, v in fields.items()}


@dataclass(frozen=True)
class DocumentSnapshot:
    collection: str
    key: str
    data: Optional[Dict[str, Any]]
    version: Optional[int] = None

    @property
    def exists(self) -> bool:
        return self.data is not None

    def get(self, field_name: str, default: Any = None) -> Any:
        if self.data is None:
            return default
        return self.data.get(field_name, default)


@dataclass
class WriteOp:
    """One queued write. `op` is "set", "update" or "delete"."""

    op: str
    collection: str
    key: str
    fields: Dict[str, Any] = field(default_factory=dict)
    merge: bool = False


class Transaction(ABC):
    """Handle passed to a transaction callback."""

    @abstractmethod
    def get(self, collection: str, key: str) -> DocumentSnapshot: ...

    @abstractmethod
    def set(
        self, collection: str, key: str, fields: Dict[str, Any], merge: bool = False
    ) -> None: ...

    @abstractmethod
    def update(self, collection: str, key: str, fields: Dict[str, Any]) -> None: ...

    @abstractmethod
    def delete(self, collection: str, key: str) -> None: ...


Listener = Callable[[List[DocumentSnapshot]], None]


@dataclass
class Subscription:
    store: "DocumentStore"
    collection: str
    listener: Listener
    where: Optional[Dict[str, Any]] = None
    order_by: Optional[str] = None
    descending: bool = False
    closed: bool = False

    def refresh(self) -> None:
        if self.closed:
            return
        snapshots = self.store.query(
            self.collection,
            where=self.where,
            order_by=self.order_by,
            descending=self.descending,
        )
        self.listener(snapshots)

    def close(self) -> None:
        self.closed = True
        self.store._drop_subscription(self)


class DocumentStore(ABC):
    """
    Base class for document store implementations.

    Subclasses provide storage; the base class owns the subscription
    registry so every implementation notifies live views the same way.
    """

    def __init__(self) -> None:
        self._subscriptions: List[Subscription] = []
        self._subscriptions_lock = threading.Lock()

    @abstractmethod
    def get(self, collection: str, key: str) -> DocumentSnapshot: ...

    @abstractmethod
    def query(
        self,
        collection: str,
        *,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[DocumentSnapshot]: ...

    @abstractmethod
    def transaction(self, callback: Callable[[Transaction], T]) -> T: ...

    @abstractmethod
    def batch_write(self, ops: List[WriteOp]) -> None: ...

    def set(
        self, collection: str, key: str, fields: Dict[str, Any], merge: bool = False
    ) -> None:
        self.batch_write([WriteOp("set", collection, key, fields, merge=merge)])

    def update(self, collection: str, key: str, fields: Dict[str, Any]) -> None:
        self.batch_write([WriteOp("update", collection, key, fields)])

    def delete(self, collection: str, key: str) -> None:
        self.batch_write([WriteOp("delete", collection, key)])

    def subscribe(
        self,
        collection: str,
        listener: Listener,
        *,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Subscription:
        """
        Deliver the full current result set to `listener` now and again
        after every commit that touches `collection`.
        """
        sub = Subscription(
            store=self,
            collection=collection,
            listener=listener,
            where=where,
            order_by=order_by,
            descending=descending,
        )
        with self._subscriptions_lock:
            self._subscriptions.append(sub)
        sub.refresh()
        return sub

    def _drop_subscription(self, sub: Subscription) -> None:
        with self._subscriptions_lock:
            self._subscriptions = [s for s in self._subscriptions if s is not sub]

    def _notify(self, collections: set) -> None:
        with self._subscriptions_lock:
            subscriptions = list(self._subscriptions)
        for sub in subscriptions:
            if sub.collection not in collections:
                continue
            try:
                sub.refresh()
            except Exception:
                # One broken listener must not starve the others
                logger.exception(
                    f"Subscription listener failed for collection {sub.collection}"
                )


def matches(data: Dict[str, Any], where: Optional[Dict[str, Any]]) -> bool:
    if not where:
        return True
    return all(data.get(name) == value for name, value in where.items())


def sort_snapshots(
    snapshots: List[DocumentSnapshot], order_by: str, descending: bool
) -> List[DocumentSnapshot]:
    present = [s for s in snapshots if s.get(order_by) is not None]
    missing = [s for s in snapshots if s.get(order_by) is None]
    present.sort(key=lambda s: s.get(order_by), reverse=descending)
    # Documents without the field go last in either direction
    return present + missing
