from .base import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    DocumentStore,
    Subscription,
    Transaction,
    WriteOp,
)
from .sql import SqlDocumentStore, TransactionConflict
