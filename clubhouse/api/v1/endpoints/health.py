# clubhouse/api/v1/endpoints/health.py
"""
Health check endpoints for monitoring system status.
"""
from fastapi import APIRouter, Depends

from clubhouse.api import deps
from clubhouse.constants.collections import Collections
from clubhouse.store import DocumentStore

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check():
    """Basic health check - API is responding."""
    return {"status": "healthy", "service": "clubhouse"}


@router.get("/store")
def store_health(store: DocumentStore = Depends(deps.get_store)):
    """Check document store connectivity. Store failures surface as 503."""
    store.get(Collections.USERS, "__health__")
    return {"status": "healthy", "component": "store"}
