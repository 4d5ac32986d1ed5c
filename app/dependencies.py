"""
app/dependencies.py
FastAPI dependencies resolving the objects created in the app lifespan.
"""

from fastapi import HTTPException, Request

from app.services.limit_worker import TradeOfferLimitsWorker
from app.services.store_registry import InMemoryStoreRegistry


def get_worker(request: Request) -> TradeOfferLimitsWorker:
    worker = getattr(request.app.state, "worker", None)
    if worker is None:
        raise HTTPException(status_code=503, detail="Worker not initialized")
    return worker


def get_registry(request: Request) -> InMemoryStoreRegistry:
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="Store registry not initialized")
    return registry
