"""
Liveness and health check routes.
"""
from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from pastr.models import HealthCheck

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Liveness check."""
    return "Pastr is running."


@router.get("/api/healthz", response_model=HealthCheck)
async def health_check(request: Request) -> HealthCheck:
    """
    Health check endpoint.
    Returns 200 with ok=true if application and database are healthy.
    """
    is_healthy = await run_in_threadpool(request.app.state.store.is_healthy)
    return HealthCheck(ok=is_healthy)
