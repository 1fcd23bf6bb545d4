"""Health check endpoint."""

from fastapi import APIRouter

from src.api.dependencies import DatabaseDep

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(database: DatabaseDep) -> dict[str, object]:
    """Process is up; includes the connection pool counters."""
    return {"status": "healthy", "pool": database.pool_status()}
