"""Control API routes."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import Application


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_control_router(app: Application) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api/control", tags=["control"])

    @router.post("/reset", response_model=StatusResponse)
    async def reset_session() -> dict:
        """Resubscribe and rebuild the views from an empty fold."""
        try:
            await app.reset()
            return {"status": "ok"}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/reconnect", response_model=StatusResponse)
    async def reconnect() -> dict:
        """Restart the push subscription, e.g. after it became unavailable."""
        try:
            supervisor = app.supervisor
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))

        await supervisor.connect()
        return {"status": supervisor.state.value}

    return router
