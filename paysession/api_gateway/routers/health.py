"""Health endpoint."""

from fastapi import APIRouter, Request

from paysession.api_gateway.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    return {
        "status": "healthy",
        "service": "payment-session-proxy",
        "token": request.app.state.token_manager.status(),
    }
