from fastapi import APIRouter, Request

from app.config import VERSION
from app.models.api_response import HealthCheck, SystemInfo

router = APIRouter()


@router.get("/healthcheck", response_model=HealthCheck)
def healthcheck(request: Request):
    settings = request.app.state.settings
    return HealthCheck(
        status="available",
        system_info=SystemInfo(environment=settings.env, version=VERSION),
    )
