"""Dashboard Routes — admin rollup of group activity."""

from typing import Annotated

from fastapi import APIRouter, Depends

from netgroup.api.deps import get_dashboard_service
from netgroup.api.envelope import success_response
from netgroup.api.guards import enforce_route_policy
from netgroup.schemas.dashboard import DashboardStats
from netgroup.services.dashboard import DashboardService

router = APIRouter(
    prefix="/api/v1/dashboard", tags=["dashboard"],
    dependencies=[Depends(enforce_route_policy)],
)


@router.get("/stats")
async def get_dashboard_stats(
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
):
    stats = await service.get_stats()
    return success_response(DashboardStats.model_validate(stats))
