"""Auth Routes — member login (email + password -> bearer token)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from netgroup.api.deps import get_auth_service
from netgroup.api.envelope import success_response
from netgroup.api.guards import enforce_route_policy
from netgroup.schemas.auth import LoginRequest, LoginResult
from netgroup.services.auth import AuthService

router = APIRouter(
    prefix="/api/v1/auth", tags=["auth"],
    dependencies=[Depends(enforce_route_policy)],
)


@router.post("/login")
async def login(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    result = await service.login(body.email, body.password)
    return success_response(LoginResult(**result), "Login successful.")
