"""Member Routes — intent-gated signup and the admin-facing directory."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from netgroup.api.deps import get_member_service
from netgroup.api.envelope import success_response
from netgroup.api.guards import enforce_route_policy
from netgroup.core.domain_types import MemberStatus
from netgroup.core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from netgroup.models.member import Member
from netgroup.schemas.common import Pagination
from netgroup.schemas.member import (
    DirectoryStats, MemberCreate, MemberListItem, MemberPage, MemberResponse,
    MemberStatistics, MemberUpdate,
)
from netgroup.services.members import MemberService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/members", tags=["members"],
    dependencies=[Depends(enforce_route_policy)],
)

MemberServiceDep = Annotated[MemberService, Depends(get_member_service)]


def _member_response(member: Member, statistics: dict | None = None) -> MemberResponse:
    response = MemberResponse.model_validate(member)
    if statistics is None:
        return response
    return response.model_copy(
        update={"statistics": MemberStatistics(**statistics)},
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_member(body: MemberCreate, service: MemberServiceDep):
    member = await service.create(body)
    return success_response(
        _member_response(member), "Member registered. Welcome to the group!",
    )


@router.get("")
async def list_members(
    service: MemberServiceDep,
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    status_filter: MemberStatus | None = Query(None, alias="status"),
    industry: str | None = Query(None, max_length=100),
    search: str | None = Query(None, max_length=255),
):
    rows, pagination = await service.list_members(
        page, limit, status_filter, industry, search,
    )
    return success_response(MemberPage(
        members=[
            MemberListItem.model_validate(member).model_copy(
                update={"stats": DirectoryStats(**stats)},
            )
            for member, stats in rows
        ],
        pagination=Pagination(**pagination),
    ))


@router.get("/{member_id}")
async def get_member(member_id: UUID, service: MemberServiceDep):
    member, statistics = await service.get_with_statistics(member_id)
    return success_response(_member_response(member, statistics))


@router.patch("/{member_id}")
async def update_member(
    member_id: UUID, body: MemberUpdate, service: MemberServiceDep,
):
    member = await service.update(member_id, body)
    return success_response(_member_response(member), "Member updated.")


@router.delete("/{member_id}")
async def deactivate_member(member_id: UUID, service: MemberServiceDep):
    member = await service.deactivate(member_id)
    return success_response(_member_response(member), "Member deactivated.")
