"""Referral Routes — member-authenticated referral workflow.

Invariants:
    - The acting member always comes from the bearer token (current_member_id),
      never from the request body or query
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from netgroup.api.deps import get_referral_service
from netgroup.api.envelope import success_response
from netgroup.api.guards import current_member_id, enforce_route_policy
from netgroup.core.domain_types import ReferralDirection, ReferralStatus
from netgroup.core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from netgroup.schemas.common import Pagination
from netgroup.schemas.referral import (
    ReferralCreate, ReferralDetail, ReferralPage, ReferralResponse,
    ReferralStatistics, ReferralStatusUpdate,
)
from netgroup.services.referrals import ReferralService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/referrals", tags=["referrals"],
    dependencies=[Depends(enforce_route_policy)],
)

ReferralServiceDep = Annotated[ReferralService, Depends(get_referral_service)]
MemberIdDep = Annotated[UUID, Depends(current_member_id)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_referral(
    body: ReferralCreate, member_id: MemberIdDep, service: ReferralServiceDep,
):
    referral = await service.create(member_id, body)
    return success_response(
        ReferralResponse.model_validate(referral), "Referral created.",
    )


@router.get("")
async def list_referrals(
    member_id: MemberIdDep,
    service: ReferralServiceDep,
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    direction: ReferralDirection = Query(ReferralDirection.ALL, alias="type"),
    status_filter: ReferralStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=255),
):
    referrals, statistics, pagination = await service.list_referrals(
        member_id, page, limit, direction, status_filter, search,
    )
    return success_response(ReferralPage(
        referrals=[ReferralResponse.model_validate(r) for r in referrals],
        statistics=ReferralStatistics(**statistics),
        pagination=Pagination(**pagination),
    ))


@router.get("/{referral_id}")
async def get_referral(
    referral_id: UUID, member_id: MemberIdDep, service: ReferralServiceDep,
):
    referral = await service.get(member_id, referral_id)
    return success_response(ReferralDetail.model_validate(referral))


@router.patch("/{referral_id}/status")
async def update_referral_status(
    referral_id: UUID,
    body: ReferralStatusUpdate,
    member_id: MemberIdDep,
    service: ReferralServiceDep,
):
    referral = await service.update_status(member_id, referral_id, body)
    return success_response(
        ReferralResponse.model_validate(referral), "Status updated.",
    )
