"""Membership Intent Routes — public application, admin review, invite redemption.

Invariants:
    - Routes are thin: parse -> service -> envelope, no business rules here
    - Literal paths (validate-token, complete-registration) declared before /{intent_id}
    - Access policy comes from api/guards.py ROUTE_POLICIES (router-level guard)
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from netgroup.api.deps import get_intent_service, get_registration_service
from netgroup.api.envelope import success_response
from netgroup.api.guards import enforce_route_policy, optional_reviewer_id
from netgroup.core.domain_types import IntentSortField, IntentStatus, SortOrder
from netgroup.core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from netgroup.schemas.common import Pagination
from netgroup.schemas.membership_intent import (
    CompleteRegistration, IntentApprove, IntentCreate, IntentPage, IntentReject,
    IntentResponse, IntentSummary, RegistrationResult, TokenValidation,
)
from netgroup.services.membership_intents import MembershipIntentService
from netgroup.services.registration import RegistrationService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/membership-intents", tags=["membership-intents"],
    dependencies=[Depends(enforce_route_policy)],
)

IntentServiceDep = Annotated[MembershipIntentService, Depends(get_intent_service)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_intent(body: IntentCreate, service: IntentServiceDep):
    intent = await service.submit(body)
    return success_response(
        IntentResponse.model_validate(intent),
        "Your application was received. We will contact you soon.",
    )


@router.get("")
async def list_intents(
    service: IntentServiceDep,
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    status_filter: IntentStatus | None = Query(None, alias="status"),
    sort: IntentSortField = Query(IntentSortField.CREATED_AT),
    order: SortOrder = Query(SortOrder.DESC),
    search: str | None = Query(None, max_length=255),
):
    intents, pagination = await service.list_intents(
        page, limit, status_filter, sort, order, search,
    )
    return success_response(IntentPage(
        intents=[IntentResponse.model_validate(i) for i in intents],
        pagination=Pagination(**pagination),
    ))


@router.get("/validate-token/{token}")
async def validate_token(token: str, service: IntentServiceDep):
    intent = await service.validate_token(token)
    return success_response(
        TokenValidation(valid=True, intent=IntentSummary.model_validate(intent)),
        "Valid token",
    )


@router.post("/complete-registration", status_code=status.HTTP_201_CREATED)
async def complete_registration(
    body: CompleteRegistration,
    service: Annotated[RegistrationService, Depends(get_registration_service)],
):
    user, member = await service.complete(body)
    return success_response(
        RegistrationResult(
            user_id=user.id, member_id=member.id,
            email=member.email, full_name=member.full_name,
        ),
        "Registration completed. Welcome to the group!",
    )


@router.get("/{intent_id}")
async def get_intent(intent_id: UUID, service: IntentServiceDep):
    intent = await service.get(intent_id)
    return success_response(IntentResponse.model_validate(intent))


@router.patch("/{intent_id}/approve")
async def approve_intent(
    intent_id: UUID,
    service: IntentServiceDep,
    reviewer_id: Annotated[UUID | None, Depends(optional_reviewer_id)],
    body: IntentApprove | None = None,
):
    intent = await service.approve(
        intent_id, body.notes if body else None, reviewer_id,
    )
    return success_response(
        IntentResponse.model_validate(intent),
        "Application approved. An invite was sent to the candidate.",
    )


@router.patch("/{intent_id}/reject")
async def reject_intent(
    intent_id: UUID,
    service: IntentServiceDep,
    reviewer_id: Annotated[UUID | None, Depends(optional_reviewer_id)],
    body: IntentReject | None = None,
):
    intent = await service.reject(
        intent_id, body.reason if body else None, reviewer_id,
    )
    return success_response(
        IntentResponse.model_validate(intent), "Application rejected.",
    )
