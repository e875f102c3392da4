"""Route Guards — explicit access-policy table plus the dependencies that enforce it.

Invariants:
    - Every route's policy is declared in ROUTE_POLICIES, keyed by (method, path template)
    - A route missing from the table is treated as ADMIN (closed by default)
    - ADMIN: X-API-Key header equals settings.admin_api_key (constant-time compare)
    - MEMBER: Authorization Bearer JWT whose claims carry a member_id
    - Failures raise UnauthorizedError -> 401 envelope via the global handler

Design Decisions:
    - One table over per-route decorators: the whole access surface reviewable
      in a single place (ADR: no convention-over-config)
    - Guard attached at router level; current_member_id re-reads the token so
      endpoints never depend on dependency execution order
"""

import logging
import secrets
from enum import Enum
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, OAuth2PasswordBearer

from netgroup.config import get_settings
from netgroup.core.domain_types import MemberId, UserId, UserRole
from netgroup.core.errors import UnauthorizedError
from netgroup.infrastructure.security import decode_access_token

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)
bearer_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{API_PREFIX}/auth/login", auto_error=False,
)


class RoutePolicy(str, Enum):
    PUBLIC = "public"
    ADMIN = "admin"
    MEMBER = "member"


ROUTE_POLICIES: dict[tuple[str, str], RoutePolicy] = {
    # Health
    ("GET", f"{API_PREFIX}/health/"): RoutePolicy.PUBLIC,
    ("GET", f"{API_PREFIX}/health/ready"): RoutePolicy.PUBLIC,

    # Membership intents
    ("POST", f"{API_PREFIX}/membership-intents"): RoutePolicy.PUBLIC,
    ("GET", f"{API_PREFIX}/membership-intents"): RoutePolicy.ADMIN,
    ("GET", f"{API_PREFIX}/membership-intents/validate-token/{{token}}"): RoutePolicy.PUBLIC,
    ("POST", f"{API_PREFIX}/membership-intents/complete-registration"): RoutePolicy.PUBLIC,
    ("GET", f"{API_PREFIX}/membership-intents/{{intent_id}}"): RoutePolicy.ADMIN,
    ("PATCH", f"{API_PREFIX}/membership-intents/{{intent_id}}/approve"): RoutePolicy.ADMIN,
    ("PATCH", f"{API_PREFIX}/membership-intents/{{intent_id}}/reject"): RoutePolicy.ADMIN,

    # Members (creation is gated by an approved intent, not by a key)
    ("POST", f"{API_PREFIX}/members"): RoutePolicy.PUBLIC,
    ("GET", f"{API_PREFIX}/members"): RoutePolicy.ADMIN,
    ("GET", f"{API_PREFIX}/members/{{member_id}}"): RoutePolicy.ADMIN,
    ("PATCH", f"{API_PREFIX}/members/{{member_id}}"): RoutePolicy.ADMIN,
    ("DELETE", f"{API_PREFIX}/members/{{member_id}}"): RoutePolicy.ADMIN,

    # Referrals
    ("POST", f"{API_PREFIX}/referrals"): RoutePolicy.MEMBER,
    ("GET", f"{API_PREFIX}/referrals"): RoutePolicy.MEMBER,
    ("GET", f"{API_PREFIX}/referrals/{{referral_id}}"): RoutePolicy.MEMBER,
    ("PATCH", f"{API_PREFIX}/referrals/{{referral_id}}/status"): RoutePolicy.MEMBER,

    # Dashboard
    ("GET", f"{API_PREFIX}/dashboard/stats"): RoutePolicy.ADMIN,

    # Auth
    ("POST", f"{API_PREFIX}/auth/login"): RoutePolicy.PUBLIC,
}


def policy_for(method: str, path_template: str) -> RoutePolicy:
    return ROUTE_POLICIES.get((method.upper(), path_template), RoutePolicy.ADMIN)


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def require_admin_key(api_key: str | None) -> None:
    expected = get_settings().admin_api_key
    if not api_key or not secrets.compare_digest(api_key, expected):
        raise UnauthorizedError("Missing or invalid API key")


def member_claims(token: str | None) -> dict:
    """Decode a bearer token that must identify a member."""
    if not token:
        raise UnauthorizedError("Missing bearer token")
    claims = decode_access_token(token)
    if not claims or not claims.get("member_id"):
        raise UnauthorizedError("Invalid or expired member token")
    return claims


async def enforce_route_policy(
    request: Request,
    api_key: Annotated[str | None, Depends(api_key_header)],
    token: Annotated[str | None, Depends(bearer_scheme)],
) -> None:
    policy = policy_for(request.method, _route_template(request))
    if policy == RoutePolicy.ADMIN:
        require_admin_key(api_key)
    elif policy == RoutePolicy.MEMBER:
        member_claims(token)


async def current_member_id(
    token: Annotated[str | None, Depends(bearer_scheme)],
) -> MemberId:
    claims = member_claims(token)
    try:
        return MemberId(UUID(claims["member_id"]))
    except ValueError:
        raise UnauthorizedError("Invalid or expired member token")


async def optional_reviewer_id(
    token: Annotated[str | None, Depends(bearer_scheme)],
) -> UserId | None:
    """Admin user id from an optional bearer token; API-key-only calls yield None."""
    if not token:
        return None
    claims = decode_access_token(token)
    if not claims or claims.get("role") != UserRole.ADMIN.value:
        return None
    try:
        return UserId(UUID(claims["sub"]))
    except (KeyError, ValueError):
        return None
