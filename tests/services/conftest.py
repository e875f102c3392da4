"""Service test fixtures — services bound to the test session plus member factories.

Invariants:
    - Services share the single test_db session (one unit of work per test)
    - member_factory goes through the real intent -> approve -> register path
"""

import pytest

from netgroup.schemas.membership_intent import CompleteRegistration, IntentCreate
from netgroup.services.members import MemberService
from netgroup.services.membership_intents import MembershipIntentService
from netgroup.services.referrals import ReferralService
from netgroup.services.registration import RegistrationService

MOTIVATION = "I want to grow my business through trusted referrals."


def intent_payload(email: str = "ana@example.com", full_name: str = "Ana Souza", **extra):
    return IntentCreate(
        full_name=full_name, email=email, motivation=MOTIVATION, **extra,
    )


@pytest.fixture
def payload():
    """IntentCreate builder, exposed as a fixture for test modules."""
    return intent_payload


@pytest.fixture
def intent_service(test_db, notifier):
    return MembershipIntentService(test_db, notifier, token_ttl_days=7)


@pytest.fixture
def registration_service(test_db, notifier):
    return RegistrationService(test_db, notifier)


@pytest.fixture
def member_service(test_db, notifier):
    return MemberService(test_db, notifier)


@pytest.fixture
def referral_service(test_db, notifier):
    return ReferralService(test_db, notifier)


@pytest.fixture
async def approved_intent(intent_service):
    intent = await intent_service.submit(intent_payload())
    return await intent_service.approve(intent.id)


@pytest.fixture
def member_factory(intent_service, registration_service):
    """Create ACTIVE members through the public registration flow."""
    counter = {"n": 0}

    async def make(full_name: str | None = None, **profile):
        counter["n"] += 1
        n = counter["n"]
        email = profile.pop("email", f"member{n}@example.com")
        full_name = full_name or f"Member {n}"
        intent = await intent_service.submit(intent_payload(email, full_name))
        intent = await intent_service.approve(intent.id)
        _, member = await registration_service.complete(CompleteRegistration(
            invite_token=intent.invite_token,
            email=email,
            full_name=full_name,
            password="s3cret-pass",
            **profile,
        ))
        return member

    return make
