"""Request-scoped dependencies: DB session, engine services, caller identity.

Every wizard operation runs inside the single transaction opened by
``get_db()``.  The engine and repositories only ``flush()``; the
transaction commits when the endpoint returns and rolls back when it
raises, so a failed operation never leaves a partial write behind.
"""

import hmac
from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from careplan_db.engine import get_session_factory
from careplan_db.models.enums import CarePlanCategory
from careplan_engine.care_plan import CarePlanService
from careplan_engine.registry import CategoryRegistry
from careplan_engine.wizard import AssessmentWizard


# ------------------------------------------------------------------
# Database session (the transaction boundary)
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session and one transaction per request."""
    async with get_session_factory()() as session:
        async with session.begin():
            yield session


# ------------------------------------------------------------------
# Engine services, built once by the lifespan handler
# ------------------------------------------------------------------

def get_registry(request: Request) -> CategoryRegistry:
    """Return the CategoryRegistry singleton from ``app.state``."""
    return request.app.state.registry


def get_care_plan_service(request: Request) -> CarePlanService:
    """Return the CarePlanService singleton from ``app.state``."""
    return request.app.state.care_plan_service


def get_dehydration_wizard(request: Request) -> AssessmentWizard:
    return request.app.state.wizards[CarePlanCategory.DEHYDRATION]


def get_pain_wizard(request: Request) -> AssessmentWizard:
    return request.app.state.wizards[CarePlanCategory.PAIN]


def get_constipation_wizard(request: Request) -> AssessmentWizard:
    return request.app.state.wizards[CarePlanCategory.CONSTIPATION]


def get_inflammation_wizard(request: Request) -> AssessmentWizard:
    return request.app.state.wizards[CarePlanCategory.INFLAMMATION]


# ------------------------------------------------------------------
# Caller identity: the hospital gateway authenticates and forwards
# X-User-ID; when TRUSTED_PROXY_SECRET is set the gateway also proves
# itself with X-Proxy-Secret.
# ------------------------------------------------------------------

def verify_proxy_secret(
    request: Request,
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> None:
    """403 unless the request came through the trusted gateway (opt-in)."""
    expected: str | None = request.app.state.settings.trusted_proxy_secret
    if not expected:
        return
    if x_proxy_secret is None:
        raise HTTPException(status_code=403, detail="Request did not come through the gateway")
    if not hmac.compare_digest(x_proxy_secret.encode(), expected.encode()):
        raise HTTPException(status_code=403, detail="Request did not come through the gateway")


async def get_user_id(
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    _gateway: None = Depends(verify_proxy_secret),
) -> str:
    """The authenticated caller's id; 401 when the header is missing.

    Checked before any database work, so an anonymous request never
    reaches the store.  The id is recorded as ``created_by`` on new plans.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing caller identity")
    return x_user_id.strip()
