from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.db import get_db
from app.core.exceptions import AuthenticationError
from app.core.security import decode_access_token
from app.models.tenancy.company_models import Company
from app.schemas.auth.auth_schemas import CallerIdentity
from app.utils.logger import get_logger

logger = get_logger("auth.guard")

BEARER_PREFIX = "Bearer "


async def get_current_caller(
    request: Request,
    authorization: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> CallerIdentity:
    if not authorization:
        logger.warning("Missing authorization header")
        raise AuthenticationError("No authorization header provided")

    if not authorization.startswith(BEARER_PREFIX):
        logger.warning("Missing bearer token")
        raise AuthenticationError("Invalid authorization format. Use Bearer token")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("No token provided")

    payload = decode_access_token(token)

    try:
        user_id = int(payload["sub"])
        company_id = int(payload["company_id"])
    except (TypeError, ValueError):
        logger.warning("Malformed token claims")
        raise AuthenticationError("Invalid token")

    company = await db.scalar(
        select(Company.id).where(
            Company.id == company_id,
            Company.is_active.is_(True),
        )
    )
    if company is None:
        logger.warning("Token company inactive or missing", extra={"company_id": company_id})
        raise AuthenticationError("Invalid token or company no longer active")

    caller = CallerIdentity(
        user_id=user_id,
        company_id=company_id,
        role=payload.get("role") or "user",
        email=payload.get("email"),
    )
    request.state.caller = caller
    return caller
