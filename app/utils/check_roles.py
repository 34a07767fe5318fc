from fastapi import Depends, Path
from app.core.exceptions import AuthorizationError
from app.schemas.auth.auth_schemas import CallerIdentity
from app.utils.get_user import get_current_caller
from app.utils.logger import get_logger

logger = get_logger("auth.guard")


def require_role(roles: list[str]):
    async def role_checker(caller: CallerIdentity = Depends(get_current_caller)):
        if caller.role.lower() not in [r.lower() for r in roles]:
            raise AuthorizationError("Insufficient permissions")
        return caller
    return role_checker


async def require_company_access(
    company_id: int = Path(..., gt=0),
    caller: CallerIdentity = Depends(get_current_caller),
) -> CallerIdentity:
    # A foreign company id is refused outright, never answered with an empty result
    if caller.company_id != company_id:
        logger.warning(
            "Cross-company access blocked",
            extra={"caller_company_id": caller.company_id, "requested_company_id": company_id},
        )
        raise AuthorizationError("You do not have access to this company's data")
    return caller
