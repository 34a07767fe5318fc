from pydantic import BaseModel
from typing import Optional


class CallerIdentity(BaseModel):
    """Who is calling, as established by the bearer token."""

    user_id: int
    company_id: int
    role: str = "user"
    email: Optional[str] = None
