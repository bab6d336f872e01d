# This project was developed with assistance from AI tools.
"""Request identity schemas."""

from db.enums import UserRole
from pydantic import BaseModel, ConfigDict


class UserContext(BaseModel):
    """Identity of the caller, injected into every request that records who acted."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: UserRole
    name: str = ""
