"""Session user model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """Roles a session can carry. The login flow only ever creates admins."""

    ADMIN = "Admin"
    TEACHER = "Teacher"


class User(BaseModel):
    """The staff member currently logged in."""

    id: str = Field(..., description="Academic staff id", min_length=1)
    name: str = Field(..., description="Full name", min_length=1)
    role: UserRole = Field(default=UserRole.ADMIN, description="Session role")

    @property
    def initial(self) -> str:
        """First letter of the name, as shown on the avatar."""
        return self.name[0]

    model_config = ConfigDict(frozen=True)
