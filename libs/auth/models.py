import enum
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Role(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    COLLEGE_ADMIN = "college_admin"
    HOD = "hod"
    STAFF = "staff"
    ALUMNI = "alumni"
    STUDENT = "student"


ADMIN_ROLES = frozenset({Role.SUPER_ADMIN, Role.COLLEGE_ADMIN})
STAFF_ROLES = frozenset({Role.SUPER_ADMIN, Role.COLLEGE_ADMIN, Role.HOD, Role.STAFF})


class AuthUser(BaseModel):
    """
    Represents the authenticated caller, decoded from the bearer token.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: uuid.UUID = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: Role = Role.ALUMNI
    tenant_id: Optional[uuid.UUID] = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
