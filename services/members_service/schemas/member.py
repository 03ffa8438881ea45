"""Member response schemas."""

import uuid
from datetime import datetime
from typing import Optional

from libs.auth.models import Role
from pydantic import BaseModel, ConfigDict


class MemberResponse(BaseModel):
    id: uuid.UUID
    tenant_id: Optional[uuid.UUID] = None
    email: str
    first_name: str
    last_name: str
    role: Role
    department: Optional[str] = None
    graduation_year: Optional[int] = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
