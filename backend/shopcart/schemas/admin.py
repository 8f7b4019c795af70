"""Admin (user + profile) schemas. The password hash is never exposed."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from shopcart.models.user import AccountType, AuthProvider
from shopcart.schemas.common import APIModel


class AdminProfileResponse(APIModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class AdminResponse(APIModel):
    id: int
    email: str
    account_type: AccountType
    auth_provider: AuthProvider
    is_active: bool
    last_password_change: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class AdminWithProfileResponse(AdminResponse):
    admin_profile: Optional[AdminProfileResponse] = None
