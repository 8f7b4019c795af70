"""Admin lifecycle.

An admin is a composite of a ``users`` row (account_type=admin) and its
``admin_profiles`` row. Both are written in the same transaction and are
soft-deleted and restored together.
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from sqlalchemy.orm import Query, Session, contains_eager

from shopcart.core.errors import NotFoundError, ValidationFailure
from shopcart.core.security import get_password_hash, verify_password
from shopcart.models.user import AccountType, AdminProfile, AuthProvider, User
from shopcart.repositories.base import SoftDeleteRepository, atomic, utcnow
from shopcart.services.audit_service import audited
from shopcart.services.lifecycle import LifecycleService
from shopcart.services.query_builder import ResourceQuery
from shopcart.validation.admin import USER_FIELDS, admin_rules
from shopcart.validation.rules import validate


def _admins(db: Session) -> Query:
    return (
        db.query(User)
        .outerjoin(User.admin_profile)
        .options(contains_eager(User.admin_profile))
        .filter(User.account_type == AccountType.admin)
    )


admin_listing = ResourceQuery(
    model=User,
    search_columns=(User.email, AdminProfile.first_name, AdminProfile.last_name),
    sort_columns={
        "createdAt": User.created_at,
        "updatedAt": User.updated_at,
        "email": User.email,
        "firstName": AdminProfile.first_name,
        "lastName": AdminProfile.last_name,
    },
    default_sort=("createdAt", "DESC"),
    filters={
        "city": lambda query, city: query.filter(AdminProfile.city == city),
    },
    hides_inactive=False,
    base_query=_admins,
)


_USER_ATTRS = USER_FIELDS | {"password_hash", "last_password_change"}


def hash_credentials(values: Dict[str, Any]) -> Dict[str, Any]:
    """Replace a plaintext ``password`` with its hash and stamp the change."""
    if "password" in values:
        values["password_hash"] = get_password_hash(values.pop("password"))
        values["last_password_change"] = utcnow()
    return values


def split_admin_values(values: Mapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Separate user-row attributes from profile attributes."""
    user_values = {k: v for k, v in values.items() if k in _USER_ATTRS}
    profile_values = {k: v for k, v in values.items() if k not in user_values}
    return user_values, profile_values


class AdminService(LifecycleService):
    resource = "admin"
    label = "Admin"
    model = User
    rules = admin_rules
    listing = admin_listing

    def __init__(self, db: Session, actor: Optional[str] = None):
        super().__init__(db, actor)
        self.profiles = SoftDeleteRepository(db, AdminProfile, not_found_message="Admin profile not found")

    def scope(self):
        return (User.account_type == AccountType.admin,)

    def prepare(self, values, entity):
        values = hash_credentials(dict(values))
        if "auth_provider" in values:
            values["auth_provider"] = AuthProvider(values["auth_provider"])
        return values

    def insert(self, values):
        user_values, profile_values = split_admin_values(values)
        user = self.repo.create(
            {**user_values, "account_type": AccountType.admin, "auth_provider": AuthProvider.local}
        )
        self.profiles.create({**profile_values, "user_id": user.id})
        return user

    def apply(self, user, values):
        user_values, profile_values = split_admin_values(values)
        if profile_values and user.admin_profile is None:
            raise NotFoundError(self.profiles.not_found_message)
        if user_values:
            self.repo.update(user, user_values)
        if profile_values:
            self.profiles.update(user.admin_profile, profile_values)
        return user

    def delete_members(self, user):
        when = utcnow()
        changed = self.repo.soft_delete(user, when)
        if user.admin_profile is not None:
            self.profiles.soft_delete(user.admin_profile, when)
        return changed

    def restore_members(self, user):
        self.repo.restore(user)
        if user.admin_profile is not None:
            self.profiles.restore(user.admin_profile)

    def change_password(self, user_id: int, payload: Mapping[str, Any]) -> User:
        with audited("password", self.resource, user_id, self.actor):
            user = self.repo.get(user_id)
            values = validate(self.rules, "password", payload, self.db)
            if not verify_password(values["current_password"], user.password_hash):
                raise ValidationFailure(errors=[("currentPassword", "Current password is incorrect")])
            with atomic(self.db):
                self.repo.update(user, hash_credentials({"password": values["new_password"]}))
        return user
