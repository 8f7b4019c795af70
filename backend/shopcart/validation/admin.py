"""Admin (user + profile) validation rules."""

from shopcart.models.user import AccountType, AuthProvider, User
from shopcart.validation.checks import (
    IsBool,
    IsEmail,
    IsUrl,
    Length,
    Matches,
    NotEmpty,
    OneOf,
    Unique,
    equals_field,
)
from shopcart.validation.listing import detail_rules, list_rules, status_rules
from shopcart.validation.rules import FieldRule, RuleSet

ADMIN_SORT_FIELDS = ("createdAt", "updatedAt", "email", "firstName", "lastName")

PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]"
PASSWORD_COMPLEXITY_MESSAGE = (
    "Password must contain at least one uppercase, one lowercase, one number and one special character"
)
NAME_PATTERN = r"^[a-zA-Z\s]+$"
PHONE_PATTERN = r"^[\+]?[1-9][\d]{0,15}$"

# Fields stored on the users row; everything else in an admin payload
# belongs to the profile.
USER_FIELDS = frozenset({"email", "password", "auth_provider", "is_active"})


def _person_name(field: str, label: str) -> FieldRule:
    return FieldRule(
        field,
        (
            NotEmpty(f"{label} is required"),
            Length(f"{label} must be 2-50 characters", min=2, max=50),
            Matches(f"{label} can only contain letters and spaces", pattern=NAME_PATTERN),
        ),
        required=True,
        required_message=f"{label} is required",
    )


def _password(field: str, label: str = "Password") -> FieldRule:
    return FieldRule(
        field,
        (
            Length(f"{label} must be 8-128 characters", min=8, max=128),
            Matches(PASSWORD_COMPLEXITY_MESSAGE.replace("Password", label, 1), pattern=PASSWORD_PATTERN),
        ),
        required=True,
        required_message=f"{label} must be 8-128 characters",
        trim=False,
    )


admin_rules = RuleSet(
    resource="admin",
    create=(
        FieldRule(
            "email",
            (
                IsEmail("Invalid email format"),
                Length("Email must be less than 255 characters", max=255),
                Unique(
                    "Email already exists for an admin",
                    model=User,
                    column="email",
                    scope=(("account_type", AccountType.admin),),
                    case_insensitive=True,
                ),
            ),
            required=True,
            required_message="Invalid email format",
        ),
        _password("password"),
        _person_name("firstName", "First name"),
        _person_name("lastName", "Last name"),
        FieldRule(
            "phoneNumber",
            (Matches("Invalid phone number format", pattern=PHONE_PATTERN),),
            nullable=True,
        ),
        FieldRule(
            "address",
            (Length("Address must be less than 255 characters", max=255),),
            nullable=True,
        ),
        FieldRule(
            "city",
            (Length("City must be less than 100 characters", max=100),),
            nullable=True,
        ),
        FieldRule(
            "bio",
            (Length("Bio must be less than 1000 characters", max=1000),),
            nullable=True,
        ),
        FieldRule(
            "profilePicture",
            (
                Length("Profile picture URL must be less than 500 characters", max=500),
                IsUrl("Profile picture must be a valid URL"),
            ),
            nullable=True,
        ),
    ),
    update_only=(
        FieldRule(
            "authProvider",
            (OneOf("Invalid auth provider", choices=tuple(p.value for p in AuthProvider)),),
        ),
        FieldRule("isActive", (IsBool("isActive must be a boolean"),)),
    ),
    list_query=list_rules(
        ADMIN_SORT_FIELDS,
        FieldRule("city", (Length("City must be less than 100 characters", max=100),)),
        FieldRule("includeProfile", (IsBool("includeProfile must be a boolean"),)),
    ),
    operations={
        "detail": detail_rules(
            FieldRule("includeProfile", (IsBool("includeProfile must be a boolean"),)),
        ),
        "status": status_rules(),
        "password": (
            FieldRule(
                "currentPassword",
                (NotEmpty("Current password is required"),),
                required=True,
                required_message="Current password is required",
                trim=False,
            ),
            _password("newPassword", "New password"),
            FieldRule(
                "confirmPassword",
                (equals_field("Passwords do not match", "newPassword"),),
                required=True,
                required_message="Passwords do not match",
                trim=False,
            ),
        ),
    },
)
