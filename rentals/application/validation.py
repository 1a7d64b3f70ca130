"""Form validation.

Each form model turns a mapping of raw submitted values into a typed record.
``validate_fields`` raises ``ValidationFailure`` with per-field messages.
"""

from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from ..core.exceptions import ValidationFailure
from ..domain.enums import PropertyType

MIN_PASSWORD_LENGTH = 6

FormT = TypeVar("FormT", bound=BaseModel)


class _Form(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class _NamedForm(_Form):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)


class SignInForm(_Form):
    email: EmailStr
    password: str = Field(min_length=1)


class SignUpForm(_NamedForm):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class CreateUserForm(SignUpForm):
    isadmin: bool = False


class UpdateUserForm(_NamedForm):
    email: EmailStr
    isadmin: bool
    isactive: bool
    # Absent or blank keeps the stored digest
    password: Optional[str] = None

    @field_validator("password", mode="before")
    @classmethod
    def blank_password_means_unchanged(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return value

    @field_validator("password")
    @classmethod
    def password_length(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return value


class UserStatusForm(_Form):
    isactive: bool


class UpdateProfileForm(_NamedForm):
    pass


class LocationForm(_Form):
    street: Optional[str] = None
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zipcode: Optional[str] = None


class RatesForm(_Form):
    nightly: Optional[float] = Field(default=None, ge=0)
    weekly: Optional[float] = Field(default=None, ge=0)
    monthly: Optional[float] = Field(default=None, ge=0)


class SellerInfoForm(_Form):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None


class PropertyForm(_Form):
    name: str = Field(min_length=1, max_length=255)
    type: PropertyType
    description: Optional[str] = None
    location: LocationForm
    beds: int = Field(ge=0)
    baths: int = Field(ge=0)
    square_feet: int = Field(gt=0)
    amenities: List[str] = Field(default_factory=list)
    rates: RatesForm
    seller_info: SellerInfoForm = Field(default_factory=SellerInfoForm)
    images: List[str] = Field(default_factory=list)

    @field_validator("rates")
    @classmethod
    def at_least_one_rate(cls, value: RatesForm) -> RatesForm:
        if value.nightly is None and value.weekly is None and value.monthly is None:
            raise ValueError("At least one rate is required")
        return value


def _field_errors(error: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "__root__"
        message = item["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, []).append(message)
    return errors


def validate_fields(form: Type[FormT], data: Mapping[str, Any]) -> FormT:
    """Validate raw fields, raising ValidationFailure with per-field messages"""
    try:
        return form.model_validate(dict(data))
    except ValidationError as e:
        raise ValidationFailure(_field_errors(e)) from e
