import re
from datetime import datetime
from typing import Annotated, Any

from pydantic import (
    AfterValidator, AnyUrl, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field,
    StringConstraints, TypeAdapter, ValidationError, field_validator, model_validator,
)
from pydantic_core import PydanticCustomError

from ...domain.entities import MAX_ID, Papel

_DIGITS = re.compile(r"[0-9]+")
_URL = TypeAdapter(AnyUrl)


def _normalize_email(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip() or None
    return value


def _check_url(value: str | None) -> str | None:
    # храним строку клиента, AnyUrl только проверяет её
    if value is None:
        return None
    try:
        _URL.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url_parsing", "invalid URL") from None
    return value


# trim выполняется до проверки длины
Nome = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=100)]
Email = Annotated[EmailStr, BeforeValidator(_normalize_email)]
Senha = Annotated[str, StringConstraints(min_length=6, max_length=100)]
Foto = Annotated[str | None, BeforeValidator(_blank_to_none), AfterValidator(_check_url)]


class UserCreate(BaseModel):
    nome: Nome
    email: Email
    senha: Senha
    papel: Papel = Papel.PROFESSOR
    foto: Foto = None


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # null допустим только для foto, у остальных полей None лишь значение по умолчанию
    nome: Nome = None
    email: Email = None
    senha: Senha = None
    papel: Papel = None
    foto: Foto = None

    # after-валидатор запускается только если все поля прошли проверку
    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_dump(exclude_none=True):
            raise PydanticCustomError(
                "at_least_one_field",
                "at least one field must be provided for update",
            )
        return self


class UserIdParams(BaseModel):
    id: int = Field(gt=0, le=MAX_ID)

    @field_validator("id", mode="before")
    @classmethod
    def digits_only(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and _DIGITS.fullmatch(value):
            return int(value)
        raise PydanticCustomError("id_format", "id must be a number")


class UserListQuery(BaseModel):
    papel: Papel | None = None


class UserOut(BaseModel):
    id: int
    nome: str
    email: str
    papel: Papel
    foto: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class UserResp(BaseModel):
    success: bool = True
    data: UserOut


class UserMessageResp(UserResp):
    message: str


class UserListResp(BaseModel):
    success: bool = True
    data: list[UserOut]
    total: int
