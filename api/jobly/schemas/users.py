from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    is_admin: bool = Field(default=False, alias="isAdmin")


class UserCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    username: str = Field(min_length=1, max_length=25)
    password: str = Field(min_length=5, max_length=20)
    first_name: str = Field(min_length=1, max_length=30, alias="firstName")
    last_name: str = Field(min_length=1, max_length=30, alias="lastName")
    email: str = Field(min_length=6, max_length=60, pattern=r"^[^@\s]+@[^@\s]+$")
    is_admin: bool = Field(default=False, alias="isAdmin")


class UserUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    password: str | None = Field(default=None, min_length=5, max_length=20)
    first_name: str | None = Field(default=None, min_length=1, max_length=30, alias="firstName")
    last_name: str | None = Field(default=None, min_length=1, max_length=30, alias="lastName")
    email: str | None = Field(default=None, min_length=6, max_length=60, pattern=r"^[^@\s]+@[^@\s]+$")

    @field_validator("password", "first_name", "last_name", "email")
    @classmethod
    def reject_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("may not be null")
        return value


class UserCreatedOut(BaseModel):
    user: UserOut
    token: str


class UserDeletedOut(BaseModel):
    deleted: str
