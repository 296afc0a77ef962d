from pydantic import BaseModel, ConfigDict, Field


class TokenRequest(BaseModel):
    username: str = Field(min_length=1, max_length=25)
    password: str = Field(min_length=1, max_length=20)


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    username: str = Field(min_length=1, max_length=25)
    password: str = Field(min_length=5, max_length=20)
    first_name: str = Field(min_length=1, max_length=30, alias="firstName")
    last_name: str = Field(min_length=1, max_length=30, alias="lastName")
    email: str = Field(min_length=6, max_length=60, pattern=r"^[^@\s]+@[^@\s]+$")


class TokenOut(BaseModel):
    token: str


class PrincipalOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    is_admin: bool = Field(default=False, alias="isAdmin")
