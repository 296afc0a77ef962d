from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobly.services.sql import PG_INTEGER_MAX

HANDLE_PATTERN = r"^[a-z0-9-]+$"


class CompanyOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    handle: str
    name: str
    description: str
    num_employees: int | None = Field(default=None, alias="numEmployees")
    logo_url: str | None = Field(default=None, alias="logoUrl")


class CompanyCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    handle: str = Field(min_length=1, max_length=25, pattern=HANDLE_PATTERN)
    name: str = Field(min_length=1)
    description: str
    num_employees: int | None = Field(default=None, ge=0, le=PG_INTEGER_MAX, alias="numEmployees")
    logo_url: str | None = Field(default=None, alias="logoUrl")


class CompanyUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    num_employees: int | None = Field(default=None, ge=0, le=PG_INTEGER_MAX, alias="numEmployees")
    logo_url: str | None = Field(default=None, alias="logoUrl")

    # Omitted is fine; an explicit null would hit a NOT NULL column.
    @field_validator("name", "description")
    @classmethod
    def reject_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("may not be null")
        return value


class CompanyDeletedOut(BaseModel):
    deleted: str
