from fastapi import APIRouter, Depends, HTTPException, Query, status

from jobly.core.security import require_admin
from jobly.schemas.companies import CompanyCreateRequest, CompanyDeletedOut, CompanyOut, CompanyUpdateRequest
from jobly.services import companies
from jobly.services.database import (
    RepositoryDuplicateError,
    RepositoryNotFoundError,
    RepositoryUnavailableError,
    RepositoryValidationError,
    get_database,
)
from jobly.services.sql import PG_INTEGER_MAX

router = APIRouter()


@router.get("", response_model=list[CompanyOut])
async def list_companies(
    name_like: str | None = Query(default=None, alias="nameLike", min_length=1),
    min_employees: int | None = Query(default=None, alias="minEmployees", ge=0, le=PG_INTEGER_MAX),
    max_employees: int | None = Query(default=None, alias="maxEmployees", ge=0, le=PG_INTEGER_MAX),
    db=Depends(get_database),
) -> list[CompanyOut]:
    filter_by = {
        key: value
        for key, value in {
            "nameLike": name_like,
            "minEmployees": min_employees,
            "maxEmployees": max_employees,
        }.items()
        if value is not None
    }

    try:
        if filter_by:
            rows = await companies.find_some(db, filter_by)
        else:
            rows = await companies.find_all(db)
    except RepositoryValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return [CompanyOut(**row) for row in rows]


@router.post("", response_model=CompanyOut, status_code=status.HTTP_201_CREATED)
async def create_company(
    payload: CompanyCreateRequest,
    _admin=Depends(require_admin),
    db=Depends(get_database),
) -> CompanyOut:
    try:
        row = await companies.create(db, payload.model_dump(by_alias=True))
    except RepositoryDuplicateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return CompanyOut(**row)


@router.get("/{handle}", response_model=CompanyOut)
async def get_company(handle: str, db=Depends(get_database)) -> CompanyOut:
    try:
        row = await companies.get(db, handle)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return CompanyOut(**row)


@router.patch("/{handle}", response_model=CompanyOut)
async def patch_company(
    handle: str,
    payload: CompanyUpdateRequest,
    _admin=Depends(require_admin),
    db=Depends(get_database),
) -> CompanyOut:
    try:
        row = await companies.update(db, handle, payload.model_dump(by_alias=True, exclude_unset=True))
    except RepositoryValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return CompanyOut(**row)


@router.delete("/{handle}", response_model=CompanyDeletedOut)
async def delete_company(
    handle: str,
    _admin=Depends(require_admin),
    db=Depends(get_database),
) -> CompanyDeletedOut:
    try:
        await companies.remove(db, handle)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return CompanyDeletedOut(deleted=handle)
