from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from jobly.core.security import require_admin
from jobly.schemas.jobs import JobCreateRequest, JobDeletedOut, JobOut, JobUpdateRequest
from jobly.services import jobs
from jobly.services.database import (
    RepositoryNotFoundError,
    RepositoryUnavailableError,
    RepositoryValidationError,
    get_database,
)
from jobly.services.sql import PG_INTEGER_MAX

router = APIRouter()

JobId = Annotated[int, Path(le=PG_INTEGER_MAX)]


@router.get("", response_model=list[JobOut])
async def list_jobs(
    title_like: str | None = Query(default=None, alias="titleLike", min_length=1),
    min_salary: int | None = Query(default=None, alias="minSalary", ge=0, le=PG_INTEGER_MAX),
    has_equity: bool | None = Query(default=None, alias="hasEquity"),
    db=Depends(get_database),
) -> list[JobOut]:
    filter_by = {
        key: value
        for key, value in {
            "titleLike": title_like,
            "minSalary": min_salary,
            "hasEquity": has_equity,
        }.items()
        if value is not None
    }

    try:
        if filter_by:
            rows = await jobs.find_some(db, filter_by)
        else:
            rows = await jobs.find_all(db)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return [JobOut(**row) for row in rows]


@router.post("", response_model=JobOut, status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: JobCreateRequest,
    _admin=Depends(require_admin),
    db=Depends(get_database),
) -> JobOut:
    try:
        row = await jobs.create(db, payload.model_dump(by_alias=True))
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return JobOut(**row)


@router.get("/{job_id}", response_model=JobOut)
async def get_job(job_id: JobId, db=Depends(get_database)) -> JobOut:
    try:
        row = await jobs.get(db, job_id)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return JobOut(**row)


@router.patch("/{job_id}", response_model=JobOut)
async def patch_job(
    job_id: JobId,
    payload: JobUpdateRequest,
    _admin=Depends(require_admin),
    db=Depends(get_database),
) -> JobOut:
    try:
        row = await jobs.update(db, job_id, payload.model_dump(exclude_unset=True))
    except RepositoryValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return JobOut(**row)


@router.delete("/{job_id}", response_model=JobDeletedOut)
async def delete_job(
    job_id: JobId,
    _admin=Depends(require_admin),
    db=Depends(get_database),
) -> JobDeletedOut:
    try:
        await jobs.remove(db, job_id)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return JobDeletedOut(deleted=job_id)
