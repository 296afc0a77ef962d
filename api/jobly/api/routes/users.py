from fastapi import APIRouter, Depends, HTTPException, status

from jobly.core.security import create_token, require_admin, require_self_or_admin
from jobly.schemas.users import UserCreatedOut, UserCreateRequest, UserDeletedOut, UserOut, UserUpdateRequest
from jobly.services import users
from jobly.services.database import (
    RepositoryDuplicateError,
    RepositoryNotFoundError,
    RepositoryUnavailableError,
    RepositoryValidationError,
    get_database,
)

router = APIRouter()


@router.post("", response_model=UserCreatedOut, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreateRequest,
    _admin=Depends(require_admin),
    db=Depends(get_database),
) -> UserCreatedOut:
    try:
        row = await users.register(db, payload.model_dump(by_alias=True))
    except RepositoryDuplicateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    token = create_token(row["username"], is_admin=row["isAdmin"])
    return UserCreatedOut(user=UserOut(**row), token=token)


@router.get("", response_model=list[UserOut])
async def list_users(_admin=Depends(require_admin), db=Depends(get_database)) -> list[UserOut]:
    try:
        rows = await users.find_all(db)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return [UserOut(**row) for row in rows]


@router.get("/{username}", response_model=UserOut)
async def get_user(
    username: str,
    _principal=Depends(require_self_or_admin),
    db=Depends(get_database),
) -> UserOut:
    try:
        row = await users.get(db, username)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return UserOut(**row)


@router.patch("/{username}", response_model=UserOut)
async def patch_user(
    username: str,
    payload: UserUpdateRequest,
    _principal=Depends(require_self_or_admin),
    db=Depends(get_database),
) -> UserOut:
    try:
        row = await users.update(db, username, payload.model_dump(by_alias=True, exclude_unset=True))
    except RepositoryValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return UserOut(**row)


@router.delete("/{username}", response_model=UserDeletedOut)
async def delete_user(
    username: str,
    _principal=Depends(require_self_or_admin),
    db=Depends(get_database),
) -> UserDeletedOut:
    try:
        await users.remove(db, username)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return UserDeletedOut(deleted=username)
