from fastapi import APIRouter, Depends, HTTPException, status

from jobly.core.auth import UnauthorizedError
from jobly.core.security import create_token, require_logged_in
from jobly.schemas.auth import PrincipalOut, RegisterRequest, TokenOut, TokenRequest
from jobly.services import users
from jobly.services.database import RepositoryDuplicateError, RepositoryUnavailableError, get_database

router = APIRouter()


@router.post("/token", response_model=TokenOut)
async def issue_token(payload: TokenRequest, db=Depends(get_database)) -> TokenOut:
    try:
        user = await users.authenticate(db, payload.username, payload.password)
    except UnauthorizedError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return TokenOut(token=create_token(user["username"], is_admin=user["isAdmin"]))


@router.post("/register", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db=Depends(get_database)) -> TokenOut:
    try:
        user = await users.register(db, {**payload.model_dump(by_alias=True), "isAdmin": False})
    except RepositoryDuplicateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return TokenOut(token=create_token(user["username"], is_admin=user["isAdmin"]))


@router.get("/me", response_model=PrincipalOut)
async def me(principal=Depends(require_logged_in)) -> PrincipalOut:
    return PrincipalOut(username=principal.username, is_admin=principal.has_admin_flag)
