"""Auth API router: signup, signin.

Both endpoints are public (rate limited) and return ApiResponse.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.tl_common.database import get_db_session
from src.tl_common.datetime_utils import isoformat_or_empty
from src.tl_common.errors import UsernameExistsError
from src.tl_common.response import ApiResponse, success_response
from src.tl_gateway.auth.jwt_handler import access_token_ttl_seconds
from src.tl_gateway.user.schemas import (
    SigninRequest,
    SigninResponse,
    SignupRequest,
    SignupResponse,
)
from src.tl_gateway.user.service import UserService

router = APIRouter(prefix="/users", tags=["auth"])
_service = UserService()


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User signup",
)
async def signup(
    request: Request,
    body: SignupRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    try:
        async with db.begin():
            account = await _service.signup(body.username, body.password, body.birthdate, db)
    except IntegrityError:
        # Lost a race with a concurrent signup for the same username
        raise UsernameExistsError() from None

    data = SignupResponse(
        id=account.id,
        username=account.username,
        birthdate=body.birthdate,
        balance=account.balance,
        created_at=isoformat_or_empty(account.created_at),
    )
    return success_response(
        data.model_dump(mode="json"), request, message="User registered successfully"
    )


@router.post(
    "/signin",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User signin",
)
async def signin(
    request: Request,
    body: SigninRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    _, token = await _service.signin(body.username, body.password, db)

    data = SigninResponse(token=token, expires_in=access_token_ttl_seconds())
    return success_response(data.model_dump(by_alias=True), request, message="Signin successful")
