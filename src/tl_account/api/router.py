"""User directory REST API: all endpoints require JWT authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.tl_account.application.service import DEFAULT_SKIP, DEFAULT_TAKE, UserDirectoryService
from src.tl_account.infrastructure.db_models import AccountORM
from src.tl_common.database import get_db_session
from src.tl_common.response import ApiResponse, success_response
from src.tl_gateway.auth.dependencies import get_current_user

router = APIRouter(prefix="/users", tags=["users"])

_service = UserDirectoryService()


@router.get("")
async def find_many_users(
    current_user: Annotated[AccountORM, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    ids: list[str] | None = Query(None, description="Restrict to these account ids"),
    skip: int = Query(DEFAULT_SKIP, ge=0),
    take: int = Query(DEFAULT_TAKE, ge=1, le=100),
) -> ApiResponse:
    # Accept both ?ids=a&ids=b and ?ids=a,b
    if ids is not None:
        ids = [part.strip() for raw in ids for part in raw.split(",") if part.strip()]
    data = await _service.find_many(db, ids, skip, take)
    return success_response(data.model_dump(mode="json", by_alias=True), request)


@router.get("/me")
async def get_me(
    current_user: Annotated[AccountORM, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_profile(db, str(current_user.id))
    return success_response(data.model_dump(mode="json", by_alias=True), request)
