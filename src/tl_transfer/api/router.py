"""Transfers REST API: both endpoints require JWT authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.tl_account.infrastructure.db_models import AccountORM
from src.tl_common.database import get_db_session
from src.tl_common.enums import TransferDirection
from src.tl_common.response import ApiResponse, success_response
from src.tl_gateway.auth.dependencies import get_current_user
from src.tl_transfer.application.schemas import CreateTransferRequest
from src.tl_transfer.application.service import TransferApplicationService

router = APIRouter(prefix="/transfers", tags=["transfers"])

_service = TransferApplicationService()


@router.post("", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def create_transfer(
    body: CreateTransferRequest,
    current_user: Annotated[AccountORM, Depends(get_current_user)],
) -> Response:
    await _service.create_transfer(
        str(current_user.id), body.from_id, body.to_id, body.amount
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("")
async def list_transfers(
    current_user: Annotated[AccountORM, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    direction: TransferDirection | None = Query(None, description="IN, OUT, or both when omitted"),
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_transfers(
        db, str(current_user.id), direction, cursor, limit
    )
    return success_response(data.model_dump(by_alias=True), request)
