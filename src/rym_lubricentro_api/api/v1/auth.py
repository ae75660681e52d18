"""Authentication endpoints"""
from typing import Annotated

from fastapi import APIRouter

from rym_lubricentro_api.application import CurrentUserService
from rym_lubricentro_api.core.deps import inject
from rym_lubricentro_api.core.response import Messages, success
from rym_lubricentro_api.core.security import authorize
from rym_lubricentro_api.schemas import CurrentUserResponse
from rym_lubricentro_api.schemas.common import BaseResponse

router = APIRouter()

CurrentUser = Annotated[CurrentUserService, inject(CurrentUserService)]


@router.get(
    "/me",
    response_model=BaseResponse[CurrentUserResponse],
    summary="Usuario autenticado",
)
@authorize()
async def get_me(current_user: CurrentUser):
    return success(current_user.get_current_user(), message=Messages.QUERY_SUCCESS)
