from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import UnauthorizedError
from app.infra.db.database import get_session


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header(alias="X-User-ID")] = None,
) -> str:
    """상위 인증 계층이 전달한 사용자 ID"""
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedError(detail="X-User-ID 헤더가 필요합니다")
    return x_user_id.strip()


SessionDep = Annotated[AsyncSession, Depends(get_session)]
UserIdDep = Annotated[str, Depends(get_current_user_id)]
