from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.infra.db.models import Account

logger = get_logger(__name__)

GITHUB_PROVIDER = "github"


async def get_github_access_token(session: AsyncSession, user_id: str) -> str | None:
    """사용자의 GitHub 액세스 토큰 조회, 없으면 None"""
    stmt = select(Account.access_token).where(
        Account.user_id == user_id,
        Account.provider == GITHUB_PROVIDER,
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def link_github_account(session: AsyncSession, user_id: str, access_token: str) -> Account:
    """GitHub 액세스 토큰 저장, 이미 있으면 교체"""
    stmt = select(Account).where(
        Account.user_id == user_id,
        Account.provider == GITHUB_PROVIDER,
    )
    account = (await session.execute(stmt)).scalar_one_or_none()

    if account is None:
        account = Account(user_id=user_id, provider=GITHUB_PROVIDER, access_token=access_token)
        session.add(account)
        logger.info("GitHub 계정 연결")
    else:
        account.access_token = access_token
        logger.info("GitHub 토큰 갱신")

    await session.flush()
    return account


async def unlink_github_account(session: AsyncSession, user_id: str) -> bool:
    """GitHub 계정 연결 해제, 삭제된 행이 있으면 True"""
    stmt = delete(Account).where(
        Account.user_id == user_id,
        Account.provider == GITHUB_PROVIDER,
    )
    result = await session.execute(stmt)
    logger.info("GitHub 계정 연결 해제 deleted=%d", result.rowcount)
    return result.rowcount > 0
