from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from app.core.config import settings
from app.core.middleware import USER_ID_HEADER


def user_or_ip_key(request: Request) -> str:
    """요청 제한 키: 사용자 ID가 있으면 사용자 단위, 없으면 IP 단위"""
    user_id = request.headers.get(USER_ID_HEADER)
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=user_or_ip_key, enabled=settings.rate_limit_enabled)
