from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from blog_api.core.config import settings
from blog_api.core.exceptions import InvalidToken

ALGORITHM = "HS256"


class CurrentUser(BaseModel):
    """令牌中携带的调用者身份"""
    uid: str
    is_admin: bool = False


def create_access_token(uid: str, is_admin: bool = False, expires_in: Optional[int] = None) -> str:
    """
    签发 HS256 JWT：
    - payload: {"sub": uid, "is_admin": bool, "exp": 过期时间}
    - 默认有效期 ACCESS_TOKEN_EXPIRE_MINUTES
    """
    exp_seconds = expires_in if expires_in is not None else settings.access_token_expire_minutes * 60
    payload = {
        "sub": uid,
        "is_admin": is_admin,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=exp_seconds),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    """
    校验签名与过期时间，返回调用者身份
    - 任何格式 / 签名 / 过期问题都抛 InvalidToken
    """
    try:
        data = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidToken("access token expired") from e
    except jwt.PyJWTError as e:
        raise InvalidToken(f"invalid access token: {e}") from e

    if not data.get("sub"):
        raise InvalidToken("token has no subject")

    return CurrentUser(uid=str(data["sub"]), is_admin=bool(data.get("is_admin", False)))


bearer = HTTPBearer(auto_error=False)


def _resolve_token(credentials: Optional[HTTPAuthorizationCredentials], access_token: Optional[str]) -> Optional[str]:
    # Authorization 头优先，其次是 access_token cookie
    if credentials is not None:
        return credentials.credentials
    return access_token


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    access_token: Optional[str] = Cookie(default=None),
) -> CurrentUser:
    """需要登录的接口使用：无令牌或令牌无效时返回 401"""
    token = _resolve_token(credentials, access_token)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_access_token(token)
    except InvalidToken as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    access_token: Optional[str] = Cookie(default=None),
) -> Optional[CurrentUser]:
    """可匿名访问的接口使用：令牌缺失或无效都视为访客"""
    token = _resolve_token(credentials, access_token)
    if not token:
        return None
    try:
        return decode_access_token(token)
    except InvalidToken:
        return None
