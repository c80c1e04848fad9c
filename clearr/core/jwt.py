"""JWT issue / verify utilities (access & refresh tokens)"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Any
import jwt

from clearr.config import get_settings


def _build_payload(user_id: int, phone_number: str, expires_days: int, token_type: str) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    return {
        "sub": str(user_id),
        "phone_number": phone_number,
        "type": token_type,
        "iat": now,
        "exp": now + timedelta(days=expires_days),
    }


def create_access_token(user_id: int, phone_number: str, expires_days: int | None = None) -> str:
    cfg = get_settings().jwt
    days = expires_days if expires_days is not None else cfg.access_token_expire_days
    return jwt.encode(_build_payload(user_id, phone_number, days, "access"), cfg.secret, algorithm=cfg.algorithm)


def create_refresh_token(user_id: int, phone_number: str, expires_days: int | None = None) -> str:
    cfg = get_settings().jwt
    days = expires_days if expires_days is not None else cfg.refresh_token_expire_days
    return jwt.encode(_build_payload(user_id, phone_number, days, "refresh"), cfg.get_refresh_secret(), algorithm=cfg.algorithm)


def decode_token(token: str, refresh: bool = False) -> Dict[str, Any] | None:
    cfg = get_settings().jwt
    secret = cfg.get_refresh_secret() if refresh else cfg.secret
    try:
        payload = jwt.decode(token, secret, algorithms=[cfg.algorithm])
    except jwt.PyJWTError:
        return None
    # Access and refresh secrets may be equal; the type claim keeps them apart
    if payload.get("type") != ("refresh" if refresh else "access"):
        return None
    return payload
