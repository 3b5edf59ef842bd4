"""
Auth security helpers.
"""

from __future__ import annotations

import hmac
import time
from typing import Any

import bcrypt
import jwt

from core import config

DEFAULT_TOKEN_EXPIRE_MIN = 24 * 60


class AuthSecurityError(RuntimeError):
    pass


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, set JWT_SECRET in environment.
    return config.env_str("JWT_SECRET", "dev-change-this-secret")


def jwt_algorithm() -> str:
    return config.env_str("JWT_ALG", "HS256")


def access_token_expire_minutes() -> int:
    value = config.env_int("ACCESS_TOKEN_EXPIRE_MIN", DEFAULT_TOKEN_EXPIRE_MIN)
    return value if value > 0 else DEFAULT_TOKEN_EXPIRE_MIN


def now_epoch_s() -> int:
    return int(time.time())


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def verify_plain_password(plain_password: str, expected: str) -> bool:
    if not plain_password or not expected:
        return False
    return hmac.compare_digest(plain_password.encode("utf-8"), expected.encode("utf-8"))


def build_access_token(*, subject: str, role: str) -> str:
    issued_at = now_epoch_s()
    expires_at = issued_at + (access_token_expire_minutes() * 60)

    payload = {
        "sub": subject,
        "role": role,
        "type": "access",
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, jwt_secret(), algorithm=jwt_algorithm())


def decode_access_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != "access":
        raise AuthSecurityError("Token is not an access token.")

    return payload
