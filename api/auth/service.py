"""
Auth business logic.
"""

from __future__ import annotations

import logging

from core.errors import AuthError

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def _password_matches(admin_row: dict, password: str) -> bool:
    password_hash = str(admin_row.get("password_hash") or "")
    if password_hash:
        return security.verify_password(password, password_hash)
    return security.verify_plain_password(password, str(admin_row.get("password") or ""))


def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    admin_row = repository.get_admin_by_username(payload.username)
    if admin_row is None or not _password_matches(admin_row, payload.password):
        logger.warning("login_failed username=%s", payload.username)
        raise AuthError("Invalid Credentials")

    token = security.build_access_token(
        subject=str(admin_row["username"]),
        role=str(admin_row["role"]),
    )
    logger.info("login_ok username=%s", admin_row["username"])
    return schemas.LoginResponse(token=token)


def get_admin_from_access_token(access_token: str) -> dict:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise AuthError(str(exc)) from exc

    if payload.get("role") != repository.ADMIN_ROLE:
        raise AuthError("Admin role required.")

    admin_row = repository.get_admin_by_username(str(payload.get("sub") or ""))
    if admin_row is None:
        raise AuthError("Admin not found.")
    return {"username": admin_row["username"], "role": admin_row["role"]}
