"""
Admin identity lookup.

There is exactly one admin, configured through the environment. It is exposed
as a one-row user store so callers do not depend on where admins come from.
"""

from __future__ import annotations

import hmac

from core import config

ADMIN_ROLE = "admin"


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def get_admin_by_username(username: str) -> dict | None:
    configured = config.env_str("ADMIN_USERNAME")
    if not configured or not _same((username or "").strip(), configured):
        return None
    return {
        "username": configured,
        "role": ADMIN_ROLE,
        "password_hash": config.env_str("ADMIN_PASSWORD_HASH"),
        "password": config.env_str("ADMIN_PASSWORD"),
    }
