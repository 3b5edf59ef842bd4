"""
FastAPI dependency providing the record store.
"""

from __future__ import annotations

from .repository import PostgresRecordStore


def get_record_store() -> PostgresRecordStore:
    return PostgresRecordStore()
