"""
FastAPI dependency providing the media host client.
"""

from __future__ import annotations

from .cloudinary import CloudinaryClient


def get_media_client() -> CloudinaryClient:
    return CloudinaryClient.from_env()
