"""
Admin login endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import schemas, service

router = APIRouter(prefix="/api")


@router.post("/admin/login", response_model=schemas.LoginResponse)
def login(request: schemas.LoginRequest) -> schemas.LoginResponse:
    return service.login(request)
