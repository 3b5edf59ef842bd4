"""
Cloudinary HTTP client helpers.

Used endpoints:
- POST /v1_1/<cloud>/image/upload   -> {"public_id": "...", "secure_url": "https://..."}
- POST /v1_1/<cloud>/image/destroy  -> {"result": "ok"}

Requests are signed: SHA-1 over the sorted `key=value` pairs joined with `&`,
followed by the API secret.
"""

from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass
from typing import Any

import httpx

from core import config
from core.errors import UploadError

DEFAULT_API_BASE_URL = "https://api.cloudinary.com"


@dataclass(frozen=True)
class UploadedImage:
    public_id: str
    url: str


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryClient:
    def __init__(
        self,
        *,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout_s: float = 60.0,
        base_url: str = DEFAULT_API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cloud_name = (cloud_name or "").strip()
        self.api_key = (api_key or "").strip()
        self.api_secret = (api_secret or "").strip()
        self.timeout_s = timeout_s
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    @classmethod
    def from_env(cls) -> "CloudinaryClient":
        return cls(
            cloud_name=config.env_str("CLOUDINARY_CLOUD_NAME"),
            api_key=config.env_str("CLOUDINARY_API_KEY"),
            api_secret=config.env_str("CLOUDINARY_API_SECRET"),
            timeout_s=config.media_timeout_s(),
        )

    def _require_config(self) -> None:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise UploadError("Media host is not configured.")

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        payload = dict(params, timestamp=int(time.time()))
        payload["signature"] = sign_params(payload, self.api_secret)
        payload["api_key"] = self.api_key
        return payload

    async def _post(self, action: str, data: dict[str, Any], files: dict | None = None) -> dict[str, Any]:
        path = f"/v1_1/{self.cloud_name}/image/{action}"
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_s,
                transport=self._transport,
            ) as client:
                resp = await client.post(path, data=data, files=files)
        except httpx.HTTPError as exc:
            raise UploadError(f"Media host is unreachable: {exc}") from exc

        if resp.status_code != 200:
            # Avoid dumping huge bodies; include a small snippet.
            body = resp.text[:500]
            raise UploadError(f"Media host {action} failed: {resp.status_code} {body}")

        try:
            return resp.json()
        except ValueError as exc:
            raise UploadError(f"Media host returned a non-JSON {action} response.") from exc

    async def upload(
        self,
        data: bytes,
        *,
        filename: str,
        public_id: str,
        folder: str,
        content_type: str | None = None,
    ) -> UploadedImage:
        """
        Upload one image and return its durable URL.
        """
        self._require_config()
        payload = self._signed({"folder": folder, "public_id": public_id})
        files = {"file": (filename, data, content_type or "application/octet-stream")}

        body = await self._post("upload", payload, files=files)
        url = body.get("secure_url") or body.get("url")
        if not isinstance(url, str) or not url:
            raise UploadError("Media host returned no URL.")
        return UploadedImage(public_id=str(body.get("public_id") or f"{folder}/{public_id}"), url=url)

    async def destroy(self, public_id: str) -> None:
        self._require_config()
        body = await self._post("destroy", self._signed({"public_id": public_id}))
        result = body.get("result")
        if result not in ("ok", "not found"):
            raise UploadError(f"Media host could not delete {public_id}: {result}")
