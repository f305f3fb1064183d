from urllib.parse import quote

import httpx

from app.storage.base import BaseBlobStore
from app.storage.exceptions import BlobStoreError


class SupabaseBlobStore(BaseBlobStore):
    """Blob store backed by the Supabase Storage REST API."""

    def __init__(
        self,
        *,
        base_url: str,
        service_key: str,
        bucket: str,
        timeout_seconds: float = 15.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._bucket = bucket
        self._timeout = timeout_seconds
        self._client = http_client if http_client is not None else httpx.Client()

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        object_path = self._object_path(path)
        self._post(
            f"{self._base_url}/storage/v1/object/{object_path}",
            content=data,
            headers={**self._headers(), "Content-Type": content_type, "x-upsert": "false"},
        )
        return f"{self._base_url}/storage/v1/object/public/{object_path}"

    def create_signed_url(self, path: str, *, expires_in: int) -> str:
        response = self._post(
            f"{self._base_url}/storage/v1/object/sign/{self._object_path(path)}",
            json={"expiresIn": expires_in},
            headers=self._headers(),
        )
        try:
            signed = response.json().get("signedURL")
        except (ValueError, AttributeError) as exc:
            raise BlobStoreError(f"Malformed signing response: {exc}") from exc
        if not signed:
            raise BlobStoreError("Signing response has no signedURL")
        if signed.startswith("http"):
            return signed
        return f"{self._base_url}/storage/v1{signed}"

    def _post(self, url: str, **kwargs: object) -> httpx.Response:
        try:
            response = self._client.post(url, timeout=self._timeout, **kwargs)  # type: ignore[arg-type]
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise BlobStoreError(
                f"Blob store returned HTTP {exc.response.status_code}: "
                f"{exc.response.text[:200]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise BlobStoreError(f"Blob store request failed: {exc}") from exc
        return response

    def _object_path(self, path: str) -> str:
        return f"{self._bucket}/{quote(path.lstrip('/'))}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
        }
