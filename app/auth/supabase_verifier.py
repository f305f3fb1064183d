import httpx

from app.auth.base import BaseAuthVerifier
from app.auth.exceptions import AuthError
from app.logging.logger import Log


class SupabaseAuthVerifier(BaseAuthVerifier):
    """Verifies access tokens against the Supabase Auth user endpoint."""

    def __init__(
        self,
        *,
        base_url: str,
        service_key: str,
        timeout_seconds: float = 15.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._timeout = timeout_seconds
        self._client = http_client if http_client is not None else httpx.Client()

    def verify(self, token: str) -> str:
        if not token:
            raise AuthError("Missing bearer token")
        try:
            response = self._client.get(
                f"{self._base_url}/auth/v1/user",
                headers={"Authorization": f"Bearer {token}", "apikey": self._service_key},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            Log.error(f"Auth verifier unreachable: {exc}")
            raise AuthError("Unable to verify credentials") from exc

        if response.status_code != 200:
            raise AuthError("Unauthorized")
        try:
            user_id = response.json().get("id")
        except (ValueError, AttributeError) as exc:
            raise AuthError("Unauthorized") from exc
        if not user_id:
            raise AuthError("Unauthorized")
        return str(user_id)
