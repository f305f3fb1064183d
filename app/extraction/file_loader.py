import httpx

from app.extraction.exceptions import StrategyError, StrategyTimeoutError


class FileLoader:
    """Downloads document bytes from an accessible (usually signed) URL."""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self._client = http_client if http_client is not None else httpx.Client(
            follow_redirects=True
        )
        self._max_bytes = max_bytes

    def load(self, url: str, *, timeout_seconds: float) -> bytes:
        """Fetch the file behind ``url``.

        Raises:
            StrategyTimeoutError: if the download exceeds ``timeout_seconds``.
            StrategyError: on non-2xx responses, network errors, or oversize files.
        """
        try:
            response = self._client.get(url, timeout=timeout_seconds)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise StrategyTimeoutError(f"Download timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise StrategyError(
                f"Failed to download file: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise StrategyError(f"Failed to download file: {exc}") from exc

        content = response.content
        if self._max_bytes is not None and len(content) > self._max_bytes:
            raise StrategyError(
                f"File too large: {len(content)} bytes (max {self._max_bytes})"
            )
        return content
