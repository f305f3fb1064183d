from typing import Any

import httpx

from app.extraction.exceptions import StrategyError, StrategyTimeoutError


def send_json(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    timeout_seconds: float,
    service: str,
    **kwargs: Any,
) -> Any:
    """Send a request and decode the JSON body, mapping failures to StrategyError."""
    try:
        response = client.request(method, url, timeout=timeout_seconds, **kwargs)
        response.raise_for_status()
    except httpx.TimeoutException as exc:
        raise StrategyTimeoutError(f"{service} request timed out: {exc}") from exc
    except httpx.HTTPStatusError as exc:
        raise StrategyError(
            f"{service} returned HTTP {exc.response.status_code}: "
            f"{exc.response.text[:200]}"
        ) from exc
    except httpx.HTTPError as exc:
        raise StrategyError(f"{service} network error: {exc}") from exc

    try:
        return response.json()
    except ValueError as exc:
        raise StrategyError(f"{service} returned malformed JSON: {exc}") from exc
