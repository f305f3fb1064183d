import httpx
import openai

from app.extraction.client_base import BaseVisionClient
from app.extraction.exceptions import StrategyError, StrategyTimeoutError


class OpenAIClientAdapter(BaseVisionClient):
    """Vision client built on the OpenAI-compatible chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str | None = None,
        max_retries: int = 0,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=max_retries,
        )

    def create_completion(
        self,
        *,
        model: str,
        system_prompt: str,
        content: list[dict[str, object]],
        timeout_seconds: float,
    ) -> str:
        try:
            response = self._client.with_options(timeout=timeout_seconds).chat.completions.create(
                model=model,
                temperature=0.0,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": content},
                ],
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise StrategyTimeoutError(f"AI provider timed out: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise StrategyError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise StrategyError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise StrategyError("AI returned no choices")
        reply = response.choices[0].message.content
        if reply is None:
            raise StrategyError("AI returned empty response")
        return reply
