from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from app.extraction.exceptions import StrategyError, StrategyTimeoutError
from app.extraction.openai_client_adapter import OpenAIClientAdapter


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _make_adapter(mock_client: MagicMock) -> OpenAIClientAdapter:
    with patch(
        "app.extraction.openai_client_adapter.openai.OpenAI",
        return_value=mock_client,
    ):
        return OpenAIClientAdapter(api_key="k", base_url=None)


def _complete(adapter: OpenAIClientAdapter) -> str:
    return adapter.create_completion(
        model="m",
        system_prompt="system",
        content=[{"type": "text", "text": "user"}],
        timeout_seconds=30,
    )


class TestOpenAIClientAdapter:
    def test_returns_content(self) -> None:
        mock_client = MagicMock()
        completions = mock_client.with_options.return_value.chat.completions
        completions.create.return_value = _make_mock_response("Invoice 42")
        adapter = _make_adapter(mock_client)

        assert _complete(adapter) == "Invoice 42"
        mock_client.with_options.assert_called_once_with(timeout=30)
        messages = completions.create.call_args.kwargs["messages"]
        assert messages[0] == {"role": "system", "content": "system"}
        assert messages[1]["content"] == [{"type": "text", "text": "user"}]

    def test_raises_error_for_empty_content(self) -> None:
        mock_client = MagicMock()
        mock_client.with_options.return_value.chat.completions.create.return_value = (
            _make_mock_response(None)
        )
        adapter = _make_adapter(mock_client)

        with pytest.raises(StrategyError, match="empty response"):
            _complete(adapter)

    def test_raises_error_for_no_choices(self) -> None:
        mock_client = MagicMock()
        response = MagicMock()
        response.choices = []
        mock_client.with_options.return_value.chat.completions.create.return_value = response
        adapter = _make_adapter(mock_client)

        with pytest.raises(StrategyError, match="no choices"):
            _complete(adapter)

    def test_raises_timeout_error(self) -> None:
        mock_client = MagicMock()
        mock_client.with_options.return_value.chat.completions.create.side_effect = (
            openai.APITimeoutError(request=MagicMock())
        )
        adapter = _make_adapter(mock_client)

        with pytest.raises(StrategyTimeoutError, match="timed out"):
            _complete(adapter)

    def test_raises_network_error_on_connection_failure(self) -> None:
        mock_client = MagicMock()
        mock_client.with_options.return_value.chat.completions.create.side_effect = (
            openai.APIConnectionError(request=MagicMock())
        )
        adapter = _make_adapter(mock_client)

        with pytest.raises(StrategyError, match="network error"):
            _complete(adapter)

    def test_raises_timeout_on_httpx_timeout(self) -> None:
        mock_client = MagicMock()
        mock_client.with_options.return_value.chat.completions.create.side_effect = (
            httpx.ReadTimeout("slow")
        )
        adapter = _make_adapter(mock_client)

        with pytest.raises(StrategyTimeoutError):
            _complete(adapter)
