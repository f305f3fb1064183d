"""General-purpose multimodal extraction through a chat-completion provider."""

import base64

from app.extraction.base import BaseExtractionStrategy
from app.extraction.client_base import BaseVisionClient
from app.extraction.file_loader import FileLoader
from app.extraction.models import ExtractionSource, StrategyConfig

SYSTEM_PROMPT = (
    "You extract text from documents. Reply with the document's text only, "
    "preserving headings, lists, and tables as markdown. Do not summarize, "
    "translate, or add commentary."
)

TEXT_INSTRUCTION = (
    "Return the full textual content of the following document, cleaned of "
    "markup noise but otherwise unchanged."
)

BINARY_INSTRUCTION = (
    "Extract all text from the attached document. Transcribe every page in "
    "reading order."
)


class VisionAdapter(BaseExtractionStrategy):
    """Sends the document to a multimodal model with an extraction instruction.

    Text-bearing inputs are inlined in the prompt; images and PDFs are sent
    as a base64 payload.
    """

    def __init__(
        self,
        config: StrategyConfig,
        *,
        provider: str,
        client: BaseVisionClient,
        model: str,
        file_loader: FileLoader,
    ) -> None:
        super().__init__(config)
        self._provider = provider
        self._client = client
        self._model = model
        self._file_loader = file_loader

    @property
    def name(self) -> str:
        return f"vision:{self._provider}"

    def invoke(self, source: ExtractionSource, *, timeout_seconds: float) -> object:
        raw = self._file_loader.load(source.url, timeout_seconds=timeout_seconds)
        return self._client.create_completion(
            model=self._model,
            system_prompt=SYSTEM_PROMPT,
            content=self._build_content(source, raw),
            timeout_seconds=timeout_seconds,
        )

    @staticmethod
    def _build_content(source: ExtractionSource, raw: bytes) -> list[dict[str, object]]:
        if source.mime_type.startswith("text/") or source.mime_type == "application/json":
            text = raw.decode("utf-8-sig", errors="replace")
            return [{"type": "text", "text": f"{TEXT_INSTRUCTION}\n\n{text}"}]

        encoded = base64.b64encode(raw).decode("ascii")
        data_url = f"data:{source.mime_type};base64,{encoded}"
        if source.mime_type.startswith("image/"):
            attachment: dict[str, object] = {
                "type": "image_url",
                "image_url": {"url": data_url},
            }
        else:
            attachment = {
                "type": "file",
                "file": {"filename": source.file_name, "file_data": data_url},
            }
        return [{"type": "text", "text": BINARY_INSTRUCTION}, attachment]
