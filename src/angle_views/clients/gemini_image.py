from __future__ import annotations

from typing import Any, Dict, Iterable

import httpx

from ..config import GeminiImageConfig
from ..errors import ImageGenerationError
from ..types import EncodedImage, SourceImage


def _first_inline_image(parts: Iterable[Dict[str, Any]]) -> EncodedImage | None:
    """Return the first part carrying inline image data, if any."""
    for part in parts:
        if not isinstance(part, dict):
            continue
        inline = part.get("inlineData") or part.get("inline_data")
        if not inline or not inline.get("data"):
            continue
        mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
        image = EncodedImage(mime_type=mime_type, data=inline["data"])
        try:
            image.raw_bytes()
        except RuntimeError as exc:
            raise ImageGenerationError(f"Gemini returned an undecodable image: {exc}") from exc
        return image
    return None


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return str(body)


class GeminiImageClient:
    """Async client for the Gemini ``generateContent`` endpoint with image output."""

    def __init__(
        self,
        config: GeminiImageConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._session = httpx.AsyncClient(
            base_url=config.api_url.rstrip("/") + "/",
            headers={
                "x-goog-api-key": config.api_key,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            transport=transport,
        )
        self._generate_path = f"models/{config.model}:generateContent"

    @property
    def model(self) -> str:
        return self._config.model

    async def aclose(self) -> None:
        await self._session.aclose()

    def build_payload(self, source: SourceImage, directive: str) -> Dict[str, Any]:
        return {
            "contents": [
                {
                    "parts": [
                        {"inlineData": {"mimeType": source.mime_type, "data": source.data}},
                        {"text": directive},
                    ]
                }
            ],
            "generationConfig": {"responseModalities": ["IMAGE"]},
        }

    async def generate(self, source: SourceImage, directive: str) -> EncodedImage:
        """
        Re-render ``source`` according to ``directive`` and return the first inline image.

        Raises
        ------
        ImageGenerationError
            On transport failures, error statuses, or a response without an inline image.
        """
        try:
            response = await self._session.post(
                self._generate_path, json=self.build_payload(source, directive)
            )
        except httpx.TimeoutException as exc:
            raise ImageGenerationError(
                f"Gemini request timed out after {self._config.timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise ImageGenerationError(f"Gemini request failed: {exc}") from exc

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ImageGenerationError(
                f"Gemini request failed ({response.status_code}): {_error_detail(response)}",
                status_code=response.status_code,
            ) from exc

        try:
            data: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise ImageGenerationError("Gemini response was not valid JSON") from exc

        candidates = data.get("candidates") or []
        parts: list[Dict[str, Any]] = []
        if candidates and isinstance(candidates[0], dict):
            parts = (candidates[0].get("content") or {}).get("parts") or []

        image = _first_inline_image(parts)
        if image is None:
            raise ImageGenerationError(f'Image generation failed for prompt: "{directive}"')
        return image

    async def __aenter__(self) -> "GeminiImageClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()
