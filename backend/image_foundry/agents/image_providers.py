"""Remote image generation providers.

Each provider exposes `attempt(description, reduced=False)` and reports the
outcome as a `ProviderResult` instead of raising, so the generator can fold
over an ordered provider list and stop at the first success.
"""
import base64
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

import httpx
from openai import AsyncOpenAI, OpenAIError


logger = logging.getLogger(__name__)

NEGATIVE_PROMPT = (
    "blurry, bad quality, distorted, deformed, ugly, text, watermark, logo, words, "
    "letters, writing, watermarks, signatures, labels, badges, stamps, overlay text, "
    "corner text"
)
LOADING_MARKER = "loading"


class Outcome(str, Enum):
    SUCCESS = "success"
    LOADING = "loading"
    FAILED = "failed"


@dataclass(frozen=True)
class ProviderResult:
    """Tagged result of one provider attempt."""
    outcome: Outcome
    url: Optional[str] = None
    error: str = ""

    @classmethod
    def succeeded(cls, url: str) -> "ProviderResult":
        return cls(Outcome.SUCCESS, url=url)

    @classmethod
    def loading(cls, error: str) -> "ProviderResult":
        return cls(Outcome.LOADING, error=error)

    @classmethod
    def failed(cls, error: str) -> "ProviderResult":
        return cls(Outcome.FAILED, error=error)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS and bool(self.url)


class ImageProvider(Protocol):
    @property
    def name(self) -> str: ...

    async def attempt(self, description: str, reduced: bool = False) -> ProviderResult: ...


def to_data_uri(payload: bytes, content_type: str = "image/png") -> str:
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class HuggingFaceImageProvider:
    """Text-to-image through the Hugging Face Inference API (raw image bytes)."""

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: str = "https://api-inference.huggingface.co/models",
        timeout: float = 120,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model
        self._api_key = api_key
        self._url = f"{base_url.rstrip('/')}/{model}"
        self._timeout = timeout
        self._client = client

    @property
    def name(self) -> str:
        return f"huggingface:{self.model}"

    def build_payload(self, description: str, reduced: bool = False) -> dict:
        if reduced:
            parameters = {"negative_prompt": NEGATIVE_PROMPT, "num_inference_steps": 30}
        else:
            parameters = {
                "negative_prompt": NEGATIVE_PROMPT,
                "num_inference_steps": 50,
                "guidance_scale": 7.5,
            }
        return {"inputs": description, "parameters": parameters}

    async def attempt(self, description: str, reduced: bool = False) -> ProviderResult:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(description, reduced)

        try:
            if self._client is not None:
                response = await self._client.post(self._url, headers=headers, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            return ProviderResult.failed(f"transport error: {exc!r}")

        logger.debug("%s answered HTTP %d", self.name, response.status_code)

        if response.status_code >= 400:
            text = response.text
            if LOADING_MARKER in text.lower():
                return ProviderResult.loading(text[:200])
            return ProviderResult.failed(f"HTTP {response.status_code}: {text[:200]}")

        if not response.content:
            return ProviderResult.failed("empty image payload")

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not content_type.startswith("image/"):
            content_type = "image/png"
        return ProviderResult.succeeded(to_data_uri(response.content, content_type))


class OpenAIImageProvider:
    """Text-to-image through OpenAI Images; returns the hosted URL as-is."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "dall-e-3",
        size: str = "1024x1024",
    ):
        self._client = client
        self.model = model
        self.size = size

    @property
    def name(self) -> str:
        return f"openai:{self.model}"

    async def attempt(self, description: str, reduced: bool = False) -> ProviderResult:
        try:
            response = await self._client.images.generate(
                model=self.model,
                prompt=description,
                n=1,
                size=self.size,
                quality="standard",
            )
        except OpenAIError as exc:
            message = str(exc)
            if LOADING_MARKER in message.lower():
                return ProviderResult.loading(message[:200])
            return ProviderResult.failed(message[:200])

        if not response.data:
            return ProviderResult.failed("no image returned")
        image = response.data[0]
        if image.url:
            return ProviderResult.succeeded(image.url)
        if image.b64_json:
            return ProviderResult.succeeded(f"data:image/png;base64,{image.b64_json}")
        return ProviderResult.failed("image entry had neither url nor b64_json")
