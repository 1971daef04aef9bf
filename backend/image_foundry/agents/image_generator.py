"""Image generator - folds over the provider list until one succeeds."""
import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from pydantic import BaseModel

from .image_providers import ImageProvider, Outcome, ProviderResult
from .placeholder import placeholder_data_uri


logger = logging.getLogger(__name__)

PLACEHOLDER_PROVIDER = "placeholder"


class GeneratedImage(BaseModel):
    """Image artifact: a hosted URL or a data URI."""
    url: str
    provider: str
    is_placeholder: bool = False


class ImageGenerator:
    """
    Maps a final description to an image.

    Providers are tried in order; the first success wins. A provider that
    reports it is still loading gets one retry with reduced quality after
    `cooldown` seconds. When every provider is exhausted a placeholder image
    is returned, so `generate` never raises.
    """

    def __init__(
        self,
        providers: Sequence[ImageProvider],
        cooldown: float = 20.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.providers = list(providers)
        self.cooldown = cooldown
        self._sleep = sleep

    async def generate(self, description: str) -> GeneratedImage:
        for provider in self.providers:
            result = await self._attempt(provider, description)

            if result.outcome is Outcome.LOADING:
                logger.info(
                    "%s is loading, retrying once in %.0fs with reduced quality",
                    provider.name, self.cooldown,
                )
                await self._sleep(self.cooldown)
                result = await self._attempt(provider, description, reduced=True)

            if result.ok:
                logger.info("Image generated by %s", provider.name)
                return GeneratedImage(url=result.url, provider=provider.name)

            logger.warning("%s failed: %s", provider.name, result.error or result.outcome.value)

        if self.providers:
            message = "All image providers are unavailable right now"
        else:
            message = "No image provider is configured"
        logger.warning("%s; returning placeholder image", message)
        return GeneratedImage(
            url=placeholder_data_uri(message, description),
            provider=PLACEHOLDER_PROVIDER,
            is_placeholder=True,
        )

    async def _attempt(
        self, provider: ImageProvider, description: str, reduced: bool = False
    ) -> ProviderResult:
        try:
            return await provider.attempt(description, reduced=reduced)
        except Exception as exc:
            return ProviderResult.failed(f"unexpected error: {exc!r}")
