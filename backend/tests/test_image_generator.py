"""
Tests for agents.image_generator, agents.image_providers and agents.placeholder

Covers:
- First successful provider wins, later providers untouched
- Loading -> cooldown -> one reduced-quality retry
- Plain failures are not retried
- Provider exceptions are treated as failures
- Placeholder when every provider fails (or none is configured)
- Hugging Face provider over a mocked HTTP transport
- OpenAI provider against a fake images client
"""

import base64
import json
from types import SimpleNamespace

import httpx
import pytest
from openai import OpenAIError

from image_foundry.agents.image_generator import ImageGenerator
from image_foundry.agents.image_providers import (
    HuggingFaceImageProvider,
    OpenAIImageProvider,
    Outcome,
    ProviderResult,
)
from image_foundry.agents.placeholder import excerpt, placeholder_data_uri

from tests.fakes import RecordingSleep, StubProvider


DESCRIPTION = "A highly detailed image of a red fox in snow."


def decode_svg(data_uri: str) -> str:
    prefix = "data:image/svg+xml;base64,"
    assert data_uri.startswith(prefix)
    return base64.b64decode(data_uri[len(prefix):]).decode("utf-8")


class TestProviderFold:
    @pytest.mark.asyncio
    async def test_first_success_wins(self):
        first = StubProvider("first", [ProviderResult.succeeded("https://images.test/a.png")])
        second = StubProvider("second", [ProviderResult.succeeded("https://images.test/b.png")])

        image = await ImageGenerator([first, second], sleep=RecordingSleep()).generate(DESCRIPTION)

        assert image.url == "https://images.test/a.png"
        assert image.provider == "first"
        assert not image.is_placeholder
        assert second.calls == []

    @pytest.mark.asyncio
    async def test_loading_retries_once_with_reduced_quality(self):
        sleep = RecordingSleep()
        provider = StubProvider("warming", [
            ProviderResult.loading("Model is currently loading"),
            ProviderResult.succeeded("https://images.test/warm.png"),
        ])

        image = await ImageGenerator([provider], cooldown=20.0, sleep=sleep).generate(DESCRIPTION)

        assert image.url == "https://images.test/warm.png"
        assert provider.calls == [False, True]
        assert sleep.delays == [20.0]

    @pytest.mark.asyncio
    async def test_loading_twice_moves_on(self):
        sleep = RecordingSleep()
        cold = StubProvider("cold", [
            ProviderResult.loading("loading"),
            ProviderResult.loading("still loading"),
        ])
        backup = StubProvider("backup", [ProviderResult.succeeded("https://images.test/backup.png")])

        image = await ImageGenerator([cold, backup], cooldown=5.0, sleep=sleep).generate(DESCRIPTION)

        assert image.provider == "backup"
        assert cold.calls == [False, True]
        assert sleep.delays == [5.0]

    @pytest.mark.asyncio
    async def test_failure_not_retried(self):
        sleep = RecordingSleep()
        broken = StubProvider("broken", [ProviderResult.failed("HTTP 500")])
        backup = StubProvider("backup", [ProviderResult.succeeded("https://images.test/backup.png")])

        image = await ImageGenerator([broken, backup], sleep=sleep).generate(DESCRIPTION)

        assert image.provider == "backup"
        assert broken.calls == [False]
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_provider_exception_is_a_failure(self):
        raising = StubProvider("raising", [RuntimeError("socket closed")])
        backup = StubProvider("backup", [ProviderResult.succeeded("https://images.test/backup.png")])

        image = await ImageGenerator([raising, backup], sleep=RecordingSleep()).generate(DESCRIPTION)

        assert image.provider == "backup"

    @pytest.mark.asyncio
    async def test_success_without_url_is_not_ok(self):
        empty = StubProvider("empty", [ProviderResult(Outcome.SUCCESS, url="")])
        backup = StubProvider("backup", [ProviderResult.succeeded("https://images.test/backup.png")])

        image = await ImageGenerator([empty, backup], sleep=RecordingSleep()).generate(DESCRIPTION)

        assert image.provider == "backup"


class TestPlaceholder:
    @pytest.mark.asyncio
    async def test_all_providers_fail(self):
        providers = [
            StubProvider("a", [ProviderResult.failed("HTTP 503")]),
            StubProvider("b", [RuntimeError("boom")]),
        ]

        image = await ImageGenerator(providers, sleep=RecordingSleep()).generate(DESCRIPTION)

        assert image.is_placeholder
        assert image.provider == "placeholder"
        svg = decode_svg(image.url)
        assert "All image providers are unavailable right now" in svg
        assert "Image Unavailable" in svg

    @pytest.mark.asyncio
    async def test_no_providers_configured(self):
        image = await ImageGenerator([], sleep=RecordingSleep()).generate(DESCRIPTION)

        assert image.is_placeholder
        assert "No image provider is configured" in decode_svg(image.url)

    def test_deterministic(self):
        assert placeholder_data_uri("down", DESCRIPTION) == placeholder_data_uri("down", DESCRIPTION)

    def test_excerpt_is_short_and_escaped(self):
        assert excerpt("one two three four five six seven eight nine ten") == (
            "one two three four five six seven eight"
        )
        svg = decode_svg(placeholder_data_uri("down", "cats & <dogs>"))
        assert "cats &amp; &lt;dogs&gt;" in svg

    def test_long_words_truncated(self):
        text = excerpt("x" * 100)

        assert len(text) == 60
        assert text.endswith("...")


def hf_provider(handler) -> HuggingFaceImageProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HuggingFaceImageProvider(
        model="stabilityai/stable-diffusion-3.5-large",
        api_key="hf_test",
        base_url="https://hf.test/models",
        client=client,
    )


class TestHuggingFaceProvider:
    @pytest.mark.asyncio
    async def test_image_bytes_become_data_uri(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=b"\x89PNG-bytes", headers={"content-type": "image/jpeg"})

        result = await hf_provider(handler).attempt(DESCRIPTION)

        assert result.ok
        assert result.url == "data:image/jpeg;base64," + base64.b64encode(b"\x89PNG-bytes").decode()
        assert seen["url"] == "https://hf.test/models/stabilityai/stable-diffusion-3.5-large"
        assert seen["auth"] == "Bearer hf_test"
        assert seen["body"]["inputs"] == DESCRIPTION
        assert seen["body"]["parameters"]["num_inference_steps"] == 50
        assert seen["body"]["parameters"]["guidance_scale"] == 7.5

    @pytest.mark.asyncio
    async def test_reduced_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=b"img", headers={"content-type": "image/png"})

        await hf_provider(handler).attempt(DESCRIPTION, reduced=True)

        assert seen["body"]["parameters"]["num_inference_steps"] == 30
        assert "guidance_scale" not in seen["body"]["parameters"]

    @pytest.mark.asyncio
    async def test_loading_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"error": "Model is currently loading", "estimated_time": 20})

        result = await hf_provider(handler).attempt(DESCRIPTION)

        assert result.outcome is Outcome.LOADING

    @pytest.mark.asyncio
    async def test_server_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="internal error")

        result = await hf_provider(handler).attempt(DESCRIPTION)

        assert result.outcome is Outcome.FAILED
        assert "500" in result.error

    @pytest.mark.asyncio
    async def test_empty_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"")

        result = await hf_provider(handler).attempt(DESCRIPTION)

        assert result.outcome is Outcome.FAILED

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await hf_provider(handler).attempt(DESCRIPTION)

        assert result.outcome is Outcome.FAILED


class FakeImages:
    def __init__(self, data=None, error=None):
        self.data = data or []
        self.error = error
        self.calls = []

    async def generate(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data)


class TestOpenAIProvider:
    @pytest.mark.asyncio
    async def test_hosted_url_passed_through(self):
        images = FakeImages(data=[SimpleNamespace(url="https://cdn.test/img.png", b64_json=None)])
        provider = OpenAIImageProvider(SimpleNamespace(images=images))

        result = await provider.attempt(DESCRIPTION)

        assert result.url == "https://cdn.test/img.png"
        assert images.calls[0]["model"] == "dall-e-3"
        assert images.calls[0]["prompt"] == DESCRIPTION
        assert provider.name == "openai:dall-e-3"

    @pytest.mark.asyncio
    async def test_base64_payload(self):
        images = FakeImages(data=[SimpleNamespace(url=None, b64_json="aW1n")])

        result = await OpenAIImageProvider(SimpleNamespace(images=images)).attempt(DESCRIPTION)

        assert result.url == "data:image/png;base64,aW1n"

    @pytest.mark.asyncio
    async def test_api_error_is_failure(self):
        images = FakeImages(error=OpenAIError("content policy violation"))

        result = await OpenAIImageProvider(SimpleNamespace(images=images)).attempt(DESCRIPTION)

        assert result.outcome is Outcome.FAILED
        assert "content policy" in result.error

    @pytest.mark.asyncio
    async def test_empty_data_is_failure(self):
        result = await OpenAIImageProvider(SimpleNamespace(images=FakeImages())).attempt(DESCRIPTION)

        assert result.outcome is Outcome.FAILED
