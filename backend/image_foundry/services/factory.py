"""Builds the orchestrator and its collaborators from settings."""
import logging
from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI
from openai import AsyncOpenAI
from sqlalchemy.engine import Engine

from image_foundry.agents import (
    DescriptionGenerator,
    DescriptionRefiner,
    HuggingFaceImageProvider,
    ImageGenerator,
    ImageProvider,
    OpenAIImageProvider,
)
from image_foundry.config import Settings
from image_foundry.db import create_session_engine, init_db
from .orchestrator import SessionOrchestrator
from .session_service import SessionStore


logger = logging.getLogger(__name__)


def create_chat_model(settings: Settings, temperature: float) -> Optional[BaseChatModel]:
    """Chat model for remote text generation, or None without an API key."""
    if not settings.openai_api_key:
        return None
    return ChatOpenAI(
        model=settings.openai_model,
        api_key=settings.openai_api_key,
        temperature=temperature,
        timeout=settings.text_timeout,
    )


def create_image_providers(settings: Settings) -> list[ImageProvider]:
    """Ordered image providers for which credentials are configured."""
    providers: list[ImageProvider] = []
    if settings.huggingface_api_key:
        providers.extend(
            HuggingFaceImageProvider(
                model=model,
                api_key=settings.huggingface_api_key,
                base_url=settings.huggingface_base_url,
                timeout=settings.image_timeout,
            )
            for model in settings.huggingface_image_models
        )
    if settings.openai_api_key and settings.openai_images_enabled:
        client = AsyncOpenAI(api_key=settings.openai_api_key, timeout=settings.image_timeout)
        providers.append(OpenAIImageProvider(client, model=settings.openai_image_model))
    return providers


def build_orchestrator(
    settings: Settings,
    engine: Optional[Engine] = None,
) -> SessionOrchestrator:
    """Wire store, pipeline components and orchestrator for one process."""
    engine = engine or create_session_engine(settings.database_url)
    init_db(engine)

    providers = create_image_providers(settings)
    logger.info(
        "Text model: %s; image providers: %s",
        settings.openai_model if settings.openai_api_key else "template only",
        ", ".join(p.name for p in providers) or "placeholder only",
    )

    return SessionOrchestrator(
        store=SessionStore(engine),
        describer=DescriptionGenerator(
            llm=create_chat_model(settings, settings.description_temperature),
            timeout=settings.text_timeout,
        ),
        refiner=DescriptionRefiner(
            llm=create_chat_model(settings, settings.refinement_temperature),
            min_length=settings.refinement_min_length,
            timeout=settings.text_timeout,
        ),
        image_generator=ImageGenerator(providers, cooldown=settings.model_loading_cooldown),
    )
