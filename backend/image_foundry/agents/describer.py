"""Describer - expands a user prompt into an image description."""
import asyncio
import logging
import random
import re
from typing import Optional, Protocol, Sequence, TypeVar

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from .prompts import (
    ANIMAL_CLAUSE,
    ANIMAL_KEYWORDS,
    CLOSING_CLAUSES,
    COMPOSITION_OPTIONS,
    DESCRIBER_SYSTEM_PROMPT,
    DESCRIBER_TASK_PROMPT,
    LANDSCAPE_CLAUSE,
    LANDSCAPE_KEYWORDS,
    LIGHTING_OPTIONS,
    OPENING_TEMPLATE,
    PORTRAIT_CLAUSE,
    PORTRAIT_KEYWORDS,
    STYLE_OPTIONS,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Chooser(Protocol):
    """Random source used to pick template phrases (`random.Random` fits)."""

    def choice(self, seq: Sequence[T]) -> T: ...


def mentions_any(text: str, keywords: Sequence[str]) -> bool:
    """True if `text` contains any keyword as a whole word (plurals included)."""
    pattern = r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")(?:s|es)?\b"
    return re.search(pattern, text.lower()) is not None


def build_fallback_description(user_prompt: str, rng: Chooser) -> str:
    """
    Build a templated description locally.

    The literal prompt is embedded first, then keyword-conditional clauses,
    then one lighting, style and composition phrase drawn from `rng`, then
    the fixed closing clauses. The same prompt and the same draws give the
    same text.
    """
    parts = [OPENING_TEMPLATE.format(user_prompt=user_prompt.strip())]

    if mentions_any(user_prompt, ANIMAL_KEYWORDS):
        parts.append(ANIMAL_CLAUSE)
    if mentions_any(user_prompt, LANDSCAPE_KEYWORDS):
        parts.append(LANDSCAPE_CLAUSE)
    if mentions_any(user_prompt, PORTRAIT_KEYWORDS):
        parts.append(PORTRAIT_CLAUSE)

    lighting = rng.choice(LIGHTING_OPTIONS)
    style = rng.choice(STYLE_OPTIONS)
    composition = rng.choice(COMPOSITION_OPTIONS)

    parts.append(f"The scene is illuminated by {lighting}.")
    parts.append(f"It is rendered in {style}.")
    parts.append(f"The shot uses {composition}.")
    parts.extend(CLOSING_CLAUSES)

    return " ".join(parts)


class DescriptionGenerator:
    """
    Turns a user prompt into a descriptive text artifact.

    Tries the chat model when one is configured and falls back to the local
    template on any error, timeout, or empty reply. Never raises.
    """

    def __init__(
        self,
        llm: Optional[BaseChatModel] = None,
        rng: Optional[Chooser] = None,
        timeout: float = 60,
    ):
        self.llm = llm
        self.rng = rng or random.Random()
        self.timeout = timeout

    async def generate(self, user_prompt: str) -> str:
        if self.llm is not None:
            try:
                description = await asyncio.wait_for(
                    self._generate_remote(user_prompt), timeout=self.timeout
                )
            except Exception as exc:
                logger.warning("Remote description failed, using template: %r", exc)
            else:
                if description:
                    return description
                logger.warning("Remote description was empty, using template")

        logger.info("Building template description for prompt of %d chars", len(user_prompt))
        return build_fallback_description(user_prompt, self.rng)

    async def _generate_remote(self, user_prompt: str) -> str:
        messages = [
            SystemMessage(content=DESCRIBER_SYSTEM_PROMPT),
            HumanMessage(content=DESCRIBER_TASK_PROMPT.format(user_prompt=user_prompt)),
        ]
        response = await self.llm.ainvoke(messages)
        content = response.content
        return content.strip() if isinstance(content, str) else ""
