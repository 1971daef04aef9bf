"""Refiner - revises a description using the user's feedback."""
import asyncio
import logging
from typing import Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from .prompts import REFINER_SYSTEM_PROMPT, REFINER_TASK_PROMPT
from .refinement_rules import REFINEMENT_RULES, RefinementRule, apply_rules


logger = logging.getLogger(__name__)

END_MARKERS = ("</s>", "<|endoftext|>", "<|im_end|>", "<|eot_id|>", "[END]")
QUOTE_CHARS = "\"'“”‘’`"


def clean_model_output(text: str) -> str:
    """Strip end-of-sequence markers and wrapping quotes from a model reply."""
    cleaned = text.strip()
    for marker in END_MARKERS:
        cleaned = cleaned.replace(marker, "")
    return cleaned.strip().strip(QUOTE_CHARS).strip()


def concatenate_feedback(original_description: str, user_feedback: str) -> str:
    return f"{original_description}\n\nRefined based on feedback: {user_feedback}"


class DescriptionRefiner:
    """
    Produces a revised description from the current one and user feedback.

    A remote rewrite is tried first when a chat model is configured. Replies
    shorter than `min_length` (after cleaning), errors, and timeouts fall
    through to the rule table. Never raises.
    """

    def __init__(
        self,
        llm: Optional[BaseChatModel] = None,
        rules: Sequence[RefinementRule] = REFINEMENT_RULES,
        min_length: int = 50,
        timeout: float = 60,
    ):
        self.llm = llm
        self.rules = rules
        self.min_length = min_length
        self.timeout = timeout

    async def refine(self, original_description: str, user_feedback: str) -> str:
        if self.llm is not None:
            try:
                reply = await asyncio.wait_for(
                    self._refine_remote(original_description, user_feedback),
                    timeout=self.timeout,
                )
            except Exception as exc:
                logger.warning("Remote refinement failed, applying rules: %r", exc)
            else:
                if len(reply) >= self.min_length:
                    return reply
                logger.warning(
                    "Remote refinement too short (%d < %d chars), applying rules",
                    len(reply), self.min_length,
                )

        try:
            return apply_rules(original_description, user_feedback, self.rules)
        except Exception:
            logger.exception("Rule-based refinement failed, concatenating feedback")
            return concatenate_feedback(original_description, user_feedback)

    async def _refine_remote(self, original_description: str, user_feedback: str) -> str:
        messages = [
            SystemMessage(content=REFINER_SYSTEM_PROMPT),
            HumanMessage(content=REFINER_TASK_PROMPT.format(
                description=original_description,
                feedback=user_feedback,
            )),
        ]
        response = await self.llm.ainvoke(messages)
        content = response.content
        return clean_model_output(content) if isinstance(content, str) else ""
