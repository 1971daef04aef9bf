"""Rule table for deterministic description refinement.

Each rule pairs a predicate over the feedback text with a mutation over the
description. Rules run in table order against one working copy; where two
rules touch the same anchor text the earlier one wins the anchor.
"""
import re
from dataclasses import dataclass
from typing import Callable, Sequence


Mutation = Callable[[str, str], str]


@dataclass(frozen=True)
class RefinementRule:
    """One `(feedback predicate, description mutation)` pair."""
    name: str
    keywords: tuple[str, ...]
    mutate: Mutation
    requires: tuple[str, ...] = ()

    def applies(self, feedback: str) -> bool:
        text = feedback.lower()
        return any(k in text for k in self.keywords) and all(r in text for r in self.requires)


def replace_first(*candidates: tuple[str, str], flags: int = 0) -> Mutation:
    """Replace the first match of the first candidate pattern that matches."""
    compiled = [(re.compile(pattern, flags), replacement) for pattern, replacement in candidates]

    def mutate(description: str, feedback: str) -> str:
        for pattern, replacement in compiled:
            if pattern.search(description):
                return pattern.sub(lambda _: replacement, description, count=1)
        return description

    return mutate


def replace_every(pattern: str, replacement: str) -> Mutation:
    """Replace all case-insensitive whole-word matches."""
    compiled = re.compile(pattern, re.IGNORECASE)

    def mutate(description: str, feedback: str) -> str:
        return compiled.sub(lambda _: replacement, description)

    return mutate


def append_sentence(sentence: str) -> Mutation:
    def mutate(description: str, feedback: str) -> str:
        return f"{description} {sentence}"

    return mutate


def _append_background(description: str, feedback: str) -> str:
    return f"{description} The background is specifically modified: {feedback.strip().rstrip('.')}."


_REQUIREMENT_PHRASE = re.compile(r"must have|should have", re.IGNORECASE)
REQUIREMENTS_ANCHOR = "The overall mood"
REQUIREMENTS_MARKER = "Importantly, incorporating the specific requirements:"


def extract_requirements(feedback: str) -> str:
    """Return the text after the first "must have"/"should have", verbatim."""
    parts = _REQUIREMENT_PHRASE.split(feedback, maxsplit=1)
    if len(parts) < 2:
        return ""
    return parts[1].strip().rstrip(".!")


def _splice_requirements(description: str, feedback: str) -> str:
    requirements = extract_requirements(feedback)
    if not requirements:
        return description
    marker = f"{REQUIREMENTS_MARKER} {requirements}."
    if REQUIREMENTS_ANCHOR in description:
        return description.replace(REQUIREMENTS_ANCHOR, f"{marker} {REQUIREMENTS_ANCHOR}", 1)
    return f"{description} {marker}"


# color keyword(s) -> (full clause for the template anchor, short form for a bare "fur")
FUR_COLORS: dict[tuple[str, ...], tuple[str, str]] = {
    ("white",): (
        "showing pristine white fur with individual texture details and soft, fluffy appearance",
        "pristine white fur",
    ),
    ("black",): (
        "showing sleek black fur with individual texture details and glossy appearance",
        "sleek black fur",
    ),
    ("gray", "grey"): (
        "showing soft silver-gray fur with individual texture details and a velvety sheen",
        "soft silver-gray fur",
    ),
    ("ginger", "orange"): (
        "showing warm ginger fur with individual texture details and a glossy shine",
        "warm ginger fur",
    ),
}

# A bare "fur" that no earlier rule has already colored.
_UNCOLORED_FUR = (
    "".join(f"(?<!{alias} )" for aliases in FUR_COLORS for alias in aliases)
    + r"(?<!silver-gray )\bfur\b"
)

EYE_COLORS: dict[str, str] = {
    "blue": "striking blue eyes that gleam with intelligence",
    "green": "mesmerizing green eyes that sparkle",
    "amber": "warm amber eyes that glow softly",
    "brown": "deep brown eyes full of warmth",
}


def _fur_rules() -> list[RefinementRule]:
    return [
        RefinementRule(
            name=f"{aliases[0]}_fur",
            keywords=aliases,
            requires=("fur",),
            mutate=replace_first(
                (r"showing individual fur textures", clause),
                (_UNCOLORED_FUR, short),
            ),
        )
        for aliases, (clause, short) in FUR_COLORS.items()
    ]


def _eye_rules() -> list[RefinementRule]:
    return [
        RefinementRule(
            name=f"{color}_eyes",
            keywords=(f"{color} eyes",),
            mutate=replace_first((r"expressive eyes", clause)),
        )
        for color, clause in EYE_COLORS.items()
    ]


REFINEMENT_RULES: tuple[RefinementRule, ...] = (
    RefinementRule(
        name="wings",
        keywords=("wings", "winged"),
        mutate=replace_first((
            r"The animal is captured with incredible detail",
            "The winged animal is captured with incredible detail, "
            "featuring majestic feathered wings spread gracefully",
        )),
    ),
    *_fur_rules(),
    RefinementRule(
        name="flowing_fur",
        keywords=("long hair", "flowing"),
        mutate=replace_first((r"fur textures", "long, flowing fur that cascades naturally")),
    ),
    *_eye_rules(),
    RefinementRule(
        name="more_color",
        keywords=("more color", "colorful", "more colour", "colourful"),
        mutate=replace_first((
            r"Rich color palette",
            "Vibrant, saturated color palette with bold hues and striking contrasts",
        )),
    ),
    RefinementRule(
        name="darker",
        keywords=("darker", "moody"),
        mutate=replace_every(r"\b(?:bright|vibrant|golden)\b", "dark, moody"),
    ),
    RefinementRule(
        name="brighter",
        keywords=("brighter", "lighter"),
        mutate=replace_every(r"\b(?:dark|moody|dramatic)\b", "bright, luminous"),
    ),
    RefinementRule(
        name="more_detail",
        keywords=("more detail", "detailed"),
        mutate=append_sentence(
            "Additional intricate details include fine textures, subtle gradations, "
            "and carefully rendered surface materials."
        ),
    ),
    RefinementRule(
        name="minimal",
        keywords=("simple", "minimal"),
        mutate=replace_every(r"\b(?:detailed|intricate|complex)\b", "clean, minimalist"),
    ),
    RefinementRule(
        name="background",
        keywords=("background",),
        mutate=_append_background,
    ),
    RefinementRule(
        name="garden",
        keywords=("flower", "garden"),
        mutate=replace_first((
            r"The natural environment",
            "The lush garden environment filled with blooming flowers",
        )),
    ),
    RefinementRule(
        name="requirements",
        keywords=("must have", "should have"),
        mutate=_splice_requirements,
    ),
)


def apply_rules(
    description: str,
    feedback: str,
    rules: Sequence[RefinementRule] = REFINEMENT_RULES,
) -> str:
    """Run every applicable rule, in order, over a working copy of `description`."""
    refined = description
    for rule in rules:
        if rule.applies(feedback):
            refined = rule.mutate(refined, feedback)
    return refined
