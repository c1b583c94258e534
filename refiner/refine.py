"""Cloze refine: one model call, then deterministic repairs of its output."""

from dataclasses import dataclass

import openai
import structlog

from refiner import llm
from refiner.batch import check_card_count, split_cards, strip_code_fences
from refiner.cloze import cap_to_input, enforce_word_limit, renumber_per_card
from refiner.config import (
    DEFAULT_DELIMITER,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    MAX_CLOZE_WORDS,
)
from refiner.prompts import build_refine_prompt

logger = structlog.get_logger(__name__)


@dataclass
class RefineResult:
    text: str
    warning: str | None = None


def postprocess(
    raw_output: str,
    user_input: str,
    delimiter: str = DEFAULT_DELIMITER,
    max_words: int = MAX_CLOZE_WORDS,
) -> str:
    """
    Repair model output against the user's input.

    Order is fixed: capping must see the model's own numbers, and
    renumbering has to run last so that no gaps survive.
    """
    text = strip_code_fences(raw_output)
    text = cap_to_input(text, user_input, delimiter)
    text = enforce_word_limit(text, max_words)
    text = renumber_per_card(text, delimiter)
    return text


def refine_cards(
    text: str,
    client: openai.OpenAI,
    model: str = DEFAULT_MODEL,
    temperature: float = DEFAULT_TEMPERATURE,
    delimiter: str = DEFAULT_DELIMITER,
    extra_rules: str = "",
) -> RefineResult:
    """
    Refine a batch of cloze cards.

    With ``extra_rules`` the user's rules replace the built-in ones and the
    model output is returned untouched; otherwise the output is repaired
    with :func:`postprocess` and checked for a card-count mismatch.
    """
    raw_text = (text or "").strip()
    if not raw_text:
        raise ValueError("Missing text to refine.")

    d = delimiter or DEFAULT_DELIMITER
    override = bool((extra_rules or "").strip())
    expected = len(split_cards(raw_text, d))

    logger.info(
        "refine_request",
        model=model,
        cards=expected,
        chars=len(raw_text),
        override=override,
    )

    out = llm.complete(
        client,
        model=model,
        temperature=temperature,
        user=build_refine_prompt(raw_text, d, extra_rules),
    )

    if override:
        return RefineResult(text=out)

    fixed = postprocess(out, raw_text, d)
    warning = check_card_count(fixed, expected, d)
    return RefineResult(text=fixed, warning=warning)
