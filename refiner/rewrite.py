"""General rewrite: presets, optional per-chunk batches, web search for news."""

from dataclasses import dataclass

import openai
import structlog

from refiner import llm
from refiner.batch import check_card_count, join_cards, split_cards
from refiner.config import DEFAULT_MODEL, DEFAULT_TEMPERATURE
from refiner.prompts import SECOND_PASS_SYSTEM, build_rewrite_system, normalize_preset

logger = structlog.get_logger(__name__)

_REALTIME_HINTS = (
    "current event",
    "current events",
    "latest news",
    "breaking news",
    "current news",
    "news today",
    "in the news",
    "right now",
    "today",
    "this week",
    "recent",
    "recently",
    "what happened",
    "news about",
)


@dataclass
class RewriteResult:
    text: str
    warning: str | None = None


def should_use_web_search(preset: str, user: str) -> bool:
    """Only plain questions to the general preset that ask about current events."""
    if (preset or "").strip().lower() != "general":
        return False
    q = (user or "").lower()
    return any(hint in q for hint in _REALTIME_HINTS)


def rewrite_text(
    text: str,
    client: openai.OpenAI,
    *,
    model: str = DEFAULT_MODEL,
    temperature: float = DEFAULT_TEMPERATURE,
    preset: str = "general",
    rules: str = "",
    template: str = "",
    delimiter: str = "",
    client_context: dict | None = None,
) -> RewriteResult:
    """
    Rewrite ``text`` with the chosen preset.

    An empty ``delimiter`` means a single block. With a delimiter, the answer
    must come back with the same number of chunks; if it does not, the raw
    answer is returned together with a warning.
    """
    d = (delimiter or "").strip()
    chunks = split_cards(text, d) if d else [(text or "").strip()]
    if not chunks or not chunks[0]:
        raise ValueError("Empty text after trimming.")

    p = normalize_preset(preset)
    system = build_rewrite_system(p, rules, template, client_context=client_context)
    user = "\n\n".join(chunks)
    temperature = float(temperature or DEFAULT_TEMPERATURE)

    logger.info("rewrite_request", model=model, preset=p, chunks=len(chunks))

    if should_use_web_search(p, user):
        try:
            out = llm.complete_with_web_search(
                client, model=model, temperature=temperature, system=system, user=user
            )
        except openai.OpenAIError as e:
            logger.warning("web_search_failed", error=str(e))
            out = llm.complete(
                client, model=model, temperature=temperature, system=system, user=user
            )
    else:
        out = llm.complete(
            client, model=model, temperature=temperature, system=system, user=user
        )

    out = (out or "").strip()

    # The model sometimes answers with the question restated; ask once more.
    if out.endswith("?"):
        logger.info("rewrite_second_pass", preset=p)
        out = llm.complete(
            client, model=model, temperature=0, system=SECOND_PASS_SYSTEM, user=user
        ).strip()

    if not d:
        return RewriteResult(text=out)

    warning = check_card_count(out, len(chunks), d)
    if warning:
        return RewriteResult(text=out, warning=warning)
    return RewriteResult(text=join_cards(split_cards(out, d), d))
