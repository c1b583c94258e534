"""Card batches: split a delimiter-joined blob into cards and join them back."""

import re

import structlog

from refiner.config import DEFAULT_DELIMITER

logger = structlog.get_logger(__name__)

_FENCE_RE = re.compile(r"```[\w-]*[ \t]*\n?")


def _delimiter(delimiter: str) -> str:
    return str(delimiter or DEFAULT_DELIMITER)


def split_segments(raw: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """
    Positional split: every segment is kept exactly as written, empty ones
    included, so that ``delimiter.join(split_segments(x))`` == ``x``.
    """
    return str(raw or "").split(_delimiter(delimiter))


def split_cards(raw: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Split into trimmed cards, dropping segments that are empty after trimming."""
    parts = (s.strip() for s in split_segments(raw, delimiter))
    return [s for s in parts if s]


def join_cards(parts: list[str], delimiter: str = DEFAULT_DELIMITER) -> str:
    d = _delimiter(delimiter)
    return f"\n{d}\n".join(parts)


def strip_code_fences(text: str) -> str:
    """Remove ``` fences the model wraps its "copy window" in."""
    return _FENCE_RE.sub("", text or "").strip()


def check_card_count(
    output: str, expected: int, delimiter: str = DEFAULT_DELIMITER
) -> str | None:
    """
    Compare the number of cards in ``output`` against ``expected``.
    Returns a warning message on mismatch, None otherwise.
    """
    got = len(split_cards(output, delimiter))
    if got == expected:
        return None

    logger.warning(
        "card_count_mismatch",
        expected=expected,
        returned=got,
        delimiter=_delimiter(delimiter),
    )
    return f"Model returned {got} chunk(s) but expected {expected}."
