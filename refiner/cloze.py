"""
Deterministic cloze repairs applied to model output.

All three passes are pure string → string functions and never raise:
  cap_to_input        : no new cloze numbers on cards that already had clozes
  enforce_word_limit  : every cloze hides at most ``max_words`` words
  renumber_per_card   : cloze numbers run c1..cN per card, first-seen order
"""

import re

from refiner.anchors import AnchorSelector, select_anchor
from refiner.batch import split_segments
from refiner.config import DEFAULT_DELIMITER, MAX_CLOZE_WORDS

# {{c3::content}}: tolerant of stray spaces around "c3", content up to the first }}
CLOZE_SPAN_RE = re.compile(r"\{\{\s*c(\d+)\s*::(.*?)\}\}", re.DOTALL)
# Opening part only, for numbering
CLOZE_OPEN_RE = re.compile(r"\{\{\s*c(\d+)\s*::")


def cloze_indices(text: str) -> list[str]:
    """Cloze numbers in order of appearance, as written (strings)."""
    return CLOZE_OPEN_RE.findall(text or "")


# ---------------------------------------------------------------------------
# Word limit
# ---------------------------------------------------------------------------

def enforce_word_limit(
    text: str,
    max_words: int = MAX_CLOZE_WORDS,
    selector: AnchorSelector | None = None,
) -> str:
    """Shorten every cloze longer than ``max_words`` to an anchor phrase."""
    if not text:
        return text

    pick = selector.select if selector is not None else select_anchor

    def _shorten(m: re.Match) -> str:
        content = m.group(2).strip()
        if len(content.split()) <= max_words:
            return m.group(0)

        anchor = pick(content, max_words)
        # Content made only of punctuation falls through the selector untouched
        anchor_words = anchor.split()
        if len(anchor_words) > max_words:
            anchor = " ".join(anchor_words[:max_words])
        return f"{{{{c{m.group(1)}::{anchor}}}}}"

    return CLOZE_SPAN_RE.sub(_shorten, text)


# ---------------------------------------------------------------------------
# Renumbering
# ---------------------------------------------------------------------------

def _renumber_card(card: str) -> str:
    mapping: dict[str, str] = {}

    def _relabel(m: re.Match) -> str:
        old = m.group(1)
        if old not in mapping:
            mapping[old] = str(len(mapping) + 1)
        return f"{{{{c{mapping[old]}::"

    return CLOZE_OPEN_RE.sub(_relabel, card)


def renumber_per_card(text: str, delimiter: str = DEFAULT_DELIMITER) -> str:
    """
    Relabel cloze numbers to 1..N within each card, in order of first
    appearance. A number reused on several clozes keeps sharing its new label.
    """
    d = delimiter or DEFAULT_DELIMITER
    return d.join(_renumber_card(card) for card in split_segments(text, d))


# ---------------------------------------------------------------------------
# Capping to input
# ---------------------------------------------------------------------------

def cap_to_input(output: str, user_input: str, delimiter: str = DEFAULT_DELIMITER) -> str:
    """
    Unwrap clozes whose number the matching input card never used.

    Cards are matched by position. When the input card has no clozes at all
    (or there is no input card at that position) the output card is kept as is.
    """
    d = delimiter or DEFAULT_DELIMITER
    out_cards = split_segments(output, d)
    in_cards = split_segments(user_input, d)

    fixed: list[str] = []
    for i, out_card in enumerate(out_cards):
        in_card = in_cards[i] if i < len(in_cards) else ""
        allowed = set(cloze_indices(in_card))

        if not allowed:
            fixed.append(out_card)
            continue

        fixed.append(
            CLOZE_SPAN_RE.sub(
                lambda m: m.group(0) if m.group(1) in allowed else m.group(2).strip(),
                out_card,
            )
        )

    return d.join(fixed)
