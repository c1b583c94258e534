"""Anchor selection: pick the 1–3 words worth keeping from an over-long cloze."""

import re
from dataclasses import dataclass
from typing import Callable, Sequence

# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

Extractor = Callable[[re.Match, str], str]


def _matched_text(match: re.Match, content: str) -> str:
    return match.group(0)


_DOTS_RE = re.compile(r"dots?", re.IGNORECASE)


def _schuffners_dots(match: re.Match, content: str) -> str:
    # "Schuffner's dots" is the anchor board questions use; keep the pair.
    if _DOTS_RE.search(content):
        return "Schuffner's dots"
    return match.group(0)


@dataclass(frozen=True)
class AnchorRule:
    """A keyword pattern and how to turn its match into an anchor."""

    pattern: re.Pattern
    extract: Extractor = _matched_text


def keyword_rule(regex: str, extract: Extractor = _matched_text) -> AnchorRule:
    return AnchorRule(re.compile(regex, re.IGNORECASE), extract)


# Priority order matters: the first rule that matches wins.
DEFAULT_ANCHOR_RULES: tuple[AnchorRule, ...] = (
    keyword_rule(r"\bhypnozoite\b"),
    keyword_rule(r"\bSchuffner'?s\b", _schuffners_dots),
    keyword_rule(r"\bdots?\b"),
    keyword_rule(r"\bmerozoites?\b"),
    keyword_rule(r"\bschizonts?\b"),
    keyword_rule(r"\btertian\b"),
    keyword_rule(r"\bquotidian\b"),
    keyword_rule(r"\b48\b"),
    keyword_rule(r"\b24\b"),
    keyword_rule(r"\bvivax\b"),
    keyword_rule(r"\bovale\b"),
    keyword_rule(r"\bmalariae\b"),
    keyword_rule(r"\bknowlesi\b"),
)

_EDGE_PUNCT_RE = re.compile(r"^\W+|\W+$")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class AnchorSelector:
    """
    Chooses a short anchor phrase for cloze content.

    Rules are tried in order; the first pattern found anywhere in the content
    decides the anchor. Without a match, the first ``max_words`` tokens
    (edge punctuation stripped) are kept.
    """

    def __init__(self, rules: Sequence[AnchorRule] = DEFAULT_ANCHOR_RULES):
        self.rules = tuple(rules)

    def select(self, content: str, max_words: int = 3) -> str:
        s = (content or "").strip()

        for rule in self.rules:
            match = rule.pattern.search(s)
            if match:
                return rule.extract(match, s)

        words = [_EDGE_PUNCT_RE.sub("", w) for w in s.split()]
        words = [w for w in words if w]
        if not words:
            return s
        return " ".join(words[:max_words])


_default_selector = AnchorSelector()


def select_anchor(content: str, max_words: int = 3) -> str:
    """Select an anchor with the default lexicon."""
    return _default_selector.select(content, max_words)
