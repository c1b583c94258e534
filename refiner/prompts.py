"""Prompt assembly for the refine and rewrite flows."""

from datetime import datetime, timezone

# ---------------------------------------------------------------------------
# Cloze refine
# ---------------------------------------------------------------------------

CLOZE_RULES = """\
I am creating Anki cloze cards for pathology boards.

Follow these rules exactly unless I explicitly say otherwise.

FORMATTING
- Output must be clean, spaced, and easy to skim while editing in Anki.
- Use short lines and clear section headers.
- Do not change my wording unless needed for clarity.
- Final output must always be placed inside a single plain-text "copy window" (code-style box).
- Do not include explanations outside the copy window unless I ask.

CLOZE RULES
- Never use nested clozes.
- Cloze numbers must be sequential starting at c1 within each card.
- Cloze only 1 to 3 words per cloze, NO MORE THAN THAT.
- If something needs more than 3 words, split into multiple clozes.
- Use only as many clozes as necessary (do not over-cloze).
- Reusing the same cloze number multiple times on a card is allowed when concepts are tightly linked.
- If I specify a maximum number of clozes, obey it strictly.
- If I say "no clozes," do not add any clozes.
- If content is a short phrase, keep it on the same line.
- Prefer clozing single anchors (1–2 words) like clinically relevant terms, diseases or disease processes.
- Do NOT cloze whole sentences.

IF INPUT ALREADY HAS CLOZES
- If the input already contains clozes ({{c...::}}), you MUST NOT add any new clozes.
- Only edit existing cloze contents to comply with the rules.
- Preserve all existing cloze blocks (do not delete them).
- If an existing cloze is too long, shorten the clozed text to a 1–3 word anchor
  (e.g. "hypnozoite", "Schuffner's dots", "48 hours") while keeping the surrounding sentence intact.

CLOZE NUMBERING (HARD RULE)
- Within EACH card, cloze numbers MUST start at c1 and be sequential with NO gaps (c1, c2, c3, ...).
- If the input uses higher numbers (e.g. c5, c6, c8), renumber that card to c1..cN in order of appearance.
- Reusing the same number is allowed, but the set of numbers used must still have no gaps.

CONTENT RULES
- Cloze only high-yield anchors: diagnosis, mechanism, hallmark histology, key lab or molecular finding.
- Leave descriptive lists unclozed unless I explicitly ask.
- Prefer ↑ / ↓ arrows for lab changes.
- Keep content pathology-accurate and board-oriented.
- Do not invent grading systems, criteria, or facts.
- Do not over-explain.

IMPORTANT
- Do NOT add extra clozes.
- Do NOT merge unrelated concepts.
- Do NOT explain unless asked.\
"""

_BATCH_STRICT = """\
BATCH MODE INSTRUCTIONS
- The user input may contain multiple cards separated by the delimiter: {d}
- Treat each chunk between delimiters as a separate card.
- Return the refined cards in the SAME ORDER.
- Output MUST use the SAME delimiter ({d}) between cards.
- Do not add extra cards. Do not remove cards.
- Do not add any extra commentary outside the copy windows.\
"""

_OVERRIDE = """\
You are editing Anki cloze cards.

ABSOLUTE OVERRIDE MODE:
- Ignore ANY default/base rules.
- Follow ONLY the user's Extra Cloze Rules below.
- If the user requests a specific number of clozes, produce exactly that many clozes PER CARD.
- Do NOT invent facts.
- Keep the original text content; only add/adjust cloze wrappers.

Batch rules:
- Input may contain multiple cards separated by delimiter: {d}
- Return same number of cards, same order
- Output MUST use the SAME delimiter ({d}) between cards
- Output ONLY the cards (no commentary)

USER EXTRA RULES:
{extra}\
"""


def build_refine_prompt(text: str, delimiter: str, extra_rules: str = "") -> str:
    """Strict rules + batch instructions, or the user's rules alone in override mode."""
    extra = (extra_rules or "").strip()
    if extra:
        head = _OVERRIDE.format(d=delimiter, extra=extra)
    else:
        head = CLOZE_RULES + "\n\n" + _BATCH_STRICT.format(d=delimiter)
    return f"{head}\n\nUSER INPUT:\n{text.strip()}"


# ---------------------------------------------------------------------------
# Rewrite
# ---------------------------------------------------------------------------

PRESETS = {
    "general": "You are a helpful assistant. Respond normally and helpfully.",
    "email": "Make it sound better.",
    "micro": (
        "Make a better microscopic description used for a pathology report.\n"
        "Sound like an experienced pathologist describing what they see at sign-out.\n"
        "Keep similar structure and style to what is provided.\n"
        "No em dashes."
    ),
    "gross": """\
Rewrite a pathology gross description to be clear and concise.

RULES:
- Keep all measurements, laterality, specimen parts, and identifiers exactly correct
- Do not invent findings
- Use complete sentences
- Keep orientation/ink/margins information explicit
- Keep similar structure and style to what is provided
- Avoid em dashes and bullets\
""",
    "path": "Make it sound better.\nKeep any extra formatting I added.",
}

SECOND_PASS_SYSTEM = "Return ONLY the final answer. Do NOT restate or rephrase the question."


def normalize_preset(preset: str) -> str:
    p = (preset or "general").strip().lower()
    return p if p in PRESETS else "general"


def _date_context(now: datetime | None, client_context: dict | None) -> str:
    now = now or datetime.now(timezone.utc)
    client = client_context or {}

    def _c(key: str) -> str:
        return str(client.get(key) or "").strip() or "(not provided)"

    return "\n".join([
        "Current date/time context:",
        f"- serverNowIso: {now.isoformat()}",
        f"- serverNowUtc: {now.strftime('%a, %d %b %Y %H:%M:%S GMT')}",
        f"- clientNowIso: {_c('clientNowIso')}",
        f"- clientNowLocal: {_c('clientNowLocal')}",
        f"- clientTimezone: {_c('clientTimezone')}",
        "When the user asks for today's date/day/time, answer strictly from this context.",
        "If both server and client values are present, prefer the client values "
        "for 'today' and local time.",
    ])


def build_rewrite_system(
    preset: str,
    rules: str = "",
    template: str = "",
    now: datetime | None = None,
    client_context: dict | None = None,
) -> str:
    """
    System prompt for a rewrite. User rules replace the preset entirely;
    a micro template is only honoured for the ``micro`` preset.
    """
    p = normalize_preset(preset)
    user_rules = (rules or "").strip()
    micro_template = (template or "").strip() if p == "micro" else ""

    parts: list[str] = []
    if user_rules:
        parts.append(
            "You are a helpful assistant.\n\n"
            "ABSOLUTE OVERRIDE MODE:\n"
            "- Follow ONLY the user's rules below. They override all other instructions.\n"
            "- If a micro template is provided, follow its structure and section "
            "ordering exactly when possible.\n\n"
            f"USER RULES:\n{user_rules}"
        )
        if micro_template:
            parts.append(f"MICRO TEMPLATE:\n{micro_template}")
    else:
        parts.append(PRESETS[p])
        if micro_template:
            parts.append(
                "If a MICRO TEMPLATE is provided, mirror its structure, section names, "
                "and ordering while preserving the source findings.\n\n"
                f"MICRO TEMPLATE:\n{micro_template}"
            )

    parts.append(_date_context(now, client_context))
    return "\n\n".join(parts)
