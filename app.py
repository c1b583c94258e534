"""Cloze Refiner: Streamlit app."""

import html
import os
import re

import certifi

os.environ.setdefault("SSL_CERT_FILE", certifi.where())
os.environ.setdefault("REQUESTS_CA_BUNDLE", certifi.where())

import streamlit as st
import openai

from refiner.batch import split_cards, strip_code_fences
from refiner.config import (
    DEFAULT_DELIMITER,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    MODELS,
    OPENAI_API_KEY,
)
from refiner.llm import get_client
from refiner.logging import configure_logging
from refiner.prompts import PRESETS
from refiner.refine import refine_cards
from refiner.rewrite import rewrite_text

configure_logging()

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
_CLOZE_PATTERN = re.compile(r"\{\{\s*c(\d+)\s*::(.+?)\}\}", re.DOTALL)


def _render_cloze(text: str) -> str:
    """Escape the card and highlight each cloze with its number."""
    return _CLOZE_PATTERN.sub(
        r'<span class="cloze-blank"><sup>c\1</sup>\2</span>', html.escape(text, quote=False)
    ).replace("\n", "<br>")


def _render_cards(cards: list[str]) -> None:
    for i, card in enumerate(cards, 1):
        st.markdown(
            f'<div class="card-box"><span class="badge badge-num">Card {i}</span>'
            f'<div class="card-a">{_render_cloze(card)}</div></div>',
            unsafe_allow_html=True,
        )


def _client_or_stop(api_key: str) -> openai.OpenAI:
    try:
        return get_client(api_key)
    except RuntimeError:
        st.error("Please add your OpenAI API key in the sidebar first.")
        st.stop()


# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Cloze Refiner",
    page_icon="🧬",
    layout="centered",
    initial_sidebar_state="expanded",
)

st.markdown(
    """
    <style>
    .block-container { padding-top: 2rem; }

    .card-box {
        border: 1px solid #e2e8f0;
        border-radius: 10px;
        padding: 14px 18px;
        margin-bottom: 8px;
        background: #f8fafc;
    }
    .card-a {
        font-size: 14px;
        color: #334155;
        line-height: 1.65;
        margin-top: 6px;
        font-family: ui-monospace, Menlo, monospace;
    }
    .badge {
        display: inline-block;
        border-radius: 4px;
        padding: 1px 7px;
        font-size: 11px;
        font-weight: 600;
        vertical-align: middle;
    }
    .badge-num { background: #e2e8f0; color: #334155; }
    .cloze-blank {
        background: #fef08a;
        border-radius: 3px;
        padding: 0 3px;
        font-weight: 600;
        color: #713f12;
    }
    .cloze-blank sup { color: #a16207; margin-right: 2px; }
    </style>
    """,
    unsafe_allow_html=True,
)

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("⚙️ Settings")

    api_key = st.text_input(
        "OpenAI API Key",
        type="password",
        value=OPENAI_API_KEY,
        help="Used only for this session, never stored.",
    )

    st.divider()

    model = st.selectbox(
        "Model",
        options=MODELS,
        index=MODELS.index(DEFAULT_MODEL) if DEFAULT_MODEL in MODELS else 0,
    )
    temperature = st.slider("Temperature", 0.0, 1.0, DEFAULT_TEMPERATURE, 0.05)

    st.divider()
    st.caption(f"Cards are separated by `{DEFAULT_DELIMITER}` on its own line.")

# ---------------------------------------------------------------------------
# Main area
# ---------------------------------------------------------------------------
st.title("Cloze Refiner")

tab_refine, tab_rewrite = st.tabs(["🧠 Cloze refine", "✍️ Rewrite"])

# ════════════════════════════════════════════════════════════════════════════
# Cloze refine
# ════════════════════════════════════════════════════════════════════════════
with tab_refine:
    bulk = st.text_area(
        "Cards",
        height=260,
        placeholder=f"Paste one or more cards, separated by\n{DEFAULT_DELIMITER}",
    )
    n_cards = len(split_cards(strip_code_fences(bulk), DEFAULT_DELIMITER))
    st.caption(f"{n_cards} card{'' if n_cards == 1 else 's'} detected")

    with st.expander("Extra cloze rules (override mode)"):
        extra_rules = st.text_area(
            "Extra rules",
            label_visibility="collapsed",
            help="When set, only these rules apply and the output is not post-processed.",
        )

    if st.button("⚡ Refine all", type="primary", use_container_width=True):
        if not bulk.strip():
            st.warning("Paste cards first.")
            st.stop()

        client = _client_or_stop(api_key)
        try:
            with st.spinner("Refining cards…"):
                result = refine_cards(
                    bulk,
                    client,
                    model=model,
                    temperature=temperature,
                    delimiter=DEFAULT_DELIMITER,
                    extra_rules=extra_rules,
                )
        except openai.AuthenticationError:
            st.error("Invalid OpenAI API key. Please double-check and try again.")
            st.stop()
        except openai.RateLimitError:
            st.error("OpenAI rate limit hit. Wait a moment and try again.")
            st.stop()

        st.session_state["refined"] = result.text
        st.session_state["refine_warning"] = result.warning

    if st.session_state.get("refined") is not None:
        if st.session_state.get("refine_warning"):
            st.warning(f"⚠️ {st.session_state['refine_warning']}")

        cards = split_cards(
            strip_code_fences(st.session_state["refined"]), DEFAULT_DELIMITER
        )
        st.success(f"✅ Refined {len(cards)} card(s).")
        _render_cards(cards)

        with st.expander("Raw output"):
            st.code(st.session_state["refined"], language=None)

# ════════════════════════════════════════════════════════════════════════════
# Rewrite
# ════════════════════════════════════════════════════════════════════════════
with tab_rewrite:
    col_preset, col_delim = st.columns([2, 2])
    with col_preset:
        preset = st.selectbox("Preset", options=list(PRESETS), index=0)
    with col_delim:
        use_chunks = st.toggle(
            "Rewrite per chunk",
            value=False,
            help=f"Treat `{DEFAULT_DELIMITER}`-separated chunks as separate texts.",
        )

    source = st.text_area("Text", height=220)
    rules = st.text_area(
        "Rules (optional)",
        height=90,
        help="When set, these rules replace the preset instructions.",
    )
    template = ""
    if preset == "micro":
        template = st.text_area("Micro template (optional)", height=120)

    if st.button("✍️ Rewrite", type="primary", use_container_width=True):
        if not source.strip():
            st.warning("Enter some text first.")
            st.stop()

        client = _client_or_stop(api_key)
        try:
            with st.spinner("Rewriting…"):
                result = rewrite_text(
                    source,
                    client,
                    model=model,
                    temperature=temperature,
                    preset=preset,
                    rules=rules,
                    template=template,
                    delimiter=DEFAULT_DELIMITER if use_chunks else "",
                )
        except openai.AuthenticationError:
            st.error("Invalid OpenAI API key. Please double-check and try again.")
            st.stop()
        except openai.RateLimitError:
            st.error("OpenAI rate limit hit. Wait a moment and try again.")
            st.stop()
        except ValueError as e:
            st.warning(str(e))
            st.stop()

        if result.warning:
            st.warning(f"⚠️ {result.warning}")
        st.code(result.text, language=None)
