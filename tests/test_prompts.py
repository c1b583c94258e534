"""
Tests for prompt assembly
"""
from datetime import datetime, timezone

from refiner.prompts import (
    CLOZE_RULES,
    PRESETS,
    build_refine_prompt,
    build_rewrite_system,
    normalize_preset,
)

NOW = datetime(2026, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


class TestRefinePrompt:
    def test_strict_mode_names_delimiter(self):
        prompt = build_refine_prompt("  card  ", "===CARD===")
        assert prompt.startswith(CLOZE_RULES)
        assert "separated by the delimiter: ===CARD===" in prompt
        assert prompt.endswith("USER INPUT:\ncard")

    def test_override_mode(self):
        prompt = build_refine_prompt("card", "##", extra_rules="  max 2 clozes ")
        assert "USER EXTRA RULES:\nmax 2 clozes" in prompt
        assert "separated by delimiter: ##" in prompt
        assert CLOZE_RULES not in prompt


class TestRewriteSystem:
    def test_unknown_preset_falls_back_to_general(self):
        assert normalize_preset("Sonnet") == "general"
        assert normalize_preset(" MICRO ") == "micro"

    def test_preset_and_date_context(self):
        system = build_rewrite_system("gross", now=NOW)
        assert system.startswith(PRESETS["gross"])
        assert "- serverNowIso: 2026-03-04T05:06:07+00:00" in system
        assert "- serverNowUtc: Wed, 04 Mar 2026 05:06:07 GMT" in system
        assert "- clientTimezone: (not provided)" in system

    def test_user_rules_replace_preset(self):
        system = build_rewrite_system("gross", rules="Only fix typos.", now=NOW)
        assert "USER RULES:\nOnly fix typos." in system
        assert PRESETS["gross"] not in system

    def test_template_only_for_micro(self):
        template = "DIAGNOSIS:\nCOMMENT:"
        assert "MICRO TEMPLATE:\nDIAGNOSIS:" in build_rewrite_system("micro", template=template, now=NOW)
        assert "MICRO TEMPLATE" not in build_rewrite_system("gross", template=template, now=NOW)

    def test_client_context_included(self):
        system = build_rewrite_system(
            "general",
            now=NOW,
            client_context={"clientTimezone": "America/Chicago", "clientNowLocal": "3/3/2026"},
        )
        assert "- clientTimezone: America/Chicago" in system
        assert "- clientNowLocal: 3/3/2026" in system
        assert "- clientNowIso: (not provided)" in system
