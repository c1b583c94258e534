"""
Unit tests for anchor selection
"""
import re

from refiner.anchors import AnchorRule, AnchorSelector, keyword_rule, select_anchor


class TestKeywordAnchors:
    def test_first_words_when_no_keyword(self):
        """Content without a known keyword keeps its first three words"""
        assert select_anchor("a very long phrase with six words", 3) == "a very long"

    def test_schuffners_dots_pair(self):
        """Schuffner's plus a 'dots' mention collapses to the canonical pair"""
        assert select_anchor("Schuffner's dots are seen", 3) == "Schuffner's dots"

    def test_schuffner_without_dots(self):
        """Without a companion noun only the keyword itself is kept"""
        assert select_anchor("stippling named Schuffners by convention", 3) == "Schuffners"

    def test_keyword_found_anywhere(self):
        """A keyword deep inside the content wins over the leading words"""
        assert select_anchor("relapse is caused by a dormant hypnozoite stage", 3) == "hypnozoite"

    def test_keyword_case_preserved(self):
        """Matching is case-insensitive but the original casing is returned"""
        assert select_anchor("infection with Plasmodium VIVAX in the liver", 3) == "VIVAX"

    def test_priority_order(self):
        """Earlier rules beat later ones regardless of position in the text"""
        assert select_anchor("fever every 48 hours from tertian schizonts", 3) == "schizonts"

    def test_numeric_keyword_needs_word_boundary(self):
        """'48' inside a longer number does not count"""
        assert select_anchor("cycle lasts 1480 minutes in total", 3) == "cycle lasts 1480"


class TestFallback:
    def test_edge_punctuation_stripped(self):
        """Leading and trailing punctuation is removed from each token"""
        assert select_anchor('"acute," (diffuse) injury of lung', 3) == "acute diffuse injury"

    def test_max_words_respected(self):
        """The fallback keeps exactly max_words tokens"""
        assert select_anchor("one two three four five", 2) == "one two"

    def test_punctuation_only_content_unchanged(self):
        """No usable token: content comes back as is"""
        assert select_anchor("-- ... !!", 3) == "-- ... !!"

    def test_empty_content(self):
        """Empty content degrades to an empty anchor"""
        assert select_anchor("", 3) == ""


class TestInjectedRules:
    def test_custom_rules_replace_lexicon(self):
        """Injected rules are used instead of the default lexicon"""
        selector = AnchorSelector([keyword_rule(r"\bgranuloma\b")])
        assert selector.select("caseating granuloma with giant cells", 3) == "granuloma"
        # 'vivax' is not in the injected lexicon
        assert selector.select("Plasmodium vivax infects young cells", 3) == "Plasmodium vivax infects"

    def test_custom_extractor(self):
        """Extractors may build the anchor from the match and the content"""
        rule = AnchorRule(
            re.compile(r"\bReed-Sternberg\b", re.IGNORECASE),
            lambda m, content: f"{m.group(0)} cells",
        )
        selector = AnchorSelector([rule])
        assert selector.select("classic Reed-Sternberg morphology in a lymph node", 3) == "Reed-Sternberg cells"

    def test_empty_rule_list(self):
        """No rules means pure fallback"""
        assert AnchorSelector([]).select("hypnozoite forms in the liver", 3) == "hypnozoite forms in"
