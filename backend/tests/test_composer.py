# Tests composition de l'écho

import json
import random

import pytest

from resonance.config import DATA_DIR
from resonance.errors import ConfigurationError
from resonance.output import (
    DEFAULT_PATTERNS,
    EchoComposer,
    build_metaphore,
    build_suggestions,
    pick_question,
    render_template,
    validate_patterns,
)


class TestRenderTemplate:
    """Placeholders simples et doubles."""

    def test_single_and_double_braces(self):
        values = {"pivot": "mer", "noyau": "vent, sel"}
        assert render_template("{pivot} / {{noyau}}", values) == "mer / vent, sel"

    def test_unknown_placeholder_left_alone(self):
        assert render_template("{inconnu}", {"pivot": "mer"}) == "{inconnu}"


class TestCompose:
    """Choix aléatoire reproductible."""

    def test_seeded_composition_is_reproducible(self):
        first = EchoComposer.from_file(DATA_DIR / "patterns.json", rng=random.Random(7))
        second = EchoComposer.from_file(DATA_DIR / "patterns.json", rng=random.Random(7))
        args = ("cherche", ["monde", "sens"], [], "neutral")
        assert first.compose(*args) == second.compose(*args)

    def test_all_placeholders_filled(self, composer):
        for mode in ("neutral", "hypno", "ado", "etp"):
            for _ in range(10):
                echo = composer.compose("mer", ["vent", "sel"], ["nuit"], mode)
                for text in (echo.echo, echo.metaphor, echo.question):
                    assert "{" not in text
                assert echo.mode == mode

    def test_cowords_fallbacks(self):
        patterns = {"neutral": {
            "metaphors": ["m"],
            "openQuestions": ["q"],
            "sentenceStructures": ["{pivot}:{cowords}:{peripherie}"],
        }}
        composer = EchoComposer(patterns, rng=random.Random(0))
        assert composer.compose("mer", ["a", "b", "c", "d"], []).echo == "mer:a, b, c:a, b, c"
        assert composer.compose("mer", [], ["nuit", "lune"]).echo == "mer:nuit:nuit, lune"
        assert composer.compose("mer", [], []).echo == "mer:essence:essence"

    def test_unknown_mode_becomes_neutral(self, composer):
        assert composer.compose("mer", [], [], "poesie").mode == "neutral"

    def test_empty_mode_list_falls_back_to_neutral(self):
        patterns = {
            "neutral": {"metaphors": ["neutre"], "openQuestions": ["q ?"], "sentenceStructures": ["{meta}"]},
            "hypno": {"metaphors": [], "openQuestions": ["h ?"], "sentenceStructures": ["{meta}"]},
        }
        echo = EchoComposer(patterns, rng=random.Random(1)).compose("mer", [], [], "hypno")
        assert echo.metaphor == "neutre"
        assert echo.question == "h ?"

    def test_to_dict(self, composer):
        data = composer.compose("mer", ["vent"], [], "ado").to_dict()
        assert set(data) == {"echo", "metaphor", "question", "mode"}


class TestPatternsLoading:
    """Repli sur les patterns par défaut."""

    def test_missing_file(self, tmp_path):
        composer = EchoComposer.from_file(tmp_path / "absent.json")
        assert composer.patterns == DEFAULT_PATTERNS

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "patterns.json"
        path.write_text("[1, 2", encoding="utf-8")
        assert EchoComposer.from_file(path).patterns == DEFAULT_PATTERNS

    def test_wrong_structure(self, tmp_path):
        path = tmp_path / "patterns.json"
        path.write_text(json.dumps(["pas", "un", "objet"]), encoding="utf-8")
        composer = EchoComposer.from_file(path, rng=random.Random(0))
        assert composer.patterns == DEFAULT_PATTERNS
        assert composer.compose("mer", ["vent"], []).echo

    def test_validate_patterns_rejects_unusable(self):
        with pytest.raises(ConfigurationError):
            validate_patterns({"klingon": {}})

    def test_validate_patterns_drops_non_strings(self):
        patterns = validate_patterns({"neutral": {"metaphors": ["ok", 3, ""]}})
        assert patterns["neutral"]["metaphors"] == ["ok"]

    def test_shipped_patterns_cover_all_modes(self):
        with open(DATA_DIR / "patterns.json", encoding="utf-8") as f:
            patterns = validate_patterns(json.load(f))
        assert set(patterns) == {"neutral", "hypno", "ado", "etp"}


class TestDeterministicHelpers:
    """Métaphore, question de rebond et suggestions."""

    def test_metaphore_is_stable(self):
        assert build_metaphore("mer", ["vent"]) == build_metaphore("mer", ["vent"])
        assert build_metaphore("mer", ["vent"]).endswith("mer touche vent.")

    def test_metaphore_without_pivot(self):
        assert build_metaphore(None, []).endswith("mot touche toi.")

    def test_pick_question_mentions_pivot(self):
        assert '"mer"' in pick_question("mer")
        assert '"ce point"' in pick_question(None)

    def test_suggestions_fill_missing_terms(self):
        assert build_suggestions("mer", [], []) == [
            "pose une main sur mer",
            "laisse souffle desserrer le cadre",
            "écoute le pas de trajet",
        ]
