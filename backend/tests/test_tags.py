# Tests tags émotionnels

from collections import Counter

from resonance.output import build_ciel_etoile, build_clusters, build_tags, detect_tags, match_emotion


class TestMatchEmotion:
    """Préfixes lexicaux."""

    def test_prefix_match(self):
        assert match_emotion("angoissante").label == "anxiete"

    def test_accents_ignored(self):
        assert match_emotion("Colère").tag == "🔥 tension"

    def test_no_match(self):
        assert match_emotion("mer") is None


class TestBuildTags:
    """Tags émotionnels et complément."""

    def test_emotions_then_filler(self):
        tags = build_tags("peur", ["souffle", "mer"], ["nuit"])
        assert tags == ["🌫️ anxiete", "🌬️ souffle", "✨ mer", "✨ nuit"]

    def test_distinct_tags(self):
        assert detect_tags(["peur", "panique", "stress"]) == ["🌫️ anxiete"]

    def test_at_most_six(self):
        words = ["joie", "colere", "pression", "souffle", "avance", "coeur", "vide"]
        assert len(build_tags("peur", words, [])) == 6

    def test_filler_limited(self):
        tags = build_tags("mer", ["vent", "sel", "nuit", "lune"], [])
        assert tags == ["✨ mer", "✨ vent", "✨ sel"]

    def test_no_pivot(self):
        assert build_tags(None, [], []) == []


class TestCielEtoile:
    """Étoiles affichables."""

    def test_split_emoji_and_label(self):
        stars = build_ciel_etoile(["🌫️ anxiete", "✨ mer"])
        assert stars == [{"emoji": "🌫️", "label": "anxiete"}, {"emoji": "✨", "label": "mer"}]

    def test_four_stars_max(self):
        tags = ["✨ a", "✨ b", "✨ c", "✨ d", "✨ e"]
        assert len(build_ciel_etoile(tags)) == 4


class TestClusters:
    """Polarités pondérées par fréquence."""

    def test_intensity_relative_to_most_frequent(self):
        clusters = build_clusters(Counter({"peur": 2, "angoisse": 1, "deuil": 1, "mer": 4}))
        assert clusters == [
            {"tag": "anxiete", "emoji": match_emotion("peur").emoji, "intensite": 0.75},
            {"tag": "perte", "emoji": match_emotion("deuil").emoji, "intensite": 0.25},
        ]

    def test_emergence_when_nothing_matches(self):
        assert build_clusters(Counter({"mer": 1})) == [{"tag": "emergence", "emoji": "⭐", "intensite": 0.2}]
        assert build_clusters(Counter())[0]["tag"] == "emergence"
