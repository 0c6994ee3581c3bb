# Tests découpage d'emojis

from resonance.text import is_emoji_token, normalize_emojis, split_emojis


class TestSplitEmojis:
    """Unités graphiques d'une chaîne d'emojis."""

    def test_simple_sequence(self):
        assert split_emojis("🌊🔥🌙") == ["🌊", "🔥", "🌙"]

    def test_letters_and_spaces_ignored(self):
        assert split_emojis("mer 🌊 et feu 🔥") == ["🌊", "🔥"]

    def test_zwj_sequence_kept_whole(self):
        family = "👩‍👩‍👧"
        assert split_emojis(family + "🌙") == [family, "🌙"]

    def test_skin_tone_modifier_attached(self):
        assert split_emojis("👍🏽🙏") == ["👍🏽", "🙏"]

    def test_variation_selector_attached(self):
        assert split_emojis("❤️🌞") == ["❤️", "🌞"]

    def test_flag_pair(self):
        assert split_emojis("🇫🇷🇯🇵") == ["🇫🇷", "🇯🇵"]

    def test_punctuation_is_not_emoji(self):
        assert split_emojis("!!! ... ?") == []

    def test_empty(self):
        assert split_emojis("") == []


class TestEmojiHelpers:
    """Reconnaissance et nettoyage."""

    def test_is_emoji_token(self):
        assert is_emoji_token("🌊")
        assert not is_emoji_token("mer")
        assert not is_emoji_token("")

    def test_normalize_emojis_drops_invalid_entries(self):
        assert normalize_emojis([" 🌊 ", "", None, 3, "🔥"]) == ["🌊", "🔥"]
