from __future__ import annotations

import pytest

from buzzword.modules.intelligence.normalizer import normalize


class TestNormalize:
    """Links, hashtags and nostr: references are removed before tokenizing."""

    def test_removes_links(self):
        assert normalize("見て https://example.com/a?b=1 すごい") == "見て  すごい"

    def test_removes_hashtags(self):
        assert normalize("猫 #nostr かわいい") == "猫  かわいい"

    def test_removes_nostr_references(self):
        assert normalize("nostr:npub1abcdef 猫") == "猫"

    def test_hash_inside_word_is_kept(self):
        assert normalize("C#の話") == "C#の話"

    def test_trims_surrounding_whitespace(self):
        assert normalize("  猫  \n") == "猫"

    @pytest.mark.parametrize("text", ["", "猫が好き", "plain text"])
    def test_text_without_matches_unchanged(self, text):
        assert normalize(text) == text


class TestNormalizeJapanese:
    """Japanese has no spaces, so references often follow kana or kanji directly."""

    def test_hashtag_after_kana(self):
        assert normalize("すごい#nostr") == "すごい"

    def test_nostr_reference_after_kana(self):
        assert normalize("見てnostr:npub1abc") == "見て"

    def test_link_keeps_preceding_word(self):
        assert normalize("これhttps://example.com/x") == "これ"

    def test_reference_between_words(self):
        assert normalize("猫#cat犬") == "猫"
