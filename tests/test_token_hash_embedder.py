"""Tests for the local token-hash embedder."""
from __future__ import annotations

import math
import unittest

from application.services.ranking import cosine_similarity
from infrastructure.embedding.concept_table import CONCEPTS, REVERSE_CONCEPTS
from infrastructure.embedding.token_hash_embedder import TokenHashEmbedder, is_cjk, string_hash, tokenize


class TestStringHash(unittest.TestCase):
    def test_known_values(self) -> None:
        self.assertEqual(string_hash(""), 0)
        self.assertEqual(string_hash("a"), 97)
        self.assertEqual(string_hash("the"), 114801)
        self.assertEqual(string_hash("时间"), 847550)

    def test_wraps_to_signed_32_bit_then_takes_absolute_value(self) -> None:
        self.assertEqual(string_hash("information"), 1968600364)
        for word in ("entanglement", "a" * 64, "解决方案" * 10):
            value = string_hash(word)
            self.assertGreaterEqual(value, 0)
            self.assertLessEqual(value, 2**31)


class TestTokenize(unittest.TestCase):
    def test_splits_latin_words_and_cjk_characters(self) -> None:
        self.assertEqual(
            tokenize("Hello, World 42! 时间 カ"),
            ["hello", "world", "42", "时", "间", "カ"],
        )

    def test_ignores_non_ascii_letters_and_punctuation(self) -> None:
        self.assertEqual(tokenize("café -- naïve"), ["caf", "na", "ve"])

    def test_is_cjk(self) -> None:
        self.assertTrue(is_cjk("书"))
        self.assertTrue(is_cjk("한"))
        self.assertFalse(is_cjk("book"))


class TestTokenHashEmbedder(unittest.TestCase):
    def setUp(self) -> None:
        self.embedder = TokenHashEmbedder()

    def test_dimension_and_model_id(self) -> None:
        self.assertEqual(self.embedder.dimension, 200)
        self.assertEqual(self.embedder.model_id, "token-hash-200")
        self.assertEqual(len(self.embedder.embed_text("some text")), 200)

    def test_rejects_small_or_odd_dimensions(self) -> None:
        with self.assertRaises(ValueError):
            TokenHashEmbedder(dimension=64)
        with self.assertRaises(ValueError):
            TokenHashEmbedder(dimension=201)

    def test_is_deterministic(self) -> None:
        text = "Notes about the future of technology. 未来的技术"
        self.assertEqual(self.embedder.embed_text(text), self.embedder.embed_text(text))
        self.assertEqual(TokenHashEmbedder().embed_text(text), self.embedder.embed_text(text))

    def test_output_is_unit_length(self) -> None:
        vector = self.embedder.embed_text("the cat sat on the mat")
        self.assertAlmostEqual(math.sqrt(sum(v * v for v in vector)), 1.0, places=12)

    def test_empty_text_gives_zero_vector(self) -> None:
        self.assertEqual(self.embedder.embed_text(""), [0.0] * 200)
        self.assertEqual(self.embedder.embed_text("!!! ???"), [0.0] * 200)

    def test_latin_token_lands_in_first_half(self) -> None:
        vector = self.embedder.embed_text("the")
        self.assertEqual(vector[114801 % 100], 1.0)
        self.assertEqual(sum(1 for v in vector if v), 1)

    def test_cjk_token_lands_in_second_half_with_cross_script_feature(self) -> None:
        vector = self.embedder.embed_text("人")
        norm = math.sqrt(1.0 + 0.5**2)
        self.assertAlmostEqual(vector[100 + string_hash("人") % 100], 1.0 / norm)
        self.assertAlmostEqual(vector[self.embedder.latin_slot("person")], 0.5 / norm)

    def test_english_concept_adds_weight_to_chinese_slots(self) -> None:
        vector = self.embedder.embed_text("book book")
        raw = [0.0] * 200
        raw[self.embedder.latin_slot("book")] += 2
        for equivalent in CONCEPTS["book"]:
            raw[self.embedder.cjk_slot(equivalent)] += 1.0
        norm = math.sqrt(sum(v * v for v in raw))
        for expected, actual in zip((v / norm for v in raw), vector):
            self.assertAlmostEqual(expected, actual)

    def test_cross_language_notes_overlap(self) -> None:
        english = self.embedder.embed_text("book water")
        chinese = self.embedder.embed_text("书 水")
        unrelated = self.embedder.embed_text("quantum entanglement")
        self.assertGreater(cosine_similarity(english, chinese), cosine_similarity(english, unrelated))

    def test_reverse_table_covers_every_equivalent(self) -> None:
        for english, equivalents in CONCEPTS.items():
            for term in equivalents:
                self.assertIn(english, REVERSE_CONCEPTS[term])

    def test_shared_words_rank_closer(self) -> None:
        a = self.embedder.embed_text("the cat sat")
        b = self.embedder.embed_text("the dog sat")
        c = self.embedder.embed_text("quantum entanglement theory")
        self.assertGreater(cosine_similarity(a, b), cosine_similarity(a, c))


if __name__ == "__main__":
    unittest.main()
