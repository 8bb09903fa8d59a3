# tests/test_template_synthesizer.py

"""Tests for listing template synthesis."""

import unittest

from price_scout.models.listing import ListingExample, ListingTemplate
from price_scout.services.template_synthesizer import (
    DEFAULT_DESCRIPTION,
    TemplateSynthesizer,
)


class TestTitlePattern(unittest.TestCase):
    """The first title's bracket tag becomes the prefix."""

    def test_no_titles(self) -> None:
        self.assertEqual(
            TemplateSynthesizer.title_pattern([]), "【美品】{productName}"
        )

    def test_keeps_first_bracket_segment(self) -> None:
        self.assertEqual(
            TemplateSynthesizer.title_pattern(
                ["【新品未使用】ポケモン ぬいぐるみ"]
            ),
            "【新品未使用】{productName}",
        )

    def test_only_first_segment_of_first_title(self) -> None:
        self.assertEqual(
            TemplateSynthesizer.title_pattern(
                ["ぬいぐるみ【限定】【送料無料】", "【美品】別の商品"]
            ),
            "【限定】{productName}",
        )

    def test_title_without_brackets(self) -> None:
        self.assertEqual(
            TemplateSynthesizer.title_pattern(["ポケモン ぬいぐるみ"]),
            "【美品】{productName}",
        )

    def test_empty_brackets_are_not_a_segment(self) -> None:
        self.assertEqual(
            TemplateSynthesizer.title_pattern(["【】ぬいぐるみ"]),
            "【美品】{productName}",
        )


class TestDescriptionPattern(unittest.TestCase):
    """The first description line becomes the opener."""

    def test_no_descriptions(self) -> None:
        pattern = TemplateSynthesizer.description_pattern([])
        self.assertEqual(pattern, DEFAULT_DESCRIPTION)
        self.assertTrue(pattern.startswith("{productName}です。"))

    def test_replaces_first_line_only(self) -> None:
        pattern = TemplateSynthesizer.description_pattern(
            ["ピカチュウのぬいぐるみです。\n状態良好です。\n即購入OK"]
        )
        self.assertEqual(
            pattern, "{productName}です。\n状態良好です。\n即購入OK"
        )

    def test_single_line_description(self) -> None:
        self.assertEqual(
            TemplateSynthesizer.description_pattern(["一行だけ"]),
            "{productName}です。",
        )

    def test_crlf_line_breaks_preserved(self) -> None:
        self.assertEqual(
            TemplateSynthesizer.description_pattern(["a\r\nb\r\nc"]),
            "{productName}です。\r\nb\r\nc",
        )

    def test_only_line_feed_ends_first_line(self) -> None:
        """Other Unicode line separators stay inside the first line."""
        self.assertEqual(
            TemplateSynthesizer.description_pattern(["A\u2028B\nC"]),
            "{productName}です。\nC",
        )
        self.assertEqual(
            TemplateSynthesizer.description_pattern(["A\rB\x85D\nC"]),
            "{productName}です。\nC",
        )


class TestSynthesize(unittest.TestCase):
    """End-to-end synthesis from listing examples."""

    def test_zero_examples_gives_defaults(self) -> None:
        template = TemplateSynthesizer.synthesize([])
        self.assertEqual(
            template,
            ListingTemplate(
                title_pattern="【美品】{productName}",
                description_pattern=DEFAULT_DESCRIPTION,
            ),
        )

    def test_unusable_examples_are_ignored(self) -> None:
        examples = [
            ListingExample(url="https://a", title="  ", description=""),
            ListingExample(
                url="https://b",
                title="【美品】ポケモン",
                description="説明\n二行目",
            ),
        ]
        template = TemplateSynthesizer.synthesize(examples)
        self.assertEqual(template.title_pattern, "【美品】{productName}")
        self.assertEqual(
            template.description_pattern, "{productName}です。\n二行目"
        )

    def test_title_and_description_can_come_from_different_examples(
        self,
    ) -> None:
        examples = [
            ListingExample(url="https://a", title="【新品】A"),
            ListingExample(url="https://b", description="x\ny"),
        ]
        template = TemplateSynthesizer.synthesize(examples)
        self.assertEqual(template.title_pattern, "【新品】{productName}")
        self.assertEqual(
            template.description_pattern, "{productName}です。\ny"
        )

    def test_placeholder_always_present(self) -> None:
        for examples in (
            [],
            [ListingExample(url="u", title="t", description="d")],
        ):
            with self.subTest(n=len(examples)):
                template = TemplateSynthesizer.synthesize(examples)
                self.assertIn("{productName}", template.title_pattern)
                self.assertIn("{productName}", template.description_pattern)

    def test_render_substitutes_name(self) -> None:
        template = TemplateSynthesizer.synthesize(
            [ListingExample(url="u", title="【美品】x", description="y\nz")]
        )
        title, description = template.render("ピカチュウ")
        self.assertEqual(title, "【美品】ピカチュウ")
        self.assertEqual(description, "ピカチュウです。\nz")


if __name__ == "__main__":
    unittest.main()
