# price_scout/services/template_synthesizer.py

"""Derive a reusable listing template from reference listings."""

import logging
import re

from price_scout.models.listing import (
    PRODUCT_NAME_PLACEHOLDER,
    ListingExample,
    ListingTemplate,
)

logger = logging.getLogger("price_scout.templates")

DEFAULT_TITLE_PREFIX = "【美品】"

DEFAULT_DESCRIPTION = f"""{PRODUCT_NAME_PLACEHOLDER}です。

【商品の状態】
目立った傷や汚れはありません。
写真でご確認ください。

【発送について】
24時間以内に発送いたします。
丁寧な梱包を心がけます。

【注意事項】
自宅保管品のため、神経質な方はご遠慮ください。
即購入OKです！

よろしくお願いいたします。"""

OPENING_LINE = f"{PRODUCT_NAME_PLACEHOLDER}です。"

_BRACKET_SEGMENT = re.compile(r"【[^】]+】")


class TemplateSynthesizer:
    """Learn title/description patterns from example listings.

    Only the first usable title and the first usable description shape
    the patterns; later examples are ignored.
    """

    @staticmethod
    def title_pattern(titles: list[str]) -> str:
        """Keep the first title's 【...】 tag, else use 【美品】."""
        if not titles:
            return DEFAULT_TITLE_PREFIX + PRODUCT_NAME_PLACEHOLDER

        match = _BRACKET_SEGMENT.search(titles[0])
        prefix = match.group(0) if match else DEFAULT_TITLE_PREFIX
        return prefix + PRODUCT_NAME_PLACEHOLDER

    @staticmethod
    def description_pattern(descriptions: list[str]) -> str:
        """Swap the first line of the first description for the opener."""
        if not descriptions:
            return DEFAULT_DESCRIPTION

        first, sep, rest = descriptions[0].partition("\n")
        line_break = ("\r" if first.endswith("\r") else "") + sep
        template = OPENING_LINE + line_break + rest
        return template if template.strip() else DEFAULT_DESCRIPTION

    @classmethod
    def synthesize(
        cls, examples: list[ListingExample],
    ) -> ListingTemplate:
        """Build a :class:`ListingTemplate` from *examples*."""
        usable = [e for e in examples if e.is_usable]
        titles = [e.title for e in usable if e.title.strip()]
        descriptions = [
            e.description for e in usable if e.description.strip()
        ]
        logger.info(
            "Synthesizing template from %d examples "
            "(%d titles, %d descriptions)",
            len(usable),
            len(titles),
            len(descriptions),
        )
        return ListingTemplate(
            title_pattern=cls.title_pattern(titles),
            description_pattern=cls.description_pattern(descriptions),
        )
