# price_scout/services/image_classifier.py

"""Identify a second-hand item from a photo via an OpenAI vision model."""

import base64
import json
import logging
import re
from typing import Any

from openai import OpenAI

from price_scout.config.settings import Settings
from price_scout.models.errors import InvalidRequest
from price_scout.models.listing import ProductIdentification

logger = logging.getLogger("price_scout.vision")

_PROMPT = (
    "この商品の画像を分析して、以下の情報をJSON形式で返してください：\n"
    "- productName: 商品名（できるだけ詳細に。キャラクター名、作品名、"
    "商品タイプを含む）\n"
    "- category: カテゴリー（例：グッズ、おもちゃ、家電など）\n"
    "- brand: ブランド名やメーカー（わかる場合）\n"
    "- keywords: 検索に使えるキーワードの配列（日本語と英語両方）\n\n"
    "JSONのみを返してください。説明文は不要です。"
)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def placeholder(reason: str) -> ProductIdentification:
    """Clearly labelled stand-in used when classification is impossible."""
    return ProductIdentification(
        product_name=f"サンプル商品（{reason}）",
        category="グッズ",
        brand="不明",
        keywords=["sample", "サンプル"],
    )


class ImageClassifier:
    """Ask a vision model what the photographed item is.

    Without ``OPENAI_API_KEY`` every call returns a labelled placeholder
    instead of failing, and so does any error talking to the API.
    """

    def __init__(
        self,
        api_key: str | None = None,
        client: Any = None,
    ) -> None:
        self.settings = Settings()
        self._api_key = (
            api_key if api_key is not None
            else self.settings.OPENAI_API_KEY
        )
        self._client: Any = client
        if self._client is None and self._api_key:
            self._client = OpenAI(api_key=self._api_key)
        if self._client is None:
            logger.warning(
                "OPENAI_API_KEY not set, image classification "
                "returns a placeholder"
            )

    def classify(
        self, image_bytes: bytes, mime_type: str,
    ) -> ProductIdentification:
        """Identify the item in *image_bytes*.

        Raises:
            InvalidRequest: When no image data was supplied.
        """
        if not image_bytes:
            raise InvalidRequest(
                "画像がアップロードされていません", code="no_image"
            )
        if self._client is None:
            return placeholder("APIキー未設定")

        try:
            raw = self._request(image_bytes, mime_type)
            result = self._parse_response(raw)
        except Exception:
            logger.exception("Image classification failed")
            return placeholder("認識エラー")

        logger.info(
            "Identified '%s' (%s)", result.product_name, result.category
        )
        return result

    def _request(self, image_bytes: bytes, mime_type: str) -> str:
        """Send the image to the vision model and return its text reply."""
        encoded = base64.b64encode(image_bytes).decode("ascii")
        response = self._client.chat.completions.create(
            model=self.settings.VISION_MODEL,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": _PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": f"data:{mime_type};base64,{encoded}",
                            },
                        },
                    ],
                },
            ],
            max_tokens=self.settings.VISION_MAX_TOKENS,
        )
        content = response.choices[0].message.content
        if not content:
            raise ValueError("Empty response from vision model")
        return str(content)

    @staticmethod
    def _parse_response(raw: str) -> ProductIdentification:
        """Parse the JSON object out of a (possibly fenced) reply."""
        match = _JSON_OBJECT.search(raw)
        if not match:
            raise ValueError("No JSON object in vision model reply")

        data = json.loads(match.group(0))
        if not isinstance(data, dict):
            raise ValueError("Vision model reply is not an object")

        keywords = data.get("keywords") or []
        if not isinstance(keywords, list):
            keywords = [keywords]
        return ProductIdentification(
            product_name=str(data.get("productName") or "").strip(),
            category=str(data.get("category") or ""),
            brand=str(data.get("brand") or ""),
            keywords=[str(k) for k in keywords if str(k).strip()],
        )
