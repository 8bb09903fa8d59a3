# price_scout/models/listing.py

"""Listing examples, synthesized templates and stored template records."""

from dataclasses import dataclass, field
from typing import Any

PRODUCT_NAME_PLACEHOLDER = "{productName}"


@dataclass(frozen=True)
class ListingExample:
    """Title/description pair scraped from one reference listing URL."""

    url: str
    title: str = ""
    description: str = ""

    @property
    def is_usable(self) -> bool:
        """True when at least one of title/description has content."""
        return bool(self.title.strip() or self.description.strip())

    def to_dict(self) -> dict[str, str]:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
        }


@dataclass(frozen=True)
class ListingTemplate:
    """Title and description patterns with a product-name placeholder."""

    title_pattern: str
    description_pattern: str

    def render(self, product_name: str) -> tuple[str, str]:
        """Substitute *product_name* into both patterns."""
        return (
            self.title_pattern.replace(
                PRODUCT_NAME_PLACEHOLDER, product_name
            ),
            self.description_pattern.replace(
                PRODUCT_NAME_PLACEHOLDER, product_name
            ),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title_pattern,
            "description": self.description_pattern,
        }


@dataclass(frozen=True)
class TemplateBuildResult:
    """Outcome of building a template from reference listing URLs."""

    results: list[ListingExample]
    template: ListingTemplate

    def to_dict(self) -> dict[str, Any]:
        """Serialise to ``{results: [...], template: {title, description}}``."""
        return {
            "results": [r.to_dict() for r in self.results],
            "template": self.template.to_dict(),
        }


@dataclass
class TemplateRecord:
    """A listing template saved by the user under a category."""

    id: str
    category: str
    title: str
    description: str
    created_at: str
    updated_at: str

    def render(self, product_name: str) -> tuple[str, str]:
        """Preview the stored template for *product_name*."""
        return ListingTemplate(self.title, self.description).render(
            product_name
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TemplateRecord":
        return cls(
            id=str(data["id"]),
            category=str(data.get("category", "")),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            created_at=str(data.get("createdAt", "")),
            updated_at=str(data.get("updatedAt", "")),
        )


@dataclass
class ProductIdentification:
    """What the image classifier thinks the photographed item is."""

    product_name: str
    category: str = ""
    brand: str = ""
    keywords: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @property
    def search_query(self) -> str:
        """Marketplace query: product name, else first keyword."""
        if self.product_name.strip():
            return self.product_name.strip()
        for keyword in self.keywords:
            if keyword.strip():
                return keyword.strip()
        return "商品"

    def to_dict(self) -> dict[str, Any]:
        return {
            "productName": self.product_name,
            "category": self.category,
            "brand": self.brand,
            "keywords": list(self.keywords),
        }
