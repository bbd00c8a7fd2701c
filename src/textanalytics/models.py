"""
PII recognition result models.

Contains Pydantic models for personally identifiable information recognized
by the text analytics service. Offsets and lengths are counted in unicode
code points, which matches Python string indexing.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class PiiEntityCategory:
    """Well-known PII categories. The service may return others."""

    PERSON = "Person"
    PERSON_TYPE = "PersonType"
    PHONE_NUMBER = "PhoneNumber"
    ORGANIZATION = "Organization"
    ADDRESS = "Address"
    EMAIL = "Email"
    URL = "URL"
    IP_ADDRESS = "IPAddress"
    DATE_TIME = "DateTime"
    QUANTITY = "Quantity"
    US_SOCIAL_SECURITY_NUMBER = "USSocialSecurityNumber"
    CREDIT_CARD_NUMBER = "CreditCardNumber"
    INTERNATIONAL_BANKING_ACCOUNT_NUMBER = "InternationalBankingAccountNumber"


class PiiEntity(BaseModel):
    """
    A word or phrase identified as personally identifiable information.

    Built once from a service response and never modified afterwards.
    """

    text: str = Field(..., description="Entity text as it appears in the input document")
    category: str = Field(..., description="Entity category inferred by the service", min_length=1)
    sub_category: str | None = Field(
        default=None, description="Entity sub category, when the category has one"
    )
    offset: int = Field(..., ge=0, description="Start position of the text, in code points")
    length: int = Field(..., ge=0, description="Length of the text, in code points")
    score: float = Field(..., ge=0.0, le=1.0, description="Confidence between 0 and 1")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "text": "859-98-0987",
                    "category": "USSocialSecurityNumber",
                    "sub_category": None,
                    "offset": 28,
                    "length": 11,
                    "score": 0.65,
                }
            ]
        },
    }

    @field_validator("sub_category")
    @classmethod
    def empty_sub_category_is_absent(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def end(self) -> int:
        return self.offset + self.length

    def matches(self, document: str) -> bool:
        """Check that the span lies within the document and covers this entity's text."""
        if self.end > len(document):
            return False
        return document[self.offset : self.end] == self.text

    @staticmethod
    def _get_field(row: dict[str, Any], snake: str, camel: str) -> Any:
        """Get a field from row, checking snake_case then camelCase."""
        value = row.get(snake)
        return value if value is not None else row.get(camel)

    @classmethod
    def from_service(cls, row: dict[str, Any]) -> "PiiEntity":
        """
        Create from a service response entity.

        Handles both camelCase and snake_case field names.

        Args:
            row: Dict with entity fields

        Returns:
            PiiEntity instance
        """
        return cls(
            text=row.get("text", ""),
            category=row.get("category", ""),
            sub_category=cls._get_field(row, "sub_category", "subcategory")
            or row.get("subCategory"),
            offset=row.get("offset", 0),
            length=row.get("length", 0),
            score=cls._get_field(row, "score", "confidenceScore"),
        )


class PiiEntityCollection(BaseModel):
    """PII entities recognized in one document, with the service's redacted text."""

    id: str | None = None
    redacted_text: str = ""
    entities: list[PiiEntity] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    def by_category(self, category: str) -> list[PiiEntity]:
        return [entity for entity in self.entities if entity.category == category]

    def __len__(self) -> int:
        return len(self.entities)

    @classmethod
    def from_service(cls, document: dict[str, Any]) -> "PiiEntityCollection":
        """Create from a service response document."""
        warnings = [
            w.get("message", "") if isinstance(w, dict) else str(w)
            for w in document.get("warnings", [])
        ]
        return cls(
            id=document.get("id"),
            redacted_text=document.get("redactedText") or document.get("redacted_text") or "",
            entities=[PiiEntity.from_service(e) for e in document.get("entities", [])],
            warnings=warnings,
        )
