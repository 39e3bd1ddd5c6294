"""Pydantic models for customs classification results."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ClassificationMethod(str, Enum):
    """How the classification was determined."""
    TITLE_RULE = "title_rule"
    CATEGORY = "category"
    EXACT_CODE = "exact_code"
    CODE_PREFIX = "code_prefix"
    UNKNOWN = "unknown"


class Classification(BaseModel):
    """Canonical customs classification of one item.

    An unknown classification carries no code/description/origin and is
    routed to manual review by the caller.

    Attributes:
        code: 10-digit harmonized tariff code (digits only)
        description: Canonical customs description
        origin_country: ISO-2 country of origin
        method: Which stage of the cascade produced the result
        rule_name: Name of the matching rule or code-table key
        repaired_code: Existing code after structural repair, if one was attempted
    """

    code: Optional[str] = None
    description: Optional[str] = None
    origin_country: Optional[str] = None
    method: ClassificationMethod = ClassificationMethod.UNKNOWN
    rule_name: Optional[str] = None
    repaired_code: Optional[str] = Field(default=None, max_length=32)

    model_config = {"frozen": True}

    @classmethod
    def unknown(cls, repaired_code: Optional[str] = None) -> "Classification":
        """Build the "unknown" result."""
        return cls(method=ClassificationMethod.UNKNOWN, repaired_code=repaired_code)

    @property
    def is_unknown(self) -> bool:
        """Returns True if nothing resolved."""
        return self.method == ClassificationMethod.UNKNOWN

    @property
    def needs_review(self) -> bool:
        """Returns True if a human has to pick the classification."""
        return self.is_unknown or self.code is None
