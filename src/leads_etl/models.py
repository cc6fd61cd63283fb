from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Tuple

HVAC = "HVAC"
OTHER = "Other"
NO_DESCRIPTION = "NoDescription"
CATEGORIES = (HVAC, OTHER, NO_DESCRIPTION)

CONFIDENCE_HIGH = "High"
CONFIDENCE_MEDIUM = "Medium"
CONFIDENCE_LOW = "Low"
CONFIDENCE_NA = "N/A"

EMAIL_SLOTS: Tuple[str, ...] = ("primary_email", "email_1", "email_2", "personal_email")
PHONE_SLOTS: Tuple[str, ...] = (
    "contact_phone_1",
    "company_phone_1",
    "company_phone_2",
    "contact_mobile_phone",
)
CONTACT_SLOTS: Tuple[str, ...] = EMAIL_SLOTS + PHONE_SLOTS


@dataclass(frozen=True)
class KeywordRule:
    phrase: str
    weight: float = 1.0


@dataclass(frozen=True)
class ContactRow:
    """One input record keyed by canonical field name.

    ``source_row`` is the 1-based line of the record in the source file,
    preamble and header lines included.
    """

    source_row: int = 0
    full_name: str = ""
    first_name: str = ""
    last_name: str = ""
    organization: str = ""
    company_cleaned: str = ""
    primary_email: str = ""
    email_1: str = ""
    email_2: str = ""
    personal_email: str = ""
    contact_phone_1: str = ""
    company_phone_1: str = ""
    company_phone_2: str = ""
    contact_mobile_phone: str = ""
    description: str = ""
    website: str = ""
    city: str = ""

    @classmethod
    def from_mapping(cls, payload: Dict[str, Any], source_row: int = 0) -> "ContactRow":
        values = {
            f.name: str(payload.get(f.name, "") or "").strip()
            for f in fields(cls)
            if f.name != "source_row"
        }
        return cls(source_row=source_row, **values)

    def replace(self, **changes: Any) -> "ContactRow":
        return replace(self, **changes)

    def is_empty(self) -> bool:
        return not (self.full_name or self.description)

    def lacks_company(self) -> bool:
        return not (self.organization or self.description)


@dataclass(frozen=True)
class ClassificationResult:
    category: str
    reason: str
    confidence: str
    score: float
    source_row: int = 0
