"""Row-level and field-level duplicate removal for contact rows."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set

from .models import CONTACT_SLOTS, ContactRow
from .normalization import normalize_value_key

logger = logging.getLogger(__name__)


def composite_key(row: ContactRow) -> str:
    """``name|company|website``, each part trimmed and lowercased.

    The company part is "Company Name - Cleaned" only. Blank parts still take
    part in equality, so rows missing identity fields can collide.
    """
    return "|".join(
        normalize_value_key(part) for part in (row.full_name, row.company_cleaned, row.website)
    )


def dedupe_rows(rows: Iterable[ContactRow]) -> List[ContactRow]:
    seen: Set[str] = set()
    kept: List[ContactRow] = []
    for row in rows:
        key = composite_key(row)
        if key in seen:
            logger.info("Dropping duplicate row %d (key %s)", row.source_row, key)
            continue
        seen.add(key)
        kept.append(row)
    return kept


def dedupe_fields(row: ContactRow) -> ContactRow:
    """Clear repeated email/phone values within one row.

    Only the eight contact slots are inspected, in declared order. The first
    occurrence keeps its trimmed original text; later ones are blanked.
    """
    seen: Set[str] = set()
    changes: Dict[str, str] = {}
    for slot in CONTACT_SLOTS:
        value = getattr(row, slot).strip()
        if not value:
            continue
        key = normalize_value_key(value)
        if key in seen:
            changes[slot] = ""
        else:
            seen.add(key)
            changes[slot] = value
    return row.replace(**changes)
