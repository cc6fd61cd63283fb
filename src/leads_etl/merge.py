from __future__ import annotations

import logging
from typing import Dict, Set

from .models import ContactRow
from .normalization import normalize_value_key, phone_digits, strip_phone_dots

logger = logging.getLogger(__name__)

PHONE_MERGE_ORDER = ("contact_phone_1", "company_phone_1", "company_phone_2")


def merge_emails(row: ContactRow) -> ContactRow:
    primary, email_1, email_2 = row.primary_email, row.email_1, row.email_2
    if not primary and email_1:
        primary, email_1 = email_1, ""

    p, e1, e2 = (normalize_value_key(v) for v in (primary, email_1, email_2))
    if p and p == e1 == e2:
        # email 1 is the slot that survives a three-way tie
        primary, email_2 = "", ""
    elif p and p == e1:
        primary = ""
    elif p and p == e2:
        primary = ""
    elif e1 and e1 == e2:
        email_2 = ""

    return row.replace(primary_email=primary, email_1=email_1, email_2=email_2)


def merge_phones(row: ContactRow) -> ContactRow:
    mobile = strip_phone_dots(row.contact_mobile_phone)
    mobile_digits = phone_digits(mobile)

    claimed: Set[str] = set()
    changes: Dict[str, str] = {"contact_mobile_phone": mobile}
    for slot in PHONE_MERGE_ORDER:
        value = strip_phone_dots(getattr(row, slot))
        digits = phone_digits(value)
        if not digits:
            # nothing to compare: kept as written and never claims a number
            changes[slot] = value
        elif mobile_digits and digits == mobile_digits:
            logger.debug("Row %d: %s duplicates the mobile number", row.source_row, slot)
            changes[slot] = ""
        elif digits in claimed:
            logger.debug("Row %d: %s duplicates an earlier phone", row.source_row, slot)
            changes[slot] = ""
        else:
            claimed.add(digits)
            changes[slot] = value
    return row.replace(**changes)
