from __future__ import annotations

import logging
import math
import os
import re
from io import StringIO
from typing import Any, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

TLD_SUFFIXES: Tuple[str, ...] = (".com", ".net", ".org", ".co", ".io", ".biz", ".info", ".us")
SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://")


def normalize_value_key(value: str) -> str:
    """Comparison key for a contact cell: trimmed and lowercased."""
    return (value or "").strip().lower()


def strip_phone_dots(value: str) -> str:
    return (value or "").strip().replace(".", "")


def phone_digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def split_full_name(full_name: str) -> Tuple[str, str]:
    """Split at the token midpoint; the first name takes the extra token."""
    tokens = (full_name or "").split()
    if not tokens:
        return "", ""
    if len(tokens) == 1:
        return tokens[0], ""
    index = math.ceil(len(tokens) / 2)
    return " ".join(tokens[:index]), " ".join(tokens[index:])


def extract_domain(website: str) -> str:
    value = (website or "").strip().lower()
    if not value:
        return ""
    value = SCHEME_RE.sub("", value)
    if "@" in value:
        value = value.split("@", 1)[1]
    if value.startswith("www."):
        value = value[4:]
    value = re.split(r"[/?#]", value, maxsplit=1)[0]
    for suffix in TLD_SUFFIXES:
        if value.endswith(suffix):
            value = value[: -len(suffix)]
            break
    return value


def read_csv_with_optional_header(
    path: Optional[str], header_starts_with: Optional[str] = None
) -> pd.DataFrame:
    """Read a CSV as strings, optionally skipping preamble lines above the header.

    Blank lines are kept as rows so that frame positions line up with file
    lines; ``df.attrs["header_line"]`` holds the 1-based line of the header.
    """
    if not path:
        return pd.DataFrame()
    header_idx = 0
    source: Any = path
    if header_starts_with:
        with open(path, "r", encoding="utf-8", errors="ignore") as handle:
            lines = handle.read().splitlines()
        for index, line in enumerate(lines[:100]):
            if line.strip().startswith(header_starts_with):
                header_idx = index
                source = StringIO("\n".join(lines[index:]))
                break
    df = pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=False)
    df.attrs["header_line"] = header_idx + 1
    return df


def coerce_to_string(value: Any) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value).strip()


def warn_missing(path: Optional[str], label: str) -> bool:
    if not path or not os.path.exists(path):
        logger.warning("%s path missing: %s", label, path)
        return True
    return False
