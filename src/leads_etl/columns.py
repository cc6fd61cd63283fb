from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

import pandas as pd

from .models import CONTACT_SLOTS, ContactRow
from .normalization import coerce_to_string

logger = logging.getLogger(__name__)

DEDUPE_REQUIRED: Tuple[str, ...] = ("full_name", "company_cleaned", "website") + CONTACT_SLOTS
CLASSIFY_REQUIRED: Tuple[str, ...] = ("organization", "description")


class MissingRequiredColumnError(ValueError):
    def __init__(self, missing: Sequence[str], headers: Mapping[str, str]):
        self.missing = list(missing)
        self.headers = [headers.get(name, name) for name in self.missing]
        super().__init__("missing required column(s): " + ", ".join(self.headers))


def normalize_header(value: str) -> str:
    return re.sub(r"\s+", " ", str(value or "")).strip().lower()


@dataclass(frozen=True)
class ColumnResolution:
    """Outcome of matching a table header against the canonical schema.

    ``positions`` maps each canonical field that was found to its column
    index; ``missing`` lists required fields that were not.
    """

    positions: Tuple[Tuple[str, int], ...]
    missing: Tuple[str, ...]
    header_names: Tuple[Tuple[str, str], ...]

    @property
    def ok(self) -> bool:
        return not self.missing

    def raise_for_missing(self) -> None:
        if self.missing:
            raise MissingRequiredColumnError(self.missing, dict(self.header_names))


def resolve_columns(
    table_headers: Iterable[str],
    expected_headers: Mapping[str, str],
    required: Iterable[str] = (),
) -> ColumnResolution:
    index_by_header: Dict[str, int] = {}
    for index, header in enumerate(table_headers):
        # first matching header wins when a sheet repeats a column
        index_by_header.setdefault(normalize_header(header), index)

    positions: List[Tuple[str, int]] = []
    for canonical, header in expected_headers.items():
        index = index_by_header.get(normalize_header(header))
        if index is not None:
            positions.append((canonical, index))

    found = {canonical for canonical, _ in positions}
    missing = tuple(name for name in required if name not in found)
    if missing:
        logger.error(
            "Missing required column(s): %s",
            ", ".join(expected_headers.get(name, name) for name in missing),
        )
    return ColumnResolution(
        positions=tuple(positions),
        missing=missing,
        header_names=tuple(expected_headers.items()),
    )


def rows_from_frame(df: pd.DataFrame, resolution: ColumnResolution) -> List[ContactRow]:
    """Turn a raw frame into canonical rows; absent optional columns read as blank.

    ``source_row`` is the file line of each record, counted from the header
    line recorded by ``read_csv_with_optional_header`` (line 1 otherwise).
    """
    first_data_line = int(df.attrs.get("header_line", 1)) + 1
    rows: List[ContactRow] = []
    for offset, values in enumerate(df.itertuples(index=False, name=None)):
        payload = {
            canonical: coerce_to_string(values[index]) for canonical, index in resolution.positions
        }
        rows.append(ContactRow.from_mapping(payload, source_row=first_data_line + offset))
    return rows
