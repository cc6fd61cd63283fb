from __future__ import annotations

import argparse
import logging
from collections import Counter
from typing import Callable, Iterable, List, Optional, Tuple

import pandas as pd

from .common import (
    DEDUPE_REQUIRED,
    ContactRow,
    MissingRequiredColumnError,
    load_config,
    load_input_frame,
    resolve_columns,
    rows_from_frame,
    split_full_name,
    write_frames_atomic,
)
from .config_loader import PipelineConfig
from .dedupe import dedupe_fields, dedupe_rows
from .logging_utils import configure_logging, log_summary, timed_run
from .merge import merge_emails, merge_phones

logger = logging.getLogger(__name__)

BUSINESS_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("Contact Full Name", "full_name"),
    ("First Name", "first_name"),
    ("Last Name", "last_name"),
    ("Organization", "organization"),
    ("Primary Email", "primary_email"),
    ("Email 1", "email_1"),
    ("Email 2", "email_2"),
    ("Personal Email", "personal_email"),
    ("Contact Phone 1", "contact_phone_1"),
    ("Company Phone 1", "company_phone_1"),
    ("Company Phone 2", "company_phone_2"),
    ("Contact Mobile Phone", "contact_mobile_phone"),
    ("Company Description", "description"),
    ("Website", "website"),
    ("Company City", "city"),
)
CLEANED_COLUMNS: List[str] = [header for header, _ in BUSINESS_COLUMNS] + ["Validation Status"]

OUTPUT_FILENAME = "cleaned_contacts.csv"


def drop_empty_rows(
    rows: Iterable[ContactRow], is_empty: Callable[[ContactRow], bool] = ContactRow.is_empty
) -> List[ContactRow]:
    kept = []
    for row in rows:
        if is_empty(row):
            logger.debug("Skipping empty row %d", row.source_row)
            continue
        kept.append(row)
    return kept


def with_split_name(row: ContactRow) -> ContactRow:
    if not row.full_name:
        return row
    first, last = split_full_name(row.full_name)
    return row.replace(first_name=first, last_name=last)


def clean_row(row: ContactRow) -> ContactRow:
    row = dedupe_fields(row)
    row = merge_emails(row)
    row = merge_phones(row)
    return with_split_name(row)


def business_record(row: ContactRow) -> dict:
    return {header: getattr(row, canonical) for header, canonical in BUSINESS_COLUMNS}


def clean_rows(rows: List[ContactRow]) -> Tuple[List[ContactRow], Counter]:
    stats: Counter = Counter(rows_read=len(rows))
    present = drop_empty_rows(rows)
    stats["empty_skipped"] = len(rows) - len(present)
    unique = dedupe_rows(present)
    stats["duplicates_dropped"] = len(present) - len(unique)
    cleaned = [clean_row(row) for row in unique]
    stats["rows_written"] = len(cleaned)
    return cleaned, stats


def build(args: argparse.Namespace, config: Optional[PipelineConfig] = None) -> pd.DataFrame:
    config = config or load_config(args)
    df = load_input_frame(config)

    resolution = resolve_columns(df.columns, config.columns.as_dict(), DEDUPE_REQUIRED)
    resolution.raise_for_missing()

    cleaned, stats = clean_rows(rows_from_frame(df, resolution))
    log_summary(logger, "Cleaning summary", stats)

    records = []
    for row in cleaned:
        record = business_record(row)
        record["Validation Status"] = ""
        records.append(record)
    return pd.DataFrame(records, columns=CLEANED_COLUMNS)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Deduplicate contact rows and normalize their email, phone and name fields."
    )
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config.")
    parser.add_argument("--contacts-csv", type=str, default=None)
    parser.add_argument("--header-starts-with", type=str, default=None)
    parser.add_argument("--out-dir", type=str, default=None)
    parser.add_argument("--log-level", type=str, default=None, help="Override logging level")
    args = parser.parse_args()

    config = load_config(args)
    configure_logging(config, level_override=args.log_level)
    with timed_run(logger, "Cleaning run"):
        try:
            cleaned_df = build(args, config=config)
        except MissingRequiredColumnError as exc:
            logger.error("Aborting, nothing written: %s", exc)
            return 2
        out_path = config.outputs.dir / OUTPUT_FILENAME
        write_frames_atomic([(cleaned_df, out_path)])

    logger.info("Saved: %s", out_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
