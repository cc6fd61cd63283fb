from __future__ import annotations

import argparse
import logging
from collections import Counter
from typing import Dict, List, Optional

import pandas as pd

from .classifier import Classifier
from .clean_contacts import BUSINESS_COLUMNS, business_record, drop_empty_rows
from .common import (
    CLASSIFY_REQUIRED,
    ClassificationResult,
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
from .logging_utils import configure_logging, log_summary, timed_run
from .models import CATEGORIES

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ["Category", "Category Reason", "Confidence", "Score", "Original Row", "Upload Flag"]
CLASSIFIED_COLUMNS: List[str] = [header for header, _ in BUSINESS_COLUMNS] + RESULT_COLUMNS

OUTPUT_FILENAME = "classified_contacts.csv"


def classified_record(row: ContactRow, result: ClassificationResult) -> Dict[str, object]:
    if row.full_name and not (row.first_name or row.last_name):
        first, last = split_full_name(row.full_name)
        row = row.replace(first_name=first, last_name=last)
    record: Dict[str, object] = business_record(row)
    record.update(
        {
            "Category": result.category,
            "Category Reason": result.reason,
            "Confidence": result.confidence,
            "Score": result.score,
            "Original Row": result.source_row,
            "Upload Flag": False,
        }
    )
    return record


def classify_rows(rows: List[ContactRow], classifier: Classifier) -> List[ClassificationResult]:
    return [classifier.classify_row(row) for row in rows]


def build(
    args: argparse.Namespace,
    config: Optional[PipelineConfig] = None,
    only_category: Optional[str] = None,
) -> pd.DataFrame:
    config = config or load_config(args)
    df = load_input_frame(config)

    resolution = resolve_columns(df.columns, config.columns.as_dict(), CLASSIFY_REQUIRED)
    resolution.raise_for_missing()

    # a row needs a company name or a description to be classified
    rows = drop_empty_rows(rows_from_frame(df, resolution), ContactRow.lacks_company)
    classifier = Classifier(config.classifier)
    results = classify_rows(rows, classifier)

    counts = Counter({category: 0 for category in CATEGORIES})
    counts.update(result.category for result in results)
    log_summary(logger, "Classification summary", counts)

    records = [
        classified_record(row, result)
        for row, result in zip(rows, results)
        if only_category is None or result.category == only_category
    ]
    return pd.DataFrame(records, columns=CLASSIFIED_COLUMNS)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Classify companies as HVAC, Other or NoDescription from keyword evidence."
    )
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config.")
    parser.add_argument("--contacts-csv", type=str, default=None)
    parser.add_argument("--header-starts-with", type=str, default=None)
    parser.add_argument("--out-dir", type=str, default=None)
    parser.add_argument(
        "--only-category",
        choices=CATEGORIES,
        default=None,
        help="Keep only rows classified into this category.",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override logging level")
    args = parser.parse_args()

    config = load_config(args)
    configure_logging(config, level_override=args.log_level)
    with timed_run(logger, "Classification run"):
        try:
            classified_df = build(args, config=config, only_category=args.only_category)
        except MissingRequiredColumnError as exc:
            logger.error("Aborting, nothing written: %s", exc)
            return 2
        out_path = config.outputs.dir / OUTPUT_FILENAME
        write_frames_atomic([(classified_df, out_path)])

    logger.info("Saved: %s", out_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
