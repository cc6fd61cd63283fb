from __future__ import annotations

import csv
import os
import tempfile
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from .columns import (
    CLASSIFY_REQUIRED,
    DEDUPE_REQUIRED,
    ColumnResolution,
    MissingRequiredColumnError,
    resolve_columns,
    rows_from_frame,
)
from .config_loader import PipelineConfig, load_pipeline_config
from .models import ClassificationResult, ContactRow, KeywordRule
from .normalization import (
    extract_domain,
    read_csv_with_optional_header,
    split_full_name,
    warn_missing,
)

__all__ = [
    "CLASSIFY_REQUIRED",
    "DEDUPE_REQUIRED",
    "ClassificationResult",
    "ColumnResolution",
    "ContactRow",
    "KeywordRule",
    "MissingRequiredColumnError",
    "PipelineConfig",
    "extract_domain",
    "load_config",
    "load_input_frame",
    "load_pipeline_config",
    "read_csv_with_optional_header",
    "resolve_columns",
    "rows_from_frame",
    "split_full_name",
    "warn_missing",
    "write_frames_atomic",
]


def load_config(args: Any) -> PipelineConfig:
    return load_pipeline_config(args)


def load_input_frame(config: PipelineConfig) -> pd.DataFrame:
    path = config.inputs.contacts_csv
    if warn_missing(path, "Contacts CSV"):
        raise FileNotFoundError(f"contacts CSV not found: {path}")
    return read_csv_with_optional_header(path, config.inputs.header_starts_with)


def write_frames_atomic(targets: Sequence[tuple[pd.DataFrame, Path]]) -> None:
    """Write every frame to a temp file first, then move them all into place.

    A failure while rendering any frame leaves the existing outputs untouched.
    """
    staged: list[tuple[str, Path]] = []
    try:
        for frame, target in targets:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
            )
            os.close(fd)
            staged.append((tmp_path, target))
            frame.to_csv(tmp_path, index=False, encoding="utf-8", quoting=csv.QUOTE_ALL)
        for tmp_path, target in staged:
            os.replace(tmp_path, target)
    finally:
        for tmp_path, _ in staged:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
