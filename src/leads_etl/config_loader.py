from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml  # type: ignore[import-untyped]

from .models import KeywordRule


DEFAULT_HEADERS: Dict[str, str] = {
    "full_name": "Contact Full Name",
    "first_name": "First Name",
    "last_name": "Last Name",
    "organization": "Organization",
    "company_cleaned": "Company Name - Cleaned",
    "primary_email": "Primary Email",
    "email_1": "Email 1",
    "email_2": "Email 2",
    "personal_email": "Personal Email",
    "contact_phone_1": "Contact Phone 1",
    "company_phone_1": "Company Phone 1",
    "company_phone_2": "Company Phone 2",
    "contact_mobile_phone": "Contact Mobile Phone",
    "description": "Company Description",
    "website": "Website",
    "city": "Company City",
}

NO_DESCRIPTION_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule("hvac", 5.0),
    KeywordRule("air conditioning", 4.0),
    KeywordRule("heating", 3.5),
    KeywordRule("cooling", 3.5),
    KeywordRule("furnace", 3.0),
    KeywordRule("heat pump", 3.0),
    KeywordRule("refrigeration", 3.0),
    KeywordRule("ductwork", 3.0),
    KeywordRule("climate", 2.0),
    KeywordRule("mechanical", 2.0),
    KeywordRule("comfort", 1.5),
    KeywordRule("thermal", 1.5),
)

PLUMBING_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule("plumbing contractor", 1.0),
    KeywordRule("plumbing company", 1.0),
    KeywordRule("plumbing service", 1.0),
    KeywordRule("plumber", 1.0),
    KeywordRule("drain cleaning", 1.0),
    KeywordRule("sewer line", 1.0),
    KeywordRule("rooter", 1.0),
)

ELECTRICAL_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule("electrical contractor", 1.0),
    KeywordRule("electrical service", 1.0),
    KeywordRule("electrical repair", 1.0),
    KeywordRule("electrician", 1.0),
    KeywordRule("panel upgrade", 1.0),
    KeywordRule("generator installation", 1.0),
)

OTHER_TRADE_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule("roofing", 1.0),
    KeywordRule("roofer", 1.0),
    KeywordRule("landscaping", 1.0),
    KeywordRule("lawn care", 1.0),
    KeywordRule("pest control", 1.0),
    KeywordRule("painting contractor", 1.0),
    KeywordRule("general contractor", 1.0),
    KeywordRule("home builder", 1.0),
    KeywordRule("custom home", 1.0),
    KeywordRule("flooring", 1.0),
    KeywordRule("pool service", 1.0),
    KeywordRule("carpet cleaning", 1.0),
    KeywordRule("tree service", 1.0),
    KeywordRule("auto repair", 1.0),
)

HVAC_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule("hvac", 1.0),
    KeywordRule("hvac contractor", 1.0),
    KeywordRule("hvac repair", 1.0),
    KeywordRule("hvac installation", 1.0),
    KeywordRule("heating and cooling", 1.0),
    KeywordRule("heating & cooling", 1.0),
    KeywordRule("air conditioning", 1.0),
    KeywordRule("air conditioner", 1.0),
    KeywordRule("heat pump", 1.0),
    KeywordRule("furnace", 1.0),
    KeywordRule("boiler", 1.0),
    KeywordRule("ductwork", 1.0),
    KeywordRule("duct cleaning", 1.0),
    KeywordRule("ductless mini split", 1.0),
    KeywordRule("mini-split", 1.0),
    KeywordRule("refrigeration", 1.0),
    KeywordRule("mechanical contractor", 1.0),
    KeywordRule("indoor air quality", 1.0),
    KeywordRule("climate control", 1.0),
    KeywordRule("geothermal", 1.0),
    KeywordRule("thermostat", 1.0),
)

GENERIC_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule("service", 0.5),
    KeywordRule("repair", 0.5),
    KeywordRule("installation", 0.5),
    KeywordRule("maintenance", 0.5),
    KeywordRule("residential", 0.5),
    KeywordRule("commercial", 0.5),
    KeywordRule("emergency", 0.5),
    KeywordRule("licensed", 0.5),
    KeywordRule("insured", 0.5),
)


@dataclass(frozen=True)
class InputsConfig:
    contacts_csv: Optional[str] = None
    header_starts_with: Optional[str] = None


@dataclass(frozen=True)
class OutputsConfig:
    dir: Path


@dataclass(frozen=True)
class ColumnsConfig:
    headers: Tuple[Tuple[str, str], ...] = tuple(DEFAULT_HEADERS.items())

    def header_for(self, canonical: str) -> str:
        return dict(self.headers).get(canonical, canonical)

    def as_dict(self) -> Dict[str, str]:
        return dict(self.headers)


@dataclass(frozen=True)
class ClassifierConfig:
    no_description_threshold: float = 3.0
    high_threshold: float = 5.0
    medium_threshold: float = 2.0
    generic_threshold: float = 1.0
    min_description_length: int = 5
    fuzzy_threshold: float = 0.8
    no_description: Tuple[KeywordRule, ...] = NO_DESCRIPTION_RULES
    plumbing: Tuple[KeywordRule, ...] = PLUMBING_RULES
    electrical: Tuple[KeywordRule, ...] = ELECTRICAL_RULES
    other_trades: Tuple[KeywordRule, ...] = OTHER_TRADE_RULES
    hvac: Tuple[KeywordRule, ...] = HVAC_RULES
    generic: Tuple[KeywordRule, ...] = GENERIC_RULES


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "WARNING"


@dataclass(frozen=True)
class PipelineConfig:
    inputs: InputsConfig
    outputs: OutputsConfig
    columns: ColumnsConfig = field(default_factory=ColumnsConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _load_yaml(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _parse_rules(
    raw: Optional[Iterable[Any]], default: Tuple[KeywordRule, ...], default_weight: float = 1.0
) -> Tuple[KeywordRule, ...]:
    """Accept ``[phrase, weight]`` pairs, ``{phrase:, weight:}`` maps or bare phrases."""
    if raw is None:
        return default
    rules = []
    for entry in raw:
        if isinstance(entry, dict):
            phrase, weight = entry.get("phrase", ""), entry.get("weight", default_weight)
        elif isinstance(entry, (list, tuple)):
            phrase = entry[0]
            weight = entry[1] if len(entry) > 1 else default_weight
        else:
            phrase, weight = entry, default_weight
        phrase = str(phrase or "").strip().lower()
        if phrase:
            rules.append(KeywordRule(phrase, float(weight)))
    return tuple(rules)


def _build_classifier_config(classifier_cfg: Dict[str, Any]) -> ClassifierConfig:
    defaults = ClassifierConfig()
    return ClassifierConfig(
        no_description_threshold=float(
            classifier_cfg.get("no_description_threshold", defaults.no_description_threshold)
        ),
        high_threshold=float(classifier_cfg.get("high_threshold", defaults.high_threshold)),
        medium_threshold=float(classifier_cfg.get("medium_threshold", defaults.medium_threshold)),
        generic_threshold=float(
            classifier_cfg.get("generic_threshold", defaults.generic_threshold)
        ),
        min_description_length=int(
            classifier_cfg.get("min_description_length", defaults.min_description_length)
        ),
        fuzzy_threshold=float(classifier_cfg.get("fuzzy_threshold", defaults.fuzzy_threshold)),
        no_description=_parse_rules(
            classifier_cfg.get("no_description"), defaults.no_description
        ),
        plumbing=_parse_rules(classifier_cfg.get("plumbing"), defaults.plumbing),
        electrical=_parse_rules(classifier_cfg.get("electrical"), defaults.electrical),
        other_trades=_parse_rules(classifier_cfg.get("other_trades"), defaults.other_trades),
        hvac=_parse_rules(classifier_cfg.get("hvac"), defaults.hvac),
        generic=_parse_rules(classifier_cfg.get("generic"), defaults.generic, 0.5),
    )


def load_pipeline_config(args: argparse.Namespace) -> PipelineConfig:
    config_data = _load_yaml(getattr(args, "config", None))
    inputs_cfg = config_data.get("inputs", {}) or {}
    outputs_cfg = config_data.get("outputs", {}) or {}
    columns_cfg = config_data.get("columns", {}) or {}
    classifier_cfg = config_data.get("classifier", {}) or {}
    logging_cfg = config_data.get("logging", {}) or {}

    inputs = InputsConfig(
        contacts_csv=getattr(args, "contacts_csv", None) or inputs_cfg.get("contacts_csv"),
        header_starts_with=getattr(args, "header_starts_with", None)
        or inputs_cfg.get("header_starts_with"),
    )

    outputs_dir = Path(getattr(args, "out_dir", None) or outputs_cfg.get("dir") or os.getcwd())
    outputs = OutputsConfig(dir=outputs_dir)

    headers = dict(DEFAULT_HEADERS)
    for canonical, header in columns_cfg.items():
        if canonical not in DEFAULT_HEADERS:
            raise ValueError(f"Unknown column in config: {canonical!r}")
        headers[canonical] = str(header)
    columns = ColumnsConfig(headers=tuple(headers.items()))

    arg_level = getattr(args, "log_level", None)
    effective_level = (arg_level or logging_cfg.get("level") or "WARNING").upper()

    return PipelineConfig(
        inputs=inputs,
        outputs=outputs,
        columns=columns,
        classifier=_build_classifier_config(classifier_cfg),
        logging=LoggingConfig(level=effective_level),
    )
