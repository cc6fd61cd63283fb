from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .config_loader import ClassifierConfig
from .models import (
    CONFIDENCE_HIGH,
    CONFIDENCE_LOW,
    CONFIDENCE_MEDIUM,
    CONFIDENCE_NA,
    HVAC,
    NO_DESCRIPTION,
    OTHER,
    ClassificationResult,
    ContactRow,
    KeywordRule,
)
from .normalization import extract_domain

logger = logging.getLogger(__name__)


def keyword_variations(phrase: str) -> List[str]:
    """Morphological variants: plural toggle plus hyphen/space/joined forms."""
    phrase = phrase.lower()
    variants = [phrase]
    variants.append(phrase[:-1] if phrase.endswith("s") else phrase + "s")
    if "-" in phrase:
        variants.append(phrase.replace("-", " "))
        variants.append(phrase.replace("-", ""))
    if " " in phrase:
        variants.append(phrase.replace(" ", "-"))
        variants.append(phrase.replace(" ", ""))
    return [variant for variant in variants if variant]


def fuzzy_match(phrase: str, text: str, threshold: Optional[float] = None) -> bool:
    # threshold is accepted for configuration compatibility and not used
    if not phrase:
        return False
    return any(variant in text for variant in keyword_variations(phrase))


def _first_match(
    rules: Sequence[KeywordRule], text: str, threshold: Optional[float]
) -> Optional[KeywordRule]:
    return next((rule for rule in rules if fuzzy_match(rule.phrase, text, threshold)), None)


def _plain_score(rules: Iterable[KeywordRule], *texts: str) -> float:
    return sum(
        rule.weight for rule in rules if any(rule.phrase.lower() in text for text in texts)
    )


def hvac_phrase_weight(phrase: str) -> float:
    if "hvac" in phrase:
        return 5.0
    if len(phrase) > 15:
        return 3.0
    return 1.0


class Classifier:
    """Assign HVAC / Other / NoDescription to a company row.

    Stages run in a fixed order and the first one that decides wins:
    missing description, trade exclusions, HVAC scoring, generic fallback,
    then the Other default. Exclusions always beat HVAC evidence.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None):
        self.config = config or ClassifierConfig()

    @property
    def exclusion_families(self) -> Tuple[Tuple[str, Sequence[KeywordRule]], ...]:
        return (
            ("plumbing", self.config.plumbing),
            ("electrical", self.config.electrical),
            ("other trades", self.config.other_trades),
        )

    def classify(
        self, name: str, description: str, website: str, source_row: int = 0
    ) -> ClassificationResult:
        cfg = self.config
        name_lower = (name or "").strip().lower()
        description_lower = (description or "").strip().lower()
        domain = extract_domain(website)

        if len(description_lower) < cfg.min_description_length:
            score = _plain_score(cfg.no_description, name_lower, domain)
            if score >= cfg.no_description_threshold:
                return ClassificationResult(
                    HVAC, "name suggests HVAC", CONFIDENCE_LOW, score, source_row
                )
            return ClassificationResult(
                NO_DESCRIPTION, "no company description", CONFIDENCE_NA, score, source_row
            )

        text = " ".join([name_lower, description_lower, domain])

        for family, rules in self.exclusion_families:
            matched = _first_match(rules, text, cfg.fuzzy_threshold)
            if matched is not None:
                return ClassificationResult(
                    OTHER,
                    f"{family} business ({matched.phrase})",
                    CONFIDENCE_HIGH,
                    0.0,
                    source_row,
                )

        matches = [
            rule.phrase for rule in cfg.hvac if fuzzy_match(rule.phrase, text, cfg.fuzzy_threshold)
        ]
        score = sum(hvac_phrase_weight(phrase) for phrase in matches)
        if score >= cfg.medium_threshold:
            confidence = CONFIDENCE_HIGH if score >= cfg.high_threshold else CONFIDENCE_MEDIUM
            return ClassificationResult(
                HVAC,
                "HVAC keywords: " + ", ".join(matches[:3]),
                confidence,
                score,
                source_row,
            )

        generic_score = _plain_score(cfg.generic, text)
        if matches and generic_score >= cfg.generic_threshold:
            return ClassificationResult(
                HVAC,
                f"weak HVAC signal ({matches[0]}) with generic service terms",
                CONFIDENCE_LOW,
                score,
                source_row,
            )

        return ClassificationResult(
            OTHER, "no HVAC keywords found", CONFIDENCE_HIGH, score, source_row
        )

    def classify_row(self, row: ContactRow) -> ClassificationResult:
        return self.classify(row.organization, row.description, row.website, row.source_row)


__all__ = ["Classifier", "fuzzy_match", "hvac_phrase_weight", "keyword_variations"]
