"""
Mention Normalizer
===================
The one place where upload-era messiness is allowed to live.

Raw mention rows arrive with whatever field names and casing the CSV of
their era used ("symptom_segment", "symptomSegment", "Symptom_Segment", …).
Each logical field has an ordered fallback chain in config.FIELD_FALLBACKS;
the first candidate holding a non-blank value wins.

Rows that cannot be made canonical are rejected, never patched up:
  - no patient id
  - no category value
  - a date that is missing or not in an accepted shape
  - a symp_prob that is neither Symptom nor Problem

normalize_record() returns None for a rejection. normalize_records() drops
rejections silently but counts them by reason in a NormalizationReport.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime
from typing import Iterable, Optional

import pandas as pd

from config import (
    ACCEPTED_DATE_FORMATS, CLASSIFIER_FLAG_VALUE, FIELD_FALLBACKS,
    HRSN_SENTINEL,
)
from hrsn_definitions import HRSN_CATEGORY_NAMES
from pipeline_utils import clean_text, is_blank
from schemas import MentionKind, MentionRecord, NormalizationReport

PROBLEM_PREFIX = "Problem:"

REJECT_MISSING_PATIENT = "missing_patient_id"
REJECT_MISSING_VALUE = "missing_category_value"
REJECT_BAD_DATE = "unparseable_date"
REJECT_UNKNOWN_KIND = "unknown_mention_kind"


def resolve_field(raw: dict, logical_name: str):
    """First non-blank value among the candidate spellings of a logical field."""
    for candidate in FIELD_FALLBACKS[logical_name]:
        value = raw.get(candidate)
        if not is_blank(value):
            return value
    return None


def parse_service_date(value) -> Optional[date]:
    """
    Parse a date of service in one of the accepted shapes.

    Accepts date/datetime/Timestamp objects, ISO "YYYY-MM-DD" (a trailing
    "T..." time part is ignored) and month-first slash dates with a two- or
    four-digit year. Returns None for anything else; callers reject the
    record rather than guess.
    """
    if is_blank(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if "T" in text and "-" in text:
        text = text.split("T", 1)[0]
    for fmt in ACCEPTED_DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt).date()
        except ValueError:
            continue
        if fmt.endswith("%y"):
            # strptime pivots at 69 (→ 1969); uploads only ever mean 20YY
            parsed = parsed.replace(year=2000 + parsed.year % 100)
        return parsed
    return None


def parse_mention_kind(value, indicator: str) -> Optional[MentionKind]:
    """Symptom/Problem from the raw symp_prob value.

    A missing value falls back on the HRSN indicator: sentinel → Problem,
    anything else → Symptom. An unrecognised value returns None.
    """
    if is_blank(value):
        return MentionKind.PROBLEM if indicator == HRSN_SENTINEL else MentionKind.SYMPTOM
    text = str(value).strip().lower()
    for kind in MentionKind:
        if kind.value.lower() == text:
            return kind
    return None


def parse_position(value) -> int:
    """Non-negative integer offset; anything unusable becomes 0."""
    if is_blank(value):
        return 0
    try:
        position = int(float(value))
    except (TypeError, ValueError):
        return 0
    return max(0, position)


def _category_value(raw: dict) -> str:
    value = clean_text(resolve_field(raw, "category_value"))
    if value.startswith(PROBLEM_PREFIX):
        value = value[len(PROBLEM_PREFIX):].strip()
    return value


def _social_needs(raw: dict) -> frozenset:
    return frozenset(
        name for name in HRSN_CATEGORY_NAMES
        if clean_text(raw.get(name)) == CLASSIFIER_FLAG_VALUE
    )


def _rejection_reason(raw: dict) -> Optional[str]:
    if not clean_text(resolve_field(raw, "patient_id")):
        return REJECT_MISSING_PATIENT
    if not _category_value(raw):
        return REJECT_MISSING_VALUE
    if parse_service_date(resolve_field(raw, "date_of_service")) is None:
        return REJECT_BAD_DATE
    indicator = clean_text(resolve_field(raw, "hrsn_indicator"))
    if parse_mention_kind(resolve_field(raw, "mention_kind"), indicator) is None:
        return REJECT_UNKNOWN_KIND
    return None


def normalize_record(raw: dict) -> Optional[MentionRecord]:
    """Canonical MentionRecord for one raw row, or None if it is rejected."""
    if _rejection_reason(raw) is not None:
        return None

    indicator = clean_text(resolve_field(raw, "hrsn_indicator"))
    kind = parse_mention_kind(resolve_field(raw, "mention_kind"), indicator)
    return MentionRecord(
        patient_id=clean_text(resolve_field(raw, "patient_id")),
        date_of_service=parse_service_date(resolve_field(raw, "date_of_service")),
        category_value=_category_value(raw),
        mention_kind=kind,
        hrsn_flag=kind is MentionKind.PROBLEM or indicator == HRSN_SENTINEL,
        position_in_text=parse_position(resolve_field(raw, "position_in_text")),
        linked_diagnosis=clean_text(resolve_field(raw, "linked_diagnosis")),
        linked_diagnostic_category=clean_text(resolve_field(raw, "linked_diagnostic_category")),
        social_needs=_social_needs(raw),
    )


def normalize_records(raws: Iterable[dict]) -> tuple[list[MentionRecord], NormalizationReport]:
    """
    Normalize a batch of raw rows.

    Rejected rows are left out of the returned list; the report says how
    many were dropped and why, so the caller can decide whether to surface it.
    It also counts accepted records per classifier-flagged social need.
    """
    records = []
    reasons = Counter()
    needs = Counter()
    for raw in raws:
        reason = _rejection_reason(raw)
        if reason is not None:
            reasons[reason] += 1
            continue
        record = normalize_record(raw)
        needs.update(record.social_needs)
        records.append(record)

    report = NormalizationReport(
        accepted=len(records),
        rejected=sum(reasons.values()),
        rejected_by_reason=dict(sorted(reasons.items())),
        social_needs_flagged=dict(sorted(needs.items())),
    )
    return records, report
