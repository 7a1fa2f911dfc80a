"""
Keyword Text Classifier
========================
Maps free-text clinical notes onto the HRSN taxonomy by plain substring
matching. Deterministic: the same note and taxonomy always give the same
answer, and nothing here touches state outside its arguments.

  classify()                 note → set of category names (presence only)
  extract_mentions()         note → one mention per matched category, with
                             offset and surrounding context
  mentions_to_raw_records()  note row → raw mention rows ready for the
                             normalizer
  merge_classification()     stamp "Yes" flags onto a raw record
  classify_frame()           DataFrame version of classify(), one column
                             per category
"""

from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd

from config import (
    CLASSIFIER_FLAG_VALUE, CONTEXT_WINDOW, HRSN_DIAGNOSIS_PREFIX,
    HRSN_DIAGNOSTIC_CATEGORY, HRSN_SENTINEL,
)
from hrsn_definitions import HRSN_TAXONOMY
from mention_normalizer import resolve_field
from schemas import KeywordCategory, MentionKind


def classify(note_text: str, taxonomy: Iterable[KeywordCategory] = HRSN_TAXONOMY) -> set[str]:
    """Return the names of every category with a trigger inside `note_text`.

    The note is case-folded once; each category stops scanning at its first
    hit. Which trigger matched, and how often, is deliberately not recorded.
    """
    text = note_text.casefold()
    if not text:
        return set()
    return {
        category.name
        for category in taxonomy
        if any(trigger.casefold() in text for trigger in category.triggers)
    }


def _first_match(text: str, category: KeywordCategory) -> Optional[tuple[int, str]]:
    """(offset, trigger) of the first trigger in list order that occurs in text."""
    for trigger in category.triggers:
        folded = trigger.casefold()
        index = text.find(folded)
        if index != -1:
            return index, folded
    return None


def extract_mentions(
    note_text: str,
    taxonomy: Iterable[KeywordCategory] = HRSN_TAXONOMY,
    context_window: int = CONTEXT_WINDOW,
) -> list[dict]:
    """
    Locate one mention per matched category in a note.

    Only one instance per category per note is kept, so a note that says
    "homeless" five times still yields a single homelessness mention.

    Returns:
        List of {"category", "position", "context"} dicts in taxonomy order.
        `position` indexes the case-folded note, which lines up with the
        original text for everything except the rare characters whose
        case-fold changes length (e.g. "ß").
    """
    folded = note_text.casefold()
    mentions = []
    for category in taxonomy:
        match = _first_match(folded, category)
        if match is None:
            continue
        position, trigger = match
        start = max(0, position - context_window)
        end = min(len(note_text), position + len(trigger) + context_window)
        mentions.append({
            "category": category.name,
            "position": position,
            "context": note_text[start:end].strip(),
        })
    return mentions


def mentions_to_raw_records(
    note: dict,
    taxonomy: Iterable[KeywordCategory] = HRSN_TAXONOMY,
) -> list[dict]:
    """
    Turn one note row into raw HRSN mention rows.

    The rows use the same field names as uploaded mention CSVs, so they go
    through the normalizer like any other upload. Every row is a Problem
    carrying the HRSN sentinel.

    Args:
        note: dict with "note_text", a patient id and a date of service under
              any of their FIELD_FALLBACKS spellings, and optionally
              "provider_id"
    """
    patient_id = resolve_field(note, "patient_id")
    service_date = resolve_field(note, "date_of_service")
    rows = []
    for mention in extract_mentions(note.get("note_text") or "", taxonomy):
        rows.append({
            "patient_id": patient_id,
            "dos_date": service_date,
            "provider_id": note.get("provider_id"),
            "symptom_segment": mention["category"],
            "symptom_text": mention["context"],
            "symp_prob": MentionKind.PROBLEM.value,
            "zcode_hrsn": HRSN_SENTINEL,
            "diagnosis": f"{HRSN_DIAGNOSIS_PREFIX}{mention['category']}",
            "diagnostic_category": HRSN_DIAGNOSTIC_CATEGORY,
            "position_in_text": mention["position"],
        })
    return rows


def merge_classification(raw_record: dict, categories: Iterable[str]) -> dict:
    """Copy of `raw_record` with a "Yes" flag for each matched category.

    Unmatched categories are left out rather than written as "No"; an
    existing value on the record is overwritten only by a match.
    """
    merged = dict(raw_record)
    for name in categories:
        merged[name] = CLASSIFIER_FLAG_VALUE
    return merged


def classify_frame(
    df: pd.DataFrame,
    text_column: str = "note_text",
    taxonomy: Iterable[KeywordCategory] = HRSN_TAXONOMY,
) -> pd.DataFrame:
    """Add one "Yes"/"" column per category to a copy of a notes DataFrame."""
    taxonomy = tuple(taxonomy)
    out = df.copy()
    matches = out[text_column].fillna("").astype(str).map(
        lambda text: classify(text, taxonomy)
    )
    for category in taxonomy:
        out[category.name] = matches.map(
            lambda found, name=category.name: CLASSIFIER_FLAG_VALUE if name in found else ""
        )
    return out
