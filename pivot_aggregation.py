"""
Mention Aggregation Engine
===========================
Turns canonical MentionRecords into dense value × date pivot tables.

Five phases, always in this order (each feeds the next):

  1. FILTER       keep records matching the kind's predicate and carrying
                  a non-empty counted value
  2. TOTALS       dedup-count per value (first sighting of a key counts)
  3. RANK         sort by total, highest first, ties alphabetical; keep
                  the top `max_rows`
  4. CELLS        dedup-count per (value, date) with the same keys, kept
                  values only
  5. RESHAPE      chronological date columns, dense zero-filled cells

WHAT COUNTS AS A DUPLICATE
==========================
Every kind carries its own dedup key builder (see VisualizationKind).
All keys include position_in_text, so two mentions at different places
in the same note both count, while a mention re-imported twice at the same
offset collapses to one. Keys are built from the counted value, so in the
diagnosis pivots several symptoms linked to one diagnosis at the same
offset are a single mention. Diagnosis keys also carry the linked
diagnosis and category, so one symptom can feed several diagnosis rows
without being mistaken for a copy of itself.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, Optional, Union

import numpy as np
import pandas as pd

from config import MAX_PIVOT_ROWS, PIVOT_COLUMN_DATE_FORMAT
from schemas import MentionKind, MentionRecord, PivotTable

logger = logging.getLogger("hrsn_pivot")


# ═══════════════════════════════════════════════════════════════════════
# VISUALIZATION KINDS: predicate, counted value and dedup key as data
# ═══════════════════════════════════════════════════════════════════════

def _is_symptom(record: MentionRecord) -> bool:
    return record.mention_kind is MentionKind.SYMPTOM


def _is_hrsn(record: MentionRecord) -> bool:
    return record.hrsn_flag


def _mention_key(record: MentionRecord) -> tuple:
    return (
        record.patient_id,
        record.category_value.casefold(),
        record.date_of_service,
        record.position_in_text,
    )


def _diagnosis_value(record: MentionRecord) -> str:
    return record.linked_diagnosis


def _diagnostic_category_value(record: MentionRecord) -> str:
    return record.linked_diagnostic_category


def _linked_mention_key(row_value: Callable[[MentionRecord], str]):
    """Key builder for the diagnosis-based kinds.

    Keyed on the counted value (not the symptom), so several symptoms linked
    to one diagnosis at the same offset count once.
    """
    def key(record: MentionRecord) -> tuple:
        return (
            record.patient_id,
            row_value(record).casefold(),
            record.date_of_service,
            record.linked_diagnosis,
            record.linked_diagnostic_category,
            record.position_in_text,
        )
    return key


@dataclass(frozen=True)
class VisualizationKind:
    """One pivot flavour: which records it reads, what it counts, what is a repeat."""
    name: str
    label: str
    predicate: Callable[[MentionRecord], bool]
    row_value: Callable[[MentionRecord], str]
    dedup_key: Callable[[MentionRecord], Hashable]


SYMPTOM = VisualizationKind(
    name="symptom",
    label="Symptoms",
    predicate=_is_symptom,
    row_value=lambda record: record.category_value,
    dedup_key=_mention_key,
)

DIAGNOSIS = VisualizationKind(
    name="diagnosis",
    label="Diagnoses",
    predicate=_is_symptom,
    row_value=_diagnosis_value,
    dedup_key=_linked_mention_key(_diagnosis_value),
)

DIAGNOSTIC_CATEGORY = VisualizationKind(
    name="diagnostic_category",
    label="Diagnostic Categories",
    predicate=_is_symptom,
    row_value=_diagnostic_category_value,
    dedup_key=_linked_mention_key(_diagnostic_category_value),
)

HRSN = VisualizationKind(
    name="hrsn",
    label="HRSN Indicators",
    predicate=_is_hrsn,
    row_value=lambda record: record.category_value,
    dedup_key=_mention_key,
)

ALL_KINDS = (SYMPTOM, DIAGNOSIS, DIAGNOSTIC_CATEGORY, HRSN)

# Older API routes and pages spelled the category pivot two other ways
_KIND_ALIASES = {
    "category": DIAGNOSTIC_CATEGORY,
    "diagnostic-category": DIAGNOSTIC_CATEGORY,
    "diagnosticcategory": DIAGNOSTIC_CATEGORY,
}


def kind_by_name(name: str) -> VisualizationKind:
    """Look up a kind by name or legacy alias (case-insensitive)."""
    key = name.strip().lower()
    for kind in ALL_KINDS:
        if kind.name == key:
            return kind
    if key in _KIND_ALIASES:
        return _KIND_ALIASES[key]
    valid = sorted([kind.name for kind in ALL_KINDS] + list(_KIND_ALIASES))
    raise ValueError(f"Unknown visualization kind {name!r}. Valid: {valid}")


# ═══════════════════════════════════════════════════════════════════════
# PATIENT SELECTION
# ═══════════════════════════════════════════════════════════════════════

def select_patients(
    records: Iterable[MentionRecord],
    patient_ids: Optional[Union[str, Iterable[str]]] = None,
) -> list[MentionRecord]:
    """Records for one patient, a set of patients, or everyone (None/empty)."""
    records = list(records)
    if patient_ids is None:
        return records
    if isinstance(patient_ids, str):
        wanted = {patient_ids}
    else:
        wanted = set(patient_ids)
    if not wanted:
        return records
    return [record for record in records if record.patient_id in wanted]


# ═══════════════════════════════════════════════════════════════════════
# AGGREGATION
# ═══════════════════════════════════════════════════════════════════════

def rank_values(totals: dict[str, int]) -> list[str]:
    """Values by total descending; equal totals fall back to alphabetical order."""
    return sorted(totals, key=lambda value: (-totals[value], value.casefold(), value))


def aggregate(
    records: Iterable[MentionRecord],
    kind: VisualizationKind,
    max_rows: int = MAX_PIVOT_ROWS,
) -> PivotTable:
    """
    Build the pivot table for one visualization kind.

    Args:
        records: canonical mention records (already patient-selected)
        kind: one of ALL_KINDS
        max_rows: keep at most this many rows, the most frequent ones

    Returns:
        A dense PivotTable. No records, or none surviving the kind's filter,
        gives the empty table (no rows, no columns, no cells).
    """
    if max_rows < 0:
        raise ValueError(f"max_rows must be >= 0, got {max_rows}")

    # ── Phase 1: filter ────────────────────────────────────────────
    survivors = [
        record for record in records
        if kind.predicate(record) and kind.row_value(record)
    ]
    logger.debug(f"{kind.name}: {len(survivors)} records after filter")
    if not survivors:
        return PivotTable()

    # ── Phase 2: totals, first sighting of each key counts ────────
    totals = Counter()
    seen = set()
    for record in survivors:
        key = kind.dedup_key(record)
        if key in seen:
            continue
        seen.add(key)
        totals[kind.row_value(record)] += 1

    # ── Phase 3: rank and truncate ────────────────────────────────
    ranked = rank_values(totals)[:max_rows]
    kept = set(ranked)
    if len(totals) > len(ranked):
        logger.debug(f"{kind.name}: truncated {len(totals)} values to top {len(ranked)}")

    # ── Phase 4: cell counts ──────────────────────────────────────
    # Keys are marked before the kept-check so this pass makes exactly
    # the same first-sighting decisions as phase 2.
    cell_counts = defaultdict(Counter)
    seen = set()
    for record in survivors:
        key = kind.dedup_key(record)
        if key in seen:
            continue
        seen.add(key)
        value = kind.row_value(record)
        if value in kept:
            cell_counts[value][record.date_of_service] += 1

    # ── Phase 5: reshape ──────────────────────────────────────────
    dates = sorted({record.date_of_service for record in survivors})
    columns = []
    for day in dates:
        label = day.strftime(PIVOT_COLUMN_DATE_FORMAT)
        if label not in columns:
            columns.append(label)

    cells = {}
    for value in ranked:
        row = dict.fromkeys(columns, 0)
        for day, count in cell_counts[value].items():
            row[day.strftime(PIVOT_COLUMN_DATE_FORMAT)] += count
        cells[value] = row

    logger.debug(f"{kind.name}: {len(ranked)} rows x {len(columns)} columns")
    return PivotTable(columns=columns, rows=ranked, cells=cells)


def build_all_pivots(
    records: Iterable[MentionRecord],
    max_rows: int = MAX_PIVOT_ROWS,
    kinds: Iterable[VisualizationKind] = ALL_KINDS,
) -> dict[str, PivotTable]:
    """One pivot per kind over the same record set, keyed by kind name."""
    records = list(records)
    return {kind.name: aggregate(records, kind, max_rows) for kind in kinds}


# ═══════════════════════════════════════════════════════════════════════
# EXPORT
# ═══════════════════════════════════════════════════════════════════════

def pivot_to_frame(pivot: PivotTable) -> pd.DataFrame:
    """Pivot as a rows × columns integer DataFrame (same order as the table)."""
    matrix = np.array(
        [[pivot.cells[row][column] for column in pivot.columns] for row in pivot.rows],
        dtype=int,
    ).reshape(len(pivot.rows), len(pivot.columns))
    return pd.DataFrame(matrix, index=pd.Index(pivot.rows, name="value"),
                        columns=pivot.columns)
