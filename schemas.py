"""
Pydantic models shared by every stage of the pivot pipeline.
=============================================================
Strict type enforcement keeps the ragged upload data out of the
aggregation code: anything that reaches `aggregate()` is a validated,
immutable MentionRecord.

Pure data holders. Normalization rules live in mention_normalizer.py and
counting rules live in pivot_aggregation.py.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, FrozenSet, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ═══════════════════════════════════════════════════════════════════════
# KEYWORD TAXONOMY
# ═══════════════════════════════════════════════════════════════════════

class KeywordCategory(BaseModel):
    """One social-needs category and its ordered trigger phrases."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    triggers: Tuple[str, ...] = Field(min_length=1,
        description="Phrases matched case-insensitively as substrings")

    @field_validator("triggers")
    @classmethod
    def _no_blank_triggers(cls, triggers: Tuple[str, ...]) -> Tuple[str, ...]:
        for trigger in triggers:
            if not trigger.strip():
                raise ValueError("trigger phrases must be non-empty")
        return triggers


# ═══════════════════════════════════════════════════════════════════════
# MENTIONS
# ═══════════════════════════════════════════════════════════════════════

class MentionKind(str, Enum):
    """Whether a mention was extracted as a symptom or as a problem (HRSN)."""
    SYMPTOM = "Symptom"
    PROBLEM = "Problem"


class MentionRecord(BaseModel):
    """Canonical mention, after legacy field names have been resolved."""
    model_config = ConfigDict(frozen=True)

    patient_id: str = Field(min_length=1)
    date_of_service: date
    category_value: str = Field(min_length=1,
        description="Symptom segment or HRSN indicator label")
    mention_kind: MentionKind
    hrsn_flag: bool = False
    position_in_text: int = Field(0, ge=0,
        description="Offset in the source note; only used to tell mentions apart")
    linked_diagnosis: str = ""
    linked_diagnostic_category: str = ""
    social_needs: FrozenSet[str] = Field(default_factory=frozenset,
        description="Taxonomy categories the classifier flagged \"Yes\" on the raw row")


class NormalizationReport(BaseModel):
    """How many raw rows survived normalization, and why the rest did not."""
    accepted: int = 0
    rejected: int = 0
    rejected_by_reason: Dict[str, int] = Field(default_factory=dict)
    social_needs_flagged: Dict[str, int] = Field(default_factory=dict,
        description="Accepted records per flagged social-needs category")

    @property
    def total(self) -> int:
        return self.accepted + self.rejected


# ═══════════════════════════════════════════════════════════════════════
# PIVOT TABLE
# ═══════════════════════════════════════════════════════════════════════

class PivotTable(BaseModel):
    """Dense value × date frequency matrix.

    `rows` are ordered by total frequency (highest first), `columns` are date
    labels in chronological order, and `cells[row][column]` exists for every
    pair, zero included, so renderers never need a missing-key check.
    """
    columns: List[str] = Field(default_factory=list)
    rows: List[str] = Field(default_factory=list)
    cells: Dict[str, Dict[str, int]] = Field(default_factory=dict)

    def row_total(self, row: str) -> int:
        return sum(self.cells[row].values())

    def max_value(self) -> int:
        """Largest single cell, the running max a heatmap scales against."""
        return max(
            (count for row in self.cells.values() for count in row.values()),
            default=0,
        )

    def is_empty(self) -> bool:
        return not self.rows
