#!/usr/bin/env python3
"""
Pivot Pipeline Orchestrator
============================
Reads raw mention rows and/or clinical notes from CSV, normalizes them and
writes one pivot table per visualization kind.

Usage:
    python pivot_pipeline.py --mentions data/extracted_symptoms.csv
    python pivot_pipeline.py --notes data/notes.csv --kinds hrsn
    python pivot_pipeline.py --mentions m.csv --notes n.csv --patients 1001,1002
    python pivot_pipeline.py --mentions m.csv --max-rows 50 --output-dir out/

Kinds:
    symptom              symptom segments (Symptom mentions)
    diagnosis            linked diagnoses (Symptom mentions)
    diagnostic_category  linked diagnostic categories (Symptom mentions)
    hrsn                 HRSN indicators (Problem or Z-code mentions)
    all                  every kind

Outputs (in --output-dir):
    pivot_<kind>.json            rows / columns / cells
    pivot_<kind>.csv             same matrix, spreadsheet-friendly
    heatmap_<kind>.png           tiered heatmap (--charts)
    bubble_<kind>.png            bubble chart (--charts)
    notes_classified.csv         one Yes/blank column per HRSN category
    normalization_report.json    accepted / rejected counts by reason
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

from config import (
    DEFAULT_HEATMAP_THEME, HEATMAP_THEMES, MAX_PIVOT_ROWS, OUTPUT_DIR_NAME,
    REPORT_FILE_NAME,
)
from hrsn_definitions import HRSN_TAXONOMY
from mention_normalizer import normalize_records
from pipeline_utils import clean_text, save_json, setup_logging
from pivot_aggregation import ALL_KINDS, aggregate, kind_by_name, pivot_to_frame, select_patients
from pivot_charts import render_bubble_chart, render_heatmap
from text_classifier import classify, classify_frame, mentions_to_raw_records, merge_classification

logger = logging.getLogger("hrsn_pivot")

NOTE_TEXT_COLUMN = "note_text"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Build HRSN / symptom pivot tables from mention and note CSVs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--mentions", type=Path, default=None,
        help="CSV of raw mention rows (any upload era's column names)",
    )
    parser.add_argument(
        "--notes", type=Path, default=None,
        help="CSV of notes with patient_id, dos_date, note_text",
    )
    parser.add_argument(
        "--kinds", type=str, default="all",
        help="Comma-separated kinds: symptom,diagnosis,diagnostic_category,hrsn,all",
    )
    parser.add_argument(
        "--patients", type=str, default=None,
        help="Comma-separated patient ids (default: everyone)",
    )
    parser.add_argument(
        "--max-rows", type=int, default=MAX_PIVOT_ROWS,
        help=f"Rows kept per pivot (default: {MAX_PIVOT_ROWS})",
    )
    parser.add_argument(
        "--output-dir", type=Path, default=Path(__file__).parent / OUTPUT_DIR_NAME,
        help="Directory for pivot outputs",
    )
    parser.add_argument(
        "--charts", action="store_true",
        help="Also render heatmap_<kind>.png and bubble_<kind>.png",
    )
    parser.add_argument(
        "--theme", type=str, default=DEFAULT_HEATMAP_THEME, choices=sorted(HEATMAP_THEMES),
        help=f"Heatmap color theme (default: {DEFAULT_HEATMAP_THEME})",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Debug logging",
    )
    return parser.parse_args(argv)


def _validate_kinds(kinds_str: str) -> list:
    """Parse kind names, catching typos early."""
    if kinds_str.strip().lower() == "all":
        return list(ALL_KINDS)
    try:
        return [kind_by_name(name) for name in kinds_str.split(",") if name.strip()]
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


def _read_csv(path: Path) -> pd.DataFrame:
    """Read a CSV keeping every cell as text (ids like 00123 must survive)."""
    if not path.exists():
        print(f"ERROR: Input not found: {path}")
        sys.exit(1)
    return pd.read_csv(path, dtype=str)


def load_mention_rows(path: Path) -> list[dict]:
    """Raw mention rows; rows carrying note text get classifier flags merged in."""
    df = _read_csv(path)
    rows = df.to_dict("records")
    if NOTE_TEXT_COLUMN in df.columns:
        rows = [
            merge_classification(row, classify(clean_text(row.get(NOTE_TEXT_COLUMN)), HRSN_TAXONOMY))
            for row in rows
        ]
    print(f"  Mention rows loaded: {len(rows):,}")
    return rows


def load_note_rows(path: Path, output_dir: Path) -> list[dict]:
    """HRSN mention rows extracted from note text; also saves the classified notes."""
    df = _read_csv(path)
    df[NOTE_TEXT_COLUMN] = df[NOTE_TEXT_COLUMN].fillna("")
    print(f"  Notes loaded: {len(df):,}")

    classified = classify_frame(df, NOTE_TEXT_COLUMN, HRSN_TAXONOMY)
    output_dir.mkdir(parents=True, exist_ok=True)
    classified.to_csv(output_dir / "notes_classified.csv", index=False)

    rows = []
    for note in df.to_dict("records"):
        rows.extend(mentions_to_raw_records(note, HRSN_TAXONOMY))
    print(f"  HRSN mentions extracted from notes: {len(rows):,}")
    return rows


def main(argv=None):
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.mentions is None and args.notes is None:
        print("ERROR: Nothing to do. Pass --mentions and/or --notes.")
        sys.exit(1)
    if args.max_rows < 0:
        print(f"ERROR: --max-rows must be >= 0, got {args.max_rows}")
        sys.exit(1)

    kinds = _validate_kinds(args.kinds)
    patients = [p.strip() for p in args.patients.split(",")] if args.patients else None

    print("=" * 70)
    print("HRSN PIVOT PIPELINE")
    print("=" * 70)
    print(f"  Kinds:    {', '.join(kind.name for kind in kinds)}")
    print(f"  Patients: {', '.join(patients) if patients else '(all)'}")
    print(f"  Max rows: {args.max_rows}")
    print()

    # ── Load ──────────────────────────────────────────────────────────
    raw_rows = []
    if args.mentions is not None:
        raw_rows.extend(load_mention_rows(args.mentions))
    if args.notes is not None:
        raw_rows.extend(load_note_rows(args.notes, args.output_dir))

    # ── Normalize ─────────────────────────────────────────────────────
    records, report = normalize_records(raw_rows)
    logger.info(f"Normalized {report.accepted:,} of {report.total:,} rows "
                f"({report.rejected:,} rejected)")
    for reason, count in report.rejected_by_reason.items():
        logger.info(f"  rejected {reason}: {count:,}")
    for need, count in report.social_needs_flagged.items():
        logger.info(f"  flagged {need}: {count:,}")
    save_json(report.model_dump(mode="json"), args.output_dir / REPORT_FILE_NAME)

    records = select_patients(records, patients)

    # ── Aggregate ─────────────────────────────────────────────────────
    print(f"\n{'=' * 70}")
    print("PIVOT TABLES")
    print(f"{'=' * 70}")
    for kind in kinds:
        pivot = aggregate(records, kind, args.max_rows)
        save_json(pivot.model_dump(mode="json"), args.output_dir / f"pivot_{kind.name}.json")
        pivot_to_frame(pivot).to_csv(args.output_dir / f"pivot_{kind.name}.csv")
        if args.charts:
            render_heatmap(pivot, args.output_dir / f"heatmap_{kind.name}.png",
                           title=kind.label, theme=args.theme)
            render_bubble_chart(pivot, args.output_dir / f"bubble_{kind.name}.png",
                                title=kind.label, theme=args.theme)
        if pivot.is_empty():
            print(f"  {kind.label:<24s} no data available")
        else:
            print(f"  {kind.label:<24s} {len(pivot.rows):>5,d} rows x {len(pivot.columns):>4,d} dates "
                  f"(max cell {pivot.max_value()})")

    print(f"\nOutputs written to {args.output_dir}")


if __name__ == "__main__":
    main()
