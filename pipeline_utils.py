"""
Shared Pipeline Utilities
==========================
Blank-value detection, atomic JSON output and logging setup used by the
normalizer and the CLI.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

import pandas as pd

from config import BLANK_MARKERS

logger = logging.getLogger("hrsn_pivot")


# ═══════════════════════════════════════════════════════════════════════
# BLANK VALUES: CSV exports spell "nothing" many different ways
# ═══════════════════════════════════════════════════════════════════════

def is_blank(value) -> bool:
    """True for None, NaN, whitespace, and the literal "null"/"nan"/"None" markers.

    pandas hands us float NaN for empty CSV cells, older exports wrote the
    strings "null" or "undefined", and str(None) leaks in as "None".
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() in BLANK_MARKERS
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Containers are never blank cells
        return False


def clean_text(value) -> str:
    """Stringify and strip a raw cell, mapping blanks to ""."""
    if is_blank(value):
        return ""
    return str(value).strip()


# ═══════════════════════════════════════════════════════════════════════
# ATOMIC JSON OUTPUT: prevents half-written files on interrupt
# ═══════════════════════════════════════════════════════════════════════

def save_json(payload, path: Path):
    """
    Save JSON to disk atomically.

    Writes to a temp file first, then renames. A killed process leaves
    either the old file or the new one, never a truncated one.
    """
    out_dir = path.parent
    out_dir.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=str(out_dir),
        prefix=".pivot_",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        # Atomic rename (same filesystem)
        os.replace(tmp_path, str(path))
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def load_json(path: Path) -> dict:
    """Load a JSON file written by save_json(). Missing or empty file → {}."""
    if path.exists():
        content = path.read_text()
        if content.strip():
            return json.loads(content)
    return {}


# ═══════════════════════════════════════════════════════════════════════
# LOGGING SETUP
# ═══════════════════════════════════════════════════════════════════════

def setup_logging(level: int = logging.INFO):
    """Configure logging for the pivot pipeline."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    ))
    root = logging.getLogger("hrsn_pivot")
    if not root.handlers:
        root.addHandler(handler)
    root.setLevel(level)
    return root
