#!/usr/bin/env python3
"""
PRE-FLIGHT VALIDATION
======================
Run this after editing hrsn_definitions.py or config.py to catch mistakes
before they reach a pivot table.
Checks trigger lists, category names, domain groups and config consistency.

Usage:
    python validate.py              # run all checks
    python validate.py --sample     # also classify a few sample notes
"""

import sys
from collections import Counter

# ═══════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════

PASS = "\033[92mPASS\033[0m"
FAIL = "\033[91mFAIL\033[0m"
WARN = "\033[93mWARN\033[0m"

errors = []
warnings = []


def check(label, passed, detail=""):
    if passed:
        print(f"  [{PASS}] {label}")
    else:
        msg = f"{label}: {detail}" if detail else label
        errors.append(msg)
        print(f"  [{FAIL}] {msg}")


def warn(label, detail=""):
    msg = f"{label}: {detail}" if detail else label
    warnings.append(msg)
    print(f"  [{WARN}] {msg}")


# ═══════════════════════════════════════════════════════════════════
# CHECK 1: TRIGGER LISTS IN hrsn_definitions.py
# ═══════════════════════════════════════════════════════════════════

def check_taxonomy():
    print("\n" + "=" * 60)
    print("CHECK 1: TRIGGER LISTS (hrsn_definitions.py)")
    print("=" * 60)

    from hrsn_definitions import HRSN_KEYWORDS, HRSN_TAXONOMY

    # 1a. Category names unique (dict keys already are; the built tuple must agree)
    names = [category.name for category in HRSN_TAXONOMY]
    dups = [name for name, count in Counter(names).items() if count > 1]
    check("Category names are unique", not dups, f"Duplicated: {dups}")
    check("Taxonomy matches HRSN_KEYWORDS", len(names) == len(HRSN_KEYWORDS))

    for name, triggers in HRSN_KEYWORDS.items():
        # 1b. Non-empty list, no blank triggers
        check(f"'{name}' has triggers", len(triggers) > 0, "Empty trigger list")
        blanks = [i for i, t in enumerate(triggers) if not t.strip()]
        if blanks:
            check(f"No empty triggers in '{name}'", False,
                  f"Empty string at position(s): {blanks}")

        # 1c. Duplicates inside one category
        counts = Counter(t.lower() for t in triggers)
        for trigger, count in counts.items():
            if count > 1:
                warn(f"Duplicate trigger in '{name}'", f'"{trigger}" appears {count} times')

        # 1d. Upper-case triggers still match, but make review harder
        for trigger in triggers:
            if trigger != trigger.lower():
                warn(f"Trigger in '{name}' is not lower-case", f'"{trigger}"')

        # 1e. Suspiciously long entries (likely missing comma = merged strings)
        for i, trigger in enumerate(triggers):
            if len(trigger) > 40:
                warn(f"Trigger #{i+1} in '{name}' is {len(trigger)} chars long "
                     "(possible missing comma?)", f'"{trigger[:40]}..."')
            elif len(trigger) > 20 and " " not in trigger and "-" not in trigger:
                warn(f"Trigger #{i+1} in '{name}' has no spaces and is {len(trigger)} chars",
                     f'"{trigger}" -- likely two triggers merged by a missing comma')

    # 1f. Triggers shared by several categories are allowed, just visible
    owners = {}
    for name, triggers in HRSN_KEYWORDS.items():
        for trigger in triggers:
            owners.setdefault(trigger.lower(), []).append(name)
    shared = {t: cats for t, cats in owners.items() if len(cats) > 1}
    if shared:
        print()
        for trigger, cats in sorted(shared.items()):
            warn(f"Trigger '{trigger}' flags several categories", ", ".join(cats))


# ═══════════════════════════════════════════════════════════════════
# CHECK 2: DOMAIN GROUPS
# ═══════════════════════════════════════════════════════════════════

def check_domain_groups():
    print("\n" + "=" * 60)
    print("CHECK 2: DOMAIN GROUPS (hrsn_definitions.py)")
    print("=" * 60)

    from hrsn_definitions import HRSN_DOMAIN_GROUPS, HRSN_KEYWORDS

    all_grouped = set()
    for group_name, categories in HRSN_DOMAIN_GROUPS.items():
        for name in categories:
            all_grouped.add(name)
            check(f"Domain group '{group_name}' -> '{name}' exists",
                  name in HRSN_KEYWORDS,
                  f"'{name}' is NOT a key in HRSN_KEYWORDS (typo?)")

    ungrouped = set(HRSN_KEYWORDS) - all_grouped
    for name in sorted(ungrouped):
        warn(f"Category '{name}' is not in any domain group",
             "It won't appear in grouped summaries")


# ═══════════════════════════════════════════════════════════════════
# CHECK 3: config.py CONSISTENCY
# ═══════════════════════════════════════════════════════════════════

def check_config():
    print("\n" + "=" * 60)
    print("CHECK 3: CONFIG SETTINGS (config.py)")
    print("=" * 60)

    from datetime import date

    from config import (
        ACCEPTED_DATE_FORMATS, BUBBLE_RADIUS_STEPS, DEFAULT_HEATMAP_THEME,
        EMPTY_TIER, FIELD_FALLBACKS, HEATMAP_THEMES, HEATMAP_TIER_BANDS,
        HEATMAP_TIER_BANDS_RANGE, HRSN_SENTINEL, MAX_PIVOT_ROWS,
        PIVOT_COLUMN_DATE_FORMAT,
    )

    check(f"MAX_PIVOT_ROWS ({MAX_PIVOT_ROWS}) is positive", MAX_PIVOT_ROWS > 0)
    if MAX_PIVOT_ROWS < 50:
        warn(f"MAX_PIVOT_ROWS ({MAX_PIVOT_ROWS}) is low",
             "Most pivots will lose values to truncation")
    check("HRSN_SENTINEL is set", bool(HRSN_SENTINEL.strip()), "HRSN_SENTINEL is empty")

    for field, candidates in FIELD_FALLBACKS.items():
        check(f"Fallback chain '{field}' has candidates", len(candidates) > 0)
        dups = [c for c, n in Counter(candidates).items() if n > 1]
        if dups:
            warn(f"Fallback chain '{field}' repeats names", f"{dups}")

    check("ACCEPTED_DATE_FORMATS has entries", len(ACCEPTED_DATE_FORMATS) > 0)
    sample = date(2024, 1, 31)
    check(f"PIVOT_COLUMN_DATE_FORMAT renders ({sample.strftime(PIVOT_COLUMN_DATE_FORMAT)})",
          bool(sample.strftime(PIVOT_COLUMN_DATE_FORMAT)))

    low, high = HEATMAP_TIER_BANDS_RANGE
    check(f"HEATMAP_TIER_BANDS ({HEATMAP_TIER_BANDS}) within {low}-{high}",
          low <= HEATMAP_TIER_BANDS <= high)
    check(f"EMPTY_TIER ({EMPTY_TIER}) is 0", EMPTY_TIER == 0)
    check(f"DEFAULT_HEATMAP_THEME '{DEFAULT_HEATMAP_THEME}' exists",
          DEFAULT_HEATMAP_THEME in HEATMAP_THEMES)
    for theme, palette in HEATMAP_THEMES.items():
        check(f"Theme '{theme}' has {high} shades", len(palette["bands"]) >= high,
              f"only {len(palette['bands'])}")

    check("BUBBLE_RADIUS_STEPS starts at 0", BUBBLE_RADIUS_STEPS[0] == 0)
    increasing = all(a < b for a, b in zip(BUBBLE_RADIUS_STEPS, BUBBLE_RADIUS_STEPS[1:]))
    check("BUBBLE_RADIUS_STEPS strictly increasing", increasing,
          "A larger count would get a bubble that is not larger")


# ═══════════════════════════════════════════════════════════════════
# CHECK 4: SAMPLE NOTES: preview classifier output
# ═══════════════════════════════════════════════════════════════════

SAMPLE_NOTES = [
    "Patient reports no stable housing and lost job last month.",
    "Staying in shelter since eviction; skipping meals most days.",
    "No transportation to appointments, missed appointment x2.",
    "Routine follow-up. Blood pressure well controlled.",
]


def check_samples():
    print("\n" + "=" * 60)
    print("CHECK 4: SAMPLE NOTES: Classifier Preview")
    print("=" * 60)

    from text_classifier import classify

    for note in SAMPLE_NOTES:
        found = sorted(classify(note))
        print(f"\n  \"{note}\"")
        print(f"    -> {', '.join(found) if found else '(no categories)'}")


def main():
    check_taxonomy()
    check_domain_groups()
    check_config()
    if "--sample" in sys.argv:
        check_samples()

    print("\n" + "=" * 60)
    print(f"SUMMARY: {len(errors)} error(s), {len(warnings)} warning(s)")
    print("=" * 60)
    if errors:
        for e in errors:
            print(f"  - {e}")
        sys.exit(1)
    print("  All checks passed.")


if __name__ == "__main__":
    main()
