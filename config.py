"""
PIPELINE CONFIGURATION
=======================
This is the ONLY file you need to edit when tuning the pivot pipeline.
Every other module imports from here. No hardcoded values elsewhere.

──────────────────────────────────────────────────────────────────────
WHAT LIVES HERE
──────────────────────────────────────────────────────────────────────
  - Scale guard for pivot tables (MAX_PIVOT_ROWS)
  - The HRSN sentinel written by the Z-code classification
  - Legacy field-name fallback chains, one list per logical field
  - Accepted textual date shapes
  - Heatmap tier bands, bubble radius steps and color themes
  - Output locations for the CLI

The keyword taxonomy itself lives in hrsn_definitions.py.
After editing, run:  python validate.py
──────────────────────────────────────────────────────────────────────
"""

# ── PIVOT SCALE GUARD ─────────────────────────────────────────────
# Rows kept per pivot after ranking by total frequency. Datasets with
# thousands of distinct values lose their long tail past this point.
MAX_PIVOT_ROWS = 400

# Column labels are rendered from parsed dates with this format.
# Columns are always ordered by the date itself, never by the label.
PIVOT_COLUMN_DATE_FORMAT = "%Y-%m-%d"

# ── HRSN CLASSIFICATION ──────────────────────────────────────────
# Value of the raw indicator field that marks a Z-code / HRSN mention
HRSN_SENTINEL = "ZCode/HRSN"
# Value written into a record for each category the classifier matched
CLASSIFIER_FLAG_VALUE = "Yes"
# Written on mention rows produced from note text
HRSN_DIAGNOSIS_PREFIX = "HRSN: "
HRSN_DIAGNOSTIC_CATEGORY = "Social Determinants of Health"
# Characters of note text kept on each side of a trigger match
CONTEXT_WINDOW = 50

# ── LEGACY FIELD NAMES ────────────────────────────────────────────
# Ordered fallback chains: the first candidate holding a non-blank value
# wins. Uploads from different eras used different spellings and casing.
# Add new spellings at the END so older data keeps resolving the same way.
FIELD_FALLBACKS = {
    "patient_id": [
        "patient_id", "patientId", "Patient_ID", "PATIENT_ID", "patient id",
    ],
    "date_of_service": [
        "dos_date", "dosDate", "DOS_Date", "date_of_service", "dateOfService",
        "service_date", "note_date", "date",
    ],
    "category_value": [
        "symptom_segment", "symptomSegment", "Symptom_Segment",
        "SYMPTOM_SEGMENT", "symptom_segments", "segment",
    ],
    "mention_kind": [
        "symp_prob", "sympProb", "Symp_Prob", "SYMP_PROB",
    ],
    "hrsn_indicator": [
        "zcode_hrsn", "ZCode_HRSN", "zCodeHrsn", "z_code_hrsn", "ZCODE_HRSN",
    ],
    "position_in_text": [
        "position_in_text", "positionInText", "Position_In_Text", "position",
    ],
    "linked_diagnosis": [
        "diagnosis", "Diagnosis", "DIAGNOSIS",
    ],
    "linked_diagnostic_category": [
        "diagnostic_category", "diagnosticCategory", "Diagnostic_Category",
        "DIAGNOSTIC_CATEGORY",
    ],
}

# Strings that mean "no value" in exported CSVs
BLANK_MARKERS = {"", "null", "undefined", "nan", "none"}

# ── DATE SHAPES ──────────────────────────────────────────────────
# Slash dates are month-first. Two-digit years are 20YY.
ACCEPTED_DATE_FORMATS = [
    "%Y-%m-%d",     # 2024-01-31
    "%m/%d/%Y",     # 1/31/2024
    "%m/%d/%y",     # 1/31/24
]

# ── HEATMAP COLOR TIERS ───────────────────────────────────────────
EMPTY_TIER = 0
HEATMAP_TIER_BANDS = 6                       # renderers use 6-8 bands
HEATMAP_TIER_BANDS_RANGE = (6, 8)

# Lightest → darkest, one color per band (8 listed so any band count fits)
HEATMAP_THEMES = {
    "iridis": {
        "empty": "#FFFFFF",
        "bands": ["#F8F8FF", "#E6E6FA", "#CCCCFF", "#B19CD9",
                  "#9370DB", "#7B52C7", "#6A0DAD", "#4B0082"],
    },
    "viridis": {
        "empty": "#FFFFFF",
        "bands": ["#FDE725", "#B5DE2B", "#5DC963", "#21A585",
                  "#21908C", "#2C728E", "#3B528B", "#440154"],
    },
    "grayscale": {
        "empty": "#FFFFFF",
        "bands": ["#F0F0F0", "#DDDDDD", "#BBBBBB", "#999999",
                  "#777777", "#555555", "#333333", "#000000"],
    },
    "amber": {
        "empty": "#FFFFFF",
        "bands": ["#FFFBEB", "#FEF3C7", "#FDE68A", "#FCD34D",
                  "#FBBF24", "#F59E0B", "#D97706", "#B45309"],
    },
}
DEFAULT_HEATMAP_THEME = "iridis"

# ── BUBBLE RADIUS ─────────────────────────────────────────────────
# Pixel radius per frequency. Index = value; values past the end use the
# last entry. Must never decrease (validate.py checks this).
BUBBLE_RADIUS_STEPS = [0, 5, 7, 9, 11, 13, 15, 17, 19, 21, 23]

# ── CLI OUTPUT ────────────────────────────────────────────────────
OUTPUT_DIR_NAME = "pivot_output"
REPORT_FILE_NAME = "normalization_report.json"

# ── CHARTS (pivot_pipeline.py --charts) ───────────────────────────
# PNG heatmaps stay readable up to about this many rows; the pivot JSON
# and CSV always carry every row.
CHART_MAX_ROWS = 40
