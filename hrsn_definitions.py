"""
SINGLE SOURCE OF TRUTH for HRSN (health-related social needs) keywords.
All classification code must import from here; no duplicating phrases.

Each trigger is matched as a plain, case-insensitive SUBSTRING of the note
text. There is no stemming, no fuzzy matching and no negation handling:
"no stable housing" and "has stable housing" look the same to a trigger
like "stable housing", so prefer phrases that only occur in the needy sense.

HOW TO EDIT THIS FILE
=====================
- Run `python validate.py` AFTER every edit to catch mistakes.
- Each category is: "category_name": ["trigger one", "trigger two", ...],
- Keep triggers lower-case. Matching case-folds both sides anyway, but
  lower-case lists are easier to review for duplicates.
- Don't forget the comma at the end of each trigger!
  (A missing comma silently merges two strings, a Python quirk.)
- Short triggers match inside longer words: "gas" also hits "gastric".
  Pad with a space ("gas ") or use a longer phrase when that matters.

Trigger order only decides which phrase is reported as the match position
for note-level mention extraction. Category membership never depends on it.
"""

from schemas import KeywordCategory

# ── HRSN KEYWORDS ─────────────────────────────────────────────────
# IMPORTANT: every line MUST end with a comma. Run `python validate.py`.

HRSN_KEYWORDS = {
    "access_to_health_care": [
        "healthcare access", "medical care", "insurance", "health insurance",
        "uninsured", "medicaid", "medicare", "clinic access", "specialist access",
        "prescription access", "healthcare cost", "medical cost", "cannot afford",
        "delayed care", "missed appointment",
    ],
    "clothing": [
        "clothing", "clothes", "apparel", "garments", "wardrobe", "outfit",
        "need clothes", "lack clothing", "winter clothes", "work clothes",
    ],
    "disabilities": [
        "disability", "disabled", "handicap", "impairment", "mobility",
        "wheelchair", "blind", "deaf", "intellectual disability",
        "developmental delay", "autism", "adhd", "learning disability",
    ],
    "education": [
        "education", "school", "college", "university", "diploma", "ged ",
        "degree", "literacy", "math skills", "dropout", "graduation",
        "educational attainment", "academic",
    ],
    "employment": [
        "employment", "job", "career", "occupation", "unemployed", "jobless",
        "fired", "laid off", "workless", "seeking work", "job search",
        "workplace", "employer", "income from work", "lost work",
    ],
    "family_and_community_support": [
        "family support", "community support", "social support", "relatives",
        "neighbors", "church", "congregation", "support group",
        "no family nearby", "no one to help",
    ],
    "finances_financial_stress": [
        "financial stress", "money stress", "financial worry",
        "financial anxiety", "money problems", "financial burden",
        "debt stress", "bill stress", "financial pressure", "economic stress",
    ],
    "finances_income_poverty": [
        "poverty", "low income", "financial hardship", "bankrupt", "welfare",
        "tanf", "ssi ", "ssdi", "social security", "government assistance",
        "public assistance",
    ],
    "financial_strain": [
        "financial strain", "money tight", "financial difficulty", "cash flow",
        "budget", "debt", "bills", "expenses", "afford", "financial crisis",
        "economic hardship",
    ],
    "food_insecurity": [
        "food insecurity", "hunger", "hungry", "starving", "malnutrition",
        "food stamps", "snap benefits", "food bank", "food pantry",
        "meals on wheels", "free lunch", "cannot afford food", "skip meals",
        "skipping meals", "food shortage",
    ],
    "general_non_specific": [
        "social determinant", "social issue", "life stress", "personal problem",
        "family issue", "social problem", "life challenge", "hardship",
    ],
    "has_a_car": [
        "no car", "reliable car", "own car", "family car", "personal vehicle",
        "car broke down", "lost license", "vehicle",
    ],
    "homelessness": [
        "homeless", "homelessness", "without home", "no home",
        "living on street", "living on the street", "couch surfing",
        "transient",
    ],
    "housing_housing_instability_insecurity": [
        "housing instability", "housing insecurity", "no stable housing",
        "unstable housing", "eviction", "evicted", "foreclosure",
        "rent behind", "behind on rent", "housing crisis", "temporary housing",
        "housing stress", "moving frequently", "lost housing",
    ],
    "housing_poor_housing_quality_inadequate_housing": [
        "poor housing", "inadequate housing", "substandard housing",
        "housing quality", "mold", "leaks", "pests", "unsafe housing",
        "overcrowded", "no heat", "no hot water", "housing conditions",
    ],
    "immigration_migration": [
        "immigration", "immigrant", "migration", "migrant", "refugee",
        "asylum", "undocumented", "deportation", "visa", "green card",
        "citizenship", "naturalization",
    ],
    "incarceration": [
        "incarceration", "incarcerated", "prison", "jail", "arrested",
        "convicted", "criminal justice", "probation", "parole",
        "legal trouble",
    ],
    "mental_health": [
        "depression", "anxiety", "mental health", "psychiatric", "therapy",
        "counseling", "suicidal", "bipolar", "schizophrenia", "ptsd",
        "emotional", "psychological",
    ],
    "physical_activity": [
        "exercise", "physical activity", "fitness", "sports", "gym",
        "sedentary", "inactive", "physical fitness",
    ],
    "primary_language": [
        "primary language", "interpreter", "translation", "bilingual",
        "language barrier", "limited english", "does not speak english",
        "native language",
    ],
    "safety_child_abuse": [
        "child abuse", "child neglect", "child protection", "cps",
        "foster care", "child welfare", "physical abuse", "sexual abuse",
        "emotional abuse",
    ],
    "safety_general_safety": [
        "feels unsafe", "personal safety", "danger", "threat", "violence",
        "crime", "assault", "robbery", "burglary",
    ],
    "safety_intimate_partner_violence": [
        "domestic violence", "intimate partner violence",
        "abusive relationship", "domestic abuse", "partner abuse",
        "spousal abuse", "ipv",
    ],
    "safety_neighborhood_safety": [
        "neighborhood safety", "community safety", "gang", "drug activity",
        "crime rate", "unsafe neighborhood", "violence in area",
    ],
    "sheltered_homelessness": [
        "homeless shelter", "shelter", "transitional housing",
        "emergency housing", "temporary shelter", "staying in shelter",
    ],
    "social_connections_isolation": [
        "social isolation", "lonely", "alone", "isolated", "no friends",
        "social connection", "community connection", "social network",
    ],
    "stress": [
        "stress", "stressed", "overwhelmed", "pressure", "tension", "worry",
        "burden", "strain",
    ],
    "substance_use": [
        "alcohol", "drug use", "substance", "addiction", "alcoholism",
        "drinking", "cocaine", "heroin", "marijuana", "opioid", "dependency",
        "recovery", "sobriety",
    ],
    "transportation": [
        "transportation", "bus", "subway", "taxi", "uber", "lyft",
        "public transit", "ride to", "getting around",
    ],
    "transportation_insecurity": [
        "transportation insecurity", "no transportation",
        "cannot get around", "transportation barrier", "no ride",
        "stranded",
    ],
    "unsheltered_homelessness": [
        "unsheltered", "sleeping outside", "living outdoors", "rough sleeping",
        "street sleeping", "sleeping in car", "tent",
    ],
    "utility_insecurity": [
        "utility", "utilities", "electricity", "gas bill", "water bill",
        "air conditioning", "utility bill", "shut off", "disconnected",
        "no power",
    ],
    "veteran_status": [
        "veteran", "military", "army", "navy", "air force", "marines",
        "service member", "combat", "deployment", "veterans affairs",
    ],
}

# ── DOMAIN GROUPINGS (for grouped summaries) ─────────────────────
HRSN_DOMAIN_GROUPS = {
    "Housing": [
        "homelessness", "sheltered_homelessness", "unsheltered_homelessness",
        "housing_housing_instability_insecurity",
        "housing_poor_housing_quality_inadequate_housing",
        "utility_insecurity",
    ],
    "Economic Stability": [
        "employment", "finances_financial_stress", "finances_income_poverty",
        "financial_strain", "food_insecurity", "clothing",
    ],
    "Transportation": [
        "transportation", "transportation_insecurity", "has_a_car",
    ],
    "Safety": [
        "safety_child_abuse", "safety_general_safety",
        "safety_intimate_partner_violence", "safety_neighborhood_safety",
        "incarceration",
    ],
    "Health & Behavior": [
        "access_to_health_care", "disabilities", "mental_health",
        "physical_activity", "stress", "substance_use",
    ],
    "Social & Community Context": [
        "family_and_community_support", "social_connections_isolation",
        "education", "immigration_migration", "primary_language",
        "veteran_status", "general_non_specific",
    ],
}

# Built once at import time and never mutated afterwards.
HRSN_TAXONOMY = tuple(
    KeywordCategory(name=name, triggers=tuple(triggers))
    for name, triggers in HRSN_KEYWORDS.items()
)

HRSN_CATEGORY_NAMES = tuple(category.name for category in HRSN_TAXONOMY)


def get_category(name: str) -> KeywordCategory:
    """Look up one category of the built-in taxonomy by name."""
    for category in HRSN_TAXONOMY:
        if category.name == name:
            return category
    raise KeyError(f"Unknown HRSN category: {name!r}")
