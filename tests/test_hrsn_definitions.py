import pytest
from pydantic import ValidationError

from hrsn_definitions import (
    HRSN_CATEGORY_NAMES, HRSN_DOMAIN_GROUPS, HRSN_KEYWORDS, HRSN_TAXONOMY,
    get_category,
)
from schemas import KeywordCategory, MentionKind, MentionRecord, PivotTable


def test_taxonomy_built_from_keywords():
    assert len(HRSN_TAXONOMY) == len(HRSN_KEYWORDS)
    assert len(set(HRSN_CATEGORY_NAMES)) == len(HRSN_CATEGORY_NAMES)


def test_triggers_are_lower_case_and_non_empty():
    for category in HRSN_TAXONOMY:
        assert category.triggers
        for trigger in category.triggers:
            assert trigger.strip()
            assert trigger == trigger.lower()


def test_domain_groups_reference_real_categories():
    grouped = {name for names in HRSN_DOMAIN_GROUPS.values() for name in names}
    assert grouped <= set(HRSN_CATEGORY_NAMES)
    assert grouped == set(HRSN_CATEGORY_NAMES)


def test_get_category():
    assert "eviction" in get_category("housing_housing_instability_insecurity").triggers
    with pytest.raises(KeyError):
        get_category("weather")


def test_keyword_category_rejects_blank_trigger():
    with pytest.raises(ValidationError):
        KeywordCategory(name="x", triggers=("ok", "  "))
    with pytest.raises(ValidationError):
        KeywordCategory(name="x", triggers=())


def test_taxonomy_is_immutable():
    with pytest.raises(ValidationError):
        HRSN_TAXONOMY[0].name = "renamed"


def test_mention_record_rejects_negative_position():
    with pytest.raises(ValidationError):
        MentionRecord(patient_id="P1", date_of_service="2024-01-01",
                      category_value="Cough", mention_kind=MentionKind.SYMPTOM,
                      position_in_text=-1)


def test_pivot_table_helpers():
    pivot = PivotTable(columns=["2024-01-01", "2024-01-02"], rows=["a"],
                       cells={"a": {"2024-01-01": 2, "2024-01-02": 5}})
    assert pivot.row_total("a") == 7
    assert pivot.max_value() == 5
    assert not pivot.is_empty()
    assert PivotTable().max_value() == 0
