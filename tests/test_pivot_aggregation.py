from datetime import date

import pytest

from pivot_aggregation import (
    ALL_KINDS, DIAGNOSIS, DIAGNOSTIC_CATEGORY, HRSN, SYMPTOM, aggregate,
    build_all_pivots, kind_by_name, pivot_to_frame, rank_values,
    select_patients,
)
from schemas import MentionKind, MentionRecord


def mk_rec(value="Anxiety", day="2024-01-01", patient="P1", position=0,
           kind=MentionKind.SYMPTOM, hrsn=False, diagnosis="", category=""):
    return MentionRecord(
        patient_id=patient,
        date_of_service=date.fromisoformat(day),
        category_value=value,
        mention_kind=kind,
        hrsn_flag=hrsn,
        position_in_text=position,
        linked_diagnosis=diagnosis,
        linked_diagnostic_category=category,
    )


def mixed_records():
    return [
        mk_rec("Anxiety", "2024-01-03", position=1),
        mk_rec("Anxiety", "2024-01-01", position=2),
        mk_rec("Anxiety", "2024-01-01", position=2),            # repeat
        mk_rec("Fatigue", "2024-01-02", patient="P2"),
        mk_rec("Cough", "2024-01-02", patient="P3"),
        mk_rec("Cough", "2024-01-03", patient="P3", position=9),
        mk_rec("Insomnia", "2024-01-04"),
        mk_rec("Housing", "2024-01-05", kind=MentionKind.PROBLEM, hrsn=True),
    ]


def test_exact_duplicate_counts_once():
    pivot = aggregate([mk_rec(), mk_rec()], SYMPTOM)
    assert pivot.cells["Anxiety"]["2024-01-01"] == 1


def test_different_position_counts_twice():
    pivot = aggregate([mk_rec(), mk_rec(position=5)], SYMPTOM)
    assert pivot.cells["Anxiety"]["2024-01-01"] == 2


def test_duplicate_key_ignores_value_case():
    pivot = aggregate([mk_rec("Anxiety"), mk_rec("anxiety")], SYMPTOM)
    assert pivot.rows == ["Anxiety"]
    assert pivot.row_total("Anxiety") == 1


def test_different_patients_are_not_duplicates():
    pivot = aggregate([mk_rec(patient="P1"), mk_rec(patient="P2")], SYMPTOM)
    assert pivot.cells["Anxiety"]["2024-01-01"] == 2


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_no_records_gives_empty_table(kind):
    pivot = aggregate([], kind)
    assert pivot.rows == []
    assert pivot.columns == []
    assert pivot.cells == {}
    assert pivot.is_empty()


def test_nothing_survives_filter_gives_empty_table():
    pivot = aggregate([mk_rec()], HRSN)
    assert pivot.model_dump() == {"columns": [], "rows": [], "cells": {}}


def test_rows_ranked_by_total_then_alphabetically():
    pivot = aggregate(mixed_records(), SYMPTOM)
    assert pivot.rows == ["Anxiety", "Cough", "Fatigue", "Insomnia"]
    totals = [pivot.row_total(row) for row in pivot.rows]
    assert totals == [2, 2, 1, 1]
    assert totals == sorted(totals, reverse=True)


def test_tie_break_ignores_case():
    pivot = aggregate([mk_rec("beta"), mk_rec("Alpha"), mk_rec("Gamma")], SYMPTOM)
    assert pivot.rows == ["Alpha", "beta", "Gamma"]


def test_columns_sorted_chronologically():
    records = [mk_rec("A", "2024-02-01"), mk_rec("A", "2023-12-31", position=1),
               mk_rec("A", "2024-01-15", position=2)]
    pivot = aggregate(records, SYMPTOM)
    assert pivot.columns == ["2023-12-31", "2024-01-15", "2024-02-01"]


def test_cells_are_dense():
    pivot = aggregate(mixed_records(), SYMPTOM)
    for row in pivot.rows:
        assert set(pivot.cells[row]) == set(pivot.columns)
    assert pivot.cells["Insomnia"]["2024-01-01"] == 0


def test_row_sums_match_dedup_totals():
    pivot = aggregate(mixed_records(), SYMPTOM)
    assert pivot.row_total("Anxiety") == 2
    assert pivot.cells["Anxiety"] == {
        "2024-01-01": 1, "2024-01-02": 0, "2024-01-03": 1,
        "2024-01-04": 0,
    }


def test_max_rows_truncates_long_tail():
    pivot = aggregate(mixed_records(), SYMPTOM, max_rows=2)
    assert pivot.rows == ["Anxiety", "Cough"]
    assert set(pivot.cells) == {"Anxiety", "Cough"}
    # Columns still span every surviving record's date, truncated ones included
    assert pivot.columns[-1] == "2024-01-04"


def test_max_rows_zero_and_negative():
    pivot = aggregate(mixed_records(), SYMPTOM, max_rows=0)
    assert pivot.rows == []
    assert pivot.cells == {}
    with pytest.raises(ValueError):
        aggregate(mixed_records(), SYMPTOM, max_rows=-1)


def test_aggregate_is_idempotent():
    records = mixed_records()
    assert aggregate(records, SYMPTOM) == aggregate(records, SYMPTOM)
    assert aggregate(records, SYMPTOM) == aggregate(list(reversed(records)), SYMPTOM)


def test_symptom_kind_excludes_problems():
    pivot = aggregate(mixed_records(), SYMPTOM)
    assert "Housing" not in pivot.rows


def test_hrsn_kind_counts_problems_and_sentinel_symptoms():
    records = mixed_records() + [mk_rec("Food insecurity", "2024-01-06", hrsn=True)]
    pivot = aggregate(records, HRSN)
    assert pivot.rows == ["Food insecurity", "Housing"]
    assert pivot.columns == ["2024-01-05", "2024-01-06"]


def test_diagnosis_kind_counts_linked_diagnosis():
    records = [
        mk_rec("Anxiety", diagnosis="GAD", category="Mental Health"),
        mk_rec("Anxiety", diagnosis="Panic disorder", category="Mental Health"),
        mk_rec("Insomnia", diagnosis="GAD", category="Mental Health", position=3),
        mk_rec("Cough"),                                         # no diagnosis
    ]
    pivot = aggregate(records, DIAGNOSIS)
    assert pivot.rows == ["GAD", "Panic disorder"]
    assert pivot.row_total("GAD") == 2

    by_category = aggregate(records, DIAGNOSTIC_CATEGORY)
    assert by_category.rows == ["Mental Health"]
    assert by_category.row_total("Mental Health") == 3


def test_kind_by_name_and_aliases():
    assert kind_by_name("symptom") is SYMPTOM
    assert kind_by_name(" HRSN ") is HRSN
    assert kind_by_name("category") is DIAGNOSTIC_CATEGORY
    assert kind_by_name("diagnostic-category") is DIAGNOSTIC_CATEGORY
    with pytest.raises(ValueError):
        kind_by_name("zcode")


def test_rank_values():
    assert rank_values({"b": 1, "a": 1, "c": 3}) == ["c", "a", "b"]


def test_select_patients():
    records = mixed_records()
    assert select_patients(records, None) == records
    assert select_patients(records, []) == records
    assert {r.patient_id for r in select_patients(records, "P3")} == {"P3"}
    assert {r.patient_id for r in select_patients(records, ["P2", "P3"])} == {"P2", "P3"}
    assert select_patients(records, ["nobody"]) == []


def test_build_all_pivots_one_per_kind():
    pivots = build_all_pivots(mixed_records())
    assert set(pivots) == {kind.name for kind in ALL_KINDS}
    assert pivots["hrsn"].rows == ["Housing"]
    assert pivots["diagnosis"].is_empty()


def test_pivot_to_frame_matches_cells():
    pivot = aggregate(mixed_records(), SYMPTOM)
    frame = pivot_to_frame(pivot)
    assert list(frame.index) == pivot.rows
    assert list(frame.columns) == pivot.columns
    assert frame.loc["Cough", "2024-01-03"] == 1
    assert int(frame.to_numpy().sum()) == sum(pivot.row_total(r) for r in pivot.rows)


def test_pivot_to_frame_empty():
    frame = pivot_to_frame(aggregate([], SYMPTOM))
    assert frame.shape == (0, 0)


def test_symptoms_sharing_a_diagnosis_count_once():
    records = [
        mk_rec("Anxiety", diagnosis="GAD", category="Mental Health"),
        mk_rec("Insomnia", diagnosis="GAD", category="Mental Health"),
        mk_rec("Worry", diagnosis="GAD", category="Mental Health"),
    ]
    assert aggregate(records, DIAGNOSIS).cells == {"GAD": {"2024-01-01": 1}}
    assert aggregate(records, DIAGNOSTIC_CATEGORY).cells == {"Mental Health": {"2024-01-01": 1}}
    # The symptom pivot still sees three different symptoms
    assert aggregate(records, SYMPTOM).rows == ["Anxiety", "Insomnia", "Worry"]


def test_same_symptom_linked_to_two_diagnoses_feeds_both_rows():
    records = [
        mk_rec("Anxiety", diagnosis="GAD"),
        mk_rec("Anxiety", diagnosis="Panic disorder"),
    ]
    pivot = aggregate(records, DIAGNOSIS)
    assert pivot.rows == ["GAD", "Panic disorder"]


def test_truncated_case_variant_does_not_leak_into_kept_row():
    # "anxiety"@0 is seen first, so the later "Anxiety"@0 is its duplicate.
    # Only "Anxiety" survives max_rows=1; its row must still sum to its total.
    records = [
        mk_rec("anxiety", position=0),
        mk_rec("Anxiety", position=0),
        mk_rec("Anxiety", position=1),
        mk_rec("Anxiety", position=2),
    ]
    pivot = aggregate(records, SYMPTOM, max_rows=1)
    assert pivot.rows == ["Anxiety"]
    assert pivot.cells == {"Anxiety": {"2024-01-01": 2}}
    assert pivot.row_total("Anxiety") == 2
