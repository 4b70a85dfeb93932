import datetime

import pandas as pd

from card_space import Card, ChoiceCard
from conditions import resolve_condition
from criterion_tracker import CriterionTracker
from session_data import card_columns, file_stem, phase_summary, save_summaries, slot_columns


def test_file_stem():
    now = datetime.datetime(2025, 3, 4, 5, 6, 7)
    assert file_stem("CST", "P01", "001", now) == "CST_PP01_S001_20250304T050607"


def test_card_and_slot_columns():
    assert card_columns("stim", Card("Red", "Star", 3)) == {
        "stim_color": "Red", "stim_shape": "Star", "stim_number": 3}
    cols = slot_columns([ChoiceCard("Blue", "Circle", 1, "color")] * 3)
    assert cols["slot2_match"] == "color"
    assert len(cols) == 12


def test_save_summaries(tmp_path):
    condition = resolve_condition()
    done = CriterionTracker(2, start_time=0.0)
    done.record_outcome(True, 1.0)
    done.record_outcome(True, 2.5)
    abandoned = CriterionTracker(5, start_time=0.0)
    idle = CriterionTracker(5, start_time=0.0)
    info = {"participant": "P01", "session": "001"}
    rows = [phase_summary(info, condition, "card_sort", done),
            phase_summary(info, condition, "transfer", abandoned),
            phase_summary(info, condition, "extra", idle)]
    abandoned.record_outcome(False, 1.0)
    rows[1] = phase_summary(info, condition, "transfer", abandoned)

    path = tmp_path / "out" / "summary.csv"
    save_summaries(rows, path)
    df = pd.read_csv(path)
    assert list(df["phase"]) == ["card_sort", "transfer", "extra"]
    assert df.loc[0, "trials_to_criterion"] == 0
    assert df.loc[0, "phase_total_time_s"] == 2.5
    assert bool(df.loc[0, "criterion_met"])
    assert df.loc[1, "total_trials"] == 1
    assert pd.isna(df.loc[1, "switch_latency_s"])
    assert pd.isna(df.loc[2, "total_trials"])
