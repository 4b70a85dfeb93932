# -*- coding: utf-8 -*-
"""
session_data.py
───────────────
Flattening of cards/trials into data columns and the per-phase summary
CSV written at the end of (or on early exit from) a session.
"""

import datetime
import pathlib

import pandas as pd

SUMMARY_COLUMNS = ["participant", "session", "condition", "phase", "criterion",
                   "total_trials", "trials_to_criterion", "switch_latency_s",
                   "phase_total_time_s", "criterion_met"]


def file_stem(exp_name, participant, session, now=None):
    now = now or datetime.datetime.now()
    return f"{exp_name}_P{participant}_S{session}_{now:%Y%m%dT%H%M%S}"


def card_columns(prefix, card):
    """{'<prefix>_color': …, '<prefix>_shape': …, '<prefix>_number': …}"""
    cols = {f"{prefix}_color": card.color,
            f"{prefix}_shape": card.shape,
            f"{prefix}_number": card.number}
    match_type = getattr(card, "match_type", None)
    if match_type is not None:
        cols[f"{prefix}_match"] = match_type
    return cols


def slot_columns(slots):
    cols = {}
    for i, card in enumerate(slots):
        cols.update(card_columns(f"slot{i}", card))
    return cols


def phase_summary(exp_info, condition, phase, tracker):
    """One summary row for a phase; empty stats if the phase never started."""
    row = {
        "participant": exp_info.get("participant", ""),
        "session":     exp_info.get("session", ""),
        "condition":   condition.condition_name,
        "phase":       phase,
        "criterion":   tracker.criterion,
        "criterion_met": tracker.is_met,
    }
    if tracker.n_trials:
        row.update(tracker.summarize())
    return row


def save_summaries(rows, path):
    """Write summary rows to CSV and return the DataFrame."""
    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    df.to_csv(path, index=False)
    return df
