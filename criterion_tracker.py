# -*- coding: utf-8 -*-
"""
criterion_tracker.py
────────────────────
Consecutive-correct criterion shared by the card-sort and transfer phases.

States: "running" → "met" (terminal).  A correct response adds one to the
streak; an incorrect response resets the streak to 0 (a full reset, not a
decrement).  Every response appends its completion timestamp and bumps the
trial counter regardless of correctness.  Once met, the tracker refuses
further outcomes.
"""

import time

RUNNING = "running"
MET     = "met"


class CriterionTracker:
    """Streak counter for one phase; create at phase start, drop at phase end."""

    def __init__(self, criterion=5, start_time=None):
        self.criterion    = criterion
        self.start_time   = time.perf_counter() if start_time is None else start_time
        self.consecutive  = 0
        self.n_trials     = 0
        self.timestamps   = []       # trial completion times, same clock as start_time
        self.history      = []       # (correct?, consecutive) per trial
        self.state        = RUNNING
        self.streak_start = None     # 0-indexed first trial of the winning streak

    @property
    def is_met(self):
        return self.state == MET

    def record_outcome(self, correct, timestamp=None):
        """Register one response; return True once the criterion is reached."""
        if self.state == MET:
            raise RuntimeError("criterion already met; the phase is over")
        if correct:
            self.consecutive += 1
        else:
            self.consecutive = 0
        self.n_trials += 1
        self.timestamps.append(time.perf_counter() if timestamp is None else timestamp)
        self.history.append((bool(correct), self.consecutive))
        if self.consecutive == self.criterion:
            self.state = MET
            self.streak_start = self.n_trials - self.criterion
        return self.is_met

    def summarize(self):
        """
        Phase statistics.
          total_trials        : trials run
          trials_to_criterion : 0-indexed first trial of the winning streak
          switch_latency_s    : phase start → completion of that trial
          phase_total_time_s  : phase start → completion of the last trial
        Criterion-dependent fields are None while the phase is still running
        (e.g. the session was abandoned).
        """
        if not self.n_trials:
            raise RuntimeError("no trials recorded for this phase")
        summary = {
            "total_trials":        self.n_trials,
            "trials_to_criterion": None,
            "switch_latency_s":    None,
            "phase_total_time_s":  round(self.timestamps[-1] - self.start_time, 3),
        }
        if self.is_met:
            k0 = self.streak_start
            summary["trials_to_criterion"] = k0
            summary["switch_latency_s"] = round(self.timestamps[k0] - self.start_time, 3)
        return summary
