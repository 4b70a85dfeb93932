import pytest

from criterion_tracker import MET, RUNNING, CriterionTracker


def run(outcomes, criterion=5):
    tracker = CriterionTracker(criterion, start_time=0.0)
    done = []
    for t, correct in enumerate(outcomes, start=1):
        done.append(tracker.record_outcome(correct, timestamp=float(t)))
    return tracker, done


def test_near_miss_resets_streak():
    tracker, done = run([True] * 4 + [False])
    assert tracker.consecutive == 0
    assert tracker.state == RUNNING
    assert not any(done)


def test_exact_streak_meets_criterion_on_last_trial():
    tracker, done = run([True] * 5)
    assert done == [False] * 4 + [True]
    assert tracker.state == MET


def test_scenario_summary():
    tracker, done = run([True, True, False, True, True, True, True, True])
    assert done[-1] and not any(done[:-1])
    summary = tracker.summarize()
    assert summary["total_trials"] == 8
    assert summary["trials_to_criterion"] == 3
    assert summary["switch_latency_s"] == 4.0
    assert summary["phase_total_time_s"] == 8.0


def test_every_response_is_timestamped():
    tracker, _ = run([False, True, False])
    assert tracker.n_trials == 3
    assert tracker.timestamps == [1.0, 2.0, 3.0]
    assert tracker.history == [(False, 0), (True, 1), (False, 0)]


def test_summary_of_unfinished_phase():
    tracker, _ = run([True, False, True])
    summary = tracker.summarize()
    assert summary["total_trials"] == 3
    assert summary["trials_to_criterion"] is None
    assert summary["switch_latency_s"] is None


def test_criterion_of_one():
    tracker, done = run([False, True], criterion=1)
    assert done == [False, True]
    assert tracker.summarize()["trials_to_criterion"] == 1


def test_summarize_without_trials():
    with pytest.raises(RuntimeError):
        CriterionTracker(5, start_time=0.0).summarize()


def test_default_clock():
    tracker = CriterionTracker(2)
    tracker.record_outcome(True)
    tracker.record_outcome(True)
    assert tracker.summarize()["phase_total_time_s"] >= 0.0


def test_met_is_terminal():
    tracker, _ = run([True, True], criterion=2)
    with pytest.raises(RuntimeError):
        tracker.record_outcome(False, timestamp=3.0)
    with pytest.raises(RuntimeError):
        tracker.record_outcome(True, timestamp=3.0)
    assert tracker.state == MET
    summary = tracker.summarize()
    assert summary["total_trials"] == 2
    assert summary["trials_to_criterion"] == 0
