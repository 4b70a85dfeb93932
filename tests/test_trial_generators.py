import numpy as np

from card_space import ATTR_VALUES, ATTRIBUTES, COLORS, NUMBERS, SHAPES
from conditions import CONDITIONS, resolve_condition
from trial_generators import (generate_sort_trial, generate_transfer_trial,
                              score_sort_response, score_transfer_response, swap_slots)


def test_sort_trial_correct_index_matches_rule():
    rng = np.random.default_rng(20)
    for name in CONDITIONS:
        condition = resolve_condition(name)
        for _ in range(200):
            trial = generate_sort_trial(condition, rng)
            assert trial.slots[trial.correct_choice_index].match_type == condition.sorting_rule
            assert sorted(c.color for c in trial.slots) == sorted(COLORS)
            assert sorted(c.shape for c in trial.slots) == sorted(SHAPES)
            assert sorted(c.number for c in trial.slots) == sorted(NUMBERS)


def test_sort_trial_has_no_fixed_slot_pattern():
    rng = np.random.default_rng(21)
    condition = resolve_condition()
    positions = {generate_sort_trial(condition, rng).correct_choice_index for _ in range(100)}
    assert positions == {0, 1, 2}


def test_score_sort_response():
    trial = generate_sort_trial(resolve_condition(), np.random.default_rng(22))
    assert score_sort_response(trial, trial.correct_choice_index)
    wrong = (trial.correct_choice_index + 1) % 3
    assert not score_sort_response(trial, wrong)


def test_transfer_incidental_never_in_slot_zero():
    rng = np.random.default_rng(23)
    for name in CONDITIONS:
        condition = resolve_condition(name)
        for _ in range(300):
            trial = generate_transfer_trial(condition, rng)
            assert trial.incidental_index in (1, 2)
            carriers = [i for i, c in enumerate(trial.slots) if condition.carries_incidental(c)]
            assert carriers == [trial.incidental_index]
            attr = condition.incidental_attribute
            assert sorted(getattr(c, attr) for c in trial.slots) == sorted(ATTR_VALUES[attr])


def test_transfer_other_axes_are_permutations():
    rng = np.random.default_rng(24)
    condition = resolve_condition()
    for _ in range(100):
        trial = generate_transfer_trial(condition, rng)
        for attr in ATTRIBUTES:
            assert sorted(getattr(c, attr) for c in trial.slots) == sorted(ATTR_VALUES[attr])


def test_swap_and_score_transfer():
    condition = resolve_condition()
    trial = generate_transfer_trial(condition, np.random.default_rng(25))
    assert not score_transfer_response(trial.slots, condition)
    moved = swap_slots(trial.slots, trial.incidental_index, 0)
    assert score_transfer_response(moved, condition)
    assert moved[trial.incidental_index] == trial.slots[0]
    assert list(trial.slots) != moved
