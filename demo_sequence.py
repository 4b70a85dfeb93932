# -*- coding: utf-8 -*-
"""
demo_sequence.py
────────────────
The scripted demonstration: one trial per configured demo stimulus
(eight by default), consumed once by the experiment.

  • trials 1 … demo_rule_only_count are "ruleOnly": the incidental card
    already sits in slot 0, nothing moves
  • the remaining trials are "accidental": the incidental card starts in
    slot 1 or 2 and visibly moves towards slot 0 during the animation

The incidental card is whichever choice happens to carry the incidental
value.  It may also be the rule-correct card; that overlap is part of the
design and varies from trial to trial.
"""

from typing import NamedTuple

from card_space import Card, make_rng
from choice_generator import generate_choices, match_index

RULE_ONLY  = "ruleOnly"
ACCIDENTAL = "accidental"


class DemoTrial(NamedTuple):
    trial_number:         int
    trial_type:           str
    stimulus:             Card
    initial_slots:        tuple
    correct_choice_index: int
    incidental_index:     int


def build_demo_trial(trial_number, trial_type, stimulus, condition, rng=None):
    rng = make_rng(rng)
    choices = generate_choices(stimulus, rng)

    # exactly one choice carries the incidental value (Latin square)
    incidental = next(c for c in choices if condition.carries_incidental(c))
    others = [c for c in choices if c is not incidental]
    if rng.random() >= 0.5:
        others.reverse()

    if trial_type == RULE_ONLY:
        slots = (incidental, others[0], others[1])
    elif rng.random() < 0.5:
        slots = (others[0], incidental, others[1])
    else:
        slots = (others[0], others[1], incidental)

    return DemoTrial(
        trial_number=trial_number,
        trial_type=trial_type,
        stimulus=stimulus,
        initial_slots=slots,
        correct_choice_index=match_index(slots, condition.sorting_rule),
        incidental_index=slots.index(incidental),
    )


def build_demo_sequence(condition, rng=None):
    """Return the complete ordered list of DemoTrial for `condition`."""
    rng = make_rng(rng)
    trials = []
    for i, stimulus in enumerate(condition.demo_stimuli):
        trial_number = i + 1
        trial_type = RULE_ONLY if trial_number <= condition.demo_rule_only_count else ACCIDENTAL
        trials.append(build_demo_trial(trial_number, trial_type, stimulus, condition, rng))
    return trials
