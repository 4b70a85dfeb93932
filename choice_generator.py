# -*- coding: utf-8 -*-
"""
choice_generator.py
───────────────────
Given one stimulus card, build the three choice cards shown above it.

  • choice 0 matches the stimulus by colour only
  • choice 1 matches the stimulus by shape only
  • choice 2 matches the stimulus by number only

The two non-stimulus values of every axis are handed out crosswise, so
across the three choices each colour, shape and number appears exactly
once (a 3 × 3 Latin square).  The only entropy is the order of the three
complement pairs; which card ends up carrying e.g. "Red" therefore varies
from call to call while the arrangement is always valid.
"""

from card_space import COLORS, SHAPES, NUMBERS, ChoiceCard, complement_values, make_rng


def generate_choices(stimulus, rng=None):
    """Return [colour-match, shape-match, number-match] choice cards."""
    rng = make_rng(rng)
    c0, c1 = complement_values(COLORS,  stimulus.color,  rng)
    s0, s1 = complement_values(SHAPES,  stimulus.shape,  rng)
    n0, n1 = complement_values(NUMBERS, stimulus.number, rng)

    return [
        ChoiceCard(stimulus.color, s0,             n0,              "color"),
        ChoiceCard(c0,             stimulus.shape, n1,              "shape"),
        ChoiceCard(c1,             s1,             stimulus.number, "number"),
    ]


def match_index(cards, rule):
    """Slot index of the card whose match_type equals `rule`."""
    for i, card in enumerate(cards):
        if card.match_type == rule:
            return i
    raise ValueError(f"no choice card matches by {rule!r}")
