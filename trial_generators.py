# -*- coding: utf-8 -*-
"""
trial_generators.py
───────────────────
On-demand trial generation for the two interactive phases, one trial per
call, plus scoring of the participant's response.

Card sort : random stimulus, Latin-square choices in random slot order,
            no incidental pattern.
Transfer  : three cards, exactly one carrying the incidental value, which
            never starts in slot 0.  The participant rearranges the cards;
            the response is correct when the card ending in slot 0 carries
            the incidental value.
"""

from typing import NamedTuple

from card_space import ATTR_VALUES, ATTRIBUTES, Card, make_rng, random_card, uniform_shuffle
from choice_generator import generate_choices, match_index


class CardSortTrial(NamedTuple):
    stimulus:             Card
    slots:                tuple
    correct_choice_index: int


class TransferTrial(NamedTuple):
    slots:            tuple
    incidental_index: int


# ───────────────────────────────────────────────────────
#  Card sort phase
# ───────────────────────────────────────────────────────
def generate_sort_trial(condition, rng=None):
    rng = make_rng(rng)
    stimulus = random_card(rng)
    slots = tuple(uniform_shuffle(generate_choices(stimulus, rng), rng))
    return CardSortTrial(stimulus, slots, match_index(slots, condition.sorting_rule))


def score_sort_response(trial, chosen_index):
    return chosen_index == trial.correct_choice_index


# ───────────────────────────────────────────────────────
#  Transfer phase
# ───────────────────────────────────────────────────────
def generate_transfer_trial(condition, rng=None):
    """
    Build the cards attribute by attribute.  On the incidental axis cards 0
    and 1 get the two other values (shuffled) and card 2 the incidental
    value; every other axis is shuffled freely across the three cards.
    """
    rng = make_rng(rng)
    i_attr, i_val = condition.incidental_attribute, condition.incidental_value

    attr_vals = {}
    for attr in ATTRIBUTES:
        if attr == i_attr:
            non_inc = uniform_shuffle([v for v in ATTR_VALUES[attr] if v != i_val], rng)
            attr_vals[attr] = non_inc + [i_val]
        else:
            attr_vals[attr] = uniform_shuffle(ATTR_VALUES[attr], rng)
    cards = [Card(attr_vals["color"][i], attr_vals["shape"][i], attr_vals["number"][i])
             for i in range(3)]

    inc_slot   = 1 if rng.random() < 0.5 else 2
    other_slot = 2 if inc_slot == 1 else 1
    first, second = (0, 1) if rng.random() < 0.5 else (1, 0)

    slots = [None] * 3
    slots[0]          = cards[first]
    slots[inc_slot]   = cards[2]
    slots[other_slot] = cards[second]
    return TransferTrial(tuple(slots), inc_slot)


def swap_slots(arrangement, src, dst):
    """Drop the card in slot `src` onto slot `dst`; the occupant takes `src`."""
    arrangement = list(arrangement)
    arrangement[src], arrangement[dst] = arrangement[dst], arrangement[src]
    return arrangement


def score_transfer_response(arrangement, condition):
    """Correct when the card now in slot 0 carries the incidental value."""
    return condition.carries_incidental(arrangement[0])
