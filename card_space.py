# -*- coding: utf-8 -*-
"""
card_space.py
─────────────
The closed universe of card values (3 colours × 3 shapes × 3 numbers = 27
cards) plus the small random helpers every trial generator draws from.

All randomness goes through a numpy Generator so a session (or a test) can
be replayed from a seed.
"""

import hashlib
from typing import NamedTuple

import numpy as np

# ───────────────────────────────────────────────────────
#  Attribute domains
# ───────────────────────────────────────────────────────
COLORS  = ("Red", "Blue", "Green")
SHAPES  = ("Circle", "Star", "Triangle")
NUMBERS = (1, 2, 3)

ATTRIBUTES   = ("color", "shape", "number")
ATTR_VALUES  = {"color": COLORS, "shape": SHAPES, "number": NUMBERS}


class Card(NamedTuple):
    """One card: three independent categorical attributes."""
    color:  str
    shape:  str
    number: int


class ChoiceCard(NamedTuple):
    """A choice card plus the single axis on which it matches the stimulus."""
    color:      str
    shape:      str
    number:     int
    match_type: str

    @property
    def card(self):
        return Card(self.color, self.shape, self.number)


ALL_CARDS = tuple(Card(c, s, n) for c in COLORS for s in SHAPES for n in NUMBERS)


# ───────────────────────────────────────────────────────
#  Random source
# ───────────────────────────────────────────────────────
def make_rng(seed=None):
    """Return a numpy Generator; passing one through returns it unchanged."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def participant_rng(participant):
    """Generator seeded from the participant id (same id → same session)."""
    seed = int(hashlib.sha256(str(participant).encode()).hexdigest(), 16) & 0xFFFFFFFF
    return np.random.default_rng(seed)


# ───────────────────────────────────────────────────────
#  Combinatorial helpers
# ───────────────────────────────────────────────────────
def complement_values(domain, excluded, rng=None):
    """The two values of `domain` other than `excluded`, order swapped 50/50."""
    rng = make_rng(rng)
    a, b = [v for v in domain if v != excluded]
    return (a, b) if rng.random() < 0.5 else (b, a)


def uniform_shuffle(sequence, rng=None):
    """Fisher–Yates shuffle into a new list; the input is left untouched."""
    rng = make_rng(rng)
    items = list(sequence)
    for i in range(len(items) - 1, 0, -1):
        j = int(rng.integers(i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def uniform_pick(domain, rng=None):
    rng = make_rng(rng)
    return domain[int(rng.integers(len(domain)))]


def random_card(rng=None):
    """Uniform draw from the full 27-card space, one attribute at a time."""
    rng = make_rng(rng)
    return Card(uniform_pick(COLORS, rng),
                uniform_pick(SHAPES, rng),
                uniform_pick(NUMBERS, rng))
