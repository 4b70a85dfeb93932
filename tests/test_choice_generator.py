import numpy as np
import pytest

from card_space import ALL_CARDS, ATTRIBUTES, COLORS, NUMBERS, SHAPES, Card
from choice_generator import generate_choices, match_index


def assert_latin_square(stimulus, choices):
    assert len(choices) == 3
    assert sorted(c.color for c in choices) == sorted(COLORS)
    assert sorted(c.shape for c in choices) == sorted(SHAPES)
    assert sorted(c.number for c in choices) == sorted(NUMBERS)
    for choice in choices:
        shared = [a for a in ATTRIBUTES if getattr(choice, a) == getattr(stimulus, a)]
        assert shared == [choice.match_type]
        assert choice.card != stimulus


def test_every_stimulus_gets_valid_choice_set():
    rng = np.random.default_rng(10)
    for stimulus in ALL_CARDS:
        for _ in range(5):
            assert_latin_square(stimulus, generate_choices(stimulus, rng))


def test_choices_are_ordered_color_shape_number():
    choices = generate_choices(Card("Green", "Circle", 2), np.random.default_rng(0))
    assert [c.match_type for c in choices] == ["color", "shape", "number"]


def test_number_match_carries_stimulus_number():
    stimulus = Card("Red", "Star", 3)
    choices = generate_choices(stimulus, np.random.default_rng(5))
    number_card = choices[match_index(choices, "number")]
    assert number_card.number == 3


def test_same_stimulus_varies_but_stays_valid():
    rng = np.random.default_rng(11)
    stimulus = Card("Blue", "Triangle", 1)
    arrangements = set()
    for _ in range(100):
        choices = generate_choices(stimulus, rng)
        assert_latin_square(stimulus, choices)
        arrangements.add(tuple(choices))
    assert len(arrangements) > 1


def test_match_index_unknown_rule():
    choices = generate_choices(Card("Red", "Star", 3), np.random.default_rng(0))
    with pytest.raises(ValueError):
        match_index(choices, "size")
