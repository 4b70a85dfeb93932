# -*- coding: utf-8 -*-
"""
conditions.py
─────────────
Condition parameters for the incidental card-sort task.

A Condition is resolved once at session start (registry name, optionally
plus a JSON file of overrides), validated, and then passed read-only into
every trial generator.  To add a condition, add an entry to CONDITIONS;
unspecified fields inherit DEFAULT_CONDITION.
"""

import dataclasses
import json
import pathlib
from dataclasses import dataclass

from card_space import ATTRIBUTES, ATTR_VALUES, Card

ANIMATION_CUES = ("accidental", "pedagogical")

# Ordered demo stimuli; chosen so all colours, shapes and numbers appear and
# the incidental card lands on different match types across trials.
DEMO_STIMULI = (
    Card("Red",   "Star",     3),
    Card("Blue",  "Circle",   1),
    Card("Green", "Triangle", 2),
    Card("Blue",  "Star",     3),
    Card("Red",   "Circle",   2),
    Card("Green", "Star",     1),
    Card("Blue",  "Triangle", 2),
    Card("Red",   "Triangle", 1),
)


class ConditionError(ValueError):
    """Raised for a condition that must not be used to start a session."""


@dataclass(frozen=True)
class Condition:
    condition_name:           str   = "NA(accidental)"
    sorting_rule:             str   = "number"
    incidental_attribute:     str   = "color"
    incidental_value:         object = "Red"
    skip_demo:                bool  = False
    demo_stimuli:             tuple = DEMO_STIMULI
    demo_rule_only_count:     int   = 3
    incidental_animation_cue: str   = "accidental"
    card_sort_criterion:      int   = 5
    transfer_criterion:       int   = 5

    # instruction texts
    demo_label:               str = "Watch carefully and learn the rule."
    transfer_label:           str = "Drag the correct card to the leftmost position."
    intro_text:               str = ("This is a card sorting game. The goal is to correctly sort the "
                                     "bottom card with one of three possible options. Before you begin "
                                     "the game, you will watch a demonstration.")
    sort_transition_text:     str = ("Now its your turn! Click the correct card match for the card "
                                     "at the bottom.")
    transfer_transition_text: str = ("New Task! Now, you will see three cards. Your task is to move the "
                                     "correct card into the leftmost position. Once you have arranged "
                                     "the cards, click the \"Submit Order\" button.")

    def carries_incidental(self, card):
        """True if `card` has the incidental value on the incidental axis."""
        return getattr(card, self.incidental_attribute) == self.incidental_value

    def validate(self):
        """Raise ConditionError describing the first invalid option."""
        if self.sorting_rule not in ATTRIBUTES:
            raise ConditionError(
                f"sorting_rule must be one of {ATTRIBUTES}, got {self.sorting_rule!r}")
        if self.incidental_attribute not in ATTRIBUTES:
            raise ConditionError(
                f"incidental_attribute must be one of {ATTRIBUTES}, got {self.incidental_attribute!r}")
        domain = ATTR_VALUES[self.incidental_attribute]
        if self.incidental_value not in domain:
            raise ConditionError(
                f"incidental_value {self.incidental_value!r} is not a {self.incidental_attribute} "
                f"(expected one of {domain})")
        for name in ("card_sort_criterion", "transfer_criterion"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConditionError(f"{name} must be a positive integer, got {value!r}")
        if self.incidental_animation_cue not in ANIMATION_CUES:
            raise ConditionError(
                f"incidental_animation_cue must be one of {ANIMATION_CUES}, "
                f"got {self.incidental_animation_cue!r}")
        if not self.demo_stimuli:
            raise ConditionError("demo_stimuli must contain at least one card")
        for i, card in enumerate(self.demo_stimuli, 1):
            if not isinstance(card, Card) or any(
                    getattr(card, attr) not in ATTR_VALUES[attr] for attr in ATTRIBUTES):
                raise ConditionError(f"demo stimulus {i} is not a valid card: {card!r}")
        n_rule_only = self.demo_rule_only_count
        if isinstance(n_rule_only, bool) or not isinstance(n_rule_only, int) \
                or not 0 <= n_rule_only <= len(self.demo_stimuli):
            raise ConditionError(
                f"demo_rule_only_count must be between 0 and {len(self.demo_stimuli)}, "
                f"got {n_rule_only!r}")
        return self

    def with_overrides(self, overrides):
        """New validated Condition with `overrides` applied (dict of field → value)."""
        fields = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(overrides) - fields)
        if unknown:
            raise ConditionError(f"unknown condition option(s): {', '.join(unknown)}")
        overrides = dict(overrides)
        if "demo_stimuli" in overrides:
            overrides["demo_stimuli"] = _parse_stimuli(overrides["demo_stimuli"])
        return dataclasses.replace(self, **overrides).validate()


def _parse_stimuli(raw):
    if isinstance(raw, (str, dict)) or not hasattr(raw, "__iter__"):
        raise ConditionError(f"demo_stimuli must be a list of cards, got {raw!r}")
    stimuli = []
    for i, item in enumerate(raw, 1):
        if isinstance(item, Card):
            stimuli.append(item)
        elif isinstance(item, dict):
            try:
                stimuli.append(Card(item["color"], item["shape"], item["number"]))
            except KeyError as exc:
                raise ConditionError(f"demo stimulus {i} is missing {exc.args[0]!r}") from exc
        elif isinstance(item, (list, tuple)) and len(item) == 3:
            stimuli.append(Card(*item))
        else:
            raise ConditionError(
                f"demo stimulus {i} must be a [color, shape, number] triple or an object, got {item!r}")
    return tuple(stimuli)


# ───────────────────────────────────────────────────────
#  Condition registry
# ───────────────────────────────────────────────────────
DEFAULT_CONDITION_NAME = "NA_V1"
DEFAULT_CONDITION = Condition()

CONDITIONS = {
    "NA_V1": {},
    "NA_V2": dict(condition_name="NA(pedagogical)", incidental_animation_cue="pedagogical",
                  incidental_attribute="shape", incidental_value="Circle", sorting_rule="color"),
    "A_V1":  dict(condition_name="A(accidental)", skip_demo=True),
    "A_V2":  dict(condition_name="A(pedagogical)", skip_demo=True,
                  incidental_attribute="shape", incidental_value="Circle", sorting_rule="color"),
    "temp":  dict(skip_demo=True, card_sort_criterion=1, transfer_criterion=1),
}


def resolve_condition(name=None):
    """Validated Condition for a registry name; unknown names fall back to the default."""
    if name is None or name == "":
        name = DEFAULT_CONDITION_NAME
    if name not in CONDITIONS:
        print(f"[config] Unknown condition {name!r}. Falling back to {DEFAULT_CONDITION_NAME}.")
        name = DEFAULT_CONDITION_NAME
    return DEFAULT_CONDITION.with_overrides(CONDITIONS[name])


def load_condition_file(path, base=None):
    """Apply a JSON object of overrides on top of `base` (default: the default condition)."""
    path = pathlib.Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            overrides = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConditionError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(overrides, dict):
        raise ConditionError(f"{path} must contain a JSON object of condition options")
    base = base if base is not None else resolve_condition()
    return base.with_overrides(overrides)
