#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CST.py - incidental card sort task
────────────────────────────────────
Demonstration (scripted, 8 trials) → card sort phase → transfer phase.
Both interactive phases run until the participant reaches the condition's
criterion of consecutive correct responses.

• Card sort: click the choice card that matches the bottom card by the
  sorting rule.
• Transfer : rearrange three cards (click a card, then click the slot to
  swap it into) and press "Submit Order"; the response is scored by
  whether the card in the leftmost slot carries the incidental value.

Run with the package installed (`pip install -e .[experiment]`).
"""

import math, pathlib, atexit
import numpy as np
from psychopy import visual, event, core, data, gui, logging

from card_space import participant_rng
from conditions import CONDITIONS, DEFAULT_CONDITION_NAME, ConditionError, \
    resolve_condition, load_condition_file
from demo_sequence import ACCIDENTAL, RULE_ONLY, build_demo_sequence
from trial_generators import generate_sort_trial, generate_transfer_trial, \
    score_sort_response, score_transfer_response, swap_slots
from criterion_tracker import CriterionTracker
from session_data import file_stem, card_columns, slot_columns, phase_summary, save_summaries

SIMULATE = False

# ───────────────────────────────────────────────────────
#  Auto‐save on quit
# ───────────────────────────────────────────────────────
thisExp = None
trackers = {}            # phase → CriterionTracker, for the summary file
_saved = False
def _save():
    global _saved
    if _saved or thisExp is None:
        return
    thisExp.saveAsWideText(str(csv_path))
    print("Trial data auto‐saved ➜", csv_path)
    rows = [phase_summary(expInfo, condition, phase, tr) for phase, tr in trackers.items()]
    if rows:
        save_summaries(rows, summary_path)
        print("Phase summary saved ➜", summary_path)
    _saved = True
atexit.register(_save)

# ───────────────────────────────────────────────────────
#  Participant dialog & condition
# ───────────────────────────────────────────────────────
expName = "IncidentalCardSort"
conditionNames = [DEFAULT_CONDITION_NAME] + [c for c in CONDITIONS if c != DEFAULT_CONDITION_NAME]
expInfo = {"participant": "", "session": "001", "condition": conditionNames,
           "condition_file": "", "simulate": False}
dlg = gui.DlgFromDict(expInfo, order=["participant", "session", "condition",
                                      "condition_file", "simulate"], title=expName)
if not dlg.OK:
    core.quit()
SIMULATE = bool(expInfo.pop("simulate"))
if SIMULATE:
    expInfo["participant"] = expInfo["participant"] or "SIM"

try:
    condition = resolve_condition(expInfo["condition"])
    if expInfo["condition_file"]:
        condition = load_condition_file(expInfo["condition_file"], base=condition)
except (ConditionError, OSError) as e:
    print(f"Invalid condition – session not started: {e}")
    core.quit()
expInfo["condition_name"] = condition.condition_name
expInfo["sorting_rule"] = condition.sorting_rule
expInfo["incidental"] = f"{condition.incidental_attribute}={condition.incidental_value}"

rng = participant_rng(expInfo["participant"])

# ───────────────────────────────────────────────────────
#  Paths, ExperimentHandler & logging
# ───────────────────────────────────────────────────────
root = pathlib.Path.cwd() / "data"; root.mkdir(exist_ok=True)
stem = file_stem(expName, expInfo["participant"], expInfo["session"])
csv_path     = root / f"{stem}.csv"
summary_path = root / f"{stem}_summary.csv"
thisExp = data.ExperimentHandler(name=expName, extraInfo=expInfo,
                                 savePickle=False, saveWideText=False,
                                 dataFileName=str(root / stem))
logging.console.setLevel(logging.WARNING)
logFile = logging.LogFile(str(root / f"{stem}.log"), level=logging.EXP)

# ───────────────────────────────────────────────────────
#  Window, layout & stimuli
# ───────────────────────────────────────────────────────
win = visual.Window((1280, 800), fullscr=not SIMULATE, color=[0.6]*3, units="pix")
mouse = event.Mouse(win=win, visible=True)

CARD_W, CARD_H = 150, 210
SLOT_POS        = [(-40, 180), (170, 180), (380, 180)]    # choice slots, 0 = leftmost
INCIDENTAL_POS  = (-250, 180)                             # left of slot 0
STIMULUS_POS    = (-460, -150)
TRANSFER_POS    = [(-230, 40), (0, 40), (230, 40)]
SUBMIT_POS      = (0, -250)

COLOUR_RGB = {"Red": "#d62728", "Blue": "#1f5fbf", "Green": "#2ca02c"}
STAR_VERTS = [(0, 18), (4.4, 6.1), (17.1, 5.6), (7.1, -2.3), (10.6, -14.6),
              (0, -7.5), (-10.6, -14.6), (-7.1, -2.3), (-17.1, 5.6), (-4.4, 6.1)]
SHAPE_OFFSETS = {1: [(0, 0)], 2: [(-25, 0), (25, 0)], 3: [(-25, 25), (25, 25), (0, -25)]}

PAUSE_APPEAR, PAUSE_SWAP, PAUSE_SORT, MOVE_DUR = 1.0, 0.5, 1.5, 0.6
FEEDBACK_DUR = 0.5

cardRect  = visual.Rect(win, CARD_W, CARD_H, fillColor="white", lineColor="black", lineWidth=2)
circle    = visual.Circle(win, radius=17, edges=48)
star      = visual.ShapeStim(win, vertices=STAR_VERTS)
triangle  = visual.ShapeStim(win, vertices=[(0, 16), (18, -16), (-18, -16)])
SHAPE_STIM = {"Circle": circle, "Star": star, "Triangle": triangle}
msg       = visual.TextStim(win, text="", color="black", height=26, wrapWidth=1000)
label     = visual.TextStim(win, text="", color="black", height=24, pos=(0, 340), wrapWidth=1100)
fbIcon    = visual.TextStim(win, text="", height=70, bold=True)
submitBtn = visual.Rect(win, 220, 60, pos=SUBMIT_POS, fillColor="#dddddd", lineColor="black")
submitTxt = visual.TextStim(win, text="Submit Order", color="black", height=24, pos=SUBMIT_POS)


def draw_card(card, pos, ori=0.0, outline="black", glow=False):
    """Draw one card (white tile with 1–3 coloured shapes) centred on pos."""
    cardRect.pos, cardRect.ori = pos, ori
    cardRect.lineColor = "gold" if glow else outline
    cardRect.lineWidth = 8 if (glow or outline != "black") else 2
    cardRect.draw()
    shp = SHAPE_STIM[card.shape]
    shp.fillColor = shp.lineColor = COLOUR_RGB[card.color]
    shp.ori = ori
    rad = math.radians(ori)
    for ox, oy in SHAPE_OFFSETS[card.number]:
        # offsets rotate with the card (PsychoPy ori is clockwise)
        rx = ox * math.cos(rad) + oy * math.sin(rad)
        ry = -ox * math.sin(rad) + oy * math.cos(rad)
        shp.pos = (pos[0] + rx, pos[1] + ry)
        shp.draw()


def slot_at(pos, slot_positions, half_w=75, half_h=105):
    """Index of the slot whose card area contains pos, else None."""
    for i, (sx, sy) in enumerate(slot_positions):
        if abs(pos[0] - sx) <= half_w and abs(pos[1] - sy) <= half_h:
            return i
    return None


def show_text(text, wait=True):
    msg.text = text
    msg.draw(); win.flip()
    if wait and not SIMULATE:
        keys = event.waitKeys()
        if "escape" in keys:
            core.quit()


def check_quit():
    if event.getKeys(["escape"]):
        logging.exp("Escape pressed – quitting")
        core.quit()


def wait_click():
    """Block until a fresh left click; return its position."""
    while mouse.getPressed()[0]:
        check_quit(); yield_frame()
    while not mouse.getPressed()[0]:
        check_quit(); yield_frame()
    return tuple(mouse.getPos())


def yield_frame():
    redraw(); win.flip()


# current scene, redrawn every frame while waiting for input
scene = {"cards": [], "label": None, "submit": False}

def redraw():
    if scene["label"]:
        label.text = scene["label"]; label.draw()
    for card, pos, kw in scene["cards"]:
        draw_card(card, pos, **kw)
    if scene["submit"]:
        submitBtn.draw(); submitTxt.draw()


def hold(seconds):
    clk = core.Clock()
    while clk.getTime() < seconds:
        check_quit(); yield_frame()


def feedback(pos, correct):
    fbIcon.text  = "✓" if correct else "✗"
    fbIcon.color = "green" if correct else "red"
    fbIcon.pos   = (pos[0], pos[1] + CARD_H / 2 + 40)
    clk = core.Clock()
    while clk.getTime() < FEEDBACK_DUR:
        redraw(); fbIcon.draw(); win.flip()


# ───────────────────────────────────────────────────────
#  Demonstration
# ───────────────────────────────────────────────────────
def run_demo_trial(trial):
    pedagogical = condition.incidental_animation_cue == "pedagogical"
    styles = [dict() for _ in range(3)]
    positions = list(SLOT_POS)
    if trial.trial_type == RULE_ONLY and pedagogical:
        styles[trial.incidental_index]["ori"] = 180.0
    stim_slot = [STIMULUS_POS]
    def rebuild():
        scene["cards"] = [(c, positions[i], styles[i]) for i, c in enumerate(trial.initial_slots)]
        scene["cards"].append((trial.stimulus, stim_slot[0], {}))
    rebuild(); hold(PAUSE_APPEAR)

    if trial.trial_type == ACCIDENTAL:
        inc = trial.incidental_index
        if pedagogical:
            styles[inc]["glow"] = True
            clk = core.Clock()
            while clk.getTime() < MOVE_DUR:
                styles[inc]["ori"] = 180.0 * clk.getTime() / MOVE_DUR
                rebuild(); check_quit(); yield_frame()
            styles[inc]["ori"] = 180.0
            rebuild(); hold(PAUSE_SWAP)
            styles[inc]["glow"] = False
        else:
            positions[inc] = INCIDENTAL_POS
            rebuild(); hold(PAUSE_SWAP)

    start, target = np.array(STIMULUS_POS, float), np.array(positions[trial.correct_choice_index], float)
    clk = core.Clock()
    while clk.getTime() < MOVE_DUR:
        t = clk.getTime() / MOVE_DUR
        ease = 0.5 - 0.5 * math.cos(math.pi * t)
        stim_slot[0] = tuple(start + (target - start) * ease)
        rebuild(); check_quit(); yield_frame()
    stim_slot[0] = tuple(target)
    rebuild(); hold(PAUSE_SORT)


def run_demonstration():
    show_text(condition.intro_text + "\n\nPress any key.")
    scene.update(label=condition.demo_label, submit=False)
    for trial in build_demo_sequence(condition, rng):
        logging.exp(f"demo trial {trial.trial_number} ({trial.trial_type})")
        run_demo_trial(trial)
        thisExp.addData("phase", "demo")
        thisExp.addData("trial_n", trial.trial_number)
        thisExp.addData("trial_type", trial.trial_type)
        thisExp.addData("correct_choice_index", trial.correct_choice_index)
        thisExp.addData("incidental_index", trial.incidental_index)
        for k, v in {**card_columns("stim", trial.stimulus), **slot_columns(trial.initial_slots)}.items():
            thisExp.addData(k, v)
        thisExp.nextEntry()
    scene.update(cards=[], label=None)


# ───────────────────────────────────────────────────────
#  Card sort phase
# ───────────────────────────────────────────────────────
def run_card_sort():
    show_text(condition.sort_transition_text + "\n\nPress any key.")
    phaseClock = core.Clock()
    tracker = trackers["card_sort"] = CriterionTracker(condition.card_sort_criterion, start_time=0.0)
    scene.update(label=None, submit=False)
    while not tracker.is_met:
        trial = generate_sort_trial(condition, rng)
        scene["cards"] = [(c, SLOT_POS[i], {}) for i, c in enumerate(trial.slots)]
        scene["cards"].append((trial.stimulus, STIMULUS_POS, {}))
        rtClock = core.Clock()
        if SIMULATE:
            hold(0.2)
            others = [i for i in range(3) if i != trial.correct_choice_index]
            chosen = trial.correct_choice_index if rng.random() < 0.8 else int(rng.choice(others))
        else:
            chosen = None
            while chosen is None:
                chosen = slot_at(wait_click(), SLOT_POS)
        rt = rtClock.getTime()
        correct = score_sort_response(trial, chosen)
        feedback(SLOT_POS[chosen], correct)
        tracker.record_outcome(correct, phaseClock.getTime())

        thisExp.addData("phase", "card_sort")
        thisExp.addData("trial_n", tracker.n_trials)
        thisExp.addData("chosen_index", chosen)
        thisExp.addData("correct_choice_index", trial.correct_choice_index)
        thisExp.addData("accuracy", int(correct))
        thisExp.addData("consecutive_correct", tracker.consecutive)
        thisExp.addData("rt", rt)
        for k, v in {**card_columns("stim", trial.stimulus), **slot_columns(trial.slots)}.items():
            thisExp.addData(k, v)
        thisExp.nextEntry()
    scene["cards"] = []
    print("Card sort phase complete:", tracker.summarize())


# ───────────────────────────────────────────────────────
#  Transfer phase
# ───────────────────────────────────────────────────────
def arrange_cards(trial):
    """Let the participant swap cards until Submit is clicked; return the arrangement."""
    arrangement = list(trial.slots)
    scene["cards"] = [(c, TRANSFER_POS[i], {}) for i, c in enumerate(arrangement)]
    if SIMULATE:
        hold(0.2)
        if rng.random() < 0.8:
            arrangement = swap_slots(arrangement, trial.incidental_index, 0)
        return arrangement
    selected = None
    while True:
        scene["cards"] = [(c, TRANSFER_POS[i], {"glow": i == selected})
                          for i, c in enumerate(arrangement)]
        pos = wait_click()
        if submitBtn.contains(pos):
            return arrangement
        slot = slot_at(pos, TRANSFER_POS)
        if slot is None:
            continue
        if selected is None:
            selected = slot
        else:
            if slot != selected:
                arrangement = swap_slots(arrangement, selected, slot)
            selected = None


def run_transfer():
    show_text(condition.transfer_transition_text + "\n\nPress any key.")
    phaseClock = core.Clock()
    tracker = trackers["transfer"] = CriterionTracker(condition.transfer_criterion, start_time=0.0)
    scene.update(label=condition.transfer_label, submit=True)
    while not tracker.is_met:
        trial = generate_transfer_trial(condition, rng)
        arrangement = arrange_cards(trial)
        t_end = phaseClock.getTime()
        correct = score_transfer_response(arrangement, condition)
        scene["cards"] = [(c, TRANSFER_POS[i], {}) for i, c in enumerate(arrangement)]
        feedback(TRANSFER_POS[0], correct)
        tracker.record_outcome(correct, t_end)

        thisExp.addData("phase", "transfer")
        thisExp.addData("trial_n", tracker.n_trials)
        thisExp.addData("incidental_index", trial.incidental_index)
        thisExp.addData("accuracy", int(correct))
        thisExp.addData("consecutive_correct", tracker.consecutive)
        for k, v in {**slot_columns(trial.slots),
                     **card_columns("final_slot0", arrangement[0])}.items():
            thisExp.addData(k, v)
        thisExp.nextEntry()
    scene.update(cards=[], label=None, submit=False)
    print("Transfer phase complete:", tracker.summarize())


# ───────────────────────────────────────────────────────
#  Main
# ───────────────────────────────────────────────────────
try:
    logging.exp(f"condition {condition.condition_name}: rule={condition.sorting_rule}, "
                f"incidental={expInfo['incidental']}")
    if not condition.skip_demo:
        run_demonstration()
    run_card_sort()
    run_transfer()
except KeyboardInterrupt:
    print("Experiment terminated prematurely. Saving data...")
finally:
    _save()

show_text("Thanks – finished!")
win.close(); core.quit()
