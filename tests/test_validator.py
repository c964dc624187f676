import logging

import pytest

from nfa2dfa.utils import EPSILON
from nfa2dfa.validator import ValidationError, is_state_id, validate


def _definition(**overrides):
    definition = {
        "states": [0, 1, 2],
        "alphabet": ["a", "b"],
        "transitions": [],
        "start": 0,
        "accept": [2],
    }
    definition.update(overrides)
    return definition


@pytest.mark.parametrize(
    "definition, message",
    [
        (_definition(states=[]), "at least one state"),
        (_definition(start=7), "start state 7"),
        (_definition(start="0"), "start state '0'"),
        ({"alphabet": ["a"], "start": 0}, "missing 'states'"),
        ({"states": [0]}, "missing 'start'"),
        (_definition(states=[0, -1]), "non-negative integers"),
        (_definition(states=[0, "1"]), "non-negative integers"),
        (_definition(states="012"), "'states' must be a sequence"),
        (_definition(transitions=[[0, "a"]]), "transition #0"),
        (_definition(transitions=[{"symbol": "a", "to": [1]}]), "missing 'from'"),
        (_definition(transitions=[[0, "a", "1"]]), "target must be a state"),
        ([0, 1, 2], "must be a mapping"),
    ],
)
def test_raises_validation_error(definition, message):
    with pytest.raises(ValidationError, match=message):
        validate(definition)


def test_empty_states_checked_before_start():
    with pytest.raises(ValidationError, match="at least one state"):
        validate({"states": [], "start": 5})


@pytest.mark.parametrize(
    "transition",
    [
        [5, "a", [1]],  # undeclared source
        [0, "c", [1]],  # undeclared symbol
        [0, "a", [5, 6]],  # every target undeclared
        [0, "a", []],  # no targets at all
        [0, "", [1]],  # empty string is not epsilon
        [0, 3, [1]],
    ],
)
def test_drops_invalid_transition_with_warning(transition, caplog):
    with caplog.at_level(logging.WARNING, logger="nfa2dfa.validator"):
        nfa = validate(_definition(transitions=[transition, [0, "b", [2]]]))
    assert nfa.n_transitions() == 1
    assert nfa.transition(0, "b") == frozenset({2})
    assert "dropping transition" in caplog.text


def test_trims_undeclared_targets(caplog):
    with caplog.at_level(logging.WARNING, logger="nfa2dfa.validator"):
        nfa = validate(_definition(transitions=[[0, "a", [1, 9, 2]]]))
    assert nfa.transition(0, "a") == frozenset({1, 2})
    assert "dropping targets [9]" in caplog.text


def test_merges_duplicate_transitions():
    nfa = validate(
        _definition(
            transitions=[
                [0, "a", [0]],
                [0, "a", 1],
                {"from": 0, "symbol": "a", "to": [1, 2]},
                [0, None, [1]],
                {"from": 0, "to": [2]},
            ]
        )
    )
    assert nfa.transition(0, "a") == frozenset({0, 1, 2})
    assert nfa.transition(0, EPSILON) == frozenset({1, 2})
    assert nfa.n_transitions() == 5


def test_normalizes_accept_alphabet_and_states(caplog):
    with caplog.at_level(logging.WARNING, logger="nfa2dfa.validator"):
        nfa = validate(
            _definition(
                states=[2, 0, 1, 0],
                alphabet=["b", "a", "b", None, ""],
                accept=[2, 4],
            )
        )
    assert nfa.states == (2, 0, 1)
    assert nfa.alphabet == ("b", "a")
    assert nfa.accepting_states == frozenset({2})
    assert "duplicate state 0" in caplog.text
    assert "dropping accept state 4" in caplog.text
    assert "dropping alphabet entry None" in caplog.text


def test_optional_keys_default_to_empty():
    nfa = validate({"states": [3], "start": 3})
    assert nfa.alphabet == ()
    assert nfa.accepting_states == frozenset()
    assert nfa.n_transitions() == 0


def test_never_raises_for_dropped_references():
    nfa = validate(
        _definition(
            transitions=[[9, "z", [8]], [0, "q", 1], [1, None, [7]]], accept=[11]
        )
    )
    assert nfa.n_transitions() == 0


@pytest.mark.parametrize(
    "item, expected", [(0, True), (12, True), (-3, False), (False, False), (1.0, False)]
)
def test_is_state_id(item, expected):
    assert is_state_id(item) is expected
