import pytest

from nfa2dfa.validator import validate


@pytest.fixture
def ends_with_ab():
    return {
        "states": [0, 1, 2],
        "alphabet": ["a", "b"],
        "transitions": [[0, "a", [0, 1]], [0, "b", [0]], [1, "b", [2]]],
        "start": 0,
        "accept": [2],
    }


@pytest.fixture
def ends_with_ab_epsilon():
    # the same language, built with epsilon edges and a redundant loop state
    return {
        "states": [0, 1, 2, 3, 4],
        "alphabet": ["a", "b"],
        "transitions": [
            [0, None, [1]],
            [1, "a", [1, 2]],
            [1, "b", 1],
            [2, None, 3],
            [3, "b", [4]],
        ],
        "start": 0,
        "accept": [4],
    }


@pytest.fixture
def single_accepting_state():
    return {"states": [0], "alphabet": [], "transitions": [], "start": 0, "accept": [0]}


@pytest.fixture
def ends_with_ab_nfa(ends_with_ab):
    return validate(ends_with_ab)
