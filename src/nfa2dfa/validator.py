import logging
from collections import defaultdict
from typing import Any, Mapping, Sequence

from nfa2dfa.fsm import NFA
from nfa2dfa.utils import EPSILON, State, Symbol

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    ...


class InputTooLargeError(ValidationError):
    ...


def is_state_id(item: Any) -> bool:
    """
    Check if `item` can name a state: a non-negative integer which is not a bool

    Examples
    --------
    >>> is_state_id(0)
    True
    >>> is_state_id(-1)
    False
    >>> is_state_id(True)
    False
    >>> is_state_id("1")
    False
    """
    return isinstance(item, int) and not isinstance(item, bool) and item >= 0


def _as_list(raw: Mapping[str, Any], key: str, required: bool = False) -> list:
    if key not in raw or raw[key] is None:
        if required:
            raise ValidationError(f"automaton definition is missing {key!r}")
        return []
    value = raw[key]
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise ValidationError(f"{key!r} must be a sequence, got {type(value).__name__}")
    return list(value)


def _validate_states(raw: Mapping[str, Any]) -> tuple[State, ...]:
    items = _as_list(raw, "states", required=True)
    if not items:
        raise ValidationError("an automaton needs at least one state, 'states' is empty")

    states: list[State] = []
    for item in items:
        if not is_state_id(item):
            raise ValidationError(
                f"state identifiers must be non-negative integers, got {item!r}"
            )
        if item in states:
            logger.warning("ignoring duplicate state %r", item)
            continue
        states.append(item)
    return tuple(states)


def _validate_start(raw: Mapping[str, Any], states: tuple[State, ...]) -> State:
    if "start" not in raw:
        raise ValidationError("automaton definition is missing 'start'")
    start = raw["start"]
    if not is_state_id(start) or start not in states:
        raise ValidationError(f"start state {start!r} is not one of the declared states")
    return start


def _validate_accept(
    raw: Mapping[str, Any], states: tuple[State, ...]
) -> frozenset[State]:
    accept = set()
    for item in _as_list(raw, "accept"):
        if is_state_id(item) and item in states:
            accept.add(item)
        else:
            logger.warning("dropping accept state %r: not a declared state", item)
    return frozenset(accept)


def _validate_alphabet(raw: Mapping[str, Any]) -> tuple[str, ...]:
    alphabet: list[str] = []
    for symbol in _as_list(raw, "alphabet"):
        if not isinstance(symbol, str) or not symbol:
            logger.warning(
                "dropping alphabet entry %r: symbols are non-empty strings", symbol
            )
        elif symbol in alphabet:
            logger.warning("ignoring duplicate symbol %r", symbol)
        else:
            alphabet.append(symbol)
    return tuple(alphabet)


def _unpack_transition(entry: Any, index: int) -> tuple[Any, Any, list]:
    """
    Accepts both `[from, symbol, to]` and `{"from": ..., "symbol": ..., "to": ...}`
    `to` is either a single state or a sequence of states
    """
    if isinstance(entry, Mapping):
        missing = [key for key in ("from", "to") if key not in entry]
        if missing:
            raise ValidationError(f"transition #{index} is missing {missing[0]!r}")
        start, symbol, ends = entry["from"], entry.get("symbol"), entry["to"]
    elif (
        isinstance(entry, Sequence)
        and not isinstance(entry, (str, bytes))
        and len(entry) == 3
    ):
        start, symbol, ends = entry
    else:
        raise ValidationError(
            f"transition #{index} must be a (from, symbol, to) triple, got {entry!r}"
        )

    if isinstance(ends, (str, bytes, Mapping)):
        raise ValidationError(
            f"transition #{index} target must be a state or a sequence of states"
        )
    if isinstance(ends, Sequence):
        return start, symbol, list(ends)
    return start, symbol, [ends]


def validate(raw: Mapping[str, Any]) -> NFA:
    """
    Build an NFA from a user authored automaton definition

    A definition with no states or whose start state is undeclared is rejected with a `ValidationError`.
    Everything else is normalized: a transition touching an undeclared state or symbol is dropped
    (or, for targets, trimmed) with a warning, and duplicate transitions are merged by taking
    the union of their targets.

    Parameters
    ----------
    raw: Mapping[str, Any]
        An automaton definition with keys `states`, `alphabet`, `transitions`, `start` and `accept`

    Returns
    -------
    NFA
        The validated automaton

    Raises
    ------
    ValidationError
        If the definition is malformed, has no states or its start state is not declared

    Examples
    --------
    >>> nfa = validate({"states": [0, 1], "alphabet": ["a"], "transitions": [[0, "a", 1]], "start": 0, "accept": [1]})
    >>> nfa.transition(0, "a")
    frozenset({1})
    >>> validate({"states": [0], "transitions": [[0, "b", 0]], "start": 0}).n_transitions()
    0
    """
    if not isinstance(raw, Mapping):
        raise ValidationError(
            f"automaton definition must be a mapping, got {type(raw).__name__}"
        )

    states = _validate_states(raw)
    start = _validate_start(raw, states)
    accept = _validate_accept(raw, states)
    alphabet = _validate_alphabet(raw)

    declared = set(states)
    delta: defaultdict[State, defaultdict[Symbol, set[State]]] = defaultdict(
        lambda: defaultdict(set)
    )
    for index, entry in enumerate(_as_list(raw, "transitions")):
        source, symbol, ends = _unpack_transition(entry, index)

        if not is_state_id(source) or source not in declared:
            logger.warning("dropping transition %r: undeclared state %r", entry, source)
            continue
        if symbol is None:
            symbol = EPSILON
        elif not isinstance(symbol, str) or symbol not in alphabet:
            logger.warning("dropping transition %r: undeclared symbol %r", entry, symbol)
            continue

        valid = [end for end in ends if is_state_id(end) and end in declared]
        if len(valid) != len(ends):
            logger.warning(
                "dropping targets %r of transition %r: undeclared states",
                [end for end in ends if end not in valid],
                entry,
            )
        if not valid:
            logger.warning("dropping transition %r: no valid targets", entry)
            continue

        delta[source][symbol].update(valid)

    nfa = NFA(states, alphabet, start, accept, delta)
    logger.debug(
        "validated NFA with %d states and %d transitions",
        len(nfa.states),
        nfa.n_transitions(),
    )
    return nfa


if __name__ == "__main__":
    import doctest

    doctest.testmod()
