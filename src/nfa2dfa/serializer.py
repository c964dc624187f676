import json
from itertools import groupby
from typing import Any

from nfa2dfa.fsm import DFA, FiniteStateAutomaton, Transition
from nfa2dfa.utils import EPSILON, Epsilon


def _symbol(symbol) -> Any:
    return None if symbol is EPSILON else symbol


def to_automaton_def(automaton: FiniteStateAutomaton) -> dict[str, Any]:
    """
    The plain-data form of `automaton` that crosses the request boundary

    Transitions are `[from, symbol, to]` triples, with `None` standing for epsilon.
    A DFA's `to` is a single state, an NFA's `to` is the sorted list of all states reached
    from `from` on `symbol`.

    Examples
    --------
    >>> dfa = DFA.from_table((0, 1), ("a",), 0, {1}, {(0, "a"): 1})
    >>> to_automaton_def(dfa)["transitions"]
    [[0, 'a', 1]]
    """
    if isinstance(automaton, DFA):
        transitions = [
            [start, _symbol(symbol), end] for start, symbol, end in automaton.transitions()
        ]
    else:
        transitions = [
            [start, _symbol(symbol), [end for _, _, end in group]]
            for (start, symbol), group in groupby(
                automaton.transitions(), key=lambda t: (t.start, t.symbol)
            )
        ]

    definition: dict[str, Any] = {
        "states": list(automaton.states),
        "alphabet": list(automaton.alphabet),
        "transitions": transitions,
        "start": automaton.start_state,
        "accept": sorted(automaton.accepting_states),
    }
    if automaton.origins:
        definition["origins"] = {
            str(state): sorted(automaton.origins[state]) for state in automaton.states
        }
    return definition


class AutomatonEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        if isinstance(o, FiniteStateAutomaton):
            return to_automaton_def(o)
        if isinstance(o, Transition):
            return [o.start, _symbol(o.symbol), o.end]
        if isinstance(o, Epsilon):
            return None
        if isinstance(o, (set, frozenset)):
            return sorted(o)

        # Let the base class default method raise the TypeError
        return json.JSONEncoder.default(self, o)


def dumps(obj: Any, indent: int = 4) -> str:
    return json.dumps(obj, cls=AutomatonEncoder, indent=indent)


if __name__ == "__main__":
    import doctest

    doctest.testmod()
