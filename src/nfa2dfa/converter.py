import logging
from collections import deque
from itertools import count

from nfa2dfa.fsm import DFA, NFA
from nfa2dfa.utils import State, Subset, canonical

logger = logging.getLogger(__name__)


def subset_construction(nfa: NFA) -> DFA:
    """
    Convert `nfa` into an equivalent DFA whose states stand for sets of NFA states

    States are numbered from 0 in the order their subsets are discovered by a FIFO traversal
    from the closure of the start state, visiting symbols in alphabet order, so the same NFA
    always yields the same DFA. A subset with no successor on a symbol gets no transition
    for that symbol, the resulting DFA may be partial.

    Examples
    --------
    >>> nfa = NFA((0, 1, 2), ("a", "b"), 0, {2}, {0: {"a": {0, 1}, "b": {0}}, 1: {"b": {2}}})
    >>> dfa = subset_construction(nfa)
    >>> dfa.states
    (0, 1, 2)
    >>> [sorted(dfa.origins[state]) for state in dfa.states]
    [[0], [0, 1], [0, 2]]
    >>> sorted(dfa.accepting_states)
    [2]
    """
    ids = count()
    start: Subset = canonical(nfa.epsilon_closure({nfa.start_state}))
    subset2state: dict[Subset, State] = {start: next(ids)}
    queue: deque[Subset] = deque([start])
    table: dict[tuple[State, str], State] = {}

    while queue:
        subset = queue.popleft()
        for symbol in nfa.alphabet:
            if not (
                successor := canonical(nfa.epsilon_closure(nfa.move(subset, symbol)))
            ):
                continue
            if successor not in subset2state:
                subset2state[successor] = next(ids)
                queue.append(successor)
            table[(subset2state[subset], symbol)] = subset2state[successor]

    dfa = DFA.from_table(
        subset2state.values(),
        nfa.alphabet,
        subset2state[start],
        (
            state
            for subset, state in subset2state.items()
            if not nfa.accepting_states.isdisjoint(subset)
        ),
        table,
        origins={state: subset for subset, state in subset2state.items()},
    )
    logger.debug(
        "subset construction: %d NFA states -> %d DFA states, %d transitions",
        len(nfa.states),
        len(dfa.states),
        dfa.n_transitions(),
    )
    return dfa


if __name__ == "__main__":
    import doctest

    doctest.testmod()
