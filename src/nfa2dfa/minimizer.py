import logging
from collections import defaultdict
from typing import Final, Iterable

from more_itertools import partition

from nfa2dfa.fsm import DFA
from nfa2dfa.utils import State

logger = logging.getLogger(__name__)

# block index standing for "no transition on this symbol, or one into a discarded state"
MISSING: Final[int] = -1

Block = tuple[State, ...]


def _live_states(dfa: DFA, reachable: Iterable[State]) -> set[State]:
    """Reachable states from which some accepting state can still be reached"""
    predecessors: defaultdict[State, set[State]] = defaultdict(set)
    for state in reachable:
        for symbol in dfa.alphabet:
            if (end := dfa.target(state, symbol)) is not None:
                predecessors[end].add(state)

    live = {state for state in reachable if dfa.is_accepting(state)}
    stack = list(live)
    while stack:
        for previous in predecessors[stack.pop()]:
            if previous not in live:
                live.add(previous)
                stack.append(previous)
    return live


def _initial_partition(dfa: DFA, states: Iterable[State]) -> list[Block]:
    rejecting, accepting = partition(dfa.is_accepting, states)
    return [block for block in (tuple(accepting), tuple(rejecting)) if block]


def _refine(dfa: DFA, blocks: list[Block]) -> list[Block]:
    """
    Split every block until all states sharing a block move into the same blocks on every symbol

    Each pass splits every block by the signature of its states under the partition of the
    previous pass. A state with no transition on a symbol, or whose transition leads to a
    discarded state, goes to the `MISSING` pseudo-block, which differs from every real block.
    """
    while True:
        block_of = {state: index for index, block in enumerate(blocks) for state in block}
        refined: list[Block] = []

        for block in blocks:
            groups: defaultdict[tuple[int, ...], list[State]] = defaultdict(list)
            for state in block:
                signature = tuple(
                    block_of.get(dfa.target(state, symbol), MISSING)
                    for symbol in dfa.alphabet
                )
                groups[signature].append(state)
            refined.extend(tuple(group) for group in groups.values())

        if len(refined) == len(blocks):
            return blocks
        blocks = sorted(refined)


def minimize(dfa: DFA) -> DFA:
    """
    Reduce `dfa` to the unique minimal DFA accepting the same language (Moore's algorithm)

    States unreachable from the start state are discarded first, then every state other than
    the start state that cannot reach an accepting state, together with the edges into it.
    Each remaining block of equivalent states becomes one state, labelled with the smallest
    state id in the block.

    Examples
    --------
    >>> dfa = DFA.from_table(
    ...     (0, 1, 2, 3), ("a",), 0, {1, 2}, {(0, "a"): 1, (1, "a"): 2, (2, "a"): 1, (3, "a"): 0}
    ... )
    >>> minimal = minimize(dfa)
    >>> minimal.states
    (0, 1)
    >>> minimal.target(1, "a")
    1
    >>> sorted(minimal.origins[1])
    [1, 2]
    """
    reachable = dfa.reachable_states()
    live = _live_states(dfa, reachable)
    useful = sorted(
        state for state in reachable if state in live or state == dfa.start_state
    )
    blocks = _refine(dfa, sorted(_initial_partition(dfa, useful)))

    # blocks hold states in ascending order, so block[0] is the smallest member
    label = {state: block[0] for block in blocks for state in block}
    table: dict[tuple[State, str], State] = {}
    for block in blocks:
        representative = block[0]
        for symbol in dfa.alphabet:
            if (end := dfa.target(representative, symbol)) in label:
                table[(representative, symbol)] = label[end]

    minimal = DFA.from_table(
        (block[0] for block in blocks),
        dfa.alphabet,
        label[dfa.start_state],
        (block[0] for block in blocks if dfa.is_accepting(block[0])),
        table,
        origins={block[0]: block for block in blocks},
    )
    logger.debug(
        "minimization: %d DFA states (%d reachable, %d useful) -> %d states",
        len(dfa.states),
        len(reachable),
        len(useful),
        len(minimal.states),
    )
    return minimal


if __name__ == "__main__":
    import doctest

    doctest.testmod()
