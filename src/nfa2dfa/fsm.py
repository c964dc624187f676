from collections import defaultdict, deque
from dataclasses import dataclass, field
from functools import reduce
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

import graphviz
from more_itertools import all_unique

from nfa2dfa.utils import EPSILON, State, Symbol, symbol_order


@dataclass(frozen=True, slots=True)
class Transition:
    start: State
    symbol: Symbol
    end: State

    def __iter__(self):
        yield from [self.start, self.symbol, self.end]


def _freeze_delta(
    delta: Mapping[State, Mapping[Symbol, Iterable[State]]]
) -> Mapping[State, Mapping[Symbol, frozenset[State]]]:
    frozen = {}
    for state, table in delta.items():
        row = {symbol: frozenset(ends) for symbol, ends in table.items() if ends}
        if row:
            frozen[state] = MappingProxyType(row)
    return MappingProxyType(frozen)


@dataclass(frozen=True, slots=True)
class FiniteStateAutomaton:
    """
    Common representation of both kinds of automata.

    Formally, a finite automaton is a 5-tuple (Q, Σ, q0, F, δ) where
        • Q is finite set of states;
        • Σ is alphabet of input symbols;
        • q0 is start state;
        • F is subset of Q giving the ``accept`` states;
        and
        • δ is the transition function.

    Instances are never mutated after construction: every transformation returns a new automaton.
    `delta` maps a state to a table from symbols to the set of states reached on that symbol.
    `origins` maps a state of a generated automaton to the states of the automaton it was built from.
    """

    states: tuple[State, ...]
    alphabet: tuple[str, ...]
    start_state: State
    accepting_states: frozenset[State]
    delta: Mapping[State, Mapping[Symbol, frozenset[State]]]
    origins: Mapping[State, frozenset[State]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "states", tuple(self.states))
        object.__setattr__(self, "alphabet", tuple(self.alphabet))
        object.__setattr__(self, "accepting_states", frozenset(self.accepting_states))
        object.__setattr__(self, "delta", _freeze_delta(self.delta))
        object.__setattr__(
            self,
            "origins",
            MappingProxyType(
                {state: frozenset(sources) for state, sources in self.origins.items()}
            ),
        )
        assert self.states, "an automaton has at least one state"
        assert all_unique(self.states)
        assert self.start_state in self.states
        assert self.accepting_states <= set(self.states)
        assert EPSILON not in self.alphabet
        # origins are recorded for every state or for none
        assert not self.origins or set(self.origins) == set(self.states)
        declared, symbols = set(self.states), set(self.alphabet) | {EPSILON}
        for state, table in self.delta.items():
            assert state in declared
            for symbol, ends in table.items():
                assert symbol in symbols and ends <= declared

    def transition(self, state: State, symbol: Symbol) -> frozenset[State]:
        return self.delta.get(state, {}).get(symbol, frozenset())

    def transitions(self) -> Iterator[Transition]:
        """
        Every edge of the automaton, ordered by the position of its start state in `states`,
        then by the position of its symbol in `alphabet` (epsilon first), then by end state
        """
        order = symbol_order(self.alphabet)
        for state in self.states:
            table = self.delta.get(state, {})
            for symbol in sorted(table, key=order.__getitem__):
                for end in sorted(table[symbol]):
                    yield Transition(state, symbol, end)

    def n_transitions(self) -> int:
        return sum(len(ends) for table in self.delta.values() for ends in table.values())

    def is_accepting(self, state: State) -> bool:
        return state in self.accepting_states

    def graph(self) -> graphviz.Digraph:
        dot = graphviz.Digraph(self.__class__.__name__, engine="dot")
        dot.attr("graph", rankdir="LR")
        dot.attr("node", fontname="verdana")
        dot.attr("edge", fontname="verdana")

        for state in self.states:
            label = str(state)
            if state in self.origins:
                label += "\n{" + ", ".join(map(str, sorted(self.origins[state]))) + "}"
            dot.node(
                str(state),
                label=label,
                color="green" if state == self.start_state else "black",
                shape="doublecircle" if self.is_accepting(state) else "circle",
            )

        # parallel edges are drawn once with a combined label
        labels: defaultdict[tuple[State, State], list[str]] = defaultdict(list)
        for transition in self.transitions():
            labels[(transition.start, transition.end)].append(str(transition.symbol))
        for (start, end), symbols in labels.items():
            dot.edge(str(start), str(end), label=",".join(symbols))

        dot.node("start", shape="none")
        dot.edge("start", str(self.start_state), arrowhead="vee")
        return dot

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(states={self.states}, "
            f"alphabet={self.alphabet}, "
            f"start_state={self.start_state}, "
            f"transitions={[tuple(transition) for transition in self.transitions()]}, "
            f"accepting_states={tuple(sorted(self.accepting_states))})"
        )


class NFA(FiniteStateAutomaton):
    """
    Now the transition function specifies a set of states rather than a state:
    it maps Q × (Σ ∪ {ε}) to { subsets of Q }.

    Examples
    --------
    >>> nfa = NFA((0, 1, 2), ("a", "b"), 0, {2}, {0: {"a": {0, 1}, "b": {0}}, 1: {"b": {2}}})
    >>> nfa.accepts("aab")
    True
    >>> nfa.accepts("aba")
    False
    """

    __slots__ = ()

    def epsilon_closure(self, states: Iterable[State]) -> frozenset[State]:
        """
        This is the set of all the nodes which can be reached by following epsilon labeled edges
        This is done here using a breadth first search with an explicit queue, so cycles
        of epsilon edges terminate and deep chains don't exhaust the call stack

        https://castle.eiu.edu/~mathcs/mat4885/index/Webview/examples/epsilon-closure.pdf
        """
        closure = set(states)
        queue = deque(closure)

        while queue:
            for nxt in self.transition(queue.popleft(), EPSILON):
                if nxt not in closure:
                    closure.add(nxt)
                    queue.append(nxt)

        return frozenset(closure)

    def move(self, states: Iterable[State], symbol: Symbol) -> frozenset[State]:
        return frozenset(
            reduce(
                frozenset.union,
                (self.transition(state, symbol) for state in states),
                frozenset(),
            )
        )

    def has_epsilon_transitions(self) -> bool:
        return any(EPSILON in table for table in self.delta.values())

    def accepts(self, word: Iterable[str]) -> bool:
        alphabet = set(self.alphabet)
        current = self.epsilon_closure({self.start_state})
        for symbol in word:
            if symbol not in alphabet:
                return False
            current = self.epsilon_closure(self.move(current, symbol))
            if not current:
                return False
        return not current.isdisjoint(self.accepting_states)


class DFA(FiniteStateAutomaton):
    """
    A deterministic automaton: no epsilon edges and at most one end state per (state, symbol).
    The transition function may be partial, a missing edge rejects the word.
    """

    __slots__ = ()

    def __post_init__(self):
        FiniteStateAutomaton.__post_init__(self)
        for table in self.delta.values():
            assert EPSILON not in table, "a DFA has no epsilon transitions"
            assert all(len(ends) == 1 for ends in table.values())

    @classmethod
    def from_table(
        cls,
        states: Iterable[State],
        alphabet: Iterable[str],
        start_state: State,
        accepting_states: Iterable[State],
        table: Mapping[tuple[State, str], State],
        origins: Optional[Mapping[State, Iterable[State]]] = None,
    ) -> "DFA":
        delta: defaultdict[State, dict[Symbol, set[State]]] = defaultdict(dict)
        for (start, symbol), end in table.items():
            delta[start][symbol] = {end}
        return cls(
            tuple(states),
            tuple(alphabet),
            start_state,
            frozenset(accepting_states),
            delta,
            origins or {},
        )

    def target(self, state: State, symbol: str) -> Optional[State]:
        for end in self.transition(state, symbol):
            return end
        return None

    def accepts(self, word: Iterable[str]) -> bool:
        state: Optional[State] = self.start_state
        for symbol in word:
            if (state := self.target(state, symbol)) is None:
                return False
        return self.is_accepting(state)

    def reachable_states(self) -> tuple[State, ...]:
        """States reachable from the start state, in breadth first discovery order"""
        seen = {self.start_state}
        queue = deque([self.start_state])
        order = []

        while queue:
            state = queue.popleft()
            order.append(state)
            for symbol in self.alphabet:
                if (end := self.target(state, symbol)) is not None and end not in seen:
                    seen.add(end)
                    queue.append(end)

        return tuple(order)


if __name__ == "__main__":
    import doctest

    doctest.testmod()
