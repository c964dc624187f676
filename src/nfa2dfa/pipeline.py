import logging
from typing import Any, Mapping, NamedTuple, Optional

from nfa2dfa.converter import subset_construction
from nfa2dfa.fsm import DFA, NFA
from nfa2dfa.minimizer import minimize
from nfa2dfa.serializer import to_automaton_def
from nfa2dfa.utils import ConversionFlag
from nfa2dfa.validator import InputTooLargeError, validate

logger = logging.getLogger(__name__)


class ConversionResult(NamedTuple):
    """
    The validated NFA together with the DFA computed from it

    Attributes
    ----------
    nfa: NFA
        The automaton that was accepted after dropping invalid transitions
    dfa: DFA
        The subset construction of `nfa`, or its minimal form for a minimize request
    """

    nfa: NFA
    dfa: DFA

    def to_dict(self) -> dict[str, Any]:
        return {"nfa": to_automaton_def(self.nfa), "dfa": to_automaton_def(self.dfa)}


def _validate_bounded(raw: Mapping[str, Any], max_states: Optional[int]) -> NFA:
    nfa = validate(raw)
    if max_states is not None and len(nfa.states) > max_states:
        raise InputTooLargeError(
            f"automaton declares {len(nfa.states)} states, at most {max_states} are accepted"
        )
    return nfa


def run(
    raw: Mapping[str, Any],
    flags: ConversionFlag = ConversionFlag.NOFLAG,
    max_states: Optional[int] = None,
) -> ConversionResult:
    nfa = _validate_bounded(raw, max_states)
    dfa = subset_construction(nfa)
    if flags.should_minimize():
        dfa = minimize(dfa)
    logger.debug("request produced a DFA with %d states", len(dfa.states))
    return ConversionResult(nfa, dfa)


def convert_request(
    raw: Mapping[str, Any], max_states: Optional[int] = None
) -> dict[str, Any]:
    """Answer a convert request: `{"nfa": validated NFA, "dfa": its subset construction}`"""
    return run(raw, ConversionFlag.NOFLAG, max_states).to_dict()


def minimize_request(
    raw: Mapping[str, Any], max_states: Optional[int] = None
) -> dict[str, Any]:
    """Answer a minimize request: `{"nfa": validated NFA, "dfa": minimal DFA}`"""
    return run(raw, ConversionFlag.MINIMIZE, max_states).to_dict()
