import logging
from enum import IntFlag, auto
from typing import Final, Iterable, Optional, Union

from more_itertools import first_true


class Epsilon:
    """The empty string marker. Never a member of an alphabet."""

    __slots__ = ()

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ε"

    def __reduce__(self):
        return Epsilon, ()


EPSILON: Final = Epsilon()

State = int
Symbol = Union[str, Epsilon]
Subset = tuple[State, ...]


class ConversionFlag(IntFlag):
    NOFLAG = auto()
    MINIMIZE = auto()
    GRAPH = auto()
    DEBUG = auto()

    def should_minimize(self) -> bool:
        return bool(self & ConversionFlag.MINIMIZE)


def canonical(states: Iterable[State]) -> Subset:
    """
    A sorted, deduplicated tuple of states, usable as a dictionary key

    Examples
    --------
    >>> canonical({3, 1, 2})
    (1, 2, 3)
    >>> canonical([2, 2, 0])
    (0, 2)
    >>> canonical(())
    ()
    """
    return tuple(sorted(set(states)))


def symbol_order(alphabet: Iterable[str]) -> dict[Symbol, int]:
    """Position of every symbol in `alphabet`, epsilon sorting before all of them"""
    order: dict[Symbol, int] = {EPSILON: -1}
    for index, symbol in enumerate(alphabet):
        order.setdefault(symbol, index)
    return order


def tokenize(
    word: str, alphabet: Iterable[str], separator: Optional[str] = None
) -> list[str]:
    """
    Split `word` into alphabet symbols

    With a `separator` the word is split on it, empty pieces dropped. Otherwise the longest
    alphabet symbol matching at each position is taken. A character no symbol matches becomes
    a symbol of its own, so the word is rejected rather than silently shortened.

    Examples
    --------
    >>> tokenize("abab", ("a", "ab", "b"))
    ['ab', 'ab']
    >>> tokenize("if x", ("if", "x"))
    ['if', ' ', 'x']
    >>> tokenize("if x", ("if", "x"), separator=" ")
    ['if', 'x']
    >>> tokenize("", ("a",))
    []
    """
    if separator is not None:
        return [token for token in word.split(separator) if token]

    symbols = sorted(set(alphabet), key=len, reverse=True)
    tokens: list[str] = []
    position = 0
    while position < len(word):
        token = first_true(
            symbols,
            default=word[position],
            pred=lambda symbol: word.startswith(symbol, position),
        )
        tokens.append(token)
        position += len(token)
    return tokens


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    import doctest

    doctest.testmod()
