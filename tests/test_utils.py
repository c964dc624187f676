import pytest

from nfa2dfa.utils import EPSILON, Epsilon, canonical, symbol_order, tokenize


@pytest.mark.parametrize(
    "word, alphabet, separator, expected",
    [
        ("", ("a",), None, []),
        ("ab", ("ab",), None, ["ab"]),
        ("abab", ("a", "b", "ab"), None, ["ab", "ab"]),
        ("aba", ("a", "ab"), None, ["ab", "a"]),
        ("abc", ("a", "b"), None, ["a", "b", "c"]),
        ("if id", ("if", "id"), " ", ["if", "id"]),
        ("if  id ", ("if", "id"), " ", ["if", "id"]),
        ("a,b", ("a", "b", "a,b"), ",", ["a", "b"]),
    ],
)
def test_tokenize(word, alphabet, separator, expected):
    assert tokenize(word, alphabet, separator) == expected


def test_epsilon_is_a_singleton():
    assert Epsilon() is EPSILON
    assert repr(EPSILON) == "ε"
    assert EPSILON != "ε"


def test_canonical():
    assert canonical({3, 1, 3, 2}) == (1, 2, 3)
    assert canonical(()) == ()


def test_symbol_order():
    order = symbol_order(("b", "a"))
    assert sorted(["a", EPSILON, "b"], key=order.__getitem__) == [EPSILON, "b", "a"]
