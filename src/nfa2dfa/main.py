import json
from typing import IO, Optional

import click
from tqdm import tqdm

from nfa2dfa.pipeline import ConversionResult, run
from nfa2dfa.serializer import dumps
from nfa2dfa.utils import ConversionFlag, configure_logging, tokenize
from nfa2dfa.validator import ValidationError


def _load(input_file: IO) -> dict:
    try:
        return json.load(input_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"input is not valid JSON: {e}") from e


def _build(
    input_file: IO, flags: ConversionFlag, max_states: Optional[int]
) -> ConversionResult:
    configure_logging(bool(flags & ConversionFlag.DEBUG))
    try:
        return run(_load(input_file), flags, max_states)
    except ValidationError as e:
        raise click.ClickException(str(e)) from e


def automaton_options(command):
    command = click.option(
        "--input-file",
        "-f",
        type=click.File(),
        default="-",
        help="JSON automaton definition, read from stdin by default",
    )(command)
    command = click.option(
        "--max-states",
        type=click.IntRange(min=1),
        default=None,
        help="Reject automata declaring more states than this",
    )(command)
    command = click.option(
        "--debug",
        "-g",
        is_flag=True,
        show_default=True,
        default=False,
        help="Turn on debug mode",
    )(command)
    return command


def request_options(command):
    command = click.option(
        "--out",
        "-o",
        type=click.File("w"),
        default="-",
        help="Where to write the JSON response",
    )(command)
    command = click.option(
        "--graph",
        type=click.File("w"),
        default=None,
        help="Write the resulting DFA as a graphviz DOT file",
    )(command)
    return command


def _respond(
    input_file: IO,
    out: IO,
    graph: Optional[IO],
    max_states: Optional[int],
    flags: ConversionFlag,
):
    if graph is not None:
        flags |= ConversionFlag.GRAPH
    result = _build(input_file, flags, max_states)
    out.write(dumps(result.to_dict()))
    out.write("\n")
    if flags & ConversionFlag.GRAPH:
        with graph:
            graph.write(result.dfa.graph().source)


@click.group(name="nfa2dfa", help="NFA to DFA conversion and DFA minimization")
def entry():
    pass


@entry.command(help="Convert an NFA into a DFA with the subset construction")
@automaton_options
@request_options
def convert(
    input_file: IO, max_states: Optional[int], debug: bool, out: IO, graph: Optional[IO]
):
    flags = ConversionFlag.NOFLAG
    if debug:
        flags |= ConversionFlag.DEBUG
    _respond(input_file, out, graph, max_states, flags)


@entry.command(help="Convert an NFA into a DFA and reduce it to its minimal form")
@automaton_options
@request_options
def minimize(
    input_file: IO, max_states: Optional[int], debug: bool, out: IO, graph: Optional[IO]
):
    flags = ConversionFlag.MINIMIZE
    if debug:
        flags |= ConversionFlag.DEBUG
    _respond(input_file, out, graph, max_states, flags)


@entry.command(help="Report which words the DFA built from an NFA accepts")
@click.argument("words", nargs=-1, type=click.STRING)
@automaton_options
@click.option(
    "--words-file",
    "-w",
    type=click.File(),
    default=None,
    help="Words to classify, one per line",
)
@click.option(
    "--separator",
    "-s",
    type=click.STRING,
    default=None,
    help="Split words on this string instead of matching the longest alphabet symbols",
)
@click.option(
    "--minimize/--no-minimize",
    show_default=True,
    default=False,
    help="Classify with the minimal DFA",
)
def accepts(
    words: tuple[str, ...],
    input_file: IO,
    max_states: Optional[int],
    debug: bool,
    words_file: Optional[IO],
    separator: Optional[str],
    minimize: bool,
):
    flags = ConversionFlag.NOFLAG
    if minimize:
        flags |= ConversionFlag.MINIMIZE
    if debug:
        flags |= ConversionFlag.DEBUG
    dfa = _build(input_file, flags, max_states).dfa

    corpus = list(words)
    if words_file is not None:
        corpus.extend(line.rstrip("\n") for line in words_file)

    results = {
        word: dfa.accepts(tokenize(word, dfa.alphabet, separator))
        for word in tqdm(corpus, disable=not debug, desc="classifying")
    }
    click.echo(json.dumps(results, indent=4))


if __name__ == "__main__":
    entry()
