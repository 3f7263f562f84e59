"""
Documents for the parsing benchmarks.

Each generator stresses one part of the parser: the number production,
string views, container nesting near the depth ceiling, or objects with
repeated keys. Output is deterministic for a given seed so timings are
comparable between runs.

Strings never contain a double quote, escaped or not, because a string
token ends at the next quote character.
"""

import random
from collections.abc import Callable

import jview

type DataGenerator = Callable[[random.Random], str]

_GENERATORS: dict[str, DataGenerator] = {}

_WORD_CHARS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 "
_ESCAPES = ["\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t", "\\u00e9"]
_ESCAPE_PROBABILITY = 0.25


def _generator(name: str) -> Callable[[DataGenerator], DataGenerator]:
    def register(func: DataGenerator) -> DataGenerator:
        _GENERATORS[name] = func
        return func

    return register


def generate_test_data(data_type: str, seed: int = 1729) -> str:
    """Returns the document registered as ``data_type``."""
    try:
        generator = _GENERATORS[data_type]
    except KeyError:
        raise ValueError(f"Unknown data type: {data_type}") from None

    return generator(random.Random(seed))


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(_WORD_CHARS, k=length))


def _quoted(text: str) -> str:
    return f'"{text}"'


def _number(rng: random.Random, shape: jview.NumberShape) -> str:
    """Writes a literal of the given shape; exponents always carry a sign."""
    text = str(rng.randint(-(10**9), 10**9))
    if shape in (jview.NumberShape.FRAC, jview.NumberShape.FRAC_EXP):
        text += f".{rng.randint(0, 10**6)}"
    if shape in (jview.NumberShape.EXP, jview.NumberShape.FRAC_EXP):
        exponent = rng.randint(-30, 30)
        marker = rng.choice("eE")
        text += f"{marker}{'-' if exponent < 0 else '+'}{abs(exponent)}"
    return text


def _object(pairs: list[tuple[str, str]]) -> str:
    return "{" + ", ".join(f"{_quoted(k)}: {v}" for k, v in pairs) + "}"


def _array(values: list[str]) -> str:
    return "[" + ", ".join(values) + "]"


@_generator("small_object")
def _small_object(rng: random.Random) -> str:
    """A record of a few hundred bytes touching every value kind."""
    return _object(
        [
            ("id", str(rng.randint(1, 99999))),
            ("name", _quoted(_word(rng, 12))),
            ("active", "true"),
            ("deleted", "false"),
            ("parent", "null"),
            ("score", _number(rng, jview.NumberShape.FRAC)),
            ("tags", _array([_quoted(_word(rng, 6)) for _ in range(4)])),
        ]
    )


@_generator("large_object")
def _large_object(rng: random.Random) -> str:
    """Two thousand keys whose values are mostly strings to borrow."""
    pairs = []
    for i in range(2000):
        if i % 5 == 0:
            value = _number(rng, jview.NumberShape.INT)
        else:
            value = _quoted(_word(rng, rng.randint(8, 40)))
        pairs.append((f"field_{i}", value))
    return _object(pairs)


@_generator("mixed_array")
def _mixed_array(rng: random.Random) -> str:
    """One flat array; every element kind in random order."""
    makers: list[Callable[[], str]] = [
        lambda: _number(rng, rng.choice(list(jview.NumberShape))),
        lambda: _quoted(_word(rng, rng.randint(0, 24))),
        lambda: rng.choice(["true", "false", "null"]),
        lambda: "[]",
        lambda: "{}",
        lambda: _object([("k", _quoted(_word(rng, 5)))]),
    ]
    return _array([rng.choice(makers)() for _ in range(2000)])


@_generator("nested_structure")
def _nested_structure(rng: random.Random) -> str:
    """A tree of objects, four children per node, six levels deep."""

    def node(level: int) -> str:
        if level == 0:
            return _quoted(_word(rng, 10))
        children = _array([node(level - 1) for _ in range(4)])
        return _object([("level", str(level)), ("children", children)])

    return node(6)


@_generator("string_heavy")
def _string_heavy(rng: random.Random) -> str:
    """Long strings full of backslash sequences, returned undecoded."""

    def escaped(length: int) -> str:
        return "".join(
            rng.choice(_ESCAPES)
            if rng.random() < _ESCAPE_PROBABILITY
            else rng.choice(_WORD_CHARS)
            for _ in range(length)
        )

    return _object(
        [
            (f"path_{i}", _quoted(escaped(rng.randint(50, 400))))
            for i in range(300)
        ]
    )


@_generator("number_heavy")
def _number_heavy(rng: random.Random) -> str:
    """Two thousand numbers cycling through all four literal shapes."""
    shapes = list(jview.NumberShape)
    return _array(
        [_number(rng, shapes[i % len(shapes)]) for i in range(2000)]
    )


@_generator("deep_arrays")
def _deep_arrays(rng: random.Random) -> str:
    """Twenty columns of arrays nested just under the default ceiling."""
    depth = jview.MAX_DEPTH - 6
    columns = []
    for _ in range(20):
        leaf = rng.choice(["null", "0", '""', "{}"])
        columns.append("[" * depth + leaf + "]" * depth)
    return _array(columns)


@_generator("duplicate_keys")
def _duplicate_keys(rng: random.Random) -> str:
    """Objects that repeat a handful of keys, all of which are kept."""
    keys = [_word(rng, 4) for _ in range(8)]
    records = [
        _object(
            [
                (rng.choice(keys), _number(rng, jview.NumberShape.INT))
                for _ in range(40)
            ]
        )
        for _ in range(100)
    ]
    return _array(records)
