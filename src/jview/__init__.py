"""
Recursive-descent parser for JSON-like documents.

Parses text into a tree of lightweight value objects that point back into
the source text instead of copying it, and reports the first syntax error
with its position. Alternatives are chosen with committed-choice
backtracking: a production that fails before it is recognisable lets the
next one try, while a production that fails after it is recognisable aborts
the whole parse.
"""

import logging
import os
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import IO
from typing import Any

from ._utf8_mapper import UTF8PositionMapper

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

type Position = int

# Nesting ceiling for containers; enforced before each descent
MAX_DEPTH = 256

# Number components are bounded like a signed 64-bit machine integer
INT_MAX = 2**63 - 1

WHITESPACE = " \n\r\t"
DIGITS = "0123456789"

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "JVIEW_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """
    Timing for one production or cursor primitive.

    ``mismatches`` counts attempts that gave way to the next alternative,
    which is the price of trying productions in a fixed order.
    """

    name: str
    call_count: int = 0
    mismatches: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(
        self, duration_ns: int, chars: int = 0, mismatched: bool = False
    ) -> None:
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars
        if mismatched:
            self.mismatches += 1

    @property
    def mean_time_ns(self) -> float:
        return self.total_time_ns / self.call_count if self.call_count else 0.0


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Times the enclosed block and files it under ``name``."""

        def __init__(self, name: str, chars: int = 0) -> None:
            self.name = name
            self.chars = chars
            self.started_ns = 0

        def __enter__(self) -> "ProfileContext":
            self.started_ns = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            elapsed = time.perf_counter_ns() - self.started_ns
            if self.name not in _hot_path_stats:
                _hot_path_stats[self.name] = HotPathStats(self.name)
            _hot_path_stats[self.name].record_call(
                elapsed,
                self.chars,
                mismatched=exc_type is not None
                and issubclass(exc_type, Mismatch),
            )

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns a snapshot of the collected statistics by name."""
        return dict(_hot_path_stats)

    def clear_hot_path_stats() -> None:
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, name: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class ParseError(ValueError):
    """
    Reports a parse failure with its position in the source text.

    ``pos`` is a character offset into ``doc``; ``offset`` (also reachable as
    ``byte_offset``) gives the same position in the UTF-8 encoding of
    ``doc``. Subclasses tell whether the failure may be recovered by trying
    another production.
    """

    committed = False

    def __init__(self, msg: str, doc: str = "", pos: Position = 0) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos

        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")

    @property
    def byte_offset(self) -> int:
        """UTF-8 byte offset of the failure."""
        return UTF8PositionMapper(self.doc).char_to_byte(self.pos)

    offset = byte_offset

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.msg, self.doc, self.pos))


class Mismatch(ParseError):
    """The input does not match the production; another one may be tried."""


class Committed(ParseError):
    """
    The input matched a production far enough to identify it, then broke.

    No sibling production may be tried once this is raised; it travels to
    the caller of ``parse`` unchanged.
    """

    committed = True

    @classmethod
    def from_mismatch(cls, err: ParseError) -> "Committed":
        return cls(err.msg, err.doc, err.pos)


class ValueKind(Enum):
    """Discriminates the variants of a parsed value."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"


class NumberShape(Enum):
    """Which optional parts a number literal was written with."""

    INT = "int"
    FRAC = "frac"
    EXP = "exp"
    FRAC_EXP = "frac_exp"


class Constant(Enum):
    """The three keyword values."""

    TRUE = "true"
    FALSE = "false"
    NULL = "null"

    @property
    def kind(self) -> ValueKind:
        return ValueKind[self.name]


@dataclass(frozen=True)
class JsonString:
    """
    View of a string literal in the source text.

    ``start`` and ``end`` delimit the characters between the quotes. Nothing
    is decoded: backslash escapes stay exactly as written. The view keeps the
    whole source alive for as long as it is referenced.
    """

    source: str = field(repr=False)
    start: Position
    end: Position

    kind = ValueKind.STRING

    @property
    def text(self) -> str:
        return self.source[self.start : self.end]

    def __str__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Number:
    """
    Number literal kept as separate integer components.

    ``fraction`` holds the digits after the dot read as an integer, so
    ``fraction_digits`` is needed to tell ``1.5`` from ``1.05``. ``negative``
    records a leading minus, which ``integer`` alone loses for ``-0.5``.
    """

    integer: int
    fraction: int | None = None
    exponent: int | None = None
    fraction_digits: int = 0
    negative: bool = False

    kind = ValueKind.NUMBER

    @property
    def shape(self) -> NumberShape:
        if self.fraction is None:
            if self.exponent is None:
                return NumberShape.INT
            return NumberShape.EXP
        if self.exponent is None:
            return NumberShape.FRAC
        return NumberShape.FRAC_EXP


@dataclass(frozen=True)
class Object:
    """Ordered key/value pairs; duplicate keys are kept as written."""

    items: list[tuple[JsonString, "Value"]] = field(default_factory=list)

    kind = ValueKind.OBJECT

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[tuple[JsonString, "Value"]]:
        return iter(self.items)

    def keys(self) -> list[str]:
        return [key.text for key, _ in self.items]

    def get(self, key: str, default: Any = None) -> "Value | Any":
        """Returns the value of the first pair whose key reads ``key``."""
        for item_key, value in self.items:
            if item_key.text == key:
                return value
        return default


@dataclass(frozen=True)
class Array:
    """Ordered sequence of values."""

    items: list["Value"] = field(default_factory=list)

    kind = ValueKind.ARRAY

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)

    def __getitem__(self, index: int) -> "Value":
        return self.items[index]


type Value = Object | Array | JsonString | Number | Constant


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures parsing behavior with immutable settings.

    ``max_depth`` bounds container nesting; a document nested deeper fails
    with a committed error before the extra level is descended into.
    """

    max_depth: int = MAX_DEPTH

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(
            self.max_depth, int
        ):
            raise TypeError("max_depth must be an integer")
        if self.max_depth < 1:
            raise ValueError("max_depth must be positive")


class Cursor:
    """
    Read position, nesting depth and source text of a single parse.

    Every primitive either succeeds and moves past what it matched, or
    raises ``Mismatch`` with the offset left where it was. Only failures
    that make the intended production unambiguous raise ``Committed``.
    """

    def __init__(self, text: str, max_depth: int = MAX_DEPTH) -> None:
        self.text = text
        self.length = len(text)
        self.offset: Position = 0
        self.depth = 0
        self.max_depth = max_depth

    def mismatch(self, msg: str, pos: Position | None = None) -> Mismatch:
        return Mismatch(msg, self.text, self.offset if pos is None else pos)

    def commit(self, msg: str, pos: Position | None = None) -> Committed:
        return Committed(msg, self.text, self.offset if pos is None else pos)

    @contextmanager
    def committed(self) -> Iterator[None]:
        """Turns a mismatch raised inside the block into a committed error."""
        try:
            yield
        except Mismatch as e:
            raise Committed.from_mismatch(e) from e

    def peek(self) -> str | None:
        """Returns current character without advancing."""
        return self.text[self.offset] if self.offset < self.length else None

    def at_end(self) -> bool:
        return self.offset >= self.length

    def consume(self, expected: str) -> None:
        """Advances past ``expected`` if it is the current character."""
        char = self.peek()
        if char == expected:
            self.offset += 1
            return

        got = "EOF" if char is None else f"'{char}'"
        raise self.mismatch(f"expected '{expected}' got {got}")

    def consume_literal(self, expected: str) -> None:
        """Advances past ``expected`` if the remaining text starts with it."""
        end = self.offset + len(expected)
        if self.text.startswith(expected, self.offset):
            self.offset = end
            return

        if end > self.length:
            raise self.mismatch(f"expected '{expected}' got EOF")
        got = self.text[self.offset : end]
        raise self.mismatch(f"expected '{expected}' got '{got}'")

    def skip_whitespace(self) -> None:
        """Skips space, line feed, carriage return and tab."""
        with ProfileContext("skip_whitespace"):
            while (
                self.offset < self.length
                and self.text[self.offset] in WHITESPACE
            ):
                self.offset += 1

    def consume_string_token(self) -> JsonString:
        """Consumes a quoted string and returns a view of its contents."""
        with ProfileContext("consume_string_token"):
            self.consume('"')
            start = self.offset
            end = self.text.find('"', start)

            if end < 0:
                self.offset = start - 1
                raise self.mismatch("unterminated string", self.length)

            self.offset = end + 1
            return JsonString(self.text, start, end)

    def consume_integer(self, label: str = "integer") -> int:
        """
        Consumes an optionally negative run of ASCII digits.

        Overflow past ``INT_MAX`` is a committed error named after ``label``.
        """
        start = self.offset
        negative = self.peek() == "-"
        if negative:
            self.offset += 1

        digits_start = self.offset
        value = 0
        while self.offset < self.length and self.text[self.offset] in DIGITS:
            value = value * 10 + ord(self.text[self.offset]) - ord("0")
            if value > INT_MAX:
                raise self.commit(f"{label} too large")
            self.offset += 1

        if self.offset == digits_start:
            self.offset = start
            raise self.mismatch(f"{label} didn't contain any digits")

        return -value if negative else value

    def enter(self) -> None:
        """Records one more level of nesting, failing at the ceiling."""
        self.depth += 1
        if self.depth >= self.max_depth:
            raise self.commit("reached recursion depth")

    def leave(self) -> None:
        self.depth -= 1

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Brackets a recursive descent with ``enter`` and ``leave``."""
        try:
            self.enter()
            yield
        finally:
            self.leave()


class Parser:
    """
    Grammar productions over a cursor.

    ``parse_value`` tries object, number, array, string, ``true``, ``false``
    and ``null`` in that order. A ``Mismatch`` from one alternative moves on
    to the next at the same offset; a ``Committed`` error ends the parse.
    """

    def __init__(self, cursor: Cursor) -> None:
        self.cursor = cursor

    def parse_value(self) -> Value:
        """Parses one value along with the whitespace around it."""
        with ProfileContext("parse_value"):
            cursor = self.cursor
            cursor.skip_whitespace()

            productions = (
                self.parse_object,
                self.parse_number,
                self.parse_array,
                self.parse_string,
            )
            for production in productions:
                try:
                    value = production()
                except Mismatch:
                    continue
                cursor.skip_whitespace()
                return value

            for constant in Constant:
                try:
                    cursor.consume_literal(constant.value)
                except Mismatch:
                    continue
                cursor.skip_whitespace()
                return constant

            raise cursor.commit("unknown value kind")

    def parse_string(self) -> JsonString:
        """Parses a string; failing past the opening quote is committed."""
        cursor = self.cursor
        if cursor.peek() != '"':
            return cursor.consume_string_token()

        with cursor.committed():
            return cursor.consume_string_token()

    def parse_number(self) -> Number:
        """Parses ``integer ['.' fraction] [('e'|'E') ('+'|'-') exponent]``."""
        with ProfileContext("parse_number"):
            cursor = self.cursor
            negative = cursor.peek() == "-"
            integer = cursor.consume_integer()

            fraction = None
            fraction_digits = 0
            if cursor.peek() == ".":
                cursor.offset += 1
                if cursor.peek() == "-":
                    raise cursor.commit("can't have a negative fraction")

                start = cursor.offset
                with cursor.committed():
                    fraction = cursor.consume_integer("fraction")
                fraction_digits = cursor.offset - start

            exponent = None
            if cursor.peek() in ("e", "E"):
                cursor.offset += 1
                sign = cursor.peek()
                if sign not in ("+", "-"):
                    raise cursor.commit("missing sign in E-notation")

                cursor.offset += 1
                if cursor.peek() in ("+", "-"):
                    raise cursor.commit("unknown sign in E-notation")

                with cursor.committed():
                    exponent = cursor.consume_integer("exponent")
                if sign == "-":
                    exponent = -exponent

            return Number(
                integer, fraction, exponent, fraction_digits, negative
            )

    def _continue_sequence(self, closing: str) -> bool:
        """Consumes ',' or the closing bracket; returns True on ','."""
        cursor = self.cursor
        char = cursor.peek()

        if char == ",":
            cursor.offset += 1
            return True
        elif char == closing:
            cursor.offset += 1
            return False
        else:
            raise cursor.commit("missing ',' delimiter")

    def parse_object(self) -> Object:
        """Parses '{' key ':' value {',' key ':' value} '}'."""
        with ProfileContext("parse_object"):
            cursor = self.cursor
            cursor.consume("{")
            cursor.skip_whitespace()

            # Handle empty object
            if cursor.peek() == "}":
                cursor.offset += 1
                return Object()

            items: list[tuple[JsonString, Value]] = []

            while True:
                cursor.skip_whitespace()
                with cursor.committed():
                    key = cursor.consume_string_token()
                    cursor.skip_whitespace()
                    cursor.consume(":")

                with cursor.nested(), cursor.committed():
                    value = self.parse_value()
                items.append((key, value))

                if not self._continue_sequence("}"):
                    break

            return Object(items)

    def parse_array(self) -> Array:
        """Parses '[' value {',' value} ']'."""
        with ProfileContext("parse_array"):
            cursor = self.cursor
            cursor.consume("[")
            cursor.skip_whitespace()

            # Handle empty array
            if cursor.peek() == "]":
                cursor.offset += 1
                return Array()

            items: list[Value] = []

            while True:
                with cursor.nested(), cursor.committed():
                    items.append(self.parse_value())

                if not self._continue_sequence("]"):
                    break

            return Array(items)


def _coerce_text(s: Any) -> str:
    """Accepts str as is and decodes UTF-8 bytes."""
    if isinstance(s, str):
        return s

    if isinstance(s, bytes | bytearray):
        data = bytes(s)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            prefix = data[: e.start].decode("utf-8")
            raise Committed(
                "invalid UTF-8 input", prefix, len(prefix)
            ) from e

    raise TypeError(
        f"the document must be str, bytes or bytearray, not {type(s).__name__}"
    )


def parse(s: str | bytes | bytearray, **kwargs: Any) -> Value:
    """
    Parses exactly one value from ``s``.

    Keyword arguments build a ``ParseConfig``. Raises ``Committed`` for a
    malformed value and ``Mismatch`` when characters follow the value.
    """
    config = ParseConfig(**kwargs)

    try:
        text = _coerce_text(s)
        with ProfileContext("parse", len(text)):
            cursor = Cursor(text, config.max_depth)
            value = Parser(cursor).parse_value()
            if not cursor.at_end():
                raise cursor.mismatch("trailing characters")
    except ParseError as e:
        logger.debug("parse aborted: %s", e)
        raise

    return value


def load(fp: IO[str], **kwargs: Any) -> Value:
    """
    Parses one value from a file-like object.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return parse(fp.read(), **kwargs)


__all__ = [
    "DIGITS",
    "INT_MAX",
    "MAX_DEPTH",
    "WHITESPACE",
    "Array",
    "Committed",
    "Constant",
    "Cursor",
    "HotPathStats",
    "JsonString",
    "Mismatch",
    "Number",
    "NumberShape",
    "Object",
    "ParseConfig",
    "ParseError",
    "Parser",
    "Value",
    "ValueKind",
    "clear_hot_path_stats",
    "get_hot_path_stats",
    "load",
    "parse",
]
