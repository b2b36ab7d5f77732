"""
Minimal streaming JSON reader with no runtime dependencies.

Decodes UTF-8 from a file or in-memory buffer one codepoint at a time, lexes
the characters into tokens with a single character of pushback, and builds a
tagged-union value tree with a two-token lookahead recursive descent parser.
"""

import logging
import math
import os
import string
import struct
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import IO
from typing import Any
from typing import Final
from typing import Self

from jread._utf8 import EOF_CHAR
from jread._utf8 import decode_codepoint

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

type Position = int
type PathLike = str | os.PathLike[str]

# Plain Python rendition of a value tree
type PythonValue = (
    str | float | bool | None | dict[str, PythonValue] | list[PythonValue]
)

# Read size for file-backed sources
BUFSIZE: Final = 16 * 1024
# Nesting guard, keeps deep input clear of the interpreter recursion limit
DEFAULT_MAX_DEPTH: Final = 256

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "JREAD_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during parsing."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0

    def record_call(self, duration_ns: int) -> None:
        """Records a function call with its duration."""
        self.call_count += 1
        self.total_time_ns += duration_ns


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str):
            self.func_name = func_name
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


@dataclass(frozen=True)
class Location:
    """Character offset plus 1-based line and column of a source character."""

    pos: Position = 0
    lineno: int = 1
    colno: int = 1

    def advanced(self, char: str) -> "Location":
        """Returns the location of the character following ``char``."""
        if char == "\n":
            return Location(self.pos + 1, self.lineno + 1, 1)
        return Location(self.pos + 1, self.lineno, self.colno + 1)


class JSONParseError(ValueError):
    """
    Base class for every failure raised while reading a JSON document.

    Carries the message along with the character offset, line and column
    where the problem was detected.
    """

    def __init__(
        self, msg: str, pos: Position = 0, lineno: int = 1, colno: int = 1
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.pos = pos
        self.lineno = lineno
        self.colno = colno

        super().__init__(f"{msg} at line {lineno}, column {colno}")

    @classmethod
    def at(cls, msg: str, location: Location) -> Self:
        """Builds the error for a source location."""
        return cls(msg, location.pos, location.lineno, location.colno)


class UTF8DecodeError(JSONParseError):
    """Malformed UTF-8 input or a failed read from the byte source."""


class JSONSyntaxError(JSONParseError):
    """Input that does not lex or does not fit the grammar."""


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures parsing behavior with immutable settings.

    ``max_depth`` bounds object/array nesting (None disables the guard) and
    ``chunk_size`` sets how many bytes file-backed sources read at a time.
    """

    max_depth: int | None = DEFAULT_MAX_DEPTH
    chunk_size: int = BUFSIZE

    def __post_init__(self) -> None:
        if self.max_depth is not None:
            if not isinstance(self.max_depth, int) or isinstance(
                self.max_depth, bool
            ):
                raise TypeError("max_depth must be an integer or None")
            if self.max_depth < 1:
                raise ValueError("max_depth must be positive")
        if not isinstance(self.chunk_size, int) or isinstance(
            self.chunk_size, bool
        ):
            raise TypeError("chunk_size must be an integer")
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be positive")


class ValueKind(Enum):
    """The six variants of a JSON value."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NIL = "nil"
    OBJECT = "object"
    ARRAY = "array"


_SCALAR_KINDS: Final = frozenset(
    {ValueKind.STRING, ValueKind.NUMBER, ValueKind.BOOLEAN}
)


def _to_single(value: str | float) -> float:
    """Rounds to the nearest single-precision float, saturating to inf."""
    number = float(value)
    try:
        return struct.unpack("<f", struct.pack("<f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


@dataclass(frozen=True)
class JsonValue:
    """
    Closed tagged union over the JSON value variants.

    ``kind`` selects the variant and ``payload`` holds its data: ``str`` for
    STRING, a single-precision ``float`` for NUMBER, ``bool`` for BOOLEAN,
    ``None`` for NIL, ``dict[str, JsonValue]`` for OBJECT and
    ``list[JsonValue]`` for ARRAY.

    Values compare by kind and payload and are not hashable.
    """

    kind: ValueKind
    payload: Any = None

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def string(cls, text: str) -> "JsonValue":
        return cls(ValueKind.STRING, text)

    @classmethod
    def number(cls, value: str | float) -> "JsonValue":
        return cls(ValueKind.NUMBER, _to_single(value))

    @classmethod
    def boolean(cls, value: bool) -> "JsonValue":
        return cls(ValueKind.BOOLEAN, value)

    @classmethod
    def nil(cls) -> "JsonValue":
        return cls(ValueKind.NIL)

    @classmethod
    def object(cls, members: dict[str, "JsonValue"]) -> "JsonValue":
        return cls(ValueKind.OBJECT, members)

    @classmethod
    def array(cls, items: list["JsonValue"]) -> "JsonValue":
        return cls(ValueKind.ARRAY, items)

    def to_python(self) -> PythonValue:
        """Converts the tree into plain dicts, lists, strs, floats and bools."""
        if self.kind is ValueKind.OBJECT:
            return {
                key: value.to_python() for key, value in self.payload.items()
            }
        elif self.kind is ValueKind.ARRAY:
            return [item.to_python() for item in self.payload]
        elif self.kind is ValueKind.NIL:
            return None
        elif self.kind in _SCALAR_KINDS:
            return self.payload
        else:
            raise AssertionError(f"Unhandled value kind: {self.kind}")


class TokenKind(Enum):
    """Token classes produced by the lexer."""

    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    LEFT_BRACKET = "["
    RIGHT_BRACKET = "]"
    COMMA = ","
    COLON = ":"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    EOF = "eof"
    # Placeholder before the lookahead window is first filled
    NONE = "none"


@dataclass(frozen=True)
class Token:
    """Raw lexeme text, its kind, and where it starts in the source."""

    lexeme: str
    kind: TokenKind
    start: Location = field(default_factory=Location)


_SINGLE_CHAR_TOKENS: Final = {
    "{": TokenKind.LEFT_BRACE,
    "}": TokenKind.RIGHT_BRACE,
    "[": TokenKind.LEFT_BRACKET,
    "]": TokenKind.RIGHT_BRACKET,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
}

_KEYWORDS: Final = {
    "t": ("true", TokenKind.BOOLEAN),
    "f": ("false", TokenKind.BOOLEAN),
    "n": ("null", TokenKind.NULL),
}

# Unicode White_Space; str.isspace() also admits U+001C..U+001F
_WHITESPACE: Final = frozenset(
    "\t\n\v\f\r \x85\xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005"
    "\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000"
)

_ASCII_DIGITS: Final = frozenset(string.digits)
_ASCII_PUNCTUATION: Final = frozenset(string.punctuation)


class BufferSource:
    """Byte source over an in-memory buffer."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self._index = 0

    def next_byte(self) -> int | None:
        if self._index >= len(self.data):
            return None
        byte = self.data[self._index]
        self._index += 1
        return byte

    def close(self) -> None:
        pass


class FileSource:
    """
    Byte source over a binary file object, read in fixed-size chunks.

    Only closes the file on ``close()`` when it opened the file itself.
    """

    def __init__(
        self, fp: IO[bytes], chunk_size: int = BUFSIZE, *, owned: bool = False
    ) -> None:
        self.fp = fp
        self.chunk_size = chunk_size
        self.owned = owned
        self._buffer = b""
        self._index = 0
        self._exhausted = False

    @classmethod
    def open(cls, path: PathLike, chunk_size: int = BUFSIZE) -> "FileSource":
        """Opens ``path`` for reading; OSError propagates to the caller."""
        fp = open(path, "rb")  # noqa: SIM115
        logger.debug("Opened %s for reading", os.fspath(path))
        return cls(fp, chunk_size, owned=True)

    def next_byte(self) -> int | None:
        if self._index >= len(self._buffer):
            if self._exhausted:
                return None
            self._buffer = self.fp.read(self.chunk_size)
            self._index = 0
            if not self._buffer:
                self._exhausted = True
                return None
        byte = self._buffer[self._index]
        self._index += 1
        return byte

    def close(self) -> None:
        if self.owned and not self.fp.closed:
            self.fp.close()
            logger.debug("Closed %s", getattr(self.fp, "name", self.fp))


type ByteSource = BufferSource | FileSource


class JsonLexer:
    """
    Turns a byte source into JSON tokens.

    Pulls one decoded character at a time and keeps a single slot of
    pushback so the character ending a number can be re-read.
    """

    def __init__(self, source: ByteSource) -> None:
        self.source = source
        self._putback: tuple[str, Location] | None = None
        # Location of the next character read from the source
        self._cursor = Location()
        # Location of the character most recently returned by next_char
        self.location = Location()

    @classmethod
    def from_path(
        cls, path: PathLike, chunk_size: int = BUFSIZE
    ) -> "JsonLexer":
        return cls(FileSource.open(path, chunk_size))

    @classmethod
    def from_string(cls, text: str | bytes) -> "JsonLexer":
        # Lone surrogates survive encoding and are rejected by the decoder
        data = (
            text.encode("utf-8", "surrogatepass")
            if isinstance(text, str)
            else bytes(text)
        )
        return cls(BufferSource(data))

    def __enter__(self) -> "JsonLexer":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self.source.close()

    def next_char(self) -> str:
        """Returns the next character, or EOF_CHAR once the source is spent."""
        if self._putback is not None:
            char, self.location = self._putback
            self._putback = None
            return char

        self.location = self._cursor
        try:
            head = self.source.next_byte()
            if head is None:
                return EOF_CHAR
            char = decode_codepoint(head, self.source.next_byte)
        except OSError as e:
            raise UTF8DecodeError.at("Error reading file", self.location) from e

        if char is None:
            raise UTF8DecodeError.at("Invalid UTF-8", self.location)

        self._cursor = self._cursor.advanced(char)
        return char

    def putback(self, char: str) -> None:
        """Un-reads ``char``; the slot holds exactly one character."""
        if self._putback is not None:
            raise RuntimeError("putback called twice")
        self._putback = (char, self.location)

    def try_match_char(self, expected: str) -> bool:
        """Consumes the next character only if it equals ``expected``."""
        char = self.next_char()
        if char == expected:
            return True
        self.putback(char)
        return False

    def next_token(self) -> Token:
        """Returns the next token, raising JSONParseError on bad input."""
        with ProfileContext("next_token"):
            char = self.next_char()
            while char in _WHITESPACE:
                char = self.next_char()
            start = self.location

            kind = _SINGLE_CHAR_TOKENS.get(char)
            if kind is not None:
                return Token(char, kind, start)
            elif char == '"':
                return self._scan_string(start)
            elif char in _ASCII_DIGITS:
                return self._scan_number(char, start)
            elif char in _KEYWORDS:
                return self._scan_keyword(char, start)
            elif char == EOF_CHAR:
                return Token("", TokenKind.EOF, start)
            elif char in _ASCII_PUNCTUATION:
                raise JSONSyntaxError.at("unexpected punctuation", start)
            else:
                raise JSONSyntaxError.at("unexpected character", start)

    def _scan_string(self, start: Location) -> Token:
        """Collects raw characters up to the closing quote, keeping escapes."""
        chars: list[str] = []
        escaped = False
        while True:
            char = self.next_char()
            if char == EOF_CHAR:
                raise JSONSyntaxError.at("Unterminated string", start)
            if char == '"' and not escaped:
                break
            chars.append(char)
            escaped = char == "\\" and not escaped
        return Token("".join(chars), TokenKind.STRING, start)

    def _scan_number(self, first: str, start: Location) -> Token:
        digits = [first]
        char = self.next_char()
        while char in _ASCII_DIGITS:
            digits.append(char)
            char = self.next_char()
        self.putback(char)
        return Token("".join(digits), TokenKind.NUMBER, start)

    def _scan_keyword(self, first: str, start: Location) -> Token:
        word, kind = _KEYWORDS[first]
        for expected in word[1:]:
            if not self.try_match_char(expected):
                raise JSONSyntaxError.at(f"expected {word}", start)
        return Token(word, kind, start)


class JsonParser:
    """
    Recursive descent parser for object-rooted JSON documents.

    Keeps exactly two tokens of state: ``current``, the last token consumed,
    and ``next``, the lookahead used to pick a grammar rule.
    """

    def __init__(self, lexer: JsonLexer, config: ParseConfig | None = None):
        self.lexer = lexer
        self.config = config if config is not None else ParseConfig()
        self.current = Token("", TokenKind.NONE)
        self.next = Token("", TokenKind.NONE)
        self._lex_error: JSONSyntaxError | None = None
        self._depth = 0

    @classmethod
    def from_path(
        cls, path: PathLike, config: ParseConfig | None = None
    ) -> "JsonParser":
        config = config if config is not None else ParseConfig()
        return cls(JsonLexer.from_path(path, config.chunk_size), config)

    @classmethod
    def from_string(
        cls, text: str | bytes, config: ParseConfig | None = None
    ) -> "JsonParser":
        return cls(JsonLexer.from_string(text), config)

    def __enter__(self) -> "JsonParser":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self.lexer.close()

    def peek(self) -> Token:
        return self.next

    def advance(self) -> Token:
        """Shifts the lookahead into ``current`` and lexes a new lookahead."""
        if self.current.kind is TokenKind.EOF:
            raise JSONSyntaxError.at("unexpected EOF", self.current.start)
        self.current = self.next
        try:
            self.next = self.lexer.next_token()
        except JSONSyntaxError as e:
            # A NONE lookahead matches no rule, so the next decision reports it
            self._lex_error = e
            self.next = Token(
                "", TokenKind.NONE, Location(e.pos, e.lineno, e.colno)
            )
        return self.current

    def try_match(self, kind: TokenKind) -> bool:
        if self.next.kind is kind:
            self.advance()
            return True
        return False

    def consume(self, kind: TokenKind, message: str) -> Token:
        if self.next.kind is kind:
            return self.advance()
        raise self._error(message)

    def parse(self) -> JsonValue:
        """Parses the whole document, whose root must be an object."""
        with ProfileContext("parse"):
            self.advance()
            self.consume(
                TokenKind.LEFT_BRACE, "Expected '{' at start of object"
            )
            root = self.parse_object()
            if self.next.kind is not TokenKind.EOF:
                raise self._error("Extra data")
            return root

    def parse_value(self) -> JsonValue:
        """Dispatches on the lookahead to the matching value rule."""
        kind = self.peek().kind
        if kind is TokenKind.STRING:
            return self.parse_string()
        elif kind is TokenKind.NUMBER:
            return self.parse_number()
        elif kind is TokenKind.LEFT_BRACE:
            self.advance()
            return self.parse_object()
        elif kind is TokenKind.LEFT_BRACKET:
            self.advance()
            return self.parse_array()
        elif kind is TokenKind.BOOLEAN:
            return self.parse_boolean()
        elif kind is TokenKind.NULL:
            self.advance()
            return JsonValue.nil()
        else:
            raise self._error("Unexpected input")

    def parse_object(self) -> JsonValue:
        """Parses object members; the opening brace is already consumed."""
        with ProfileContext("parse_object"), self._nested():
            members: dict[str, JsonValue] = {}
            if self.try_match(TokenKind.RIGHT_BRACE):
                return JsonValue.object(members)

            while True:
                key = self.parse_string()
                self.consume(TokenKind.COLON, "Expected ':' after object key")
                members[key.payload] = self.parse_value()

                if self.try_match(TokenKind.COMMA):
                    continue
                elif self.try_match(TokenKind.RIGHT_BRACE):
                    break
                else:
                    raise self._error("Expected ',' or '}'")

            return JsonValue.object(members)

    def parse_array(self) -> JsonValue:
        """Parses array items; the opening bracket is already consumed."""
        with ProfileContext("parse_array"), self._nested():
            items: list[JsonValue] = []
            if self.try_match(TokenKind.RIGHT_BRACKET):
                return JsonValue.array(items)

            while True:
                items.append(self.parse_value())

                if self.try_match(TokenKind.COMMA):
                    continue
                elif self.try_match(TokenKind.RIGHT_BRACKET):
                    break
                else:
                    raise self._error("Expected ',' or ']'")

            return JsonValue.array(items)

    def parse_string(self) -> JsonValue:
        token = self.consume(TokenKind.STRING, "Expected string")
        return JsonValue.string(token.lexeme)

    def parse_number(self) -> JsonValue:
        token = self.consume(TokenKind.NUMBER, "Expected number")
        return JsonValue.number(token.lexeme)

    def parse_boolean(self) -> JsonValue:
        token = self.consume(TokenKind.BOOLEAN, "Expected boolean")
        return JsonValue.boolean(token.lexeme == "true")

    @contextmanager
    def _nested(self) -> Iterator[None]:
        """Tracks container depth and enforces the configured limit."""
        self._depth += 1
        try:
            max_depth = self.config.max_depth
            if max_depth is not None and self._depth > max_depth:
                raise JSONSyntaxError.at(
                    "Maximum nesting depth exceeded", self.current.start
                )
            yield
        finally:
            self._depth -= 1

    def _error(self, message: str) -> JSONSyntaxError:
        """Builds a grammar error at the lookahead, folding in any lex error."""
        if self._lex_error is None:
            return JSONSyntaxError.at(message, self.next.start)
        error = JSONSyntaxError.at(
            f"{message}: {self._lex_error.msg}", self.next.start
        )
        error.__cause__ = self._lex_error
        return error


def _run(parser: JsonParser) -> JsonValue:
    """Drives one parse to completion and releases the parser's source."""
    with parser:
        logger.debug("Parsing JSON document")
        root = parser.parse()
    logger.debug("Parsed JSON object with %d members", len(root.payload))
    return root


def parse(text: str | bytes, config: ParseConfig | None = None) -> JsonValue:
    """
    Parses an in-memory JSON document into a value tree.

    Accepts ``str`` or UTF-8 ``bytes``; the root must be an object.
    """
    if not isinstance(text, str | bytes | bytearray):
        raise TypeError(
            f"the JSON object must be str or bytes, not {type(text).__name__}"
        )

    return _run(JsonParser.from_string(text, config))


def parse_file(path: PathLike, config: ParseConfig | None = None) -> JsonValue:
    """
    Parses the JSON document stored at ``path``.

    The file is opened and closed here; failing to open it raises OSError.
    """
    return _run(JsonParser.from_path(path, config))


def load(fp: IO[bytes], config: ParseConfig | None = None) -> JsonValue:
    """
    Parses JSON from a binary file-like object, streaming it in chunks.

    The caller keeps ownership of ``fp``.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")
    if not isinstance(fp.read(0), bytes):
        raise TypeError("fp must be opened in binary mode")

    config = config if config is not None else ParseConfig()
    lexer = JsonLexer(FileSource(fp, config.chunk_size))
    return _run(JsonParser(lexer, config))


def loads(text: str | bytes, config: ParseConfig | None = None) -> PythonValue:
    """Parses an in-memory document straight into plain Python objects."""
    return parse(text, config).to_python()


__all__ = [
    "BUFSIZE",
    "DEFAULT_MAX_DEPTH",
    "BufferSource",
    "FileSource",
    "HotPathStats",
    "JSONParseError",
    "JSONSyntaxError",
    "JsonLexer",
    "JsonParser",
    "JsonValue",
    "Location",
    "ParseConfig",
    "Token",
    "TokenKind",
    "UTF8DecodeError",
    "ValueKind",
    "clear_hot_path_stats",
    "get_hot_path_stats",
    "load",
    "loads",
    "parse",
    "parse_file",
]
