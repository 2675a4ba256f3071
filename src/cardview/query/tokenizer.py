"""Tokenizer for the query language.

The tokenizer never fails: unterminated quotes and regexes run to the end of
the input, and every other character is part of some token.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto

from .types import OPERATOR_NAMES


class TokenType(Enum):
    """Token types for the query language."""

    WORD = auto()  # Bare word
    STRING = auto()  # Quoted phrase
    REGEX = auto()  # /pattern/
    OPERATOR = auto()  # Field operator prefix: file:, path:, tag:, ...
    NOT = auto()  # - operator
    OR = auto()  # OR keyword
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACKET = auto()  # [ (starts a property filter)
    RBRACKET = auto()  # ]
    COLON = auto()  # : between a property name and its values
    EOF = auto()  # End of input


@dataclass
class Token:
    """A token from the query language.

    Attributes:
        type: The type of token.
        value: The token's value (unescaped content for STRING tokens, the
            pattern for REGEX tokens, the lowercase operator name for
            OPERATOR tokens).
        position: Offset of the first character of the token.
        end: Offset just past the last character of the token.
    """

    type: TokenType
    value: str
    position: int = 0
    end: int = 0


# Characters that end a bare word outside of a property filter
_WORD_STOP_CHARS = frozenset('()[]"')
# Inside "[...", before the colon
_NAME_STOP_CHARS = frozenset(':]"')
# Inside "[name:...]"
_VALUE_STOP_CHARS = frozenset(']"')

# Tokenizer modes
_OUTSIDE = 0
_PROPERTY_NAME = 1
_PROPERTY_VALUE = 2


def _skip_whitespace(query: str, pos: int) -> int:
    """Skip whitespace characters and return new position."""
    while pos < len(query) and query[pos].isspace():
        pos += 1
    return pos


def _read_delimited(query: str, pos: int, delimiter: str) -> tuple[str, int]:
    """Read a quoted string or regex body starting at the opening delimiter.

    Backslash escapes the delimiter. For quoted strings (delimiter '"') a
    doubled backslash is also unescaped; regex bodies keep their backslashes
    since they belong to the pattern.

    Args:
        query: The query string.
        pos: Position of the opening delimiter.
        delimiter: The closing character to look for.

    Returns:
        Tuple of (body, position after the closing delimiter or end of input).
    """
    pos += 1  # Skip opening delimiter
    chars: list[str] = []
    is_string = delimiter == '"'

    while pos < len(query):
        char = query[pos]
        if char == delimiter:
            return "".join(chars), pos + 1
        if char == "\\" and pos + 1 < len(query):
            next_char = query[pos + 1]
            if is_string and next_char in ('"', "\\"):
                chars.append(next_char)
            else:
                chars.append(char)
                chars.append(next_char)
            pos += 2
            continue
        chars.append(char)
        pos += 1

    # Unterminated: take everything up to the end of the query
    return "".join(chars), pos


def _read_word(query: str, pos: int, stop_chars: frozenset[str]) -> int:
    """Return the position just past a run of word characters."""
    while pos < len(query):
        char = query[pos]
        if char.isspace() or char in stop_chars:
            break
        pos += 1
    return pos


def _operator_prefix(word: str) -> str | None:
    """Return the operator name if the word starts with "<operator>:"."""
    head, sep, _ = word.partition(":")
    if sep and head.lower() in OPERATOR_NAMES:
        return head.lower()
    return None


def tokenize(query: str) -> Iterator[Token]:
    """Tokenize a query string into tokens.

    Args:
        query: The query string to tokenize.

    Yields:
        Token objects, always ending with a single EOF token.
    """
    pos = 0
    length = len(query)
    mode = _OUTSIDE

    while pos < length:
        pos = _skip_whitespace(query, pos)
        if pos >= length:
            break

        char = query[pos]

        # Quoted strings are recognized in every mode
        if char == '"':
            value, end = _read_delimited(query, pos, '"')
            yield Token(TokenType.STRING, value, pos, end)
            pos = end
            continue

        if mode == _PROPERTY_NAME:
            if char == "]":
                yield Token(TokenType.RBRACKET, char, pos, pos + 1)
                mode = _OUTSIDE
                pos += 1
            elif char == ":":
                yield Token(TokenType.COLON, char, pos, pos + 1)
                mode = _PROPERTY_VALUE
                pos += 1
            else:
                end = _read_word(query, pos, _NAME_STOP_CHARS)
                yield Token(TokenType.WORD, query[pos:end], pos, end)
                pos = end
            continue

        if mode == _PROPERTY_VALUE:
            if char == "]":
                yield Token(TokenType.RBRACKET, char, pos, pos + 1)
                mode = _OUTSIDE
                pos += 1
            elif char == "/":
                value, end = _read_delimited(query, pos, "/")
                yield Token(TokenType.REGEX, value, pos, end)
                pos = end
            else:
                end = _read_word(query, pos, _VALUE_STOP_CHARS)
                word = query[pos:end]
                token_type = TokenType.OR if word.upper() == "OR" else TokenType.WORD
                yield Token(token_type, word, pos, end)
                pos = end
            continue

        # Outside of a property filter
        if char == "(":
            yield Token(TokenType.LPAREN, char, pos, pos + 1)
            pos += 1
        elif char == ")":
            yield Token(TokenType.RPAREN, char, pos, pos + 1)
            pos += 1
        elif char == "[":
            yield Token(TokenType.LBRACKET, char, pos, pos + 1)
            mode = _PROPERTY_NAME
            pos += 1
        elif char == "]":
            # Stray closing bracket; the parser skips it
            yield Token(TokenType.RBRACKET, char, pos, pos + 1)
            pos += 1
        elif char == "-":
            yield Token(TokenType.NOT, char, pos, pos + 1)
            pos += 1
        elif char == "/":
            value, end = _read_delimited(query, pos, "/")
            yield Token(TokenType.REGEX, value, pos, end)
            pos = end
        else:
            end = _read_word(query, pos, _WORD_STOP_CHARS)
            word = query[pos:end]
            operator = _operator_prefix(word)
            if operator is not None:
                # Emit just "<operator>:" and let the argument be tokenized
                # on its own, starting right after the colon
                colon_end = pos + len(operator) + 1
                yield Token(TokenType.OPERATOR, operator, pos, colon_end)
                pos = colon_end
            elif word.upper() == "OR":
                yield Token(TokenType.OR, word, pos, end)
                pos = end
            else:
                yield Token(TokenType.WORD, word, pos, end)
                pos = end

    yield Token(TokenType.EOF, "", length, length)
