"""Parser for the query language.

Grammar (EBNF):
    query        = ws?, or_expr, ws? ;
    or_expr      = and_expr, { ws, "OR", ws, and_expr } ;
    and_expr     = unary_expr, { ws, unary_expr } ;
    unary_expr   = { "-" }, primary ;
    primary      = group | operator | property | regex | quote | word ;
    group        = "(", or_expr, ")" ;
    operator     = operator_name, ":", primary ;   (no space after the colon)
    operator_name = "file" | "path" | "content" | "tag" | "line"
                 | "match-case" | "ignore-case" ;
    property     = "[", name, [ ":", value_or ], "]" ;
    value_or     = value_and, { "OR", value_and } ;
    value_and    = value, { value } ;
    value        = word | quote | regex ;
    quote        = '"', { quote_char }, '"' ;
    regex        = "/", { regex_char }, "/" ;

Precedence (tightest to loosest):
    1. - (NOT)
    2. AND (implicit via juxtaposition)
    3. OR
    Parentheses override precedence.

The parser is used on every keystroke, so it never raises. Incomplete input
degrades to the closest expression that can still be evaluated:
    - unterminated quotes, regexes, groups and properties end at end of input
    - stray ")" and "]" are ignored
    - a trailing "-" or "OR" is ignored, as is "-" followed by whitespace
    - negating something incomplete ("-(", "-tag:") drops the negation
    - an operator with nothing right after its colon is dropped
"""

from .tokenizer import Token, TokenType, tokenize
from .types import (
    AndExpr,
    ContentMatch,
    FileMatch,
    IgnoreCase,
    LineMatch,
    MatchCase,
    NotExpr,
    OrExpr,
    PathMatch,
    PhraseMatch,
    PropertyMatch,
    QueryExpr,
    RegexMatch,
    TagMatch,
    WordMatch,
)

# Operators whose argument is an arbitrary primary expression
_OPERATOR_CLASSES = {
    "file": FileMatch,
    "path": PathMatch,
    "content": ContentMatch,
    "match-case": MatchCase,
    "ignore-case": IgnoreCase,
    "line": LineMatch,
}

_PRIMARY_START = frozenset(
    {
        TokenType.WORD,
        TokenType.STRING,
        TokenType.REGEX,
        TokenType.OPERATOR,
        TokenType.LPAREN,
        TokenType.LBRACKET,
    }
)

# Matches every document
_MATCH_ALL = AndExpr(())


class _Parser:
    """Recursive descent parser for the query language."""

    def __init__(self, query: str) -> None:
        self.query = query
        self.tokens = list(tokenize(query))
        self.pos = 0

    def _current(self) -> Token:
        """Get the current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        """Advance to the next token and return the previous one."""
        token = self._current()
        self.pos += 1
        return token

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of a specific type."""
        return self._current().type == token_type

    def parse(self) -> AndExpr | OrExpr:
        """Parse the query and return the AST."""
        return self._parse_or_expr(depth=0)

    def _parse_or_expr(self, depth: int) -> AndExpr | OrExpr:
        """Parse OR expression: and_expr { OR and_expr }."""
        conjunctions = [self._parse_and_expr(depth)]
        while self._check(TokenType.OR):
            self._advance()  # consume OR
            conjunctions.append(self._parse_and_expr(depth))

        if len(conjunctions) == 1:
            return conjunctions[0]

        # "a OR" or "OR b" while typing: drop the empty side
        non_empty = [c for c in conjunctions if c.operands]
        if not non_empty:
            return _MATCH_ALL
        if len(non_empty) == 1:
            return non_empty[0]
        return OrExpr(operands=tuple(non_empty))

    def _parse_and_expr(self, depth: int) -> AndExpr:
        """Parse AND expression: unary_expr { unary_expr }.

        A query made of a single term still produces a one-element AndExpr.
        """
        operands: list[QueryExpr] = []
        while True:
            token = self._current()
            if token.type in _PRIMARY_START or token.type == TokenType.NOT:
                expr = self._parse_unary_expr(depth)
                if expr is not None and expr != _MATCH_ALL:
                    operands.append(expr)
            elif token.type == TokenType.RBRACKET or (
                token.type == TokenType.RPAREN and depth == 0
            ):
                self._advance()  # stray closer
            else:
                break
        return AndExpr(operands=tuple(operands))

    def _parse_unary_expr(self, depth: int) -> QueryExpr | None:
        """Parse unary expression: { - } primary.

        A "-" only negates a term that starts right after it. Returns None
        when there is nothing left to evaluate, e.g. for "-", "-(" or
        "-tag:".
        """
        if self._check(TokenType.NOT):
            not_token = self._advance()
            following = self._current()
            if following.type not in _PRIMARY_START and following.type != TokenType.NOT:
                return None
            operand = self._parse_unary_expr(depth)
            if operand is None or operand == _MATCH_ALL:
                return None
            if following.position != not_token.end:
                # "a - b" reads as "a b"
                return operand
            return NotExpr(operand=operand)

        return self._parse_primary(depth)

    def _parse_primary(self, depth: int) -> QueryExpr | None:
        """Parse primary expression (caller guarantees a primary start token).

        Returns None for an operator with no argument.
        """
        token = self._advance()

        if token.type == TokenType.WORD:
            return WordMatch(text=token.value)

        if token.type == TokenType.STRING:
            return PhraseMatch(text=token.value)

        if token.type == TokenType.REGEX:
            return RegexMatch(pattern=token.value)

        if token.type == TokenType.LPAREN:
            expr = self._parse_or_expr(depth + 1)
            if self._check(TokenType.RPAREN):
                self._advance()  # consume )
            return expr

        if token.type == TokenType.OPERATOR:
            return self._parse_operator(token, depth)

        if token.type == TokenType.LBRACKET:
            return self._parse_property()

        # Unreachable for callers that check _PRIMARY_START first
        return _MATCH_ALL

    def _parse_operator(self, token: Token, depth: int) -> QueryExpr | None:
        """Parse the argument of a field operator.

        The argument must start immediately after the colon ("file:x", not
        "file: x"). Without one the operator is incomplete and is dropped, so
        "-file:" behaves like a dangling "-".
        """
        following = self._current()
        argument: QueryExpr | None = None
        if following.type in _PRIMARY_START and following.position == token.end:
            argument = self._parse_primary(depth)

        if token.value == "tag":
            if isinstance(argument, (WordMatch, PhraseMatch)):
                return TagMatch(name=argument.text.removeprefix("#"))
            return None

        if argument is None or argument == _MATCH_ALL:
            return None
        return _OPERATOR_CLASSES[token.value](operand=argument)

    def _parse_property(self) -> PropertyMatch:
        """Parse a property filter after its opening bracket."""
        name_parts: list[str] = []
        while self._current().type in (TokenType.WORD, TokenType.STRING):
            name_parts.append(self._advance().value)

        value: QueryExpr | None = None
        if self._check(TokenType.COLON):
            self._advance()
            value = self._parse_property_values()

        if self._check(TokenType.RBRACKET):
            self._advance()

        return PropertyMatch(name=" ".join(name_parts), value=value)

    def _parse_property_values(self) -> QueryExpr | None:
        """Parse value_or: OR-separated groups of juxtaposed values."""
        groups: list[list[QueryExpr]] = [[]]
        while True:
            token = self._current()
            if token.type == TokenType.WORD:
                groups[-1].append(WordMatch(text=token.value))
            elif token.type == TokenType.STRING:
                groups[-1].append(PhraseMatch(text=token.value))
            elif token.type == TokenType.REGEX:
                groups[-1].append(RegexMatch(pattern=token.value))
            elif token.type == TokenType.OR:
                groups.append([])
            else:
                break
            self._advance()

        conjunctions = [AndExpr(operands=tuple(g)) for g in groups if g]
        if not conjunctions:
            # "[name:]" only checks that the property exists
            return None
        if len(conjunctions) == 1:
            return conjunctions[0]
        return OrExpr(operands=tuple(conjunctions))


def parse_query(query: str) -> AndExpr | OrExpr:
    """Parse a query string into an AST.

    Args:
        query: The query string to parse.

    Returns:
        The parsed query expression tree. The root is always an AndExpr
        (implicit conjunction, possibly empty) or an OrExpr of AndExprs.

    Examples:
        >>> parse_query("lorem")
        AndExpr(operands=(WordMatch(text='lorem'),))

        >>> parse_query("lorem OR ipsum")
        OrExpr(operands=(AndExpr(operands=(WordMatch(text='lorem'),)), AndExpr(operands=(WordMatch(text='ipsum'),))))

        >>> parse_query("")
        AndExpr(operands=())
    """
    parser = _Parser(query)
    return parser.parse()


def is_blank_query(query: str) -> bool:
    """Check whether a query string has nothing to filter on."""
    return parse_query(query) == _MATCH_ALL
