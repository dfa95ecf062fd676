"""
Lexical analyzer for the JavaScript consumed by docfront.

This module converts raw JavaScript source into the token stream walked by the
doc-comment scanner and the code-block grammar.

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with kind, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.
    TokenStream: Lazy lookahead buffer over a Lexer with pattern matching.
    GrammarMismatch: Raised by `TokenStream.match` when tokens do not fit a pattern.

Features:
    - Skips whitespace, `//` line comments and plain `/* */` block comments
    - Emits `/** ... */` blocks as DOC_COMMENT tokens
    - Recognizes:
        * Identifiers and keywords
        * Numbers (decimal, fractional, exponent, hex)
        * Strings (single or double quoted, escapes kept verbatim)
        * Regular expression literals (where a regex may start)
        * Punctuators (longest match)

Raises:
    SyntaxError: If unterminated strings, regexes or comments are encountered.

Example:
    >>> stream = TokenStream(Lexer(CharacterStream("var x = 42;")))
    >>> stream.look("var", "IDENT")
    True
    >>> stream.match("var", "IDENT").value
    'x'

Exports:
    - CharacterStream
    - Token
    - Lexer
    - TokenStream
    - GrammarMismatch
    - tokenize
"""

from __future__ import annotations

from typing import Any, Iterator

from docfront.docfront_constants import (
    DOC_COMMENT,
    EOF,
    IDENT,
    KEYWORD,
    MAX_PUNCTUATOR_LENGTH,
    NUMBER,
    PUNCT,
    REGEX,
    STRING,
    TEXT_MATCH_KINDS,
    TOKEN_KINDS,
    keywords,
    punctuators,
    regex_keyword_blockers,
)


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            Exception: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.position)

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token of JavaScript source.

    Attributes:
        kind (str): One of the kinds in `TOKEN_KINDS` (e.g. 'IDENT', 'STRING', 'EOF').
        value (str): The token text. Strings exclude their quotes, doc-comments
            exclude the `/**` and `*/` markers.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, kind: str, value: str, line: int = 0, col: int = 0):
        self.kind = kind
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.line, self.col))


class GrammarMismatch(SyntaxError):
    """Raised when the upcoming tokens do not match a pattern passed to `match`.

    Attributes:
        expected (tuple[str, ...]): The full pattern that was asserted.
        actual (Token): The first token that failed to match.
        partial (list): Records a document scan completed before the mismatch.
            Empty unless the scanner attached them.
    """

    def __init__(self, expected: tuple[str, ...], actual: Token):
        self.expected = expected
        self.actual = actual
        self.partial: list[Any] = []
        pattern = " ".join(repr(p) for p in expected)
        super().__init__(
            f"Expected {pattern}, got {actual!r} at line {actual.line}, col {actual.col}"
        )


class Lexer:
    """Lexical analyzer for JavaScript.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        last (Token | None): The previous significant token, used to tell a
            regex literal from the division operator.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.last: Token | None = None

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips whitespace, line comments and non-doc block comments."""
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch.isspace():
                self.advance()
            elif self.stream.startswith("//"):
                self.skip_line_comment()
            elif self.stream.startswith("/*") and not self.at_doc_comment():
                self.read_block_comment()
            else:
                break

    def skip_line_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def at_doc_comment(self) -> bool:
        # `/**/` is an empty plain comment, not a doc-comment
        return self.stream.startswith("/**") and not self.stream.startswith("/**/")

    def read_block_comment(self) -> str:
        """Consumes a `/* ... */` comment and returns the text between the markers."""
        line, col = self.stream.line, self.stream.column
        self.advance()
        self.advance()
        body = ""
        while not self.stream.end_of_file():
            if self.stream.startswith("*/"):
                self.advance()
                self.advance()
                return body
            body += self.advance()
        raise SyntaxError(f"Unterminated comment at line {line}, col {col}")

    def regex_allowed(self) -> bool:
        last = self.last
        if last is None:
            return True
        if last.kind == PUNCT:
            return last.value not in (")", "]", "}")
        if last.kind == KEYWORD:
            return last.value not in regex_keyword_blockers
        return False

    def match_punctuator(self) -> Token | None:
        """Attempts to match the longest punctuator from the current position."""
        line, col = self.stream.line, self.stream.column
        for length in range(MAX_PUNCTUATOR_LENGTH, 0, -1):
            candidate = "".join(self.peek(i) for i in range(length))
            if len(candidate) == length and candidate in punctuators:
                for _ in range(length):
                    self.advance()
                return Token(PUNCT, candidate, line, col)
        return None

    def read_identifier(self) -> str:
        ident = ""
        while not self.stream.end_of_file() and (
            self.peek().isalnum() or self.peek() in "_$"
        ):
            ident += self.advance()
        return ident

    def read_number(self) -> str:
        num = ""
        if self.peek() == "0" and self.peek(1) in ("x", "X"):
            num += self.advance() + self.advance()
            while not self.stream.end_of_file() and self.peek() in "0123456789abcdefABCDEF":
                num += self.advance()
            return num
        while self.peek().isdigit():
            num += self.advance()
        if self.peek() == ".":
            num += self.advance()
            while self.peek().isdigit():
                num += self.advance()
        if self.peek() in ("e", "E") and (
            self.peek(1).isdigit() or self.peek(1) in "+-" and self.peek(2).isdigit()
        ):
            num += self.advance()
            if self.peek() in "+-":
                num += self.advance()
            while self.peek().isdigit():
                num += self.advance()
        return num

    def read_string(self) -> str:
        line, col = self.stream.line, self.stream.column
        quote = self.advance()
        val = ""
        while not self.stream.end_of_file():
            if self.peek() == "\\":
                val += self.advance()
                if not self.stream.end_of_file():
                    val += self.advance()
            elif self.peek() == quote:
                self.advance()
                return val
            elif self.peek() == "\n":
                break
            else:
                val += self.advance()
        raise SyntaxError(f"Unterminated string at line {line}, col {col}")

    def read_regex(self) -> str:
        line, col = self.stream.line, self.stream.column
        text = self.advance()
        in_class = False
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch == "\n":
                break
            text += self.advance()
            if ch == "\\":
                if not self.stream.end_of_file():
                    text += self.advance()
            elif ch == "[":
                in_class = True
            elif ch == "]":
                in_class = False
            elif ch == "/" and not in_class:
                while not self.stream.end_of_file() and self.peek().isalpha():
                    text += self.advance()
                return text
        raise SyntaxError(f"Unterminated regex at line {line}, col {col}")

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            SyntaxError: If a string, regex or block comment is left unterminated.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(EOF, EOF, self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Doc-comment; does not affect regex detection
        if self.at_doc_comment():
            body = self.read_block_comment()
            return Token(DOC_COMMENT, body[1:], line, col)

        # 2. Identifier or keyword
        if ch.isalpha() or ch in "_$":
            ident = self.read_identifier()
            kind = KEYWORD if ident in keywords else IDENT
            tok = Token(kind, ident, line, col)

        # 3. Number
        elif ch.isdigit() or (ch == "." and self.peek(1).isdigit()):
            tok = Token(NUMBER, self.read_number(), line, col)

        # 4. String
        elif ch in ('"', "'"):
            tok = Token(STRING, self.read_string(), line, col)

        # 5. Regex
        elif ch == "/" and self.regex_allowed():
            tok = Token(REGEX, self.read_regex(), line, col)

        # 6. Punctuator, or any other single character
        else:
            tok = self.match_punctuator() or Token(PUNCT, self.advance(), line, col)

        self.last = tok
        return tok

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            if tok.kind == EOF:
                return
            yield tok


class TokenStream:
    """Pull-based token source with unbounded peek and pattern matching.

    Patterns are sequences of strings matched positionally against the
    upcoming tokens. An element naming a token kind (e.g. "IDENT", "STRING")
    matches on kind; any other element matches the value of an identifier,
    keyword, punctuator or number token. String, regex and doc-comment
    tokens are only ever matched by kind.

    Attributes:
        lexer (Lexer): The underlying token producer.
        buffer (list[Token]): Tokens read ahead but not yet consumed.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.buffer: list[Token] = []
        self.eof: Token | None = None

    @classmethod
    def from_source(cls, source: str) -> "TokenStream":
        return cls(Lexer(CharacterStream(source)))

    def token_at(self, offset: int) -> Token:
        """Returns the token `offset` places ahead without consuming anything."""
        while len(self.buffer) <= offset:
            if self.eof is not None:
                return self.eof
            tok = self.lexer.next_token()
            if tok.kind == EOF:
                self.eof = tok
                return tok
            self.buffer.append(tok)
        return self.buffer[offset]

    @staticmethod
    def fits(tok: Token, element: str) -> bool:
        if element in TOKEN_KINDS:
            return tok.kind == element
        return tok.kind in TEXT_MATCH_KINDS and tok.value == element

    def look(self, *pattern: str) -> bool:
        """True if the upcoming tokens match `pattern`; consumes nothing."""
        return all(self.fits(self.token_at(i), p) for i, p in enumerate(pattern))

    def next(self, raw: bool = False) -> Any:
        """Consumes the next token.

        Args:
            raw (bool): If True, returns the whole Token (used for doc-comments,
                whose line number is needed); otherwise only its value.
        """
        tok = self.token_at(0)
        if self.buffer:
            self.buffer.pop(0)
        return tok if raw else tok.value

    def match(self, *pattern: str) -> Token:
        """Consumes tokens matching `pattern` and returns the last one.

        Raises:
            GrammarMismatch: If any upcoming token does not fit the pattern.
                Nothing is consumed in that case.
        """
        for i, p in enumerate(pattern):
            tok = self.token_at(i)
            if not self.fits(tok, p):
                raise GrammarMismatch(tuple(pattern), tok)
        last = self.token_at(len(pattern) - 1)
        del self.buffer[: len(pattern)]
        return last

    def empty(self) -> bool:
        return self.token_at(0).kind == EOF


def tokenize(source: str) -> list[Token]:
    """Lexes `source` completely and returns its tokens, excluding EOF."""
    return list(Lexer(CharacterStream(source)))


__all__ = [
    "CharacterStream",
    "GrammarMismatch",
    "Lexer",
    "Token",
    "TokenStream",
    "tokenize",
]
