"""
Literal grammar for docfront.

Parses a single JavaScript literal from a `TokenStream` and renders parsed
literals back to normalized source text.

Grammar
-------
    <literal>        := <string> | <number> | <regex> | <ident>
                      | <array-literal> | <object-literal>
    <array-literal>  := "[" [ <literal> [ "," <literal> ]* [ "," ] ] "]"
    <object-literal> := "{" [ <item> [ "," <item> ]* [ "," ] ] "}"
    <item>           := ( <ident> | <string> ) ":" <literal>

Absence is not an error: `parse_literal()` returns None when the current
token cannot start a literal, or when an array/object is not closed by the
expected bracket.

Example:
    >>> stream = TokenStream.from_source("[1, 'a', {b: /x/g}]")
    >>> LiteralBuilder().render(LiteralParser(stream).parse_literal())
    '[1, "a", {b: /x/g}]'
"""

from __future__ import annotations

import re

from docfront.docfront_ast import LiteralNode
from docfront.docfront_constants import IDENT, NUMBER, REGEX, STRING
from docfront.docfront_lexer import TokenStream

# A double quote not preceded by an escaping backslash.
_BARE_DOUBLE_QUOTE = re.compile(r'(?<!\\)(?:\\\\)*"')


class LiteralParser:
    """Recursive-descent parser for JavaScript literals.

    Attributes:
        stream (TokenStream): Token source shared with any enclosing grammar.
    """

    def __init__(self, stream: TokenStream) -> None:
        self.stream = stream

    def parse_literal(self) -> LiteralNode | None:
        """Parse one literal starting at the current token, or return None."""
        stream = self.stream
        tok = stream.token_at(0)
        if stream.look(STRING):
            return LiteralNode("string", stream.match(STRING).value, tok.line)
        if stream.look(NUMBER):
            return LiteralNode("number", stream.match(NUMBER).value, tok.line)
        if stream.look(REGEX):
            return LiteralNode("regex", stream.match(REGEX).value, tok.line)
        if stream.look(IDENT):
            return LiteralNode("ident", stream.match(IDENT).value, tok.line)
        if stream.look("["):
            return self.parse_array()
        if stream.look("{"):
            return self.parse_object()
        return None

    def parse_array(self) -> LiteralNode | None:
        line = self.stream.match("[").line
        items: list[LiteralNode] = []
        while True:
            item = self.parse_literal()
            if item is None:
                break
            items.append(item)
            if not self.stream.look(","):
                break
            self.stream.match(",")
        if not self.stream.look("]"):
            return None
        self.stream.match("]")
        return LiteralNode("array", items, line)

    def parse_object(self) -> LiteralNode | None:
        line = self.stream.match("{").line
        pairs: list[tuple[LiteralNode, LiteralNode]] = []
        while self.stream.look(IDENT, ":") or self.stream.look(STRING, ":"):
            key_tok = self.stream.next(raw=True)
            self.stream.match(":")
            value = self.parse_literal()
            if value is None:
                return None
            kind = "ident" if key_tok.kind == IDENT else "string"
            pairs.append((LiteralNode(kind, key_tok.value, key_tok.line), value))
            if not self.stream.look(","):
                break
            self.stream.match(",")
        if not self.stream.look("}"):
            return None
        self.stream.match("}")
        return LiteralNode("object", pairs, line)


class LiteralBuilder:
    """Renders a LiteralNode as normalized JavaScript source text.

    Strings are re-quoted (double quotes unless the value holds an unescaped
    double quote), arrays and objects are joined with ", ", and everything
    else is emitted verbatim.
    """

    def render(self, lit: LiteralNode) -> str:
        if lit.kind == "string":
            return self.quote(lit.value)
        if lit.kind == "array":
            return "[" + ", ".join(self.render(item) for item in lit.value) + "]"
        if lit.kind == "object":
            items = (f"{self.render(k)}: {self.render(v)}" for k, v in lit.value)
            return "{" + ", ".join(items) + "}"
        return str(lit.value)

    @staticmethod
    def quote(value: str) -> str:
        # Values keep their escapes verbatim, so only the quote character needs choosing.
        if _BARE_DOUBLE_QUOTE.search(value):
            return f"'{value}'"
        return f'"{value}"'


__all__ = ["LiteralBuilder", "LiteralParser"]
