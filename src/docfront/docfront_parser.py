"""
docfront JavaScript Parser

Pairs every doc-comment in a JavaScript source with a summary of the code
construct that immediately follows it.

This module implements the recursive-descent grammar for "code blocks": the
handful of JavaScript shapes that can follow a doc-comment and matter for
documentation (functions, assignments, `Ext.define` calls, object properties).
It does not parse JavaScript in general; anything it does not recognize
becomes a "nop" node and the scanner moves on token by token.

Grammar
-------
    <code-block>       := <function> | <var-declaration> | <ext-define>
                        | <property-literal> | "," <property-literal>
                        | <maybe-assignment> | <string>
    <function>         := "function" [ <ident> ] "(" [ <ident> [ "," <ident> ]* ] ")" "{"
    <var-declaration>  := "var" <maybe-assignment>
    <maybe-assignment> := <ident-chain> [ "=" <expression> ]
    <ident-chain>      := ( "this" | <ident> ) [ "." <ident> ]*
    <property-literal> := ( <ident> | <string> ) ":" <expression>
    <expression>       := <function> | <ext-extend> | <literal>
    <ext-extend>       := "Ext" "." "extend" "(" <ident-chain>

Function bodies are not parsed: the grammar stops right after the opening
brace and leaves the body to the scanner.

Entry Points
------------
- `JsParser.parse()`: Scan a whole source and return its DocRecords.
- `CodeBlockParser.parse_code_block()`: Summarize the code at the current token.

Raises
------
GrammarMismatch
    When a committed rule meets tokens that do not fit. The scanner lets it
    propagate unless constructed with `recover=True`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from docfront.docfront_ast import CodeNode, DocRecord
from docfront.docfront_classdef import ClassDefinitionParser
from docfront.docfront_constants import (
    DOC_COMMENT,
    IDENT,
    SELF_KEYWORD,
    STRING,
    boolean_literals,
    literal_class_map,
)
from docfront.docfront_doc_parser import DocParser
from docfront.docfront_lexer import GrammarMismatch, TokenStream
from docfront.docfront_literal import LiteralBuilder, LiteralParser

logger = logging.getLogger(__name__)

Pattern = tuple[str, ...]


class CodeBlockParser:
    """
    Classifies and destructures the code that follows a doc-comment.

    The dispatcher tries `rules` in order; each rule is a list of alternative
    lookahead patterns and the handler to run when one of them matches. The
    first matching rule wins, which is what separates overlapping shapes such
    as `foo: 1` (property) from `foo = 1` (assignment).

    Attributes
    ----------
    stream : TokenStream
        Token source shared with the literal and class-definition grammars.
    literals : LiteralParser
        Literal grammar used for right-hand sides.
    builder : LiteralBuilder
        Renders literal right-hand sides to canonical text.
    classdef : ClassDefinitionParser
        Grammar for `Ext.define` calls.
    rules : list[tuple[list[Pattern], Callable[[], CodeNode]]]
        Ordered dispatch table.
    """

    def __init__(self, stream: TokenStream) -> None:
        self.stream = stream
        self.literals = LiteralParser(stream)
        self.builder = LiteralBuilder()
        self.classdef = ClassDefinitionParser(stream, self.literals)
        self.rules: list[tuple[list[Pattern], Callable[[], CodeNode]]] = [
            ([("function",)], self.parse_function),
            ([("var",)], self.parse_var_declaration),
            (
                [
                    ("Ext", ".", "define", "(", STRING),
                    ("Ext", ".", "ClassManager", ".", "create", "(", STRING),
                ],
                self.classdef.parse_class_definition,
            ),
            ([(IDENT, ":"), (STRING, ":")], self.parse_property_literal),
            ([(",", IDENT, ":"), (",", STRING, ":")], self.parse_continued_property),
            ([(IDENT,), (SELF_KEYWORD,)], self.parse_maybe_assignment),
            ([(STRING,)], self.parse_string_declaration),
        ]

    def parse_code_block(self) -> CodeNode:
        for patterns, handler in self.rules:
            if any(self.stream.look(*pattern) for pattern in patterns):
                return handler()
        return CodeNode("nop")

    def parse_function(self) -> CodeNode:
        """Parse `function [name](params) {` and stop after the brace."""
        self.stream.match("function")
        name = self.stream.match(IDENT).value if self.stream.look(IDENT) else None
        params = self.parse_function_parameters()
        self.stream.match("{")
        return CodeNode("function", name=name, params=params)

    def parse_function_parameters(self) -> list[dict[str, str]]:
        self.stream.match("(")
        params = []
        if self.stream.look(IDENT):
            params.append({"name": self.stream.match(IDENT).value})
            while self.stream.look(",", IDENT):
                params.append({"name": self.stream.match(",", IDENT).value})
        self.stream.match(")")
        return params

    def parse_var_declaration(self) -> CodeNode:
        self.stream.match("var")
        return self.parse_maybe_assignment()

    def parse_maybe_assignment(self) -> CodeNode:
        """Parse an identifier chain, optionally followed by `= <expression>`."""
        left = self.parse_ident_chain()
        right = None
        if self.stream.look("="):
            self.stream.match("=")
            right = self.parse_expression()
        return CodeNode("assignment", left=left, right=right)

    def parse_ident_chain(self) -> list[str]:
        """Parse `this.a.b` or `a.b.c`; the first segment is mandatory."""
        if self.stream.look(SELF_KEYWORD):
            chain = [self.stream.match(SELF_KEYWORD).value]
        else:
            chain = [self.stream.match(IDENT).value]
        while self.stream.look(".", IDENT):
            chain.append(self.stream.match(".", IDENT).value)
        return chain

    def parse_property_literal(self) -> CodeNode:
        key = self.stream.next()
        self.stream.match(":")
        return CodeNode("assignment", left=[key], right=self.parse_expression())

    def parse_continued_property(self) -> CodeNode:
        self.stream.match(",")
        return self.parse_property_literal()

    def parse_string_declaration(self) -> CodeNode:
        return CodeNode("assignment", left=[self.stream.match(STRING).value], right=None)

    def parse_expression(self) -> CodeNode | None:
        if self.stream.look("function"):
            return self.parse_function()
        if self.stream.look("Ext", ".", "extend", "("):
            return self.parse_ext_extend()
        return self.parse_literal_expression()

    def parse_ext_extend(self) -> CodeNode:
        """Parse `Ext.extend(Base.Chain` and stop before the remaining arguments."""
        self.stream.match("Ext", ".", "extend", "(")
        return CodeNode("ext_extend", extend=self.parse_ident_chain())

    def parse_literal_expression(self) -> CodeNode | None:
        lit = self.literals.parse_literal()
        if lit is None:
            return None

        cls = literal_class_map.get(lit.kind)
        if cls is None and lit.kind == "ident" and lit.value in boolean_literals:
            cls = "Boolean"

        fields: dict[str, Any] = {"class": cls, "value": self.builder.render(lit)}
        return CodeNode("literal", **fields)


class JsParser:
    """
    Scans JavaScript source for doc-comments.

    For each doc-comment the tag parser is run over its text and the
    code-block grammar over the tokens right after it. All other tokens are
    skipped one at a time, so code inside function bodies is scanned too.

    Parameters
    ----------
    source : str | TokenStream
        JavaScript text, or a ready token stream.
    doc_parser : DocParser, optional
        Doc-comment tag parser; a default `DocParser` is used when omitted.
    recover : bool
        When True, a GrammarMismatch while summarizing one code block is
        logged and that record gets a "nop" node instead of aborting the scan.
        Lexer errors such as an unterminated string are plain
        SyntaxErrors and still abort the scan, without `partial` records.
    """

    def __init__(
        self,
        source: str | TokenStream,
        doc_parser: DocParser | None = None,
        recover: bool = False,
    ) -> None:
        self.stream = (
            source if isinstance(source, TokenStream) else TokenStream.from_source(source)
        )
        self.doc_parser = doc_parser or DocParser()
        self.recover = recover
        self.code_parser = CodeBlockParser(self.stream)
        self.docs: list[DocRecord] = []

    def parse(self) -> list[DocRecord]:
        """Parse the whole source and return one DocRecord per doc-comment.

        Raises:
            GrammarMismatch: Unless `recover` is set. The records found so far
                are attached to the exception as `partial`.
        """
        while not self.stream.empty():
            if self.stream.look(DOC_COMMENT):
                comment = self.stream.next(raw=True)
                logger.debug("doc-comment at line %d", comment.line)
                try:
                    code = self.parse_code_block()
                except GrammarMismatch as e:
                    e.partial = list(self.docs)
                    raise
                self.docs.append(
                    DocRecord(self.doc_parser.parse(comment.value), comment.line, code)
                )
            else:
                self.stream.next()
        return self.docs

    def parse_code_block(self) -> CodeNode:
        if not self.recover:
            return self.code_parser.parse_code_block()
        try:
            return self.code_parser.parse_code_block()
        except GrammarMismatch as e:
            logger.warning("skipping malformed code after doc-comment: %s", e)
            return CodeNode("nop")


__all__ = ["CodeBlockParser", "JsParser"]
