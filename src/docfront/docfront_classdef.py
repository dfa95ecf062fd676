"""
Grammar for `Ext.define` / `Ext.ClassManager.create` class-definition calls.

Grammar
-------
    <ext-define>     := "Ext" "." ( "define" | "ClassManager" "." "create" )
                        "(" <string> ( "," <ext-define-cfg> | "," ... | ")" )
    <ext-define-cfg> := "{" [ <cfg-field> [ "," ] ]*
    <cfg-field>      := "extend" ":" <string>
                      | "mixins" ":" <object-literal>
                      | "alternateClassName" ":" <string-or-list>
                      | "alias" ":" <string-or-list>
                      | <ident> ":" <literal>
    <string-or-list> := <string> | <array-literal>

The configuration object is scanned field by field and the scan stops at the
first token that starts none of the field rules (a doc-comment inside the
object, a method whose value is a function, the closing brace). The closing
brace itself is never consumed; the document scanner skips past it.
"""

from __future__ import annotations

from typing import Any, Callable

from docfront.docfront_ast import ClassConfigBuilder, CodeNode, LiteralNode
from docfront.docfront_constants import IDENT, STRING
from docfront.docfront_lexer import TokenStream
from docfront.docfront_literal import LiteralParser

# A field handler consumes one field and returns (key, value), or None to end the scan.
FieldHandler = Callable[[], "tuple[str, Any] | None"]


def string_or_list(lit: LiteralNode | None) -> list[str]:
    """Normalizes a string or array-of-strings literal to a list of strings."""
    if lit is not None and lit.kind == "string":
        return [lit.value]
    if lit is not None and lit.kind == "array":
        return [item.value for item in lit.value]
    return []


class ClassDefinitionParser:
    """Parses a class-definition call into an "ext_define" CodeNode.

    Attributes:
        stream (TokenStream): Shared token source.
        literals (LiteralParser): Literal grammar used for field values.
        field_rules (list[tuple[tuple[str, ...], FieldHandler]]): Lookahead
            pattern and handler per recognized field, tried in order.
    """

    def __init__(self, stream: TokenStream, literals: LiteralParser) -> None:
        self.stream = stream
        self.literals = literals
        self.field_rules: list[tuple[tuple[str, ...], FieldHandler]] = [
            (("extend", ":", STRING), self.parse_extend),
            (("mixins", ":", "{"), self.parse_mixins),
            (("alternateClassName", ":"), self.parse_alternate_class_names),
            (("alias", ":"), self.parse_alias),
            ((IDENT, ":"), self.parse_other_field),
        ]

    def parse_class_definition(self) -> CodeNode:
        """Parse the call head, the class name and the optional config object."""
        self.stream.match("Ext", ".")
        if self.stream.look("define"):
            self.stream.match("define")
        else:
            self.stream.match("ClassManager", ".", "create")
        name = self.stream.match("(", STRING).value

        builder = ClassConfigBuilder()
        if self.stream.look(",", "{"):
            self.stream.match(",")
            self.parse_config(builder)
        elif not self.stream.look(","):
            self.stream.match(")")
        return builder.build(name)

    def parse_config(self, builder: ClassConfigBuilder) -> None:
        self.stream.match("{")
        while True:
            field = self.parse_field()
            if field is None:
                break
            builder.set(*field)
            if self.stream.look(","):
                self.stream.match(",")

    def parse_field(self) -> tuple[str, Any] | None:
        for pattern, handler in self.field_rules:
            if self.stream.look(*pattern):
                return handler()
        return None

    def parse_extend(self) -> tuple[str, Any]:
        return "extend", self.stream.match("extend", ":", STRING).value

    def parse_mixins(self) -> tuple[str, Any] | None:
        # Only `{key: "Class.Name"}` entries give meaningful names; any other
        # value shape is passed through as that literal's raw value.
        self.stream.match("mixins", ":")
        lit = self.literals.parse_literal()
        if lit is None:
            return None
        return "mixins", [value.value for _, value in lit.value]

    def parse_alternate_class_names(self) -> tuple[str, Any]:
        self.stream.match("alternateClassName", ":")
        return "alternateClassNames", string_or_list(self.literals.parse_literal())

    def parse_alias(self) -> tuple[str, Any]:
        self.stream.match("alias", ":")
        return "alias", string_or_list(self.literals.parse_literal())

    def parse_other_field(self) -> tuple[str, Any] | None:
        key = self.stream.match(IDENT).value
        self.stream.match(":")
        lit = self.literals.parse_literal()
        if lit is None:
            return None
        return key, lit


__all__ = ["ClassDefinitionParser", "string_or_list"]
