"""
Defines the node structures produced by the docfront grammars.

Classes:
    LiteralNode:
        A parsed JavaScript literal (string, number, regex, identifier, array, object).

    CodeNode:
        A tagged summary of the code following a doc-comment. The `kind` tag is one of
        "function", "assignment", "ext_define", "ext_extend", "literal" or "nop", and the
        node carries only the fields relevant to that kind.

    ClassConfigBuilder:
        Accumulates the fields of an `Ext.define` configuration object and is finalized
        exactly once into an "ext_define" CodeNode.

    DocRecord:
        One doc-comment: its parsed tags, the line it starts on, and the CodeNode that follows it.

    LiteralDict, CodeDict, DocRecordDict:
        TypedDict shapes returned by the `to_dict()` methods, suitable for JSON output.

Usage:
    Nodes are built by the parsers and compared in tests through `to_dict()`.

Example:
    node = CodeNode("assignment", left=["foo", "bar"], right=None)
    node.to_dict()  # {"type": "assignment", "left": ["foo", "bar"], "right": None}
"""

from __future__ import annotations

from typing import Any, TypedDict

LITERAL_KINDS = ("string", "number", "regex", "ident", "array", "object")
CODE_KINDS = ("function", "assignment", "ext_define", "ext_extend", "literal", "nop")


class LiteralDict(TypedDict):
    type: str
    value: Any


class CodeDict(TypedDict, total=False):
    """
    Serialized CodeNode. Only `type` is always present; the remaining keys
    depend on the node kind.

    Fields:
        type (str): The node kind.
        name (str | None): Function name or class name.
        params (list[dict[str, str]]): Function parameters as `{"name": ...}` entries.
        left (list[str]): Assignment target as an identifier chain.
        right (CodeDict | None): Assignment value, `None` when absent.
        extend (str | list[str]): Superclass name or superclass chain.
        mixins (list[Any]): Mixin class names.
        alternateClassNames (list[str]): Alternate class names.
        alias (list[str]): Class aliases.
        value (str): Canonical text of a literal.
    """

    type: str
    name: str | None
    params: list[dict[str, str]]
    left: list[str]
    right: "CodeDict | None"
    extend: Any
    mixins: list[Any]
    alternateClassNames: list[str]
    alias: list[str]
    value: str


class DocRecordDict(TypedDict):
    comment: list[dict[str, Any]]
    linenr: int
    code: CodeDict


def _serialize(value: Any) -> Any:
    if isinstance(value, (LiteralNode, CodeNode)):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    return value


class LiteralNode:
    """
    A parsed JavaScript literal.

    Args:
        kind (str): One of `LITERAL_KINDS`.
        value: For scalar kinds the token text; for "array" a tuple of LiteralNode;
            for "object" a tuple of `(key, value)` LiteralNode pairs, in source order.
        line (int): Source line of the literal's first token.
    """

    def __init__(self, kind: str, value: Any, line: int = 0):
        if kind not in LITERAL_KINDS:
            raise ValueError(f"Unknown literal kind: {kind}")
        self.kind = kind
        self.value = tuple(value) if kind in ("array", "object") else value
        self.line = line

    def __repr__(self) -> str:
        return f"LiteralNode({self.kind}, value={self.value!r})"

    def __eq__(self, other: Any) -> bool:
        # Structural equality; source position is not part of the value.
        if not isinstance(other, LiteralNode):
            return False
        return self.kind == other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def to_dict(self) -> LiteralDict:
        if self.kind == "object":
            pairs = [{"key": k.to_dict(), "value": v.to_dict()} for k, v in self.value]
            return {"type": self.kind, "value": pairs}
        return {"type": self.kind, "value": _serialize(self.value)}


class CodeNode:
    """
    Represents the code construct found right after a doc-comment.

    Args:
        kind (str): One of `CODE_KINDS`.
        **fields: The fields of that kind, e.g. `left`/`right` for "assignment".

    Attributes:
        kind (str): The variant tag.
        fields (dict[str, Any]): Variant fields in insertion order.
    """

    def __init__(self, kind: str, **fields: Any):
        if kind not in CODE_KINDS:
            raise ValueError(f"Unknown code node kind: {kind}")
        self.kind = kind
        self.fields: dict[str, Any] = fields

    def __getitem__(self, name: str) -> Any:
        return self.fields[name]

    def __repr__(self) -> str:
        parts = [self.kind] + [f"{k}={v!r}" for k, v in self.fields.items()]
        return f"CodeNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, CodeNode):
            return False
        return self.kind == other.kind and self.fields == other.fields

    def to_dict(self) -> CodeDict:
        result: dict[str, Any] = {"type": self.kind}
        for key, value in self.fields.items():
            result[key] = _serialize(value)
        return result  # type: ignore[return-value]


class ClassConfigBuilder:
    """Collects `Ext.define` configuration fields and produces the final node.

    Fields keep the order in which they were found. `build()` may only be
    called once; the builder refuses further changes afterwards.
    """

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}
        self._built = False

    def set(self, key: str, value: Any) -> None:
        if self._built:
            raise RuntimeError("Class config already finalized")
        self._fields[key] = value

    def build(self, name: str) -> CodeNode:
        if self._built:
            raise RuntimeError("Class config already finalized")
        self._built = True
        # name always reflects the define call, even if the config has a `name` key
        node = CodeNode("ext_define", name=name)
        node.fields.update(
            (k, v) for k, v in self._fields.items() if k not in ("name", "type")
        )
        return node


class DocRecord:
    """A doc-comment paired with the code that follows it.

    Attributes:
        comment (list[dict]): Tags produced by the doc-comment parser.
        linenr (int): Line of the comment's opening `/**`.
        code (CodeNode): Summary of the following code, "nop" if nothing was recognized.
    """

    def __init__(self, comment: list[dict[str, Any]], linenr: int, code: CodeNode):
        self.comment = comment
        self.linenr = linenr
        self.code = code

    def __repr__(self) -> str:
        return f"DocRecord(linenr={self.linenr}, code={self.code!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, DocRecord)
            and self.comment == other.comment
            and self.linenr == other.linenr
            and self.code == other.code
        )

    def to_dict(self) -> DocRecordDict:
        return {
            "comment": self.comment,
            "linenr": self.linenr,
            "code": self.code.to_dict(),
        }
