import logging
from pathlib import Path
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from docfront.docfront_ast import CodeNode
from docfront.docfront_constants import keywords
from docfront.docfront_lexer import GrammarMismatch, TokenStream
from docfront.docfront_parser import CodeBlockParser, JsParser


def code_parser(source: str) -> CodeBlockParser:
    return CodeBlockParser(TokenStream.from_source(source))


def code(source: str) -> dict[str, Any]:
    return dict(code_parser(source).parse_code_block().to_dict())


def scan(source: str, **kwargs: Any) -> list[dict[str, Any]]:
    return [dict(r.to_dict()) for r in JsParser(source, **kwargs).parse()]


def literal(cls: str | None, value: str) -> dict[str, Any]:
    return {"type": "literal", "class": cls, "value": value}


# Scenarios


def test_assignment_of_anonymous_function() -> None:
    records = scan("/** doc */\nfoo.bar = function(a, b) {}")
    assert len(records) == 1
    assert records[0]["code"] == {
        "type": "assignment",
        "left": ["foo", "bar"],
        "right": {
            "type": "function",
            "name": None,
            "params": [{"name": "a"}, {"name": "b"}],
        },
    }


def test_ext_define_scenario() -> None:
    records = scan("/** doc */\nExt.define('Foo.Bar', { extend: 'Foo.Base' })")
    assert records[0]["code"] == {
        "type": "ext_define",
        "name": "Foo.Bar",
        "extend": "Foo.Base",
    }


def test_bare_call_is_declaration_only_assignment() -> None:
    records = scan("/** doc */\nsomeCall();")
    assert records[0]["code"] == {
        "type": "assignment",
        "left": ["someCall"],
        "right": None,
    }


def test_bare_number_is_nop() -> None:
    assert scan("/** doc */\n42")[0]["code"] == {"type": "nop"}


def test_malformed_define_aborts_parse() -> None:
    with pytest.raises(GrammarMismatch) as excinfo:
        scan("/** doc */\nExt.define('Foo.Bar' { extend: 'Foo.Base' })")
    assert excinfo.value.expected == (")",)


# Dispatcher cases


def test_named_function() -> None:
    assert code("function add(x, y) { return x + y; }") == {
        "type": "function",
        "name": "add",
        "params": [{"name": "x"}, {"name": "y"}],
    }


def test_function_without_params() -> None:
    assert code("function() {")["params"] == []


def test_function_body_is_left_in_stream() -> None:
    parser = code_parser("foo.bar = function(a) { body(); }")
    parser.parse_code_block()
    assert parser.stream.look("body", "(", ")")


def test_var_declaration() -> None:
    assert code("var x = 5;") == {
        "type": "assignment",
        "left": ["x"],
        "right": literal("Number", "5"),
    }


def test_var_without_value() -> None:
    assert code("var x;") == {"type": "assignment", "left": ["x"], "right": None}


def test_class_manager_create_dispatch() -> None:
    assert code("Ext.ClassManager.create('A', {})")["type"] == "ext_define"


def test_ext_call_that_is_not_define_is_assignment() -> None:
    assert code("Ext.onReady(init)") == {
        "type": "assignment",
        "left": ["Ext", "onReady"],
        "right": None,
    }


@pytest.mark.parametrize(
    "source,expected_right",
    [
        ("label: 'Clicks'", literal("String", '"Clicks"')),
        ("'label': true", literal("Boolean", "true")),
        ("label: false", literal("Boolean", "false")),
        ("label: [1, 2]", literal("Array", "[1, 2]")),
        ("label: {a: 'b'}", literal("Object", '{a: "b"}')),
        ("label: /x/g", literal("RegExp", "/x/g")),
        ("label: null", literal(None, "null")),
        ("label: Ext.emptyFn", literal(None, "Ext")),
        ("label: new Foo()", None),
    ],
)  # type: ignore[misc]
def test_property_literal(source: str, expected_right: Any) -> None:
    assert code(source) == {
        "type": "assignment",
        "left": ["label"],
        "right": expected_right,
    }


def test_property_with_function_value() -> None:
    assert code("initComponent: function() {")["right"] == {
        "type": "function",
        "name": None,
        "params": [],
    }


def test_continued_property_after_comma() -> None:
    parser = code_parser(", size: 10, color: 'red'")
    assert parser.parse_code_block().to_dict() == {
        "type": "assignment",
        "left": ["size"],
        "right": literal("Number", "10"),
    }
    assert parser.stream.look(",", "color")


def test_this_assignment() -> None:
    assert code("this.pattern = /\\d+/;") == {
        "type": "assignment",
        "left": ["this", "pattern"],
        "right": literal("RegExp", "/\\d+/"),
    }


def test_ext_extend() -> None:
    parser = code_parser("App.Panel = Ext.extend(Ext.Panel, { title: 'x' });")
    assert parser.parse_code_block().to_dict() == {
        "type": "assignment",
        "left": ["App", "Panel"],
        "right": {"type": "ext_extend", "extend": ["Ext", "Panel"]},
    }
    assert parser.stream.look(",", "{")


def test_bare_string_is_one_sided_assignment() -> None:
    assert code("'beforeload'") == {
        "type": "assignment",
        "left": ["beforeload"],
        "right": None,
    }


@pytest.mark.parametrize("source", ["42", "}", "(", "if (x) {}", "", "/x/"])  # type: ignore[misc]
def test_unrecognized_code_is_nop(source: str) -> None:
    assert code(source) == {"type": "nop"}


def test_nop_consumes_nothing() -> None:
    parser = code_parser("42 + 1")
    parser.parse_code_block()
    assert parser.stream.look("NUMBER", "+")


def test_ident_chain_requires_identifier() -> None:
    with pytest.raises(GrammarMismatch):
        code_parser("42").parse_ident_chain()


def test_ident_chain_stops_at_non_identifier() -> None:
    parser = code_parser("a.b.c.default")
    assert parser.parse_ident_chain() == ["a", "b", "c"]
    assert parser.stream.look(".", "default")


def test_function_missing_paren_raises() -> None:
    with pytest.raises(GrammarMismatch) as excinfo:
        code("function foo {")
    assert excinfo.value.expected == ("(",)


idents = st.from_regex(r"[a-zA-Z_$][a-zA-Z0-9_$]{0,8}", fullmatch=True).filter(
    lambda s: s not in keywords and s not in ("Ext",)
)


@given(st.lists(idents, min_size=1, max_size=5), st.integers(min_value=0, max_value=999))  # type: ignore[misc]
def test_chain_assignment_parses(chain: list[str], num: int) -> None:
    parser = code_parser(f"{'.'.join(chain)} = {num}; next")
    assert parser.parse_code_block().to_dict() == {
        "type": "assignment",
        "left": chain,
        "right": literal("Number", str(num)),
    }
    assert parser.stream.look(";", "next")


# Document scanner


def test_records_in_source_order_with_increasing_lines() -> None:
    source = "\n".join(
        [
            "/** one */",
            "var a = 1;",
            "/** two */",
            "function b() {",
            "  /** three */",
            "  this.c = 'x';",
            "}",
        ]
    )
    records = scan(source)
    assert [r["linenr"] for r in records] == [1, 3, 5]
    assert [r["code"]["type"] for r in records] == ["assignment", "function", "assignment"]


def test_no_doc_comments_yields_nothing() -> None:
    assert scan("var x = 1; function f() {}") == []
    assert scan("") == []


def test_comment_at_end_of_input_is_nop() -> None:
    assert scan("x = 1;\n/** trailing */")[0]["code"] == {"type": "nop"}


def test_adjacent_doc_comments() -> None:
    records = scan("/** a */\n/** b */\nvar x;")
    assert records[0]["code"] == {"type": "nop"}
    assert records[1]["code"]["left"] == ["x"]


def test_comment_tags_are_parsed() -> None:
    records = scan("/**\n * Sums.\n * @param {Number} a\n */\nfunction sum(a) {}")
    assert records[0]["comment"] == [
        {"tagname": "default", "doc": "Sums."},
        {
            "tagname": "param",
            "type": "Number",
            "name": "a",
            "optional": False,
            "default": None,
            "doc": "",
        },
    ]


def test_mismatch_carries_partial_records() -> None:
    source = "/** a */ var x = 1;\n/** b */ Ext.define('Foo' {"
    with pytest.raises(GrammarMismatch) as excinfo:
        scan(source)
    partial = excinfo.value.partial
    assert len(partial) == 1
    assert partial[0].linenr == 1


def test_recover_mode_keeps_scanning(caplog: pytest.LogCaptureFixture) -> None:
    source = "/** a */ Ext.define('Foo' {\n/** b */ var y = 2;"
    with caplog.at_level(logging.WARNING, logger="docfront.docfront_parser"):
        records = scan(source, recover=True)
    assert [r["code"]["type"] for r in records] == ["nop", "assignment"]
    assert "skipping malformed code" in caplog.text


def test_accepts_token_stream() -> None:
    stream = TokenStream.from_source("/** x */ y = 1")
    records = JsParser(stream).parse()
    assert records[0].code == CodeNode(
        "assignment", left=["y"], right=CodeNode("literal", **{"class": "Number", "value": "1"})
    )


def test_custom_doc_parser_is_used() -> None:
    class Upper:
        def parse(self, text: str) -> list[dict[str, Any]]:
            return [{"tagname": "raw", "doc": text.strip().upper()}]

    records = JsParser("/** hi */ x", doc_parser=Upper()).parse()  # type: ignore[arg-type]
    assert records[0].comment == [{"tagname": "raw", "doc": "HI"}]


def test_counter_fixture(counter_js: Path) -> None:
    records = scan(counter_js.read_text(encoding="utf-8"))

    assert [r["linenr"] for r in records] == [1, 12, 18, 21, 31]
    assert records[0]["code"] == {
        "type": "ext_define",
        "name": "App.view.Counter",
        "alias": ["widget.counter"],
        "extend": "Ext.Component",
        "requires": {
            "type": "array",
            "value": [
                {"type": "string", "value": "App.Store"},
                {"type": "string", "value": "App.view.List"},
            ],
        },
    }
    assert records[0]["comment"] == [
        {"tagname": "default", "doc": "A panel that counts clicks."}
    ]
    assert records[1]["code"] == {
        "type": "assignment",
        "left": ["label"],
        "right": literal("String", '"Clicks"'),
    }
    assert records[1]["comment"][1]["doc"] == "Text shown next to the count."
    assert records[2]["code"] == {"type": "nop"}
    assert records[3]["code"] == {
        "type": "assignment",
        "left": ["initComponent"],
        "right": {"type": "function", "name": None, "params": []},
    }
    assert records[3]["comment"][1]["default"] == "false"
    assert records[4]["code"] == {
        "type": "assignment",
        "left": ["add"],
        "right": {"type": "function", "name": None, "params": [{"name": "amount"}]},
    }


def test_recover_mode_does_not_cover_lexer_errors() -> None:
    with pytest.raises(SyntaxError, match="Unterminated string") as excinfo:
        scan("/** a */ var x = 1;\n/** b */ s = `it's`;", recover=True)
    assert not isinstance(excinfo.value, GrammarMismatch)
