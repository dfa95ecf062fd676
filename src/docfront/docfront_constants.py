"""
Shared constants for the docfront JavaScript front end.

Exports:
    TOKEN_KINDS: The closed set of token kinds produced by the lexer.
    keywords: Reserved words lexed as KEYWORD tokens.
    punctuators: Punctuator table used for longest-match lexing.
    regex_keyword_blockers: Keywords after which `/` means division.
    literal_class_map: Literal kind to inferred JavaScript class name.
"""

IDENT = "IDENT"
KEYWORD = "KEYWORD"
STRING = "STRING"
NUMBER = "NUMBER"
REGEX = "REGEX"
DOC_COMMENT = "DOC_COMMENT"
PUNCT = "PUNCT"
EOF = "EOF"

TOKEN_KINDS: frozenset[str] = frozenset(
    {IDENT, KEYWORD, STRING, NUMBER, REGEX, DOC_COMMENT, PUNCT, EOF}
)

# `true`, `false` and `null` are not listed: they lex as IDENT.
keywords: frozenset[str] = frozenset(
    {
        "break",
        "case",
        "catch",
        "continue",
        "default",
        "delete",
        "do",
        "else",
        "finally",
        "for",
        "function",
        "if",
        "in",
        "instanceof",
        "new",
        "return",
        "switch",
        "this",
        "throw",
        "try",
        "typeof",
        "var",
        "void",
        "while",
        "with",
    }
)

punctuators: frozenset[str] = frozenset(
    {
        "{", "}", "(", ")", "[", "]", ";", ",", ".", ":", "?", "~",
        "<", ">", "<=", ">=", "==", "!=", "===", "!==",
        "+", "-", "*", "%", "++", "--", "<<", ">>", ">>>",
        "&", "|", "^", "!", "&&", "||",
        "=", "+=", "-=", "*=", "%=", "<<=", ">>=", ">>>=", "&=", "|=", "^=",
        "/", "/=",
    }
)  # fmt: skip

MAX_PUNCTUATOR_LENGTH = max(len(p) for p in punctuators)

regex_keyword_blockers: frozenset[str] = frozenset({"this"})

literal_class_map: dict[str, str] = {
    "string": "String",
    "number": "Number",
    "regex": "RegExp",
    "array": "Array",
    "object": "Object",
}

boolean_literals: frozenset[str] = frozenset({"true", "false"})

SELF_KEYWORD = "this"

# Kinds whose tokens can be matched by their text in a lookahead pattern.
TEXT_MATCH_KINDS: frozenset[str] = frozenset({IDENT, KEYWORD, PUNCT, NUMBER})
