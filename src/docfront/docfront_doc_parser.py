"""
Doc-comment tag parser.

Turns the text of a `/** ... */` comment into a list of tag dictionaries.
The text before the first tag becomes the "default" tag, the comment's
free-form description.

Example:
    >>> DocParser().parse(" * Adds.\\n * @param {Number} [x=1] First.\\n * @return {Number}")
    [{'tagname': 'default', 'doc': 'Adds.'},
     {'tagname': 'param', 'type': 'Number', 'name': 'x', 'optional': True, 'default': '1', 'doc': 'First.'},
     {'tagname': 'return', 'type': 'Number', 'doc': ''}]
"""

from __future__ import annotations

import re
from typing import Callable, TypedDict

# A tag starts at the beginning of the text or after whitespace, so e-mail
# addresses and decorators inside words stay plain text.
_TAG = re.compile(r"(?:^|(?<=\s))@([A-Za-z][A-Za-z0-9_]*)")
_LINE_DECORATION = re.compile(r"^[ \t]*\* ?")


class DocTag(TypedDict, total=False):
    tagname: str
    doc: str
    type: str | None
    name: str | None
    optional: bool
    default: str | None


def _balanced(text: str, open_ch: str, close_ch: str) -> tuple[str, str]:
    """Splits `text` (starting with `open_ch`) into the bracketed part and the rest.

    An unclosed bracket swallows the remaining text.
    """
    depth = 0
    for i, ch in enumerate(text):
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[1:i], text[i + 1 :]
    return text[1:], ""


def _first_word(text: str) -> tuple[str | None, str]:
    parts = text.split(None, 1)
    if not parts:
        return None, ""
    return parts[0], parts[1] if len(parts) > 1 else ""


class DocParser:
    """Parses doc-comment text into tags.

    Attributes:
        handlers (dict[str, Callable[[str, str], DocTag]]): Tag name to handler.
            Tags without a handler, such as flags like `@private` or `@static`,
            keep their text as `doc`.
    """

    name_tags = (
        "class",
        "extends",
        "mixins",
        "alternateClassName",
        "event",
        "method",
        "member",
        "xtype",
        "alias",
    )
    tag_aliases = {"extend": "extends", "returns": "return"}

    def __init__(self) -> None:
        self.handlers: dict[str, Callable[[str, str], DocTag]] = {
            "param": self.parse_member_like,
            "cfg": self.parse_member_like,
            "property": self.parse_member_like,
            "return": self.parse_return,
            "type": self.parse_type,
        }
        for tag in self.name_tags:
            self.handlers[tag] = self.parse_name_tag

    def parse(self, text: str) -> list[DocTag]:
        body = self.strip_decoration(text)
        pieces = _TAG.split(body)

        tags: list[DocTag] = [{"tagname": "default", "doc": pieces[0].strip()}]
        for i in range(1, len(pieces), 2):
            tagname = self.tag_aliases.get(pieces[i], pieces[i])
            handler = self.handlers.get(tagname, self.parse_plain_tag)
            tags.append(handler(tagname, pieces[i + 1]))
        return tags

    @staticmethod
    def strip_decoration(text: str) -> str:
        """Removes the leading ` * ` from each comment line."""
        lines = []
        for line in text.split("\n"):
            m = _LINE_DECORATION.match(line)
            lines.append(line[m.end() :] if m else line.strip())
        return "\n".join(lines)

    @staticmethod
    def split_type(text: str) -> tuple[str | None, str]:
        text = text.lstrip()
        if not text.startswith("{"):
            return None, text
        type_, rest = _balanced(text, "{", "}")
        return type_.strip(), rest

    def parse_member_like(self, tagname: str, text: str) -> DocTag:
        """`@param {Type} [name=default] description` and friends."""
        type_, rest = self.split_type(text)
        rest = rest.lstrip()
        optional = False
        default = None
        if rest.startswith("["):
            inner, rest = _balanced(rest, "[", "]")
            optional = True
            name, sep, value = inner.partition("=")
            name = name.strip() or None
            if sep:
                default = value.strip()
        else:
            name, rest = _first_word(rest)
        return {
            "tagname": tagname,
            "type": type_,
            "name": name,
            "optional": optional,
            "default": default,
            "doc": rest.strip(),
        }

    def parse_return(self, tagname: str, text: str) -> DocTag:
        type_, rest = self.split_type(text)
        return {"tagname": tagname, "type": type_, "doc": rest.strip()}

    def parse_type(self, tagname: str, text: str) -> DocTag:
        type_, rest = self.split_type(text)
        if type_ is None:
            type_, rest = _first_word(rest)
        return {"tagname": tagname, "type": type_}

    def parse_name_tag(self, tagname: str, text: str) -> DocTag:
        name, rest = _first_word(text)
        return {"tagname": tagname, "name": name, "doc": rest.strip()}

    def parse_plain_tag(self, tagname: str, text: str) -> DocTag:
        return {"tagname": tagname, "doc": text.strip()}


__all__ = ["DocParser", "DocTag"]
