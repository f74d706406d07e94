"""Stylesheet parsing and serialization helpers backed by tinycss2."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List

import tinycss2

from .errors import Diagnostic, StylesheetParseError

logger = logging.getLogger("fontmirror")

# At-rules whose block holds declarations rather than nested rules.
DECLARATION_AT_RULES = frozenset(
    {
        "font-face",
        "page",
        "counter-style",
        "property",
        "font-palette-values",
        "viewport",
    }
)

# At-rules whose block is a list of nested rules.
RULE_LIST_AT_RULES = frozenset(
    {
        "media",
        "supports",
        "layer",
        "container",
        "document",
        "scope",
        "starting-style",
    }
)

Node = Any


@dataclass
class Stylesheet:
    """A parsed stylesheet; ``rules`` is the mutable tinycss2 node list."""

    name: str
    rules: List[Node]


def _checked_children(rule: Node) -> List[Node]:
    # Style rule blocks stay as raw tokens so nested rules are not flagged.
    if rule.content is None:
        return []
    if rule.type == "at-rule":
        if rule.lower_at_keyword in DECLARATION_AT_RULES:
            return tinycss2.parse_declaration_list(rule.content)
        if rule.lower_at_keyword in RULE_LIST_AT_RULES:
            return tinycss2.parse_rule_list(rule.content)
    return rule.content


def iter_parse_errors(nodes: Iterable[Node]) -> Iterator[Node]:
    """Yield every tinycss2 ``ParseError`` found anywhere below ``nodes``."""
    for node in nodes:
        node_type = getattr(node, "type", None)
        if node_type == "error":
            yield node
        elif node_type in ("at-rule", "qualified-rule"):
            yield from iter_parse_errors(node.prelude)
            yield from iter_parse_errors(_checked_children(node))
        elif node_type == "declaration":
            yield from iter_parse_errors(node.value)
        elif node_type == "function":
            yield from iter_parse_errors(node.arguments)
        elif node_type in ("() block", "[] block", "{} block"):
            yield from iter_parse_errors(node.content)


def parse_stylesheet(text: str, name: str = "<stylesheet>") -> Stylesheet:
    """Parse ``text`` keeping comments and whitespace for a faithful round-trip."""
    rules = tinycss2.parse_stylesheet(text, skip_comments=False, skip_whitespace=False)
    diagnostics = [
        Diagnostic(
            source=name,
            line=error.source_line,
            column=error.source_column,
            kind=error.kind,
            message=error.message,
        )
        for error in iter_parse_errors(rules)
    ]
    if diagnostics:
        raise StylesheetParseError(name, diagnostics)
    logger.debug("Parsed %s into %d top-level node(s)", name, len(rules))
    return Stylesheet(name=name, rules=rules)


def serialize_stylesheet(stylesheet: Stylesheet) -> str:
    return tinycss2.serialize(stylesheet.rules)


def block_children(rule: Node) -> List[Node]:
    """Return the rules or declarations held by a rule's ``{}`` block.

    The returned nodes share their tokens with ``rule.content``, so mutating a
    token in place is picked up by :func:`serialize_stylesheet`.
    """
    if rule.content is None:
        return []
    if rule.type == "qualified-rule" or rule.lower_at_keyword in DECLARATION_AT_RULES:
        return tinycss2.parse_declaration_list(rule.content)
    return tinycss2.parse_rule_list(rule.content)
