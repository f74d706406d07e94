"""Rewrite remote ``@font-face`` sources to local relative paths."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlsplit

from tinycss2.serializer import serialize_string_value, serialize_url

from .config import REMOTE_SCHEMES
from .errors import URLError
from .models import RemoteFont
from .stylesheet import Node, Stylesheet, block_children
from .utils import font_relative_path

logger = logging.getLogger("fontmirror")

_BLOCK_TYPES = ("() block", "[] block", "{} block")


class TraversalState(enum.Enum):
    OUTSIDE = "outside"
    IN_FONT_FACE = "in-font-face"
    IN_SRC_DECLARATION = "in-src-declaration"


@dataclass
class RewriteContext:
    """Traversal state threaded through the recursive walk.

    Entering a rule creates a copy with a narrower state; ``fonts`` is shared
    between all copies so descriptors accumulate in document order.
    """

    state: TraversalState
    base_url: Optional[str]
    fonts: List[RemoteFont]

    def enter(self, state: TraversalState) -> "RewriteContext":
        return replace(self, state=state)


def resolve_font_url(value: str, base_url: Optional[str] = None) -> Optional[str]:
    """Return the absolute http(s) URL for ``value`` or None when it stays local.

    Raises :class:`URLError` when ``value`` cannot be parsed as a URL.
    """
    try:
        resolved = value
        parsed = urlsplit(value)
        if not parsed.scheme:
            if base_url is None:
                return None
            resolved = urljoin(base_url, value)
            parsed = urlsplit(resolved)
        if parsed.scheme not in REMOTE_SCHEMES:
            return None
        if not parsed.hostname:
            raise URLError(value, "missing host")
        parsed.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError as exc:
        raise URLError(value, str(exc)) from exc
    return resolved


def _set_url_payload(token: Node, value: str) -> None:
    token.value = value
    # tinycss2 serializes strings and urls from their cached representation.
    if hasattr(type(token), "representation"):
        if token.type == "url":
            token.representation = f"url({serialize_url(value)})"
        else:
            token.representation = f'"{serialize_string_value(value)}"'


def _visit_url(token: Node, context: RewriteContext) -> None:
    if context.state is not TraversalState.IN_SRC_DECLARATION:
        return
    try:
        resolved = resolve_font_url(token.value, context.base_url)
    except URLError as exc:
        logger.warning("Leaving font source unchanged: %s", exc)
        return
    if resolved is None:
        logger.debug("Keeping local font source %s", token.value)
        return

    rel_path = font_relative_path(resolved)
    _set_url_payload(token, f"./{rel_path}")
    context.fonts.append(RemoteFont(url=resolved, path=rel_path))


def _url_argument(function: Node) -> Optional[Node]:
    significant = [
        arg for arg in function.arguments if arg.type not in ("whitespace", "comment")
    ]
    if len(significant) == 1 and significant[0].type == "string":
        return significant[0]
    return None


def _visit_at_rule(rule: Node, context: RewriteContext) -> None:
    _visit_nodes(rule.prelude, context)
    if rule.lower_at_keyword == "font-face":
        context = context.enter(TraversalState.IN_FONT_FACE)
    _visit_nodes(block_children(rule), context)


def _visit_declaration(declaration: Node, context: RewriteContext) -> None:
    if (
        context.state is TraversalState.IN_FONT_FACE
        and declaration.lower_name == "src"
    ):
        context = context.enter(TraversalState.IN_SRC_DECLARATION)
    _visit_nodes(declaration.value, context)


def _visit_nodes(nodes: Iterable[Node], context: RewriteContext) -> None:
    for node in nodes:
        node_type = node.type
        if node_type == "at-rule":
            _visit_at_rule(node, context)
        elif node_type == "qualified-rule":
            _visit_nodes(node.prelude, context)
            _visit_nodes(block_children(node), context)
        elif node_type == "declaration":
            _visit_declaration(node, context)
        elif node_type == "url":
            _visit_url(node, context)
        elif node_type == "function":
            argument = _url_argument(node) if node.lower_name == "url" else None
            if argument is not None:
                _visit_url(argument, context)
            else:
                _visit_nodes(node.arguments, context)
        elif node_type in _BLOCK_TYPES:
            _visit_nodes(node.content, context)


def rewrite_remote_fonts(
    stylesheet: Stylesheet,
    base_url: Optional[str] = None,
) -> List[RemoteFont]:
    """Point remote ``@font-face`` sources at local copies, in place.

    Returns one :class:`RemoteFont` per rewritten ``url()``, in document order.
    Relative references are resolved against ``base_url`` when one is given.
    """
    fonts: List[RemoteFont] = []
    context = RewriteContext(state=TraversalState.OUTSIDE, base_url=base_url, fonts=fonts)
    _visit_nodes(stylesheet.rules, context)
    logger.debug("Found %d remote font(s) in %s", len(fonts), stylesheet.name)
    return fonts
