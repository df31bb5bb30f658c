"""Normalize Terraform (HCL2) files into resource and variable blocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import hcl2

from infracheck.errors import ParseError

_logger = logging.getLogger(__name__)

BLOCK_LABEL_COUNTS = {"resource": 2, "variable": 1}
META_KEYS = ("__start_line__", "__end_line__")
INTERPOLATION_MARKER = "${"
ESCAPED_MARKER = "$${"


class Unresolved(Exception):
    """Raised internally when an expression has no static literal value."""


@dataclass
class Block:
    """A top-level ``resource`` or ``variable`` block.

    ``attributes`` holds only statically resolved literals. Names whose
    expressions reference other objects or interpolate are listed in
    ``unresolved`` and are invisible to value lookups.
    """

    kind: str
    labels: Tuple[str, ...]
    attributes: Dict[str, Any] = field(default_factory=dict)
    unresolved: Tuple[str, ...] = ()
    names: Tuple[str, ...] = ()
    line: int = 0

    @property
    def type(self) -> str:
        return self.labels[0]

    @property
    def name(self) -> str:
        return self.labels[-1]

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def has(self, name: str) -> bool:
        """Return True when the attribute is declared, resolved or not."""

        return name in self.names

    def attribute_names(self) -> List[str]:
        return list(self.names)


def parse_terraform(text: str) -> List[Block]:
    """Parse HCL text and return its resource and variable blocks in source order."""

    if not text.endswith("\n"):
        text += "\n"
    try:
        document = hcl2.loads(text, with_meta=True)
    except Exception as exc:  # pylint: disable=broad-except
        # hcl2 surfaces lark parser errors plus assorted transformer errors.
        raise ParseError(" ".join(str(exc).split()) or type(exc).__name__) from exc

    blocks: List[Block] = []
    for kind, expected_labels in BLOCK_LABEL_COUNTS.items():
        for entry in _as_list(document.get(kind)):
            for labels, body in _iter_labelled(entry, expected_labels):
                blocks.append(_build_block(kind, labels, body))
    blocks.sort(key=lambda block: block.line)
    _logger.debug("Normalized %d terraform blocks", len(blocks))
    return blocks


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _iter_labelled(entry: Any, depth: int, prefix: Tuple[str, ...] = ()):
    """Walk ``depth`` levels of label keys down to each block body."""

    if not isinstance(entry, dict):
        return
    is_body = "__start_line__" in entry
    if depth == 0:
        # Maps nested inside a body (e.g. tags) are not blocks.
        if is_body:
            yield prefix, entry
        return
    if is_body:
        # Fewer labels than expected: malformed block, skipped.
        return
    for key, value in entry.items():
        if key in META_KEYS:
            continue
        yield from _iter_labelled(value, depth - 1, prefix + (_unquote(str(key)),))


def _build_block(kind: str, labels: Tuple[str, ...], body: Dict[str, Any]) -> Block:
    attributes: Dict[str, Any] = {}
    unresolved: List[str] = []
    names: List[str] = []
    for raw_name, expression in body.items():
        if raw_name in META_KEYS:
            continue
        name = _unquote(str(raw_name))
        names.append(name)
        try:
            attributes[name] = resolve_literal(expression)
        except Unresolved:
            unresolved.append(name)
    line = body.get("__start_line__", 0)
    return Block(
        kind=kind,
        labels=labels,
        attributes=attributes,
        unresolved=tuple(unresolved),
        names=tuple(names),
        line=line if isinstance(line, int) else 0,
    )


def resolve_literal(value: Any) -> Any:
    """Return the literal behind a parsed expression or raise ``Unresolved``.

    The parser renders references and function calls as ``${...}`` strings,
    so any string containing an interpolation marker is not static. The
    ``$${`` escape is a literal ``${``.
    """

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        if INTERPOLATION_MARKER in value.replace(ESCAPED_MARKER, ""):
            raise Unresolved(value)
        return _unquote(value).replace(ESCAPED_MARKER, INTERPOLATION_MARKER)
    if isinstance(value, dict):
        return {
            _unquote(str(key)): resolve_literal(item)
            for key, item in value.items()
            if key not in META_KEYS
        }
    if isinstance(value, list):
        return [resolve_literal(item) for item in value]
    raise Unresolved(repr(value))


def _unquote(value: str) -> str:
    # Newer parser releases keep the double quotes around string literals.
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value
