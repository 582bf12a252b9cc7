"""
Path queries over JSON and XML documents

Expressions follow the GPath dotted style used by REST test suites:

    store.book[0].title        indexed access
    store.book.title           a key applied to a list is mapped over it
    'dotted.key'.value         quoted keys may contain dots
    shop.item.@id              XML attributes (documents parsed by xmltodict)

A leading `$` or `$.` is accepted and ignored
"""

import json
import re
from typing import Any, List, Optional, Tuple
from xml.parsers.expat import ExpatError

import xmltodict

from restsession.exceptions import PathSyntaxError

MISSING = object()

# errors that mean "nothing to extract" rather than a programming fault
EXTRACTION_ERRORS = (ValueError, TypeError, RecursionError, ExpatError, PathSyntaxError)

_SEGMENT_RE = re.compile(
    r"(?:'(?P<quoted>[^']*)'|(?P<key>[^.\[\]']+))?(?P<indexes>(?:\[-?\d+\])*)"
)
_INDEX_RE = re.compile(r"\[(-?\d+)\]")

Segment = Tuple[Optional[str], List[int]]


def parse_path(expression: str) -> List[Segment]:
    """
    Splits an expression into (key, indexes) segments

    An empty expression (or a bare `$`) addresses the whole document
    """
    expr = expression.strip()
    if expr.startswith("$"):
        expr = expr[1:]
        if expr.startswith("."):
            expr = expr[1:]

    segments = []
    position = 0
    while position < len(expr):
        match = _SEGMENT_RE.match(expr, position)
        if not match.group(0):
            raise PathSyntaxError(
                "Unexpected character at position {} in path [{}]".format(
                    position, expression
                )
            )
        key = match.group("quoted")
        if key is None:
            key = match.group("key")
        indexes = [int(index) for index in _INDEX_RE.findall(match.group("indexes"))]
        segments.append((key, indexes))

        position = match.end()
        if position < len(expr):
            if expr[position] != "." or position == len(expr) - 1:
                raise PathSyntaxError(
                    "Unexpected character at position {} in path [{}]".format(
                        position, expression
                    )
                )
            position += 1

    return segments


def _select(node: Any, key: str) -> Any:
    if isinstance(node, list):
        values = [_select(item, key) for item in node]
        values = [value for value in values if value is not MISSING]
        return values if values else MISSING
    if isinstance(node, dict):
        return node.get(key, MISSING)
    return MISSING


def _index(node: Any, index: int, lenient: bool) -> Any:
    if isinstance(node, list):
        try:
            return node[index]
        except IndexError:
            return MISSING
    # xmltodict only builds lists for repeated elements
    if lenient and index in (0, -1):
        return node
    return MISSING


def resolve(document: Any, expression: str, lenient_index: bool = False) -> Any:
    """
    Evaluates an expression against an already parsed document

    Returns
    -------
    Any
        the matched node, or MISSING when the path does not resolve
    """
    node = document
    for key, indexes in parse_path(expression):
        if key is not None:
            node = _select(node, key)
        for index in indexes:
            if node is MISSING:
                break
            node = _index(node, index, lenient_index)
        if node is MISSING:
            return MISSING
    return node


def load_json(text: str) -> Any:
    return json.loads(text)


def load_xml(text: str) -> Any:
    return xmltodict.parse(text)


def normalize_mapping(mapping: Any) -> Any:
    """Round trips a mapping through a JSON document so only JSON types remain"""
    return load_json(json.dumps(mapping))


def _scalar_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def json_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return _scalar_string(value)


def xml_text(node: Any) -> str:
    """Text content of an xmltodict node, attributes excluded"""
    if node is None:
        return ""
    if isinstance(node, dict):
        return "".join(
            xml_text(value) for key, value in node.items() if not key.startswith("@")
        )
    if isinstance(node, list):
        return "".join(xml_text(value) for value in node)
    return _scalar_string(node)


def json_value(document: Any, expression: str) -> Optional[str]:
    node = resolve(document, expression)
    if node is MISSING or node is None:
        return None
    return json_string(node)


def json_values(document: Any, expression: str) -> Optional[list]:
    node = resolve(document, expression)
    if node is MISSING or node is None:
        return None
    return node if isinstance(node, list) else [node]


def xml_value(document: Any, expression: str) -> Optional[str]:
    node = resolve(document, expression, lenient_index=True)
    if node is MISSING:
        return None
    return xml_text(node)


def xml_values(document: Any, expression: str) -> Optional[list]:
    node = resolve(document, expression, lenient_index=True)
    if node is MISSING:
        return None
    if isinstance(node, list):
        return [xml_text(item) for item in node]
    return [xml_text(node)]
