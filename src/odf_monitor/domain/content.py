"""Content classification and parsing for XML and JSON payloads."""

import json
import re
from typing import Any
from xml.etree import ElementTree as ET

from .errors import ContentParseError
from .models import ContentKind

XML_PREFIXES = ("<?xml", "<OdfBody")
ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"

_INT_PATTERN = re.compile(r"^[-+]?\d+$")
_FLOAT_PATTERN = re.compile(r"^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$")


def classify(content: str) -> ContentKind:
    """Sniff the payload encoding from its leading characters.

    Malformed XML with a valid prefix is still XML; it fails at parse time.
    """
    if content.strip().startswith(XML_PREFIXES):
        return ContentKind.XML
    return ContentKind.JSON


def is_xml(content: str) -> bool:
    return classify(content) is ContentKind.XML


def coerce_value(text: str) -> Any:
    """Auto-type a trimmed text value: numbers and booleans, else the string."""
    if _INT_PATTERN.match(text):
        # Leading zeros are identifiers (e.g. "007"), not numbers
        digits = text.lstrip("+-")
        if len(digits) > 1 and digits.startswith("0"):
            return text
        return int(text)
    if _FLOAT_PATTERN.match(text):
        return float(text)
    if text == "true":
        return True
    if text == "false":
        return False
    return text


def _local_name(tag: str) -> str:
    """Drop the {namespace} part ElementTree adds to qualified names."""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def _element_to_dict(element: ET.Element) -> dict[str, Any]:
    node: dict[str, Any] = {}

    for name, value in element.attrib.items():
        node[f"{ATTRIBUTE_PREFIX}{_local_name(name)}"] = coerce_value(value.strip())

    # Mixed content: the element's own text plus the tail after each child
    parts = [element.text]
    for child in element:
        key = _local_name(child.tag)
        value = _element_to_dict(child)
        if key in node:
            # Repeated siblings collapse into a list
            if not isinstance(node[key], list):
                node[key] = [node[key]]
            node[key].append(value)
        else:
            node[key] = value
        parts.append(child.tail)

    text = " ".join(part.strip() for part in parts if part and part.strip())
    node[TEXT_KEY] = coerce_value(text) if text else ""
    return node


def parse_xml(content: str) -> dict[str, Any]:
    """Parse XML into nested dicts.

    Attributes are kept under "@_"-prefixed keys and every element carries a
    "#text" entry, empty when the element has no text. Text split around
    child elements is joined with single spaces, so "#text" does not record
    where the children sat.
    """
    try:
        root = ET.fromstring(content.strip())
    except ET.ParseError as e:
        raise ContentParseError(ContentKind.XML.value, str(e)) from e
    try:
        return {_local_name(root.tag): _element_to_dict(root)}
    except RecursionError as e:
        raise ContentParseError(ContentKind.XML.value, "document nesting too deep") from e


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON token {name}")


def parse_json(content: str) -> Any:
    try:
        return json.loads(content, parse_constant=_reject_constant)
    except ValueError as e:
        # JSONDecodeError is a ValueError
        raise ContentParseError(ContentKind.JSON.value, str(e)) from e
    except RecursionError as e:
        raise ContentParseError(ContentKind.JSON.value, "document nesting too deep") from e


def parse(content: str, kind: ContentKind) -> Any:
    """Parse content as the given kind, raising ContentParseError on failure."""
    if kind is ContentKind.XML:
        return parse_xml(content)
    return parse_json(content)


def parse_content(content: str) -> Any:
    """Classify then parse."""
    return parse(content, classify(content))
