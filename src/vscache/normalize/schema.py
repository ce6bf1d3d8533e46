"""
Declarative schema-with-defaults for upstream payloads.

Every normalizer describes its output as a mapping of output key to Field
(or to a nested mapping, producing a nested object). ``apply_schema`` is the
single place where missing values become defaults and wrong types become
MalformedUpstreamDataError.

Example:
    >>> schema = {
    ...     "address": Field("hash", FieldKind.STRING, required=True),
    ...     "isContract": Field("is_contract", FieldKind.BOOLEAN, default=False),
    ... }
    >>> apply_schema(schema, {"hash": "0xabc"})
    {'address': '0xabc', 'isContract': False}
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from vscache.core.exceptions import MalformedUpstreamDataError

_INTEGER_TEXT = re.compile(r"^-?\d+$")
_MISSING = object()


class FieldKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"  # int, or a decimal integer string
    NUMBER = "number"  # int/float, or a numeric string
    BOOLEAN = "boolean"
    AMOUNT = "amount"  # base-unit integer, kept as canonical decimal text
    LIST = "list"
    ANY = "any"


@dataclass(frozen=True)
class Field:
    """
    One output field.

    Args:
        source: Dotted path into the upstream object, or several paths tried in order
        kind: Expected type of the upstream value
        default: Value used when the upstream value is missing or null
        required: Missing value is an error instead of a default
        item_schema: For LIST fields, schema applied to every item
    """

    source: str | tuple[str, ...]
    kind: FieldKind = FieldKind.ANY
    default: Any = None
    required: bool = False
    item_schema: Schema | None = None

    @property
    def sources(self) -> tuple[str, ...]:
        return (self.source,) if isinstance(self.source, str) else self.source


Schema = Mapping[str, Union[Field, "Schema"]]


def _lookup(raw: Mapping[str, Any], path: str) -> Any:
    current: Any = raw
    walked = []
    for part in path.split("."):
        if current is None:
            return _MISSING
        if not isinstance(current, Mapping):
            raise MalformedUpstreamDataError(
                f"Expected an object at '{'.'.join(walked) or '<root>'}', got {type(current).__name__}",
                field=path,
            )
        walked.append(part)
        current = current.get(part, _MISSING)
        if current is _MISSING:
            return _MISSING
    return current


def _malformed(path: str, kind: FieldKind, value: Any) -> MalformedUpstreamDataError:
    return MalformedUpstreamDataError(
        f"Field '{path}' should be {kind.value}, got {type(value).__name__}: {value!r}",
        field=path,
    )


def _coerce(path: str, field: Field, value: Any) -> Any:
    kind = field.kind
    if kind is FieldKind.ANY:
        return value

    if kind is FieldKind.STRING:
        if isinstance(value, str):
            return value
        raise _malformed(path, kind, value)

    if kind is FieldKind.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        raise _malformed(path, kind, value)

    if kind in (FieldKind.INTEGER, FieldKind.AMOUNT):
        if isinstance(value, bool):
            raise _malformed(path, kind, value)
        if isinstance(value, int):
            number = value
        elif isinstance(value, str) and _INTEGER_TEXT.match(value.strip()):
            number = int(value.strip())
        elif isinstance(value, str) and value.strip() == "":
            return field.default
        else:
            raise _malformed(path, kind, value)
        return str(number) if kind is FieldKind.AMOUNT else number

    if kind is FieldKind.NUMBER:
        if isinstance(value, bool):
            raise _malformed(path, kind, value)
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                raise _malformed(path, kind, value) from None
        raise _malformed(path, kind, value)

    if kind is FieldKind.LIST:
        if not isinstance(value, list):
            raise _malformed(path, kind, value)
        if field.item_schema is None:
            return list(value)
        items = []
        for index, item in enumerate(value):
            if not isinstance(item, Mapping):
                raise _malformed(f"{path}[{index}]", FieldKind.ANY, item)
            items.append(apply_schema(field.item_schema, item))
        return items

    raise ValueError(f"Unknown field kind: {kind}")


def resolve_field(raw: Mapping[str, Any], field: Field) -> Any:
    """Resolve one Field against ``raw``: first present source wins."""
    for path in field.sources:
        value = _lookup(raw, path)
        if value is _MISSING or value is None:
            continue
        return _coerce(path, field, value)

    if field.required:
        raise MalformedUpstreamDataError(
            f"Required field '{field.sources[0]}' is missing", field=field.sources[0]
        )
    # Fresh copies of mutable defaults
    if isinstance(field.default, list):
        return list(field.default)
    if isinstance(field.default, dict):
        return dict(field.default)
    return field.default


def apply_schema(schema: Schema, raw: Any) -> dict[str, Any]:
    """
    Build the output object described by ``schema`` from ``raw``.

    Raises:
        MalformedUpstreamDataError: ``raw`` is not an object, a value has the
            wrong type, or a required value is missing
    """
    if not isinstance(raw, Mapping):
        raise MalformedUpstreamDataError(
            f"Expected an object, got {type(raw).__name__}", field="<root>"
        )

    result: dict[str, Any] = {}
    for key, node in schema.items():
        if isinstance(node, Field):
            result[key] = resolve_field(raw, node)
        else:
            result[key] = apply_schema(node, raw)
    return result


__all__ = ["Field", "FieldKind", "Schema", "apply_schema", "resolve_field"]
