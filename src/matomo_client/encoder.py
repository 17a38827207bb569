"""
Parameter encoding: call parameters → wire-safe key/value pairs.

Two stages, both pure:

1. :func:`encode_params` normalises a parameter mapping.  Absent values
   (``None`` or :data:`OMIT`) are dropped, scalars and lists of scalars pass
   through unchanged, and nested structures are serialized to compact JSON.
2. :func:`to_wire_fields` flattens an encoded mapping into ``(key, str)``
   pairs.  This is the only place that decides how booleans and lists look on
   the wire, so single and batched calls can never diverge.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any
from urllib.parse import urlencode

from .config import LIST_DELIMITER, METHOD_KEY

Scalar = str | int | float | bool
EncodedValue = Scalar | list[Scalar]


class _Omitted:
    """Marker for a parameter explicitly left at the remote's default."""

    _instance: _Omitted | None = None

    def __new__(cls) -> _Omitted:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMIT"

    def __bool__(self) -> bool:
        return False


OMIT = _Omitted()


def is_absent(value: Any) -> bool:
    """Return ``True`` for values that must never be transmitted."""
    return value is None or value is OMIT


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


# ---------------------------------------------------------------------------
# Nested structures
# ---------------------------------------------------------------------------

def _strip_omitted(value: Any) -> Any:
    # OMIT has no JSON form: drop it from mappings and sequences.  None stays
    # and becomes JSON null.
    if isinstance(value, Mapping):
        return {
            str(key): _strip_omitted(item)
            for key, item in value.items()
            if item is not OMIT
        }
    if isinstance(value, (list, tuple)):
        return [_strip_omitted(item) for item in value if item is not OMIT]
    return value


def serialize_nested(value: Mapping | list | tuple) -> str:
    """
    Serialize a nested mapping or sequence to its embedded textual form.

    Every nested parameter goes through this routine, producing compact JSON
    (no whitespace after separators).

    Args:
        value: Mapping or sequence, possibly containing further nesting.

    Returns:
        JSON text.

    Raises:
        TypeError: A leaf value has no JSON representation.
    """
    return json.dumps(_strip_omitted(value), separators=(",", ":"), ensure_ascii=False)


# ---------------------------------------------------------------------------
# Stage 1: normalise
# ---------------------------------------------------------------------------

def encode_value(key: str, value: Any) -> EncodedValue:
    """
    Normalise a single non-absent parameter value.

    Args:
        key: Parameter name (used in error messages only).
        value: Raw value supplied by the caller.

    Returns:
        The scalar unchanged, a list of scalars, or JSON text for nested
        structures.

    Raises:
        TypeError: ``value`` is of a type the encoder does not know how to
                   transmit (it is never silently stringified).
    """
    if _is_scalar(value):
        return value

    if isinstance(value, Mapping):
        return serialize_nested(value)

    if isinstance(value, (list, tuple)):
        items = [item for item in value if not is_absent(item)]
        if all(_is_scalar(item) for item in items):
            return items
        return serialize_nested(items)

    raise TypeError(
        f"Parameter '{key}' has unsupported type {type(value).__name__}; "
        "pass a string, number, boolean, list, or mapping."
    )


def encode_params(params: Mapping[str, Any] | None) -> dict[str, EncodedValue]:
    """
    Normalise a call's parameter mapping.

    Absent parameters are dropped entirely: the result never contains a key
    whose value was ``None`` or :data:`OMIT`.

    Args:
        params: Parameter name → value mapping (may be ``None`` or empty).

    Returns:
        New dict; the input mapping is not modified.

    Raises:
        TypeError: A key is not a string, or a value has an unsupported type.
    """
    encoded: dict[str, EncodedValue] = {}
    for key, value in (params or {}).items():
        if not isinstance(key, str):
            raise TypeError(f"Parameter names must be strings, got {key!r}.")
        if is_absent(value):
            continue
        encoded[key] = encode_value(key, value)
    return encoded


# ---------------------------------------------------------------------------
# Stage 2: flatten for the wire
# ---------------------------------------------------------------------------

def _float_text(value: float) -> str:
    # Positional notation between 1e-6 and 1e21, exponent form outside it;
    # integral floats drop the trailing ".0".
    magnitude = abs(value)
    if not math.isfinite(value) or magnitude >= 1e21:
        return repr(value)
    if value.is_integer():
        return str(int(value))
    if magnitude < 1e-6:
        return repr(value)
    return format(Decimal(repr(value)), "f")


def wire_scalar(value: Scalar) -> str:
    """Render one scalar in the textual form the remote accepts."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _float_text(value)
    return str(value)


def to_wire_fields(encoded: Mapping[str, EncodedValue]) -> list[tuple[str, str]]:
    """
    Flatten an encoded mapping into ordered ``(key, value)`` string pairs.

    Lists become one comma-delimited value under a single key.

    Args:
        encoded: Output of :func:`encode_params` (optionally merged with
                 routing fields).

    Returns:
        List of pairs, in the mapping's iteration order, suitable for
        ``requests`` ``data=`` / ``params=`` or :func:`urllib.parse.urlencode`.
    """
    fields: list[tuple[str, str]] = []
    for key, value in encoded.items():
        if isinstance(value, list):
            fields.append((key, LIST_DELIMITER.join(wire_scalar(item) for item in value)))
        else:
            fields.append((key, wire_scalar(value)))
    return fields


def encode_bulk_item(method: str, encoded: Mapping[str, EncodedValue]) -> str:
    """
    Embed one call as a bulk sub-request string.

    Format: ``?method=<method>&<key>=<value>...``, form-urlencoded, with the
    method first.

    Args:
        method: Remote method name of the item.
        encoded: The item's encoded parameters (routing fields excluded).

    Returns:
        The sub-request string placed under ``urls[i]``.
    """
    fields = [(METHOD_KEY, method)]
    fields.extend((key, value) for key, value in to_wire_fields(encoded) if key != METHOD_KEY)
    return "?" + urlencode(fields)
