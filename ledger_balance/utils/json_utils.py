"""Helpers for inputs that may arrive either decoded or as JSON text"""

import json
from decimal import Decimal
from typing import Any


def decode_if_json(payload: Any) -> Any:
    """
    Return structured input unchanged, decode JSON text otherwise.

    Text that is not valid JSON decodes to None so callers can treat it as
    invalid input instead of handling a parse exception.
    """
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            return json.loads(payload)
        except ValueError:
            return None
    return payload


def number_text(value: Any) -> str:
    """
    Text form of a raw numeric field, never in exponent notation.

    JSON floats such as 1e-05 or 1e+16 are written out as plain decimals so
    they can be checked against digit patterns.
    """
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    return str(value)
