from __future__ import annotations

import hashlib
import json
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any


# ---------------------------------------------------------------------
# Deterministic canonical JSON + SHA256 hashing of analysis results
#
# - sorted keys, utf-8, no whitespace variance
# - floats rendered as fixed-scale decimal strings
# ---------------------------------------------------------------------


def _quantize_decimal(d: Decimal, *, digits: int = 12) -> Decimal:
    q = Decimal(10) ** Decimal(-digits)
    return d.quantize(q, rounding=ROUND_HALF_UP)


def _normalize(obj: Any) -> Any:
    if obj is None:
        return None

    if isinstance(obj, (bool, int, str)):
        return obj

    if isinstance(obj, Decimal):
        return format(_quantize_decimal(obj), "f")

    if isinstance(obj, float):
        if math.isnan(obj):
            return "NaN"
        if math.isinf(obj):
            return "Infinity" if obj > 0 else "-Infinity"
        try:
            return format(_quantize_decimal(Decimal(str(obj))), "f")
        except InvalidOperation:
            return str(obj)

    if isinstance(obj, (list, tuple)):
        return [_normalize(x) for x in obj]

    if isinstance(obj, dict):
        return {str(k): _normalize(v) for k, v in obj.items()}

    if hasattr(obj, "to_dict") and callable(getattr(obj, "to_dict")):
        return _normalize(obj.to_dict())

    if hasattr(obj, "isoformat"):
        return obj.isoformat()

    return str(obj)


def canonical_json(obj: Any) -> str:
    """Deterministic JSON encoding with stable floats."""
    return json.dumps(
        _normalize(obj),
        ensure_ascii=False,
        sort_keys=True,
        separators=(",", ":"),
    )


def sha256_text(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def sha256_json(obj: Any) -> str:
    return sha256_text(canonical_json(obj))
