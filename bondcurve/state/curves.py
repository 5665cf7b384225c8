"""
Curve parameter encoding.

Binary layout (32 bytes, little-endian u64 each):

    slope_numerator | slope_denominator | r0_numerator | r0_denominator

The curve id hashes the *reduced* rationals so that unreduced encodings of
the same price line (``150/3`` and ``50/1``) share one id.
"""

from __future__ import annotations

import struct
from math import gcd
from typing import Any, Dict, Tuple

from ..core.curve_state import CURVE_TAG_LINEAR_PRICE
from ..core.errors import InvalidCurveState
from ..core.types import LinearCurveParameters
from .canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex


_LAYOUT = struct.Struct("<4Q")
PACKED_LEN = _LAYOUT.size

_FIELDS = ("slope_numerator", "slope_denominator", "r0_numerator", "r0_denominator")


def pack_curve(params: LinearCurveParameters) -> bytes:
    return _LAYOUT.pack(
        params.slope_numerator,
        params.slope_denominator,
        params.r0_numerator,
        params.r0_denominator,
    )


def unpack_curve(data: bytes) -> LinearCurveParameters:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("data must be bytes-like")
    if len(data) != PACKED_LEN:
        raise InvalidCurveState(f"packed curve must be {PACKED_LEN} bytes, got {len(data)}")
    slope_num, slope_den, r0_num, r0_den = _LAYOUT.unpack(bytes(data))
    return LinearCurveParameters(
        slope_numerator=slope_num,
        slope_denominator=slope_den,
        r0_numerator=r0_num,
        r0_denominator=r0_den,
    )


def curve_to_dict(params: LinearCurveParameters) -> Dict[str, Any]:
    out: Dict[str, Any] = {"curve_tag": CURVE_TAG_LINEAR_PRICE}
    for name in _FIELDS:
        out[name] = getattr(params, name)
    return out


def curve_from_dict(obj: Dict[str, Any]) -> LinearCurveParameters:
    if not isinstance(obj, dict):
        raise InvalidCurveState("curve must be a mapping")
    tag = obj.get("curve_tag", CURVE_TAG_LINEAR_PRICE)
    if tag != CURVE_TAG_LINEAR_PRICE:
        raise InvalidCurveState(f"unsupported curve_tag: {tag!r}")
    missing = [name for name in _FIELDS if name not in obj]
    if missing:
        raise InvalidCurveState(f"curve is missing fields: {', '.join(missing)}")
    return LinearCurveParameters(**{name: obj[name] for name in _FIELDS})


def _reduce(numerator: int, denominator: int) -> Tuple[int, int]:
    g = gcd(numerator, denominator)
    return numerator // g, denominator // g


def compute_curve_id(params: LinearCurveParameters) -> str:
    """Deterministic ``0x``-prefixed sha256 id of the curve's price line."""
    slope = _reduce(params.slope_numerator, params.slope_denominator)
    r0 = _reduce(params.r0_numerator, params.r0_denominator)
    body = canonical_json_bytes(
        {
            "curve_tag": CURVE_TAG_LINEAR_PRICE,
            "slope": list(slope),
            "r0": list(r0),
        }
    )
    return sha256_hex(domain_sep_bytes("curve") + body)
