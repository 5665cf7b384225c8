"""
Curve encoding and pool snapshots for the linear bonding curve
"""

from .curves import compute_curve_id, curve_from_dict, curve_to_dict, pack_curve, unpack_curve
from .pools import PoolSnapshot

__all__ = [
    "compute_curve_id",
    "curve_from_dict",
    "curve_to_dict",
    "pack_curve",
    "unpack_curve",
    "PoolSnapshot",
]
