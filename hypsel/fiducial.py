"""Fiducial volume definitions for the liquid-argon TPC."""

from __future__ import annotations

import enum
import math
from collections.abc import Sequence


class FVVersion(enum.IntEnum):
    """Available fiducial volume definitions."""

    OLD_FV = 0
    WHOLE_TPC = 1
    WIRECELL = 2
    WHOLE_TPC_PADDED = 3
    WIRECELL_PADDED = 4


# Edges of the TPC
TPC_XMIN = -1.55
TPC_XMAX = 254.8
TPC_YMIN = -115.53
TPC_YMAX = 117.47
TPC_ZMIN = 0.1
TPC_ZMAX = 1036.9

# Dead region in z, removed by every definition
DEAD_ZMIN = 675.1
DEAD_ZMAX = 775.1

# MCC8 inclusive fiducial volume
_OLD_XMIN = 12.0
_OLD_XMAX = 256.35 - 12.0
_OLD_YMIN = -115.53 + 35
_OLD_YMAX = 117.47 - 35
_OLD_ZMIN = 0.1 + 25
_OLD_ZMAX = 1036.9 - 85

# Wirecell fiducial volume
_YX_TOP_Y1 = 116.0
_YX_TOP_X1 = (0, 150.00, 132.56, 122.86, 119.46, 114.22, 110.90, 115.85, 113.48, 126.36, 144.21)
_YX_TOP_Y2 = (0, 110.00, 108.14, 106.77, 105.30, 103.40, 102.18, 101.76, 102.27, 102.75, 105.10)
_YX_TOP_X2 = 256.0

_YX_BOT_Y1 = -115.0
_YX_BOT_X1 = (0, 115.71, 98.05, 92.42, 91.14, 92.25, 85.38, 78.19, 74.46, 78.86, 108.90)
_YX_BOT_Y2 = (0, -101.72, -99.46, -99.51, -100.43, -99.55, -98.56, -98.00, -98.30, -99.32, -104.20)
_YX_BOT_X2 = 256.0

# The ZX view depends on Y, in sub-ranges of 24 cm from -116 to 116 cm
_ZX_UP_Z1 = 0.0
_ZX_UP_X1 = 120.0
_ZX_UP_Z2 = 11.0
_ZX_UP_X2 = 256.0

_ZX_DW_Z1 = 1037.0
_ZX_DW_X1 = (0, 120.00, 115.24, 108.50, 110.67, 120.90, 126.43, 140.51, 157.15, 120.00, 120.00)
_ZX_DW_Z2 = (0, 1029.00, 1029.12, 1027.21, 1026.01, 1024.91, 1025.27, 1025.32, 1027.61, 1026.00, 1026.00)
_ZX_DW_X2 = 256.0

_ANODE = 0.0
_CUT = 3.0
_TOP = 117.0
_BOTTOM = -116.0
_UPSTREAM = 0.0
_DOWNSTREAM = 1037.0

_N_SLICES = 10


def _xy_polygon(idx: int) -> tuple[tuple[float, ...], tuple[float, ...]]:
    xs = (
        _ANODE + _CUT,
        _YX_BOT_X1[idx] - _CUT,
        _YX_BOT_X2 - _CUT,
        _YX_TOP_X2 - _CUT,
        _YX_TOP_X1[idx] - _CUT,
        _ANODE + _CUT,
    )
    ys = (
        _BOTTOM + _CUT,
        _YX_BOT_Y1 + _CUT,
        _YX_BOT_Y2[idx] + _CUT,
        _YX_TOP_Y2[idx] - _CUT,
        _YX_TOP_Y1 - _CUT,
        _TOP - _CUT,
    )
    return xs, ys


def _xz_polygon(idx: int) -> tuple[tuple[float, ...], tuple[float, ...]]:
    xs = (
        _ANODE + _CUT,
        _ZX_UP_X1 - _CUT,
        _ZX_UP_X2 - _CUT,
        _ZX_DW_X2 - _CUT,
        _ZX_DW_X1[idx] - _CUT,
        _ANODE + _CUT,
    )
    zs = (
        _UPSTREAM + _CUT + 1,
        _ZX_UP_Z1 + _CUT + 1,
        _ZX_UP_Z2 + _CUT + 1,
        _ZX_DW_Z2[idx] - _CUT - 1,
        _ZX_DW_Z1 - _CUT - 1,
        _DOWNSTREAM - _CUT - 1,
    )
    return xs, zs


_XY_POLYGONS = [_xy_polygon(idx) for idx in range(_N_SLICES)]
_XZ_POLYGONS = [_xz_polygon(idx) for idx in range(_N_SLICES)]


def point_in_polygon(xs: Sequence[float], ys: Sequence[float], x: float, y: float) -> bool:
    """Return True if (x, y) lies inside the polygon with the given vertices (crossing test)."""
    inside = False
    vertices = list(zip(xs, ys))
    if not vertices:
        return False
    prev_x, prev_y = vertices[-1]
    for cur_x, cur_y in vertices:
        if (cur_y > y) != (prev_y > y) and x < (prev_x - cur_x) * (y - cur_y) / (prev_y - cur_y) + cur_x:
            inside = not inside
        prev_x, prev_y = cur_x, cur_y
    return inside


def _clamp_slice(index: int) -> int:
    return min(max(index, 0), _N_SLICES - 1)


def _in_dead_region(z: float) -> bool:
    return DEAD_ZMIN < z < DEAD_ZMAX


class FiducialVolume:
    """Decides whether a position lies inside a chosen fiducial volume."""

    def __init__(self, version: int = FVVersion.WHOLE_TPC, padding: float = 0.0) -> None:
        try:
            self.version: FVVersion | None = FVVersion(version)
        except ValueError:
            self.version = None
        self.padding = padding

    def contains(self, position: Sequence[float]) -> bool:
        """Return True if the (x, y, z) position is inside the fiducial volume."""
        x, y, z = position
        if self.version is FVVersion.OLD_FV:
            return self._in_old_fv(x, y, z)
        if self.version in (FVVersion.WHOLE_TPC, FVVersion.WHOLE_TPC_PADDED):
            return self._in_whole_tpc_padded(x, y, z)
        if self.version is FVVersion.WIRECELL:
            return self._in_wirecell(x, y, z)
        if self.version is FVVersion.WIRECELL_PADDED:
            return self._in_wirecell(x, y, z) and self._in_whole_tpc_padded(x, y, z)
        return False

    @staticmethod
    def _in_old_fv(x: float, y: float, z: float) -> bool:
        if x > _OLD_XMAX or x < _OLD_XMIN:
            return False
        if y > _OLD_YMAX or y < _OLD_YMIN:
            return False
        if z > _OLD_ZMAX or z < _OLD_ZMIN:
            return False
        return not _in_dead_region(z)

    def _in_whole_tpc_padded(self, x: float, y: float, z: float) -> bool:
        pad = self.padding
        if x > TPC_XMAX - pad or x < TPC_XMIN + pad:
            return False
        if y > TPC_YMAX - pad or y < TPC_YMIN + pad:
            return False
        if z > TPC_ZMAX - pad or z < TPC_ZMIN + pad:
            return False
        return not _in_dead_region(z)

    @staticmethod
    def _in_wirecell(x: float, y: float, z: float) -> bool:
        if z > 1000 or z < 0:
            return False
        if _in_dead_region(z):
            return False
        index_y = _clamp_slice(math.floor((y + 116) / 24))
        index_z = _clamp_slice(math.floor(z / 100))
        xy_xs, xy_ys = _XY_POLYGONS[index_z]
        xz_xs, xz_zs = _XZ_POLYGONS[index_y]
        return point_in_polygon(xy_xs, xy_ys, x, y) and point_in_polygon(xz_xs, xz_zs, x, z)