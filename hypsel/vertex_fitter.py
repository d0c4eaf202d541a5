"""Fit of a V-shaped secondary vertex formed by two tracks."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.optimize import minimize

from hypsel.event import Track, Vector3

_WALK_STEP = 0.01
_WALK_POINTS = 200
_MAX_SEPARATION = 10000.0

_FIT_POINTS = 50
_MAX_FUNCTION_CALLS = 100
_TOLERANCE = 0.1
_STEPS = (5.0, 5.0, 0.1, 0.1, 0.1)


def _vec(values) -> np.ndarray:
    return np.asarray(values, dtype=float)


def _as_tuple(v: np.ndarray) -> Vector3:
    return (float(v[0]), float(v[1]), float(v[2]))


def _angle(a: np.ndarray, b: np.ndarray) -> float:
    norm = np.linalg.norm(a) * np.linalg.norm(b)
    if norm == 0:
        return 0.0
    return float(np.arccos(np.clip(a @ b / norm, -1.0, 1.0)))


def _rotate(v: np.ndarray, angle: float, axis: np.ndarray) -> np.ndarray:
    """Rotate v by angle (right-handed) about axis."""
    length = np.linalg.norm(axis)
    if length == 0:
        return v.copy()
    k = axis / length
    c, s = np.cos(angle), np.sin(angle)
    return v * c + np.cross(k, v) * s + k * (k @ v) * (1 - c)


@dataclass
class SecondaryVertex:
    """The V shape formed by two tracks meeting at a vertex."""

    vertex: Vector3 = (0.0, 0.0, 0.0)
    normal: Vector3 = (0.0, 0.0, 0.0)
    opening_angle: float = 0.0
    proton_start: Vector3 = (0.0, 0.0, 0.0)
    pion_start: Vector3 = (0.0, 0.0, 0.0)
    proton_direction: Vector3 = (0.0, 0.0, 0.0)
    pion_direction: Vector3 = (0.0, 0.0, 0.0)
    proton_length: float = 0.0
    pion_length: float = 0.0
    d_proton: float = 0.0
    d_pion: float = 0.0
    crossing_dist: float = 0.0
    fit_status: bool = False


def point_of_closest_approach(p1: Track, p2: Track) -> Vector3:
    """Walk both tracks backwards from their starts and return the midpoint of closest approach."""
    steps = np.arange(_WALK_POINTS)[:, None] * _WALK_STEP
    pos1 = _vec(p1.start) - steps * _vec(p1.direction)
    pos2 = _vec(p2.start) - steps * _vec(p2.direction)
    separations = np.linalg.norm(pos1[:, None, :] - pos2[None, :, :], axis=2)
    separations = np.where(np.isnan(separations), np.inf, separations)
    i1, i2 = np.unravel_index(np.argmin(separations), separations.shape)
    if not separations[i1, i2] < _MAX_SEPARATION:
        return (0.0, 0.0, 0.0)
    return _as_tuple((pos1[i1] + pos2[i2]) * 0.5)


class SecondaryVertexFitter:
    """Fits a vertex and two arms to a pair of tracks."""

    def __init__(self, pull: float = 5.0) -> None:
        self.pull = pull

    def fit_function(self, p1: Track, p2: Track, vertex, dir1, dir2) -> float:
        """Return the sum of squared distances of points along the tracks from the fitted arms."""
        vertex = _vec(vertex)
        total = 0.0
        fractions = np.arange(_FIT_POINTS + 1)[:, None] / _FIT_POINTS
        for track, fit_dir in ((p1, _vec(dir1)), (p2, _vec(dir2))):
            points = _vec(track.start) + fractions * track.length * _vec(track.direction)
            diff = vertex - points
            projection = diff @ fit_dir
            distances = np.linalg.norm(diff - projection[:, None] * fit_dir, axis=1)
            # Points behind the vertex are penalised by the pull factor
            behind = -projection < 0
            distances = np.where(behind, np.linalg.norm(diff, axis=1) * self.pull, distances)
            total += float(np.sum(distances**2))
        return total

    def make_vertex(self, p1: Track, p2: Track, use_closest_approach: bool = False) -> SecondaryVertex:
        """Fit the vertex formed by a proton candidate p1 and a pion candidate p2."""
        guess = _vec(point_of_closest_approach(p1, p2))
        proton_dir = _vec(p1.direction)
        pion_dir = _vec(p2.direction)
        proton_start = _vec(p1.start)
        pion_start = _vec(p2.start)

        start_opening_angle = _angle(proton_dir, pion_dir)
        with np.errstate(invalid="ignore", divide="ignore"):
            normal = np.cross(proton_dir, pion_dir)
            normal = normal / np.linalg.norm(normal)

        def objective(c: np.ndarray) -> float:
            fit_proton = _rotate(proton_dir, c[0], normal)
            fit_pion = _rotate(proton_dir, c[0] + c[1], normal)
            return self.fit_function(p1, p2, c[2:5], fit_proton, fit_pion)

        start = np.array([0.0, start_opening_angle, *guess])
        if use_closest_approach:
            params = start
            status = False
        else:
            simplex = np.vstack([start] + [start + step * np.eye(5)[i] for i, step in enumerate(_STEPS)])
            with np.errstate(invalid="ignore"):
                result = minimize(
                    objective,
                    start,
                    method="Nelder-Mead",
                    options={
                        "initial_simplex": simplex,
                        "maxfev": _MAX_FUNCTION_CALLS,
                        "fatol": _TOLERANCE,
                    },
                )
            params = result.x
            status = bool(result.success)

        theta, opening_angle = float(params[0]), float(params[1])

        # The fitted position replaces the estimate only when the minimiser did not
        # converge; the tuned selection depends on this.
        vertex = guess if status else _vec(params[2:5])

        along_proton = float((proton_start - vertex) @ proton_dir)
        along_pion = float((pion_start - vertex) @ pion_dir)
        crossing = along_proton if abs(along_proton) > abs(along_pion) else along_pion

        return SecondaryVertex(
            vertex=_as_tuple(vertex),
            normal=_as_tuple(normal),
            opening_angle=opening_angle,
            proton_start=_as_tuple(proton_start),
            pion_start=_as_tuple(pion_start),
            proton_direction=_as_tuple(_rotate(proton_dir, theta, normal)),
            pion_direction=_as_tuple(_rotate(proton_dir, theta + opening_angle, normal)),
            proton_length=p1.length,
            pion_length=p2.length,
            crossing_dist=crossing,
            fit_status=status,
        )