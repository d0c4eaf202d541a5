"""Smeared Poisson distributions and Feldman-Cousins likelihood scans."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np


def _poisson(n: int, mu: float) -> float:
    """Poisson probability of n events for mean mu, zero for negative arguments."""
    if n < 0 or mu < 0:
        return 0.0
    if mu == 0:
        return 1.0 if n == 0 else 0.0
    return math.exp(n * math.log(mu) - mu - math.lgamma(n + 1))


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def _edges_from_centers(centers: Sequence[float]) -> np.ndarray:
    """Bin edges halfway between neighbouring centers, outer bins as wide as their neighbours."""
    c = np.asarray(centers, dtype=float)
    if c.ndim != 1 or len(c) == 0:
        raise ValueError("at least one bin center is needed")
    if len(c) == 1:
        return np.array([c[0] - 0.5, c[0] + 0.5])
    middle = 0.5 * (c[:-1] + c[1:])
    first = c[0] - (middle[0] - c[0])
    last = c[-1] + (c[-1] - middle[-1])
    return np.concatenate(([first], middle, [last]))


def _find_bin(edges: np.ndarray, x: float) -> int | None:
    """Index of the bin holding x, or None if x is outside the edges."""
    k = int(np.searchsorted(edges, x, side="right"))
    if 1 <= k <= len(edges) - 1:
        return k - 1
    return None


def smeared_poisson(
    centers: Sequence[float], contents: Sequence[float], widths: Sequence[float], n: int
) -> float:
    """Probability of n events for a Poisson mean distributed as the given smearing function."""
    return sum(
        _poisson(n, float(c)) * float(v) * float(w) for c, v, w in zip(centers, contents, widths, strict=True)
    )


def make_smeared_poisson(
    centers: Sequence[float],
    contents: Sequence[float],
    widths: Sequence[float],
    upper_edge: float,
    maximum: int = -1,
) -> np.ndarray:
    """Return the smeared Poisson probabilities for 0, 1, ..., n events.

    n is the larger of ``maximum`` and 1.1 times the upper edge of the smearing function.
    """
    n = max(maximum, int(upper_edge * 1.1))
    return np.array([smeared_poisson(centers, contents, widths, k) for k in range(n + 1)])


def likelihood_ratio(
    observed: Sequence[float],
    scales: Sequence[float],
    pmfs: Sequence[Sequence[float]] | np.ndarray,
    obs_events: int,
    scale: float,
) -> float:
    """Likelihood of ``scale`` relative to the best scale, for ``obs_events`` observed events.

    ``pmfs[i][j]`` is the probability of ``observed[i]`` events when the scale
    parameter is ``scales[j]``; both axes are given by their bin centers.
    """
    table = np.asarray(pmfs, dtype=float)
    if table.shape != (len(observed), len(scales)):
        raise ValueError("PMF table shape does not match the observed counts and scales")
    if obs_events > observed[-1]:
        return 0.0

    obs_bin = _find_bin(_edges_from_centers(observed), obs_events)
    if obs_bin is None:
        row = np.zeros(len(scales))
    else:
        row = table[obs_bin]
    denominator = max(0.0, float(row.max()))
    scale_bin = _find_bin(_edges_from_centers(scales), scale)
    numerator = 0.0 if scale_bin is None else float(row[scale_bin])
    return _divide(numerator, denominator)


def nllr2(
    observed: Sequence[float],
    scales: Sequence[float],
    pmfs: Sequence[Sequence[float]] | np.ndarray,
    obs_events: int,
    scale: float,
) -> float:
    """Minus twice the log of the likelihood ratio."""
    ratio = likelihood_ratio(observed, scales, pmfs, obs_events, scale)
    if math.isnan(ratio):
        return math.nan
    if ratio <= 0:
        return math.inf
    return -2.0 * math.log(ratio)


class LikelihoodScan:
    """Likelihoods of observed event counts over a set of bin scale parameters."""

    def __init__(self, n_bins: int) -> None:
        self.n_bins = n_bins
        # bin_scales[i][j] is the scale for bin j in parameter set i
        self.bin_scales: list[list[float]] = []
        # likelihoods[i][n] is the probability of observing n events in parameter set i
        self.likelihoods: list[dict[int, float]] = []
        self.min = 0
        self.max = -1

    def load_likelihood_map(
        self,
        observed: Sequence[float],
        values: Sequence[float],
        table: Sequence[Sequence[float]] | np.ndarray,
        par: int,
    ) -> None:
        """Load likelihoods where ``table[i][j]`` is the probability of ``observed[i]`` at ``values[j]``.

        Parameter ``par`` takes the scan values; every other bin scale is 1.
        """
        grid = np.asarray(table, dtype=float)
        n_obs, n_vals = len(observed), len(values)
        if grid.shape != (n_obs, n_vals):
            raise ValueError("likelihood table shape does not match the observed counts and values")
        if not 0 <= par < self.n_bins:
            raise IndexError(f"parameter {par} out of range for {self.n_bins} bins")

        self.min = int(observed[0])
        self.max = self.min + n_obs - 1
        self.likelihoods = []
        self.bin_scales = []
        for i_p, value in enumerate(values):
            scales = [1.0] * self.n_bins
            scales[par] = float(value)
            self.likelihoods.append({self.min + i_n: float(grid[i_n, i_p]) for i_n in range(n_obs)})
            self.bin_scales.append(scales)

    def max_likelihood(self, n_obs: int) -> tuple[list[float], float]:
        """Return the parameter set with the highest likelihood for n_obs events, and that likelihood."""
        best_value = 0.0
        best: int | None = None
        for i, likelihood in enumerate(self.likelihoods):
            value = likelihood.get(n_obs, 0.0)
            if value > best_value:
                best_value = value
                best = i
        if best is None:
            raise ValueError(f"no parameter set has a positive likelihood for {n_obs} events")
        return list(self.bin_scales[best]), best_value

    def likelihood_ratio_map(self) -> list[dict[int, float]]:
        """Return, per parameter set, the likelihood ratio to the maximum for each event count."""
        ratios: list[dict[int, float]] = [{} for _ in self.likelihoods]
        for n in range(self.min, self.max + 1):
            best = self.max_likelihood(n)[1]
            for ratio, likelihood in zip(ratios, self.likelihoods):
                ratio[n] = likelihood.get(n, 0.0) / best
        return ratios

    def confidence_interval(self, level: float, i_par: int, i_val: int) -> tuple[int, int]:
        """Feldman-Cousins interval of event counts for parameter set i_val at confidence ``level``."""
        chosen = self.likelihoods[i_val]
        keys = list(chosen)
        min_n = min([0, *keys])
        max_n = max([0, *keys])

        counts: list[int] = []
        ratios: list[float] = []
        probs: list[float] = []
        for n in range(min_n, max_n + 1):
            p = chosen.get(n, 0.0)
            best = max([0.0, *(likelihood.get(n, 0.0) for likelihood in self.likelihoods)])
            counts.append(n)
            probs.append(p)
            ratios.append(p / best if best > 0 else 0.0)

        total = 0.0
        lower = math.inf
        upper = -math.inf
        while total < level:
            best_ratio = 0.0
            pick: int | None = None
            for i, ratio in enumerate(ratios):
                if ratio > best_ratio:
                    best_ratio = ratio
                    pick = i
            if pick is None:
                raise ValueError(f"cannot reach confidence level {level} for parameter set {i_val}")
            total += probs.pop(pick)
            n = counts.pop(pick)
            ratios.pop(pick)
            lower = min(lower, n)
            upper = max(upper, n)
        return int(lower), int(upper)

    def confidence_belt(
        self, level: float, i_par: int
    ) -> tuple[list[tuple[int, float]], list[tuple[int, float]]]:
        """Return the lower and upper edges of the belt as (event count, parameter value) points."""
        low: list[tuple[int, float]] = []
        high: list[tuple[int, float]] = []
        for i, scales in enumerate(self.bin_scales):
            lower, upper = self.confidence_interval(level, i_par, i)
            low.append((lower, scales[i_par]))
            high.append((upper, scales[i_par]))
        return low, high

    def ml_fit(self, i_par: int) -> list[tuple[int, float]]:
        """Return the maximum likelihood value of parameter i_par for each event count."""
        return [(n, self.max_likelihood(n)[0][i_par]) for n in range(self.min, self.max + 1)]