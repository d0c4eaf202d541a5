"""Response matrices and forward folding of differential cross sections."""

from __future__ import annotations

from pathlib import Path

import numpy as np

# Fraction of the exposure used in the cross-section normalisation
_EXPOSURE_FRACTION = 0.64

# Flux histograms are per m^2; cross sections are per cm^2
_M2_TO_CM2 = 100 * 100


class Histogram1D:
    """Histogram with equal-width bins and underflow/overflow.

    ``counts`` and ``sumw2`` are indexed by bin number: 0 is the underflow,
    1..nbins are the bins and nbins+1 is the overflow.
    """

    def __init__(self, nbins: int, low: float, high: float) -> None:
        if nbins < 1:
            raise ValueError("a histogram needs at least one bin")
        if not high > low:
            raise ValueError("upper edge must be above lower edge")
        self.nbins = nbins
        self.low = float(low)
        self.high = float(high)
        self.counts = np.zeros(nbins + 2)
        self.sumw2 = np.zeros(nbins + 2)

    @property
    def edges(self) -> np.ndarray:
        return np.linspace(self.low, self.high, self.nbins + 1)

    @property
    def widths(self) -> np.ndarray:
        return np.diff(self.edges)

    @property
    def centers(self) -> np.ndarray:
        edges = self.edges
        return 0.5 * (edges[:-1] + edges[1:])

    @property
    def contents(self) -> np.ndarray:
        """Contents of the in-range bins."""
        return self.counts[1:-1]

    @property
    def errors(self) -> np.ndarray:
        """Errors of the in-range bins."""
        return np.sqrt(self.sumw2[1:-1])

    def find_bin(self, x: float) -> int:
        """Return the bin number holding x (0 for underflow, nbins+1 for overflow)."""
        if np.isnan(x):
            return 0
        if x < self.low:
            return 0
        if x >= self.high:
            return self.nbins + 1
        index = 1 + int(self.nbins * (x - self.low) / (self.high - self.low))
        return min(index, self.nbins)

    def fill(self, x: float, weight: float = 1.0) -> int:
        """Add a weighted entry at x and return the bin it went into."""
        index = self.find_bin(x)
        self.counts[index] += weight
        self.sumw2[index] += weight * weight
        return index

    def integral(self, width: bool = False) -> float:
        """Sum of the in-range contents, each multiplied by its bin width if asked."""
        if width:
            return float(np.sum(self.contents * self.widths))
        return float(np.sum(self.contents))

    def copy(self) -> Histogram1D:
        clone = Histogram1D(self.nbins, self.low, self.high)
        clone.counts = self.counts.copy()
        clone.sumw2 = self.sumw2.copy()
        return clone

    def set_values(self, contents, errors=None) -> None:
        """Replace the in-range contents, and errors if given."""
        values = np.asarray(contents, dtype=float)
        if values.shape != (self.nbins,):
            raise ValueError(f"expected {self.nbins} values, got {values.shape}")
        self.counts[1:-1] = values
        if errors is not None:
            errs = np.asarray(errors, dtype=float)
            if errs.shape != (self.nbins,):
                raise ValueError(f"expected {self.nbins} errors, got {errs.shape}")
            self.sumw2[1:-1] = errs**2


class ForwardFolder:
    """Builds a response matrix from simulated events and folds cross sections through it."""

    def __init__(
        self,
        label: str,
        axis_title: str,
        true_nbins: int,
        reco_nbins: int,
        low: float,
        high: float,
    ) -> None:
        self.label = label
        self.axis_title = axis_title
        self.gen = Histogram1D(true_nbins, low, high)
        self.reco = Histogram1D(reco_nbins, low, high)
        # Indexed [reco bin number, true bin number], flows included
        self.reco_gen = np.zeros((reco_nbins + 2, true_nbins + 2))
        # In-range response, indexed [reco bin, true bin]
        self.response = np.zeros((reco_nbins, true_nbins))
        self.targets = 0.0
        self.flux = 0.0
        self.true_cross_section: Histogram1D | None = None
        self.folded_cross_section: Histogram1D | None = None
        self.reco_cross_section: Histogram1D | None = None
        self.gen_cross_section: Histogram1D | None = None

    def add_gen_event(self, true_var: float, weight: float = 1.0) -> None:
        """Record a generated event."""
        self.gen.fill(true_var, weight)

    def add_reco_event(self, reco_var: float, true_var: float, weight: float = 1.0) -> None:
        """Record a selected event with its reconstructed and true values."""
        reco_bin = self.reco.fill(reco_var, weight)
        true_bin = self.gen.find_bin(true_var)
        self.reco_gen[reco_bin, true_bin] += weight

    def response_matrix(self) -> np.ndarray:
        """Compute and return the response matrix, indexed [reco bin, true bin]."""
        gen = self.gen.contents
        selected = self.reco_gen[1:-1, 1:-1]
        safe = np.where(gen > 0, gen, 1.0)
        self.response = np.where(gen > 0, selected / safe, 0.0)
        return self.response.copy()

    def set_flux(self, flux: float) -> None:
        self.flux = flux

    def set_targets(self, targets: float) -> None:
        self.targets = targets

    def add_flux_hist(self, hist: Histogram1D) -> float:
        """Set the integrated flux per cm^2 from a flux histogram in per GeV per m^2."""
        self.flux = hist.integral(width=True) / _M2_TO_CM2
        return self.flux

    def _normalise(self, values: np.ndarray, widths: np.ndarray) -> np.ndarray:
        with np.errstate(divide="ignore", invalid="ignore"):
            return values / self.targets / self.flux / widths / _EXPOSURE_FRACTION

    def add_differential_cross_section(self, hist: Histogram1D) -> None:
        """Fold a true differential cross section and derive the measured ones."""
        if hist.nbins != self.gen.nbins:
            raise ValueError(
                f"cross section has {hist.nbins} bins, the true distribution has {self.gen.nbins}"
            )
        self.true_cross_section = hist

        folded = self.reco.copy()
        folded.set_values(self.response @ hist.contents)
        self.folded_cross_section = folded

        measured = self.reco.copy()
        measured.set_values(self._normalise(self.reco.contents, self.reco.widths))
        self.reco_cross_section = measured

        generated = self.gen.copy()
        generated.set_values(
            self._normalise(self.gen.contents, self.gen.widths),
            self._normalise(self.gen.errors, self.gen.widths),
        )
        self.gen_cross_section = generated

    def write(self, directory: str | Path = "rootfiles") -> Path:
        """Save all distributions to ``<directory>/<label>_ResponseMatrices.npz``."""
        if (
            self.true_cross_section is None
            or self.folded_cross_section is None
            or self.reco_cross_section is None
            or self.gen_cross_section is None
        ):
            raise RuntimeError("no differential cross section has been added")

        out_dir = Path(directory)
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / f"{self.label}_ResponseMatrices.npz"

        hists = {
            "TrueDist": self.gen,
            "RecoDist": self.reco,
            "GenDiffXsec": self.gen_cross_section,
            "TrueDiffXsec": self.true_cross_section,
            "FoldedDiffXsec": self.folded_cross_section,
            "MeasuredDiffXsec": self.reco_cross_section,
        }
        arrays: dict[str, np.ndarray] = {}
        for name, hist in hists.items():
            arrays[name] = hist.contents.copy()
            arrays[f"{name}_errors"] = hist.errors
            arrays[f"{name}_edges"] = hist.edges
        arrays["RecoVsTrueDist"] = self.reco_gen[1:-1, 1:-1].copy()
        arrays["ResponseMatrix"] = self.response.copy()

        with path.open("wb") as handle:
            np.savez(handle, **arrays)
        return path