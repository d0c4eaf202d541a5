# hypsel

Building blocks for selecting neutrino-induced hyperon events in a
liquid-argon TPC, and for the statistical treatment of the selected sample.
It is a library: there is no command-line program.

## Installation

```
pip install .
pip install ".[test]"   # with the test dependencies
```

Requires Python 3.10 or later, with `numpy` and `scipy`.

## Modules

- `hypsel.fiducial`: `FiducialVolume(version, padding)` with the
  `FVVersion` variants `OLD_FV`, `WHOLE_TPC`, `WIRECELL`,
  `WHOLE_TPC_PADDED` and `WIRECELL_PADDED`. `contains((x, y, z))` tells
  whether a point is inside; every variant removes the dead region in z.
  `point_in_polygon(xs, ys, x, y)` is the crossing test used by the
  polygon-based volumes.
- `hypsel.cuts`: `Cut`, a dataclass of weighted event counts and variances
  before and after a selection stage, with `signal_efficiency()`,
  `signal_purity()`, `good_reco_efficiency()`, `good_reco_purity()`,
  `significance()`, `background_acceptance()`, `predicted_signal()`,
  `predicted_signal_error()`, `predicted_background()`,
  `predicted_background_error()` and `reset()`. Divisions by zero give
  `inf` or `nan` rather than raising.
- `hypsel.parameters`: `SelectionParameters`, `BeamMode` (`FHC`, `RHC`,
  `BNB`) and the predefined tunes. `build_tunes()` returns a dict keyed by
  tune name; `get_tune(name)` returns one fresh copy and raises `KeyError`
  for an unknown name.
- `hypsel.event`: the `Event` and `Track` dataclasses the algorithms read.
  `Event.summary()` gives the run, subrun and event numbers on one line.
- `hypsel.ctt`: `ConnectednessTest(plane, dead_channels)`, built directly
  or with `ConnectednessTest.from_directory(plane, directory)` from a
  `Plane<plane>.txt` list of dead channels. `load_info(...)` takes the
  clustering output of an event, `run(muon_index, proton_index, pion_index)`
  returns whether the proton and pion share a cluster the muon is not in,
  and `dead_wire_between(channels)` checks the seed channels for dead wires.
- `hypsel.event_list`: `EventListFilter` with `load(path)`, reading
  whitespace-separated run/subrun/event triples into `RunSubrunEvent`
  entries, and `passes(run, subrun, event)`, which matches on run and event
  number only.
- `hypsel.muon_id`: `MuonID(pid_cut, min_length, max_separation)`;
  `select_candidate(tracks)` returns the index of the longest qualifying
  track, or `None`.
- `hypsel.track_length`: `sort_tracks(tracks)` (longest first) and
  `TrackLengthCut(secondary_cut, tertiary_cut)` whose `apply(tracks)` cuts
  on the two shortest tracks.
- `hypsel.genie_weights`: `GenG4WeightHandler` with `load_event(event)`,
  `cv_weight()` and `weights(dial)`; infinite, undefined or larger than 100
  weights are replaced by 1.
- `hypsel.mvrng`: `MultiVariateRNG(seed, cov, cv)`; `parameter_set()` draws
  a vector by accept/reject sampling and `eval_gauss(x)` evaluates the
  density.
- `hypsel.vertex_fitter`: `SecondaryVertexFitter(pull)` with
  `make_vertex(p1, p2, use_closest_approach)` returning a `SecondaryVertex`,
  the objective `fit_function(...)`, and `point_of_closest_approach(p1, p2)`.
- `hypsel.sideband`: `SidebandFitter` fits scale factors on varied
  `BinnedCounts` templates to data, with fixed templates kept as they are;
  `fit()` returns a `FitResult` with the values and their covariance.
- `hypsel.forward_folder`: `Histogram1D` and `ForwardFolder`, which builds a
  response matrix from generated and selected events, folds a true
  differential cross section through it and derives the measured and
  generated cross sections. `write(directory)` saves everything to
  `<directory>/<label>_ResponseMatrices.npz`.
- `hypsel.statistics`: `smeared_poisson`, `make_smeared_poisson`,
  `likelihood_ratio` and `nllr2` on tabulated PMFs, and `LikelihoodScan`
  with `load_likelihood_map`, `max_likelihood`, `likelihood_ratio_map`,
  Feldman–Cousins `confidence_interval` and `confidence_belt`, and `ml_fit`.

## Example

```python
from hypsel.fiducial import FiducialVolume
from hypsel.parameters import get_tune

tune = get_tune("FHC Tune 325")
fv = FiducialVolume(tune.fv, tune.padding)
print(fv.contains((100.0, 0.0, 500.0)))
```

## What the package does not do

- It reads no detector or simulation files: events, tracks, histograms and
  likelihood tables are passed in as Python objects and arrays.
- It contains no trained classifiers. The BDT weight directories in the
  tunes are only recorded as paths; nothing here loads or evaluates them.
- It does not compute flux weights or integrated fluxes; `ForwardFolder`
  takes the flux as a number or a histogram you supply.
- `LikelihoodScan` works from likelihood tables you load; it does not
  produce them by Monte Carlo smearing of efficiency posteriors.

## Running the tests

```
pytest
```