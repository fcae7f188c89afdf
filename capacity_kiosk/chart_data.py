"""
Canned measurement data for the kiosk demo.

Provides:
  - Sample / Series construction (natural order or sorted on x)
  - Voltage-vs-time traces for cells 1-5 (0.5 s steps, 100 points)
  - Nyquist and Bode tables, and per-cell SoH / RUL / OCV results
  - CSV replay of a recorded sweep
  - Fixed axis limits computed from a complete Series
"""

import csv
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import numpy as np

from capacity_kiosk.config import (
    CELL_NUMBERS, CSV_X_COLUMN, CSV_Y_COLUMN,
    TIME_POINT_COUNT, TIME_STEP_S, VARIATION_SEED,
)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Sample:
    """One (x, y) point, e.g. (time, voltage) or (voltage, current)."""
    x: float
    y: float


Series = Tuple[Sample, ...]


@dataclass(frozen=True)
class CellResult:
    """Derived diagnostics shown on the results screen."""
    soh: float          # state of health, %
    rul: int            # remaining useful life, cycles
    ocv: float          # open-circuit voltage, V
    nyquist: Series
    bode_magnitude: Series
    bode_phase: Series


def make_series(xs: Sequence[float], ys: Sequence[float], sort_by_x: bool = False) -> Series:
    """Pair xs with ys into an immutable Series.

    With ``sort_by_x`` the pairs are ordered on x (stable, so equal x
    keep acquisition order); otherwise acquisition order is kept.
    """
    if len(xs) != len(ys):
        raise ValueError(f"x/y length mismatch: {len(xs)} != {len(ys)}")
    samples = [Sample(float(x), float(y)) for x, y in zip(xs, ys)]
    if sort_by_x:
        samples.sort(key=lambda s: s.x)
    return tuple(samples)


def series_from_points(points: Sequence[Tuple[float, float]]) -> Series:
    return tuple(Sample(float(x), float(y)) for x, y in points)


# ---------------------------------------------------------------------------
# Voltage vs time (channels 37-40)
# ---------------------------------------------------------------------------

TIME_POINTS = np.arange(TIME_POINT_COUNT) * TIME_STEP_S   # 0 .. 49.5 s

CELL1_VOLTAGE = np.array([
    3.5741, 3.5752, 3.5751, 3.5762, 3.5759, 3.576, 3.5767, 3.5767, 3.5774, 3.5774,
    3.578, 3.578, 3.5787, 3.5787, 3.5792, 3.5792, 3.5798, 3.5797, 3.5803, 3.5802,
    3.5808, 3.5808, 3.5813, 3.5813, 3.5818, 3.5817, 3.5822, 3.5822, 3.5827,
    3.5827, 3.5831, 3.5831, 3.5836, 3.5835, 3.584, 3.5839, 3.5844, 3.5843, 3.5848,
    3.5847, 3.5851, 3.5851, 3.5856, 3.5855, 3.586, 3.5858, 3.5863, 3.5862, 3.5867,
    3.5866, 3.587, 3.587, 3.5874, 3.5873, 3.5877, 3.5876, 3.5881, 3.588, 3.5884,
    3.5883, 3.5887, 3.5886, 3.5891, 3.589, 3.5894, 3.5893, 3.5896, 3.5896, 3.59,
    3.5899, 3.5903, 3.5901, 3.5906, 3.5905, 3.5909, 3.5908, 3.5912, 3.591, 3.5914,
    3.5913, 3.5918, 3.5916, 3.592, 3.5919, 3.5923, 3.5922, 3.5926, 3.5925, 3.5929,
    3.5927, 3.5932, 3.593, 3.5934, 3.5933, 3.5936, 3.5935, 3.5939, 3.5938, 3.5942,
    3.594,
])

CELL2_VOLTAGE = CELL1_VOLTAGE.copy()
CELL2_VOLTAGE[1] = 3.5751

CELL3_VOLTAGE = np.concatenate([np.array([
    3.6663, 3.6673, 3.668, 3.6687, 3.6694, 3.6699, 3.6704, 3.671, 3.6715, 3.6718,
    3.6723, 3.6727, 3.6731, 3.6734, 3.6739, 3.6742, 3.6746, 3.6749, 3.6753,
    3.6756, 3.6759, 3.6762, 3.6766, 3.6769, 3.6772, 3.6775, 3.6777, 3.678, 3.6783,
    3.6786, 3.6788, 3.6791, 3.6793, 3.6796, 3.6798, 3.6801, 3.6803, 3.6805,
    3.6807, 3.6809, 3.6812, 3.6814, 3.6817, 3.6819, 3.6821, 3.6823, 3.6825,
    3.6827, 3.6829, 3.6831, 3.6832, 3.6834, 3.6836, 3.6839, 3.684, 3.6842, 3.6844,
    3.6845, 3.6847, 3.6849,
]), np.full(40, 3.6849)])  # rested plateau

CELL4_VOLTAGE = np.concatenate([np.array([
    3.5751, 3.5762, 3.5771, 3.5778, 3.5784, 3.5791, 3.5797, 3.5803, 3.5808,
    3.5813, 3.5818, 3.5823, 3.5828, 3.5832, 3.5837, 3.5842, 3.5845, 3.585, 3.5854,
    3.5858, 3.5862, 3.5866, 3.5869, 3.5873, 3.5877, 3.588, 3.5883, 3.5887, 3.589,
    3.5894, 3.5897, 3.59, 3.5904, 3.5907, 3.591, 3.5913, 3.5916, 3.5919, 3.5922,
    3.5925, 3.5927, 3.593, 3.5933, 3.5936, 3.5939, 3.5941, 3.5944, 3.5946, 3.5949,
    3.5952, 3.5954, 3.5957, 3.5959, 3.5962, 3.5964, 3.5967, 3.5969, 3.5971,
    3.5974, 3.5976,
]), np.full(40, 3.5976)])

CELL_VOLTAGES = {
    1: CELL1_VOLTAGE,
    2: CELL2_VOLTAGE,
    3: CELL3_VOLTAGE,
    4: CELL4_VOLTAGE,
    5: CELL4_VOLTAGE,
}


def _voltage_trace(voltages: np.ndarray) -> np.ndarray:
    """Fit a voltage table onto TIME_POINTS, padding with the last value."""
    if len(voltages) >= len(TIME_POINTS):
        return voltages[:len(TIME_POINTS)]
    pad = np.full(len(TIME_POINTS) - len(voltages), voltages[-1])
    return np.concatenate([voltages, pad])


def voltage_time_series(cell: int = 1) -> Series:
    """Voltage vs time for one cell, in acquisition order."""
    if cell not in CELL_VOLTAGES:
        raise ValueError(f"Unknown cell {cell}; expected one of {CELL_NUMBERS}")
    return make_series(TIME_POINTS, _voltage_trace(CELL_VOLTAGES[cell]))


# ---------------------------------------------------------------------------
# Impedance spectroscopy (Z_real vs -Z_img, Bode)
# ---------------------------------------------------------------------------

NYQUIST_POINTS = [
    (0.016301, -0.002109), (0.016312, -0.000763), (0.016478, 0.0000716),
    (0.016833, 0.00061), (0.017301, 0.00099), (0.017776, 0.00137),
    (0.018583, 0.002), (0.019889, 0.00256), (0.021565, 0.00244),
    (0.022777, 0.00179), (0.023276, 0.00137), (0.023624, 0.00127),
    (0.024236, 0.00159),
]

BODE_FREQUENCIES_HZ = [
    1004.463989, 468.75, 216.3462, 99.73400116, 45.07212067, 21.80233002,
    9.910149574, 4.6875, 2.170139074, 1.001603007, 0.465029806,
    0.215814903, 0.100074701,
]

BODE_MAGNITUDE_OHM = [
    0.016437, 0.01633, 0.016478, 0.016844, 0.017329, 0.017829, 0.01869,
    0.020053, 0.021702, 0.022847, 0.023317, 0.023658, 0.024288,
]

BODE_PHASE_DEG = [
    7.372922, 2.679094, -0.24902, -2.09231, -3.29053, -4.40975, -6.14428,
    -7.33484, -6.44555, -4.49754, -3.36579, -3.06923, -3.74949,
]

NYQUIST_SERIES = series_from_points(NYQUIST_POINTS)
BODE_MAGNITUDE_SERIES = make_series(BODE_FREQUENCIES_HZ, BODE_MAGNITUDE_OHM)
BODE_PHASE_SERIES = make_series(BODE_FREQUENCIES_HZ, BODE_PHASE_DEG)


def vary_series(series: Series, factor: float, rng: np.random.Generator) -> Series:
    """Jitter x by ±5%·factor and y by ±7.5%·factor for a look-alike cell."""
    xs = np.array([s.x for s in series])
    ys = np.array([s.y for s in series])
    xs = xs * (1 + (rng.random(len(xs)) - 0.5) * 0.1 * factor)
    ys = ys * (1 + (rng.random(len(ys)) - 0.5) * 0.15 * factor)
    return make_series(xs, ys)


def build_cells_data(seed: int = VARIATION_SEED) -> Dict[int, CellResult]:
    rng = np.random.default_rng(seed)

    def cell(soh, rul, ocv, factor=None):
        magnitude, phase = BODE_MAGNITUDE_SERIES, BODE_PHASE_SERIES
        if factor is not None:
            magnitude = vary_series(magnitude, factor, rng)
            phase = vary_series(phase, factor, rng)
        return CellResult(
            soh=soh, rul=rul, ocv=ocv,
            nyquist=NYQUIST_SERIES,
            bode_magnitude=magnitude,
            bode_phase=phase,
        )

    return {
        1: cell(98.23, 912, 3.5254),
        2: cell(93.27, 664, 3.5245, 1.2),
        3: cell(89.34, 467, 3.6216, 0.8),
        4: cell(96.89, 845, 3.5263, 1.5),
        5: cell(96.89, 845, 3.5263, 1.5),
    }


CELLS_DATA = build_cells_data()


def cell_result(cell: int) -> CellResult:
    if cell not in CELLS_DATA:
        raise ValueError(f"Unknown cell {cell}; expected one of {CELL_NUMBERS}")
    return CELLS_DATA[cell]


# ---------------------------------------------------------------------------
# CSV replay
# ---------------------------------------------------------------------------

def _safe_float(row: dict, key: str, default: float = 0.0) -> float:
    raw = row.get(key, "")
    if raw in ("", None):
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def load_csv_series(
    csv_path: Path,
    x_column: str = CSV_X_COLUMN,
    y_column: str = CSV_Y_COLUMN,
    sort_by_x: bool = True,
) -> Series:
    """Load a recorded sweep (e.g. voltage_v,current_a) as a Series."""
    xs: List[float] = []
    ys: List[float] = []
    with csv_path.open("r", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        missing = [c for c in (x_column, y_column) if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"{csv_path.name}: missing column(s) {', '.join(missing)}")
        for row in reader:
            xs.append(_safe_float(row, x_column))
            ys.append(_safe_float(row, y_column))
    return make_series(xs, ys, sort_by_x=sort_by_x)


# ---------------------------------------------------------------------------
# Axis limits
# ---------------------------------------------------------------------------

def axis_limits(
    series: Series,
    padding: Tuple[float, float] = (0.1, 0.1),
) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Fixed (xlim, ylim) from the complete Series plus fractional padding.

    A flat axis gets a unit-wide range so the plot never collapses.
    """
    if not series:
        return (0.0, 1.0), (0.0, 1.0)
    xs = np.array([s.x for s in series])
    ys = np.array([s.y for s in series])
    limits = []
    for values, frac in ((xs, padding[0]), (ys, padding[1])):
        lo, hi = float(values.min()), float(values.max())
        pad = (hi - lo) * frac
        if pad == 0:
            pad = 0.5
        limits.append((lo - pad, hi + pad))
    return limits[0], limits[1]
