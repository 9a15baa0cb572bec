"""
Summary statistics and geometric covariance structures (GCS).

All functions here read finished arrays; nothing in the geometry is changed.
Standard deviations are sample standard deviations (ddof=1).
"""

import math
from dataclasses import dataclass

import numpy as np
import structlog

from .centerline import AlignmentSummary, Centerline
from .functions import CurveName, CurveSet
from .parameters import ParameterSet

logger = structlog.get_logger()

ROUNDING_TOLERANCE = 1e-12


def standardize(values: np.ndarray) -> np.ndarray:
    """Z-scores of a series; a constant series gives all zeros."""
    values = np.asarray(values, dtype=float)
    if len(values) < 2:
        return np.zeros_like(values)
    sd = np.std(values, ddof=1)
    # Rounding noise on a constant series is not variation
    if sd <= ROUNDING_TOLERANCE * max(1.0, float(np.max(np.abs(values)))):
        return np.zeros_like(values)
    return (values - np.mean(values)) / sd


@dataclass(frozen=True)
class SeriesSummary:
    """Mean, sample standard deviation and coefficient of variation."""

    mean: float
    std: float
    cv: float

    @classmethod
    def of(cls, values: np.ndarray) -> "SeriesSummary":
        mean = float(np.mean(values))
        std = float(np.std(values, ddof=1)) if len(values) > 1 else 0.0
        return cls(mean=mean, std=std, cv=std / mean if mean else 0.0)


@dataclass
class ValleyStatistics:
    """Scalars and standardized series reported for a valley."""

    width: SeriesSummary
    depth: SeriesSummary

    # Standardized series
    width_z: np.ndarray
    depth_z: np.ndarray
    thalweg_z: np.ndarray
    alignment_z: np.ndarray

    # Covariance series plotted as C(Wbf*Zt) and C(Zt*Cs)
    cov_width_thalweg: np.ndarray
    cov_thalweg_alignment: np.ndarray

    # Sign split of the width x depth covariance
    positive_gcs: int
    negative_gcs: int
    positive_gcs_percent: float
    negative_gcs_percent: float

    # Channel constants
    wr: float
    wp: float
    hres: float
    hr: float

    sinuosity: float
    channel_slope: float
    channel_intercept: float

    manning_n: float
    width_to_depth_ratio: float
    confinement_ratio: float


def regression(x: np.ndarray, y: np.ndarray):
    """Ordinary least-squares slope and intercept of y against x."""
    n = len(x)
    denominator = n * np.sum(x ** 2) - np.sum(x) ** 2
    if denominator == 0:
        return 0.0, float(np.mean(y))
    slope = (n * np.sum(x * y) - np.sum(x) * np.sum(y)) / denominator
    intercept = (np.sum(y) * np.sum(x ** 2) - np.sum(x) * np.sum(x * y)) / denominator
    return float(slope), float(intercept)


def channel_constants(parameters: ParameterSet, curves: CurveSet):
    """
    Width and depth constants wr, wp, hres and hr.

    They are built from the leading width and thalweg terms; an empty slot
    counts as zero and a zero divisor drops the affected term.
    """
    width = parameters.bankfull_width
    depth = parameters.depth
    width_amplitude = curves.leading_coefficient(CurveName.WIDTH, 0)
    thalweg_amplitude = curves.leading_coefficient(CurveName.THALWEG, 0)
    thalweg_frequency = curves.leading_coefficient(CurveName.THALWEG, 1)

    wr = width * width_amplitude + width
    wp = -width * width_amplitude + width
    hres = 2 * depth * thalweg_amplitude
    if thalweg_frequency != 0:
        hres -= math.pi * width * parameters.valley_slope / thalweg_frequency

    ratio = wr / wp - 1 if wp != 0 else 0.0
    hr = hres / ratio if ratio != 0 else 0.0
    return wr, wp, hres, hr


def compute_statistics(
    parameters: ParameterSet,
    curves: CurveSet,
    centerline: Centerline,
    summary: AlignmentSummary,
) -> ValleyStatistics:
    """
    Compute the summary report of a finished valley.

    Args:
        parameters: Resolved scalar parameters
        curves: Variability functions per curve slot
        centerline: Completed first-pass arrays
        summary: Alignment summary of the same pass

    Returns:
        Valley statistics
    """
    logger.info("Computing statistics")

    width_z = standardize(centerline.width)
    depth_z = standardize(centerline.depth)
    thalweg_z = standardize(centerline.thalweg_detrended)
    alignment_z = standardize(centerline.alignment)

    gcs = width_z * depth_z
    positive = int(np.sum(gcs > 0))
    negative = int(np.sum(gcs < 0))
    total = positive + negative
    positive_percent = 100 * positive / total if total else 0.0
    negative_percent = 100 * negative / total if total else 0.0

    slope, intercept = regression(centerline.arc_length, centerline.alignment)
    channel_slope = slope + parameters.valley_slope / summary.sinuosity
    wr, wp, hres, hr = channel_constants(parameters, curves)

    statistics = ValleyStatistics(
        width=SeriesSummary.of(centerline.width),
        depth=SeriesSummary.of(centerline.depth),
        width_z=width_z,
        depth_z=depth_z,
        thalweg_z=thalweg_z,
        alignment_z=alignment_z,
        cov_width_thalweg=width_z * thalweg_z,
        cov_thalweg_alignment=thalweg_z * alignment_z,
        positive_gcs=positive,
        negative_gcs=negative,
        positive_gcs_percent=positive_percent,
        negative_gcs_percent=negative_percent,
        wr=wr,
        wp=wp,
        hres=hres,
        hr=hr,
        sinuosity=summary.sinuosity,
        channel_slope=channel_slope,
        channel_intercept=intercept,
        manning_n=parameters.manning_n,
        width_to_depth_ratio=parameters.width_to_depth_ratio,
        confinement_ratio=parameters.confinement_ratio,
    )

    logger.info(
        "Statistics computed",
        sinuosity=statistics.sinuosity,
        channel_slope=statistics.channel_slope,
        gcs_positive=positive_percent,
        gcs_negative=negative_percent,
    )
    return statistics
