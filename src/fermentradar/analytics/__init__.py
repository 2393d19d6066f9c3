"""Stress and status computation for fed ferments.

Modules:
    stress     -- Segment-weighted stress accumulation and stress curves
    classifier -- Ratio thresholds and status labels
    status     -- compute_status() and StatusResult
"""

from fermentradar.analytics.stress import accumulate_stress, stress_curve
from fermentradar.analytics.classifier import (
    StatusLabel,
    classify_ratio,
    stress_ratio,
    DUE_SOON_RATIO,
    NEEDS_FEED_RATIO,
)
from fermentradar.analytics.status import StatusResult, compute_status, UNKNOWN_STATUS

__all__ = [
    # stress
    "accumulate_stress",
    "stress_curve",
    # classifier
    "StatusLabel",
    "classify_ratio",
    "stress_ratio",
    "DUE_SOON_RATIO",
    "NEEDS_FEED_RATIO",
    # status
    "StatusResult",
    "compute_status",
    "UNKNOWN_STATUS",
]
