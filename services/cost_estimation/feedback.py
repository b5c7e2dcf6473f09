"""
Learning Feedback
=================

Adjusts new estimates using the variance between past estimates and the
actual costs customers reported.

Adjustment:
1. Shift low and high by the mean historical variance
2. Narrow the band as history accumulates (never below half its width,
   never below 10% of the shifted low)
3. Raise confidence when past variances were consistent

Version: 0.1.0
"""

import statistics
from collections.abc import Sequence

from shared.logging import get_logger
from shared.models import CostEstimate, CostFeedback, FeedbackBand, HistoricalVariance


logger = get_logger(__name__)

MIN_NARROWING_FACTOR = 0.5
HISTORY_FOR_FULL_NARROWING = 100
MIN_SPREAD_SHARE_OF_LOW = 0.1
MAX_CONFIDENCE_BOOST = 0.2
MAX_CONFIDENCE = 0.95


def apply_learning_feedback(
    band: FeedbackBand,
    history: Sequence[HistoricalVariance],
) -> FeedbackBand:
    """
    Apply historical variance to an estimate's one-time band.

    Args:
        band: Current low/high/confidence
        history: Past (estimated, actual, variance) records

    Returns:
        Adjusted band; the input itself when there is no history
    """
    if not history:
        return band

    variances = [h.variance for h in history]
    avg_variance = statistics.fmean(variances)

    adjusted_low = band.one_time_cost_low * (1 + avg_variance)
    adjusted_high = band.one_time_cost_high * (1 + avg_variance)

    narrowing = max(MIN_NARROWING_FACTOR, 1 - len(history) / HISTORY_FOR_FULL_NARROWING)
    spread = adjusted_high - adjusted_low
    new_spread = max(spread * narrowing, adjusted_low * MIN_SPREAD_SHARE_OF_LOW)

    variance_stddev = statistics.pstdev(variances)
    boost = min(MAX_CONFIDENCE_BOOST, (1 - variance_stddev) * MAX_CONFIDENCE_BOOST)
    confidence = min(MAX_CONFIDENCE, band.confidence + boost)

    adjusted = FeedbackBand(
        one_time_cost_low=round(adjusted_low),
        one_time_cost_high=round(adjusted_low + new_spread),
        confidence=round(confidence, 2),
    )

    logger.debug(
        "learning_feedback_applied",
        history=len(history),
        avg_variance=round(avg_variance, 4),
        narrowing=narrowing,
        confidence=adjusted.confidence,
    )
    return adjusted


def feedback_band(estimate: CostEstimate) -> FeedbackBand:
    """Extract the adjustable band from an estimate."""
    return FeedbackBand(
        one_time_cost_low=estimate.one_time_cost_low,
        one_time_cost_high=estimate.one_time_cost_high,
        confidence=estimate.confidence,
    )


def relative_variance(estimated: float, actual: float) -> float:
    """(actual - estimated) / estimated, 0 when nothing was estimated."""
    if estimated == 0:
        return 0.0
    return (actual - estimated) / estimated


def build_feedback(
    estimate: CostEstimate,
    actual_one_time_cost: float,
    actual_recurring_cost_annual: float,
    submitted_by: str,
    variance_notes: str | None = None,
) -> CostFeedback:
    """
    Record actual costs against an estimate.

    One-time variance is measured against the band midpoint.
    """
    estimated_one_time = estimate.one_time_cost_mid
    feedback = CostFeedback(
        cost_estimate_id=estimate.id,
        estimated_one_time_cost=estimated_one_time,
        actual_one_time_cost=actual_one_time_cost,
        actual_recurring_cost_annual=actual_recurring_cost_annual,
        one_time_variance=relative_variance(estimated_one_time, actual_one_time_cost),
        recurring_variance=relative_variance(
            estimate.recurring_cost_annual,
            actual_recurring_cost_annual,
        ),
        variance_notes=variance_notes,
        submitted_by=submitted_by,
    )

    logger.info(
        "learning_feedback_received",
        estimate_id=estimate.id,
        one_time_variance=f"{feedback.one_time_variance * 100:.1f}%",
        recurring_variance=f"{feedback.recurring_variance * 100:.1f}%",
        accuracy=f"{feedback.accuracy:.1f}%",
    )
    return feedback
