"""
Groundwater Forecast Sanitizer

Turns a structurally valid response into a logically consistent report:
scores clamped, series ordered, timeline continuity checked, rainfall aligned
with the historical years and a location label guaranteed.

The caller's candidate is never modified; every step builds new frozen
models.
"""

import logging
from typing import Any, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..models.schemas import (
    Coordinates,
    KeyMetrics,
    Outlook,
    OutlookReport,
    PredictionReport,
    PredictionRequest,
    RainfallPoint,
    YearScore,
    condition_for_score,
)
from .errors import InconsistentTimeline, MalformedPayload

logger = logging.getLogger("groundwater.sanitizer")


def clamp_score(score: float) -> float:
    """Clamp a score into [0, 100]."""
    return max(0.0, min(100.0, float(score)))


def coordinate_label(coords: Coordinates) -> str:
    return f"Forecast for {coords.lat:.2f}°, {coords.lon:.2f}°"


def _clamp_key_metrics(metrics: KeyMetrics) -> KeyMetrics:
    return metrics.model_copy(update={
        name: metric.model_copy(update={"score": clamp_score(metric.score)})
        for name, metric in metrics.items()
    })


def _clamp_outlook(outlook: Outlook) -> Outlook:
    return outlook.model_copy(update={"confidence_score": clamp_score(outlook.confidence_score)})


def _clamp_series(series: Sequence[YearScore]) -> Tuple[YearScore, ...]:
    return tuple(point.model_copy(update={"score": clamp_score(point.score)}) for point in series)


def _sort_by_year(series: Sequence[Any]) -> Tuple[Any, ...]:
    # sorted() is stable, so equal years keep their response order
    return tuple(sorted(series, key=lambda point: point.year))


def check_timeline_continuity(
    historical: Sequence[YearScore],
    predicted: Sequence[YearScore],
) -> None:
    """
    Require the prediction to start the year after the history ends.

    Both series must already be sorted. Empty series are not checked.
    """
    if not historical or not predicted:
        return
    last_historical_year = historical[-1].year
    first_predicted_year = predicted[0].year
    if first_predicted_year != last_historical_year + 1:
        raise InconsistentTimeline(
            "Inconsistent forecast timeline: prediction starts in "
            f"{first_predicted_year}, history ends in {last_historical_year}"
        )


def align_rainfall(
    rainfall: Sequence[RainfallPoint],
    historical: Sequence[YearScore],
) -> Tuple[RainfallPoint, ...]:
    """Keep only rainfall entries whose year appears in the historical series."""
    historical_years = {point.year for point in historical}
    return tuple(point for point in rainfall if point.year in historical_years)


def _fallback_location_name(report: PredictionReport, request: Optional[PredictionRequest]) -> str:
    if request is not None:
        if request.coordinates is not None:
            return coordinate_label(request.coordinates)
        if request.location:
            return request.location
    return coordinate_label(report.coordinates)


def sanitize_prediction(
    candidate: Mapping[str, Any],
    request: Optional[PredictionRequest] = None,
) -> PredictionReport:
    """
    Produce a logically consistent report from a validated candidate.

    Args:
        candidate: Decoded response that passed validate_candidate
        request: The originating request, used for the location fallback

    Returns:
        Sanitized PredictionReport

    Raises:
        MalformedPayload: If fields have the wrong types
        InconsistentTimeline: If the predicted series does not continue the history
    """
    data = dict(candidate)
    if data.get("locationName") is None:
        data["locationName"] = ""

    try:
        draft = PredictionReport.model_validate(data)
    except ValidationError as e:
        logger.error(f"Response failed type validation with {e.error_count()} error(s)")
        logger.debug(str(e))
        raise MalformedPayload(f"Response fields have unexpected types: {e.error_count()} error(s)") from e

    # 1. Clamp scores
    score = clamp_score(draft.current_water_level_index.score)
    key_metrics = _clamp_key_metrics(draft.key_metrics)
    outlook_report: OutlookReport = draft.report.model_copy(update={
        "short_term": _clamp_outlook(draft.report.short_term),
        "long_term": _clamp_outlook(draft.report.long_term),
    })

    # 2. Order series
    historical = _sort_by_year(_clamp_series(draft.historical_water_levels))
    predicted = _sort_by_year(_clamp_series(draft.predicted_water_levels))
    rainfall = _sort_by_year(draft.rainfall_data)

    # 3. Continuity
    check_timeline_continuity(historical, predicted)

    # 4. Rainfall alignment
    aligned_rainfall = align_rainfall(rainfall, historical)
    dropped = len(rainfall) - len(aligned_rainfall)
    if dropped:
        logger.info(f"Dropped {dropped} rainfall entries outside the historical years")

    # 5. Location label
    location_name = draft.location_name.strip()
    if not location_name:
        location_name = _fallback_location_name(draft, request)
        logger.info(f"Response had no location name; using '{location_name}'")

    return draft.model_copy(update={
        "location_name": location_name,
        "key_metrics": key_metrics,
        "current_water_level_index": draft.current_water_level_index.model_copy(update={
            "score": score,
            "condition": condition_for_score(score).value,
        }),
        "historical_water_levels": historical,
        "predicted_water_levels": predicted,
        "rainfall_data": aligned_rainfall,
        "report": outlook_report,
    })
