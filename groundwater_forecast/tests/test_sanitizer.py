import copy
import random

import pytest

from groundwater_forecast.core.errors import InconsistentTimeline, MalformedPayload
from groundwater_forecast.core.sanitizer import clamp_score, sanitize_prediction
from groundwater_forecast.models.schemas import PredictionRequest, WaterCondition


def _all_scores(report):
    scores = [report.current_water_level_index.score]
    scores += [metric.score for _, metric in report.key_metrics.items()]
    scores += [report.report.short_term.confidence_score, report.report.long_term.confidence_score]
    scores += [p.score for p in report.historical_water_levels]
    scores += [p.score for p in report.predicted_water_levels]
    return scores


def test_clamp_score_bounds():
    assert clamp_score(-12) == 0.0
    assert clamp_score(140.5) == 100.0
    assert clamp_score(42) == 42.0


def test_scores_are_clamped_into_range(candidate):
    candidate["currentWaterLevelIndex"]["score"] = 130
    candidate["keyMetrics"]["avgAnnualRainfall"]["score"] = -20
    candidate["keyMetrics"]["populationDensity"]["score"] = 250
    candidate["report"]["shortTerm"]["confidenceScore"] = 101
    candidate["historicalWaterLevels"][0]["score"] = -5
    candidate["predictedWaterLevels"][0]["score"] = 300

    report = sanitize_prediction(candidate)

    assert report.current_water_level_index.score == 100
    assert report.key_metrics.avg_annual_rainfall.score == 0
    assert report.key_metrics.population_density.score == 100
    assert report.report.short_term.confidence_score == 100
    assert all(0 <= s <= 100 for s in _all_scores(report))


@pytest.mark.parametrize("score, band", [(100, WaterCondition.SAFE), (70, WaterCondition.SAFE),
                                         (69.9, WaterCondition.MODERATE), (40, WaterCondition.MODERATE),
                                         (39, WaterCondition.DANGER), (-10, WaterCondition.DANGER)])
def test_condition_band_is_derived_from_clamped_score(candidate, score, band):
    candidate["currentWaterLevelIndex"] = {"score": score, "condition": "Safe"}
    report = sanitize_prediction(candidate)
    assert report.current_water_level_index.condition == band.value
    assert report.current_water_level_index.band == band


def test_series_sorted_when_reversed(candidate):
    for key in ("historicalWaterLevels", "predictedWaterLevels", "rainfallData"):
        candidate[key].reverse()

    report = sanitize_prediction(candidate)

    for series in (report.historical_water_levels, report.predicted_water_levels, report.rainfall_data):
        years = [p.year for p in series]
        assert years == sorted(years)


def test_series_sorted_when_shuffled(candidate):
    rng = random.Random(7)
    for key in ("historicalWaterLevels", "predictedWaterLevels", "rainfallData"):
        rng.shuffle(candidate[key])

    report = sanitize_prediction(candidate)

    assert [p.year for p in report.historical_water_levels] == [2018, 2019, 2020, 2021, 2022]
    assert [p.year for p in report.predicted_water_levels] == [2023, 2024, 2025]
    assert [p.year for p in report.rainfall_data] == [2018, 2019, 2020, 2021, 2022]


def test_sort_is_stable_for_equal_years(candidate):
    candidate["historicalWaterLevels"] = [
        {"year": 2022, "score": 1},
        {"year": 2021, "score": 2},
        {"year": 2022, "score": 3},
    ]
    report = sanitize_prediction(candidate)
    assert [(p.year, p.score) for p in report.historical_water_levels] == [(2021, 2), (2022, 1), (2022, 3)]


def test_gap_between_history_and_prediction_fails(candidate):
    candidate["predictedWaterLevels"] = [{"year": 2024, "score": 40}, {"year": 2025, "score": 38}]
    with pytest.raises(InconsistentTimeline):
        sanitize_prediction(candidate)


def test_overlap_between_history_and_prediction_fails(candidate):
    candidate["predictedWaterLevels"] = [{"year": 2022, "score": 40}]
    with pytest.raises(InconsistentTimeline) as exc_info:
        sanitize_prediction(candidate)
    assert not exc_info.value.retriable


def test_prediction_continuing_history_passes(candidate):
    candidate["predictedWaterLevels"] = [{"year": 2023, "score": 40}]
    report = sanitize_prediction(candidate)
    assert report.predicted_water_levels[0].year == 2023


def test_continuity_checked_after_sorting(candidate):
    candidate["predictedWaterLevels"] = [{"year": 2025, "score": 40}, {"year": 2023, "score": 41}]
    report = sanitize_prediction(candidate)
    assert report.predicted_water_levels[0].year == 2023


def test_continuity_not_checked_with_empty_prediction(candidate):
    candidate["predictedWaterLevels"] = []
    report = sanitize_prediction(candidate)
    assert report.predicted_water_levels == ()


def test_rainfall_outside_history_is_dropped(candidate):
    candidate["rainfallData"].append({"year": 2025, "rainfall": 900})
    report = sanitize_prediction(candidate)
    years = [p.year for p in report.rainfall_data]
    assert 2025 not in years
    assert years == [2018, 2019, 2020, 2021, 2022]


def test_rainfall_dropped_when_history_empty(candidate):
    candidate["historicalWaterLevels"] = []
    report = sanitize_prediction(candidate)
    assert report.rainfall_data == ()


def test_location_label_from_request_coordinates(candidate):
    candidate["locationName"] = ""
    request = PredictionRequest(coordinates={"lat": 1.234, "lon": 4.561})

    report = sanitize_prediction(candidate, request)

    assert "1.23" in report.location_name
    assert "4.56" in report.location_name
    assert report.location_name == "Forecast for 1.23°, 4.56°"


def test_location_label_from_request_text(candidate):
    candidate["locationName"] = "   "
    request = PredictionRequest(location="Nashik")
    assert sanitize_prediction(candidate, request).location_name == "Nashik"


def test_location_label_from_response_coordinates_without_request(candidate):
    candidate["locationName"] = None
    assert sanitize_prediction(candidate).location_name == "Forecast for 18.52°, 73.86°"


def test_model_location_name_is_kept(candidate):
    request = PredictionRequest(coordinates={"lat": 1.23, "lon": 4.56})
    assert sanitize_prediction(candidate, request).location_name == "Pune, India"


def test_input_candidate_is_not_mutated(candidate):
    candidate["currentWaterLevelIndex"]["score"] = 150
    candidate["historicalWaterLevels"].reverse()
    candidate["rainfallData"].append({"year": 2030, "rainfall": 1})
    snapshot = copy.deepcopy(candidate)

    sanitize_prediction(candidate)

    assert candidate == snapshot


def test_wrong_field_types_are_malformed(candidate):
    candidate["historicalWaterLevels"] = [{"year": "last year", "score": 50}]
    with pytest.raises(MalformedPayload):
        sanitize_prediction(candidate)


def test_report_round_trips_to_wire_shape(candidate):
    payload = sanitize_prediction(candidate).to_payload()
    assert payload["locationName"] == "Pune, India"
    assert payload["report"]["shortTerm"]["scenarios"]["mostLikely"] == "Gradual decline."
    assert isinstance(payload["historicalWaterLevels"], list)


def test_report_is_immutable(candidate):
    report = sanitize_prediction(candidate)
    with pytest.raises(Exception):
        report.location_name = "Elsewhere"
