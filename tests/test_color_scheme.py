import math

import pytest

from ccvi_map.data.normalization import normalize_feature
from ccvi_map.models import RegionFeature
from ccvi_map.visualization.color_scheme import (
    GREEN_TO_RED,
    NO_DATA_COLOR,
    get_color_for_value,
    get_color_scale,
    get_color_scheme_info,
    get_indicator_value,
)
from conftest import square


def region(**scores):
    scores.setdefault('vulnerability_score', 0.5)
    return RegionFeature(id='r', name='Region', geometry=square(), **scores)


@pytest.mark.parametrize("value, bucket", [
    (0.0, 0), (0.19999, 0), (0.2, 1), (0.4, 2), (0.6, 3), (0.8, 4), (0.99, 4), (1.0, 4),
])
def test_bucket_breaks_are_inclusive_lower(value, bucket):
    assert get_color_scale('climate_vulnerability').bucket(value) == bucket


@pytest.mark.parametrize("indicator_id", ['climate_vulnerability', 'heat_stress', 'drought_risk', 'flood_risk'])
def test_vulnerability_and_hazards_use_green_to_red(indicator_id):
    assert get_color_for_value(0.1, indicator_id) == GREEN_TO_RED[0]
    assert get_color_for_value(0.85, indicator_id) == GREEN_TO_RED[-1]


def test_adaptive_capacity_ramp_is_inverted():
    assert get_color_for_value(0.9, 'adaptive_capacity') == GREEN_TO_RED[0]
    assert get_color_for_value(0.1, 'adaptive_capacity') == GREEN_TO_RED[-1]


def test_exposure_and_sensitivity_have_own_palettes():
    exposure = get_color_scale('exposure').colors
    sensitivity = get_color_scale('sensitivity').colors
    assert len(exposure) == len(sensitivity) == 5
    assert set(exposure).isdisjoint(GREEN_TO_RED)
    assert set(exposure).isdisjoint(sensitivity)


def test_unknown_indicator_uses_vulnerability_scale():
    assert get_color_scale('wildfire_risk') is get_color_scale('climate_vulnerability')


def test_nan_value_is_gray():
    assert get_color_for_value(math.nan, 'exposure') == NO_DATA_COLOR


def test_adaptive_capacity_derived_from_vulnerability(rng):
    feature = normalize_feature(
        {'properties': {'id': 'r1', 'vulnerability_score': 0.3}, 'geometry': square()}, rng=rng
    )
    assert feature.adaptive_capacity is None
    assert get_indicator_value(feature, 'adaptive_capacity') == pytest.approx(0.7)


def test_indicator_value_prefers_component_fields():
    feature = region(vulnerability_score=0.5, exposure=0.9, sensitivity=0.2, adaptive_capacity=0.6)
    assert get_indicator_value(feature, 'exposure') == 0.9
    assert get_indicator_value(feature, 'sensitivity') == 0.2
    assert get_indicator_value(feature, 'adaptive_capacity') == 0.6
    assert get_indicator_value(feature, 'climate_vulnerability') == 0.5
    assert get_indicator_value(feature, 'heat_stress') == 0.5


def test_missing_components_use_vulnerability():
    feature = region(vulnerability_score=0.35)
    assert get_indicator_value(feature, 'exposure') == 0.35
    assert get_indicator_value(feature, 'sensitivity') == 0.35


def test_legend_info_lists_every_bucket():
    info = get_color_scheme_info('adaptive_capacity')
    assert info['title'] == 'Adaptive Capacity'
    assert [entry['min'] for entry in info['ranges']] == [0.0, 0.2, 0.4, 0.6, 0.8]
    assert info['ranges'][-1]['max'] == 1.0
    assert info['ranges'][0]['color'] == GREEN_TO_RED[-1]
