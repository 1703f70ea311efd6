import pytest

from ccvi_map.data.normalization import (
    MalformedResponseError,
    is_supported_geometry,
    normalize_collection,
    normalize_feature,
    normalize_score,
)
from conftest import square


def raw_feature(geometry=None, **properties):
    return {'type': 'Feature', 'properties': properties, 'geometry': geometry or square()}


@pytest.mark.parametrize("raw, expected", [(75, 0.75), (1.5, 0.015), (100, 1.0), (42.5, 0.425)])
def test_scores_above_one_are_percentages(raw, expected):
    assert normalize_score(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [0.0, 0.3, 0.999, 1.0])
def test_scores_in_unit_range_are_unchanged(raw):
    assert normalize_score(raw) == raw


@pytest.mark.parametrize("raw", [0.0, 0.45, 1.0, 7, 55, 100])
def test_normalization_is_idempotent(raw):
    once = normalize_score(raw)
    assert normalize_score(once) == once


def test_out_of_range_scores_are_clamped():
    assert normalize_score(250) == 1.0
    assert normalize_score(-0.2) == 0.0


def test_score_field_priority_is_respected(rng):
    feature = normalize_feature(
        raw_feature(VULNERABILITY_SCORE=90, vulnerability_score=0.25), rng=rng
    )
    assert feature.vulnerability_score == 0.25
    assert feature.score_is_placeholder is False


def test_unparseable_score_falls_through_to_next_candidate(rng):
    feature = normalize_feature(raw_feature(vulnerability_score='n/a', score='42'), rng=rng)
    assert feature.vulnerability_score == pytest.approx(0.42)


def test_component_field_used_as_score_when_nothing_else_present(rng):
    feature = normalize_feature(raw_feature(EXPOSURE=60), rng=rng)
    assert feature.vulnerability_score == pytest.approx(0.6)
    assert feature.exposure == pytest.approx(0.6)


def test_missing_score_gets_flagged_random_placeholder(rng):
    feature = normalize_feature(raw_feature(name='Nowhere'), rng=rng)
    assert 0.0 <= feature.vulnerability_score < 1.0
    assert feature.score_is_placeholder is True


def test_identity_and_name_lookup(rng):
    feature = normalize_feature(raw_feature(ID=17, DISTRICT='Lahore', score=0.5), rng=rng)
    assert feature.id == '17'
    assert feature.name == 'Lahore'


def test_missing_identity_and_name_get_placeholders(rng):
    first = normalize_feature(raw_feature(score=0.5), rng=rng)
    second = normalize_feature(raw_feature(score=0.5), rng=rng)
    assert first.id.startswith('feature_')
    assert first.id != second.id
    assert first.name == 'Unknown Area'


def test_population_and_area_from_case_variants(rng):
    feature = normalize_feature(raw_feature(score=0.5, POPULATION='1200', AREA=340.5), rng=rng)
    assert feature.population == 1200
    assert feature.area == 340.5


def test_negative_population_is_ignored(rng):
    feature = normalize_feature(raw_feature(score=0.5, population=-5), rng=rng)
    assert feature.population is None


def test_unrecognized_properties_are_kept(rng):
    feature = normalize_feature(
        raw_feature(id='a', name='A', SCORE=40, PROVINCE='Sindh', rank=3), rng=rng
    )
    assert feature.properties == {'PROVINCE': 'Sindh', 'rank': 3}


@pytest.mark.parametrize("geometry", [
    {'type': 'Point', 'coordinates': [0, 0]},
    {'type': 'LineString', 'coordinates': [[0, 0], [1, 1]]},
    {'type': 'Polygon', 'coordinates': 'not coordinates'},
    {'type': 'Polygon', 'coordinates': []},
    None,
])
def test_unsupported_geometry_is_rejected(geometry):
    assert not is_supported_geometry(geometry)


def test_multipolygon_is_accepted():
    geometry = {'type': 'MultiPolygon', 'coordinates': [square()['coordinates'], square(5, 5)['coordinates']]}
    assert is_supported_geometry(geometry)


def test_collection_drops_features_with_bad_geometry(rng):
    payload = {
        'type': 'FeatureCollection',
        'features': [
            raw_feature(id='keep', score=0.5),
            raw_feature(geometry={'type': 'Point', 'coordinates': [1, 1]}, id='drop', score=0.5),
            'not a feature',
        ],
    }
    collection = normalize_collection(payload, 'district', 'climate_vulnerability', rng=rng)
    assert [feature.id for feature in collection] == ['keep']
    assert collection.is_fallback is False


def test_duplicate_ids_keep_the_last_feature(rng):
    payload = {
        'type': 'FeatureCollection',
        'features': [
            raw_feature(id='a', name='First', score=0.1),
            raw_feature(id='b', name='Other', score=0.2),
            raw_feature(id='a', name='Second', score=0.3),
        ],
    }
    collection = normalize_collection(payload, 'district', 'exposure', rng=rng)
    assert len(collection) == 2
    assert collection.get('a').name == 'Second'


@pytest.mark.parametrize("payload", [
    [],
    {'type': 'Feature'},
    {'type': 'FeatureCollection'},
    {'type': 'FeatureCollection', 'features': {'a': 1}},
    None,
])
def test_unexpected_payload_shape_raises(payload, rng):
    with pytest.raises(MalformedResponseError):
        normalize_collection(payload, 'district', 'climate_vulnerability', rng=rng)


@pytest.mark.parametrize("raw, expected", [('75%', 0.75), (' 42.5 pts', 0.425), ('0.3', 0.3), ('.5', 0.5)])
def test_score_strings_use_their_leading_number(rng, raw, expected):
    feature = normalize_feature(raw_feature(id='a', score=raw), rng=rng)
    assert feature.vulnerability_score == pytest.approx(expected)
    assert feature.score_is_placeholder is False
    assert feature.id == 'a'


def test_score_string_without_leading_number_is_not_a_score(rng):
    feature = normalize_feature(raw_feature(score='high (80)'), rng=rng)
    assert feature.score_is_placeholder is True
