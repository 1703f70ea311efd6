import folium

from ccvi_map.data.fallback import build_fallback_collection
from ccvi_map.models import RegionCollection, RegionFeature
from ccvi_map.visualization.popup import build_popup_html
from ccvi_map.visualization.region_layer import BASE_STYLE, HIGHLIGHT_STYLE, POPUP_PROPERTY, RegionLayer
from conftest import square


def make_layer(indicator_id='climate_vulnerability', rng=None):
    return RegionLayer(build_fallback_collection('district', indicator_id, rng=rng))


def test_base_style_uses_indicator_color(rng):
    layer = make_layer(rng=rng)
    # Balochistan, vulnerability 0.9
    assert layer.base_styles['region_3']['fillColor'] == '#ef4444'
    assert layer.base_styles['region_3']['weight'] == BASE_STYLE['weight']
    assert layer.current_styles == layer.base_styles


def test_hover_emphasizes_and_shows_popup(rng):
    layer = make_layer(rng=rng)
    layer.on_enter('region_0')

    assert layer.current_styles['region_0']['weight'] == HIGHLIGHT_STYLE['weight']
    assert layer.current_styles['region_0']['fillColor'] == layer.base_styles['region_0']['fillColor']
    assert 'Punjab' in layer.active_popup

    layer.on_leave('region_0')
    assert layer.current_styles['region_0'] == layer.base_styles['region_0']
    assert layer.active_popup is None
    assert layer.hovered is None


def test_leave_resets_to_restyled_base(rng):
    layer = make_layer(rng=rng)
    layer.on_enter('region_4')
    layer.restyle('adaptive_capacity')

    assert layer.current_styles['region_4']['weight'] == HIGHLIGHT_STYLE['weight']

    layer.on_leave('region_4')
    # Gilgit-Baltistan, adaptive capacity 0.7
    assert layer.current_styles['region_4']['fillColor'] == '#84cc16'
    assert layer.current_styles['region_4'] == layer.base_styles['region_4']


def test_bounds_cover_every_region(rng):
    south, west, north, east = make_layer(rng=rng).bounds
    assert (south, west) == (25.8943 - 1.5, 66.9756 - 1.5)
    assert (north, east) == (35.9042 + 1.5, 74.4641 + 1.5)


def test_empty_layer_has_no_bounds():
    layer = RegionLayer(RegionCollection('district', 'exposure'))
    assert layer.bounds is None


def test_geojson_carries_popup_and_indicator_value(rng):
    data = make_layer('sensitivity', rng=rng).to_geojson()
    properties = data['features'][1]['properties']
    assert properties['indicator_value'] == 0.7
    assert properties[POPUP_PROPERTY].startswith('<div')
    assert data['features'][1]['id'] == 'region_1'


def test_to_folium_builds_geojson_layer(rng):
    element = make_layer(rng=rng).to_folium()
    assert isinstance(element, folium.GeoJson)


def test_popup_lists_scores_and_counts():
    feature = RegionFeature(
        id='r', name='Thar <Desert>', vulnerability_score=0.75, geometry=square(),
        population=1234567, exposure=0.5, adaptive_capacity=0.25,
    )
    html = build_popup_html(feature)

    assert 'Thar &lt;Desert&gt;' in html
    assert 'Vulnerability Score: 75.0%' in html
    assert 'Exposure: 50.0%' in html
    assert 'Adaptive Capacity: 25.0%' in html
    assert 'Sensitivity' not in html
    assert 'Population: 1,234,567' in html
    assert 'Area: N/A' in html
