"""
Collection Summary Module

Tabular view of a loaded RegionCollection for one indicator.
"""

from typing import Any, Dict, Optional

import pandas as pd

from ccvi_map.models import RegionCollection
from ccvi_map.visualization.color_scheme import get_color_scale, get_indicator_value

COLUMNS = [
    'id', 'name', 'vulnerability_score', 'exposure', 'sensitivity',
    'adaptive_capacity', 'population', 'area', 'indicator_value',
    'class_label', 'color', 'score_is_placeholder',
]


def collection_to_frame(
    collection: RegionCollection,
    indicator_id: Optional[str] = None
) -> pd.DataFrame:
    """
    Convert a collection to a DataFrame, one row per region.

    Parameters
    ----------
    collection : RegionCollection
        Loaded regions
    indicator_id : str, optional
        Indicator to evaluate (default: the collection's indicator)

    Returns
    -------
    pd.DataFrame
        Scores, indicator value, legend class and fill color per region
    """
    indicator_id = indicator_id or collection.indicator_id
    scale = get_color_scale(indicator_id)

    rows = []
    for feature in collection:
        value = get_indicator_value(feature, indicator_id)
        rows.append({
            'id': feature.id,
            'name': feature.name,
            'vulnerability_score': feature.vulnerability_score,
            'exposure': feature.exposure,
            'sensitivity': feature.sensitivity,
            'adaptive_capacity': feature.adaptive_capacity,
            'population': feature.population,
            'area': feature.area,
            'indicator_value': value,
            'class_label': scale.labels[scale.bucket(value)],
            'color': scale.color(value),
            'score_is_placeholder': feature.score_is_placeholder,
        })

    return pd.DataFrame(rows, columns=COLUMNS)


def summarize_collection(
    collection: RegionCollection,
    indicator_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Summarize the indicator values of a collection.

    Returns
    -------
    dict
        Region count, mean/min/max indicator value, region count per legend
        class (all classes listed, in legend order) and the fallback flag
    """
    indicator_id = indicator_id or collection.indicator_id
    df = collection_to_frame(collection, indicator_id)
    labels = get_color_scale(indicator_id).labels

    if df.empty:
        stats = {'mean': None, 'min': None, 'max': None}
    else:
        values = df['indicator_value']
        stats = {
            'mean': float(values.mean()),
            'min': float(values.min()),
            'max': float(values.max()),
        }

    counts = df['class_label'].value_counts()
    return {
        'boundary_id': collection.boundary_id,
        'indicator_id': indicator_id,
        'regions': int(len(df)),
        **stats,
        'classes': {label: int(counts.get(label, 0)) for label in labels},
        'placeholder_scores': int(df['score_is_placeholder'].sum()) if not df.empty else 0,
        'is_fallback': collection.is_fallback,
    }
