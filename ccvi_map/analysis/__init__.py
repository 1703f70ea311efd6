"""
Analysis Module

Tabular summaries of loaded region collections.
"""

from ccvi_map.analysis.summary import collection_to_frame, summarize_collection

__all__ = [
    'collection_to_frame',
    'summarize_collection'
]
