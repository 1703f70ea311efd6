"""
Utility Module

Configuration loading and logging setup shared by the data and
visualization layers.
"""

from ccvi_map.utils.browser import open_html_in_browser
from ccvi_map.utils.config_loader import load_config
from ccvi_map.utils.logging import get_logger, setup_logging

__all__ = [
    'load_config',
    'open_html_in_browser',
    'get_logger',
    'setup_logging'
]
