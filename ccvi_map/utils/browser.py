"""
Browser Utilities Module

Opens exported map files in the default browser.
"""

import webbrowser
from pathlib import Path

from ccvi_map.utils.logging import get_logger

logger = get_logger(__name__)


def open_html_in_browser(file_path: Path) -> bool:
    """
    Open an HTML file in the default browser.

    Parameters
    ----------
    file_path : Path
        Path to HTML file

    Returns
    -------
    bool
        True if the browser was asked to open the file, False otherwise
    """
    file_path = Path(file_path)
    if not file_path.exists():
        logger.warning("HTML file not found: %s", file_path)
        return False

    try:
        return bool(webbrowser.open(file_path.resolve().as_uri()))
    except webbrowser.Error as e:
        logger.warning("Could not open %s in browser (%s), please open it manually", file_path, e)
        return False
