"""Copy text to the clipboard from a NiceGUI page."""

from __future__ import annotations

import json

from nicegui import ui

from nicedistributions.utils.logging import get_logger

logger = get_logger(__name__)


def copy_to_clipboard(text: str) -> None:
    """Copy ``text`` with the browser's navigator.clipboard.

    Must be called from a NiceGUI event handler (needs a client context).
    """
    # json.dumps gives a valid JS string literal for any text
    ui.run_javascript(f"navigator.clipboard.writeText({json.dumps(text)});")
    logger.debug(f"copied {len(text)} characters to clipboard")
