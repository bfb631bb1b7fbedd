"""Global logging and error handling utilities"""
import sys
import logging
from PyQt5.QtWidgets import QMessageBox

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

logger = logging.getLogger('BouquetBuilder')

_main_window = None


def set_main_window(window):
    """Set the main window reference for showing popups"""
    global _main_window
    _main_window = window


def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Report an exception, then re-raise it

    Args:
        e: The exception to handle
        user_message: User-friendly message to show in popup (optional)
        title: Title for the popup dialog

    In DEBUG_MODE:
        - Logs and raises (full traceback reaches the developer)

    In RELEASE_MODE:
        - Logs the full traceback
        - Shows a popup with the user message when a main window is set
        - Then raises the exception
    """
    message = user_message if user_message else str(e)
    logger.error("%s: %s", title, message, exc_info=(type(e), e, e.__traceback__))

    if not DEBUG_MODE and _main_window is not None:
        QMessageBox.critical(_main_window, title, message)

    raise e
