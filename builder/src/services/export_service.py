"""Export service - hands the rendered bouquet to its destinations.

One rendered image feeds every target: PNG bytes for download, a file on
disk, the system clipboard and a native-share payload. Failures from the
host (encoding, disk, clipboard) are raised as ExportError, chained to the
original cause, after being reported through loggerRaise.

Rendering off the GUI thread goes through RenderWorker (a QThread).
RenderQueue keeps at most one render in flight per export target and
coalesces requests made while one is running, so only the newest waiting
request runs next.
"""

import io
import os
import re
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from PIL import Image
from PyQt5.QtCore import QThread, pyqtSignal
from PyQt5.QtGui import QImage
from PyQt5.QtWidgets import QApplication

from constants import (
    DEFAULT_BOUQUET_NAME, EXPORT_MIME_TYPE, EXPORT_FILENAME_SUFFIX, SHARE_TEXT,
)
from services.composition_renderer import RenderStyle
from utils.logger import loggerRaise

logger = logging.getLogger(__name__)


class ExportError(RuntimeError):
    """The host could not encode, write or hand over the exported image"""


def _report(cause: Exception, message: str):
    """Raise ExportError chained to `cause`, via loggerRaise"""
    error = ExportError(f"{message}: {cause}")
    error.__cause__ = cause
    loggerRaise(error, message, "Export Failed")


# ========================================
# File names
# ========================================

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]+')


def slugify(name: Optional[str]) -> str:
    """Lowercase, whitespace runs to '-', filesystem-unsafe characters dropped"""
    text = (name or '').strip() or DEFAULT_BOUQUET_NAME
    text = _UNSAFE_FILENAME_CHARS.sub('', text)
    text = re.sub(r'\s+', '-', text).lower().strip('-')
    return text or slugify(DEFAULT_BOUQUET_NAME)


def download_filename(name: Optional[str]) -> str:
    """Download file name for a bouquet, e.g. 'my-custom-bouquet-bouquet.png'"""
    return f"{slugify(name)}{EXPORT_FILENAME_SUFFIX}"


# ========================================
# Targets
# ========================================

def export_png_bytes(image: Image.Image) -> bytes:
    """Encode an image as PNG

    Raises:
        ExportError: If Pillow cannot encode the image
    """
    buffer = io.BytesIO()
    try:
        image.save(buffer, format='PNG')
    except (OSError, ValueError) as e:
        _report(e, "Could not encode the bouquet image")
    return buffer.getvalue()


def save_png(image: Image.Image, path: str) -> str:
    """Write the image as a PNG file, creating the directory if needed

    Returns:
        The path written

    Raises:
        ExportError: If encoding or writing fails
    """
    data = export_png_bytes(image)
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, 'wb') as f:
            f.write(data)
    except OSError as e:
        _report(e, f"Could not save the bouquet image to {path}")
    logger.info("Saved bouquet image to %s (%d bytes)", path, len(data))
    return path


def copy_to_clipboard(image: Image.Image) -> QImage:
    """Put the image on the system clipboard

    Requires a running QApplication.

    Returns:
        The QImage placed on the clipboard

    Raises:
        ExportError: If there is no application or the image cannot be converted
    """
    app = QApplication.instance()
    if app is None:
        _report(RuntimeError("no QApplication instance"), "Clipboard is not available")

    qimage = QImage.fromData(export_png_bytes(image), 'PNG')
    if qimage.isNull():
        _report(ValueError("PNG data could not be decoded by Qt"), "Could not copy the bouquet image")

    app.clipboard().setImage(qimage)
    logger.info("Copied bouquet image to clipboard (%dx%d)", qimage.width(), qimage.height())
    return qimage


@dataclass(frozen=True)
class SharePayload:
    """What a native share sheet needs: one PNG file plus title and text"""
    filename: str
    mime_type: str
    data: bytes
    title: str
    text: str = SHARE_TEXT


def share_payload(image: Image.Image, title: Optional[str] = None) -> SharePayload:
    """Build the native-share payload for an image"""
    title = (title or '').strip() or DEFAULT_BOUQUET_NAME
    return SharePayload(
        filename=download_filename(title),
        mime_type=EXPORT_MIME_TYPE,
        data=export_png_bytes(image),
        title=title,
    )


# ========================================
# Render scheduling
# ========================================

class RenderQueue:
    """At most one render in flight per export target.

    A request submitted while its target is busy waits; a newer request
    for the same target replaces it (the replaced future is cancelled).
    Different targets render independently.
    """

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='render')
        self._lock = threading.Lock()
        self._running: Dict[str, Future] = {}
        self._pending: Dict[str, Tuple[Callable[[], Any], Future]] = {}

    def submit(self, target: str, job: Callable[[], Any]) -> Future:
        """Schedule `job` for `target`

        Returns:
            Future resolved with the job's result, or cancelled if a newer
            request for the same target superseded it before it started
        """
        future = Future()
        with self._lock:
            if target in self._running:
                superseded = self._pending.get(target)
                if superseded is not None:
                    superseded[1].cancel()
                    logger.debug("Coalesced render request for '%s'", target)
                self._pending[target] = (job, future)
                return future
            self._running[target] = future
        self._start(target, job, future)
        return future

    def is_busy(self, target: str) -> bool:
        with self._lock:
            return target in self._running

    def has_pending(self, target: str) -> bool:
        with self._lock:
            return target in self._pending

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    def _start(self, target: str, job: Callable[[], Any], future: Future):
        if not future.set_running_or_notify_cancel():
            # Cancelled by the caller before it started
            self._finish(target)
            return
        self._executor.submit(self._run, target, job, future)

    def _run(self, target: str, job: Callable[[], Any], future: Future):
        try:
            result = job()
        except Exception as e:
            logger.warning("Render for '%s' failed: %s", target, e)
            future.set_exception(e)
        else:
            future.set_result(result)
        finally:
            self._finish(target)

    def _finish(self, target: str):
        with self._lock:
            waiting = self._pending.pop(target, None)
            if waiting is None:
                self._running.pop(target, None)
                return
            self._running[target] = waiting[1]
        self._start(target, *waiting)


class RenderWorker(QThread):
    """Worker thread that renders one arrangement to keep the GUI responsive.

    Items and style are copied when the worker is created, so the model
    may keep changing while the render runs.
    """

    finished = pyqtSignal(object)   # PIL image
    failed = pyqtSignal(str)        # error message

    def __init__(self, renderer, arrangement, label_text: Optional[str] = None, parent=None):
        super().__init__(parent)
        self.renderer = renderer
        self.label_text = label_text
        self._items = arrangement.get_draw_order()
        self._style = RenderStyle.from_model(arrangement)

    def run(self):
        try:
            image = self.renderer.render(self._items, self._style, self.label_text)
        except Exception as e:
            logger.exception("Render worker failed")
            self.failed.emit(str(e))
            return
        self.finished.emit(image)
