"""Flower image resolution for the composition renderer.

Turns image_ref values into RGBA Pillow images. Distinct refs are fetched
concurrently on a thread pool, each with its own timeout. A ref that fails
or times out resolves to None ("unavailable") and the renderer falls back
to a colored disc; nothing is raised to the caller.

Successful loads are cached per resolver, failures are not, so a later
render retries refs that were temporarily unreachable.
"""

import os
import time
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Callable, Dict, Iterable, Optional

from PIL import Image

from constants import DEFAULT_IMAGE_TIMEOUT, DEFAULT_IMAGE_WORKERS

logger = logging.getLogger(__name__)


def load_image_file(image_ref: str, base_dir: Optional[str] = None) -> Image.Image:
    """Load an image from disk as RGBA.

    Args:
        image_ref: File path, absolute or relative to base_dir
        base_dir: Directory relative refs are resolved against

    Returns:
        Detached RGBA image (the file handle is closed)

    Raises:
        OSError: If the file is missing or not a readable image
    """
    path = image_ref
    if base_dir and not os.path.isabs(path):
        path = os.path.join(base_dir, path)
    with Image.open(path) as img:
        return img.convert('RGBA')


class FlowerImageResolver:
    """Concurrent, cached image_ref -> image lookup.

    The loader is injectable so hosts can fetch from wherever their catalog
    keeps images; it receives the ref and returns a Pillow image or raises.
    """

    def __init__(self, loader: Callable[[str], Image.Image] = None,
                 timeout: float = DEFAULT_IMAGE_TIMEOUT,
                 max_workers: int = DEFAULT_IMAGE_WORKERS,
                 base_dir: Optional[str] = None):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        if loader is None:
            loader = lambda ref: load_image_file(ref, base_dir)
        self._loader = loader
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix='flower-image')
        self._cache: Dict[str, Image.Image] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config, loader=None, base_dir=None) -> 'FlowerImageResolver':
        """Build with the timeout and pool size from an EngineConfig"""
        return cls(loader=loader, timeout=config.image_timeout,
                   max_workers=config.image_workers, base_dir=base_dir)

    # ========================================
    # Resolution
    # ========================================

    def resolve(self, image_ref: Optional[str]) -> Optional[Image.Image]:
        """Resolve a single ref; None if missing, failed or timed out"""
        if not image_ref:
            return None
        return self.resolve_many([image_ref]).get(image_ref)

    def resolve_many(self, image_refs: Iterable[Optional[str]]) -> Dict[str, Optional[Image.Image]]:
        """Resolve distinct refs concurrently

        Each ref gets `timeout` seconds from submission. Empty refs are
        skipped.

        Returns:
            Dict ref -> RGBA image, or None for unavailable refs
        """
        results: Dict[str, Optional[Image.Image]] = {}
        pending = {}

        with self._lock:
            for ref in image_refs:
                if not ref or ref in results or ref in pending:
                    continue
                cached = self._cache.get(ref)
                if cached is not None:
                    results[ref] = cached
                else:
                    pending[ref] = None

        submitted_at = time.monotonic()
        for ref in pending:
            pending[ref] = self._executor.submit(self._load, ref)

        for ref, future in pending.items():
            remaining = max(0.0, submitted_at + self.timeout - time.monotonic())
            try:
                image = future.result(timeout=remaining)
            except FutureTimeout:
                future.cancel()
                logger.warning("Timed out loading flower image '%s' after %.1fs", ref, self.timeout)
                image = None
            except Exception as e:
                logger.warning("Failed to load flower image '%s': %s", ref, e)
                image = None

            if image is not None:
                with self._lock:
                    self._cache[ref] = image
            results[ref] = image

        return results

    def _load(self, image_ref: str) -> Image.Image:
        image = self._loader(image_ref)
        if image is None:
            raise ValueError("loader returned no image")
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        return image

    # ========================================
    # Cache / lifecycle
    # ========================================

    def is_cached(self, image_ref: str) -> bool:
        with self._lock:
            return image_ref in self._cache

    def clear_cache(self):
        with self._lock:
            self._cache.clear()

    def close(self):
        """Stop accepting work; loads still running are abandoned"""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
