"""
Prism — Filter Backend Loader
One-time lazy initialization of the image-processing backend (OpenCV).

Importing cv2 is slow, so it is deferred until the first effect needs it.
BACKEND is the process-wide loader: every caller awaits the same in-flight
initialization and then reuses the memoized result. Failure is reported
through BackendResult instead of an exception.

Usage:
    result = await BACKEND.ensure()     # async callers
    result = BACKEND.ensure_sync()      # CLI / scripts
    cv2 = BACKEND.module                # after a successful init
"""

import asyncio
import importlib
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

BACKEND_MODULE = "cv2"


class BackendUnavailableError(RuntimeError):
    """A pass needed the backend before it was initialized."""
    pass


@dataclass(frozen=True)
class BackendResult:
    ok: bool
    module: Any = None
    error: str | None = None


def _import_backend() -> Any:
    return importlib.import_module(BACKEND_MODULE)


class BackendLoader:
    """Memoized, shareable initialization of a backend module.

    Args:
        importer: Zero-arg callable returning the backend module. Raising
            marks the initialization as failed.
    """

    def __init__(self, importer: Callable[[], Any] = _import_backend):
        self._importer = importer
        self._result: BackendResult | None = None
        self._task: asyncio.Task | None = None
        self._task_loop: asyncio.AbstractEventLoop | None = None
        self._sync_lock = threading.Lock()

    @property
    def result(self) -> BackendResult | None:
        return self._result

    @property
    def ready(self) -> bool:
        return self._result is not None and self._result.ok

    @property
    def module(self) -> Any:
        """The loaded backend module.

        Raises:
            BackendUnavailableError: If initialization has not succeeded.
        """
        if not self.ready:
            raise BackendUnavailableError(
                f"Backend '{BACKEND_MODULE}' is not initialized. "
                f"Await BACKEND.ensure() or call BACKEND.ensure_sync() first."
            )
        return self._result.module

    def _load(self) -> BackendResult:
        logger.debug("Starting backend initialization")
        try:
            module = self._importer()
        except Exception as e:
            logger.error("Error initializing backend: %s", e)
            return BackendResult(ok=False, error=f"{type(e).__name__}: {e}")
        logger.debug("Backend initialization complete")
        return BackendResult(ok=True, module=module)

    async def ensure(self) -> BackendResult:
        """Initialize once; concurrent awaiters share the same in-flight task."""
        if self._result is not None:
            return self._result

        loop = asyncio.get_running_loop()
        if self._task is None or self._task_loop is not loop:
            self._task = loop.create_task(asyncio.to_thread(self._load))
            self._task_loop = loop

        result = await asyncio.shield(self._task)
        if self._result is None:
            self._result = result
        self._task = None
        self._task_loop = None
        return self._result

    def ensure_sync(self) -> BackendResult:
        """Blocking equivalent of ensure() for synchronous callers."""
        if self._result is not None:
            return self._result
        with self._sync_lock:
            if self._result is None:
                self._result = self._load()
        return self._result

    def reset(self) -> None:
        """Forget the memoized result (a failed init can then be retried)."""
        self._result = None
        self._task = None
        self._task_loop = None


BACKEND = BackendLoader()


def require_backend() -> Any:
    """Shortcut used by passes that call into the backend."""
    return BACKEND.module
