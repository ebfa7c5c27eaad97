"""
Shared recognizer handle, keyed by language set.

One ``RecognizerSession`` owns at most one live recognizer. Concurrent first
callers for the same language set share a single in-flight initialization;
requesting a different language set retires the current handle, which is
terminated in the background once its last user releases it. A caller
always gets the handle it claimed, even when a switch retires it while it
is still initializing.
"""

import logging
import threading
from concurrent.futures import Future
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Tuple

from .errors import RecognizerInitError
from .recognizer import LanguageSet, Recognizer, parse_language_set

logger = logging.getLogger(__name__)

RecognizerFactory = Callable[[Tuple[str, ...]], Recognizer]


class _Handle:
    def __init__(self, languages: Tuple[str, ...]):
        self.languages = languages
        self.recognizer: Optional[Recognizer] = None
        self.future: Future = Future()
        self.refs = 0
        self.retired = False
        self.terminated = False


class RecognizerSession:
    """Lazily created, reference-counted recognizer shared across calls."""

    def __init__(self, factory: RecognizerFactory, background_teardown: bool = True):
        """
        Args:
            factory: Builds a recognizer for a normalized language tuple
            background_teardown: Terminate retired handles on a daemon thread
        """
        self._factory = factory
        self._background_teardown = background_teardown
        self._lock = threading.RLock()
        self._handle: Optional[_Handle] = None

    # ======================================================
    # PUBLIC API
    # ======================================================

    @contextmanager
    def acquire(self, languages: LanguageSet) -> Iterator[Recognizer]:
        """Borrow the recognizer for a language set, creating it if needed.

        Raises:
            RecognizerInitError: The recognizer could not be created
        """
        handle = self._get_handle(parse_language_set(languages))
        try:
            yield handle.recognizer
        finally:
            self._release(handle)

    def reset(self, languages: Optional[LanguageSet] = None) -> None:
        """Retire the current handle; optionally warm up a new one."""
        with self._lock:
            self._retire_current()
        if languages is not None:
            with self.acquire(languages):
                pass

    def close(self) -> None:
        self.reset()

    def status(self) -> Dict:
        with self._lock:
            handle = self._handle
            ready = handle is not None and handle.future.done() and handle.future.exception() is None
            return {
                "languages": list(handle.languages) if handle else [],
                "ready": ready,
            }

    # ======================================================
    # HANDLE LIFECYCLE
    # ======================================================

    def _get_handle(self, key: Tuple[str, ...]) -> _Handle:
        with self._lock:
            handle = self._handle
            creator = handle is None or handle.languages != key
            if creator:
                self._retire_current()
                handle = _Handle(key)
                self._handle = handle
            # Claimed before the recognizer exists; a retire meanwhile defers teardown to release
            handle.refs += 1

        if creator:
            self._initialize(handle)

        try:
            handle.future.result()
        except RecognizerInitError:
            self._release(handle)
            raise
        return handle

    def _initialize(self, handle: _Handle) -> None:
        key = handle.languages
        logger.info(f"Creating recognizer for languages: {'+'.join(key)}")
        try:
            recognizer = self._factory(key)
        except Exception as e:
            logger.error(f"Failed to initialize recognizer for {'+'.join(key)}: {e}")
            with self._lock:
                if self._handle is handle:
                    self._handle = None
            error = RecognizerInitError(key, f"Failed to initialize recognizer for {'+'.join(key)}: {e}")
            error.__cause__ = e
            handle.future.set_exception(error)
            return
        handle.recognizer = recognizer
        handle.future.set_result(recognizer)

    def _retire_current(self) -> None:
        # Caller holds the lock
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.retired = True
            if handle.refs == 0:
                self._schedule_teardown(handle)

    def _release(self, handle: _Handle) -> None:
        with self._lock:
            handle.refs -= 1
            if handle.retired and handle.refs == 0:
                self._schedule_teardown(handle)

    def _schedule_teardown(self, handle: _Handle) -> None:
        if handle.terminated or handle.recognizer is None:
            return
        handle.terminated = True
        if self._background_teardown:
            threading.Thread(
                target=self._teardown,
                args=(handle,),
                name=f"recognizer-teardown-{'+'.join(handle.languages)}",
                daemon=True,
            ).start()
        else:
            self._teardown(handle)

    def _teardown(self, handle: _Handle) -> None:
        try:
            handle.recognizer.terminate()
            logger.info(f"Terminated recognizer for languages: {'+'.join(handle.languages)}")
        except Exception as e:
            logger.warning(f"Failed to terminate recognizer for {'+'.join(handle.languages)}: {e}")
