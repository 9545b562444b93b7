"""Cooperative, set-once cancellation signal shared between a caller and a running search."""

import threading


class CancellationToken:
    """
    Level-triggered cancellation flag.

    The caller (UI thread, HTTP handler, timer) sets it once; the running
    search samples it at its checkpoints. There is no un-cancel.
    """

    def __init__(self):
        self._event = threading.Event()
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation. Safe to call from any thread, any number of times."""
        self._event.set()
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def cancel_after(self, seconds: float) -> None:
        """
        Request cancellation once ``seconds`` have elapsed.

        This is how a timeout is layered on top of a search: the core itself
        imposes none.
        """
        if seconds <= 0:
            self.cancel()
            return
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(seconds, self._event.set)
            self._timer.daemon = True
            self._timer.start()

    def disarm(self) -> None:
        """Stop a pending ``cancel_after`` timer without cancelling."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
