import threading


class RunSequence:
    """Monotonic tokens for discarding results of superseded scoring passes.

    Explanation:
    A caller issues a token before starting a pass and applies the result only
    if is_current(token) still holds afterwards; older passes are dropped.
    HazardPipeline.run_latest does this for callers sharing one pipeline.
    """

    def __init__(self) -> None:
        self._latest = 0
        self._lock = threading.Lock()

    def issue(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest
