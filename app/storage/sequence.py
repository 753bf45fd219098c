import itertools


class IdSequence:
    """Hands out monotonically increasing integer ids, starting at `start`."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self) -> int:
        return next(self._counter)
