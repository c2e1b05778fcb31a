from typing import Optional

from .types import QOI_CACHE_SIZE, QOI_RUN_16_MAX, ZERO, Pixel, px_hash


class PixelCache:
    """
    The 64 slot table of recently seen pixels behind the INDEX opcode.

    Slots start out as (0, 0, 0, 0). A store always overwrites its slot,
    evicting whatever pixel shared the hash.
    """

    def __init__(self):
        self._slots: list[Pixel] = [ZERO] * QOI_CACHE_SIZE

    def lookup(self, index: int) -> Pixel:
        return self._slots[index]

    def store(self, px: Pixel) -> int:
        pos = px_hash(px)
        self._slots[pos] = px
        return pos


class RunTracker:
    """Counts repeats of the previous pixel until they are flushed as one run."""

    def __init__(self, limit: int = QOI_RUN_16_MAX):
        self.limit = limit
        self.count = 0

    def extend(self) -> bool:
        """Count one more repeat. Returns True once the run is full."""
        self.count += 1
        return self.count >= self.limit

    def flush(self) -> Optional[int]:
        """Return the pending run length and reset, or None if nothing is pending."""
        if self.count <= 0:
            return None
        length = self.count
        self.count = 0
        return length
