"""Memory model for the word-width CPU emulator."""

from .errors import MemoryOutOfBounds
from .word import mask


class Memory:
    """Fixed-size linear memory of masked words."""

    def __init__(self, size: int = 256, word_bits: int = 8):
        self.size = size
        self.word_bits = word_bits
        self._mask = mask(word_bits)
        self._data: list[int] = [0] * size

    def check_bounds(self, addr: int) -> None:
        """Raise MemoryOutOfBounds unless 0 <= addr < size."""
        if addr < 0 or addr >= self.size:
            raise MemoryOutOfBounds(
                f"Memory address out of range: {addr} (size {self.size})"
            )

    def read(self, addr: int) -> int:
        self.check_bounds(addr)
        return self._data[addr]

    def write(self, addr: int, value: int) -> None:
        """Write masked value to memory address."""
        self.check_bounds(addr)
        self._data[addr] = value & self._mask

    def get_watched(self, addresses: list[int]) -> dict[str, int]:
        """Get values at watched addresses as string-keyed dict."""
        result = {}
        for addr in addresses:
            if 0 <= addr < self.size:
                result[str(addr)] = self._data[addr]
        return result

    def clear(self) -> None:
        self._data = [0] * self.size

    def snapshot(self) -> list[int]:
        """Return a copy of the entire memory."""
        return self._data.copy()
