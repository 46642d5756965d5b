"""
RSL Memory - flat byte space with a free-list allocator.

Free runs are kept as sorted (address, length) pairs. Allocation is
first-fit; releasing a run zeroes it and coalesces it with its neighbours.
The backing bytearray grows on demand up to the highest address handed out.
"""

from typing import Iterator, Optional

from .errors import MemoryAccessError, OutOfMemoryError, UnterminatedStringError

# Size of the initial free run; addresses are unsigned 64-bit words
ADDRESS_LIMIT: int = 2**64 - 1


def encode_literal(text: str) -> bytes:
    """Encode text as a zero-terminated single-byte string."""
    if "\0" in text:
        raise ValueError("string literal must not contain a NUL character")
    try:
        data = text.encode("latin-1")
    except UnicodeEncodeError as e:
        raise ValueError(f"string literal is not single-byte text: {text!r}") from e
    return data + b"\0"


class Memory:
    """Byte-addressable memory for RSL programs."""

    def __init__(self):
        self.memory = bytearray()
        self.free: list[tuple[int, int]] = [(0, ADDRESS_LIMIT)]

    def __len__(self) -> int:
        return len(self.memory)

    def __repr__(self) -> str:
        return f"Memory(memory={list(self.memory)}, free={self.free})"

    def _reserve(self, length: int) -> int:
        """Take length bytes from the first free run that fits (first-fit)."""
        for index, (address, remaining) in enumerate(self.free):
            if remaining >= length:
                break
        else:
            raise OutOfMemoryError(length)

        # Extend backing storage before touching the free list
        end = address + length
        if end > len(self.memory):
            try:
                self.memory.extend(bytes(end - len(self.memory)))
            except (MemoryError, OverflowError) as e:
                raise OutOfMemoryError(length) from e

        if remaining == length:
            del self.free[index]
        else:
            self.free[index] = (address + length, remaining - length)
        return address

    def push(self, value: int) -> int:
        """Store a single byte, returning its address."""
        address = self._reserve(1)
        self.set(address, value)
        return address

    def extend(self, data: bytes) -> int:
        """Store a byte sequence, returning the address of its first byte."""
        address = self._reserve(len(data))
        self.memory[address:address + len(data)] = data
        return address

    def alloc(self, length: int) -> int:
        """Reserve length zeroed bytes, returning the start address."""
        if length < 0:
            raise ValueError(f"cannot allocate {length} bytes")
        return self._reserve(length)

    def get(self, address: int) -> Optional[int]:
        """Byte at address, or None if address is outside memory."""
        if 0 <= address < len(self.memory):
            return self.memory[address]
        return None

    def set(self, address: int, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value out of range: {value}")
        if not 0 <= address < len(self.memory):
            raise MemoryAccessError("store outside memory", address)
        self.memory[address] = value

    def remove(self, address: int, length: int) -> None:
        """Release length bytes at address back to the free list."""
        if length <= 0:
            return
        if address < 0 or address + length > len(self.memory):
            raise MemoryAccessError(f"free of {length} byte(s) outside memory", address)
        for start, run in self.free:
            if start < address + length and address < start + run:
                raise MemoryAccessError("free of unallocated memory", address)

        self.memory[address:address + length] = bytes(length)
        self.free.append((address, length))
        self.free.sort()

        merged = [self.free[0]]
        for start, run in self.free[1:]:
            last_start, last_run = merged[-1]
            if start == last_start + last_run:
                merged[-1] = (last_start, last_run + run)
            else:
                merged.append((start, run))
        self.free = merged

    def iter_string(self, address: int, limit: Optional[int] = None) -> Iterator[int]:
        """
        Yield the bytes of the zero-terminated string at address.

        The scan stops at the first zero byte. Running off the end of memory,
        or past limit bytes, raises UnterminatedStringError.
        """
        if address < 0:
            raise MemoryAccessError("string scan outside memory", address)
        end = len(self.memory)
        if limit is not None:
            end = min(end, address + limit)

        offset = 0
        while address + offset < end:
            value = self.memory[address + offset]
            if value <= 0:
                return
            yield value
            offset += 1
        raise UnterminatedStringError(address, offset)
