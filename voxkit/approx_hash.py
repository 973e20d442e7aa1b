"""Fixed-size arrays indexed by masked hashes: fast approximate maps and sets.

Two different elements whose hashes agree in the unmasked bits share a slot,
so these containers give both false positives and false negatives.
"""

from __future__ import annotations

from typing import Callable, Generic, Sequence, TypeVar

from voxkit.block_hash import any_index_hash

T = TypeVar("T")

_SIZE_T_MASK = (1 << 64) - 1
_SIZE_T_MAX = _SIZE_T_MASK

Hasher = Callable[[Sequence[int]], int]


def _check_bits(unmasked_bits: int) -> None:
    if unmasked_bits < 0:
        raise ValueError(f"unmasked_bits must not be negative, got {unmasked_bits}")


class ApproxHashArray(Generic[T]):
    """``2 ** unmasked_bits`` slots, each created by ``factory``.

    An index picks the slot given by the low bits of its hash.
    """

    def __init__(
        self,
        unmasked_bits: int,
        factory: Callable[[], T],
        hasher: Hasher = any_index_hash,
    ) -> None:
        _check_bits(unmasked_bits)
        self._bit_mask = (1 << unmasked_bits) - 1
        self._slots = [factory() for _ in range(1 << unmasked_bits)]
        self._hasher = hasher

    def get_by_hash(self, hash_value: int) -> T:
        """The element stored in the slot of ``hash_value``."""
        return self._slots[int(hash_value) & self._bit_mask]

    def get(self, index: Sequence[int]) -> T:
        """The element stored in the slot of ``index``."""
        return self.get_by_hash(self._hasher(index))


class ApproxHashSet:
    """Approximate set of hashes with cheap resets.

    Each reset shifts the slot offset by one instead of clearing; after
    ``full_reset_threshold`` resets the storage is cleared for real.
    """

    def __init__(
        self,
        unmasked_bits: int,
        full_reset_threshold: int,
        hasher: Hasher = any_index_hash,
    ) -> None:
        _check_bits(unmasked_bits)
        if full_reset_threshold < 0:
            raise ValueError(
                f"full_reset_threshold must not be negative, got {full_reset_threshold}"
            )
        self._bit_mask = (1 << unmasked_bits) - 1
        self._full_reset_threshold = full_reset_threshold
        self._size = (1 << unmasked_bits) + full_reset_threshold
        self._hasher = hasher
        self._offset = 0
        self._clear()

    def _clear(self) -> None:
        self._slots = [0] * self._size
        # Slot 0 may legitimately hold hash 0, so it starts with another value.
        self._slots[self._offset] = _SIZE_T_MAX

    def _slot(self, hash_value: int) -> int:
        return (hash_value & self._bit_mask) + self._offset

    def is_hash_currently_present(self, hash_value: int) -> bool:
        """True if ``hash_value`` currently occupies its slot."""
        hash_value = int(hash_value) & _SIZE_T_MASK
        return self._slots[self._slot(hash_value)] == hash_value

    def is_present(self, index: Sequence[int]) -> bool:
        """True if the hash of ``index`` currently occupies its slot."""
        return self.is_hash_currently_present(self._hasher(index))

    def replace_hash(self, hash_value: int) -> bool:
        """Store ``hash_value``; False if it was already there."""
        hash_value = int(hash_value) & _SIZE_T_MASK
        slot = self._slot(hash_value)
        if self._slots[slot] == hash_value:
            return False
        self._slots[slot] = hash_value
        return True

    def replace(self, index: Sequence[int]) -> bool:
        """Store the hash of ``index``; False if it was already there."""
        return self.replace_hash(self._hasher(index))

    def reset(self) -> None:
        """Forget the stored hashes (by shifting, or clearing when due)."""
        self._offset += 1
        if self._offset >= self._full_reset_threshold:
            self._offset = 0
            self._clear()