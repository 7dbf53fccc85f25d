"""Seeded PCG32 generator used to shuffle the deck.

Deals must be identical for a given seed on every platform, so the shuffle
does not go through :mod:`random`. The generator reproduces ``rand_pcg``'s
``Pcg32`` (``Lcg64Xsh32``) seeded through ``seed_from_u64``, and the shuffle
draws bounded integers with the widening-multiply rejection scheme.
"""

from typing import TypeVar

MASK_32 = 0xFFFFFFFF
MASK_64 = 0xFFFFFFFFFFFFFFFF

MULTIPLIER = 6364136223846793005
# seed expansion constants
SEED_MULTIPLIER = 6364136223846793005
SEED_INCREMENT = 11634580027462260723

T = TypeVar("T")


def _rotate_right_32(value: int, rot: int) -> int:
    rot &= 31
    return ((value >> rot) | (value << ((32 - rot) & 31))) & MASK_32


def _xsh_rr(state: int) -> int:
    xorshifted = (((state >> 18) ^ state) >> 27) & MASK_32
    return _rotate_right_32(xorshifted, state >> 59)


class Pcg32:
    def __init__(self, state: int, increment: int):
        self.increment = (increment | 1) & MASK_64
        self.state = (state + self.increment) & MASK_64
        self._step()

    @classmethod
    def seed_from_u64(cls, seed: int) -> "Pcg32":
        state = seed & MASK_64
        words: list[int] = []
        for _ in range(4):
            state = (state * SEED_MULTIPLIER + SEED_INCREMENT) & MASK_64
            words.append(_xsh_rr(state))
        return cls(words[0] | (words[1] << 32), words[2] | (words[3] << 32))

    def _step(self) -> None:
        self.state = (self.state * MULTIPLIER + self.increment) & MASK_64

    def next_u32(self) -> int:
        state = self.state
        self._step()
        return _xsh_rr(state)

    def gen_index(self, upper: int) -> int:
        """Uniform integer in ``[0, upper)``."""
        if not 0 < upper <= MASK_32:
            msg = f"Index bound {upper} out of range"
            raise ValueError(msg)
        zone = ((upper << (32 - upper.bit_length())) & MASK_32) - 1
        while True:
            product = self.next_u32() * upper
            if product & MASK_32 <= zone:
                return product >> 32

    def shuffle(self, items: list[T]) -> None:
        for i in range(len(items) - 1, 0, -1):
            j = self.gen_index(i + 1)
            items[i], items[j] = items[j], items[i]
