"""Deterministic xorshift32 generator used for settlement jitter."""

U32_MASK = 0xFFFFFFFF
U32_MAX = float(U32_MASK)


class XorShiftRng:
    """Seeded xorshift32 generator.

    Two generators built from the same seed produce identical sequences.
    The lowest state bit is forced on so the state is never zero.
    """

    def __init__(self, seed: int) -> None:
        self.state = (seed & U32_MASK) | 1

    def next_u32(self) -> int:
        """Advance the state and return it."""
        x = self.state
        x ^= (x << 13) & U32_MASK
        x ^= x >> 17
        x ^= (x << 5) & U32_MASK
        self.state = x
        return x

    def next_f32(self) -> float:
        """Return a uniform float in [0, 1]."""
        return self.next_u32() / U32_MAX
