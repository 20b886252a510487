"""
Seed derivation and the linear-congruential random stream.

Every random draw in the generation pipeline comes from ``LcgPRNG``. Seeds
are derived from the game identifier so that a game id alone reproduces its
map.
"""

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def _int32(n):
    """Wrap to a signed 32-bit integer."""
    n &= 0xFFFFFFFF
    return n - 0x100000000 if n & 0x80000000 else n


def create_seed(game_id: str) -> int:
    """
    Derive a 32-bit seed from a game identifier.

    Polynomial rolling hash (``hash * 31 + char``) with signed 32-bit
    wrap-around, returned as its absolute value. Not injective.

    Args:
        game_id: Non-empty game identifier

    Returns:
        Non-negative integer seed
    """
    if not isinstance(game_id, str) or not game_id.strip():
        raise ValueError("Game identifier must be a non-empty string")

    h = 0
    for char in game_id:
        h = _int32(h * 31 + ord(char))
    return abs(h)


def attempt_seed(base_seed: int, attempt: int) -> int:
    """Seed for a regeneration attempt; attempt 0 keeps the base seed."""
    return base_seed ^ attempt


class LcgPRNG:
    """
    Linear-congruential generator producing floats in [0, 1).

    ``state = (state * 9301 + 49297) % 233280`` per draw.
    """

    def __init__(self, seed: int):
        """Initialize with an integer seed."""
        self.call_count = 0
        self.seed = int(seed)
        self.state = self.seed

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS

    def __repr__(self):
        return f"LcgPRNG(seed={self.seed}, calls={self.call_count})"
