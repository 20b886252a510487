"""
Random draw helpers on top of the generation stream.

Every helper takes the stream explicitly. Python's random and NumPy's random
must not be used in generation code; the map would no longer be reproducible
from its game id.
"""

import math
from typing import TYPE_CHECKING, List, MutableSequence, TypeVar

if TYPE_CHECKING:
    from ..core.lcg_prng import LcgPRNG

T = TypeVar("T")


def probability(prng: "LcgPRNG", p: float) -> bool:
    """
    Bernoulli draw that succeeds with probability ``p``.

    Certain outcomes (``p >= 1`` or ``p <= 0``) do not consume a draw.
    """
    if p >= 1:
        return True
    if p <= 0:
        return False
    return prng.random() < p


def rand_int(prng: "LcgPRNG", n: int) -> int:
    """Integer in ``[0, n)``."""
    return int(math.floor(prng.random() * n))


def shuffle(prng: "LcgPRNG", items: MutableSequence[T]) -> List[T]:
    """Fisher-Yates shuffle in place; returns the same sequence."""
    for i in range(len(items) - 1, 0, -1):
        j = rand_int(prng, i + 1)
        items[i], items[j] = items[j], items[i]
    return items
