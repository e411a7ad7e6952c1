"""Random source for the Grapple engine.

All randomness in a match (die rolls, the AI's pick, the bonus token draw,
the final coin flip) goes through one injected source. Anything with
random.Random's randint/random methods works; tests pass a ScriptedRandom
to fix every draw.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, Protocol, Sequence, TypeVar, runtime_checkable

from grapple.parameters import DIE_SIDES

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """The subset of random.Random the engine draws from."""

    def randint(self, a: int, b: int) -> int:
        """Uniform integer in [a, b], both ends included."""
        ...

    def random(self) -> float:
        """Uniform float in [0.0, 1.0)."""
        ...


def roll_d6(rng: RandomSource) -> int:
    """Roll one die."""
    return rng.randint(1, DIE_SIDES)


def choose(rng: RandomSource, items: Sequence[T]) -> T:
    """Pick one item uniformly.

    Draws the index through randint so scripted sources can target a
    specific element.

    Raises:
        ValueError: If items is empty
    """
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    return items[rng.randint(0, len(items) - 1)]


class ScriptedRandom:
    """Deterministic random source replaying fixed sequences.

    Integers are consumed by randint, floats by random. Each scripted
    integer must lie in the requested range; running out of values raises
    so a test never silently draws something it did not script.

    Usage:
        rng = ScriptedRandom(ints=[4, 3], floats=[0.1])
        rng.randint(1, 6)  # 4
        rng.randint(1, 6)  # 3
        rng.random()       # 0.1
    """

    def __init__(self, ints: Iterable[int] = (), floats: Iterable[float] = ()) -> None:
        self._ints: deque[int] = deque(ints)
        self._floats: deque[float] = deque(floats)

    def randint(self, a: int, b: int) -> int:
        if not self._ints:
            raise IndexError(f"ScriptedRandom exhausted: randint({a}, {b}) requested")
        value = self._ints.popleft()
        if not a <= value <= b:
            raise ValueError(f"Scripted value {value} outside requested range [{a}, {b}]")
        return value

    def random(self) -> float:
        if not self._floats:
            raise IndexError("ScriptedRandom exhausted: random() requested")
        return self._floats.popleft()

    def push_ints(self, *values: int) -> None:
        """Append more integers to the script."""
        self._ints.extend(values)

    def push_floats(self, *values: float) -> None:
        """Append more floats to the script."""
        self._floats.extend(values)

    @property
    def remaining(self) -> tuple[int, int]:
        """Number of unconsumed (ints, floats)."""
        return len(self._ints), len(self._floats)
