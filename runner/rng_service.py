import random

from runner.logger import get_logger

log = get_logger("rng")


class RNGService:
    """Seedable random source owned by one game session.

    Sessions never share a generator, so two runs created with the same seed
    spawn identical obstacle sequences regardless of what else is running.
    """

    def __init__(self, seed: int | str | None = None):
        self._generator = random.Random(seed)
        self._seed_val = seed
        log.debug(f"spawn rng seeded with {seed!r}")

    @property
    def seed_value(self):
        return self._seed_val

    def random(self) -> float:
        return self._generator.random()
