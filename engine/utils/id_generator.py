"""Per-game unit ids ("u1", "u2", ...)."""


class IDGenerator:
    """
    Hands out unit ids in deployment order.

    Every GameState owns one, so replaying a scenario always yields the
    same ids and two games in one process never share a counter.
    """

    def __init__(self, prefix: str = "u", start: int = 1):
        self.prefix = prefix
        self._next = start

    @property
    def issued(self) -> int:
        """How many ids this generator has handed out."""
        return self._next - 1

    def next_id(self) -> str:
        unit_id = f"{self.prefix}{self._next}"
        self._next += 1
        return unit_id
