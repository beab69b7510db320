"""Deterministic test doubles."""


class FakePasswordHasher:
    """Reversible stand-in for bcrypt so tests stay fast and predictable."""

    PREFIX = "hashed:"

    def __init__(self):
        self.hash_calls: list[str] = []

    def hash(self, password: str) -> str:
        self.hash_calls.append(password)
        return f"{self.PREFIX}{password}"

    def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"{self.PREFIX}{password}"
