"""One-way password hashing (bcrypt via passlib).

Every call to ``hash`` draws a fresh salt, so hashing the same plaintext twice
gives two different strings; compare with ``verify``, never with ``==``.
"""
from typing import Optional

from passlib.context import CryptContext

DEFAULT_ROUNDS = 10


class PasswordHasher:
    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("Cannot hash an empty password")
        return self._context.hash(password)

    def verify(self, password: str, password_hash: Optional[str]) -> bool:
        if not password or not password_hash:
            return False
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # Not a bcrypt hash (e.g. a legacy plaintext value)
            return False
