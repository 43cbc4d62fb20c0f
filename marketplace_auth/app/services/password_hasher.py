import bcrypt

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """bcrypt password hashing with a configurable cost factor"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash(self, plaintext: str) -> str:
        return bcrypt.hashpw(plaintext.encode(), bcrypt.gensalt(self.rounds)).decode()

    def verify(self, plaintext: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(plaintext.encode(), password_hash.encode())
        except ValueError:
            # Malformed stored hash or oversized input
            return False

    def burn(self, plaintext: str) -> None:
        """Spend one hash comparison so unknown users take as long as known ones."""
        bcrypt.checkpw(plaintext.encode()[:MAX_PASSWORD_BYTES], self._dummy_hash)
