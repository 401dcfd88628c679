"""
File Storage Value Objects

Identifiers for stored files and the generator that produces them.
"""

import random
import string
from dataclasses import dataclass
from typing import Optional

IDENTIFIER_ALPHABET = string.ascii_lowercase + string.digits
IDENTIFIER_LENGTH = 8


class InvalidFileIdentifierError(ValueError):
    """Raised when a string is not a well-formed generated identifier."""
    pass


def is_safe_name(name: str) -> bool:
    """
    Check that a requested name cannot escape the storage root.

    Rejects empty names, parent-directory sequences and embedded path
    separators. Does not check the identifier format, so names written into
    the storage root by other means stay addressable.
    """
    if not name:
        return False
    if ".." in name:
        return False
    return "/" not in name and "\\" not in name and "\x00" not in name


@dataclass(frozen=True)
class FileIdentifier:
    """
    Value object for a generated stored-file name.

    Exactly IDENTIFIER_LENGTH characters from IDENTIFIER_ALPHABET.
    """
    value: str

    def __post_init__(self):
        if not self._is_valid():
            raise InvalidFileIdentifierError(
                f"Invalid file identifier: {self.value!r}"
            )

    def _is_valid(self) -> bool:
        if not isinstance(self.value, str):
            return False
        if len(self.value) != IDENTIFIER_LENGTH:
            return False
        return all(c in IDENTIFIER_ALPHABET for c in self.value)

    def __str__(self) -> str:
        return self.value


class IdentifierGenerator:
    """
    Produces short random identifiers for stored files.

    The random source is owned by the generator and handed in at
    construction, so tests can substitute a seeded one. Without a source,
    random.SystemRandom is used.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.SystemRandom()

    @classmethod
    def from_seed(cls, seed: Optional[int]) -> "IdentifierGenerator":
        """
        Build a generator from an optional configured seed.

        Args:
            seed: Seed for a deterministic sequence, or None for OS entropy

        Returns:
            IdentifierGenerator instance
        """
        if seed is None:
            return cls()
        return cls(random.Random(seed))

    def generate(self) -> FileIdentifier:
        """Draw IDENTIFIER_LENGTH symbols uniformly from IDENTIFIER_ALPHABET."""
        value = "".join(
            self._rng.choice(IDENTIFIER_ALPHABET) for _ in range(IDENTIFIER_LENGTH)
        )
        return FileIdentifier(value)
