"""Injectable random source for identifiers and codenames."""

import random
import uuid
from typing import Optional


class RandomSource:
    """
    Source of cosmetic randomness used by the campaign builder.

    Pass a seed to get reproducible identifiers and codenames in tests.
    The output is not suitable for anything security-sensitive.
    """

    CODENAME_ADJECTIVES = [
        "PHANTOM",
        "SHADOW",
        "GHOST",
        "SILENT",
        "DARK",
        "CYBER",
        "IRON",
        "STEEL",
        "STORM",
        "NIGHT",
    ]

    CODENAME_NOUNS = [
        "SPIDER",
        "WOLF",
        "HAWK",
        "VIPER",
        "COBRA",
        "DRAGON",
        "TIGER",
        "BEAR",
        "EAGLE",
        "SERPENT",
    ]

    def __init__(self, seed: Optional[int] = None) -> None:
        """
        Initialize random source.

        Args:
            seed: Optional seed for reproducible output
        """
        self._random = random.Random(seed)

    def generate_uuid(self) -> str:
        """Generate a UUID4-formatted identifier drawn from this source."""
        return str(uuid.UUID(int=self._random.getrandbits(128), version=4))

    def generate_codename(self) -> str:
        """Generate an "ADJECTIVE NOUN" codename, e.g. "SILENT VIPER"."""
        adjective = self._random.choice(self.CODENAME_ADJECTIVES)
        noun = self._random.choice(self.CODENAME_NOUNS)
        return f"{adjective} {noun}"
