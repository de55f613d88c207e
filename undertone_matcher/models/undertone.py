from enum import Enum


class Undertone(str, Enum):
    """Skin undertone category. String valued so it serialises as-is."""
    WARM = "warm"
    COOL = "cool"
    NEUTRAL = "neutral"

    def __str__(self) -> str:
        return self.value
