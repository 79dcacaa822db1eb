"""
UserId Value Object - opaque identifier issued by the identity provider.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class UserId:
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("UserId cannot be empty")

    def __str__(self) -> str:
        return self.value
