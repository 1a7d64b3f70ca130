"""Email value object"""

import re
from dataclasses import dataclass

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Email:
    value: str

    def __post_init__(self):
        normalized = (self.value or "").strip().lower()
        if not _EMAIL_PATTERN.match(normalized):
            raise ValueError(f"Invalid email address: {self.value!r}")
        # frozen dataclass: bypass __setattr__ to store the normalized form
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value
