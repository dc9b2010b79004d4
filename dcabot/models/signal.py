"""Purchase decision models."""

from enum import StrEnum


class Intent(StrEnum):
    PROCEED = "PROCEED"
    SKIP = "SKIP"
