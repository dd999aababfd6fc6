"""
Session gate models and data structures.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class GateOutcome(str, Enum):
    """How a sign-in attempt at the gate ended."""

    ADMITTED = "admitted"
    INVALID_CREDENTIALS = "invalid_credentials"
    IDENTITY_MISSING = "identity_missing"
    PROFILE_NOT_FOUND = "profile_not_found"
    NOT_ADMIN = "not_admin"
    UNEXPECTED = "unexpected"


# HTTP status used when the gate page is re-rendered after a rejection
OUTCOME_STATUS_CODES = {
    GateOutcome.ADMITTED: 302,
    GateOutcome.INVALID_CREDENTIALS: 401,
    GateOutcome.IDENTITY_MISSING: 401,
    GateOutcome.PROFILE_NOT_FOUND: 403,
    GateOutcome.NOT_ADMIN: 403,
    GateOutcome.UNEXPECTED: 500,
}


@dataclass
class Notice:
    """Transient message shown to the user on the next rendered page."""

    title: str
    description: str
    variant: str = "default"

    @classmethod
    def error(cls, title: str, description: str) -> "Notice":
        return cls(title=title, description=description, variant="destructive")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for flashing and JSON serialization."""
        return {
            "title": self.title,
            "description": self.description,
            "variant": self.variant
        }


@dataclass
class GateResult:
    """Result of a sign-in attempt."""

    outcome: GateOutcome
    notice: Notice

    @property
    def admitted(self) -> bool:
        return self.outcome == GateOutcome.ADMITTED

    @property
    def status_code(self) -> int:
        return OUTCOME_STATUS_CODES[self.outcome]
