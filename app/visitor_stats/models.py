"""
Data Models for Visitor Stats

Defines the data structures used by the stats dashboard.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from app.session_gate.models import Notice


@dataclass
class DayBucket:
    """Number of visits recorded on one calendar day."""

    date: str
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "date": self.date,
            "count": self.count
        }


@dataclass
class StatsSnapshot:
    """Statistics held by a mounted stats view."""

    buckets: List[DayBucket] = field(default_factory=list)
    total_searches: int = 0
    notice: Optional[Notice] = None

    @property
    def total_visits(self) -> int:
        return sum(bucket.count for bucket in self.buckets)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "buckets": [bucket.to_dict() for bucket in self.buckets],
            "total_visits": self.total_visits,
            "total_searches": self.total_searches,
            "error": self.notice.description if self.notice else None
        }
