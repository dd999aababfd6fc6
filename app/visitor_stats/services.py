"""
Visitor Stats Service

Loads visit and search statistics from the hosted backend for the admin
dashboard.
"""

import logging
from collections import Counter
from datetime import date, tzinfo
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from backend_service.client import HostedBackendClient
from backend_service.errors import BackendError, SessionExpiredError
from backend_service.models import VisitRecord
from config_manager import DashboardConfig
from app.session_context.context import SessionContext
from app.session_context.services import SessionContextService
from app.session_gate.models import Notice
from .models import DayBucket, StatsSnapshot
from .view import StatsView

logger = logging.getLogger(__name__)

DEFAULT_MAX_DAYS = 7
DEFAULT_DATE_FORMAT = "%d/%m/%Y"


def bucket_visits_by_day(records: Iterable[VisitRecord], max_days: int = DEFAULT_MAX_DAYS,
                         date_format: str = DEFAULT_DATE_FORMAT,
                         tz: Optional[tzinfo] = None) -> List[DayBucket]:
    """Count visits per calendar day, keeping the most recent days.

    Days are taken in the display timezone *tz* (the server's local timezone
    when None). The result holds at most *max_days* buckets, oldest first.
    The input order does not matter.

    Args:
        records: Visit records to count
        max_days: Maximum number of days to keep
        date_format: strftime format of the bucket label
        tz: Display timezone

    Returns:
        List of day buckets in ascending date order
    """
    counts: Counter = Counter()
    for record in records:
        day: date = record.created_at.astimezone(tz).date()
        counts[day] += 1

    recent_days = sorted(counts, reverse=True)[:max(max_days, 0)]
    return [
        DayBucket(date=day.strftime(date_format), count=counts[day])
        for day in reversed(recent_days)
    ]


class VisitorStatsService:
    """Service for loading dashboard statistics."""

    def __init__(self, backend_client: HostedBackendClient,
                 session_context_service: SessionContextService,
                 dashboard_config: DashboardConfig):
        """Initialize the visitor stats service.

        Args:
            backend_client: Hosted backend client for the row API
            session_context_service: Provides the per-request session context
            dashboard_config: Table names and bucket settings
        """
        self.backend_client = backend_client
        self.session_context_service = session_context_service
        self.dashboard_config = dashboard_config
        self.display_timezone = (
            ZoneInfo(dashboard_config.display_timezone)
            if dashboard_config.display_timezone else None
        )

    def get_context(self) -> SessionContext:
        """Get the session context of the current request."""
        return self.session_context_service.get_context()

    def create_view(self, context: Optional[SessionContext] = None) -> StatsView:
        """Create a stats view bound to *context* (the current request's by default)."""
        return StatsView(context or self.get_context(), self)

    def load_stats(self, context: SessionContext, snapshot: StatsSnapshot) -> StatsSnapshot:
        """Load visit buckets and the search count into *snapshot*.

        Values set before a failing call stay in the snapshot. An expired
        access token clears the session context.
        """
        auth_session = context.session
        if auth_session is None:
            return snapshot
        access_token = auth_session.access_token

        try:
            rows = self.backend_client.read_all(
                self.dashboard_config.visits_table,
                order_by="created_at",
                descending=True,
                access_token=access_token,
            )
            visits = [VisitRecord.model_validate(row) for row in rows]
            snapshot.buckets = bucket_visits_by_day(
                visits,
                max_days=self.dashboard_config.max_days,
                date_format=self.dashboard_config.date_format,
                tz=self.display_timezone,
            )

            snapshot.total_searches = self.backend_client.count_all(
                self.dashboard_config.searches_table,
                access_token=access_token,
            )
        except SessionExpiredError:
            logger.info("Access token refused while loading statistics, signing out")
            snapshot.notice = Notice.error("Error", "Session expired, please sign in again")
            context.clear()
        except (BackendError, ValidationError) as e:
            logger.warning("Failed to load statistics: %s", e)
            snapshot.notice = Notice.error("Error", "Failed to load statistics")

        return snapshot
