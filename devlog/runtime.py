"""Process-wide pipeline objects. One disclosure session per process."""
import logging

from devlog.config import settings
from devlog.services.activity_log import log_activity
from devlog.services.disclosure import DisclosureCursor
from devlog.services.feed_fetcher import FeedFetcher
from devlog.services.refresh import RefreshCoordinator

logger = logging.getLogger(__name__)


def report_stale(exc: Exception) -> None:
    """Raised once when the feed goes stale; open pages pick it up on their next poll."""
    logger.warning("Devlog feed is stale: %s", exc)
    log_activity("warn", "system", "Serving the last loaded data until the feed recovers")


coordinator = RefreshCoordinator(
    FeedFetcher(settings.FEED_URL),
    DisclosureCursor(settings.BATCH_SIZE),
    on_error=report_stale,
)


def get_coordinator() -> RefreshCoordinator:
    return coordinator
