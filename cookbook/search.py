"""
Grocery store search service for the Shopping page.

LocalSearchService runs a single point-of-interest query for "Grocery Store"
around a coordinate and exposes the outcome as three plain fields the UI reads
on every render:

- results: the current list of Place objects (replaced wholesale per search)
- is_searching: True while a query is in flight
- error_message: human-readable failure text from the last search, or None

Search flow: search_grocery_stores() -> executor thread -> connector.search()
-> MainQueue.post(apply) -> UI thread drains the queue -> fields updated

# NOTE: Overlapping searches are not guarded against. Each completion posts its
    own update, so whichever finishes last wins.
"""

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import List, Optional

from cookbook.connectors.base import BasePlaceSearchConnector
from cookbook.dispatch import MainQueue
from cookbook.models import DEFAULT_SPAN_DEGREES, Coordinate, MapItem, Place, Region

logger = logging.getLogger(__name__)

GROCERY_STORE_QUERY = "Grocery Store"
DEFAULT_RESULT_LIMIT = 20

# Shared by every service in the process; searches are short and I/O bound
_EXECUTOR = ThreadPoolExecutor(max_workers=4, thread_name_prefix="place-search")


class LocalSearchService:
    """Runs grocery store searches off the UI thread and publishes results back onto it."""

    def __init__(
        self,
        connector: BasePlaceSearchConnector,
        main_queue: Optional[MainQueue] = None,
        executor: Optional[Executor] = None,
        limit: int = DEFAULT_RESULT_LIMIT,
        span: float = DEFAULT_SPAN_DEGREES,
    ) -> None:
        self.connector = connector
        self.main_queue = main_queue or MainQueue()
        self.executor = executor or _EXECUTOR
        self.limit = limit
        self.span = span

        self.results: List[Place] = []
        self.is_searching = False
        self.error_message: Optional[str] = None

    def search_grocery_stores(self, near: Coordinate) -> Future:
        """
        Start a grocery store search centred on `near`.

        Clears the previous results and error immediately. The outcome lands in
        the service's fields once the UI thread drains the main queue.

        Args:
            near: Centre of the search region

        Returns:
            Future for the background query; callers may wait on it before draining
        """
        self.is_searching = True
        self.error_message = None
        self.results = []

        region = Region.around(near, span=self.span)
        logger.info("Searching %r near (%.4f, %.4f)", GROCERY_STORE_QUERY, near.latitude, near.longitude)

        return self.executor.submit(self._run_search, region)

    def _run_search(self, region: Region) -> None:
        # Runs on the worker thread: hand off to the UI thread, never touch fields here.
        # The post happens before the future resolves, so a caller that waits on
        # the future and then drains always sees the outcome.
        try:
            items = self.connector.search(GROCERY_STORE_QUERY, region, self.limit)
        except Exception as e:
            self.main_queue.post(self._apply_error, e)
        else:
            self.main_queue.post(self._apply_results, items)

    def _apply_error(self, error: Exception) -> None:
        self.is_searching = False
        logger.warning("Grocery store search failed: %s", error)
        self.error_message = str(error) or error.__class__.__name__

    def _apply_results(self, items: List[MapItem]) -> None:
        self.is_searching = False
        self.results = [Place.from_map_item(item) for item in items]
        logger.info("Grocery store search returned %d place(s)", len(self.results))
