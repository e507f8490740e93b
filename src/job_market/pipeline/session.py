"""Session controller - owns filters, loading state and the current report."""

from __future__ import annotations

import logging
from enum import Enum

from job_market.errors import ReportError
from job_market.export.csv_exporter import to_csv
from job_market.models.filters import Filters
from job_market.models.report import MarketReport
from job_market.pipeline.query_builder import build_query
from job_market.pipeline.report_fetcher import ReportFetcher

logger = logging.getLogger(__name__)


class ViewState(str, Enum):
    WELCOME = "welcome"
    LOADING = "loading"
    ERROR = "error"
    NO_RESULTS = "no_results"
    REPORT = "report"


class MarketSession:
    """Single-user dashboard state.

    Holds at most one of report or error at a time. Only one analysis may be
    in flight; if a stale response still arrives it is discarded.
    """

    def __init__(self, fetcher: ReportFetcher, filters: Filters | None = None):
        self.fetcher = fetcher
        self.filters = filters or Filters()
        self.report: MarketReport | None = None
        self.error: str | None = None
        self.is_loading = False
        self.has_searched = False
        self._generation = 0

    def on_filter_change(self, dimension: str, value) -> None:
        """Replace one filter value. Ignored while a request is running."""
        if self.is_loading:
            logger.debug("Filter change ignored while loading: %s", dimension)
            return
        self.filters = self.filters.with_value(dimension, value)

    async def analyze(self) -> MarketReport | None:
        """Run one analysis for the current filters.

        Returns the new report, or None if the request failed. Report errors
        are stored as ``error`` and not raised. Any other exception also sets
        a generic ``error`` and then propagates. ``RuntimeError`` is raised
        when an analysis is already in flight.
        """
        if self.is_loading:
            raise RuntimeError("An analysis is already in progress")

        self._generation += 1
        generation = self._generation
        self.is_loading = True
        self.error = None
        self.report = None
        self.has_searched = True

        query = build_query(self.filters)
        try:
            report = await self.fetcher.fetch(query)
        except ReportError as exc:
            if generation == self._generation:
                logger.warning("Analysis failed: %s", exc.user_message)
                self.error = exc.user_message
            return None
        except Exception:
            if generation == self._generation:
                logger.exception("Analysis failed unexpectedly")
                self.error = ReportError.default_message
            raise
        finally:
            if generation == self._generation:
                self.is_loading = False

        if generation != self._generation:
            logger.debug("Discarding superseded response (generation %d)", generation)
            return None
        self.report = report
        return report

    @property
    def is_data_available(self) -> bool:
        return self.report is not None and not self.report.is_empty

    def export_csv(self) -> str | None:
        """CSV text for the current report, or None when there is nothing to export."""
        if not self.is_data_available:
            return None
        return to_csv(self.report.tier_analyses)

    @property
    def view_state(self) -> ViewState:
        if self.is_loading:
            return ViewState.LOADING
        if self.error is not None:
            return ViewState.ERROR
        if self.report is not None and not self.report.is_empty:
            return ViewState.REPORT
        if self.has_searched:
            return ViewState.NO_RESULTS
        return ViewState.WELCOME
