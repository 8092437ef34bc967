import logging

from bikeshop.data_access.repositories import FetchError, StoreRepositories
from bikeshop.domain.base import BaseDomainModel
from bikeshop.domain.commission_report import CommissionDetail, CommissionReport, CommissionSummaryRow
from bikeshop.domain.period import PeriodSelector, ReportingPeriod
from bikeshop.domain.sale import SaleDomain
from bikeshop.domain.sales_person import SalesPersonDomain
from bikeshop.services.commission_service import aggregate
from bikeshop.services.report_service import build_detail_for, build_summary_rows, empty_report_message


logger = logging.getLogger(__name__)


class ReportViewState(BaseDomainModel):
    """Everything the quarterly commission screen needs to draw itself."""
    applied_period: ReportingPeriod
    pending_period: ReportingPeriod
    available_years: list[int]
    can_apply: bool
    can_clear: bool
    rows: list[CommissionSummaryRow]
    error: str | None = None
    empty_message: str | None = None


class CommissionReportView:
    """
    Controller behind the quarterly commission report screen.

    Owns the period selector and reads the salesperson and sale
    collections through the store repositories. The report is aggregated
    only once both collections have loaded; if either fetch fails the view
    holds an error message instead and no report is computed. Nothing is
    retried automatically.
    """

    def __init__(self, repositories: StoreRepositories, selector: PeriodSelector | None = None) -> None:
        """
        Args:
            repositories (StoreRepositories): Access to the store API.
            selector (PeriodSelector | None): Period state, a fresh one by default.
        """
        self.repositories = repositories
        self.selector = selector or PeriodSelector()
        self.error: str | None = None
        self._salespersons: list[SalesPersonDomain] | None = None
        self._sales: list[SaleDomain] | None = None
        self._generation = 0
        self._closed = False

    @property
    def is_loaded(self) -> bool:
        return self._salespersons is not None and self._sales is not None

    @property
    def is_closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Leaves the view; any load still in flight is discarded when it returns."""
        self._closed = True
        self._generation += 1

    def load(self, force: bool = False) -> bool:
        """
        Loads both collections, from the repository caches when still valid.

        Args:
            force (bool): Bypass the caches and re-fetch both collections.

        Returns:
            bool: True if both collections are now available.
        """
        if self._closed:
            return False

        generation = self._generation
        salespersons_repo = self.repositories.salespersons
        sales_repo = self.repositories.sales
        try:
            salespersons = salespersons_repo.refetch() if force else salespersons_repo.get_all()
            sales = sales_repo.refetch() if force else sales_repo.get_all()
        except FetchError as e:
            if generation != self._generation:
                logger.info("Discarding failed report load: view was closed.")
                return False
            logger.warning(f"Commission report unavailable: {e.message}")
            self.error = e.message
            self._salespersons = None
            self._sales = None
            return False

        if generation != self._generation:
            logger.info("Discarding report load: view was closed.")
            return False

        self.error = None
        self._salespersons = salespersons
        self._sales = sales
        return True

    def reports(self) -> list[CommissionReport]:
        """Aggregates the loaded collections for the applied period."""
        if not self.is_loaded:
            return []
        return aggregate(self._salespersons, self._sales, self.selector.applied)

    # --- Period actions ---

    def select_period(self, year: int | None = None, quarter: int | None = None) -> ReportingPeriod:
        return self.selector.select(year=year, quarter=quarter)

    def apply_period(self) -> ReportingPeriod:
        return self.selector.apply()

    def clear_period(self) -> ReportingPeriod:
        return self.selector.clear()

    # --- Views ---

    def render(self) -> ReportViewState:
        """
        Computes the screen state from the current collections and applied period.

        Collections invalidated by a mutation are re-fetched first. The
        report itself is recomputed on every call and never cached.

        Returns:
            ReportViewState: Rows, or an error / empty-state message. A
                closed view renders no rows and no message.
        """
        self.load()
        rows: list[CommissionSummaryRow] = []
        empty_message = None
        # the empty state is only shown for data that was actually fetched
        if self.error is None and self.is_loaded and not self.is_closed:
            rows = build_summary_rows(self.reports())
            if not rows:
                empty_message = empty_report_message(self.selector.applied)

        return ReportViewState(
            applied_period=self.selector.applied,
            pending_period=self.selector.pending,
            available_years=self.selector.available_years(),
            can_apply=self.selector.has_pending_changes,
            can_clear=self.selector.is_filtered,
            rows=rows,
            error=self.error,
            empty_message=empty_message,
        )

    def details(self, salesperson_id: int) -> CommissionDetail | None:
        """
        Drill-down for one salesperson in the applied period.

        Returns:
            CommissionDetail | None: None if the salesperson has no sales in
                the period or the collections are unavailable.
        """
        return build_detail_for(self.reports(), salesperson_id)
