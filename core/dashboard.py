"""Assembly of the KasFlow dashboard snapshot and filter options."""

from __future__ import annotations

import json
from datetime import date
from typing import Any, Iterable, Mapping

import pandas as pd

from analytics import (
    calculate_budget_status,
    calculate_expense_tree,
    calculate_goals_status,
    calculate_kpi_summary,
    calculate_liabilities_upcoming,
    calculate_net_flow,
    calculate_net_worth_snapshot,
    calculate_ratios,
    calculate_sankey_edges,
    calculate_total_saving,
    calculate_wallet_status,
    compute_liquid_assets,
)
from config.keywords import DEFAULT_RULES, KeywordRules
from config.settings import Settings, get_settings
from core.cache import CacheBackend, MemoryCache, get_json, put_if_small
from core.errors import DashboardError, MissingDataError
from core.insights import build_financial_insights
from core.logging_setup import get_logger
from core.models import (
    DashboardSnapshot,
    FilterOptions,
    Filters,
    NetWorthSnapshot,
    PeriodWindow,
    WalletRow,
)
from core.periods import DEFAULT_PERIOD, PERIOD_TOKENS, resolve_period, resolve_previous_period
from core.projection import load_ledger, select_transactions
from core.results import derive
from core.store import TableStore
from core.tables import RawTable, TableDecoder, require_table

__all__ = ["DashboardService", "normalize_period", "dashboard_cache_key", "FILTER_OPTIONS_CACHE_KEY"]

_logger = get_logger("kasflow.dashboard")

FILTER_OPTIONS_CACHE_KEY = "filterOptions"

_EMPTY_NET_WORTH = NetWorthSnapshot(assets=0.0, liabilities=0.0, netWorth=0.0)


def normalize_period(period: str | None) -> str:
    """Known tokens pass through; anything else reads as the current month."""

    if period in PERIOD_TOKENS:
        return str(period)
    if period:
        _logger.warning("Unknown period %r, using %s", period, DEFAULT_PERIOD)
    return DEFAULT_PERIOD


def dashboard_cache_key(period: str, filters: Filters) -> str:
    return f"dashboardData_{period}_{json.dumps(filters.as_dict(), sort_keys=True)}"


def _coerce_filters(filters: Filters | Mapping[str, Any] | None) -> Filters:
    if isinstance(filters, Filters):
        return filters
    return Filters.from_mapping(filters)


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(value for value in values if value))


class DashboardService:
    """Builds dashboard snapshots from a table store, with caching.

    Parameters
    ----------
    store:
        Source of the Input, scheduled and setup tables.
    cache:
        Key/value cache for raw tables, snapshots and filter options.
    settings:
        Table names, cache lifetimes and thresholds.
    rules:
        Keyword lists consulted by the reducers.
    """

    def __init__(
        self,
        store: TableStore,
        cache: CacheBackend | None = None,
        settings: Settings | None = None,
        rules: KeywordRules = DEFAULT_RULES,
    ) -> None:
        self.store = store
        self.cache = cache if cache is not None else MemoryCache()
        self.settings = settings or get_settings()
        self.rules = rules

    # -- tables -----------------------------------------------------------

    def read_table(self, name: str, force_refresh: bool = False) -> RawTable:
        """Return a raw table, served from cache unless ``force_refresh``."""

        cache_key = f"rawSheetData_{name}"
        if not force_refresh:
            cached = get_json(self.cache, cache_key)
            if cached is not None:
                return cached
        table = require_table(self.store.get_table(name), name)
        put_if_small(
            self.cache,
            cache_key,
            [list(row) for row in table],
            self.settings.table_cache_ttl(name),
            max_payload=self.settings.cache_max_payload,
        )
        return table

    def load_ledger(self, force_refresh: bool = False) -> pd.DataFrame:
        table = self.read_table(self.settings.input_table, force_refresh)
        return load_ledger(table, tz=self.settings.reporting_timezone)

    def resolve_windows(
        self,
        period: str,
        filters: Filters,
        *,
        today: date | None = None,
    ) -> tuple[PeriodWindow, PeriodWindow]:
        window = resolve_period(period, filters.start_date, filters.end_date, today=today)
        return window, resolve_previous_period(period, window.start)

    def filtered_transactions(
        self,
        period: str | None,
        filters: Filters | Mapping[str, Any] | None = None,
        *,
        today: date | None = None,
    ) -> pd.DataFrame:
        """Signed transactions of one window after applying ``filters``."""

        token = normalize_period(period)
        active = _coerce_filters(filters)
        window, _ = self.resolve_windows(token, active, today=today)
        return select_transactions(self.load_ledger(), active, window)

    # -- dashboard --------------------------------------------------------

    def build_dashboard(
        self,
        period: str | None = DEFAULT_PERIOD,
        filters: Filters | Mapping[str, Any] | None = None,
        force_refresh: bool = False,
        *,
        today: date | None = None,
    ) -> DashboardSnapshot:
        """Return the full snapshot for ``period`` and ``filters``.

        A cached snapshot is returned when present unless ``force_refresh``.
        Any failure in the core computation surfaces as :class:`DashboardError`.
        """

        token = normalize_period(period)
        active = _coerce_filters(filters)
        cache_key = dashboard_cache_key(token, active)

        if not force_refresh:
            cached = get_json(self.cache, cache_key)
            if cached is not None:
                _logger.info("Serving dashboard from cache (%s)", cache_key)
                return cached

        try:
            snapshot = self._assemble(token, active, force_refresh, today)
        except Exception as exc:
            _logger.exception("Dashboard build failed for period=%s filters=%s", token, active.as_dict())
            raise DashboardError(f"Failed to build dashboard data: {exc}") from exc

        put_if_small(
            self.cache,
            cache_key,
            snapshot,
            self.settings.dashboard_cache_ttl,
            max_payload=self.settings.cache_max_payload,
        )
        return snapshot

    def _assemble(
        self,
        period: str,
        filters: Filters,
        force_refresh: bool,
        today: date | None,
    ) -> DashboardSnapshot:
        settings, rules = self.settings, self.rules

        input_table = self.read_table(settings.input_table, force_refresh)
        scheduled = self.read_table(settings.scheduled_table, force_refresh=True)
        wallet_setup = self.read_table(settings.wallet_setup_table, force_refresh)
        category_setup = self.read_table(settings.category_setup_table, force_refresh)
        goals_setup = self.read_table(settings.goals_setup_table, force_refresh)

        ledger = load_ledger(input_table, tz=settings.reporting_timezone)
        window, previous_window = self.resolve_windows(period, filters, today=today)
        transactions = select_transactions(ledger, filters, window)
        if previous_window.is_degenerate:
            previous = transactions.iloc[0:0]
        else:
            previous = select_transactions(ledger, filters, previous_window)
        _logger.info(
            "Building dashboard: period=%s window=%s..%s rows=%d previous=%d",
            period,
            window.start.date(),
            window.end.date(),
            len(transactions),
            len(previous),
        )

        kpi = calculate_kpi_summary(transactions, previous, rules)
        kpi["saving"] = calculate_total_saving(transactions, rules)
        kpi["prev_saving"] = calculate_total_saving(previous, rules)

        wallet_status = calculate_wallet_status(ledger, wallet_setup, rules)
        liquid_assets = compute_liquid_assets(wallet_status, rules)
        kpi["liquidAssets"] = liquid_assets

        net_worth = calculate_net_worth_snapshot(ledger, window.end, rules=rules)
        prev_net_worth = self._previous_net_worth(ledger, previous_window, None)
        kpi["isFiltered"] = bool(filters.wallet_owner)

        diagnostics: dict[str, str] = {}
        if filters.wallet_owner:
            owner = filters.wallet_owner
            owner_view = derive(
                "Owner view",
                lambda: (
                    calculate_net_worth_snapshot(ledger, window.end, owner, rules),
                    self._previous_net_worth(ledger, previous_window, owner),
                    self._owner_wallets(wallet_status, owner),
                ),
                lambda: (net_worth, prev_net_worth, wallet_status),
            )
            net_worth, prev_net_worth, wallet_status = owner_view.value
            if not owner_view.ok:
                diagnostics["ownerView"] = owner_view.error or ""

        kpi["netWorth"] = net_worth["netWorth"]
        kpi["prev_netWorth"] = prev_net_worth["netWorth"]

        expense_tree = calculate_expense_tree(transactions, previous)
        insights = derive("Financial insights", lambda: build_financial_insights(expense_tree, kpi), dict)
        if not insights.ok:
            diagnostics["financialInsights"] = insights.error or ""

        return DashboardSnapshot(
            kpiSummary=kpi,
            goalsStatus=calculate_goals_status(
                goals_setup,
                transactions,
                ledger,
                saving_category=settings.goal_saving_category,
                today=today,
                tz=settings.reporting_timezone,
            ),
            netFlow=calculate_net_flow(transactions),
            budgetStatus=calculate_budget_status(
                category_setup,
                transactions,
                over_threshold=settings.budget_over_threshold,
                warning_threshold=settings.budget_warning_threshold,
            ),
            liabilitiesUpcoming=calculate_liabilities_upcoming(
                scheduled,
                input_table,
                window,
                filters,
                rules=rules,
                today=today,
                tz=settings.reporting_timezone,
            ),
            ratios=calculate_ratios(category_setup, transactions),
            sankeyData=calculate_sankey_edges(transactions),
            totalSaving=kpi["saving"],
            expenseTreeMap=expense_tree,
            walletStatus=wallet_status,
            liquidAssets=liquid_assets,
            financialInsights=insights.value,
            diagnostics=diagnostics,
        )

    def _previous_net_worth(
        self,
        ledger: pd.DataFrame,
        previous_window: PeriodWindow,
        owner: str | None,
    ) -> NetWorthSnapshot:
        if previous_window.is_degenerate or previous_window.end.year <= 1970:
            return NetWorthSnapshot(**_EMPTY_NET_WORTH)
        return calculate_net_worth_snapshot(ledger, previous_window.end, owner, self.rules)

    @staticmethod
    def _owner_wallets(wallets: list[WalletRow], owner: str) -> list[WalletRow]:
        return [wallet for wallet in wallets if wallet["Owner"] == owner]

    # -- filter options ---------------------------------------------------

    def get_filter_options(self, force_refresh: bool = False) -> FilterOptions:
        """Distinct values offered by the dashboard filter controls."""

        if not force_refresh:
            cached = get_json(self.cache, FILTER_OPTIONS_CACHE_KEY)
            if cached is not None:
                return cached

        settings = self.settings
        try:
            wallets = TableDecoder(self.read_table(settings.wallet_setup_table, force_refresh))
            inputs = TableDecoder(self.read_table(settings.input_table, force_refresh))
        except MissingDataError as exc:
            _logger.error("Filter options unavailable: %s", exc)
            return FilterOptions(
                wallets=[], walletOwners=[], expensePurposes=[], categories=[], subcategories=[], notes=[]
            )

        try:
            categories_source = TableDecoder(self.read_table(settings.category_setup_table, force_refresh))
        except MissingDataError:
            _logger.warning("Category setup unavailable; deriving categories from the ledger")
            categories_source = inputs

        options = FilterOptions(
            wallets=_unique(wallets.text(row, "Wallet") for row in wallets.rows),
            walletOwners=_unique(wallets.text(row, "Wallet Owner") for row in wallets.rows),
            expensePurposes=_unique(inputs.text(row, "Expense Purpose") for row in inputs.rows),
            categories=_unique(categories_source.text(row, "Category") for row in categories_source.rows),
            subcategories=_unique(categories_source.text(row, "Subcategory") for row in categories_source.rows),
            notes=_unique(inputs.text(row, "Note").strip() for row in inputs.rows),
        )
        put_if_small(
            self.cache,
            FILTER_OPTIONS_CACHE_KEY,
            options,
            settings.filter_options_cache_ttl,
            max_payload=settings.cache_max_payload,
        )
        return options
