import logging
from typing import Iterable, List, Optional

from fulfillment.application import export, query, reporting
from fulfillment.application.batch import BatchOperator
from fulfillment.application.status_service import OrderStatusService
from fulfillment.application.tickets import KITCHEN, TicketFormatter
from fulfillment.domain.errors import OrderNotFound
from fulfillment.domain.models import Order, StatusChange
from fulfillment.domain.results import BatchPrintResult, BatchResult, CsvDownload, PopularItem, SummaryStats
from fulfillment.infrastructure.report_cache import ReportCache
from fulfillment.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)


class OrderDashboard:
    """
    Staff dashboard entry point.

    Reads the current order set from the repository, hands it to the pure
    query/export/reporting functions, and routes writes through the status
    service and batch operator. Any write invalidates cached reports.
    """

    def __init__(
        self,
        order_repo: IOrderRepository,
        status_service: OrderStatusService,
        batch_operator: BatchOperator,
        tickets: TicketFormatter,
        cache: ReportCache,
    ):
        self.order_repo = order_repo
        self.status_service = status_service
        self.batch_operator = batch_operator
        self.tickets = tickets
        self.cache = cache

    # --- READS ---

    def find_orders(self, status=None, date_from=None, date_to=None, search: Optional[str] = None, limit: Optional[int] = None) -> List[Order]:
        orders = self.order_repo.list_orders()
        orders = query.apply_filters(orders, status=status, date_from=date_from, date_to=date_to)
        orders = query.search(orders, search)
        return orders[:limit] if limit else orders

    def get_order(self, order_id: str) -> Order:
        order = self.order_repo.get_order(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def _orders_by_id(self, order_ids: Iterable[str]) -> List[Order]:
        found = []
        for order_id in order_ids:
            order = self.order_repo.get_order(order_id)
            if order is None:
                logger.warning(f"Skipping unknown order {order_id}")
                continue
            found.append(order)
        return found

    # --- REPORTS (cached) ---

    @staticmethod
    def _range_key(name: str, date_from, date_to) -> str:
        return f"{name}:{date_from or '*'}:{date_to or '*'}"

    def summary(self, date_from=None, date_to=None) -> SummaryStats:
        key = self._range_key("summary", date_from, date_to)
        cached = self.cache.get(key)
        if cached is not None:
            return SummaryStats.model_validate(cached)
        stats = reporting.get_summary_stats(self.find_orders(date_from=date_from, date_to=date_to))
        self.cache.set(key, stats.model_dump(mode="json"))
        return stats

    def popular_items(self, date_from=None, date_to=None, limit: Optional[int] = 10) -> List[PopularItem]:
        key = self._range_key(f"popular:{limit}", date_from, date_to)
        cached = self.cache.get(key)
        if cached is not None:
            return [PopularItem.model_validate(p) for p in cached]
        items = reporting.get_popular_items(self.find_orders(date_from=date_from, date_to=date_to), limit=limit)
        self.cache.set(key, [p.model_dump(mode="json") for p in items])
        return items

    def orders_by_date(self, date_from=None, date_to=None) -> dict:
        return reporting.group_by_date(self.find_orders(date_from=date_from, date_to=date_to))

    def revenue_by_date(self, date_from=None, date_to=None) -> dict:
        return reporting.get_revenue_by_date(self.find_orders(date_from=date_from, date_to=date_to))

    def export_csv(self, status=None, date_from=None, date_to=None, include_summary: bool = False, filename: str = "orders.csv") -> CsvDownload:
        orders = self.find_orders(status=status)
        # Oldest first reads naturally in a spreadsheet.
        orders.reverse()
        return export.download_csv(
            orders,
            filename=filename,
            include_summary=include_summary,
            date_from=date_from,
            date_to=date_to,
        )

    # --- TICKETS ---

    def ticket(self, order_id: str, mode: str = KITCHEN) -> str:
        return self.tickets.render(self.get_order(order_id), mode)

    def print_orders(self, order_ids: Iterable[str], mode: str = KITCHEN) -> BatchPrintResult:
        return self.tickets.batch_print(self._orders_by_id(order_ids), mode)

    # --- WRITES ---

    async def change_status(self, order_id: str, new_status, actor: Optional[str] = None) -> Order:
        try:
            return await self.status_service.update_order_status(order_id, new_status, actor=actor)
        finally:
            self.cache.clear()

    async def status_history(self, order_id: str) -> List[StatusChange]:
        return await self.status_service.get_status_history(order_id)

    async def batch_status(self, order_ids: Iterable[str], new_status, actor: Optional[str] = None) -> BatchResult:
        result = await self.batch_operator.batch_update_status(order_ids, new_status, actor=actor)
        if result.updated:
            self.cache.clear()
        return result

    async def batch_printed(self, order_ids: Iterable[str], printed: bool = True) -> BatchResult:
        result = await self.batch_operator.batch_mark_printed(order_ids, printed=printed)
        if result.updated:
            self.cache.clear()
        return result
