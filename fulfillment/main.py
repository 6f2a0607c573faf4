import logging
import time
from fastapi import FastAPI
from sqlalchemy.exc import OperationalError
from fulfillment.core.config import settings

# 1. Infrastructure & Application Imports
from fulfillment.infrastructure.database import engine, create_tables
from fulfillment.infrastructure.notification_service import NotificationService
from fulfillment.infrastructure.printing import FilePrinter
from fulfillment.infrastructure.report_cache import ReportCache
from fulfillment.infrastructure.repositories.order_repository import SqlOrderRepository
from fulfillment.application.batch import BatchOperator
from fulfillment.application.dashboard import OrderDashboard
from fulfillment.application.status_service import OrderStatusService
from fulfillment.application.tickets import TicketFormatter
from fulfillment.interfaces import orders_router

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

# ---------------------------------------------------------
# DATABASE CONNECTION (With Retry Logic)
# ---------------------------------------------------------
MAX_RETRIES = 10
WAIT_SECONDS = 3

for attempt in range(MAX_RETRIES):
    try:
        logger.info(f"🔄 Attempting DB connection ({attempt + 1}/{MAX_RETRIES})...")
        create_tables(engine)
        logger.info("✅ DB Connected and Tables Created.")
        break
    except OperationalError:
        logger.warning(f"⚠️ DB not ready yet. Waiting {WAIT_SECONDS}s...")
        time.sleep(WAIT_SECONDS)
else:
    logger.error("❌ Could not connect to DB after retries.")

# ---------------------------------------------------------
# COMPOSITION ROOT
# ---------------------------------------------------------
order_repo = SqlOrderRepository()
status_service = OrderStatusService(order_repo=order_repo, notifier=NotificationService())
printer = FilePrinter(settings.PRINT_SPOOL_DIR) if settings.PRINT_SPOOL_DIR else None

app.state.dashboard = OrderDashboard(
    order_repo=order_repo,
    status_service=status_service,
    batch_operator=BatchOperator(status_service=status_service, order_repo=order_repo),
    tickets=TicketFormatter(printer=printer),
    cache=ReportCache.from_url(settings.REDIS_URL, ttl=settings.REPORT_CACHE_TTL),
)

# Include Routers
app.include_router(orders_router.router)
app.include_router(orders_router.reports)

@app.get("/")
def health_check():
    return {"status": "active", "system": "Order Fulfillment Engine"}
