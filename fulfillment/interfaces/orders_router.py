from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel
import logging

from fulfillment.application.dashboard import OrderDashboard
from fulfillment.application.tickets import KITCHEN, MODES
from fulfillment.domain.errors import InvalidTransition, OrderNotFound, StaleOrderError
from fulfillment.domain.models import OrderStatus

router = APIRouter(prefix="/orders", tags=["orders"])
reports = APIRouter(prefix="/reports", tags=["reports"])
logger = logging.getLogger(__name__)


class StatusUpdate(BaseModel):
    status: OrderStatus
    actor: Optional[str] = None


class BatchStatusUpdate(BaseModel):
    order_ids: List[str]
    status: OrderStatus
    actor: Optional[str] = None


class BatchPrinted(BaseModel):
    order_ids: List[str]
    printed: bool = True


class BatchPrint(BaseModel):
    order_ids: List[str]
    mode: str = KITCHEN


def get_dashboard(request: Request) -> OrderDashboard:
    """The dashboard lives in app.state (set by the composition root)."""
    return request.app.state.dashboard


def _check_mode(mode: str) -> None:
    if mode not in MODES:
        raise HTTPException(status_code=400, detail=f"mode must be one of {', '.join(MODES)}")


@router.get("")
def list_orders(
    request: Request,
    status: Optional[List[OrderStatus]] = Query(None),
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    q: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
):
    orders = get_dashboard(request).find_orders(status=status, date_from=date_from, date_to=date_to, search=q, limit=limit)
    return {"orders": orders, "count": len(orders)}


@router.get("/export.csv")
def export_orders(
    request: Request,
    status: Optional[List[OrderStatus]] = Query(None),
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    include_summary: bool = False,
    filename: str = "orders.csv",
):
    download = get_dashboard(request).export_csv(
        status=status,
        date_from=date_from,
        date_to=date_to,
        include_summary=include_summary,
        filename=filename,
    )
    return Response(
        content=download.content,
        media_type=download.media_type,
        headers={"Content-Disposition": download.content_disposition},
    )


@router.post("/batch/status")
async def batch_status(request: Request, payload: BatchStatusUpdate):
    result = await get_dashboard(request).batch_status(payload.order_ids, payload.status, actor=payload.actor)
    return result


@router.post("/batch/printed")
async def batch_printed(request: Request, payload: BatchPrinted):
    return await get_dashboard(request).batch_printed(payload.order_ids, printed=payload.printed)


@router.post("/print")
def print_orders(request: Request, payload: BatchPrint):
    _check_mode(payload.mode)
    return get_dashboard(request).print_orders(payload.order_ids, payload.mode)


@router.get("/{order_id}")
def get_order(request: Request, order_id: str):
    try:
        return get_dashboard(request).get_order(order_id)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{order_id}/transitions")
def allowed_transitions(request: Request, order_id: str):
    try:
        allowed = get_dashboard(request).status_service.get_allowed_actions(order_id)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"order_id": order_id, "allowed": [s.value for s in allowed]}


@router.put("/{order_id}/status")
async def update_status(request: Request, order_id: str, payload: StatusUpdate):
    try:
        order = await get_dashboard(request).change_status(order_id, payload.status, actor=payload.actor)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidTransition, StaleOrderError) as e:
        # Never retried automatically; staff reload and pick a valid action.
        logger.info(f"Status update refused: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    return order


@router.get("/{order_id}/history")
async def status_history(request: Request, order_id: str):
    try:
        history = await get_dashboard(request).status_history(order_id)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"order_id": order_id, "history": history}


@router.get("/{order_id}/ticket", response_class=PlainTextResponse)
def ticket(request: Request, order_id: str, mode: str = KITCHEN):
    _check_mode(mode)
    try:
        return get_dashboard(request).ticket(order_id, mode)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@reports.get("/summary")
def summary(request: Request, date_from: Optional[date] = None, date_to: Optional[date] = None):
    return get_dashboard(request).summary(date_from=date_from, date_to=date_to)


@reports.get("/popular-items")
def popular_items(
    request: Request,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    limit: int = Query(10, ge=1),
):
    return {"items": get_dashboard(request).popular_items(date_from=date_from, date_to=date_to, limit=limit)}


@reports.get("/by-date")
def by_date(request: Request, date_from: Optional[date] = None, date_to: Optional[date] = None):
    dashboard = get_dashboard(request)
    grouped = dashboard.orders_by_date(date_from=date_from, date_to=date_to)
    revenue = dashboard.revenue_by_date(date_from=date_from, date_to=date_to)
    return {
        "days": [
            {"date": day, "orders": len(orders), "revenue": f"{revenue[day]:.2f}", "order_ids": [o.id for o in orders]}
            for day, orders in grouped.items()
        ]
    }
