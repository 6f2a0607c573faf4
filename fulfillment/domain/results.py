"""Result shapes returned by batch, print, export and reporting operations."""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class BatchError(BaseModel):
    order_id: str
    error: str


class BatchResult(BaseModel):
    success: bool
    updated: int = 0
    failed: int = 0
    errors: List[BatchError] = Field(default_factory=list)


class PrintResult(BaseModel):
    success: bool
    order_id: str
    mode: str
    printed: bool = False  # True only when a printer accepted the text
    content: str = ""
    error: Optional[str] = None


class BatchPrintResult(BaseModel):
    success: bool
    count: int
    failed: int = 0


class SummaryStats(BaseModel):
    total_orders: int
    total_revenue: Decimal
    average_order_value: Decimal
    completed_orders: int
    pending_orders: int = 0


class PopularItem(BaseModel):
    name: str
    count: int


class CsvDownload(BaseModel):
    filename: str
    content: str
    media_type: str = "text/csv"

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'
