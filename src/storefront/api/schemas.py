"""Pydantic request/response schemas for the Storefront API.

These are external contracts, separate from the internal Protean
commands and the engine's read-model dataclasses.
"""

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class AddItemRequest(BaseModel):
    product_id: str
    quantity: int = 1

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "p1",
                    "quantity": 1,
                }
            ]
        }
    }


class UpdateQuantityRequest(BaseModel):
    quantity: int


class ChangeQuantityRequest(BaseModel):
    delta: int


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class NoticeSchema(BaseModel):
    kind: str
    message: str
    product_id: str | None = None


class ProductSchema(BaseModel):
    id: str
    name: str
    current_price: int
    original_price: int
    stock: int
    on_flash_sale: bool
    on_suggested_sale: bool
    label: str
    available: bool


class OrderLineSchema(BaseModel):
    product_id: str
    name: str
    unit_price: int
    quantity: int
    line_total: int
    discount_rate: float
    discount_kind: str


class LineDiscountSchema(BaseModel):
    name: str
    rate_percent: int


class PointsSchema(BaseModel):
    base_points: int
    tuesday_bonus: int
    set_bonus: int
    full_set_bonus: int
    quantity_bonus: int
    total_points: int
    details: list[str]
    display: str


class StockStatusSchema(BaseModel):
    total_stock: int
    low_stock: list[str]
    out_of_stock: list[str]
    messages: list[str]


class OrderSummarySchema(BaseModel):
    lines: list[OrderLineSchema]
    item_count: int
    subtotal: float
    total_discount: float
    tuesday_discount: float
    final_total: float
    savings: float
    savings_rate: float
    per_line_discounts: list[LineDiscountSchema]
    is_tuesday: bool
    has_bulk_discount: bool
    points: PointsSchema
    stock_status: StockStatusSchema


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class AddItemResponse(BaseModel):
    requested: int
    added: int
    success: bool
    partial: bool
    notices: list[NoticeSchema] = []
    summary: OrderSummarySchema


class CartUpdateResponse(BaseModel):
    success: bool
    notices: list[NoticeSchema] = []
    summary: OrderSummarySchema


class ReleaseResponse(BaseModel):
    released: int
    summary: OrderSummarySchema


class PriceResponse(BaseModel):
    product_id: str
    current_price: int
    notices: list[NoticeSchema] = []


class RestoredResponse(BaseModel):
    restored: int


class PromotionStatusResponse(BaseModel):
    running: bool
