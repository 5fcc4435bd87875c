"""FastAPI routes for the Storefront — catalogue, cart, promotions."""

from contextlib import contextmanager

from fastapi import APIRouter

from storefront.api.schemas import (
    AddItemRequest,
    AddItemResponse,
    CartUpdateResponse,
    ChangeQuantityRequest,
    LineDiscountSchema,
    NoticeSchema,
    OrderLineSchema,
    OrderSummarySchema,
    PointsSchema,
    PriceResponse,
    ProductSchema,
    PromotionStatusResponse,
    ReleaseResponse,
    RestoredResponse,
    StockStatusSchema,
    UpdateQuantityRequest,
)
from storefront.api.session import get_storefront
from storefront.summary.projector import OrderSummary

router = APIRouter(prefix="/storefront", tags=["storefront"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
@contextmanager
def _collect_notices(store):
    """Gather the notices raised while the block runs."""
    collected = []
    store.add_notice_listener(collected.append)
    try:
        yield collected
    finally:
        store.remove_notice_listener(collected.append)


def _notice_schemas(notices) -> list[NoticeSchema]:
    return [NoticeSchema(kind=n.kind, message=n.message, product_id=n.product_id) for n in notices]


def _summary_schema(summary: OrderSummary) -> OrderSummarySchema:
    discounts = summary.discounts
    points = summary.points
    stock = summary.stock_status
    return OrderSummarySchema(
        lines=[
            OrderLineSchema(
                product_id=line.product.id,
                name=line.product.name,
                unit_price=line.product.current_price,
                quantity=line.quantity,
                line_total=line.line_total,
                discount_rate=line.discount.rate,
                discount_kind=line.discount.kind,
            )
            for line in summary.lines
        ],
        item_count=summary.item_count,
        subtotal=discounts.subtotal,
        total_discount=discounts.total_discount,
        tuesday_discount=discounts.tuesday_discount,
        final_total=discounts.final_total,
        savings=summary.savings,
        savings_rate=summary.savings_rate,
        per_line_discounts=[
            LineDiscountSchema(name=d.name, rate_percent=d.rate_percent) for d in discounts.per_line_discounts
        ],
        is_tuesday=discounts.is_tuesday,
        has_bulk_discount=discounts.has_bulk_discount,
        points=PointsSchema(
            base_points=points.base_points,
            tuesday_bonus=points.tuesday_bonus,
            set_bonus=points.set_bonus,
            full_set_bonus=points.full_set_bonus,
            quantity_bonus=points.quantity_bonus,
            total_points=points.total_points,
            details=list(points.details),
            display=summary.points_display,
        ),
        stock_status=StockStatusSchema(
            total_stock=stock.total_stock,
            low_stock=list(stock.low_stock),
            out_of_stock=list(stock.out_of_stock),
            messages=list(stock.messages),
        ),
    )


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
@router.get("/products", response_model=list[ProductSchema])
async def list_products() -> list[ProductSchema]:
    return [
        ProductSchema(
            id=option.product.id,
            name=option.product.name,
            current_price=option.product.current_price,
            original_price=option.product.original_price,
            stock=option.product.stock,
            on_flash_sale=option.product.on_flash_sale,
            on_suggested_sale=option.product.on_suggested_sale,
            label=option.label,
            available=option.available,
        )
        for option in get_storefront().product_options()
    ]


@router.post("/products/{product_id}/flash-sale", response_model=PriceResponse)
async def apply_flash_sale(product_id: str) -> PriceResponse:
    store = get_storefront()
    with _collect_notices(store) as notices:
        price = store.apply_flash_sale(product_id)
    return PriceResponse(product_id=product_id, current_price=price, notices=_notice_schemas(notices))


@router.post("/products/{product_id}/suggested-sale", response_model=PriceResponse)
async def apply_suggested_sale(product_id: str) -> PriceResponse:
    store = get_storefront()
    with _collect_notices(store) as notices:
        price = store.apply_suggested_sale(product_id)
    return PriceResponse(product_id=product_id, current_price=price, notices=_notice_schemas(notices))


@router.delete("/products/{product_id}/discount", response_model=PriceResponse)
async def remove_discount(product_id: str) -> PriceResponse:
    price = get_storefront().remove_discount(product_id)
    return PriceResponse(product_id=product_id, current_price=price)


@router.delete("/discounts", response_model=RestoredResponse)
async def remove_all_discounts() -> RestoredResponse:
    return RestoredResponse(restored=get_storefront().remove_all_discounts())


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@router.get("/cart", response_model=OrderSummarySchema)
async def get_order_summary() -> OrderSummarySchema:
    return _summary_schema(get_storefront().get_order_summary())


@router.post("/cart/items", response_model=AddItemResponse)
async def add_item(body: AddItemRequest) -> AddItemResponse:
    store = get_storefront()
    with _collect_notices(store) as notices:
        result = store.add_item(body.product_id, body.quantity)
    return AddItemResponse(
        requested=result.requested,
        added=result.added,
        success=result.success,
        partial=result.partial,
        notices=_notice_schemas(notices),
        summary=_summary_schema(store.get_order_summary()),
    )


@router.put("/cart/items/{product_id}", response_model=CartUpdateResponse)
async def update_quantity(product_id: str, body: UpdateQuantityRequest) -> CartUpdateResponse:
    store = get_storefront()
    with _collect_notices(store) as notices:
        success = store.update_quantity(product_id, body.quantity)
    return CartUpdateResponse(
        success=success,
        notices=_notice_schemas(notices),
        summary=_summary_schema(store.get_order_summary()),
    )


@router.post("/cart/items/{product_id}/change", response_model=CartUpdateResponse)
async def change_quantity(product_id: str, body: ChangeQuantityRequest) -> CartUpdateResponse:
    store = get_storefront()
    with _collect_notices(store) as notices:
        success = store.change_quantity(product_id, body.delta)
    return CartUpdateResponse(
        success=success,
        notices=_notice_schemas(notices),
        summary=_summary_schema(store.get_order_summary()),
    )


@router.delete("/cart/items/{product_id}", response_model=ReleaseResponse)
async def remove_item(product_id: str) -> ReleaseResponse:
    store = get_storefront()
    released = store.remove_item(product_id)
    return ReleaseResponse(released=released, summary=_summary_schema(store.get_order_summary()))


@router.delete("/cart", response_model=ReleaseResponse)
async def clear_cart() -> ReleaseResponse:
    store = get_storefront()
    released = store.clear_cart()
    return ReleaseResponse(released=released, summary=_summary_schema(store.get_order_summary()))


# ---------------------------------------------------------------------------
# Promotions
# ---------------------------------------------------------------------------
@router.get("/promotions", response_model=PromotionStatusResponse)
async def promotion_status() -> PromotionStatusResponse:
    return PromotionStatusResponse(running=get_storefront().promotions_running)


@router.post("/promotions/start", response_model=PromotionStatusResponse)
async def start_promotions() -> PromotionStatusResponse:
    store = get_storefront()
    store.start_promotions()
    return PromotionStatusResponse(running=store.promotions_running)


@router.post("/promotions/stop", response_model=PromotionStatusResponse)
async def stop_promotions() -> PromotionStatusResponse:
    store = get_storefront()
    store.stop_promotions()
    return PromotionStatusResponse(running=store.promotions_running)
