"""Back-office endpoints for the Store domain.

Every route depends on ``require_admin``; the capability it returns is the
only way in.
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, WebSocket
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from identity.account.profile import UserProfile
from identity.domain import identity
from identity.guard import AdminCapability, require_admin, resolve_session
from shared.streaming import FeedStream
from store.api.schemas import (
    CreateProductRequest,
    ImageUploadResponse,
    InventoryStatsResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    ProductIdResponse,
    StatusResponse,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
)
from store.dashboard import inventory_stats
from store.domain import logger
from store.notifications.admin_alerts import AdminAlerts
from store.order.management import ApproveOrder, UpdateOrderStatus
from store.order.order import Order
from store.product.images import upload_product_image
from store.product.management import AddProduct, RemoveProduct, UpdateProduct
from store.storage.port import StorageError

admin_router = APIRouter(prefix="/admin", tags=["admin"])


def _customer_profiles(customer_ids):
    profiles = {}
    with identity.domain_context():
        repo = current_domain.repository_for(UserProfile)
        for customer_id in customer_ids:
            try:
                profiles[customer_id] = repo.get(customer_id)
            except ObjectNotFoundError:
                profiles[customer_id] = None
    return profiles


def order_payload(order, profile=None) -> dict:
    address = order.delivery_address
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "customer_name": profile.full_name if profile else None,
        "customer_email": profile.email if profile else None,
        "status": order.status,
        "payment_status": order.payment_status,
        "total_amount": order.total_amount,
        "paid_amount": order.paid_amount,
        "approved": bool(order.approved),
        "street_address": address.street_address if address else None,
        "apartment_suite": address.apartment_suite if address else None,
        "city": address.city if address else None,
        "state": address.state if address else None,
        "zip_code": address.zip_code if address else None,
        "delivery_notes": address.delivery_notes if address else None,
        "items": [
            OrderItemResponse(
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                price=item.price,
                weight_kg=item.weight_kg,
            )
            for item in order.items
        ],
        "created_at": order.created_at,
    }


# --- Dashboard ---


@admin_router.get("/dashboard", response_model=InventoryStatsResponse)
async def dashboard(_admin: AdminCapability = Depends(require_admin)) -> InventoryStatsResponse:
    return InventoryStatsResponse(**inventory_stats())


# --- Products ---


@admin_router.post("/products", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, _admin: AdminCapability = Depends(require_admin)) -> ProductIdResponse:
    product_id = current_domain.process(AddProduct(**body.model_dump()), asynchronous=False)
    return ProductIdResponse(product_id=product_id)


@admin_router.put("/products/{product_id}", response_model=StatusResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    _admin: AdminCapability = Depends(require_admin),
) -> StatusResponse:
    current_domain.process(
        UpdateProduct(product_id=product_id, **body.model_dump(exclude_none=True)),
        asynchronous=False,
    )
    return StatusResponse()


@admin_router.delete("/products/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str, _admin: AdminCapability = Depends(require_admin)) -> StatusResponse:
    current_domain.process(RemoveProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@admin_router.post("/products/{product_id}/image", response_model=ImageUploadResponse)
async def upload_image(
    product_id: str,
    file: UploadFile = File(...),
    _admin: AdminCapability = Depends(require_admin),
) -> ImageUploadResponse:
    content = await file.read()
    try:
        image_url = upload_product_image(product_id, file.filename, content, file.content_type)
    except StorageError as exc:
        raise HTTPException(status_code=502, detail={"message": str(exc)}) from exc
    return ImageUploadResponse(image_url=image_url)


# --- Orders ---


@admin_router.get("/orders", response_model=OrderListResponse)
async def list_orders(_admin: AdminCapability = Depends(require_admin)) -> OrderListResponse:
    orders = current_domain.repository_for(Order).newest_first()
    profiles = _customer_profiles({str(o.customer_id) for o in orders})
    return OrderListResponse(
        orders=[OrderResponse(**order_payload(o, profiles.get(str(o.customer_id)))) for o in orders]
    )


@admin_router.put("/orders/{order_id}/status", response_model=StatusResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    _admin: AdminCapability = Depends(require_admin),
) -> StatusResponse:
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return StatusResponse()


@admin_router.post("/orders/{order_id}/approve", response_model=StatusResponse)
async def approve_order(order_id: str, _admin: AdminCapability = Depends(require_admin)) -> StatusResponse:
    current_domain.process(ApproveOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


# --- Live alerts ---


@admin_router.websocket("/feed")
async def alert_feed(websocket: WebSocket, token: str | None = None):
    session = resolve_session(token)
    if session is None or not session.is_admin:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    stream = FeedStream(websocket)
    with AdminAlerts(
        on_alert=lambda alert: stream.push(
            {"kind": alert.kind, "message": alert.message, "row_id": alert.row_id}
        )
    ):
        logger.info("Admin alert feed opened", user_id=session.user_id)
        await stream.run()
