"""FastAPI endpoints for the Store domain: catalogue, cart, checkout and orders."""

import os

from fastapi import APIRouter, Depends, HTTPException
from protean.utils.globals import current_domain

from identity.guard import SessionContext, current_session, require_customer
from store.api.schemas import (
    AddCommentRequest,
    AddToCartRequest,
    CartLineResponse,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    CommentIdResponse,
    CommentResponse,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
    StatusResponse,
    UpdateCartItemRequest,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from store.cart.cart import ShoppingCart
from store.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity, priced_lines
from store.checkout.errors import CheckoutError
from store.checkout.initiation import InitiateCheckout
from store.checkout.pricing import round_cents, to_decimal
from store.checkout.verification import VerifyPayment
from store.domain import logger
from store.product.comments import AddComment, ProductComment
from store.product.product import Product

product_router = APIRouter(prefix="/products", tags=["products"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


def product_payload(product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "weight_kg": product.weight_kg,
        "stock_quantity": product.stock_quantity,
        "category": product.category,
        "image_url": product.image_url,
        "video_url": product.video_url,
        "low_stock": product.is_low_stock,
        "created_at": product.created_at,
    }


def checkout_http_error(exc: CheckoutError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_dict())


# --- Catalogue endpoints ---


@product_router.get("", response_model=ProductListResponse)
async def list_products(search: str | None = None, category: str | None = None) -> ProductListResponse:
    products = current_domain.repository_for(Product).catalogue(search=search, category=category)
    return ProductListResponse(products=[ProductResponse(**product_payload(p)) for p in products])


@product_router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(product_id: str) -> ProductDetailResponse:
    product = current_domain.repository_for(Product).get(product_id)
    comments = current_domain.repository_for(ProductComment).for_product(product_id)
    return ProductDetailResponse(
        **product_payload(product),
        comments=[
            CommentResponse(
                id=str(c.id),
                user_id=str(c.user_id),
                author_name=c.author_name,
                comment=c.comment,
                created_at=c.created_at,
            )
            for c in comments
        ],
    )


@product_router.post("/{product_id}/comments", status_code=201, response_model=CommentIdResponse)
async def add_comment(
    product_id: str,
    body: AddCommentRequest,
    session: SessionContext = Depends(current_session),
) -> CommentIdResponse:
    command = AddComment(
        product_id=product_id,
        user_id=session.user_id,
        author_name=session.full_name or session.email,
        comment=body.comment,
    )
    comment_id = current_domain.process(command, asynchronous=False)
    return CommentIdResponse(comment_id=comment_id)


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
async def view_cart(session: SessionContext = Depends(current_session)) -> CartResponse:
    cart = current_domain.repository_for(ShoppingCart).for_customer(session.user_id)
    lines = []
    total = to_decimal(0)
    for line in priced_lines(cart):
        product, quantity = line["product"], line["item"].quantity
        line_total = to_decimal(product.price) * quantity
        total += line_total
        lines.append(
            CartLineResponse(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                weight_kg=product.weight_kg,
                quantity=quantity,
                stock_quantity=product.stock_quantity,
                line_total=float(round_cents(line_total)),
                image_url=product.image_url,
            )
        )
    return CartResponse(items=lines, total=float(round_cents(total)))


@cart_router.post("/items", status_code=201, response_model=StatusResponse)
async def add_to_cart(body: AddToCartRequest, session: SessionContext = Depends(current_session)) -> StatusResponse:
    command = AddToCart(customer_id=session.user_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/items/{product_id}", response_model=StatusResponse)
async def update_cart_item(
    product_id: str,
    body: UpdateCartItemRequest,
    session: SessionContext = Depends(current_session),
) -> StatusResponse:
    command = UpdateCartQuantity(customer_id=session.user_id, product_id=product_id, new_quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{product_id}", response_model=StatusResponse)
async def remove_cart_item(product_id: str, session: SessionContext = Depends(current_session)) -> StatusResponse:
    current_domain.process(RemoveFromCart(customer_id=session.user_id, product_id=product_id), asynchronous=False)
    return StatusResponse()


# --- Checkout endpoints ---


@checkout_router.post("", response_model=CheckoutResponse)
async def start_checkout(body: CheckoutRequest, session: SessionContext = Depends(require_customer)) -> CheckoutResponse:
    site_url = os.environ.get("SITE_URL", "http://localhost:8000").rstrip("/")
    command = InitiateCheckout(
        customer_id=session.user_id,
        customer_email=session.email,
        payment_option=body.payment_option,
        success_url=f"{site_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=f"{site_url}/checkout",
        **body.delivery_address.model_dump(),
    )
    try:
        result = current_domain.process(command, asynchronous=False)
    except CheckoutError as exc:
        logger.info("Checkout refused", customer_id=session.user_id, code=exc.code)
        raise checkout_http_error(exc) from exc
    return CheckoutResponse(**result)


@checkout_router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(body: VerifyPaymentRequest) -> VerifyPaymentResponse:
    try:
        result = current_domain.process(VerifyPayment(session_id=body.session_id), asynchronous=False)
    except CheckoutError as exc:
        logger.info("Payment verification refused", session_id=body.session_id, code=exc.code)
        raise checkout_http_error(exc) from exc
    return VerifyPaymentResponse(**result)
