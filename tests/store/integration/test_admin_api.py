"""Integration tests for the store back office."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers
from starlette.websockets import WebSocketDisconnect
from store.api import admin_router
from store.checkout.initiation import InitiateCheckout
from store.checkout.verification import VerifyPayment
from store.order.order import Order
from store.product.product import Product


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(admin_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def order_id(customer, add_product, fill_cart, gateway, delivery):
    fill_cart(customer.user.id, (add_product(stock_quantity=20), 2))
    session = current_domain.process(
        InitiateCheckout(
            customer_id=customer.user.id,
            payment_option="half",
            success_url="http://ok",
            cancel_url="http://cancel",
            **delivery,
        ),
        asynchronous=False,
    )
    gateway.complete_session(session["session_id"])
    return current_domain.process(VerifyPayment(session_id=session["session_id"]), asynchronous=False)["order_id"]


NEW_PRODUCT = {
    "name": "Kenyan AA Coffee",
    "description": "Single-origin beans from Nyeri.",
    "price": 14.99,
    "weight_kg": 0.5,
    "stock_quantity": 40,
    "category": "beverages",
}


class TestAdminAccess:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/admin/dashboard"),
            ("get", "/admin/orders"),
            ("post", "/admin/products"),
            ("delete", "/admin/products/p-1"),
        ],
        ids=["dashboard", "orders", "create-product", "delete-product"],
    )
    def test_customer_is_sent_home(self, client, customer, headers_for, method, path):
        kwargs = {"json": NEW_PRODUCT} if method == "post" else {}
        response = getattr(client, method)(path, headers=headers_for(customer), **kwargs)

        assert response.status_code == 403
        assert response.json()["detail"]["redirect"] == "/"

    def test_anonymous_is_sent_to_sign_in(self, client):
        response = client.get("/admin/dashboard")

        assert response.status_code == 401
        assert response.json()["detail"]["redirect"] == "/auth"


class TestAdminProducts:
    def test_create_product(self, client, admin, headers_for):
        response = client.post("/admin/products", json=NEW_PRODUCT, headers=headers_for(admin))

        assert response.status_code == 201
        product = current_domain.repository_for(Product).get(response.json()["product_id"])
        assert product.name == "Kenyan AA Coffee"
        assert product.stock_quantity == 40

    def test_create_product_with_unknown_category(self, client, admin, headers_for):
        response = client.post(
            "/admin/products", json={**NEW_PRODUCT, "category": "electronics"}, headers=headers_for(admin)
        )
        assert response.status_code == 400

    def test_update_product(self, client, admin, headers_for, add_product):
        product = add_product()

        response = client.put(f"/admin/products/{product.id}", json={"stock_quantity": 7}, headers=headers_for(admin))

        assert response.status_code == 200
        updated = current_domain.repository_for(Product).get(product.id)
        assert updated.stock_quantity == 7
        assert updated.price == product.price

    def test_delete_product(self, client, admin, headers_for, add_product):
        product = add_product()

        assert client.delete(f"/admin/products/{product.id}", headers=headers_for(admin)).status_code == 200
        assert client.delete(f"/admin/products/{product.id}", headers=headers_for(admin)).status_code == 404

    def test_upload_image(self, client, admin, headers_for, add_product):
        product = add_product()

        response = client.post(
            f"/admin/products/{product.id}/image",
            files={"file": ("tea.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
            headers=headers_for(admin),
        )

        assert response.status_code == 200
        image_url = response.json()["image_url"]
        assert current_domain.repository_for(Product).get(product.id).image_url == image_url

    def test_upload_rejects_non_images(self, client, admin, headers_for, add_product):
        product = add_product()

        response = client.post(
            f"/admin/products/{product.id}/image",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=headers_for(admin),
        )
        assert response.status_code == 400


class TestAdminDashboard:
    def test_inventory_stats(self, client, admin, headers_for, add_product):
        add_product(price=10.0, stock_quantity=20, weight_kg=0.5)
        add_product(name="Plantain Chips", price=2.5, stock_quantity=4, weight_kg=0.25, category="snacks")

        stats = client.get("/admin/dashboard", headers=headers_for(admin)).json()

        assert stats["total_value"] == 210.0
        assert stats["total_weight"] == 11.0
        assert stats["low_stock_items"] == 1
        assert stats["products"][0]["name"] == "Plantain Chips"


class TestAdminOrders:
    def test_list_orders_with_customer_details(self, client, admin, headers_for, order_id):
        orders = client.get("/admin/orders", headers=headers_for(admin)).json()["orders"]

        assert [o["id"] for o in orders] == [order_id]
        assert orders[0]["customer_email"] == "amina@example.com"
        assert orders[0]["customer_name"] == "Amina Otieno"
        assert orders[0]["city"] == "Nairobi"
        assert orders[0]["items"][0]["quantity"] == 2

    def test_update_status(self, client, admin, headers_for, order_id):
        response = client.put(f"/admin/orders/{order_id}/status", json={"status": "cancelled"}, headers=headers_for(admin))

        assert response.status_code == 200
        assert current_domain.repository_for(Order).get(order_id).status == "cancelled"

    def test_invalid_transition(self, client, admin, headers_for, order_id):
        response = client.put(f"/admin/orders/{order_id}/status", json={"status": "delivered"}, headers=headers_for(admin))
        assert response.status_code == 400

    def test_approve(self, client, admin, headers_for, order_id):
        response = client.post(f"/admin/orders/{order_id}/approve", headers=headers_for(admin))

        assert response.status_code == 200
        order = current_domain.repository_for(Order).get(order_id)
        assert order.approved is True
        assert order.status == "processing"

    def test_fully_paid_order_is_not_approved(self, client, admin, headers_for, order_id):
        order = current_domain.repository_for(Order).get(order_id)
        order.payment_status = "full"
        current_domain.repository_for(Order).add(order)

        response = client.post(f"/admin/orders/{order_id}/approve", headers=headers_for(admin))

        assert response.status_code == 400
        assert current_domain.repository_for(Order).get(order_id).approved is False

    def test_approve_unknown_order(self, client, admin, headers_for):
        assert client.post("/admin/orders/missing/approve", headers=headers_for(admin)).status_code == 404


class TestAlertFeed:
    def test_customer_connection_is_refused(self, client, customer):
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect(f"/admin/feed?token={customer.access_token}") as websocket:
                websocket.receive_json()
        assert exc.value.code == 1008

    def test_missing_token_is_refused(self, client):
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect("/admin/feed") as websocket:
                websocket.receive_json()
        assert exc.value.code == 1008
