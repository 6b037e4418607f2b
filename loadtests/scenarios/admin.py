"""Store admin load test scenarios.

Keeps the catalogue stocked for ShopperUser and works the order queue.
Credentials come from KWETU_ADMIN_EMAIL / KWETU_ADMIN_PASSWORD; the account
must already hold the admin role.
"""

import os
import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import order_status, product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import AdminState


class AdminJourney(SequentialTaskSet):
    """Sign In -> Create Products -> Restock -> Dashboard -> Work Orders.

    Generates events: ProductAdded (x3), ProductDetailsUpdated, and
    OrderStatusChanged / OrderApproved when orders exist.
    """

    def on_start(self):
        self.state = AdminState()

    @task
    def sign_in(self):
        credentials = {
            "email": os.environ.get("KWETU_ADMIN_EMAIL", "owner@kwetustore.com"),
            "password": os.environ.get("KWETU_ADMIN_PASSWORD", "admin-pass"),
        }
        with self.client.post("/auth/sign-in", json=credentials, catch_response=True, name="POST /auth/sign-in") as resp:
            if resp.status_code == 200 and resp.json().get("is_admin"):
                self.state.access_token = resp.json()["access_token"]
            elif resp.status_code == 200:
                resp.failure("Signed in account is not an admin")
                self.interrupt()
            else:
                resp.failure(f"Admin sign in failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_products(self):
        for _ in range(3):
            with self.client.post(
                "/admin/products",
                json=product_data(),
                headers=self.state.headers,
                catch_response=True,
                name="POST /admin/products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["product_id"])
                else:
                    resp.failure(f"Create product failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def restock(self):
        if not self.state.product_ids:
            return
        with self.client.put(
            f"/admin/products/{random.choice(self.state.product_ids)}",
            json={"stock_quantity": random.randint(100, 500)},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /admin/products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Restock failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def view_dashboard(self):
        with self.client.get(
            "/admin/dashboard", headers=self.state.headers, catch_response=True, name="GET /admin/dashboard"
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Dashboard failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def list_orders(self):
        with self.client.get(
            "/admin/orders", headers=self.state.headers, catch_response=True, name="GET /admin/orders"
        ) as resp:
            if resp.status_code == 200:
                self.state.order_ids = [
                    o["id"]
                    for o in resp.json()["orders"]
                    if o["status"] == "pending" and o["payment_status"] == "partial" and not o["approved"]
                ]
            else:
                resp.failure(f"List orders failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def work_order(self):
        if not self.state.order_ids:
            return
        order_id = random.choice(self.state.order_ids)
        with self.client.post(
            f"/admin/orders/{order_id}/approve",
            headers=self.state.headers,
            catch_response=True,
            name="POST /admin/orders/{id}/approve",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Approve failed: {resp.status_code} — {extract_error_detail(resp)}")
        with self.client.put(
            f"/admin/orders/{order_id}/status",
            json={"status": order_status()},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /admin/orders/{id}/status",
        ) as resp:
            # Skipping a step in the status sequence is rejected with 400
            if resp.status_code in (200, 400):
                resp.success()
            else:
                resp.failure(f"Status update failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class AdminUser(HttpUser):
    wait_time = between(3, 8)
    weight = 1
    tasks = [AdminJourney]
