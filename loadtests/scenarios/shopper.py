"""Shopper load test scenarios.

One stateful SequentialTaskSet journey covering the path from sign-up to a
hosted checkout session. Against the development gateway the session is never
paid, so verification is expected to answer 402 PAYMENT_INCOMPLETE.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import cart_item_data, checkout_data, comment_text, sign_up_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState


class ShopperJourney(SequentialTaskSet):
    """Sign Up -> Sign In -> Browse -> Add Items -> View Cart -> Checkout -> Verify.

    Generates events: UserRegistered, CartItemAdded (x2), and CommentPosted
    for roughly a third of shoppers.
    """

    def on_start(self):
        self.state = ShopperState()

    @task
    def sign_up(self):
        payload = sign_up_data()
        with self.client.post("/auth/sign-up", json=payload, catch_response=True, name="POST /auth/sign-up") as resp:
            if resp.status_code == 201:
                self.state.email = payload["email"]
                self.state.password = payload["password"]
                self.state.user_id = resp.json()["user_id"]
            else:
                resp.failure(f"Sign up failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def sign_in(self):
        with self.client.post(
            "/auth/sign-in",
            json={"email": self.state.email, "password": self.state.password},
            catch_response=True,
            name="POST /auth/sign-in",
        ) as resp:
            if resp.status_code == 200:
                self.state.access_token = resp.json()["access_token"]
            else:
                resp.failure(f"Sign in failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def browse_catalogue(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code == 200:
                products = [p for p in resp.json()["products"] if p["stock_quantity"] > 0]
                self.state.product_ids = [p["id"] for p in products]
                if not self.state.product_ids:
                    resp.failure("Catalogue has nothing in stock; run AdminUser first")
                    self.interrupt()
            else:
                resp.failure(f"Browse failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_product(self):
        product_id = random.choice(self.state.product_ids)
        with self.client.get(f"/products/{product_id}", catch_response=True, name="GET /products/{id}") as resp:
            if resp.status_code != 200:
                resp.failure(f"View product failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def leave_comment(self):
        if random.random() > 0.33:
            return
        product_id = random.choice(self.state.product_ids)
        with self.client.post(
            f"/products/{product_id}/comments",
            json={"comment": comment_text()},
            headers=self.state.headers,
            catch_response=True,
            name="POST /products/{id}/comments",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Comment failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def add_items(self):
        picks = random.sample(self.state.product_ids, k=min(2, len(self.state.product_ids)))
        for product_id in picks:
            with self.client.post(
                "/cart/items",
                json=cart_item_data(product_id),
                headers=self.state.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if resp.status_code == 201:
                    self.state.cart_product_ids.append(product_id)
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def view_cart(self):
        with self.client.get("/cart", headers=self.state.headers, catch_response=True, name="GET /cart") as resp:
            if resp.status_code != 200:
                resp.failure(f"View cart failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif not resp.json()["items"]:
                resp.failure("Cart is empty after adding items")
                self.interrupt()

    @task
    def checkout(self):
        with self.client.post(
            "/checkout",
            json=checkout_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /checkout",
        ) as resp:
            if resp.status_code == 200:
                self.state.session_id = resp.json()["session_id"]
            elif resp.status_code == 409:
                # Another shopper bought the last units
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def verify_payment(self):
        with self.client.post(
            "/checkout/verify",
            json={"session_id": self.state.session_id},
            headers=self.state.headers,
            catch_response=True,
            name="POST /checkout/verify",
        ) as resp:
            if resp.status_code in (200, 402):
                resp.success()
            else:
                resp.failure(f"Verify failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def view_dashboard(self):
        with self.client.get(
            "/dashboard", headers=self.state.headers, catch_response=True, name="GET /dashboard"
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Dashboard failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """A new customer working through to checkout."""

    wait_time = between(1, 3)
    tasks = [ShopperJourney]
