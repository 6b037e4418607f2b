"""Anonymous catalogue browsing.

Read-heavy traffic with no sequential dependencies: listing, searching,
filtering by category and opening product pages.
"""

import random

from locust import HttpUser, between, task

from loadtests.data_generators import category, search_term


class BrowserUser(HttpUser):
    """A visitor who never signs in."""

    wait_time = between(0.5, 2)

    def on_start(self):
        self.product_ids: list[str] = []

    @task(5)
    def list_products(self):
        resp = self.client.get("/products", name="GET /products")
        if resp.status_code == 200:
            self.product_ids = [p["id"] for p in resp.json()["products"]]

    @task(3)
    def search(self):
        self.client.get("/products", params={"search": search_term()}, name="GET /products?search")

    @task(2)
    def filter_by_category(self):
        self.client.get("/products", params={"category": category()}, name="GET /products?category")

    @task(4)
    def view_product(self):
        if not self.product_ids:
            return
        self.client.get(f"/products/{random.choice(self.product_ids)}", name="GET /products/{id}")

    @task(1)
    def health(self):
        self.client.get("/health", name="GET /health")
