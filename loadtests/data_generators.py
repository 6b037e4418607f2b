"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
(EmailAddress VO, product categories, price and stock bounds) and match the
exact field names expected by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

CATEGORIES = [
    "beverages",
    "fruits_vegetables",
    "snacks",
    "dry_canned",
    "bakery",
    "dairy",
    "seafoods",
    "meats_poultry",
    "groceries_staples",
]

# ---------- Identity ----------


def valid_email() -> str:
    """Generate emails that pass EmailAddress VO validation.

    Rules: exactly one @, no spaces/tabs, valid domain with dot,
    no leading/trailing dots, no consecutive dots.
    """
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def password() -> str:
    """Passwords are at least 6 characters."""
    return fake.password(length=12)


def full_name() -> str:
    return fake.name()[:255]


def sign_up_data() -> dict:
    return {"email": valid_email(), "password": password(), "full_name": full_name()}


# ---------- Catalogue ----------


def category() -> str:
    return random.choice(CATEGORIES)


def product_data() -> dict:
    """Generate CreateProductRequest payload matching schema field names."""
    word = fake.word().capitalize()
    return {
        "name": f"{word} {fake.word()}"[:255],
        "description": fake.sentence(),
        "price": round(random.uniform(1.0, 80.0), 2),
        "weight_kg": round(random.uniform(0.1, 5.0), 2),
        "stock_quantity": random.randint(50, 500),
        "category": category(),
    }


def search_term() -> str:
    return random.choice(["tea", "coffee", "maize", "mango", "chapati", "fish", fake.word()])


def comment_text() -> str:
    return fake.sentence(nb_words=12)


# ---------- Cart & Checkout ----------


def cart_item_data(product_id: str) -> dict:
    return {"product_id": product_id, "quantity": random.randint(1, 3)}


def delivery_address() -> dict:
    """Generate DeliveryAddressSchema payload."""
    return {
        "street_address": fake.street_address()[:255],
        "apartment_suite": random.choice([None, f"Apt {random.randint(1, 40)}"]),
        "city": fake.city()[:100],
        "state": fake.state()[:100],
        "zip_code": fake.postcode()[:20],
        "delivery_notes": random.choice([None, "Call on arrival", "Leave at the gate"]),
    }


def checkout_data() -> dict:
    return {"payment_option": random.choice(["half", "full"]), "delivery_address": delivery_address()}


# ---------- Support chat ----------


def chat_message() -> str:
    return random.choice(
        [
            "Has my order shipped yet?",
            "Do you deliver outside Nairobi?",
            "Can I pay the balance on delivery?",
            fake.sentence(nb_words=10),
        ]
    )


# ---------- Admin ----------


def order_status() -> str:
    return random.choice(["processing", "shipped", "delivered"])
