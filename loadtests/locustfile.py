"""Kwetu Store Load Testing — Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Shoppers only:
    locust -f loadtests/locustfile.py ShopperUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py ShopperUser BrowserUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest

Admin scenarios sign in with KWETU_ADMIN_EMAIL / KWETU_ADMIN_PASSWORD.
Grant that account the admin role first (``python src/manage.py grant-admin --email ...``).
"""

import logging
import time

from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.admin import AdminUser  # noqa: F401
from loadtests.scenarios.browse import BrowserUser  # noqa: F401
from loadtests.scenarios.chat import ChatUser  # noqa: F401
from loadtests.scenarios.shopper import ShopperUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the API error body so you see "INSUFFICIENT_STOCK: Some items are
    out of stock" instead of just "400".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(**_kwargs):
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}\n")
