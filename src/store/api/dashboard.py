"""Customer dashboard — profile, recent orders and support conversations in one call."""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from identity.account.profile import UserProfile
from identity.domain import identity
from identity.guard import SessionContext, current_session
from store.api.schemas import CustomerDashboardResponse, OrderSummaryResponse
from store.dashboard import customer_orders
from support.chat.queries import conversations_with_messages
from support.domain import support

dashboard_router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _profile(user_id):
    with identity.domain_context():
        try:
            profile = current_domain.repository_for(UserProfile).get(user_id)
        except ObjectNotFoundError:
            return None
    return {"user_id": str(profile.user_id), "email": profile.email, "full_name": profile.full_name}


@dashboard_router.get("", response_model=CustomerDashboardResponse)
async def customer_dashboard(session: SessionContext = Depends(current_session)) -> CustomerDashboardResponse:
    orders = [
        OrderSummaryResponse(
            order_id=str(s.order_id),
            order_number=s.order_number,
            status=s.status,
            payment_status=s.payment_status,
            total_amount=s.total_amount,
            paid_amount=s.paid_amount,
            item_count=s.item_count or 0,
            approved=bool(s.approved),
            placed_at=s.placed_at,
        )
        for s in customer_orders(session.user_id)
    ]
    with support.domain_context():
        chats = conversations_with_messages(session.user_id)

    return CustomerDashboardResponse(profile=_profile(session.user_id), recent_orders=orders, conversations=chats)
