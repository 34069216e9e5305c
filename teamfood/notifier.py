import logging
from typing import Iterable, Optional

import httpx

from .config import get_settings
from .models import Order

logger = logging.getLogger(__name__)

LINE_PUSH_URL = "https://api.line.me/v2/bot/message/push"
LINE_BROADCAST_URL = "https://api.line.me/v2/bot/message/broadcast"


def _send(token: str, text: str, recipient: Optional[str] = None) -> None:
    """Push to one recipient, or broadcast when no recipient is given."""
    payload = {"messages": [{"type": "text", "text": text}]}
    url = LINE_BROADCAST_URL
    if recipient is not None:
        payload["to"] = recipient
        url = LINE_PUSH_URL
    try:
        response = httpx.post(url, headers={"Authorization": f"Bearer {token}"}, json=payload, timeout=5)
        response.raise_for_status()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to send LINE message for %s: %s", recipient or "broadcast", exc)


def format_order_message(order: Order, action: str) -> str:
    prefix = {
        "confirmed": "Order confirmed",
        "cancelled": "Order cancelled",
    }.get(action, "Order update")
    lines = [f"- {item.menu_item.name} x{item.quantity}" for item in order.items]
    payment = ""
    if order.payment_method is not None:
        payment = f"Paid with: {order.payment_method.type} ****{order.payment_method.last_four}\n"
    return (
        f"{prefix} #{order.id}\n"
        f"Customer: {order.user.name}\n"
        f"Total: {order.total:.2f}\n"
        f"{payment}"
        "\nItems:\n" + ("\n".join(lines) if lines else "- none")
    )


def notify_order_event(order: Order, action: str) -> None:
    """Send a LINE notification for an order transition when a channel token is configured.

    Runs after the transition is committed, so it never raises.
    """
    settings = get_settings()
    token = settings.line_channel_access_token
    targets: Iterable[str] = settings.line_target_ids
    if not token:
        return

    try:
        text = format_order_message(order, action)
    except Exception:  # noqa: BLE001
        logger.exception("Failed to build LINE message for order %s", order.id)
        return
    if not targets:
        _send(token, text)
        return
    for recipient in targets:
        _send(token, text, recipient)
