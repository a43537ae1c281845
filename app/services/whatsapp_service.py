"""Build the pre-filled WhatsApp order message."""
from typing import Optional
from urllib.parse import quote

from app.models import (
    CartLineItem,
    ConsumptionType,
    CONSUMPTION_LABELS,
    RestaurantConfig,
    WhatsAppMessage,
)
from app.services.cart_service import calculate_cart_totals
from app.services.formatting import format_currency, sanitize_phone_number

WHATSAPP_BASE_URL = "https://wa.me/"


def build_message_body(
    line_items: list[CartLineItem],
    config: RestaurantConfig,
    customer_name: str,
    consumption_type: ConsumptionType,
    notes: Optional[str] = None,
) -> str:
    """Compose the order text sent to the restaurant.

    WhatsApp renders *text* as bold.
    """
    totals = calculate_cart_totals(line_items)
    lines = [
        f"Olá *{config.restaurant_name}*!",
        f"Cliente: *{customer_name.strip()}*",
        "",
        "Pedido:",
    ]

    for item in line_items:
        lines.append(
            f"• {item.quantity}x {item.product.name} — "
            f"{format_currency(item.line_total, config.currency)}"
        )
        if item.product.description:
            lines.append(f"  {item.product.description}")

    lines.append("")
    lines.append(
        f"Total de itens: *{totals.total_quantity}* — "
        f"Total: *{format_currency(totals.subtotal, config.currency)}*"
    )
    lines.append(f"Modalidade: *{CONSUMPTION_LABELS[consumption_type]}*")

    if notes and notes.strip():
        lines.append("")
        lines.append("Observações:")
        lines.append(notes.strip())

    if config.welcome_message:
        lines.append("")
        lines.append(config.welcome_message)

    return "\n".join(lines)


def build_whatsapp_message(
    line_items: list[CartLineItem],
    config: RestaurantConfig,
    customer_name: str,
    consumption_type: ConsumptionType,
    notes: Optional[str] = None,
) -> WhatsAppMessage:
    """Message body plus a wa.me link that opens a chat with it pre-filled.

    Without a usable phone number the link lets the visitor pick the contact.
    """
    message = build_message_body(line_items, config, customer_name, consumption_type, notes)
    phone = sanitize_phone_number(config.whatsapp_number)
    text = quote(message, safe="!~*'()")
    url = f"{WHATSAPP_BASE_URL}{phone}?text={text}" if phone else f"{WHATSAPP_BASE_URL}?text={text}"
    return WhatsAppMessage(phone=phone, message=message, url=url)
