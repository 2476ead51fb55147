"""
WhatsApp checkout links
Builds wa.me deep links from the admin-configured message template
"""

from datetime import datetime
from typing import Any, Mapping, Optional
from urllib.parse import quote

from storefront.config.defaults import DEFAULT_CHECKOUT_TEMPLATE, DEFAULT_WHATSAPP_NUMBER
from storefront.utils.formatting import Number, format_number, format_order_time
from storefront.utils.templating import (
    CheckoutMessageContext,
    format_payment_proof,
    format_user_data,
    render_template,
)

# Same unreserved set as JavaScript's encodeURIComponent
URI_COMPONENT_SAFE = "-_.!~*'()"


def build_checkout_message(
    template: Optional[str],
    product_name: str,
    category_name: str,
    package_name: str,
    price: Number,
    user_data: Optional[Mapping[str, Any]] = None,
    payment_proof: Optional[str] = None,
    order_time: Optional[datetime] = None,
) -> str:
    context = CheckoutMessageContext(
        product_name=product_name,
        category_name=category_name,
        package_name=package_name,
        price=format_number(price),
        user_data=format_user_data(user_data),
        payment_proof=format_payment_proof(payment_proof),
        order_time=format_order_time(order_time),
    )
    return render_template(template or DEFAULT_CHECKOUT_TEMPLATE, context)


def build_whatsapp_url(number: Optional[str], message: str) -> str:
    """https://wa.me/<digits>?text=<encoded message>"""
    digits = "".join(ch for ch in (number or DEFAULT_WHATSAPP_NUMBER) if ch.isdigit())
    return f"https://wa.me/{digits}?text={quote(message, safe=URI_COMPONENT_SAFE)}"
