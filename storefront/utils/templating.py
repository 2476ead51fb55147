"""
Placeholder substitution for admin-editable message templates

Templates use ``{name}`` placeholders, e.g. ``*Produk:* {product_name}``.
Every occurrence of a known placeholder is substituted; unknown
placeholders and stray braces are left as typed by the admin.
"""

import re
from typing import Any, Mapping, Optional

from pydantic import BaseModel

PLACEHOLDER_PATTERN = re.compile(r"\{([a-z_][a-z0-9_]*)\}")


class CheckoutMessageContext(BaseModel):
    """Values available to the WhatsApp checkout template"""
    product_name: str
    category_name: str
    package_name: str
    price: str
    user_data: str = ""
    payment_proof: str = ""
    order_time: str = ""


def render_template(template: str, context: BaseModel) -> str:
    values = context.model_dump()

    def _substitute(match: re.Match) -> str:
        key = match.group(1)
        if key not in values:
            return match.group(0)
        value = values[key]
        return "" if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(_substitute, template)


def format_user_data(user_data: Optional[Mapping[str, Any]]) -> str:
    """Render checkout form answers as WhatsApp bold-label lines"""
    if not user_data:
        return ""
    return "\n".join(f"*{key}:* {value}" for key, value in user_data.items())


def format_payment_proof(payment_proof: Optional[str]) -> str:
    if not payment_proof:
        return ""
    return f"*Bukti Pembayaran:* {payment_proof}"
