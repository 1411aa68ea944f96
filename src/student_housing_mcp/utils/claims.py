"""Dues claims: notice text, WhatsApp links and channel labels."""

import re
from datetime import date
from typing import Dict, Optional
from urllib.parse import quote

from ..models.unit_model import Unit
from .obligations import UNSPECIFIED_LABEL
from .settings import Settings

CURRENCY_SUFFIX = "ر.س"

CLAIM_CHANNELS: Dict[str, str] = {
    "email": "مطالبة عبر البريد الإلكتروني",
    "whatsapp": "مطالبة عبر واتساب",
    "paper": "مطالبة ورقية للطباعة",
}

# Saudi mobile without the leading 0 or country code
MOBILE_PATTERN = re.compile(r"^5\d{8}$")

CLAIM_TEMPLATE = """عزيزي الطالب/ـة
مبنى رقم ({building}) غرفة رقم({room})
المبلغ: ({amount}) عن {term}.

السلام عليكم ورحمة الله وبركاته،
نود أن نشعركم بضرورة تسديد المستحقات المالية التي حل موعد سدادها بتاريخ ({due}).
وفي حال عدم السداد، نرجو منكم التواصل مع الإدارة المالية للمجمع السكني.

ادارة المتابعة المالية"""


def format_currency(amount: float, short: bool = False) -> str:
    """
    Format an amount in SAR without decimals.

    Args:
        amount: amount to format
        short: compact form for charts (``1.2م``, ``850أ``)

    Returns:
        str: formatted amount
    """
    if short:
        if amount >= 1_000_000:
            return f"{amount / 1_000_000:.1f}م"
        if amount >= 1000:
            return f"{amount / 1000:.0f}أ"
    return f"{amount:,.0f} {CURRENCY_SUFFIX}"


def claim_text(
    unit: Unit,
    remaining: float,
    due_date: Optional[date],
    settings: Optional[Settings] = None,
) -> str:
    """Standard dues notice for one unit."""
    settings = settings or Settings()
    return CLAIM_TEMPLATE.format(
        building=unit.building_id,
        room=unit.unit_number,
        amount=format_currency(remaining),
        term=settings.academic_term,
        due=due_date.isoformat() if due_date else UNSPECIFIED_LABEL,
    )


def whatsapp_url(local_number: str, text: str, country_code: str = "966") -> str:
    """
    Build a wa.me link carrying the claim text.

    Raises:
        ValueError: ``local_number`` is not ``5`` followed by 8 digits
    """
    number = local_number.strip()
    if not MOBILE_PATTERN.match(number):
        raise ValueError(
            "Invalid mobile number: expected 9 digits starting with 5 "
            "(without 0 or country code)"
        )
    # same reserved set as encodeURIComponent
    encoded = quote(text, safe="-_.!~*'()")
    return f"https://wa.me/{country_code}{number}?text={encoded}"


def channel_label(channel: str) -> str:
    """Audit label of a claim channel."""
    try:
        return CLAIM_CHANNELS[channel]
    except KeyError:
        raise ValueError(
            f"Unknown claim channel: {channel} (expected one of {', '.join(CLAIM_CHANNELS)})"
        ) from None
