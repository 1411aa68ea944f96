"""Claim text and link tests"""

from datetime import date

import pytest

from student_housing_mcp.utils.claims import (
    CLAIM_CHANNELS,
    channel_label,
    claim_text,
    format_currency,
    whatsapp_url,
)
from student_housing_mcp.utils.obligations import UNSPECIFIED_LABEL
from student_housing_mcp.utils.settings import Settings
from tests.helpers.shared import make_unit


class TestFormatCurrency:
    """format_currency"""

    @pytest.mark.parametrize(
        "amount, short, expected",
        [
            (1700, False, "1,700 ر.س"),
            (500, False, "500 ر.س"),
            (0, False, "0 ر.س"),
            (2_500_000, True, "2.5م"),
            (15000, True, "15أ"),
            (500, True, "500 ر.س"),
        ],
    )
    def test_format(self, amount, short, expected):
        assert format_currency(amount, short) == expected


class TestClaimText:
    """claim_text"""

    def test_contains_unit_amount_and_term(self):
        text = claim_text(make_unit(), 850, date(2025, 2, 15))
        assert "مبنى رقم (1)" in text
        assert "غرفة رقم(1)" in text
        assert "850 ر.س" in text
        assert Settings().academic_term in text
        assert "2025-02-15" in text

    def test_missing_due_date(self):
        assert f"({UNSPECIFIED_LABEL})" in claim_text(make_unit(), 1700, None)

    def test_term_comes_from_settings(self):
        settings = Settings(academic_term="الفصل الصيفي")
        assert "الفصل الصيفي" in claim_text(make_unit(), 1700, None, settings)


class TestWhatsappUrl:
    """whatsapp_url"""

    def test_valid_number(self):
        url = whatsapp_url("512345678", "line one\nline two")
        assert url.startswith("https://wa.me/966512345678?text=")
        assert url.endswith("line%20one%0Aline%20two")

    def test_surrounding_spaces_are_ignored(self):
        assert whatsapp_url(" 512345678 ", "x").startswith("https://wa.me/966512345678")

    def test_country_code(self):
        assert whatsapp_url("512345678", "x", country_code="971").startswith(
            "https://wa.me/971512345678"
        )

    def test_arabic_text_is_encoded(self):
        url = whatsapp_url("512345678", claim_text(make_unit(), 850, None))
        assert " " not in url
        assert "\n" not in url
        assert "%D8" in url

    @pytest.mark.parametrize("number", ["0512345678", "612345678", "51234567", "5123456789", "5abcdefgh", ""])
    def test_invalid_number(self, number):
        with pytest.raises(ValueError):
            whatsapp_url(number, "x")


class TestChannelLabel:
    """channel_label"""

    @pytest.mark.parametrize("channel", list(CLAIM_CHANNELS))
    def test_known_channels(self, channel):
        assert channel_label(channel) == CLAIM_CHANNELS[channel]

    def test_unknown_channel(self):
        with pytest.raises(ValueError):
            channel_label("pigeon")
