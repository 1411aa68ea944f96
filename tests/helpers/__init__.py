"""Helper package for shared test data.

Re-exports ``tests.helpers.shared`` so callers can write
``from tests.helpers import TODAY``.
"""
from .shared import (
    APARTMENT_RENT,
    NOW,
    NOW_MS,
    SUITE_RENT,
    TODAY,
    VERSION_0_DOCUMENT,
    make_unit,
)

__all__ = [
    "APARTMENT_RENT",
    "NOW",
    "NOW_MS",
    "SUITE_RENT",
    "TODAY",
    "VERSION_0_DOCUMENT",
    "make_unit",
]
