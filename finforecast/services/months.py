"""Month-name calendars and the default seasonal table.

All tables are tuples so they can be shared between requests without copying.
"""

from __future__ import annotations

from datetime import date

ENGLISH_MONTHS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

TURKISH_MONTHS: tuple[str, ...] = (
    "Ocak",
    "Şubat",
    "Mart",
    "Nisan",
    "Mayıs",
    "Haziran",
    "Temmuz",
    "Ağustos",
    "Eylül",
    "Ekim",
    "Kasım",
    "Aralık",
)

MONTH_NAMES: dict[str, tuple[str, ...]] = {
    "en": ENGLISH_MONTHS,
    "tr": TURKISH_MONTHS,
}

# Jan..Dec; December is lifted for year-end.
DEFAULT_SEASONAL_FACTORS: tuple[float, ...] = (
    1.0, 0.95, 1.05, 1.1, 1.15, 1.2,
    1.25, 1.2, 1.1, 1.05, 1.0, 1.3,
)


def month_index(name: str, month_names: tuple[str, ...] = ENGLISH_MONTHS) -> int | None:
    """Return the 0-based calendar index of *name*, or None if it is unknown.

    Matching is exact (case and accents included).
    """
    try:
        return month_names.index(name)
    except ValueError:
        return None


def month_after(anchor: date, offset: int, month_names: tuple[str, ...] = ENGLISH_MONTHS) -> str:
    """Name of the month *offset* months after *anchor*, wrapping across years."""
    return month_names[(anchor.month - 1 + offset) % 12]


def names_for_locale(locale: str) -> tuple[str, ...]:
    """Look up a calendar by locale key ("en", "tr")."""
    return MONTH_NAMES[locale.lower()]
