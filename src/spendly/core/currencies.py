"""Currency metadata and the static fallback rate table."""

from __future__ import annotations

from typing import Final

# Approximate USD-relative rates used when the provider is unreachable or
# not configured. Values are rough mid-market rates and are never persisted.
STATIC_RATES: Final[dict[str, float]] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 149.5,
    "CAD": 1.36,
    "AUD": 1.53,
    "CHF": 0.89,
    "CNY": 7.24,
    "INR": 83.1,
    "MXN": 17.2,
    "BRL": 4.97,
    "SGD": 1.34,
    "HKD": 7.82,
    "NOK": 10.6,
    "SEK": 10.4,
    "DKK": 6.88,
    "NZD": 1.63,
    "ZAR": 18.6,
    "AED": 3.67,
    "THB": 35.1,
}

# Most-used currencies first.
CURRENCIES: Final[list[dict[str, str]]] = [
    {"code": "USD", "name": "US Dollar", "symbol": "$"},
    {"code": "EUR", "name": "Euro", "symbol": "€"},
    {"code": "GBP", "name": "British Pound", "symbol": "£"},
    {"code": "JPY", "name": "Japanese Yen", "symbol": "¥"},
    {"code": "CAD", "name": "Canadian Dollar", "symbol": "CA$"},
    {"code": "AUD", "name": "Australian Dollar", "symbol": "A$"},
    {"code": "CHF", "name": "Swiss Franc", "symbol": "Fr"},
    {"code": "CNY", "name": "Chinese Yuan", "symbol": "¥"},
    {"code": "INR", "name": "Indian Rupee", "symbol": "₹"},
    {"code": "MXN", "name": "Mexican Peso", "symbol": "MX$"},
    {"code": "BRL", "name": "Brazilian Real", "symbol": "R$"},
    {"code": "SGD", "name": "Singapore Dollar", "symbol": "S$"},
    {"code": "HKD", "name": "Hong Kong Dollar", "symbol": "HK$"},
    {"code": "NOK", "name": "Norwegian Krone", "symbol": "kr"},
    {"code": "SEK", "name": "Swedish Krona", "symbol": "kr"},
    {"code": "DKK", "name": "Danish Krone", "symbol": "kr"},
    {"code": "NZD", "name": "New Zealand Dollar", "symbol": "NZ$"},
    {"code": "ZAR", "name": "South African Rand", "symbol": "R"},
    {"code": "AED", "name": "UAE Dirham", "symbol": "د.إ"},
    {"code": "THB", "name": "Thai Baht", "symbol": "฿"},
    {"code": "KRW", "name": "South Korean Won", "symbol": "₩"},
    {"code": "IDR", "name": "Indonesian Rupiah", "symbol": "Rp"},
    {"code": "TRY", "name": "Turkish Lira", "symbol": "₺"},
    {"code": "RUB", "name": "Russian Ruble", "symbol": "₽"},
    {"code": "SAR", "name": "Saudi Riyal", "symbol": "﷼"},
    {"code": "PLN", "name": "Polish Zloty", "symbol": "zł"},
    {"code": "PHP", "name": "Philippine Peso", "symbol": "₱"},
    {"code": "MYR", "name": "Malaysian Ringgit", "symbol": "RM"},
    {"code": "CZK", "name": "Czech Koruna", "symbol": "Kč"},
    {"code": "HUF", "name": "Hungarian Forint", "symbol": "Ft"},
]


def normalize_currency(code: str | None) -> str:
    """Uppercase and trim a currency code. Codes are not checked against ISO 4217."""
    return (code or "").strip().upper()


def static_rate(code: str) -> float:
    """Pivot-relative static rate; unknown codes are treated as the pivot (1.0)."""
    return STATIC_RATES.get(normalize_currency(code), 1.0)
