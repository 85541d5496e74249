# Static lookup tables used by the pricing calculator.
# Shipping rows are in the listed currency; a currency missing from a row
# falls back to that row's "usd" value.

SHIPPING_RATES = {
    "US": {"usd": 8, "kes": 1000, "eur": 7.3, "gbp": 6.4},
    "KE": {"usd": 20, "kes": 2600, "eur": 18.2, "gbp": 15.8},
    "GB": {"usd": 15, "kes": 1950, "eur": 13.8, "gbp": 12.1},
    "CA": {"usd": 10, "kes": 1300, "eur": 9.1, "gbp": 8.0},
    "FR": {"usd": 14, "kes": 1820, "eur": 13.0, "gbp": 11.5},
    "DE": {"usd": 14, "kes": 1820, "eur": 13.0, "gbp": 11.5},
    "IN": {"usd": 18, "kes": 2340, "eur": 16.7, "gbp": 14.8},
    "DEFAULT": {"usd": 22, "kes": 2850, "eur": 20.4, "gbp": 18.2},
}

TAX_RATES = {
    "US": 0.08875,
    "KE": 0.16,
    "GB": 0.20,
    "CA": 0.13,
    "FR": 0.20,
    "DE": 0.19,
    "IN": 0.18,
    "DEFAULT": 0.10,
}

# units of currency per 1 USD
FALLBACK_EXCHANGE_RATES = {
    "usd": 1,
    "kes": 130,
    "eur": 0.9,
    "gbp": 0.8,
    "cad": 1.35,
    "inr": 83,
}

SUPPORTED_CURRENCIES = tuple(FALLBACK_EXCHANGE_RATES)

# thresholds are compared against the USD subtotal
FREE_SHIPPING_THRESHOLD_USD = 150
HALF_SHIPPING_THRESHOLD_USD = 75

CURRENCY_SYMBOLS = {
    "usd": "$",
    "kes": "KES ",
    "eur": "€ ",
    "gbp": "£ ",
    "cad": "C$ ",
    "inr": "₹ ",
}
