"""Currency display helpers."""

# code → (symbol, decimal places)
CURRENCY_FORMATS = {
    'USD': ('$', 2),
    'EUR': ('€', 2),
    'GBP': ('£', 2),
    'CNY': ('CN¥', 2),
    'JPY': ('¥', 0),
    'CAD': ('CA$', 2),
    'MXN': ('MX$', 2),
}


def is_supported_currency(code: str) -> bool:
    return isinstance(code, str) and code.upper() in CURRENCY_FORMATS


def format_currency(amount: float, currency: str = 'USD') -> str:
    """
    Format an amount for display in the given currency.

    Unsupported codes fall back to a plain grouped number.
    """
    code = str(currency or '').upper()
    if code not in CURRENCY_FORMATS:
        return f"{amount:,.2f}"

    symbol, decimals = CURRENCY_FORMATS[code]
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.{decimals}f}"
