"""Display helpers for prices, times and phone numbers (pt-BR conventions)."""
import re

# Symbols as rendered by pt-BR locales
CURRENCY_SYMBOLS = {
    "BRL": "R$",
    "USD": "US$",
    "EUR": "€",
    "GBP": "£",
    "ARS": "ARS",
    "PYG": "PYG",
    "UYU": "UYU",
}

_CURRENCY_CODE_RE = re.compile(r"^[A-Za-z]{3}$")


def format_currency(value: float, currency: str = "BRL") -> str:
    """Format a price the way pt-BR menus show it: 1234.5 -> "R$ 1.234,50".

    The symbol and amount are separated by a non-breaking space. Malformed
    currency codes fall back to a bare "1234.50".
    """
    if not currency or not _CURRENCY_CODE_RE.match(currency):
        return f"{value:.2f}"

    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, code)
    # 1,234.50 -> 1.234,50
    amount = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}\u00a0{amount}"


def format_time_label(time_str: str) -> str:
    """Trim a "HH:MM[:SS]" string down to "HH:MM"."""
    if not time_str:
        return ""
    parts = time_str.split(":")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return time_str
    return f"{parts[0]}:{parts[1]}"


def sanitize_phone_number(raw: str) -> str:
    """Keep only digits, as wa.me expects: "+55 (11) 99999-0000" -> "5511999990000"."""
    if not raw:
        return ""
    return re.sub(r"\D", "", raw)
