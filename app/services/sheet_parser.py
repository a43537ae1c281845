"""Parse raw spreadsheet rows into menu models.

The restaurant owner edits the spreadsheet by hand, so every parser here is
tolerant: rows that cannot be understood are dropped instead of failing the
whole menu.
"""
import re
import unicodedata
from typing import Optional

from app.models import (
    Category,
    Product,
    RestaurantConfig,
    OpeningHour,
    OpeningHourWindow,
)
from app.services.opening_hours import normalize_time

BOOLEAN_TRUE_VALUES = {
    "true",
    "1",
    "yes",
    "y",
    "sim",
    "ativo",
    "open",
    "available",
}

DAY_NAME_TO_INDEX = {
    "domingo": 0,
    "dom": 0,
    "sunday": 0,
    "segunda": 1,
    "segunda-feira": 1,
    "segundafeira": 1,
    "seg": 1,
    "monday": 1,
    "terca": 2,
    "terca-feira": 2,
    "tercafeira": 2,
    "ter": 2,
    "tuesday": 2,
    "quarta": 3,
    "quarta-feira": 3,
    "quartafeira": 3,
    "qua": 3,
    "wednesday": 3,
    "quinta": 4,
    "quinta-feira": 4,
    "quintafeira": 4,
    "qui": 4,
    "thursday": 4,
    "sexta": 5,
    "sexta-feira": 5,
    "sextafeira": 5,
    "sex": 5,
    "friday": 5,
    "sabado": 6,
    "sab": 6,
    "saturday": 6,
}

# Config sheet key aliases -> RestaurantConfig field
CONFIG_KEY_ALIASES = {
    "nome": "restaurant_name",
    "restaurant_name": "restaurant_name",
    "name": "restaurant_name",
    "logo": "logo_url",
    "logo_url": "logo_url",
    "logourl": "logo_url",
    "whatsapp": "whatsapp_number",
    "whatsapp_number": "whatsapp_number",
    "zap": "whatsapp_number",
    "telefone": "whatsapp_number",
    "timezone": "timezone",
    "fuso": "timezone",
    "fuso_horario": "timezone",
    "currency": "currency",
    "moeda": "currency",
    "accent_color": "accent_color",
    "primary_color": "accent_color",
    "cor": "accent_color",
    "mensagem": "welcome_message",
    "welcome_message": "welcome_message",
}

_DIGITS_RE = re.compile(r"[0-9]+")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")

# Fields that keep their default when the sheet leaves the value blank
_CONFIG_FIELDS_WITH_DEFAULT = {
    "restaurant_name",
    "logo_url",
    "whatsapp_number",
    "timezone",
    "currency",
}


def _cells(row: list) -> list[str]:
    return [str(cell).strip() if cell is not None else "" for cell in row]


def _cell(cells: list[str], index: int) -> str:
    return cells[index] if index < len(cells) else ""


def to_slug(value: str) -> str:
    """Lowercase ASCII slug: "Pão de Queijo" -> "pao-de-queijo"."""
    normalized = unicodedata.normalize("NFD", value.strip().lower())
    ascii_only = "".join(c for c in normalized if not unicodedata.combining(c))
    return re.sub(r"[^a-z0-9]+", "-", ascii_only).strip("-")


def parse_number(raw: Optional[str], fallback: float = 0.0) -> float:
    """Parse a pt-BR formatted number: "1.234,50" -> 1234.5."""
    if not raw:
        return fallback
    normalized = re.sub(r"\s", "", raw).replace(".", "").replace(",", ".", 1)
    try:
        return float(normalized)
    except ValueError:
        return fallback


def parse_leading_int(raw: Optional[str]) -> Optional[int]:
    """Leading integer of a cell: "2a" -> 2, "abc" -> None."""
    match = _LEADING_INT_RE.match(raw or "")
    return int(match.group(1)) if match else None


def parse_boolean(raw: Optional[str], fallback: bool = True) -> bool:
    if not raw:
        return fallback
    return raw.strip().lower() in BOOLEAN_TRUE_VALUES


def parse_tags(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [tag.strip() for tag in re.split(r"[;,]", raw) if tag.strip()]


def parse_day_of_week(raw: str) -> Optional[int]:
    """Day column: a number 0-6 (0=Sunday) or a pt-BR/English day name."""
    day_cell = raw.strip()
    if not day_cell:
        return None

    if _DIGITS_RE.fullmatch(day_cell):
        day = int(day_cell)
    else:
        slug = to_slug(day_cell)
        day = DAY_NAME_TO_INDEX.get(slug)
        if day is None:
            day = DAY_NAME_TO_INDEX.get(slug.replace("-", ""))

    if day is None or not 0 <= day <= 6:
        return None
    return day


def parse_categories(rows: list[list[str]]) -> list[Category]:
    """Rows: [id, name, slug, order]. Sorted by order."""
    categories: list[Category] = []
    for index, row in enumerate(rows):
        cells = _cells(row)
        raw_name = _cell(cells, 1) or _cell(cells, 0)
        if not raw_name:
            continue

        raw_id = _cell(cells, 0) or to_slug(raw_name)
        slug = _cell(cells, 2) or to_slug(raw_name)
        # A blank, zero or non-numeric order falls back to the row position
        order = parse_leading_int(_cell(cells, 3)) or index

        categories.append(Category(id=to_slug(raw_id), name=raw_name, slug=slug, order=order))

    categories.sort(key=lambda c: c.order)
    return categories


def parse_products(rows: list[list[str]]) -> list[Product]:
    """Parse product rows.

    Full layout (9+ columns):
        [id, name, slug, description, image, price, category, available, tags]
    Legacy layout (shorter rows):
        [id, name, description, price, category, available, image]
    Rows without a name or category are dropped.
    """
    products: list[Product] = []
    for row in rows:
        cells = _cells(row)
        size = len(cells)
        full = size >= 9

        name = _cell(cells, 1) or _cell(cells, 0)
        if full:
            description = cells[3]
            image_url = cells[4]
            price_raw = cells[5]
            category_ref = cells[6]
            available_raw = cells[7]
            tags = parse_tags(cells[8])
        else:
            description = _cell(cells, 2) if size >= 3 else ""
            image_url = _cell(cells, 6) if size >= 7 else ""
            price_raw = _cell(cells, 3) if size >= 4 else ""
            category_ref = _cell(cells, 4) if size >= 5 else ""
            available_raw = _cell(cells, 5) if size >= 6 else ""
            tags = []

        if not name or not category_ref:
            continue

        products.append(
            Product(
                id=_cell(cells, 0) or to_slug(f"{category_ref}-{name}"),
                name=name,
                slug=(cells[2] if full and cells[2] else to_slug(name)),
                description=description,
                image_url=image_url,
                price=parse_number(price_raw, 0.0),
                category_id=to_slug(category_ref),
                available=parse_boolean(available_raw, True),
                tags=tags,
            )
        )
    return products


def parse_opening_hours(rows: list[list[str]]) -> list[OpeningHour]:
    """Rows: [day, opens, closes, opens, closes, ...].

    Time pairs where either side does not normalize are skipped. Rows with an
    unknown day are dropped.
    """
    opening_hours: list[OpeningHour] = []
    for row in rows:
        cells = _cells(row)
        day = parse_day_of_week(_cell(cells, 0))
        if day is None:
            continue

        windows: list[OpeningHourWindow] = []
        for col in range(1, len(cells), 2):
            opens = normalize_time(_cell(cells, col))
            closes = normalize_time(_cell(cells, col + 1))
            if opens and closes:
                windows.append(OpeningHourWindow(opens_at=opens, closes_at=closes))

        opening_hours.append(OpeningHour(day_of_week=day, windows=windows))
    return opening_hours


def parse_config(rows: list[list[str]], default_timezone: str) -> RestaurantConfig:
    """Key/value rows; unknown keys are ignored."""
    defaults = RestaurantConfig(timezone=default_timezone)
    values = defaults.model_dump()

    for row in rows:
        cells = _cells(row)
        key = _cell(cells, 0)
        if not key:
            continue
        field = CONFIG_KEY_ALIASES.get(key.lower())
        if field is None:
            continue

        value = _cell(cells, 1)
        if field in _CONFIG_FIELDS_WITH_DEFAULT:
            values[field] = value or getattr(defaults, field)
        else:
            values[field] = value

    return RestaurantConfig(**values)
