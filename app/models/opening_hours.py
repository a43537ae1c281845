"""Opening hours models for the restaurant weekly schedule and live status."""
from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict


class OpeningHourWindow(BaseModel):
    """A single contiguous open interval within one day.

    Times are 24-hour "HH:MM" strings, e.g. {"opensAt": "11:30", "closesAt": "15:00"}.
    A window only counts when closes_at strictly follows opens_at on the same day.
    """
    opens_at: str = Field(alias="opensAt")
    closes_at: str = Field(alias="closesAt")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class OpeningHour(BaseModel):
    """Windows configured for one day of the week.

    Several entries may point at the same day_of_week; their windows are merged.
    """
    day_of_week: int = Field(alias="dayOfWeek", ge=0, le=6)  # 0=Sunday ... 6=Saturday
    windows: list[OpeningHourWindow] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class NextOpen(BaseModel):
    """Next moment the restaurant opens."""
    day_of_week: int = Field(alias="dayOfWeek")
    opens_at: str = Field(alias="opensAt")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class RestaurantStatus(BaseModel):
    """Open/closed verdict for a given instant.

    closes_at is set only when open; next_open only when closed and some
    window starts within the next 7 days (later today included).
    """
    is_open: bool = Field(alias="isOpen")
    label: Literal["Aberto", "Fechado"]
    current_day_index: int = Field(alias="currentDayIndex")
    todays_windows: list[OpeningHourWindow] = Field(
        default_factory=list, alias="todaysWindows"
    )
    next_open: Optional[NextOpen] = Field(default=None, alias="nextOpen")
    closes_at: Optional[str] = Field(default=None, alias="closesAt")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class RestaurantStatusResponse(RestaurantStatus):
    """Status plus the human-readable hint shown under the badge."""
    hint: Optional[str] = None
    timezone: str = ""
