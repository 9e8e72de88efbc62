from __future__ import annotations

import datetime as dt
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field as PydField, field_validator

# Response shapes for the Yume API. Unknown fields are ignored so the backend
# can grow without breaking the bot; the list containers are required so a
# malformed payload fails decoding instead of reading as "no data".


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


# -----------------------------------------------------------------------------
# Health
# -----------------------------------------------------------------------------
class HealthStatus(_ApiModel):
    status: Optional[str] = None


# -----------------------------------------------------------------------------
# Attendance
# -----------------------------------------------------------------------------
class LeaderboardEntry(_ApiModel):
    name: str
    count: int = PydField(0, ge=0)


class LeaderboardPage(_ApiModel):
    results: List[LeaderboardEntry]
    total: Optional[int] = None


class AttendanceRecord(_ApiModel):
    id: Optional[int] = None
    name: str
    event: str
    date: dt.date

    @field_validator("date", mode="before")
    @classmethod
    def _date_part(cls, v: Any) -> Any:
        # Some rows carry a full ISO timestamp; only the calendar day matters.
        if isinstance(v, str) and len(v) > 10 and v[10] in "T ":
            return v[:10]
        return v


class CreatedRecord(_ApiModel):
    """Body of a successful POST /attendance/records. Only the id is shown."""

    id: Optional[int] = None
    name: Optional[str] = None
    event: Optional[str] = None
    date: Optional[str] = None


class AttendancePage(_ApiModel):
    results: List[AttendanceRecord]
    total: Optional[int] = None


# -----------------------------------------------------------------------------
# Tile events
# -----------------------------------------------------------------------------
class TileEvent(_ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool = False
    tile_count: int = 0
    participant_count: int = 0


class TileEventList(_ApiModel):
    events: List[TileEvent]


class Tile(_ApiModel):
    title: str = ""
    is_start: bool = False
    is_end: bool = False


class TileEventDetail(_ApiModel):
    event: Optional[TileEvent] = None
    tiles: List[Tile] = PydField(default_factory=list)


class TileProgress(_ApiModel):
    discord_id: Optional[str] = None
    discord_username: Optional[str] = None
    global_name: Optional[str] = None
    current_tile: int = 0
    tiles_unlocked: Optional[List[int]] = None
    completed_at: Optional[dt.datetime] = None

    @field_validator("discord_id", mode="before")
    @classmethod
    def _norm_discord_id(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @property
    def unlocked_count(self) -> int:
        # A missing unlock list counts as zero progress.
        return len(self.tiles_unlocked or [])

    @property
    def display_name(self) -> str:
        return self.discord_username or self.global_name or f"User {self.discord_id}"


class TileEventProgress(_ApiModel):
    event_name: Optional[str] = None
    total_tiles: Optional[int] = None
    progress: List[TileProgress]


# -----------------------------------------------------------------------------
# Admin
# -----------------------------------------------------------------------------
class AdminUser(_ApiModel):
    model_config = ConfigDict(extra="allow")

    discord_id: Optional[str] = None
    username: Optional[str] = None
    permissions: List[str] = PydField(default_factory=list)

    @field_validator("discord_id", mode="before")
    @classmethod
    def _norm_discord_id(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)


__all__ = [
    "HealthStatus",
    "LeaderboardEntry",
    "LeaderboardPage",
    "AttendanceRecord",
    "CreatedRecord",
    "AttendancePage",
    "TileEvent",
    "TileEventList",
    "Tile",
    "TileEventDetail",
    "TileProgress",
    "TileEventProgress",
    "AdminUser",
]
