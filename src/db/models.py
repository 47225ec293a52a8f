from __future__ import annotations

from dataclasses import dataclass

VIEW_MODES = ("list", "grid")
SORT_KEYS = ("az", "za")


@dataclass
class Config:
    view_mode: str = "list"   # "list" | "grid"
    sort_key: str = "az"      # "az" | "za"

    @staticmethod
    def from_row(row) -> "Config":
        view_mode = row["view_mode"] if row["view_mode"] in VIEW_MODES else "list"
        sort_key = row["sort_key"] if row["sort_key"] in SORT_KEYS else "az"
        return Config(view_mode=view_mode, sort_key=sort_key)
