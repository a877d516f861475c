"""
Filtres et tris des listes élèves / équipes du dashboard d'administration.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

ALL = "all"


class SortOption(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    NAME = "name"
    LOCATION = "location"


def _none_if_all(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip() or v.strip().lower() == ALL:
        return None
    return v.strip()


class StudentFilter(BaseModel):
    """
    Conjonction de critères. show_matched_only et show_unmatched_only sont deux
    bascules exclusives : activer l'une désactive l'autre.
    """
    search: Optional[str] = None
    zip_code: Optional[str] = None
    first_level: Optional[str] = None
    show_matched_only: bool = False
    show_unmatched_only: bool = False

    @field_validator("search")
    @classmethod
    def blank_search(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v and v.strip() else None

    @field_validator("zip_code", "first_level")
    @classmethod
    def all_means_no_filter(cls, v: Optional[str]) -> Optional[str]:
        return _none_if_all(v)

    @model_validator(mode="after")
    def exclusive_toggles(self):
        if self.show_matched_only and self.show_unmatched_only:
            raise ValueError("show_matched_only and show_unmatched_only are mutually exclusive")
        return self

    def with_matched_only(self, enabled: bool) -> "StudentFilter":
        update = {"show_matched_only": enabled}
        if enabled:
            update["show_unmatched_only"] = False
        return self.model_copy(update=update)

    def with_unmatched_only(self, enabled: bool) -> "StudentFilter":
        update = {"show_unmatched_only": enabled}
        if enabled:
            update["show_matched_only"] = False
        return self.model_copy(update=update)


class TeamFilter(BaseModel):
    """Même logique que StudentFilter, avec les bascules actives / inactives."""
    search: Optional[str] = None
    zip_code: Optional[str] = None
    first_level: Optional[str] = None
    show_active_only: bool = False
    show_inactive_only: bool = False

    @field_validator("search")
    @classmethod
    def blank_search(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v and v.strip() else None

    @field_validator("zip_code", "first_level")
    @classmethod
    def all_means_no_filter(cls, v: Optional[str]) -> Optional[str]:
        return _none_if_all(v)

    @model_validator(mode="after")
    def exclusive_toggles(self):
        if self.show_active_only and self.show_inactive_only:
            raise ValueError("show_active_only and show_inactive_only are mutually exclusive")
        return self

    def with_active_only(self, enabled: bool) -> "TeamFilter":
        update = {"show_active_only": enabled}
        if enabled:
            update["show_inactive_only"] = False
        return self.model_copy(update=update)

    def with_inactive_only(self, enabled: bool) -> "TeamFilter":
        update = {"show_inactive_only": enabled}
        if enabled:
            update["show_active_only"] = False
        return self.model_copy(update=update)
