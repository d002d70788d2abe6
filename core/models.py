"""Upstream wire shapes.

The server forwards upstream JSON verbatim; these models exist for the
operator CLI's table rendering. Unknown fields are kept.
"""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class Category(IntEnum):
    FOOD_DRINK = 0
    CLUTTER = 1
    WEAPONS = 2
    TRANSPORT = 3
    FURNITURE_DECOR = 4
    OBJECTS = 5
    NATURE = 6
    ANIMALS = 7
    BUILDINGS_ARCHITECTURE = 8
    PEOPLE_CHARACTERS = 9
    SCENES_LEVELS = 10
    OTHER = 11

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    Category.FOOD_DRINK: "Food & Drink",
    Category.CLUTTER: "Clutter",
    Category.WEAPONS: "Weapons",
    Category.TRANSPORT: "Transport",
    Category.FURNITURE_DECOR: "Furniture & Decor",
    Category.OBJECTS: "Objects",
    Category.NATURE: "Nature",
    Category.ANIMALS: "Animals",
    Category.BUILDINGS_ARCHITECTURE: "Buildings/Architecture",
    Category.PEOPLE_CHARACTERS: "People & Characters",
    Category.SCENES_LEVELS: "Scenes & Levels",
    Category.OTHER: "Other",
}


def category_label(code: int | str | None) -> str:
    try:
        return Category(int(code)).label
    except (TypeError, ValueError):
        return "-"


class _Wire(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Creator(_Wire):
    name: str = ""
    url: str = ""


class Orbit(_Wire):
    phi: float = 0.0
    theta: float = 0.0
    radius: float = 0.0


class Model(_Wire):
    id: str = ""
    title: str = ""
    description: str = ""
    attribution: str = ""
    thumbnail: str = ""
    download: str = ""
    tri_count: int = Field(alias="triCount", default=0)
    creator: Creator = Field(default_factory=Creator)
    upload_date: str | None = Field(alias="uploadDate", default=None)
    category: int | None = None
    license: str = ""
    animated: bool = False
    orbit: Orbit | None = None


class ModelList(_Wire):
    id: str = ""
    title: str = ""
    description: str = ""
    creator: Creator = Field(default_factory=Creator)
    models: list[Model] = Field(default_factory=list)


class SearchResult(_Wire):
    total: int = 0
    results: list[Model] = Field(default_factory=list)


class User(_Wire):
    username: str = ""
    display_picture: str = Field(alias="displayPicture", default="")
    bio: str = ""
    social_links: dict[str, str | None] = Field(alias="socialLinks", default_factory=dict)
    models: list[Model] = Field(default_factory=list)
    lists: list[str] = Field(default_factory=list)
