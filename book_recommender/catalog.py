import json
from enum import Enum
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field

from .logger import logger


class Level(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    EXPERT = "Expert"


LEVELS: List[str] = [lvl.value for lvl in Level]


class Catalog(BaseModel):
    """Option lists shown in the dropdowns. Moods are keyed by genre."""

    genres: List[str] = Field(default_factory=list)
    moods: Dict[str, List[str]] = Field(default_factory=dict)

    def moods_for(self, genre: str | None) -> List[str]:
        if not genre:
            return []
        return list(self.moods.get(genre, []))

    @classmethod
    def from_json(cls, path: str | Path) -> "Catalog":
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        return cls.model_validate(data)


DEFAULT_CATALOG = Catalog(
    genres=[
        "Fantasy",
        "Science Fiction",
        "Mystery",
        "Romance",
        "Historical Fiction",
        "Horror",
        "Non-Fiction",
    ],
    moods={
        "Fantasy": ["Adventurous", "Curious", "Nostalgic", "Escapist"],
        "Science Fiction": ["Curious", "Thoughtful", "Anxious", "Hopeful"],
        "Mystery": ["Suspenseful", "Clever", "Cozy"],
        "Romance": ["Romantic", "Heartbroken", "Lighthearted"],
        "Historical Fiction": ["Reflective", "Nostalgic", "Inspired"],
        "Horror": ["Spooky", "Restless", "Morbid"],
        "Non-Fiction": ["Curious", "Motivated", "Reflective"],
    },
)


def load_catalog(settings) -> Catalog:
    if settings.CATALOG_FILE:
        logger.info(f"Loading catalog from {settings.CATALOG_FILE}")
        return Catalog.from_json(settings.CATALOG_FILE)
    return DEFAULT_CATALOG
