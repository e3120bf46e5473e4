import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field

from .catalog import DEFAULT_CATALOG, Catalog
from .errors import RecommenderError
from .gemini_client import GeminiClient
from .logger import logger
from .prompts import build_prompt

SELECTION_REQUIRED = "Please select genre, mood, and level."
GENERIC_ERROR = "Something went wrong."
CANCELLED_ERROR = "Request cancelled."


class ResultRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    genre: str
    mood: str
    level: str
    model: str
    at: datetime
    text: str


class RecommenderState(BaseModel):
    genre: str = ""
    mood: str = ""
    level: str = ""
    loading: bool = False
    error: str = ""
    results: List[ResultRecord] = Field(default_factory=list)


class ActionType(str, Enum):
    SET_GENRE = "SET_GENRE"
    SET_MOOD = "SET_MOOD"
    SET_LEVEL = "SET_LEVEL"
    REQUEST_START = "REQUEST_START"
    REQUEST_ERROR = "REQUEST_ERROR"
    REQUEST_SUCCESS = "REQUEST_SUCCESS"
    CLEAR_ERROR = "CLEAR_ERROR"


@dataclass(frozen=True)
class Action:
    type: ActionType
    payload: Any = None


def _valid_mood(mood: str, genre: str, catalog: Catalog) -> str:
    """Return ``mood`` if it belongs to ``genre``'s mood set, else ''."""
    return mood if mood and mood in catalog.moods_for(genre) else ""


def reduce(state: RecommenderState, action: Action, catalog: Catalog = DEFAULT_CATALOG) -> RecommenderState:
    """Pure transition function; never mutates ``state``."""
    t = action.type
    if t is ActionType.SET_GENRE:
        genre = action.payload or ""
        return state.model_copy(update={"genre": genre, "mood": _valid_mood(state.mood, genre, catalog)})
    if t is ActionType.SET_MOOD:
        return state.model_copy(update={"mood": _valid_mood(action.payload or "", state.genre, catalog)})
    if t is ActionType.SET_LEVEL:
        return state.model_copy(update={"level": action.payload or ""})
    if t is ActionType.REQUEST_START:
        return state.model_copy(update={"loading": True, "error": ""})
    if t is ActionType.REQUEST_ERROR:
        return state.model_copy(update={"loading": False, "error": action.payload or GENERIC_ERROR})
    if t is ActionType.REQUEST_SUCCESS:
        return state.model_copy(
            update={"loading": False, "error": "", "results": [action.payload, *state.results]}
        )
    if t is ActionType.CLEAR_ERROR:
        return state.model_copy(update={"error": ""})
    return state


def can_submit(state: RecommenderState) -> bool:
    return bool(state.genre and state.mood and state.level) and not state.loading


_SELECT_ACTIONS = {
    "genre": ActionType.SET_GENRE,
    "mood": ActionType.SET_MOOD,
    "level": ActionType.SET_LEVEL,
}


class RecommendationController:
    """
    Owns one selection + result log and drives the request lifecycle:
    idle -> loading -> idle with either a new result or an error.
    """

    def __init__(self, catalog: Catalog = DEFAULT_CATALOG):
        self.catalog = catalog
        self.state = RecommenderState()

    def dispatch(self, action: Action) -> RecommenderState:
        self.state = reduce(self.state, action, self.catalog)
        return self.state

    def select(self, field: str, value: str) -> RecommenderState:
        if field not in _SELECT_ACTIONS:
            raise ValueError(f"Unknown selection field: {field}")
        return self.dispatch(Action(_SELECT_ACTIONS[field], value))

    @property
    def available_moods(self) -> List[str]:
        return self.catalog.moods_for(self.state.genre)

    @property
    def can_submit(self) -> bool:
        return can_submit(self.state)

    async def submit(self, client: GeminiClient, prompt: str | None = None) -> RecommenderState:
        if self.state.loading:
            return self.state

        self.dispatch(Action(ActionType.CLEAR_ERROR))
        genre, mood, level = self.state.genre, self.state.mood, self.state.level
        if not (genre and mood and level):
            return self.dispatch(Action(ActionType.REQUEST_ERROR, SELECTION_REQUIRED))

        self.dispatch(Action(ActionType.REQUEST_START))
        try:
            text = await client.recommend(build_prompt(genre, mood, level, prompt))
        except asyncio.CancelledError:
            # Leave the session submittable again before propagating
            self.dispatch(Action(ActionType.REQUEST_ERROR, CANCELLED_ERROR))
            raise
        except RecommenderError as e:
            return self.dispatch(Action(ActionType.REQUEST_ERROR, e.message))
        except Exception as e:
            logger.exception("Unexpected failure while fetching recommendations")
            return self.dispatch(Action(ActionType.REQUEST_ERROR, str(e) or GENERIC_ERROR))

        record = ResultRecord(
            genre=genre,
            mood=mood,
            level=level,
            model=client.model,
            at=datetime.now(timezone.utc),
            text=text,
        )
        return self.dispatch(Action(ActionType.REQUEST_SUCCESS, record))
