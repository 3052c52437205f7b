"""Recipe data models.

Validators coerce loosely shaped replies instead of rejecting them, so any
JSON object yields a Recipe.
"""
import json
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator

DEFAULT_TITLE = "Untitled Recipe"


def _coerce_text(value: Any) -> Any:
    """Numbers from the model ("amount": 2) are kept as text, containers as JSON."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return [item for item in value if item is not None]
    return [value]


def _as_mapping(value: Any, text_field: str) -> Any:
    """Bare strings (or other scalars) become {text_field: value}."""
    if isinstance(value, (dict, BaseModel)):
        return value
    return {text_field: _coerce_text(value)}


class Ingredient(BaseModel):
    """Single ingredient line."""
    item: Optional[str] = None
    amount: Optional[str] = None
    unit: Optional[str] = None
    notes: Optional[str] = None

    model_config = {"extra": "allow"}

    @field_validator("item", "amount", "unit", "notes", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _coerce_text(v)


class InstructionStep(BaseModel):
    """Single instruction step, in the order returned by the analysis service."""
    step: Optional[int] = None
    instruction: Optional[str] = None
    tip: Optional[str] = None

    model_config = {"extra": "allow"}

    @field_validator("step", mode="before")
    @classmethod
    def coerce_step(cls, v):
        # Anything that is not a whole number is dropped, never rejected
        if isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        if isinstance(v, float):
            return int(v) if v.is_integer() else None
        if isinstance(v, str):
            stripped = v.strip().rstrip(".")
            return int(stripped) if stripped.isdigit() else None
        return None

    @field_validator("instruction", "tip", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _coerce_text(v)


class Recipe(BaseModel):
    """Structured recipe extracted from a video."""
    title: str = DEFAULT_TITLE
    description: Optional[str] = None
    prepTime: Optional[str] = None
    cookTime: Optional[str] = None
    totalTime: Optional[str] = None
    servings: Optional[str] = None
    difficulty: Optional[str] = None
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[InstructionStep] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    # Whatever else the model returns is passed through untouched
    model_config = {"extra": "allow"}

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_TITLE
        return _coerce_text(v)

    @field_validator("description", "prepTime", "cookTime", "totalTime", "servings", "difficulty", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _coerce_text(v)

    @field_validator("ingredients", mode="before")
    @classmethod
    def coerce_ingredients(cls, v):
        return [_as_mapping(item, "item") for item in _as_list(v)]

    @field_validator("instructions", mode="before")
    @classmethod
    def coerce_instructions(cls, v):
        return [_as_mapping(item, "instruction") for item in _as_list(v)]

    @field_validator("notes", "tags", mode="before")
    @classmethod
    def text_list(cls, v):
        if isinstance(v, str) and not v.strip():
            return []
        return [_coerce_text(item) for item in _as_list(v)]
