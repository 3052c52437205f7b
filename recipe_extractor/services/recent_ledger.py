"""Bounded list of recently extracted recipes."""
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

import yaml

from recipe_extractor.core.exceptions import ConfigurationError
from recipe_extractor.models.recipe import Recipe
from recipe_extractor.models.responses import RecentRecipe
from recipe_extractor.utils.validators import URLValidator

DEFAULT_SEED_PATH = Path(__file__).parent.parent / "config" / "seeds" / "recent_examples.yaml"


def truncate_description(text: Optional[str], length: int) -> str:
    """Shorten a description for list display."""
    if not text:
        return ""
    text = text.strip()
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "..."


def load_seed_entries(path: Path = DEFAULT_SEED_PATH, description_length: int = 100) -> List[RecentRecipe]:
    """Load the static example entries shown after live ones."""
    if not path.exists():
        return []

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"seed recipes ({path})", str(e))

    seeds = []
    for example in data.get("examples", []):
        recipe = Recipe.model_validate(example.get("recipe", {}))
        seeds.append(RecentRecipe(
            id=str(example["id"]),
            url=example["url"],
            title=recipe.title,
            description=truncate_description(recipe.description, description_length),
            recipe=recipe,
            is_example=True
        ))
    return seeds


class RecentLedger:
    """Most-recent-first list of extraction outcomes, one entry per normalized URL."""

    def __init__(
        self,
        max_entries: int = 10,
        description_length: int = 100,
        seeds: Sequence[RecentRecipe] = ()
    ):
        self.max_entries = max_entries
        self.description_length = description_length
        self._entries: List[RecentRecipe] = []
        self._seeds = tuple(seeds)

    def record(self, url: str, recipe: Recipe) -> RecentRecipe:
        """Record an outcome at the head, replacing any entry for the same video."""
        key = URLValidator.normalize_url(url)
        self._entries = [
            entry for entry in self._entries
            if URLValidator.normalize_url(entry.url) != key
        ]

        entry = RecentRecipe(
            id=uuid.uuid4().hex,
            url=url,
            title=recipe.title,
            description=truncate_description(recipe.description, self.description_length),
            recipe=recipe.model_copy(deep=True),
            created_at=datetime.now(timezone.utc).isoformat()
        )
        self._entries.insert(0, entry)
        del self._entries[self.max_entries:]
        return entry

    def entries(self) -> List[RecentRecipe]:
        """Live entries only, most recent first."""
        return list(self._entries)

    def list(self) -> List[RecentRecipe]:
        """Live entries followed by the fixed example entries."""
        return list(self._entries) + list(self._seeds)

    def __len__(self) -> int:
        return len(self._entries)
