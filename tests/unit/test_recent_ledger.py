"""Unit tests for the recent recipes ledger."""
import pytest
from recipe_extractor.models.recipe import Recipe
from recipe_extractor.models.responses import RecentRecipe
from recipe_extractor.services.recent_ledger import (
    RecentLedger, load_seed_entries, truncate_description
)


def make_seed(seed_id: str) -> RecentRecipe:
    recipe = Recipe(title=f"Seed {seed_id}")
    return RecentRecipe(
        id=seed_id, url=f"https://youtu.be/{seed_id}", title=recipe.title,
        description="", recipe=recipe, is_example=True
    )


class TestRecentLedger:
    """Test recent ledger behaviour."""

    def test_record_prepends(self):
        ledger = RecentLedger(max_entries=10)
        ledger.record("https://youtu.be/a", Recipe(title="A"))
        ledger.record("https://youtu.be/b", Recipe(title="B"))

        titles = [entry.title for entry in ledger.list()]
        assert titles == ["B", "A"]

    def test_record_same_video_keeps_single_entry_at_head(self):
        ledger = RecentLedger(max_entries=10)
        ledger.record("https://www.tiktok.com/@x/video/1?lang=en", Recipe(title="First"))
        ledger.record("https://youtu.be/other", Recipe(title="Other"))
        ledger.record("https://www.TIKTOK.com/@x/video/1", Recipe(title="Second"))

        entries = ledger.list()
        assert len(entries) == 2
        assert entries[0].title == "Second"
        assert entries[0].url == "https://www.TIKTOK.com/@x/video/1"
        assert entries[1].title == "Other"

    def test_bound_drops_oldest(self):
        ledger = RecentLedger(max_entries=10)
        for i in range(25):
            ledger.record(f"https://youtu.be/v{i}", Recipe(title=f"R{i}"))
            assert len(ledger) <= 10

        titles = [entry.title for entry in ledger.list()]
        assert titles[0] == "R24"
        assert titles[-1] == "R15"

    def test_seeds_appended_and_not_counted(self):
        seeds = [make_seed("s1"), make_seed("s2")]
        ledger = RecentLedger(max_entries=2, seeds=seeds)
        for i in range(3):
            ledger.record(f"https://youtu.be/v{i}", Recipe(title=f"R{i}"))

        entries = ledger.list()
        assert [e.title for e in entries] == ["R2", "R1", "Seed s1", "Seed s2"]
        assert len(ledger) == 2

    def test_seeds_not_deduplicated_against_live(self):
        seeds = [make_seed("dup")]
        ledger = RecentLedger(max_entries=5, seeds=seeds)
        ledger.record("https://youtu.be/dup", Recipe(title="Live"))

        urls = [entry.url for entry in ledger.list()]
        assert urls == ["https://youtu.be/dup", "https://youtu.be/dup"]

    def test_entry_fields(self):
        ledger = RecentLedger(max_entries=5, description_length=10)
        recipe = Recipe(title="Curry", description="A long and fragrant curry")
        entry = ledger.record("https://youtu.be/curry", recipe)

        assert entry.id
        assert entry.description == "A long and..."
        assert entry.recipe == recipe
        assert entry.is_example is False

    def test_entries_get_unique_ids(self):
        ledger = RecentLedger(max_entries=5)
        first = ledger.record("https://youtu.be/a", Recipe())
        second = ledger.record("https://youtu.be/a", Recipe())
        assert first.id != second.id


class TestHelpers:
    """Test module-level helpers."""

    @pytest.mark.parametrize("text,expected", [
        (None, ""),
        ("", ""),
        ("short", "short"),
        ("exactly ten", "exactly te..."),
    ])
    def test_truncate_description(self, text, expected):
        assert truncate_description(text, 10) == expected

    def test_load_default_seeds(self):
        seeds = load_seed_entries()
        assert len(seeds) >= 1
        assert all(seed.is_example for seed in seeds)
        assert seeds[0].recipe.instructions[0].step == 1

    def test_missing_seed_file(self, tmp_path):
        assert load_seed_entries(tmp_path / "missing.yaml") == []
