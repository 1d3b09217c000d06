"""Tests for the demo dataset source."""

import json

import pytest

from app.core.exceptions import DatasetError
from app.shared.seeder.dataset import (
    DemoDataset,
    get_dataset,
    get_default_dataset,
    load_dataset,
)


def write_document(path, **overrides):
    document = {
        "users": [{"id": "u1", "email": "a@x.com"}],
        "validation_history": [],
        "sentiment_history": [],
        "system_settings": [{"key": "max_tokens", "value": "300"}],
    }
    document.update(overrides)
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


class TestBundledDataset:
    """Tests for the bundled demo dataset."""

    def test_loads_all_sections(self):
        """Bundled dataset should have records in every section."""
        dataset = load_dataset()

        assert set(dataset.sections) == {
            "users",
            "validation_history",
            "sentiment_history",
            "system_settings",
        }
        assert all(count > 0 for count in dataset.counts().values())

    def test_users_have_unique_emails(self):
        """Upsert keys should be unique within the bundled users."""
        emails = [u["email"] for u in load_dataset().records("users")]

        assert len(emails) == len(set(emails))

    def test_settings_have_unique_keys(self):
        """Upsert keys should be unique within the bundled settings."""
        keys = [s["key"] for s in load_dataset().records("system_settings")]

        assert len(keys) == len(set(keys))

    def test_default_dataset_is_cached(self):
        """The bundled dataset should be loaded once."""
        assert get_default_dataset() is get_default_dataset()
        assert get_dataset() is get_default_dataset()


class TestDemoDataset:
    """Tests for DemoDataset views."""

    def test_records_are_read_only(self):
        """Records should not be mutable through the dataset."""
        dataset = DemoDataset({"users": [{"email": "a@x.com"}]})

        with pytest.raises(TypeError):
            dataset.records("users")[0]["email"] = "b@x.com"

    def test_source_order_preserved(self):
        """Records should come back in source order."""
        dataset = DemoDataset({"users": [{"email": "b"}, {"email": "a"}]})

        assert [r["email"] for r in dataset.records("users")] == ["b", "a"]

    def test_unknown_section_raises(self):
        """Unknown sections should raise DatasetError."""
        with pytest.raises(DatasetError, match="no section 'profiles'"):
            DemoDataset({}).records("profiles")


class TestLoadDataset:
    """Tests for loading custom dataset files."""

    def test_loads_custom_file(self, tmp_path):
        """A custom document should be loaded from the given path."""
        path = write_document(tmp_path / "demo.json")

        dataset = get_dataset(path)

        assert dataset.counts() == {
            "users": 1,
            "validation_history": 0,
            "sentiment_history": 0,
            "system_settings": 1,
        }

    def test_missing_file_raises(self, tmp_path):
        """A missing file should raise DatasetError."""
        with pytest.raises(DatasetError, match="not found"):
            load_dataset(tmp_path / "missing.json")

    def test_missing_section_raises(self, tmp_path):
        """A document without a required section should raise DatasetError."""
        path = tmp_path / "demo.json"
        path.write_text(json.dumps({"users": []}), encoding="utf-8")

        with pytest.raises(DatasetError, match="Invalid demo dataset"):
            load_dataset(path)

    def test_wrong_record_type_raises(self, tmp_path):
        """Sections must hold objects."""
        path = write_document(tmp_path / "demo.json", users=["not-a-record"])

        with pytest.raises(DatasetError):
            load_dataset(path)

    def test_invalid_json_raises(self, tmp_path):
        """Malformed JSON should raise DatasetError."""
        path = tmp_path / "demo.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(DatasetError):
            load_dataset(path)
