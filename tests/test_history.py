"""Tests for the generation history store."""

import pytest
import sys
import os

from pydantic import ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from selfintro.schemas.form import FormData, PersonalInfo
from selfintro.schemas.generation import GenerationRecordDraft
from selfintro.services.history import GenerationHistoryStore
from selfintro.storage import GENERATION_RECORDS_KEY, SessionStorage


def _draft(title="王小明", text="Hi 王小明", cost=0.0001) -> GenerationRecordDraft:
    return GenerationRecordDraft(
        project_id="p1",
        project_title=title,
        form_data=FormData(personal_info=PersonalInfo(name="王小明")),
        generated_text=text,
        model_provider="openai",
        model_id="gpt-4o",
        estimated_tokens=3,
        estimated_cost=cost,
        prompt_template="Hi {name}",
        actual_prompt="Hi 王小明",
    )


class TestAppend:
    """Test append and lookup."""

    def test_append_assigns_id_and_timestamp(self, device_storage):
        history = GenerationHistoryStore(device_storage)
        record_id = history.append(_draft())
        record = history.get_by_id(record_id)

        assert record.id == record_id
        assert record.timestamp > 0
        assert record.generated_text == "Hi 王小明"
        assert record.form_data.personal_info.name == "王小明"

    def test_ids_unique(self, device_storage):
        history = GenerationHistoryStore(device_storage)
        ids = {history.append(_draft()) for _ in range(5)}
        assert len(ids) == 5
        assert len(history) == 5

    def test_insertion_order(self, device_storage):
        history = GenerationHistoryStore(device_storage)
        history.append(_draft(title="a"))
        history.append(_draft(title="b"))
        assert [r.project_title for r in history.list()] == ["a", "b"]

    def test_append_existing_record_gets_new_identity(self, device_storage):
        """Re-archiving a full record assigns a fresh id instead of clashing."""
        history = GenerationHistoryStore(device_storage)
        archived = history.get_by_id(history.append(_draft()))
        copy_id = history.append(archived)

        assert copy_id != archived.id
        assert history.get_by_id(copy_id).generated_text == archived.generated_text
        assert len(history) == 2

    def test_get_missing(self, device_storage):
        assert GenerationHistoryStore(device_storage).get_by_id("nope") is None

    def test_record_is_frozen(self, device_storage):
        history = GenerationHistoryStore(device_storage)
        record = history.get_by_id(history.append(_draft()))
        with pytest.raises(ValidationError):
            record.generated_text = "edited"


class TestDelete:
    """Test delete_by_id."""

    def test_delete(self, device_storage):
        history = GenerationHistoryStore(device_storage)
        keep = history.append(_draft(title="keep"))
        drop = history.append(_draft(title="drop"))
        history.delete_by_id(drop)
        assert [r.id for r in history.list()] == [keep]

    def test_delete_missing_is_noop(self, device_storage):
        history = GenerationHistoryStore(device_storage)
        history.append(_draft())
        history.delete_by_id("nope")
        assert len(history) == 1


class TestPersistence:
    """Test the device-storage round trip."""

    def test_reload_across_instances(self, device_storage):
        first = GenerationHistoryStore(device_storage)
        record_id = first.append(_draft())

        second = GenerationHistoryStore(device_storage)
        assert second.get_by_id(record_id) == first.get_by_id(record_id)

    def test_survives_reopening_database(self, db_url):
        from selfintro.storage import open_device_storage

        record_id = GenerationHistoryStore(open_device_storage(db_url)).append(_draft())
        reopened = GenerationHistoryStore(open_device_storage(db_url))
        assert reopened.get_by_id(record_id).project_title == "王小明"

    def test_stored_with_camel_case_keys(self, session_storage):
        GenerationHistoryStore(session_storage).append(_draft())
        raw = session_storage.get_json(GENERATION_RECORDS_KEY)
        assert raw[0]["generatedText"] == "Hi 王小明"
        assert "personalInfo" in raw[0]["formData"]

    def test_corrupt_storage_reads_as_empty(self):
        storage = SessionStorage({GENERATION_RECORDS_KEY: "[{broken"})
        history = GenerationHistoryStore(storage)
        assert history.list() == []
        history.append(_draft())
        assert len(GenerationHistoryStore(storage)) == 1


class TestSortedBy:
    """Test display ordering."""

    def test_sorted_by_cost(self, session_storage):
        history = GenerationHistoryStore(session_storage)
        history.append(_draft(title="cheap", cost=0.001))
        history.append(_draft(title="pricey", cost=0.01))
        ordered = history.sorted_by("estimated_cost")
        assert [r.project_title for r in ordered] == ["pricey", "cheap"]

    def test_sorted_by_does_not_reorder_store(self, session_storage):
        history = GenerationHistoryStore(session_storage)
        history.append(_draft(title="b"))
        history.append(_draft(title="a"))
        history.sorted_by("project_title", descending=False)
        assert [r.project_title for r in history.list()] == ["b", "a"]

    def test_unknown_field(self, session_storage):
        with pytest.raises(ValueError):
            GenerationHistoryStore(session_storage).sorted_by("generated_text")
