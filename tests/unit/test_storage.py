"""Unit tests for local artifact storage."""
import json

import pytest

from tldr.storage import (
    SUMMARY_BATCH_FILE,
    TRANSCRIPT_FILE,
    LocalArtifactStore,
    sanitize_filename,
)


class TestSanitizeFilename:
    def test_keeps_safe_characters(self):
        assert sanitize_filename("pHJmmTivG1k") == "pHJmmTivG1k"
        assert sanitize_filename("-abc_123") == "-abc_123"

    def test_replaces_unsafe_characters(self):
        assert sanitize_filename("a/b c?") == "a_b_c_"

    def test_strips_leading_dots(self):
        assert sanitize_filename("../etc") == "_etc"
        assert sanitize_filename("...") == "item"

    def test_trims_length(self):
        assert len(sanitize_filename("x" * 500)) == 200


def test_transcript_round_trip(artifact_store):
    path = artifact_store.write_transcript("vid1", "hello transcript")

    assert path.name == TRANSCRIPT_FILE
    assert path.parent.name == "vid1"
    assert artifact_store.read_transcript("vid1") == "hello transcript"
    assert artifact_store.exists("vid1", TRANSCRIPT_FILE)


def test_summary_batch_is_indented_json_array(artifact_store):
    path = artifact_store.write_summary_batch("vid1", ["one", "two"])

    raw = path.read_text(encoding="utf-8")
    assert path.name == SUMMARY_BATCH_FILE
    assert json.loads(raw) == ["one", "two"]
    assert raw == json.dumps(["one", "two"], indent=2)
    assert artifact_store.read_summary_batch("vid1") == ["one", "two"]


def test_summary_batch_must_be_list_of_strings(artifact_store):
    path = artifact_store.item_dir("vid1") / SUMMARY_BATCH_FILE
    path.write_text(json.dumps({"not": "a list"}), encoding="utf-8")

    with pytest.raises(ValueError):
        artifact_store.read_summary_batch("vid1")


def test_final_summary_round_trip(artifact_store):
    artifact_store.write_summary("vid1", "final")

    assert artifact_store.read_summary("vid1") == "final"


def test_missing_artifacts_raise(artifact_store):
    with pytest.raises(FileNotFoundError):
        artifact_store.read_transcript("nope")
    with pytest.raises(FileNotFoundError):
        artifact_store.read_summary_batch("nope")


def test_identifiers_stay_inside_root(artifact_store):
    artifact_store.write_transcript("../escape", "text")

    assert (artifact_store.root_dir / "_escape" / TRANSCRIPT_FILE).exists()
