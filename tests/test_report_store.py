"""Tests for plagiarism report persistence."""
import json
import threading

import pytest

from manuscript_refs.models import PlagiarismReport, PlagiarismSource, TextMatch
from manuscript_refs.originality.report_store import InMemoryReportStore, JsonFileReportStore


def _report(article_id="art-1", similarity=0.42):
    match = TextMatch(
        original_text="shared words here",
        matched_text="Shared words here",
        similarity=1.0,
        start_position=10,
        end_position=27,
        source_id="crossref:10.1000/x",
    )
    source = PlagiarismSource(
        source_id="crossref:10.1000/x",
        title="Source paper",
        authors=["Doe, J."],
        similarity=similarity,
        matched_words=3,
        total_words=40,
        matches=[match],
        doi="10.1000/x",
    )
    return PlagiarismReport(
        article_id=article_id,
        overall_similarity=similarity,
        sources=[source],
        text_matches=[match],
        status='completed',
        service='external',
    )


class TestReportSerialization:
    """JSON shape of a report."""

    def test_camel_case_keys(self):
        data = _report().to_dict()
        assert data["articleId"] == "art-1"
        assert data["overallSimilarity"] == 0.42
        assert data["sources"][0]["matchedWords"] == 3
        assert data["textMatches"][0]["startPosition"] == 10
        assert isinstance(data["generatedAt"], str)
        json.dumps(data)

    def test_from_dict_restores_report(self):
        report = _report()
        restored = PlagiarismReport.from_dict(report.to_dict())
        assert restored == report


class TestInMemoryReportStore:

    def test_missing(self):
        assert InMemoryReportStore().get("nope") is None

    def test_save_replaces_previous(self):
        store = InMemoryReportStore()
        store.save(_report(similarity=0.4))
        store.save(_report(similarity=0.9))
        assert store.get("art-1").overall_similarity == 0.9

    def test_stored_copy_is_isolated(self):
        store = InMemoryReportStore()
        report = _report()
        store.save(report)
        report.sources.clear()
        assert len(store.get("art-1").sources) == 1


class TestJsonFileReportStore:

    def test_round_trip(self, tmp_path):
        store = JsonFileReportStore(tmp_path)
        report = _report()
        store.save(report)
        assert store.get("art-1") == report

    def test_missing(self, tmp_path):
        assert JsonFileReportStore(tmp_path).get("art-1") is None

    def test_unsafe_ids_get_distinct_files(self, tmp_path):
        store = JsonFileReportStore(tmp_path)
        assert store.path_for("a/b") != store.path_for("a_b")
        assert store.path_for("../../etc").parent == tmp_path

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        store = JsonFileReportStore(tmp_path)
        store.save(_report(similarity=0.4))
        store.save(_report(similarity=0.8))
        assert store.get("art-1").overall_similarity == 0.8
        assert [p.suffix for p in tmp_path.iterdir()] == [".json"]

    def test_corrupt_file(self, tmp_path):
        store = JsonFileReportStore(tmp_path)
        store.path_for("art-1").write_text("{not json", encoding="utf-8")
        assert store.get("art-1") is None

    def test_concurrent_saves_same_article(self, tmp_path):
        store = JsonFileReportStore(tmp_path)
        threads = [
            threading.Thread(target=store.save, args=(_report(similarity=i / 10),))
            for i in range(1, 9)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        stored = store.get("art-1")
        assert stored is not None
        assert stored.overall_similarity in {i / 10 for i in range(1, 9)}

    @pytest.mark.parametrize("article_id", ["simple", "with space", "ünïcode"])
    def test_ids(self, tmp_path, article_id):
        store = JsonFileReportStore(tmp_path)
        store.save(_report(article_id=article_id))
        assert store.get(article_id).article_id == article_id
