"""Tests for the orchestrator, index storage, and resumable corpus runs."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from podcast_advisor.config import Settings
from podcast_advisor.errors import IndexLoadError, TranscriptDirectoryError
from podcast_advisor.extraction.models import AdviceFields, ExtractionResult
from podcast_advisor.ingestion.models import AdviceRecord
from podcast_advisor.ingestion.pipeline import (
    SAMPLE_TRANSCRIPTS,
    ingest_corpus,
    list_transcript_files,
    make_record_id,
    process_transcript,
    topic_distribution,
)
from podcast_advisor.ingestion.storage import (
    load_existing_index,
    load_index,
    resolve_index_path,
    save_index,
)
from podcast_advisor.topics import Topic

TEST_SETTINGS = Settings(
    _env_file=None,  # type: ignore[call-arg]
    chunk_target_words=5,
    chunk_max_words=20,
    request_delay_seconds=0.01,
)


def _transcript(guest: str, turns: int = 2) -> str:
    first = guest.split()[0]
    lines = []
    for i in range(turns):
        lines.append(f"Lenny (00:{i:02d}:00):")
        lines.append("What is your advice?")
        lines.append(f"{first} (00:{i:02d}:30):")
        lines.append(f"Turn {i} advice from {first} about pricing things.")
    return "\n".join(lines)


def _valid(*topics: Topic) -> ExtractionResult:
    return ExtractionResult.valid(
        AdviceFields(topics=topics, insight="An insight.", quote="A quote.", context="Context.")
    )


def _record(guest: str, n: int, *topics: Topic) -> AdviceRecord:
    return AdviceRecord(
        id=make_record_id(guest, n),
        guest=guest,
        episode=guest,
        topics=topics,
        insight="i",
        quote="q",
        context="c",
        timestamp="00:00:01",
    )


@pytest.fixture
def transcripts_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "transcripts"
    directory.mkdir()
    for guest in ["Ami Vora", "Brian Chesky", "Claire Hughes"]:
        (directory / f"{guest}.txt").write_text(_transcript(guest), encoding="utf-8")
    (directory / "notes.md").write_text("not a transcript", encoding="utf-8")
    return directory


class TestRecordId:
    def test_slug_and_sequence(self) -> None:
        assert make_record_id("Ami Vora", 3) == "ami-vora-3"
        assert make_record_id("Dr.  Jane   Smith", 1) == "dr.-jane-smith-1"


class TestIndexStorage:
    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "data" / "advice-index.json"
        records = [_record("Ami Vora", 1, Topic.GROWTH, Topic.PRICING), _record("Ami Vora", 4, Topic.AI)]

        save_index(path, records, transcript_count=1, generated_at="2026-01-01T00:00:00Z")
        index = load_index(path)

        assert index.version == "1.0.0"
        assert index.generated_at == "2026-01-01T00:00:00Z"
        assert index.transcript_count == 1
        assert index.chunks == records

    def test_json_uses_camel_case_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        save_index(path, [_record("Ami Vora", 1, Topic.GROWTH)], transcript_count=1)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert set(data) == {"version", "generatedAt", "transcriptCount", "chunks"}
        assert data["chunks"][0]["topics"] == ["growth"]
        assert data["generatedAt"].endswith("Z")

    def test_save_leaves_no_temp_files(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        save_index(path, [], transcript_count=0)
        save_index(path, [_record("Ami Vora", 1, Topic.GROWTH)], transcript_count=1)
        assert [p.name for p in tmp_path.iterdir()] == ["index.json"]
        assert load_index(path).transcript_count == 1

    def test_load_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(IndexLoadError, match="not found"):
            load_index(tmp_path / "missing.json")

    def test_load_corrupt_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text("{ truncated", encoding="utf-8")
        with pytest.raises(IndexLoadError, match="unreadable"):
            load_index(path)

    def test_load_existing_missing_is_none(self, tmp_path: Path) -> None:
        assert load_existing_index(tmp_path / "missing.json") is None

    def test_load_existing_corrupt_is_none(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text("[]", encoding="utf-8")
        assert load_existing_index(path) is None

    def test_resolve_index_path_names_attempts(self, tmp_path: Path) -> None:
        a, b = tmp_path / "a.json", tmp_path / "b.json"
        with pytest.raises(IndexLoadError) as exc_info:
            resolve_index_path([a, b])
        assert str(a) in str(exc_info.value)
        assert str(b) in str(exc_info.value)
        assert exc_info.value.paths == [str(a), str(b)]

        b.write_text("{}", encoding="utf-8")
        assert resolve_index_path([a, b]) == b


class TestListTranscriptFiles:
    def test_lists_txt_in_name_order(self, transcripts_dir: Path) -> None:
        files = list_transcript_files(transcripts_dir)
        assert [f.stem for f in files] == ["Ami Vora", "Brian Chesky", "Claire Hughes"]

    def test_sample_falls_back_to_first_three(self, transcripts_dir: Path) -> None:
        (transcripts_dir / "Zed.txt").write_text(_transcript("Zed"), encoding="utf-8")
        files = list_transcript_files(transcripts_dir, sample=True)
        assert [f.stem for f in files] == ["Ami Vora", "Brian Chesky", "Claire Hughes"]

    def test_sample_prefers_named_transcripts(self, tmp_path: Path) -> None:
        for name in [*SAMPLE_TRANSCRIPTS, "Aaron.txt"]:
            (tmp_path / name).write_text(_transcript(Path(name).stem), encoding="utf-8")
        files = list_transcript_files(tmp_path, sample=True)
        assert [f.name for f in files] == SAMPLE_TRANSCRIPTS

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(TranscriptDirectoryError, match="not found"):
            list_transcript_files(tmp_path / "nope")

    def test_empty_directory(self, tmp_path: Path) -> None:
        with pytest.raises(TranscriptDirectoryError, match="No .txt transcripts"):
            list_transcript_files(tmp_path)


class TestProcessTranscript:
    @patch("podcast_advisor.ingestion.pipeline.extract_advice")
    def test_builds_records_from_valid_results(self, mock_extract: MagicMock, tmp_path: Path) -> None:
        path = tmp_path / "Ami Vora.txt"
        path.write_text(_transcript("Ami Vora", turns=3), encoding="utf-8")
        mock_extract.side_effect = [
            _valid(Topic.PRICING),
            ExtractionResult.no_advice(),
            _valid(Topic.GROWTH, Topic.AI),
        ]
        sleep = MagicMock()

        records = process_transcript(path, client=MagicMock(), settings=TEST_SETTINGS, sleep=sleep)

        assert mock_extract.call_count == 3
        assert [r.id for r in records] == ["ami-vora-1", "ami-vora-3"]
        assert records[0].guest == "Ami Vora"
        assert records[0].episode == "Ami Vora"
        assert records[0].timestamp == "00:00:00"
        assert records[1].topics == (Topic.GROWTH, Topic.AI)
        # Pause between calls, not before the first one
        assert sleep.call_count == 2
        sleep.assert_called_with(0.01)

    @patch("podcast_advisor.ingestion.pipeline.extract_advice")
    def test_skips_failures_and_empty_topics(self, mock_extract: MagicMock, tmp_path: Path) -> None:
        path = tmp_path / "Ami Vora.txt"
        path.write_text(_transcript("Ami Vora", turns=4), encoding="utf-8")
        mock_extract.side_effect = [
            ExtractionResult.failed("overloaded"),
            ExtractionResult.unparseable("No JSON found in response"),
            _valid(),
            RuntimeError("boom"),
        ]

        records = process_transcript(path, client=MagicMock(), settings=TEST_SETTINGS, sleep=MagicMock())

        assert records == []
        assert mock_extract.call_count == 4

    @patch("podcast_advisor.ingestion.pipeline.extract_advice")
    def test_ads_never_reach_the_oracle(self, mock_extract: MagicMock, tmp_path: Path) -> None:
        path = tmp_path / "Ami Vora.txt"
        path.write_text(
            "Lenny (00:00:01):\nThis episode is brought to you by Acme.\n"
            "Ami (00:00:10):\nShip small things every week.\n",
            encoding="utf-8",
        )
        mock_extract.return_value = ExtractionResult.no_advice()

        process_transcript(path, client=MagicMock(), settings=TEST_SETTINGS, sleep=MagicMock())

        sent = " ".join(call.args[0] for call in mock_extract.call_args_list)
        assert "Acme" not in sent
        assert "Ship small things" in sent


class TestIngestCorpus:
    @patch("podcast_advisor.ingestion.pipeline.extract_advice")
    def test_full_run_checkpoints_each_transcript(
        self, mock_extract: MagicMock, transcripts_dir: Path, tmp_path: Path
    ) -> None:
        index_path = tmp_path / "data" / "advice-index.json"
        mock_extract.return_value = _valid(Topic.GROWTH)

        with patch("podcast_advisor.ingestion.pipeline.save_index", wraps=save_index) as spy:
            summary = ingest_corpus(
                transcripts_dir, index_path, client=MagicMock(), settings=TEST_SETTINGS, sleep=MagicMock()
            )

        assert spy.call_count == 3
        assert [c.args[2] for c in spy.call_args_list] == [1, 2, 3]
        assert summary.processed == 3
        assert summary.skipped == 0
        index = load_index(index_path)
        assert index.transcript_count == 3
        assert index.guests == {"Ami Vora", "Brian Chesky", "Claire Hughes"}
        assert len({r.id for r in index.chunks}) == len(index.chunks)

    @patch("podcast_advisor.ingestion.pipeline.extract_advice")
    def test_resume_after_interruption(
        self, mock_extract: MagicMock, transcripts_dir: Path, tmp_path: Path
    ) -> None:
        index_path = tmp_path / "advice-index.json"
        calls: list[str] = []

        def first_run(chunk: str, guest: str, episode: str, **kwargs: object) -> ExtractionResult:
            if guest != "Ami Vora":
                raise KeyboardInterrupt
            calls.append(guest)
            return _valid(Topic.PRICING)

        mock_extract.side_effect = first_run
        with pytest.raises(KeyboardInterrupt):
            ingest_corpus(
                transcripts_dir, index_path, client=MagicMock(), settings=TEST_SETTINGS, sleep=MagicMock()
            )

        after_crash = load_index(index_path)
        assert after_crash.guests == {"Ami Vora"}
        assert after_crash.transcript_count == 1
        ami_records = len(after_crash.chunks)
        assert ami_records > 0

        def second_run(chunk: str, guest: str, episode: str, **kwargs: object) -> ExtractionResult:
            calls.append(guest)
            return _valid(Topic.GROWTH)

        mock_extract.side_effect = second_run
        summary = ingest_corpus(
            transcripts_dir, index_path, client=MagicMock(), settings=TEST_SETTINGS, sleep=MagicMock()
        )

        assert summary.skipped == 1
        assert summary.processed == 2
        index = load_index(index_path)
        assert index.transcript_count == 3
        assert [r.guest for r in index.chunks].count("Ami Vora") == ami_records
        assert "Ami Vora" not in calls[ami_records:]
        assert set(calls[ami_records:]) == {"Brian Chesky", "Claire Hughes"}

    @patch("podcast_advisor.ingestion.pipeline.extract_advice")
    def test_rerun_with_everything_done_is_noop(
        self, mock_extract: MagicMock, transcripts_dir: Path, tmp_path: Path
    ) -> None:
        index_path = tmp_path / "advice-index.json"
        mock_extract.return_value = _valid(Topic.GROWTH)
        ingest_corpus(transcripts_dir, index_path, client=MagicMock(), settings=TEST_SETTINGS, sleep=MagicMock())
        before = index_path.read_text(encoding="utf-8")
        mock_extract.reset_mock()

        summary = ingest_corpus(
            transcripts_dir, index_path, client=MagicMock(), settings=TEST_SETTINGS, sleep=MagicMock()
        )

        mock_extract.assert_not_called()
        assert summary.processed == 0
        assert summary.skipped == 3
        assert index_path.read_text(encoding="utf-8") == before

    @patch("podcast_advisor.ingestion.pipeline.extract_advice")
    def test_transcript_without_advice_is_not_counted(
        self, mock_extract: MagicMock, transcripts_dir: Path, tmp_path: Path
    ) -> None:
        index_path = tmp_path / "advice-index.json"
        calls: list[str] = []

        def extract(chunk: str, guest: str, episode: str, **kwargs: object) -> ExtractionResult:
            calls.append(guest)
            if guest == "Brian Chesky":
                return ExtractionResult.no_advice()
            return _valid(Topic.STRATEGY)

        mock_extract.side_effect = extract
        with patch("podcast_advisor.ingestion.pipeline.save_index", wraps=save_index) as spy:
            summary = ingest_corpus(
                transcripts_dir, index_path, client=MagicMock(), settings=TEST_SETTINGS, sleep=MagicMock()
            )

        assert [c.args[2] for c in spy.call_args_list] == [1, 1, 2]
        index = load_index(index_path)
        assert index.guests == {"Ami Vora", "Claire Hughes"}
        assert index.transcript_count == len(index.guests) == 2
        assert summary.transcript_count == 2

        # Nothing from that transcript reached the index, so a rerun retries it.
        calls.clear()
        ingest_corpus(transcripts_dir, index_path, client=MagicMock(), settings=TEST_SETTINGS, sleep=MagicMock())
        assert set(calls) == {"Brian Chesky"}
        assert load_index(index_path).transcript_count == 2

    def test_missing_directory_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(TranscriptDirectoryError):
            ingest_corpus(tmp_path / "missing", tmp_path / "index.json", client=MagicMock())


class TestTopicDistribution:
    def test_counts_most_common_first(self) -> None:
        records = [
            _record("A", 1, Topic.GROWTH, Topic.PRICING),
            _record("A", 2, Topic.GROWTH),
            _record("B", 1, Topic.AI),
            _record("B", 2, Topic.GROWTH),
        ]
        distribution = topic_distribution(records)
        assert distribution[0] == ("growth", 3)
        assert dict(distribution) == {"growth": 3, "pricing": 1, "ai": 1}
