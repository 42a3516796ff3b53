"""
Unit tests for the bounded preference store: upsert, eviction, ordering and failure handling.
"""

from unittest.mock import Mock
import pytest

from hook_ranker.application.preference_store import PreferenceStore, MAX_MEMORY_LIMIT
from hook_ranker.domain.errors import ContractError, RepositoryError
from hook_ranker.infrastructure.persistence.memory import InMemoryPreferenceRepository

from conftest import FakeEmbeddingService, StepClock


class TestRecordJudgment:
    """Test recording likes and dislikes."""

    def test_new_judgment_is_appended_with_embedding(self, store, fake_embeddings):
        """Test a first judgment embeds the text once and persists one record."""
        fake_embeddings.table["great hook"] = [0.5, 0.25]

        assert store.record_judgment("great hook", True) is True

        records = store.all_records()
        assert len(records) == 1
        assert records[0].text == "great hook"
        assert records[0].embedding == [0.5, 0.25]
        assert records[0].liked is True
        assert fake_embeddings.calls == [["great hook"]]

    def test_rejudging_same_text_overwrites_in_place(self, store):
        """Test like then dislike of the same text leaves exactly one disliked record."""
        store.record_judgment("t", True)
        store.record_judgment("t", False)

        records = [r for r in store.all_records() if r.text == "t"]
        assert len(records) == 1
        assert records[0].liked is False

    def test_rejudging_recomputes_embedding(self, store, fake_embeddings):
        """Test the embedding is recomputed rather than reused on re-judgment."""
        fake_embeddings.table["t"] = [1.0, 0.0]
        store.record_judgment("t", True)
        fake_embeddings.table["t"] = [0.0, 1.0]
        store.record_judgment("t", True)

        assert store.all_records()[0].embedding == [0.0, 1.0]
        assert len(fake_embeddings.calls) == 2

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_text_is_rejected(self, store, text):
        """Test empty or missing text violates the contract."""
        with pytest.raises(ContractError):
            store.record_judgment(text, True)

    def test_embedding_failure_preserves_previous_state(self, store, fake_embeddings):
        """Test a failing embedding call drops the judgment silently."""
        store.record_judgment("kept", True)
        before = store.all_records()
        fake_embeddings.fail = True

        assert store.record_judgment("dropped", False) is False
        assert store.all_records() == before

    def test_save_failure_preserves_previous_state(self, fake_embeddings):
        """Test a failing repository write drops the judgment silently."""
        repo = InMemoryPreferenceRepository()
        store = PreferenceStore(repo, fake_embeddings, clock=StepClock())
        store.record_judgment("kept", True)
        before = repo.load()

        original_save = repo.save
        repo.save = Mock(side_effect=RepositoryError("disk full"))
        assert store.record_judgment("dropped", True) is False
        repo.save = original_save
        assert repo.load() == before

    def test_timestamps_strictly_increase_with_frozen_clock(self, memory_repo, fake_embeddings):
        """Test the logical clock advances even when wall-clock does not."""
        store = PreferenceStore(memory_repo, fake_embeddings, clock=lambda: 42.0)
        for t in ["a", "b", "c"]:
            store.record_judgment(t, True)

        stamps = {r.text: r.timestamp for r in store.all_records()}
        assert stamps["a"] < stamps["b"] < stamps["c"]

    def test_invalid_max_records(self, memory_repo, fake_embeddings):
        """Test a non-positive bound is rejected."""
        with pytest.raises(ContractError):
            PreferenceStore(memory_repo, fake_embeddings, max_records=0)


class TestBoundedMemory:
    """Test the rolling-window eviction rule."""

    def test_default_limit_is_fifty(self, store):
        assert MAX_MEMORY_LIMIT == 50
        assert store.max_records == 50

    def test_fifty_one_judgments_evict_earliest(self, store):
        """Test 51 distinct judgments keep the 50 newest and drop the first."""
        texts = [f"hook {i}" for i in range(51)]
        for t in texts:
            store.record_judgment(t, True)

        records = store.all_records()
        kept = {r.text for r in records}
        assert len(records) == 50
        assert "hook 0" not in kept
        assert kept == set(texts[1:])

    def test_bound_holds_for_long_sequences(self, fake_embeddings, memory_repo):
        """Test the store never exceeds its bound and keeps exactly the newest records."""
        store = PreferenceStore(memory_repo, fake_embeddings, max_records=5, clock=StepClock())
        for i in range(23):
            store.record_judgment(f"h{i}", i % 2 == 0)
            assert len(store.all_records()) <= 5

        assert {r.text for r in store.all_records()} == {f"h{i}" for i in range(18, 23)}

    def test_rejudging_refreshes_recency(self, fake_embeddings, memory_repo):
        """Test re-judging an old text protects it from the next eviction."""
        store = PreferenceStore(memory_repo, fake_embeddings, max_records=3, clock=StepClock())
        for t in ["a", "b", "c"]:
            store.record_judgment(t, True)
        store.record_judgment("a", False)
        store.record_judgment("d", True)

        assert {r.text for r in store.all_records()} == {"a", "c", "d"}

    def test_records_persisted_newest_first(self, store):
        for t in ["a", "b", "c"]:
            store.record_judgment(t, True)

        assert [r.text for r in store.all_records()] == ["c", "b", "a"]


class TestQueries:
    """Test read operations, forget and reset."""

    def test_recent_liked_filters_and_orders(self, store):
        """Test recent_liked skips dislikes and returns newest first, truncated."""
        store.record_judgment("l1", True)
        store.record_judgment("d1", False)
        store.record_judgment("l2", True)
        store.record_judgment("l3", True)

        assert [r.text for r in store.recent_liked(2)] == ["l3", "l2"]
        assert [r.text for r in store.recent_liked(10)] == ["l3", "l2", "l1"]
        assert store.recent_liked(0) == []

    def test_reset_clears_everything(self, store):
        store.record_judgment("a", True)
        store.record_judgment("b", False)

        assert store.reset() is True
        assert store.all_records() == []
        assert len(store) == 0

    def test_reset_failure_is_reported(self, fake_embeddings):
        repo = Mock()
        repo.load.return_value = []
        repo.save.side_effect = RepositoryError("read-only")
        store = PreferenceStore(repo, fake_embeddings)

        assert store.reset() is False

    def test_forget_removes_single_record(self, store):
        store.record_judgment("a", True)
        store.record_judgment("b", True)

        assert store.forget("a") is True
        assert [r.text for r in store.all_records()] == ["b"]
        assert store.forget("missing") is False

    def test_profiles_are_independent(self, fake_embeddings):
        """Test two stores over separate repositories do not share state."""
        alice = PreferenceStore(InMemoryPreferenceRepository(), fake_embeddings, clock=StepClock())
        bob = PreferenceStore(InMemoryPreferenceRepository(), fake_embeddings, clock=StepClock())
        alice.record_judgment("only alice", True)

        assert len(alice) == 1
        assert len(bob) == 0
