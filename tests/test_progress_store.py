from study.progress_store import ProgressStore
from study.srs import record_feedback


def test_save_and_load_state(tmp_path):
    store = ProgressStore(tmp_path)
    state = record_feedback(None, "Good", now=1000.0)
    store.save_state("movie-1", "harbor", state)
    store.save_state("movie-1", "quiet", record_feedback(None, "Hard", now=1000.0))

    loaded = store.load_state("movie-1")

    assert set(loaded) == {"harbor", "quiet"}
    assert loaded["harbor"]["interval"] == 1
    assert loaded["harbor"]["next_review_ts"] == state["next_review_ts"]
    assert store.load_state("movie-2") == {}


def test_corrupt_file_loads_as_empty(tmp_path):
    store = ProgressStore(tmp_path)
    store.path_for("broken").write_bytes(b"{not json")

    assert store.load_state("broken") == {}


def test_collection_ids_are_sanitised_and_listed(tmp_path):
    store = ProgressStore(tmp_path)
    store.save_all("../Friends S01E01", {"pivot": record_feedback(None, "Easy", now=1.0)})

    path = store.path_for("../Friends S01E01")
    assert path.parent == tmp_path
    assert path.exists()
    assert store.list_collections() == ["../Friends S01E01"]


def test_similar_collection_ids_do_not_share_a_file(tmp_path):
    store = ProgressStore(tmp_path)
    store.save_state("Friends S01", "pivot", record_feedback(None, "Good", now=1.0))

    assert store.path_for("Friends S01") != store.path_for("Friends_S01")
    assert store.load_state("Friends_S01") == {}
    assert set(store.load_state("Friends S01")) == {"pivot"}


def test_delete_collection(tmp_path):
    store = ProgressStore(tmp_path)
    store.save_state("movie-1", "harbor", record_feedback(None, "Good", now=1.0))
    store.save_state("movie-2", "quiet", record_feedback(None, "Hard", now=1.0))

    assert store.delete_collection("movie-1") is True
    assert store.load_state("movie-1") == {}
    assert store.list_collections() == ["movie-2"]
    assert store.delete_collection("movie-1") is False
