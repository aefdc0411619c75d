import itertools
import json

from notecraft.core.metrics import ELLIPSIS
from notecraft.core.models import DraftFull, LinkSource
from notecraft.storage import DraftIndexStore, FileStorage, MemoryStorage
from notecraft.storage.drafts_index import DRAFTS_KEY

from conftest import BrokenStorage


def _clock(*values: int):
    it = iter(values)
    return lambda: next(it)


def _ids():
    counter = itertools.count(1)
    return lambda: f"d{next(counter)}"


def test_create_then_get_returns_blank_draft(storage) -> None:
    store = DraftIndexStore(storage)
    draft_id = store.create_draft()

    draft = store.get_draft(draft_id)
    assert draft is not None
    assert draft.title == ""
    assert draft.word_count == 0
    assert draft.source_count == 0
    assert draft.excerpt == ""


def test_create_prepends_and_persists_synchronously(storage) -> None:
    store = DraftIndexStore(storage, clock=_clock(1, 2), id_factory=_ids())
    first = store.create_draft()
    second = store.create_draft()

    assert [d.id for d in store.drafts] == [second, first]
    assert len(storage.writes_for(DRAFTS_KEY)) == 2
    persisted = json.loads(storage.get_item(DRAFTS_KEY))
    assert [d["id"] for d in persisted] == ["d2", "d1"]
    assert persisted[0]["updatedAt"] == 2


def test_save_derives_metadata(storage) -> None:
    store = DraftIndexStore(storage)
    draft_id = store.create_draft()
    saved = store.save_draft(DraftFull(id=draft_id, title="Hi", content="<p>Hello world</p>"))

    assert saved.word_count == 2
    assert saved.excerpt == "Hello world"
    assert store.get_draft(draft_id).word_count == 2


def test_returned_drafts_do_not_alias_the_cache(storage) -> None:
    store = DraftIndexStore(storage)
    saved = store.save_draft(DraftFull(id="x", content="<p>one two</p>"))
    saved.word_count = 999
    store.drafts[0].excerpt = "hand set"

    meta = store.list_drafts()[0]
    assert (meta.word_count, meta.excerpt) == (2, "one two")
    assert store.drafts[0].excerpt == "one two"


def test_save_long_content_excerpt(storage) -> None:
    store = DraftIndexStore(storage)
    text = "abcdefghij" * 9
    saved = store.save_draft(DraftFull(id="long", content=f"<p>{text}</p>"))
    assert saved.excerpt == text[:80] + ELLIPSIS
    assert len(saved.excerpt) == 81


def test_save_ignores_hand_set_metadata(storage) -> None:
    store = DraftIndexStore(storage, clock=_clock(10))
    sources = [LinkSource(id="a", title="example.com", url="https://example.com")]
    saved = store.save_draft(
        DraftFull(
            id="x",
            content="<p>one two three</p>",
            sources=sources,
            word_count=100,
            source_count=9,
            excerpt="lies",
            updated_at=99999,
        )
    )
    assert (saved.word_count, saved.source_count, saved.excerpt) == (3, 1, "one two three")
    assert saved.updated_at == 10


def test_save_is_metadata_idempotent(storage) -> None:
    store = DraftIndexStore(storage, clock=_clock(100, 200))
    draft = DraftFull(id="x", content="<p>same words here</p>")
    first = store.save_draft(draft)
    second = store.save_draft(first)

    assert (first.word_count, first.source_count, first.excerpt) == (
        second.word_count,
        second.source_count,
        second.excerpt,
    )
    assert second.updated_at > first.updated_at
    assert len(store.drafts) == 1


def test_save_replaces_existing_entry_in_place(storage) -> None:
    store = DraftIndexStore(storage, clock=_clock(1, 2, 3), id_factory=_ids())
    store.create_draft()
    store.create_draft()
    store.save_draft(DraftFull(id="d1", title="updated"))

    assert [d.id for d in store.drafts] == ["d1", "d2"]
    assert store.drafts[0].title == "updated"


def test_enumeration_is_sorted_by_recency(storage) -> None:
    store = DraftIndexStore(storage, clock=_clock(100, 200))
    store.save_draft(DraftFull(id="old", title="old"))
    store.save_draft(DraftFull(id="new", title="new"))

    assert [d.updated_at for d in store.list_drafts()] == [200, 100]
    assert [d.id for d in store.list_drafts()] == ["new", "old"]


def test_sort_ties_keep_relative_order(storage) -> None:
    store = DraftIndexStore(storage, clock=lambda: 5)
    for name in ("a", "b", "c"):
        store.save_draft(DraftFull(id=name))
    first = [d.id for d in store.drafts]
    store.save_draft(DraftFull(id="b"))
    assert [d.id for d in store.drafts] == first


def test_list_drafts_returns_summaries(storage) -> None:
    store = DraftIndexStore(storage)
    store.save_draft(DraftFull(id="x", content="<p>body</p>"))
    summary = store.list_drafts()[0]
    assert not hasattr(summary, "content")
    assert summary.excerpt == "body"


def test_delete_removes_and_persists(storage) -> None:
    store = DraftIndexStore(storage, id_factory=_ids())
    store.create_draft()
    store.create_draft()
    store.delete_draft("d1")

    assert [d.id for d in store.drafts] == ["d2"]
    assert store.get_draft("d1") is None


def test_delete_unknown_id_is_noop(storage) -> None:
    store = DraftIndexStore(storage)
    draft_id = store.create_draft()
    store.delete_draft("missing")
    assert [d.id for d in store.drafts] == [draft_id]


def test_get_unknown_returns_none(storage) -> None:
    assert DraftIndexStore(storage).get_draft("nope") is None


def test_get_reads_storage_not_cache(storage) -> None:
    store = DraftIndexStore(storage)
    store.load()
    other = DraftIndexStore(storage)
    other.save_draft(DraftFull(id="elsewhere", title="from another tab"))

    assert [d.id for d in store.drafts] == []
    assert store.get_draft("elsewhere").title == "from another tab"


def test_corrupt_collection_loads_empty() -> None:
    store = DraftIndexStore(MemoryStorage({DRAFTS_KEY: "[{broken"}))
    assert store.load() == []
    assert store.get_draft("x") is None


def test_broken_storage_degrades_gracefully() -> None:
    store = DraftIndexStore(BrokenStorage())
    assert store.load() == []
    draft_id = store.create_draft()
    assert [d.id for d in store.drafts] == [draft_id]
    store.save_draft(DraftFull(id=draft_id, content="<p>x</p>"))
    store.delete_draft(draft_id)
    assert store.drafts == []
    assert store.get_draft(draft_id) is None


def test_undecodable_collection_file_loads_empty(tmp_path) -> None:
    (tmp_path / f"{DRAFTS_KEY}.json").write_bytes(b"[\xff]")
    store = DraftIndexStore(FileStorage(tmp_path))
    assert store.load() == []
    assert store.get_draft("x") is None
