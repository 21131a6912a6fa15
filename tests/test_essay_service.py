from __future__ import annotations

import json
from pathlib import Path

import pytest

from essay_board.app.core.db import JSONStorage, StorageError
from essay_board.app.schemas.essay import EssayCreate, EssayUpdate
from essay_board.app.services.essay_service import EssayService
from support import StepClock, run


@pytest.fixture()
def clock() -> StepClock:
    return StepClock()


@pytest.fixture()
def service(storage: JSONStorage, clock: StepClock) -> EssayService:
    return EssayService(storage, clock=clock)


def _essay(n: int, **extra) -> EssayCreate:
    return EssayCreate(title=f"Essay {n}", author=f"Author {n}", why=f"Reason {n}", **extra)


def test_create_assigns_identity_and_persists(service: EssayService, data_file: Path) -> None:
    created = run(service.create_essay(_essay(1, source="https://example.com")))

    assert created.id
    assert created.created_at == 1_700_000_000_000
    assert created.source == "https://example.com"
    assert created.pseudonym is None

    stored = json.loads(data_file.read_text(encoding="utf-8"))["essays"]
    assert stored == [
        {
            "id": created.id,
            "title": "Essay 1",
            "author": "Author 1",
            "why": "Reason 1",
            "source": "https://example.com",
            "createdAt": 1_700_000_000_000,
        }
    ]


def test_create_then_get_round_trips(service: EssayService) -> None:
    created = run(service.create_essay(_essay(1, pseudonym="owl")))
    assert run(service.get_essay(created.id)) == created


def test_get_unknown_returns_none(service: EssayService) -> None:
    assert run(service.get_essay("missing")) is None


def test_ids_are_unique_even_if_factory_repeats(storage: JSONStorage) -> None:
    ids = iter(["dup", "dup", "fresh"])
    service = EssayService(storage, id_factory=lambda: next(ids))

    first = run(service.create_essay(_essay(1)))
    second = run(service.create_essay(_essay(2)))

    assert (first.id, second.id) == ("dup", "fresh")


def test_list_sorts_newest_first_across_pages(service: EssayService) -> None:
    for n in range(7):
        run(service.create_essay(_essay(n)))

    pages = [run(service.list_essays(page=p, limit=3)) for p in (1, 2, 3)]
    titles = [essay.title for page in pages for essay in page.essays]
    stamps = [essay.created_at for page in pages for essay in page.essays]

    assert titles == [f"Essay {n}" for n in range(6, -1, -1)]
    assert stamps == sorted(stamps, reverse=True)
    assert all(page.total == 7 for page in pages)
    assert [len(page.essays) for page in pages] == [3, 3, 1]


def test_list_page_beyond_range_is_empty(service: EssayService) -> None:
    for n in range(15):
        run(service.create_essay(_essay(n)))

    result = run(service.list_essays(page=2, limit=20))

    assert result.essays == []
    assert result.total == 15


def test_equal_timestamps_order_by_insertion(storage: JSONStorage) -> None:
    service = EssayService(storage, clock=lambda: 42)
    for n in range(3):
        run(service.create_essay(_essay(n)))

    result = run(service.list_essays())

    assert [essay.title for essay in result.essays] == ["Essay 2", "Essay 1", "Essay 0"]


def test_update_applies_only_present_fields(service: EssayService) -> None:
    created = run(service.create_essay(_essay(1, source="notes", pseudonym="owl")))

    updated = run(service.update_essay(created.id, EssayUpdate(why="Still relevant")))

    assert updated.why == "Still relevant"
    assert updated.title == created.title
    assert updated.source == "notes"
    assert updated.pseudonym == "owl"
    assert run(service.get_essay(created.id)) == updated


def test_update_never_changes_identity(service: EssayService) -> None:
    created = run(service.create_essay(_essay(1)))
    payload = EssayUpdate.model_validate({"title": "New", "id": "hijack", "createdAt": 1})

    updated = run(service.update_essay(created.id, payload))

    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert updated.title == "New"


def test_update_null_clears_optional_fields(service: EssayService) -> None:
    created = run(service.create_essay(_essay(1, source="notes", pseudonym="owl")))

    updated = run(service.update_essay(created.id, EssayUpdate.model_validate({"source": None})))

    assert updated.source is None
    assert updated.pseudonym == "owl"


def test_update_unknown_does_not_write(service: EssayService, data_file: Path) -> None:
    before = data_file.stat().st_mtime_ns
    assert run(service.update_essay("missing", EssayUpdate(title="x"))) is None
    assert data_file.stat().st_mtime_ns == before
    assert run(service.list_essays()).total == 0


def test_delete_is_final(service: EssayService) -> None:
    keep = run(service.create_essay(_essay(1)))
    gone = run(service.create_essay(_essay(2)))

    assert run(service.delete_essay(gone.id)) is True
    assert run(service.get_essay(gone.id)) is None
    listed = run(service.list_essays())
    assert [essay.id for essay in listed.essays] == [keep.id]
    assert run(service.delete_essay(gone.id)) is False


def test_delete_unknown_skips_write(service: EssayService, storage: JSONStorage, monkeypatch) -> None:
    run(service.create_essay(_essay(1)))

    def fail_write(document):
        raise AssertionError("no write expected")

    monkeypatch.setattr(storage, "write", fail_write)

    assert run(service.delete_essay("missing")) is False


def test_every_operation_rereads_the_file(service: EssayService, storage: JSONStorage) -> None:
    created = run(service.create_essay(_essay(1)))
    storage.write({"essays": [], "users": []})

    assert run(service.get_essay(created.id)) is None
    assert run(service.list_essays()).total == 0


def test_corrupt_file_propagates_storage_error(service: EssayService, data_file: Path) -> None:
    data_file.write_text("{oops", encoding="utf-8")

    with pytest.raises(StorageError):
        run(service.list_essays())
    with pytest.raises(StorageError):
        run(service.create_essay(_essay(1)))

    assert data_file.read_text(encoding="utf-8") == "{oops"


def test_malformed_record_is_a_storage_error(service: EssayService, storage: JSONStorage) -> None:
    storage.write({"essays": [{"id": "bad", "createdAt": 1}], "users": []})

    with pytest.raises(StorageError):
        run(service.get_essay("bad"))


def test_non_integer_created_at_is_a_storage_error(service: EssayService, storage: JSONStorage) -> None:
    base = {"title": "T", "author": "A", "why": "W"}
    storage.write(
        {
            "essays": [{**base, "id": "a", "createdAt": 1}, {**base, "id": "b", "createdAt": "yesterday"}],
            "users": [],
        }
    )

    with pytest.raises(StorageError):
        run(service.list_essays())
