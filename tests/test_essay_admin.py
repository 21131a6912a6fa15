from __future__ import annotations

import json
from pathlib import Path

import pytest

from essay_admin import _parse_args, main
from essay_board.app.core.db import JSONStorage
from essay_board.app.schemas.essay import EssayCreate
from essay_board.app.services.essay_service import EssayService
from support import StepClock, run


def _seed(path: Path, count: int) -> list[str]:
    service = EssayService(JSONStorage(path), clock=StepClock())
    return [
        run(service.create_essay(EssayCreate(title=f"Essay {n}", author="A", why="W"))).id
        for n in range(count)
    ]


def test_init_creates_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "board.json"

    assert main(["--data", str(path), "init"]) == 0

    assert json.loads(path.read_text(encoding="utf-8")) == {"essays": [], "users": []}
    assert "Data file ready" in capsys.readouterr().out


def test_list_prints_newest_first(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "board.json"
    ids = _seed(path, 3)

    assert main(["--data", str(path), "list", "--limit", "2"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith(ids[2])
    assert lines[1].startswith(ids[1])
    assert lines[-1] == "[=] 2 shown, 3 total"


def test_show_and_delete(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "board.json"
    (essay_id,) = _seed(path, 1)

    assert main(["--data", str(path), "show", essay_id]) == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown["id"] == essay_id
    assert "createdAt" in shown

    assert main(["--data", str(path), "delete", essay_id]) == 0
    assert main(["--data", str(path), "delete", essay_id]) == 2
    assert main(["--data", str(path), "show", essay_id]) == 2


def test_add_user_rejects_duplicates(tmp_path: Path) -> None:
    path = tmp_path / "board.json"

    assert main(["--data", str(path), "add-user", "reader", "--password", "pw"]) == 0
    assert main(["--data", str(path), "add-user", "reader", "--password", "pw"]) == 2

    users = json.loads(path.read_text(encoding="utf-8"))["users"]
    assert [user["username"] for user in users] == ["reader"]


def test_storage_error_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "board.json"
    path.write_text("nope", encoding="utf-8")

    assert main(["--data", str(path), "list"]) == 1
    assert "Storage error" in capsys.readouterr().err


def test_bad_created_at_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "board.json"
    essays = [
        {"id": "a", "title": "T", "author": "A", "why": "W", "createdAt": 1},
        {"id": "b", "title": "T", "author": "A", "why": "W", "createdAt": "yesterday"},
    ]
    path.write_text(json.dumps({"essays": essays, "users": []}), encoding="utf-8")

    assert main(["--data", str(path), "list"]) == 1
    assert "Storage error" in capsys.readouterr().err


def test_list_rejects_non_positive_paging() -> None:
    with pytest.raises(SystemExit):
        _parse_args(["list", "--page", "0"])
