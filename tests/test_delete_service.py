from __future__ import annotations

import csv
import os

from send2trash.exceptions import TrashPermissionError

from infrastructure import delete_service
from infrastructure.delete_service import DeleteService


def test_missing_file_is_reported(tmp_path) -> None:
    service = DeleteService(log_dir=str(tmp_path / "logs"))
    result = service.delete_to_recycle([str(tmp_path / "missing.jpg")])
    assert result.success_paths == []
    assert result.failed[0][1] == "File does not exist"


def test_permission_error_is_reported(tmp_path, monkeypatch) -> None:
    target = tmp_path / "a.jpg"
    target.write_bytes(b"x")

    def _refuse(path: str) -> None:
        raise TrashPermissionError(path)

    monkeypatch.setattr(delete_service, "send2trash", _refuse)
    result = DeleteService(log_dir=str(tmp_path)).delete_to_recycle([str(target)])
    assert result.success_paths == []
    assert result.failed[0][1].startswith("Permission denied")


def test_retries_with_absolute_path(tmp_path, monkeypatch) -> None:
    target = tmp_path / "a.jpg"
    target.write_bytes(b"x")
    calls: list[str] = []

    def _flaky(path: str) -> None:
        calls.append(path)
        if len(calls) == 1:
            raise OSError("transient")
        os.remove(path)

    monkeypatch.setattr(delete_service, "send2trash", _flaky)
    result = DeleteService(log_dir=str(tmp_path)).delete_to_recycle([str(target)])
    assert result.success_paths == [str(target)]
    assert len(calls) == 2


def test_execute_delete_writes_log(tmp_path, monkeypatch) -> None:
    ok = tmp_path / "ok.jpg"
    ok.write_bytes(b"x")
    monkeypatch.setattr(delete_service, "send2trash", os.remove)
    service = DeleteService(log_dir=str(tmp_path / "logs"))

    result = service.execute_delete(
        [str(ok), str(tmp_path / "missing.jpg")], photo_ids={str(ok): "id-ok"}
    )
    assert result.log_path is not None
    with open(result.log_path, encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[1] == ["id-ok", str(ok), "1", ""]
    assert rows[2][2] == "0"
    assert not ok.exists()
