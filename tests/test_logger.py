from pathlib import Path
from types import SimpleNamespace

from image_registrar.utils.logger import add_log_context


def _record(path, **extra):
    return {"file": SimpleNamespace(path=str(path)), "extra": dict(extra)}


def test_path_under_cwd_is_made_relative(tmp_path, monkeypatch):
    tmp_path = tmp_path.resolve()
    monkeypatch.chdir(tmp_path)
    record = _record(tmp_path / "pkg" / "mod.py", region="us-east-1")

    assert add_log_context(record) is True
    assert record["extra"]["rel_path"] == str(Path("pkg") / "mod.py")
    assert record["extra"]["formatted_prefix"] == "[us-east-1] "


def test_path_outside_cwd_is_kept_and_no_region_means_no_prefix(tmp_path, monkeypatch):
    tmp_path = tmp_path.resolve()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    outside = tmp_path / "elsewhere" / "mod.py"
    record = _record(outside)

    add_log_context(record)

    assert record["extra"]["rel_path"] == str(outside)
    assert record["extra"]["formatted_prefix"] == ""
