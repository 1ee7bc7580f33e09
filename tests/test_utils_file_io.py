from pathlib import Path

from doc_color_decomposer.utils import file_io


def test_write_read_json_roundtrip(tmp_path: Path):
    data = {"a": 1, "b": {"c": [1, 2]}}
    path = tmp_path / "sub" / "data.json"
    file_io.write_json(data, path)
    loaded = file_io.read_json(path)
    assert loaded == data


def test_read_missing_json(tmp_path: Path):
    assert file_io.read_json(tmp_path / "missing.json") == {}
