from datetime import datetime
from pathlib import Path

import pytest

from arg_exporter.helpers.files import (
    default_output_folder,
    export_file_name,
    write_json_file,
)


@pytest.mark.parametrize(
    "resource_type, expected",
    [
        ("Microsoft.Storage/storageAccounts", "Microsoft.Storage-storageAccounts.json"),
        (
            "Microsoft.Network/networkSecurityGroups/securityRules",
            "Microsoft.Network-networkSecurityGroups-securityRules.json",
        ),
        ("microsoft.web\\sites", "microsoft.web-sites.json"),
        ("Microsoft.Web", "Microsoft.Web.json"),
    ],
)
def test_export_file_name_replaces_separators(resource_type: str, expected: str) -> None:
    assert export_file_name(resource_type) == expected


def test_default_output_folder_uses_timestamp() -> None:
    folder = default_output_folder(datetime(2024, 3, 5, 7, 8, 9))
    assert folder == Path("arg-output") / "20240305-070809"


def test_write_json_file_overwrites_whole_file(tmp_path: Path) -> None:
    target = tmp_path / "out.json"
    target.write_text('["a much longer previous document"]', encoding="utf-8")

    write_json_file(target, "[]")

    assert target.read_text("utf-8") == "[]"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["out.json"]


def test_write_json_file_removes_temp_file_on_failure(tmp_path: Path) -> None:
    target = tmp_path / "taken.json"
    target.mkdir()

    with pytest.raises(OSError):
        write_json_file(target, '[{"id": 1}]')

    assert sorted(path.name for path in tmp_path.iterdir()) == ["taken.json"]
    assert target.is_dir()


def test_write_json_file_writes_utf8(tmp_path: Path) -> None:
    target = tmp_path / "unicode.json"
    write_json_file(target, '[{"name": "日本リージョン"}]')
    assert "日本リージョン" in target.read_bytes().decode("utf-8")


def test_write_json_file_cleans_up_after_encoding_error(tmp_path: Path) -> None:
    target = tmp_path / "surrogate.json"

    with pytest.raises(UnicodeEncodeError):
        write_json_file(target, '[{"name": "\ud800"}]')

    assert list(tmp_path.iterdir()) == []
