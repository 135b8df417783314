import os
from datetime import datetime
from pathlib import Path

from loguru import logger

DEFAULT_OUTPUT_ROOT = Path("arg-output")
OUTPUT_FOLDER_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

_PATH_SEPARATORS = ("/", "\\")


def export_file_name(resource_type: str) -> str:
    file_name = resource_type
    for separator in _PATH_SEPARATORS:
        file_name = file_name.replace(separator, "-")
    return f"{file_name}.json"


def default_output_folder(now: datetime | None = None) -> Path:
    now = now or datetime.now()
    return DEFAULT_OUTPUT_ROOT / now.strftime(OUTPUT_FOLDER_TIMESTAMP_FORMAT)


def write_json_file(path: Path, content: str) -> None:
    """Replace `path` with `content`, leaving no partially written target behind."""
    # writing to a temp file first for atomicity
    temp_file = path.with_name(path.name + ".tmp")
    try:
        with open(temp_file, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(temp_file, path)
    except Exception:
        temp_file.unlink(missing_ok=True)
        raise
    logger.debug(f"Wrote {len(content)} characters to {path}")
