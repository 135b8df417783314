import sys
from typing import Iterator

import pytest
from loguru import logger

from arg_exporter.log import setup_logger


@pytest.fixture(autouse=True)
def restore_logger() -> Iterator[None]:
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_setup_logger_masks_configured_secrets(
    capsys: pytest.CaptureFixture[str],
) -> None:
    setup_logger("INFO", "sup3r-s3cret-value")

    logger.info("authenticating with sup3r-s3cret-value")

    err = capsys.readouterr().err
    assert "authenticating with" in err
    assert "sup3r-s3cret-value" not in err


def test_setup_logger_respects_level(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logger("WARNING")

    logger.info("page fetched")
    logger.warning("page limit reached")

    err = capsys.readouterr().err
    assert "page fetched" not in err
    assert "page limit reached" in err
