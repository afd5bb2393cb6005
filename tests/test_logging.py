"""Tests for the loguru setup and document context."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator

import pytest

from docedit.logging import (
    clear_document_context,
    format_record,
    get_document_context,
    logger,
    set_document_context,
    setup_logging,
)


@pytest.fixture
def restore_logger() -> Iterator[None]:
    yield
    logger.remove()
    logger.add(sys.__stderr__)
    clear_document_context()


def test_format_record_without_context() -> None:
    """Test no context block is emitted outside an operation."""
    clear_document_context()
    fmt = format_record({})

    assert "[" not in fmt
    assert fmt.endswith("<level>{message}</level>\n{exception}")


def test_format_record_with_context() -> None:
    """Test the operation and shortened document ID prefix the message."""
    set_document_context("1AbCdEfGhIjKlMnOpQrStUvWxYz", "modify_doc_text")
    try:
        fmt = format_record({})
    finally:
        clear_document_context()

    assert "[op=modify_doc_text doc=1AbCdEfGhIjK] " in fmt


def test_set_document_context_keeps_unset_values() -> None:
    """Test passing only an operation leaves the document ID alone."""
    set_document_context("doc-1")
    set_document_context(operation="inspect")
    try:
        assert get_document_context() == {"document_id": "doc-1", "operation": "inspect"}
    finally:
        clear_document_context()


def test_setup_logging_json(
    restore_logger: None, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test JSON mode writes one serialized record per line."""
    setup_logging(json_logs=True, log_level="DEBUG")

    logger.debug("fetched document")

    record = json.loads(capsys.readouterr().err.splitlines()[-1])
    assert record["record"]["message"] == "fetched document"
    assert record["record"]["level"]["name"] == "DEBUG"


def test_setup_logging_level(
    restore_logger: None, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test messages below the configured level are dropped."""
    setup_logging(log_level="WARNING")

    logger.info("quiet")
    logger.warning("loud")

    output = capsys.readouterr().err
    assert "quiet" not in output
    assert "loud" in output
