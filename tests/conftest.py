"""Shared fixtures for docedit tests."""

from __future__ import annotations

from typing import Any

import pytest

from docedit.mock import MockTransport, make_document, table
from docedit.mock.documents import DEFAULT_DOCUMENT_ID


@pytest.fixture
def document_id() -> str:
    return DEFAULT_DOCUMENT_ID


@pytest.fixture
def table_document() -> dict[str, Any]:
    """A body of: section break, "Intro", a 2x2 table (A, B / C, D), "after".

    Indices after reindexing:
        Intro paragraph    1-7
        table              7-23  (cells 9-12, 12-15, 16-19, 19-22)
        after paragraph    23-29
    """
    return make_document(["Intro", table([["A", "B"], ["C", "D"]]), "after"])


@pytest.fixture
def table_transport(table_document: dict[str, Any]) -> MockTransport:
    return MockTransport(table_document)
