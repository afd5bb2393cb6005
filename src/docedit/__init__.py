"""docedit - Structure-aware editing of Google Docs.

Parses documents.get payloads into index-aware snapshots, validates edit
parameters before any network call, and turns high-level operations into
documents.batchUpdate requests.
"""

__version__ = "0.1.0"

# Managers first: docedit.requests depends on the validation manager.
from docedit.managers import (  # isort: skip
    BatchOperationManager,
    HeaderFooterManager,
    TableOperationManager,
    ValidationManager,
)
from docedit.client import DocsEditClient
from docedit.config import Settings, get_settings
from docedit.exceptions import (
    APIError,
    AuthenticationError,
    DocEditError,
    NotFoundError,
    OperationError,
    ResolutionError,
    TransportError,
)
from docedit.logging import setup_logging
from docedit.structure import (
    DocumentElement,
    DocumentStructure,
    TableCell,
    TableInfo,
    analyze_document_complexity,
    find_element_at_index,
    find_tables,
    get_next_paragraph_index,
    get_table_cell_indices,
    parse_document_structure,
    utf16_len,
)
from docedit.tables import TableStyleOptions
from docedit.transport import (
    DocumentData,
    GoogleDocsTransport,
    LocalFileTransport,
    Transport,
)
from docedit.types import OperationResult

__all__ = [
    "APIError",
    "AuthenticationError",
    "BatchOperationManager",
    "DocEditError",
    "DocsEditClient",
    "DocumentData",
    "DocumentElement",
    "DocumentStructure",
    "GoogleDocsTransport",
    "HeaderFooterManager",
    "LocalFileTransport",
    "NotFoundError",
    "OperationError",
    "OperationResult",
    "ResolutionError",
    "Settings",
    "TableCell",
    "TableInfo",
    "TableOperationManager",
    "TableStyleOptions",
    "Transport",
    "TransportError",
    "ValidationManager",
    "__version__",
    "analyze_document_complexity",
    "find_element_at_index",
    "find_tables",
    "get_next_paragraph_index",
    "get_settings",
    "get_table_cell_indices",
    "parse_document_structure",
    "setup_logging",
    "utf16_len",
]
