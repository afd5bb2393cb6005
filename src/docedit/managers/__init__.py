"""Operation managers.

High-level manager classes that orchestrate validation, request building
and transport calls for multi-step document edits.
"""

from docedit.managers.validation_manager import ValidationManager  # isort: skip
from docedit.managers.batch_operation_manager import BatchOperationManager
from docedit.managers.header_footer_manager import HeaderFooterManager
from docedit.managers.table_operation_manager import TableOperationManager

__all__ = [
    "BatchOperationManager",
    "HeaderFooterManager",
    "TableOperationManager",
    "ValidationManager",
]
