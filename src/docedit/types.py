"""Result types shared by the managers and the client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class OperationResult:
    """Outcome of one public operation.

    Attributes:
        success: Whether the operation completed
        message: Human-readable summary or the failure reason
        metadata: Operation-specific details (counts, ids, positions)
    """

    success: bool
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, message: str, **metadata: Any) -> OperationResult:
        return cls(success=False, message=message, metadata=metadata)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.metadata:
            result["metadata"] = self.metadata
        return result
