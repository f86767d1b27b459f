"""
Document store schemas.

Pydantic models for document store responses and two-phase update results.

Dependencies: pydantic
System role: Type definitions for document store interactions
"""

import enum
from typing import Any

from pydantic import BaseModel, Field


class UpdatePhase(str, enum.Enum):
    """
    Steps of a delete-then-add document update.

    DELETE: Removing the stored document (failure leaves it unchanged)
    ADD: Storing the replacement (failure leaves no document for the hgid)
    """

    DELETE = "delete"
    ADD = "add"


class DocumentResponse(BaseModel):
    """Raw backend response to a single document request."""

    status_code: int = Field(description="HTTP status returned by the backend")
    body: dict[str, Any] = Field(default_factory=dict, description="Decoded JSON body")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class DocumentUpdateResult(BaseModel):
    """Outcome of a completed delete-then-add update."""

    delete_response: DocumentResponse = Field(description="Response to the delete phase")
    add_response: DocumentResponse = Field(description="Response to the add phase")

    @property
    def previously_existed(self) -> bool:
        """False when the delete phase found nothing to remove."""
        return not self.delete_response.not_found
