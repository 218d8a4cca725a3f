"""
Data models for the FaleProxy pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(slots=True, frozen=True)
class SubstitutionResult:
    """Serialized HTML and the rewritten page title."""

    html: str
    title: str


@dataclass(slots=True, frozen=True)
class ResponsePayload:
    """Successful response of the ``/fetch`` endpoint."""

    content: str
    title: str
    original_url: str
    processed_url: str

    def to_dict(self) -> Dict[str, Any]:
        """JSON body in the camelCase shape the browser client expects."""
        return {
            "success": True,
            "content": self.content,
            "title": self.title,
            "originalUrl": self.original_url,
            "processedUrl": self.processed_url,
        }


def error_body(message: str) -> Dict[str, str]:
    return {"error": message}
