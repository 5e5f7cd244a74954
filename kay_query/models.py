"""Response shapes shared by the catalogs and the dispatcher."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict


class Envelope(BaseModel):
    """Successful catalog response.

    Entries may attach extra top-level keys (``total``, ``total_tables``,
    configuration sections). Fields never set are left out of the output.
    """
    model_config = ConfigDict(extra="allow")

    success: bool = True
    description: str
    data: Any = None
    note: Optional[str] = None
    metrics: Optional[Dict[str, Any]] = None

    def to_payload(self) -> Dict[str, Any]:
        dumped = self.model_dump(mode="json")
        keep = {"success", "description"}
        keep |= self.model_fields_set & {"data", "note", "metrics"}
        keep |= set(self.model_extra or {})
        return {key: value for key, value in dumped.items() if key in keep}


class CatalogMiss(BaseModel):
    """Returned for a key outside a catalog; lists the keys that exist."""
    success: bool = False
    error: str
    available: List[str]

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


CatalogResult = Union[Envelope, CatalogMiss]


class ToolOutcome(BaseModel):
    """Text handed back to the MCP client, flagged when the call failed."""
    is_error: bool
    text: str

    @classmethod
    def success(cls, text: str) -> "ToolOutcome":
        return cls(is_error=False, text=text)

    @classmethod
    def failure(cls, message: str) -> "ToolOutcome":
        return cls(is_error=True, text=f"Error: {message}")
