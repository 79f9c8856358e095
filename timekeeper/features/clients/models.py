"""
Client Data Models

Pydantic models for client records and the request bodies that create and
update them.

Author: Timekeeper Development Team
"""

from pydantic import BaseModel, Field
from typing import Optional


class Client(BaseModel):
    """
    Client record as returned by the API.

    Attributes:
        id (str): Client identifier
        user_id (str): Owning user
        name (str): Display name
        description (Optional[str]): Free-form notes
        is_active (bool): False once soft-deleted
    """
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_document(cls, document: dict) -> "Client":
        return cls(
            id=str(document["_id"]),
            user_id=document["user_id"],
            name=document["name"],
            description=document.get("description"),
            is_active=document.get("is_active", True),
        )


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Client name")
    description: Optional[str] = Field(None, description="Optional notes about the client")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Acme Corp",
                "description": "Retainer, billed monthly"
            }
        }


class ClientUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None
