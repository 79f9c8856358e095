"""
Project Data Models

Pydantic models for projects. Every project belongs to exactly one client of
the same user.

Author: Timekeeper Development Team
"""

from pydantic import BaseModel, Field
from typing import Optional


class Project(BaseModel):
    """
    Project record as returned by the API.

    Attributes:
        id (str): Project identifier
        user_id (str): Owning user
        client_id (str): Parent client
        name (str): Display name
        description (Optional[str]): Free-form notes
        is_active (bool): False once soft-deleted
    """
    id: str
    user_id: str
    client_id: str
    name: str
    description: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_document(cls, document: dict) -> "Project":
        return cls(
            id=str(document["_id"]),
            user_id=document["user_id"],
            client_id=str(document["client_id"]),
            name=document["name"],
            description=document.get("description"),
            is_active=document.get("is_active", True),
        )


class ProjectCreate(BaseModel):
    client_id: str = Field(..., description="Parent client id")
    name: str = Field(..., min_length=1, description="Project name")
    description: Optional[str] = None


class ProjectUpdate(BaseModel):
    """
    Partial update of a project.

    ``client_id`` is always sent; a value different from the stored one moves
    the project to that client after checking the client's ownership.
    """
    client_id: str
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None
