"""Pydantic models for account documents and provisioning results."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

ADMIN_ROLE = "admin"
DEFAULT_ROLE = "student"


class Account(BaseModel):
    """A document in the users collection.

    Fields the web app owns but this tool does not touch (``token`` etc.)
    are kept as extras so an update never drops them. Documents written by
    older app versions may carry null name/role; those still load.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True, arbitrary_types_allowed=True)

    id: Optional[Any] = Field(default=None, alias="_id")
    name: Optional[str] = None
    email: str
    password: Optional[str] = None
    role: Optional[str] = DEFAULT_ROLE
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Account":
        return cls.model_validate(doc)

    def to_document(self) -> Dict[str, Any]:
        # Only fields loaded from the store or assigned since; no defaults
        doc = self.model_dump(by_alias=True, exclude_none=True, exclude_unset=True)
        doc.update({k: v for k, v in (self.model_extra or {}).items() if v is not None})
        return doc


class AdminCredentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)


class ProvisionOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


class ProvisionResult(BaseModel):
    outcome: ProvisionOutcome
    account_id: str
    email: str


class AdminStatus(BaseModel):
    email: str
    exists: bool
    role: Optional[str] = None
    password_valid: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


__all__ = [
    "ADMIN_ROLE",
    "DEFAULT_ROLE",
    "Account",
    "AdminCredentials",
    "ProvisionOutcome",
    "ProvisionResult",
    "AdminStatus",
]
