"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from uuid import uuid4


class User(BaseModel):
    """
    A participant in groups and direct expenses.

    Identity is the id alone: two records with the same id are the same
    participant even if name or email differ.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    email: Optional[EmailStr] = None

    @field_validator('name')
    @classmethod
    def name_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError('User name must not be empty')
        return v.strip()

    def __eq__(self, other):
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)
