"""
Pydantic models for user data.

Users are kept in the data file for compatibility with older
deployments; no HTTP endpoint exposes them.  Passwords are stored as
given, which is not acceptable for a production system.
"""

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, examples=["reader"])
    password: str = Field(..., examples=["strongpassword"])


class UserRead(UserCreate):
    """Schema for a stored user."""

    id: str
