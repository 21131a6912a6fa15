"""
Pydantic models for essay recommendations.

``EssayCreate`` validates a new submission, ``EssayUpdate`` a partial
edit and ``EssayRead`` is the stored record returned by the API.  Field
names on the wire are camelCase (``createdAt``); Python code uses the
snake_case attribute names.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EssayBase(BaseModel):
    title: str = Field(..., min_length=1, examples=["On Liberty"])
    author: str = Field(..., min_length=1, examples=["J.S. Mill"])
    why: str = Field(..., min_length=1, examples=["Clarifies the harm principle"])
    source: Optional[str] = Field(None, examples=["https://www.gutenberg.org/ebooks/34901"])
    pseudonym: Optional[str] = Field(None, examples=["a reader"])


class EssayCreate(EssayBase):
    """Schema for submitting an essay.

    ``source`` and ``pseudonym`` may be omitted but not sent as ``null``.
    """

    @field_validator("source", "pseudonym", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value


class EssayUpdate(BaseModel):
    """Schema for editing an essay.

    All fields are optional; only fields present in the request body
    are applied.  ``title``, ``author`` and ``why`` may be omitted but
    not set to ``null``.  ``source`` and ``pseudonym`` accept ``null``
    to clear the value.
    """

    title: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, min_length=1)
    why: Optional[str] = Field(None, min_length=1)
    source: Optional[str] = None
    pseudonym: Optional[str] = None

    @field_validator("title", "author", "why", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value


class EssayRead(EssayBase):
    """Schema for reading an essay from the API."""

    id: str
    created_at: int = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


class EssayPage(BaseModel):
    """One page of the essay feed together with the collection size."""

    essays: List[EssayRead]
    total: int
