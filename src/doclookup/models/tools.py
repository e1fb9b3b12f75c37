from __future__ import annotations

from pydantic import BaseModel, field_validator

from doclookup.models.docs import ClassInfo


class ClassInfoQuery(BaseModel):
    query: str

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("query must not be empty")
        if len(v) > 500:
            raise ValueError("query must not exceed 500 characters")
        return v


class ClassInfoOutput(BaseModel):
    query: str
    found: bool
    class_info: ClassInfo | None = None
