from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, field_validator


class ClassName(BaseModel):
    """Fully-qualified and simple name of one documented class."""

    model_config = ConfigDict(frozen=True)

    full: str  # e.g. "java.util.Map.Entry" (the canonical name)
    simple: str  # e.g. "Map.Entry"

    @field_validator("full", "simple")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or v != v.strip():
            raise ValueError(f"Invalid class name: {v!r}")
        return v

    @classmethod
    def from_entry_path(cls, entry: str) -> ClassName:
        """Derive the class name from an archive entry such as ``java/util/Map.Entry.json``."""
        path = PurePosixPath(entry)
        simple = path.stem
        package = ".".join(path.parent.parts)
        full = f"{package}.{simple}" if package else simple
        return cls(full=full, simple=simple)


class MethodInfo(BaseModel):
    name: str
    signature: str = ""
    description: str = ""
    deprecated: bool = False


class ClassInfo(BaseModel):
    """Parsed documentation for a single class."""

    name: ClassName
    description: str = ""
    url: str | None = None  # Absolute link to the rendered docs page
    modifiers: list[str] = []
    superclass: str | None = None
    interfaces: list[str] = []
    methods: list[MethodInfo] = []
    deprecated: bool = False
    library: str | None = None


class LibraryInfo(BaseModel):
    """Contents of an archive's optional info.json."""

    name: str
    version: str | None = None
    base_url: str | None = None

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must use http or https scheme")
        return v if v.endswith("/") else v + "/"
