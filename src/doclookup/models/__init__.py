from __future__ import annotations

from doclookup.models.docs import ClassInfo, ClassName, LibraryInfo, MethodInfo
from doclookup.models.tools import ClassInfoOutput, ClassInfoQuery

__all__ = [
    # docs
    "ClassName",
    "ClassInfo",
    "MethodInfo",
    "LibraryInfo",
    # tools
    "ClassInfoQuery",
    "ClassInfoOutput",
]
