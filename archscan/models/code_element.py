"""
Models for code elements.
Provides the data structure linking a component to the types that implement it.
"""
from typing import Optional

from pydantic import BaseModel

from .enums import CodeElementRole

class CodeElement(BaseModel):
    """A type attributed to a component, either as its primary or a supporting type"""
    type: str
    role: CodeElementRole
    package: str = ''
    source_path: Optional[str] = None

    @property
    def name(self) -> str:
        return self.type.rpartition('.')[2]

    @property
    def is_primary(self) -> bool:
        return self.role == CodeElementRole.PRIMARY

    @property
    def is_supporting(self) -> bool:
        return self.role == CodeElementRole.SUPPORTING
