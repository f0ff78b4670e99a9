"""Data models for loaded posts and body validation results"""

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict


class ImageRef(BaseModel):
    """Header image for a post; path is relative to the site's asset root."""
    model_config = ConfigDict(extra="allow")

    path: Optional[str] = None


class SeoMeta(BaseModel):
    """Auxiliary metadata for search engines and feeds."""
    model_config = ConfigDict(extra="allow")

    date_modified: Optional[AwareDatetime] = None
    description: Optional[str] = None


class Document(BaseModel):
    """A parsed post: decoded frontmatter plus the raw markup body."""
    title: str
    date: AwareDatetime
    categories: list[str] = []
    tags: list[str] = []             # unique, first-seen order
    image: Optional[ImageRef] = None
    seo: Optional[SeoMeta] = None
    body: str = ""                   # verbatim text after the closing delimiter
    extra: dict[str, Any] = {}       # frontmatter keys outside the known schema
    source_path: Optional[str] = None
    slug: str = ""
    hash: str = ""
    excerpt: str = ""

    @property
    def source_name(self) -> str:
        """File name used to break ties between posts with the same date."""
        return Path(self.source_path).name if self.source_path else self.slug


class Severity(str, Enum):
    """How serious a body finding is; errors fail a strict build"""
    error = "error"
    warning = "warning"


class BodyValidationWarning(BaseModel):
    """A single non-fatal finding from body validation."""
    severity: Severity
    code: str
    message: str
    line: Optional[int] = None       # 1-based line within the body


class ValidationResult(BaseModel):
    """All findings for one body."""
    warnings: list[BodyValidationWarning] = []

    @property
    def errors(self) -> list[BodyValidationWarning]:
        return [w for w in self.warnings if w.severity == Severity.error]

    @property
    def ok(self) -> bool:
        return not self.errors
