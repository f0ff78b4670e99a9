"""Batch loading: file discovery, per-file isolation, and date ordering"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from mdpost.config import Settings
from mdpost.core.body import validate_body
from mdpost.core.errors import ParseError
from mdpost.core.models import BodyValidationWarning, Document, Severity, ValidationResult
from mdpost.core.parse import parse_document


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoadFailure:
    """A file excluded from the batch and the reason why."""

    source_path: str
    kind: str
    message: str


@dataclass(slots=True)
class LoadReport:
    """Outcome of loading a batch of posts."""

    documents: list[Document] = field(default_factory=list)
    failures: list[LoadFailure] = field(default_factory=list)
    body_issues: dict[str, list[BodyValidationWarning]] = field(default_factory=dict)

    @property
    def body_error_count(self) -> int:
        return sum(1 for issues in self.body_issues.values() for w in issues if w.severity == Severity.error)

    @property
    def ok(self) -> bool:
        return not self.failures


def discover_files(path: Path, extensions: Iterable[str] = (".md", ".markdown", ".mdx")) -> list[Path]:
    """Return sorted post files under path, or [path] if a single matching file."""
    suffixes = {e.lower() for e in extensions}
    if path.is_file():
        return [path] if path.suffix.lower() in suffixes else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() in suffixes)


def load_file(path: Path, settings: Settings = None) -> tuple[Document, ValidationResult]:
    """Read, parse, and validate a single post."""
    settings = settings or Settings()
    raw = path.read_text(encoding='utf-8')
    doc = parse_document(raw, str(path), excerpt_separator=settings.excerpt_separator)
    return doc, validate_body(doc.body, settings.parser_config)


def _load_one(path: Path, settings: Settings):
    """Load one file, converting expected failures into a LoadFailure."""
    try:
        return load_file(path, settings)
    except ParseError as e:
        return LoadFailure(str(path), e.kind, str(e))
    except UnicodeDecodeError as e:
        return LoadFailure(str(path), "UnicodeDecodeError", f"File is not valid UTF-8: {e}")
    except OSError as e:
        return LoadFailure(str(path), type(e).__name__, str(e))


def sort_documents(docs: Iterable[Document]) -> list[Document]:
    """Order by date, newest first; equal dates fall back to file name ascending."""
    by_name = sorted(docs, key=lambda d: d.source_name)
    return sorted(by_name, key=lambda d: d.date, reverse=True)


def load_documents(paths: Iterable[Path], settings: Settings = None) -> LoadReport:
    """Load every path independently; failures are reported, never raised."""
    settings = settings or Settings()
    paths = list(paths)
    if settings.workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=settings.workers) as pool:
            results = list(pool.map(lambda p: _load_one(p, settings), paths))
    else:
        results = [_load_one(p, settings) for p in paths]

    report = LoadReport()
    for path, result in zip(paths, results):
        if isinstance(result, LoadFailure):
            logger.warning("Skipping %s: %s: %s", path, result.kind, result.message)
            report.failures.append(result)
            continue
        doc, validation = result
        report.documents.append(doc)
        if validation.warnings:
            report.body_issues[str(path)] = validation.warnings
            for issue in validation.errors:
                logger.warning("%s:%s: %s", path, issue.line, issue.message)
        logger.debug("Loaded %s", path)

    report.documents = sort_documents(report.documents)
    return report


def load_path(path: Path, settings: Settings = None) -> LoadReport:
    """Discover and load all posts under path."""
    settings = settings or Settings()
    return load_documents(discover_files(path, settings.extensions), settings)
