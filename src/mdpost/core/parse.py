"""Frontmatter extraction and decoding of post text into Document records"""

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from mdpost.core.errors import MalformedMetadata, MissingRequiredField
from mdpost.core.models import Document, ImageRef, SeoMeta
from mdpost.core.utils.hashing import sha256
from mdpost.core.utils.slug import parse_post_filename, slugify
from mdpost.core.utils.timestamps import parse_timestamp


logger = logging.getLogger(__name__)

DELIMITER = "---"
KNOWN_FIELDS = ("title", "date", "categories", "tags", "image", "seo")
LABEL_DELIMITERS = (",", "\n", "\r")
SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*:')
TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as strings so their offsets are never dropped."""


FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def split_frontmatter(raw: str) -> tuple[str, str]:
    """Return (metadata_text, body); body is everything after the closing '---' line, verbatim."""
    text = raw[1:] if raw.startswith("\ufeff") else raw
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != DELIMITER:
        raise MalformedMetadata("Missing frontmatter: the file must start with a '---' line")
    for i in range(1, len(lines)):
        if lines[i].rstrip() == DELIMITER:
            return "".join(lines[1:i]), "".join(lines[i + 1:])
    raise MalformedMetadata("Unterminated frontmatter: no closing '---' line")


def _decode(meta_text: str) -> dict[str, Any]:
    """Decode the metadata block into a mapping with string keys."""
    try:
        data = yaml.load(meta_text, Loader=FrontmatterLoader)
    except yaml.YAMLError as e:
        raise MalformedMetadata(f"Invalid YAML frontmatter: {e}") from e
    except RecursionError as e:
        raise MalformedMetadata("Invalid YAML frontmatter: nesting too deep") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedMetadata(f"Invalid YAML frontmatter: expected a mapping, got {type(data).__name__}")
    return {str(k): v for k, v in data.items()}


def _require(data: dict[str, Any], field: str) -> Any:
    value = data.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingRequiredField(field)
    return value


def _title(value: Any) -> str:
    if isinstance(value, (dict, list)):
        raise MalformedMetadata("Field 'title' must be a string")
    return str(value)


def _labels(data: dict[str, Any], field: str) -> list[str]:
    """Normalize categories/tags; a bare string is split on whitespace.

    Numbers are taken as labels whether given alone or in a list. Booleans are
    rejected in both forms, since YAML reads unquoted on/off/yes/no as bool.
    """
    value = data.get(field)
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split()
    elif isinstance(value, list):
        items = value
    else:
        items = [value]

    labels = []
    for item in items:
        if isinstance(item, bool):
            raise MalformedMetadata(f"Field {field!r} has boolean label {item!r}; quote it to use it as text")
        if not isinstance(item, (str, int, float)):
            raise MalformedMetadata(f"Field {field!r} must be a string or a list of strings, got {item!r}")
        label = str(item).strip()
        if not label:
            raise MalformedMetadata(f"Field {field!r} contains an empty label")
        if any(d in label for d in LABEL_DELIMITERS):
            raise MalformedMetadata(f"Field {field!r} label {label!r} contains a delimiter character")
        labels.append(label)
    return labels


def _image(value: Any) -> Optional[ImageRef]:
    if value is None:
        return None
    if isinstance(value, str):
        value = {"path": value}
    if not isinstance(value, dict):
        raise MalformedMetadata("Field 'image' must be a mapping with a 'path' key")

    fields = {str(k): v for k, v in value.items()}
    if "path" in fields:
        path = fields["path"]
        if not isinstance(path, str) or not path.strip():
            raise MalformedMetadata("Field 'image.path' must be a non-empty string")
        if PurePosixPath(path).is_absolute() or SCHEME_RE.match(path):
            raise MalformedMetadata(f"Field 'image.path' must be a relative path, got {path!r}")
    return ImageRef(**fields)


def _seo(value: Any) -> Optional[SeoMeta]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise MalformedMetadata("Field 'seo' must be a mapping")

    fields = {str(k): v for k, v in value.items()}
    if fields.get("date_modified") is not None:
        fields["date_modified"] = parse_timestamp(fields["date_modified"], "seo.date_modified")
    description = fields.get("description")
    if description is not None and not isinstance(description, str):
        raise MalformedMetadata("Field 'seo.description' must be a string")
    return SeoMeta(**fields)


def _slug(data: dict[str, Any], title: str, source_path: Optional[str]) -> str:
    """Frontmatter slug, else the slug part of a 'YYYY-MM-DD-slug' filename, else the title."""
    explicit = data.get("slug")
    if isinstance(explicit, str) and slugify(explicit):
        return slugify(explicit)
    if source_path:
        parsed = parse_post_filename(Path(source_path).stem)
        if parsed:
            return parsed[1]
    return slugify(title)


def _excerpt(body: str, separator: str) -> str:
    text = body.replace("\r\n", "\n").lstrip("\n")
    if separator:
        text = text.split(separator, 1)[0]
    return text.strip()


def parse_document(raw: str, source_path: Optional[str] = None, *, excerpt_separator: str = "\n\n") -> Document:
    """Parse the full text of one post into a Document.

    Raises MalformedMetadata, MissingRequiredField or InvalidTimestamp (all
    ParseError subclasses). The body is kept unrendered.
    """
    meta_text, body = split_frontmatter(raw)
    data = _decode(meta_text)

    title = _title(_require(data, "title"))
    date = parse_timestamp(_require(data, "date"), "date")
    source = str(source_path) if source_path is not None else None

    try:
        doc = Document(
            title=title,
            date=date,
            categories=_labels(data, "categories"),
            tags=list(dict.fromkeys(_labels(data, "tags"))),
            image=_image(data.get("image")),
            seo=_seo(data.get("seo")),
            body=body,
            extra={k: v for k, v in data.items() if k not in KNOWN_FIELDS},
            source_path=source,
            slug=_slug(data, title, source),
            hash=sha256(raw),
            excerpt=_excerpt(body, excerpt_separator),
        )
    except ValidationError as e:
        raise MalformedMetadata(f"Invalid frontmatter: {e}") from e

    logger.debug("Parsed %s as %r", source or "<text>", doc.slug)
    return doc
