"""Export: re-serialize frontmatter and write the JSON index for the site generator"""

import json
from pathlib import Path
from typing import Any

import yaml

from mdpost.core.loader import sort_documents
from mdpost.core.models import Document
from mdpost.core.utils.timestamps import format_timestamp


INDEX_FILE = "index.json"


def _dump_nested(model) -> dict[str, Any]:
    """Dump an open model, dropping unset schema fields but keeping unknown keys as written."""
    known = type(model).model_fields
    return {k: v for k, v in model.model_dump().items() if not (k in known and v is None)}


def dump_metadata(doc: Document) -> dict[str, Any]:
    """Return the frontmatter key/value set for doc; empty optional fields are omitted."""
    fm: dict[str, Any] = {"title": doc.title, "date": format_timestamp(doc.date)}
    if doc.categories:
        fm["categories"] = list(doc.categories)
    if doc.tags:
        fm["tags"] = list(doc.tags)
    if doc.image is not None:
        fm["image"] = _dump_nested(doc.image)
    if doc.seo is not None:
        seo = _dump_nested(doc.seo)
        if doc.seo.date_modified is not None:
            seo["date_modified"] = format_timestamp(doc.seo.date_modified)
        fm["seo"] = seo
    fm.update(doc.extra)
    return fm


def build_document(doc: Document) -> str:
    """Return post text: a YAML frontmatter block followed by the unchanged body."""
    header = yaml.safe_dump(dump_metadata(doc), default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{header}---\n{doc.body}"


def _index_entry(doc: Document) -> dict[str, Any]:
    return {
        "slug": doc.slug,
        "title": doc.title,
        "date": doc.date.isoformat(),
        "categories": doc.categories,
        "tags": doc.tags,
        "image": doc.image.path if doc.image else None,
        "excerpt": doc.excerpt,
        "source_path": doc.source_path,
        "hash": doc.hash,
    }


def build_index(docs: list[Document]) -> dict[str, Any]:
    """Build the index dict: posts newest first plus category and tag maps of slugs.

    Category and tag maps keep the order of first appearance in the sorted
    post list, so their slug lists are newest first as well.
    """
    ordered = sort_documents(docs)
    categories: dict[str, list[str]] = {}
    tags: dict[str, list[str]] = {}
    for doc in ordered:
        for c in doc.categories:
            categories.setdefault(c, []).append(doc.slug)
        for t in doc.tags:
            tags.setdefault(t, []).append(doc.slug)
    return {
        "posts": [_index_entry(d) for d in ordered],
        "categories": categories,
        "tags": tags,
    }


def write_index(docs: list[Document], output_dir: Path) -> Path:
    """Write index.json under output_dir and return its path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    index_path = output_dir / INDEX_FILE
    index_path.write_text(json.dumps(build_index(docs), indent=2, ensure_ascii=False), encoding='utf-8')
    return index_path
