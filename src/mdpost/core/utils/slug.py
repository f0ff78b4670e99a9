"""Slug generation and post filename conventions"""

import re
from datetime import date
from typing import Optional


POST_FILENAME_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})-(.+)$')


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def parse_post_filename(stem: str) -> Optional[tuple[date, str]]:
    """Split a 'YYYY-MM-DD-slug' file stem into (date, slug); None if it doesn't follow the convention."""
    m = POST_FILENAME_RE.match(stem)
    if not m:
        return None
    try:
        published = date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None
    slug = slugify(m.group(4))
    return (published, slug) if slug else None
