"""Unit tests for core/export.py"""

import json

from mdpost.core.export import build_document, build_index, dump_metadata, write_index
from mdpost.core.parse import parse_document


def test_dump_metadata_formats_dates(valid_post):
    """Timestamps are written back in 'YYYY-MM-DD HH:MM:SS +HHMM' form."""
    fm = dump_metadata(parse_document(valid_post))
    assert fm["date"] == "2020-02-12 16:45:04 -0500"
    assert fm["seo"]["date_modified"] == "2020-03-01 09:00:00 -0500"
    assert fm["layout"] == "post"


def test_dump_metadata_omits_empty_optionals(make_post):
    """A minimal post dumps only title and date."""
    assert dump_metadata(parse_document(make_post())) == {
        "title": "X",
        "date": "2020-02-12 16:45:04 -0500",
    }


def test_metadata_round_trip(valid_post):
    """Re-serializing and re-parsing reproduces the same metadata and body."""
    doc = parse_document(valid_post)
    again = parse_document(build_document(doc))
    assert dump_metadata(again) == dump_metadata(doc)
    assert again.date == doc.date
    assert again.image == doc.image
    assert again.seo == doc.seo
    assert again.extra == doc.extra
    assert again.body == doc.body


def test_metadata_round_trip_keeps_unknown_null_keys(make_post):
    """Unknown seo and image keys set to null survive; unset schema fields are still omitted."""
    doc = parse_document(make_post(seo="{description: d, og_image: null}", image="{path: img/x.png, alt: null}"))
    fm = dump_metadata(doc)
    assert fm["seo"] == {"description": "d", "og_image": None}
    assert fm["image"] == {"path": "img/x.png", "alt": None}
    again = parse_document(build_document(doc))
    assert again.seo == doc.seo
    assert again.image == doc.image
    assert dump_metadata(again) == fm


def test_metadata_round_trip_normalizes_shorthand(make_post):
    """String labels and image shorthand come back in their list/mapping form."""
    doc = parse_document(make_post(tags="a b a", image="img/x.png", title="2020"))
    text = build_document(doc)
    again = parse_document(text)
    assert again.tags == ["a", "b"]
    assert again.image.path == "img/x.png"
    assert again.title == "2020"


def test_build_document_layout(make_post):
    """Output is a delimited YAML block immediately followed by the body."""
    text = build_document(parse_document(make_post(body="# Hi\n")))
    assert text.startswith("---\ntitle: X\n")
    assert text.endswith("---\n# Hi\n")


def test_build_index_groups_by_label(posts_dir):
    """Index lists posts newest first and maps labels to slugs."""
    docs = [
        parse_document(p.read_text(encoding="utf-8"), str(p))
        for p in sorted(posts_dir.glob("*.md")) if "broken" not in p.name
    ]
    index = build_index(docs)
    assert [p["slug"] for p in index["posts"]] == ["cpp-templates", "asa-windows"]
    assert index["categories"] == {"Azure": ["asa-windows"], "Stream Analytics": ["asa-windows"]}
    assert index["tags"]["windowing"] == ["asa-windows"]
    assert index["posts"][1]["image"] == "assets/img/asa/windows.png"
    assert index["posts"][1]["date"] == "2020-02-12T16:45:04-05:00"


def test_write_index(tmp_path, make_post):
    """write_index writes valid JSON to output_dir/index.json."""
    out = tmp_path / "dist"
    path = write_index([parse_document(make_post())], out)
    assert path == out / "index.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["posts"][0]["title"] == "X"
