"""Shared fixtures: sample posts in the shape of the blog's content files"""

import pytest


VALID_POST = """\
---
title: "Windowing in Azure Stream Analytics"
date: 2020-02-12 16:45:04 -0500
categories: [Azure, Stream Analytics]
tags: [azure, asa, windowing]
image:
  path: assets/img/asa/windows.png
seo:
  date_modified: 2020-03-01 09:00:00 -0500
  description: Tumbling, hopping, sliding and session windows.
layout: post
---
Stream Analytics groups events into windows.

## Tumbling windows

```sql
SELECT COUNT(*) FROM input GROUP BY TumblingWindow(second, 10)
```

See the docs for details[^1].

[^1]: https://docs.microsoft.com/azure/stream-analytics/
"""


def _make_post(title: str = "X", date: str = "2020-02-12 16:45:04 -0500", body: str = "Body.\n", **fields) -> str:
    """Render a minimal post; extra keyword fields are written as raw YAML values."""
    lines = ["---"]
    if title is not None:
        lines.append(f'title: "{title}"')
    if date is not None:
        lines.append(f"date: {date}")
    lines += [f"{k}: {v}" for k, v in fields.items()]
    lines.append("---")
    return "\n".join(lines) + "\n" + body


@pytest.fixture(name="make_post")
def make_post_fixture():
    """Factory for minimal post text."""
    return _make_post


@pytest.fixture(name="valid_post")
def valid_post_fixture():
    return VALID_POST


@pytest.fixture(name="posts_dir")
def posts_dir_fixture(tmp_path):
    """A _posts directory with two valid posts and one broken one."""
    d = tmp_path / "_posts"
    d.mkdir()
    (d / "2020-02-12-asa-windows.md").write_text(VALID_POST, encoding="utf-8")
    (d / "2021-05-01-cpp-templates.md").write_text(
        _make_post(title="C++20 template parameters", date="2021-05-01 08:00:00 +0200"), encoding="utf-8"
    )
    (d / "2019-01-01-broken.md").write_text("---\ntitle: Broken\n", encoding="utf-8")
    return d
