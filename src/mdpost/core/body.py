"""Body checks: code fence pairing, footnote pairing, and markdown-it cosmetic lint"""

import re
from typing import Optional

from markdown_it import MarkdownIt

from mdpost.core.models import BodyValidationWarning, Severity, ValidationResult


QUOTE_PREFIX = r'[ \t]*(?:>[ \t]?)*[ \t]*'
FENCE_OPEN_RE = re.compile(rf'^{QUOTE_PREFIX}(`{{3,}}|~{{3,}})(.*)$')
FENCE_CLOSE_RE = re.compile(rf'^{QUOTE_PREFIX}(`{{3,}}|~{{3,}})[ \t]*$')
FOOTNOTE_DEF_RE = re.compile(r'^ {0,3}\[\^([^\]\s]+)\]:')
FOOTNOTE_REF_RE = re.compile(r'\[\^([^\]\s]+)\]')
INLINE_CODE_RE = re.compile(r'(`+)(?!`).+?(?<!`)\1(?!`)')


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _issue(severity: Severity, code: str, message: str, line: Optional[int] = None) -> BodyValidationWarning:
    return BodyValidationWarning(severity=severity, code=code, message=message, line=line)


def _opens_fence(line: str):
    """Return (char, length) if line opens a fence, else None."""
    m = FENCE_OPEN_RE.match(line)
    if not m:
        return None
    marker, info = m.group(1), m.group(2)
    if marker[0] == "`" and "`" in info:
        return None  # inline code span, not a fence
    return marker[0], len(marker)


def _closes_fence(line: str, char: str, length: int) -> bool:
    m = FENCE_CLOSE_RE.match(line)
    return bool(m) and m.group(1)[0] == char and len(m.group(1)) >= length


def _code_block_lines(tokens: list) -> set[int]:
    """1-based line numbers covered by indented code blocks."""
    lines: set[int] = set()
    for tok in tokens:
        if tok.type == "code_block" and tok.map:
            lines.update(range(tok.map[0] + 1, tok.map[1] + 1))
    return lines


def _scan_structure(body: str, code_lines: set[int] = frozenset()) -> list[BodyValidationWarning]:
    """Single pass over body lines tracking fence state and footnote labels; code_lines are skipped."""
    issues: list[BodyValidationWarning] = []
    refs: dict[str, int] = {}
    defs: dict[str, int] = {}
    fence = None  # (char, length, opening line)

    for lineno, line in enumerate(body.splitlines(), start=1):
        if fence:
            if _closes_fence(line, fence[0], fence[1]):
                fence = None
            continue
        if lineno in code_lines:
            continue
        opened = _opens_fence(line)
        if opened:
            fence = (*opened, lineno)
            continue

        text = line
        d = FOOTNOTE_DEF_RE.match(line)
        if d:
            label = d.group(1)
            if label in defs:
                issues.append(_issue(
                    Severity.warning, "footnote-duplicate",
                    f"Footnote [^{label}] is defined more than once (first at line {defs[label]})", lineno,
                ))
            else:
                defs[label] = lineno
            text = line[d.end():]
        for label in FOOTNOTE_REF_RE.findall(INLINE_CODE_RE.sub("", text)):
            refs.setdefault(label, lineno)

    if fence:
        issues.append(_issue(
            Severity.error, "fence-unterminated",
            f"Code fence opened with {fence[0] * fence[1]} is never closed", fence[2],
        ))
    for label, lineno in refs.items():
        if label not in defs:
            issues.append(_issue(
                Severity.error, "footnote-undefined", f"Footnote reference [^{label}] has no definition", lineno,
            ))
    for label, lineno in defs.items():
        if label not in refs:
            issues.append(_issue(
                Severity.warning, "footnote-unused", f"Footnote [^{label}] is defined but never referenced", lineno,
            ))
    return issues


def _scan_tokens(tokens: list) -> list[BodyValidationWarning]:
    """Cosmetic findings from the markdown-it token stream."""
    issues: list[BodyValidationWarning] = []
    for tok in tokens:
        line = tok.map[0] + 1 if tok.map else None
        if tok.type == "fence" and not tok.info.strip():
            issues.append(_issue(Severity.warning, "fence-no-language", "Code fence has no language annotation", line))
        elif tok.type == "inline" and tok.children:
            for child in tok.children:
                if child.type == "link_open" and not str(child.attrGet("href") or "").strip():
                    issues.append(_issue(Severity.warning, "link-empty", "Link has an empty target", line))
    return issues


def validate_body(body: str, parser_config: str = "gfm-like") -> ValidationResult:
    """Check a post body for unclosed fences, unpaired footnotes, and cosmetic problems.

    Never raises; findings are ordered by line.
    """
    tokens = _make_parser(parser_config).parse(body)
    issues = _scan_structure(body, _code_block_lines(tokens)) + _scan_tokens(tokens)
    issues.sort(key=lambda w: w.line or 0)
    return ValidationResult(warnings=issues)
