"""Pipeline step functions: load and export orchestration"""

from pathlib import Path

from mdpost.config import Settings
from mdpost.core.export import write_index
from mdpost.core.loader import LoadReport, load_path


def run_load(path: str, settings: Settings) -> LoadReport:
    """Load every post under path. Raises RuntimeError if path does not exist."""
    source = Path(path)
    if not source.exists():
        raise RuntimeError(f"Path not found: {path}")
    return load_path(source, settings)


def run_build(path: str, settings: Settings) -> tuple[LoadReport, Path]:
    """Load posts and write index.json for those that parsed. Returns (report, index_path)."""
    report = run_load(path, settings)
    try:
        index_path = write_index(report.documents, Path(settings.output_dir))
    except OSError as e:
        raise RuntimeError(f"Failed to write index to {settings.output_dir}: {e}") from e
    return report, index_path
