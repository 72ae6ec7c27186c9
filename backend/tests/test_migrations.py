import importlib.util
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
VERSIONS = PROJECT_ROOT / "migrations" / "versions"
SQL_DIR = PROJECT_ROOT / "sql"


def _load(path: Path):
    module_spec = importlib.util.spec_from_file_location(path.stem, path)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def test_single_root_revision_matches_filename():
    revisions = sorted(VERSIONS.glob("*.py"))
    assert len(revisions) == 1

    module = _load(revisions[0])
    assert revisions[0].name.startswith(module.revision + "_")
    assert module.down_revision is None


def test_sql_files_need_no_extensions():
    files = sorted(SQL_DIR.glob("*.sql"))
    assert [f.name for f in files] == ["010_schema.sql", "030_commit_booking.sql"]
    for path in files:
        assert "CREATE EXTENSION" not in path.read_text().upper()
