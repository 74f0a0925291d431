import importlib.util
from pathlib import Path

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

VERSIONS = Path(__file__).resolve().parents[1] / "alembic" / "versions"


def load_revision(name: str):
    (path,) = VERSIONS.glob(f"*_{name}.py")
    spec = importlib.util.spec_from_file_location(path.stem, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_upgrade_and_downgrade_on_sqlite():
    migration = load_revision("create_goals_and_runs_tables")
    assert migration.down_revision is None

    engine = sa.create_engine("sqlite+pysqlite:///:memory:")
    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            migration.upgrade()
            tables = set(sa.inspect(conn).get_table_names())
            assert {"goals", "runs"} <= tables
            columns = {c["name"] for c in sa.inspect(conn).get_columns("goals")}
            assert {"is_completed", "completed_at", "target_value", "is_active"} <= columns

            # running twice is a no-op
            migration.upgrade()

            migration.downgrade()
            assert sa.inspect(conn).get_table_names() == []
