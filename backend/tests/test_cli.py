"""Tests for the management CLI against a throwaway SQLite database."""

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from smartseed import cli
from smartseed.auth.password import verify_password
from smartseed.models import BedTask, User, UserRole


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    cli.init_db(eng)
    yield eng
    eng.dispose()


@pytest.mark.unit
class TestCli:

    def test_seed_tasks_is_idempotent(self, engine):
        assert cli.seed_tasks(engine) == 5
        assert cli.seed_tasks(engine) == 0

        with Session(engine) as session:
            names = session.scalars(select(BedTask.task_name).order_by(BedTask.display_order)).all()
        assert names[0] == "Check Soil Moisture"
        assert len(names) == 5

    def test_create_user_hashes_password(self, engine):
        cli.create_user(engine, "maria@smartseed.ph", "Maria", "cenro", "s3cret")

        with Session(engine) as session:
            user = session.scalars(select(User)).one()
        assert user.role == UserRole.CENRO
        assert user.password_hash != "s3cret"
        assert verify_password("s3cret", user.password_hash)

    def test_create_user_rejects_unknown_role(self, engine):
        with pytest.raises(SystemExit):
            cli.create_user(engine, "x@smartseed.ph", "X", "gardener", "pw")

    def test_create_user_rejects_duplicate_email(self, engine):
        cli.create_user(engine, "x@smartseed.ph", "X", "admin", "pw")
        with pytest.raises(SystemExit):
            cli.create_user(engine, "x@smartseed.ph", "X", "admin", "pw")

    def test_list_users(self, engine, capsys):
        cli.create_user(engine, "x@smartseed.ph", "Xavier", "admin", "pw")
        cli.list_users(engine)

        out = capsys.readouterr().out
        assert "Xavier" in out
        assert "1 user(s)" in out

    def test_check_data_counts(self, engine):
        cli.seed_tasks(engine)
        counts = cli.check_data(engine)

        assert counts["Bed tasks"] == 5
        assert counts["Beds"] == 0

    def test_usage_for_unknown_command(self, capsys):
        cli.main(["cli", "bogus"])
        assert "Usage" in capsys.readouterr().out

    def test_users_table_is_empty_after_init(self, engine):
        with Session(engine) as session:
            assert session.scalar(select(func.count(User.id))) == 0
