"""
Tests for the LogStore contract, run against every backend.

Covers: upsert-by-natural-key, validation and reference errors, ordering
and hard limits, discipline aggregation and detail, projects and inbox,
and SQL writes that collide on the same key.
"""
from datetime import date

import pytest
from sqlalchemy import event
from sqlmodel import Session

from lifeintel.db import create_db_engine
from lifeintel.db.models import (
    DOMAINS,
    MINUTES_PER_DAY,
    BodyLog,
    BodyLogCreate,
    Domain,
    InboxItemType,
)
from lifeintel.store import (
    DISCIPLINE_DETAIL_LIMIT,
    WINDOW_LIMIT,
    ReferenceError,
    SQLLogStore,
    ValidationError,
)


# ─── Upsert ───────────────────────────────────────────────────


class TestUpsert:

    def test_same_date_replaces_body_log(self, store, body_fields):
        store.upsert(Domain.BODY, body_fields("2026-01-01", sleep_hours=6, energy_level=2))
        store.upsert(Domain.BODY, body_fields("2026-01-01", sleep_hours=9, energy_level=5))

        logs = store.query(Domain.BODY)
        assert len(logs) == 1
        assert logs[0].sleep_hours == 9
        assert logs[0].energy_level == 5

    def test_replacement_keeps_record_id(self, store, mind_fields):
        first = store.upsert(Domain.MIND, mind_fields("2026-01-01", mood=1))
        second = store.upsert(Domain.MIND, mind_fields("2026-01-01", mood=5))
        assert first.id == second.id
        assert second.mood == 5

    def test_different_dates_are_separate_rows(self, store, finance_fields, days):
        for day in days(3):
            store.upsert(Domain.FINANCE, finance_fields(day))
        assert len(store.query(Domain.FINANCE)) == 3

    def test_domain_accepts_plain_string(self, store, body_fields):
        record = store.upsert("body", body_fields("2026-01-01"))
        assert record.date == date(2026, 1, 1)

    def test_finance_fields_default_to_zero(self, store):
        record = store.upsert(Domain.FINANCE, {"date": "2026-01-01", "income": 100})
        assert record.debts == 0
        assert record.installments == 0


# ─── Validation ───────────────────────────────────────────────


class TestValidation:

    def test_missing_required_field(self, store, body_fields):
        fields = body_fields("2026-01-01")
        del fields["sleep_quality"]

        with pytest.raises(ValidationError) as exc:
            store.upsert(Domain.BODY, fields)
        assert exc.value.domain == "body"
        assert [e["field"] for e in exc.value.errors] == ["sleep_quality"]

    def test_non_numeric_field(self, store, mind_fields):
        with pytest.raises(ValidationError):
            store.upsert(Domain.MIND, mind_fields("2026-01-01", focus="sharp"))

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, store, mind_fields, rating):
        with pytest.raises(ValidationError):
            store.upsert(Domain.MIND, mind_fields("2026-01-01", anxiety=rating))

    def test_negative_money(self, store, finance_fields):
        with pytest.raises(ValidationError):
            store.upsert(Domain.FINANCE, finance_fields("2026-01-01", debts=-5))

    @pytest.mark.parametrize("amount", [float("inf"), float("nan")])
    def test_non_finite_money(self, store, finance_fields, amount):
        with pytest.raises(ValidationError) as exc:
            store.upsert(Domain.FINANCE, finance_fields("2026-01-01", debts=amount))
        assert exc.value.errors[0]["field"] == "debts"
        assert store.query(Domain.FINANCE) == []

    @pytest.mark.parametrize("domain", list(DOMAINS))
    def test_log_dates_are_calendar_dates(self, domain):
        model = DOMAINS[domain].create
        assert model.model_fields["date"].annotation is date

    def test_bad_date(self, store, body_fields):
        with pytest.raises(ValidationError):
            store.upsert(Domain.BODY, body_fields("yesterday"))

    def test_rejected_submission_writes_nothing(self, store, body_fields):
        with pytest.raises(ValidationError):
            store.upsert(Domain.BODY, body_fields("2026-01-01", sleep_hours=-1))
        assert store.query(Domain.BODY) == []


# ─── Discipline ───────────────────────────────────────────────


class TestDiscipline:

    @pytest.fixture
    def projects(self, store):
        return [
            store.create_project({"name": "Thesis", "weekly_goal_hours": 10}),
            store.create_project({"name": "Guitar", "weekly_goal_hours": 3}),
        ]

    def test_unknown_project_is_rejected(self, store):
        with pytest.raises(ReferenceError) as exc:
            store.upsert(
                Domain.DISCIPLINE,
                {"date": "2026-01-01", "project_id": 99, "minutes_invested": 30, "focus_level": 3},
            )
        assert exc.value.project_id == 99
        assert store.query(Domain.DISCIPLINE) == []

    def test_same_project_same_day_replaces(self, store, projects):
        thesis = projects[0]
        for minutes in (30, 90):
            store.upsert(
                Domain.DISCIPLINE,
                {"date": "2026-01-01", "project_id": thesis.id,
                 "minutes_invested": minutes, "focus_level": 4},
            )

        entries = store.query(Domain.DISCIPLINE)
        assert len(entries) == 1
        assert entries[0].minutes_invested == 90
        assert entries[0].project_name == "Thesis"

    @pytest.mark.parametrize("minutes", [MINUTES_PER_DAY + 1, 2**64])
    def test_minutes_beyond_one_day_are_rejected(self, store, projects, minutes):
        with pytest.raises(ValidationError) as exc:
            store.upsert(Domain.DISCIPLINE, {"date": "2026-01-01", "project_id": projects[0].id,
                                             "minutes_invested": minutes, "focus_level": 3})
        assert exc.value.errors[0]["field"] == "minutes_invested"
        assert store.query(Domain.DISCIPLINE) == []

    def test_full_day_of_minutes_is_accepted(self, store, projects):
        entry = store.upsert(Domain.DISCIPLINE, {"date": "2026-01-01", "project_id": projects[0].id,
                                                 "minutes_invested": MINUTES_PER_DAY, "focus_level": 3})
        assert entry.minutes_invested == MINUTES_PER_DAY

    def test_aggregate_sums_minutes_and_averages_focus(self, store, projects):
        thesis, guitar = projects
        store.upsert(Domain.DISCIPLINE, {"date": "2026-01-02", "project_id": thesis.id,
                                         "minutes_invested": 120, "focus_level": 5})
        store.upsert(Domain.DISCIPLINE, {"date": "2026-01-02", "project_id": guitar.id,
                                         "minutes_invested": 30, "focus_level": 2})
        store.upsert(Domain.DISCIPLINE, {"date": "2026-01-01", "project_id": guitar.id,
                                         "minutes_invested": 45, "focus_level": 3})

        days = store.aggregate(Domain.DISCIPLINE)
        assert [d.date for d in days] == [date(2026, 1, 2), date(2026, 1, 1)]
        assert days[0].total_minutes == 150
        assert days[0].avg_focus == pytest.approx(3.5)
        assert days[1].total_minutes == 45

    def test_aggregate_only_supports_discipline(self, store):
        with pytest.raises(ValueError):
            store.aggregate(Domain.BODY)

    def test_detail_limit(self, store, projects, days):
        for day in days(DISCIPLINE_DETAIL_LIMIT // 2 + 5):
            for project in projects:
                store.upsert(Domain.DISCIPLINE, {"date": day, "project_id": project.id,
                                                 "minutes_invested": 10, "focus_level": 3})

        assert len(store.query(Domain.DISCIPLINE)) == DISCIPLINE_DETAIL_LIMIT
        assert len(store.aggregate(Domain.DISCIPLINE)) == WINDOW_LIMIT


# ─── Reads ────────────────────────────────────────────────────


class TestReads:

    def test_empty_store_reads_empty(self, store):
        for domain in Domain:
            assert store.query(domain) == []
        assert store.aggregate() == []
        assert store.list_projects() == []
        assert store.list_inbox() == []

    def test_most_recent_first(self, store, body_fields):
        for day in ("2026-01-02", "2026-01-05", "2026-01-01"):
            store.upsert(Domain.BODY, body_fields(day))

        logs = store.query(Domain.BODY)
        assert [log.date.isoformat() for log in logs] == ["2026-01-05", "2026-01-02", "2026-01-01"]

    def test_window_is_capped(self, store, body_fields, days):
        for day in days(WINDOW_LIMIT + 5):
            store.upsert(Domain.BODY, body_fields(day))

        assert len(store.query(Domain.BODY)) == WINDOW_LIMIT
        assert len(store.query(Domain.BODY, limit=500)) == WINDOW_LIMIT
        assert len(store.query(Domain.BODY, limit=7)) == 7

    def test_window_keeps_latest_days(self, store, body_fields, days):
        all_days = days(WINDOW_LIMIT + 5)
        for day in all_days:
            store.upsert(Domain.BODY, body_fields(day))

        logs = store.query(Domain.BODY)
        assert logs[0].date.isoformat() == all_days[-1]
        assert logs[-1].date.isoformat() == all_days[5]


# ─── Projects & inbox ─────────────────────────────────────────


class TestProjectsAndInbox:

    def test_create_and_list_projects(self, store):
        created = store.create_project({"name": "Thesis", "weekly_goal_hours": 10})
        assert created.id is not None
        assert created.created_at is not None
        assert [p.name for p in store.list_projects()] == ["Thesis"]
        assert store.get_project(created.id).name == "Thesis"
        assert store.get_project(created.id + 100) is None

    def test_project_needs_a_name(self, store):
        with pytest.raises(ValidationError):
            store.create_project({"name": "", "weekly_goal_hours": 1})

    def test_inbox_add_list_delete(self, store):
        first = store.add_inbox_item({"content": "call the bank", "type": "task"})
        second = store.add_inbox_item({"content": "what if I move?", "type": "worry"})

        items = store.list_inbox()
        assert [i.id for i in items] == [second.id, first.id]
        assert items[1].type is InboxItemType.TASK

        assert store.delete_inbox_item(first.id) is True
        assert store.delete_inbox_item(first.id) is False
        assert [i.id for i in store.list_inbox()] == [second.id]

    def test_inbox_rejects_unknown_type(self, store):
        with pytest.raises(ValidationError):
            store.add_inbox_item({"content": "hmm", "type": "dream"})


# ─── SQL write collisions ─────────────────────────────────────


class TestSqlUpsertCollision:
    """Another writer inserts the same key between our lookup and our commit."""

    @pytest.fixture
    def engine(self, tmp_path):
        engine = create_db_engine(f"sqlite:///{tmp_path / 'collision.db'}")
        yield engine
        engine.dispose()

    @pytest.fixture
    def competing_insert(self, engine, body_fields):
        """Commit a rival row for 2026-01-01 right before the next flush."""
        inserted = []

        def insert_rival(session, flush_context, instances):
            if inserted:
                return
            inserted.append(True)
            rival = BodyLogCreate.model_validate(body_fields("2026-01-01", sleep_hours=4))
            with Session(engine) as other:
                other.add(BodyLog(**rival.model_dump()))
                other.commit()

        event.listen(Session, "before_flush", insert_rival)
        yield inserted
        event.remove(Session, "before_flush", insert_rival)

    def test_last_write_wins(self, engine, competing_insert, body_fields):
        store = SQLLogStore(engine)

        record = store.upsert(Domain.BODY, body_fields("2026-01-01", sleep_hours=9))

        assert competing_insert == [True]
        assert record.sleep_hours == 9
        logs = store.query(Domain.BODY)
        assert len(logs) == 1
        assert logs[0].sleep_hours == 9
        assert logs[0].id == record.id
