import json
from datetime import datetime, timezone

import pytest

from modules.auth.models import AuthSession, User, UserRole
from modules.cases.interfaces import ICaseStore
from modules.cases.models import (
    CaseCategory,
    CasePriority,
    CaseStatus,
    CaseUpdate,
    Location,
    NewCase,
)
from modules.cases.repository import (
    CASES_KEY,
    COMMENTS_KEY,
    CURRENT_USER_KEY,
    CaseRepository,
)
from modules.cases.store import CaseStore, get_case_store, reset_case_store


def new_case(title: str = "Pothole on Main St", **overrides) -> dict:
    """Helper to create add_case input."""
    data = {
        "title": title,
        "description": "Deep hole in the right lane",
        "category": "road",
        "priority": "high",
        "location": {"lat": -23.55, "lng": -46.63, "address": "Main St 100"},
    }
    data.update(overrides)
    return data


class TestCaseStore:
    @pytest.fixture
    def store(self, kv_store, clock, ids):
        """Create a state store over an empty in-memory KV store."""
        return CaseStore(repository=CaseRepository(kv_store), clock=clock, id_generator=ids)

    @pytest.fixture
    def logged_in(self, store):
        return store.login("Ana", is_admin=False)

    # -------------------------------------------------------------------------
    # hydration
    # -------------------------------------------------------------------------

    def test_starts_empty(self, store):
        """A fresh store should have no cases, comments or user."""
        assert store.cases == []
        assert store.comments == []
        assert store.current_user is None

    def test_rehydrates_from_kv_store(self, store, logged_in, kv_store, clock, ids):
        """A new store over the same KV store should see the same state."""
        case = store.add_case(new_case())
        comment = store.add_comment(case.id, "Same here")

        reloaded = CaseStore(repository=CaseRepository(kv_store), clock=clock, id_generator=ids)

        assert reloaded.cases == [case]
        assert reloaded.comments == [comment]
        assert reloaded.current_user == logged_in

    def test_cases_property_is_a_copy(self, store, logged_in):
        """Mutating the returned list should not affect the store."""
        store.add_case(new_case())
        store.cases.clear()
        assert len(store.cases) == 1

    # -------------------------------------------------------------------------
    # add_case
    # -------------------------------------------------------------------------

    def test_add_case_without_user_is_noop(self, store, kv_store):
        """Without a current user nothing should change."""
        result = store.add_case(new_case())

        assert result is None
        assert store.cases == []
        assert kv_store.get(CASES_KEY) is None

    def test_add_case_fills_server_fields(self, store, logged_in, clock):
        """id, timestamps, supports and author should be assigned."""
        case = store.add_case(new_case())

        assert case.id == "id-2"  # id-1 went to the login
        assert case.supports == 0
        assert case.created_at == clock.now()
        assert case.updated_at == clock.now()
        assert case.user_id == logged_in.id
        assert case.user_name == "Ana"
        assert case.status == CaseStatus.PENDING
        assert case.category == CaseCategory.ROAD
        assert case.iir is None

    def test_add_case_accepts_model(self, store, logged_in):
        """add_case should accept a NewCase."""
        case = store.add_case(
            NewCase(title="Leak", location=Location(lat=1.0, lng=2.0), iir=42)
        )
        assert case.title == "Leak"
        assert case.iir == 42

    def test_add_case_prepends(self, store, logged_in):
        """Newest cases should come first."""
        first = store.add_case(new_case("First"))
        second = store.add_case(new_case("Second"))

        assert [c.id for c in store.cases] == [second.id, first.id]

    def test_add_case_persists_camel_case(self, store, logged_in, kv_store):
        """Cases should be stored as camelCase JSON."""
        store.add_case(new_case())

        stored = json.loads(kv_store.get(CASES_KEY))
        assert stored[0]["title"] == "Pothole on Main St"
        assert stored[0]["userName"] == "Ana"
        assert stored[0]["iir"] is None
        assert stored[0]["location"]["address"] == "Main St 100"

    def test_add_case_rejects_out_of_range_iir(self, store, logged_in):
        """IIR values outside 0-100 should be rejected."""
        with pytest.raises(Exception):  # Pydantic ValidationError
            store.add_case(new_case(iir=101))

    def test_ids_are_unique(self, store, logged_in):
        """Each case should get a distinct id."""
        cases = [store.add_case(new_case(f"Case {i}")) for i in range(5)]
        assert len({c.id for c in cases}) == 5

    # -------------------------------------------------------------------------
    # update_case
    # -------------------------------------------------------------------------

    def test_update_case_changes_only_given_fields(self, store, logged_in, clock):
        """Only status and updated_at should change."""
        case = store.add_case(new_case())
        clock.advance(5_000)

        updated = store.update_case(case.id, {"status": "resolved"})

        assert updated.status == CaseStatus.RESOLVED
        assert updated.updated_at == clock.now()
        assert updated.created_at == case.created_at
        unchanged = case.model_dump(exclude={"status", "updated_at"})
        assert updated.model_dump(exclude={"status", "updated_at"}) == unchanged

    def test_update_case_persists(self, store, logged_in, kv_store):
        """Updates should be written to the KV store."""
        case = store.add_case(new_case())
        store.update_case(case.id, CaseUpdate(priority=CasePriority.CRITICAL))

        stored = json.loads(kv_store.get(CASES_KEY))
        assert stored[0]["priority"] == "critical"

    def test_update_case_ignores_protected_fields(self, store, logged_in):
        """A full snapshot should not overwrite id, author or supports."""
        case = store.add_case(new_case())
        snapshot = case.model_dump(mode="json", by_alias=True)
        snapshot.update({"id": "other", "supports": 99, "userName": "Mallory", "title": "Edited"})

        updated = store.update_case(case.id, snapshot)

        assert updated.id == case.id
        assert updated.supports == 0
        assert updated.user_name == "Ana"
        assert updated.title == "Edited"

    def test_update_case_can_clear_iir(self, store, logged_in):
        """Setting iir to None should mark it pending again."""
        case = store.add_case(new_case(iir=50))
        updated = store.update_case(case.id, {"iir": None})
        assert updated.iir is None

    @pytest.mark.parametrize(
        "updates",
        [
            {"title": None},
            {"status": None},
            {"location": None},
            {"status": "archived"},
            {"iir": 150},
        ],
    )
    def test_invalid_update_is_noop(self, store, logged_in, kv_store, clock, updates):
        """Invalid values should leave the case and the KV store untouched."""
        case = store.add_case(new_case())
        persisted = kv_store.get(CASES_KEY)
        clock.advance(1_000)

        assert store.update_case(case.id, updates) is None
        assert store.get_case(case.id) == case
        assert kv_store.get(CASES_KEY) == persisted

    def test_invalid_update_is_logged(self, store, logged_in, caplog):
        """Ignored updates should leave a warning."""
        case = store.add_case(new_case())

        with caplog.at_level("WARNING", logger="modules.cases.store"):
            store.update_case(case.id, {"title": None})

        assert f"Ignored invalid update for case {case.id}" in caplog.text

    def test_update_unknown_case_is_noop(self, store, logged_in):
        """Unknown ids should leave the store unchanged."""
        store.add_case(new_case())
        before = store.cases

        assert store.update_case("missing", {"status": "resolved"}) is None
        assert store.cases == before

    # -------------------------------------------------------------------------
    # delete_case
    # -------------------------------------------------------------------------

    def test_delete_case_cascades_comments(self, store, logged_in, kv_store):
        """Deleting A should drop A's comments and keep B's."""
        case_b = store.add_case(new_case("B"))
        case_a = store.add_case(new_case("A"))
        store.add_comment(case_a.id, "c1")
        c2 = store.add_comment(case_b.id, "c2")

        store.delete_case(case_a.id)

        assert store.cases == [case_b]
        assert store.comments == [c2]
        assert [c["id"] for c in json.loads(kv_store.get(CASES_KEY))] == [case_b.id]
        assert [c["id"] for c in json.loads(kv_store.get(COMMENTS_KEY))] == [c2.id]

    def test_delete_unknown_case(self, store, logged_in):
        """Deleting an unknown id should leave the store unchanged."""
        case = store.add_case(new_case())
        store.delete_case("missing")
        assert store.cases == [case]

    # -------------------------------------------------------------------------
    # support_case
    # -------------------------------------------------------------------------

    def test_support_case_increments(self, store, logged_in, kv_store):
        """Each support should add one, with no per-user guard."""
        case = store.add_case(new_case())

        store.support_case(case.id)
        updated = store.support_case(case.id)

        assert updated.supports == 2
        assert json.loads(kv_store.get(CASES_KEY))[0]["supports"] == 2

    def test_support_case_keeps_updated_at(self, store, logged_in, clock):
        """Supporting should not count as an edit."""
        case = store.add_case(new_case())
        clock.advance(1_000)

        updated = store.support_case(case.id)
        assert updated.updated_at == case.updated_at

    def test_support_unknown_case_is_noop(self, store):
        """Unknown ids should return None."""
        assert store.support_case("missing") is None

    # -------------------------------------------------------------------------
    # comments
    # -------------------------------------------------------------------------

    def test_add_comment_without_user_is_noop(self, store):
        """Without a current user no comment should be added."""
        assert store.add_comment("case-1", "hello") is None
        assert store.comments == []

    def test_add_comment_appends(self, store, logged_in, clock):
        """Comments should be appended in order with author and time."""
        first = store.add_comment("case-1", "first")
        second = store.add_comment("case-1", "second")

        assert store.comments == [first, second]
        assert first.user_name == "Ana"
        assert first.created_at == clock.now()

    def test_add_comment_does_not_check_case(self, store, logged_in):
        """Comments on unknown cases are accepted."""
        comment = store.add_comment("no-such-case", "orphan")
        assert comment.case_id == "no-such-case"

    # -------------------------------------------------------------------------
    # current user
    # -------------------------------------------------------------------------

    def test_login_persists_user(self, store, kv_store):
        """login should create and persist a lightweight user."""
        user = store.login("Admin", is_admin=True)

        assert user.is_admin is True
        assert store.current_user == user
        assert json.loads(kv_store.get(CURRENT_USER_KEY)) == {
            "id": user.id,
            "name": "Admin",
            "isAdmin": True,
        }

    def test_login_does_not_touch_cases(self, store, kv_store):
        """login should only write the current user key."""
        store.login("Ana", is_admin=False)
        assert kv_store.keys() == [CURRENT_USER_KEY]

    def test_logout(self, store, logged_in, kv_store):
        """logout should clear and remove the current user."""
        store.logout()

        assert store.current_user is None
        assert kv_store.get(CURRENT_USER_KEY) is None
        assert store.add_case(new_case()) is None

    def test_login_from_session(self, store):
        """The current user should mirror the auth session's user."""
        session = AuthSession(
            user=User(
                id="auth-user-1",
                email="ana@example.com",
                name="Ana",
                role=UserRole.ADMIN,
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            ),
            access_token="tok",
            expires_at=1_704_070_800_000,
        )

        user = store.login_from_session(session)
        case = store.add_case(new_case())

        assert user.id == "auth-user-1"
        assert user.is_admin is True
        assert case.user_id == "auth-user-1"

    def test_get_case(self, store, logged_in):
        """get_case should look a case up by id."""
        case = store.add_case(new_case())
        assert store.get_case(case.id) == case
        assert store.get_case("missing") is None

    def test_implements_protocol(self, store):
        """CaseStore should satisfy ICaseStore."""
        assert isinstance(store, ICaseStore)


class TestCaseStoreSingleton:
    def test_get_case_store_is_cached(self, monkeypatch):
        """get_case_store should return one instance until reset."""
        monkeypatch.setenv("STORAGE_BACKEND", "memory")

        store = get_case_store()
        assert get_case_store() is store

        reset_case_store()
        assert get_case_store() is not store
