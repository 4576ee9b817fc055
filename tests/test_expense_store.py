"""Tests for the expense store: add/edit/delete, ids, persistence."""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.models.audit import AuditEventType
from src.services.storage import EXPENSES_KEY, InMemoryStorage, StorageReadError
from src.stores import ExpenseStore, MonotonicIdGenerator, dump_expenses, load_expenses


def event_types(audit_logger):
    return [event.event_type for event in audit_logger.events]


class TestMonotonicIdGenerator:
    """Tests for id generation."""

    def test_uses_milliseconds(self, clock):
        """Test that ids are wall-clock milliseconds."""
        ids = MonotonicIdGenerator(clock=clock)
        assert ids.next_id() == int(clock.now * 1000)

    def test_same_tick_ids_are_distinct(self, clock):
        """Test that ids within one millisecond still differ."""
        ids = MonotonicIdGenerator(clock=clock)
        first = ids.next_id()
        assert ids.next_id() == first + 1
        assert ids.next_id() == first + 2

    def test_follows_clock_when_it_advances(self, clock):
        """Test that ids track the clock."""
        ids = MonotonicIdGenerator(clock=clock)
        first = ids.next_id()
        clock.advance(5)
        assert ids.next_id() == first + 5000

    def test_clock_going_backwards_still_increases(self, clock):
        """Test that a clock step back never repeats an id."""
        ids = MonotonicIdGenerator(clock=clock)
        first = ids.next_id()
        clock.advance(-60)
        assert ids.next_id() == first + 1

    def test_seeded_last_id_is_never_reused(self, clock):
        """Test that the seed id is skipped."""
        ids = MonotonicIdGenerator(last_id=10**15, clock=clock)
        assert ids.next_id() == 10**15 + 1


class TestAdd:
    """Tests for ExpenseStore.add."""

    def test_add_appends_record(self, expense_store):
        """Test ExpenseStore.add."""
        expense = expense_store.add("Coffee", Decimal("3.50"), "Food")
        assert expense_store.count == 1
        assert expense_store.expenses == (expense,)
        assert expense.description == "Coffee"
        assert expense.amount == Decimal("3.50")
        assert expense.category == "Food"

    def test_add_populates_id_and_date(self, expense_store, clock):
        """Test that add assigns the id and display date."""
        expense = expense_store.add("Coffee", Decimal("3.50"), "Food")
        assert expense.id == int(clock.now * 1000)
        assert expense.date == "3/7/2025, 9:05:02 PM"

    def test_add_preserves_insertion_order(self, expense_store):
        """Test that records stay in insertion order."""
        first = expense_store.add("Coffee", Decimal("3.50"), "Food")
        second = expense_store.add("Bus", Decimal("2.00"), "Transport")
        third = expense_store.add("Lunch", Decimal("12"), "Food")
        assert [e.id for e in expense_store.expenses] == [first.id, second.id, third.id]

    def test_same_tick_additions_get_unique_ids(self, expense_store):
        """Test that rapid additions get unique ids."""
        ids = {expense_store.add(f"Item {i}", Decimal("1"), "Misc").id for i in range(5)}
        assert len(ids) == 5

    def test_add_persists_list(self, expense_store, storage):
        """Test that add writes the array to storage."""
        expense_store.add("Coffee", Decimal("3.50"), "Food")
        saved = json.loads(storage.get_item(EXPENSES_KEY))
        assert len(saved) == 1
        assert saved[0]["description"] == "Coffee"
        assert saved[0]["amount"] == 3.5

    def test_add_is_audited(self, expense_store, audit_logger):
        """Test that add writes an audit event."""
        expense_store.add("Coffee", Decimal("3.50"), "Food")
        assert AuditEventType.EXPENSE_ADDED in event_types(audit_logger)

    def test_expenses_snapshot_is_read_only(self, expense_store):
        """Test that the expenses snapshot does not change later."""
        expense_store.add("Coffee", Decimal("3.50"), "Food")
        snapshot = expense_store.expenses
        expense_store.add("Bus", Decimal("2"), "Transport")
        assert len(snapshot) == 1


class TestEdit:
    """Tests for ExpenseStore.edit."""

    def test_edit_replaces_fields_and_keeps_identity(self, expense_store):
        """Test ExpenseStore.edit."""
        original = expense_store.add("Coffee", Decimal("3.50"), "Food")
        updated = expense_store.edit(original.id, "Tea", Decimal("2.75"), "Drinks")

        assert updated.id == original.id
        assert updated.date == original.date
        assert updated.description == "Tea"
        assert updated.amount == Decimal("2.75")
        assert updated.category == "Drinks"
        assert expense_store.get(original.id) == updated

    def test_edit_keeps_position(self, expense_store):
        """Test that an edited record keeps its position."""
        first = expense_store.add("Coffee", Decimal("3.50"), "Food")
        second = expense_store.add("Bus", Decimal("2.00"), "Transport")
        expense_store.edit(first.id, "Espresso", Decimal("3"), "Food")
        assert [e.id for e in expense_store.expenses] == [first.id, second.id]

    def test_edit_unknown_id_is_a_silent_no_op(self, expense_store, storage):
        """Test that editing an unknown id changes nothing."""
        expense_store.add("Coffee", Decimal("3.50"), "Food")
        before_list = expense_store.expenses
        before_saved = storage.get_item(EXPENSES_KEY)

        assert expense_store.edit(-1, "Tea", Decimal("1"), "Drinks") is None
        assert expense_store.expenses == before_list
        assert storage.get_item(EXPENSES_KEY) == before_saved

    def test_edit_miss_is_audited_at_debug(self, expense_store, audit_logger):
        """Test the audit event for an edit miss."""
        expense_store.edit(42, "Tea", Decimal("1"), "Drinks")
        event = audit_logger.events[-1]
        assert event.event_type == AuditEventType.EXPENSE_NOT_FOUND
        assert event.severity.value == "debug"

    def test_edit_records_changed_fields(self, expense_store, audit_logger):
        """Test that the edit event lists only changed fields."""
        original = expense_store.add("Coffee", Decimal("3.50"), "Food")
        expense_store.edit(original.id, "Coffee", Decimal("4.25"), "Food")
        event = audit_logger.events[-1]
        assert event.event_type == AuditEventType.EXPENSE_EDITED
        assert event.details == {"amount": {"old": "3.50", "new": "4.25"}}


class TestDelete:
    """Tests for ExpenseStore.delete."""

    def test_delete_removes_exactly_one(self, expense_store):
        """Test ExpenseStore.delete."""
        first = expense_store.add("Coffee", Decimal("3.50"), "Food")
        second = expense_store.add("Bus", Decimal("2.00"), "Transport")

        assert expense_store.delete(first.id) is True
        assert expense_store.count == 1
        assert expense_store.expenses == (second,)

    def test_delete_unknown_id_is_a_silent_no_op(self, expense_store):
        """Test that deleting an unknown id changes nothing."""
        expense_store.add("Coffee", Decimal("3.50"), "Food")
        before = expense_store.expenses
        assert expense_store.delete(-1) is False
        assert expense_store.expenses == before

    def test_delete_twice_is_idempotent(self, expense_store):
        """Test that a second delete is a no-op."""
        expense = expense_store.add("Coffee", Decimal("3.50"), "Food")
        expense_store.delete(expense.id)
        assert expense_store.delete(expense.id) is False
        assert expense_store.count == 0

    def test_delete_persists_list(self, expense_store, storage):
        """Test that delete writes the array to storage."""
        expense = expense_store.add("Coffee", Decimal("3.50"), "Food")
        expense_store.delete(expense.id)
        assert json.loads(storage.get_item(EXPENSES_KEY)) == []


class TestTotal:
    """Tests for ExpenseStore.total."""

    def test_empty_total_is_zero(self, expense_store):
        """Test the total of an empty store."""
        assert expense_store.total() == Decimal("0")

    def test_total_is_exact(self, expense_store):
        """Test that the total has no float error."""
        for _ in range(3):
            expense_store.add("Gum", Decimal("0.10"), "Food")
        assert expense_store.total() == Decimal("0.30")


class TestPersistence:
    """Loading and saving the expense array."""

    def test_round_trip_reproduces_list(self, expense_store, storage, audit_logger):
        """Test that a new store on the same storage sees the same list."""
        expense_store.add("Coffee", Decimal("3.50"), "Food")
        expense_store.add("Gum", Decimal("0.10"), "Food")
        expense_store.add("Bus", Decimal("2"), "Transport")

        reloaded = ExpenseStore(storage, audit_logger)
        assert reloaded.expenses == expense_store.expenses
        assert reloaded.total() == Decimal("5.60")

    def test_missing_value_loads_empty(self, audit_logger):
        """Test loading with nothing stored."""
        store = ExpenseStore(InMemoryStorage(), audit_logger)
        assert store.expenses == ()

    @pytest.mark.parametrize("raw", [
        "{not json",
        '{"id": 1}',
        '"a string"',
        '[{"id": 1, "description": "x"}]',
        '[{"id": 1, "description": "x", "amount": -5, "category": "c", "date": "d"}]',
    ])
    def test_malformed_value_loads_empty(self, raw, audit_logger):
        """Test that any malformed array loads as empty."""
        store = ExpenseStore(InMemoryStorage({EXPENSES_KEY: raw}), audit_logger)
        assert store.expenses == ()
        assert AuditEventType.STORAGE_LOAD_FAILED in event_types(audit_logger)

    def test_json_null_loads_empty_without_failure(self, audit_logger):
        """Test that JSON null is treated as absent."""
        store = ExpenseStore(InMemoryStorage({EXPENSES_KEY: "null"}), audit_logger)
        assert store.expenses == ()
        assert AuditEventType.STORAGE_LOAD_FAILED not in event_types(audit_logger)

    def test_unreadable_storage_loads_empty(self, audit_logger):
        """Test that a storage read error loads as empty."""
        class UnreadableStorage(InMemoryStorage):
            def get_item(self, key):
                raise StorageReadError("corrupt file")

        store = ExpenseStore(UnreadableStorage(), audit_logger)
        assert store.expenses == ()
        assert AuditEventType.STORAGE_LOAD_FAILED in event_types(audit_logger)

    def test_write_failure_is_not_surfaced(self, failing_storage, audit_logger):
        """Test that a failed write keeps the in-memory list."""
        store = ExpenseStore(failing_storage, audit_logger)
        expense = store.add("Coffee", Decimal("3.50"), "Food")

        assert store.expenses == (expense,)
        assert AuditEventType.STORAGE_WRITE_FAILED in event_types(audit_logger)

    def test_new_ids_never_collide_with_loaded_ones(self, audit_logger):
        """Test that new ids follow the highest loaded id."""
        raw = json.dumps([{
            "id": 10**15,
            "description": "From the future",
            "amount": 1,
            "category": "Misc",
            "date": "1/1/2099, 12:00:00 AM",
        }])
        store = ExpenseStore(InMemoryStorage({EXPENSES_KEY: raw}), audit_logger)
        assert store.add("Coffee", Decimal("3.50"), "Food").id == 10**15 + 1

    def test_load_keeps_amounts_exact(self):
        """Test that loaded amounts are parsed as Decimal."""
        raw = '[{"id": 1, "description": "Gum", "amount": 0.1, "category": "Food", "date": "d"}]'
        assert load_expenses(raw)[0].amount == Decimal("0.1")

    def test_dump_then_load(self, expense_store):
        """Test dump_expenses and load_expenses together."""
        expense_store.add("Coffee", Decimal("3.50"), "Food")
        assert load_expenses(dump_expenses(list(expense_store.expenses))) == list(expense_store.expenses)

    def test_oversized_amount_never_reaches_storage(self, expense_store, storage, audit_logger):
        """Test that an amount too large for storage is refused before saving."""
        coffee = expense_store.add("Coffee", Decimal("3.50"), "Food")
        with pytest.raises(ValidationError):
            expense_store.add("Big", Decimal("1e400"), "Misc")

        assert "Infinity" not in storage.get_item(EXPENSES_KEY)
        reloaded = ExpenseStore(storage, audit_logger)
        assert reloaded.expenses == (coffee,)

    def test_sub_cent_amount_is_refused(self, expense_store, storage):
        """Test that an amount with more than two decimals is refused."""
        with pytest.raises(ValidationError):
            expense_store.add("Gum", Decimal("0.12345678901234567890123"), "Food")
        assert expense_store.count == 0
        assert storage.get_item(EXPENSES_KEY) is None

    def test_largest_amounts_round_trip_exactly(self, expense_store, storage, audit_logger):
        """Test that the widest allowed amounts reload unchanged."""
        expense_store.add("House", Decimal("999999999999.99"), "Home")
        expense_store.add("Gum", Decimal("0.01"), "Food")
        expense_store.add("Car", Decimal("123456789012.34"), "Transport")

        reloaded = ExpenseStore(storage, audit_logger)
        assert reloaded.expenses == expense_store.expenses
        assert reloaded.total() == expense_store.total()


class TestLongDescriptions:
    """Descriptions have no length limit."""

    def test_add_and_delete_long_description(self, expense_store, storage, audit_logger):
        """Test that a 600-character description is stored, audited and deleted."""
        expense = expense_store.add("x" * 600, Decimal("1"), "Food")
        assert expense_store.get(expense.id).description == "x" * 600
        assert json.loads(storage.get_item(EXPENSES_KEY))[0]["description"] == "x" * 600

        assert expense_store.delete(expense.id) is True
        assert expense_store.count == 0
        assert event_types(audit_logger)[-2:] == [
            AuditEventType.EXPENSE_ADDED,
            AuditEventType.EXPENSE_DELETED,
        ]

    def test_edit_to_long_description(self, expense_store):
        """Test that editing to a long description succeeds."""
        expense = expense_store.add("Coffee", Decimal("3.50"), "Food")
        updated = expense_store.edit(expense.id, "y" * 1000, Decimal("3.50"), "z" * 700)
        assert updated.description == "y" * 1000
        assert updated.category == "z" * 700
