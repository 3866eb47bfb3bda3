"""
Tests for application wiring.
"""

from decimal import Decimal
from uuid import uuid4

from structlog.testing import capture_logs

from pocketbook import orchestrator
from pocketbook.config import get_settings
from pocketbook.models.budget import DEFAULT_CATEGORIES, Budget, RecurringExpense
from pocketbook.orchestrator import create_app_components, reset_app_data
from pocketbook.services.storage import SQLiteSnapshotStore


class TestCreateAppComponents:
    """Tests for create_app_components()."""

    async def test_store_initialized_and_categories_seeded(self, db_path):
        """Test that the factory returns a ready-to-use store."""
        components = await create_app_components(db_path=db_path)

        assert components.store.is_initialized
        assert await components.store.count_categories() == len(DEFAULT_CATEGORIES)
        components.store.close()

    async def test_services_share_one_store(self, db_path):
        """Test an end-to-end month through the wired services."""
        components = await create_app_components(db_path=db_path)
        category = (await components.recurring_expenses.get_all_categories())[0]
        await components.budgets.add_budget(Budget(name="Groceries", amount=Decimal("300")))
        rent = await components.recurring_expenses.add_expense(
            RecurringExpense(name="Rent", amount=Decimal("900"), day_of_month=1, category_id=category.id)
        )

        await components.lifecycle.initialize_month(3, 2025)
        await components.ledger.mark_paid(rent.id, 3, 2025)
        overview = await components.overview.get_overview(3, 2025)

        assert overview.from_snapshots is True
        assert overview.total_recurring_paid == Decimal("900")
        assert overview.grand_remaining == Decimal("300")
        components.store.close()

    async def test_existing_store_used(self):
        """Test that a ready-made store is passed through."""
        store = SQLiteSnapshotStore(":memory:")
        components = await create_app_components(store=store)

        assert components.store is store
        assert store.is_initialized
        store.close()

    async def test_debug_mode_sets_logging_level(self, db_path, monkeypatch):
        """Test that debug mode configures logging at DEBUG."""
        levels = []
        monkeypatch.setenv("DEBUG_MODE", "true")
        monkeypatch.setattr(orchestrator, "configure_logging", levels.append)
        get_settings.cache_clear()
        try:
            components = await create_app_components(db_path=db_path, setup_logging=True)
        finally:
            get_settings.cache_clear()

        assert levels == ["DEBUG"]
        components.store.close()


class TestResetAppData:
    """Tests for reset_app_data()."""

    async def test_reset_wipes_and_reseeds(self, db_path):
        """Test that a reset leaves only the default categories."""
        components = await create_app_components(db_path=db_path)
        await components.budgets.add_budget(Budget(name="Groceries", amount=Decimal("300")))
        await components.ledger.mark_paid(uuid4(), 3, 2025)

        with capture_logs() as logs:
            await reset_app_data(components)

        assert await components.budgets.get_all_budgets() == []
        assert await components.ledger.get_payment_records_for_month(3, 2025) == []
        assert await components.store.count_categories() == len(DEFAULT_CATEGORIES)
        assert "data_cleared" in [entry.get("event_type") for entry in logs]
        components.store.close()
