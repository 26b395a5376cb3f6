"""
Tests for the user and budget gateways (in-memory SQLite)
"""
from decimal import Decimal

from fundytrack.crud import crud_budget, crud_category, crud_user
from fundytrack.db.models.budget import CategoryBudget, MonthlyBudget
from fundytrack.schemas.category import CategoryCreate
from fundytrack.schemas.user import UserCreate


def test_first_login_creates_the_user_and_later_logins_refresh_the_profile(run_db):
    async def scenario(db):
        created = await crud_user.upsert_user_from_identity(db, google_id="g-7", email="bo@example.com", name="Bo")
        created_id = created.id
        unchanged = await crud_user.upsert_user_from_identity(db, google_id="g-7", email="bo@example.com", name="Bo")
        renamed = await crud_user.upsert_user_from_identity(
            db, google_id="g-7", email="bo@example.com", name="Bo B.", avatar_url="https://example.com/bo.png"
        )
        by_provider = await crud_user.get_user_by_provider_id(db, google_id="g-7")
        return created_id, unchanged, renamed, by_provider

    created_id, unchanged, renamed, by_provider = run_db(scenario)

    assert unchanged.id == created_id
    assert renamed.id == created_id
    assert renamed.name == "Bo B."
    assert renamed.avatar_url == "https://example.com/bo.png"
    assert by_provider.id == created_id


def test_unknown_provider_id(run_db):
    async def scenario(db):
        return (
            await crud_user.get_user_by_provider_id(db, google_id="nobody"),
            await crud_user.get_user_by_provider_id(db, google_id=""),
        )

    assert run_db(scenario) == (None, None)


def test_budget_reads_are_scoped_by_user_and_month(run_db):
    async def scenario(db):
        ann = await crud_user.create_user(db, user_in=UserCreate(google_id="g-ann"))
        bo = await crud_user.create_user(db, user_in=UserCreate(google_id="g-bo"))
        food = await crud_category.create_category(db, user_id=ann.id, obj_in=CategoryCreate(name="Food"))
        travel = await crud_category.create_category(db, user_id=ann.id, obj_in=CategoryCreate(name="Travel"))
        db.add_all([
            MonthlyBudget(user_id=ann.id, month="2025-11", amount=Decimal("300")),
            MonthlyBudget(user_id=ann.id, month="2025-10", amount=Decimal("250")),
            CategoryBudget(user_id=ann.id, category_id=food.id, month="2025-11", amount=Decimal("80")),
            CategoryBudget(user_id=ann.id, category_id=travel.id, month="2025-11", amount=Decimal("0")),
            CategoryBudget(user_id=ann.id, category_id=travel.id, month="2025-12", amount=Decimal("500")),
        ])
        await db.flush()
        return food, travel, {
            "ann_nov": await crud_budget.get_monthly_budget(db, user_id=ann.id, month="2025-11"),
            "ann_sep": await crud_budget.get_monthly_budget(db, user_id=ann.id, month="2025-09"),
            "bo_nov": await crud_budget.get_monthly_budget(db, user_id=bo.id, month="2025-11"),
            "map": await crud_budget.get_category_budget_map(db, user_id=ann.id, month="2025-11"),
            "bo_map": await crud_budget.get_category_budget_map(db, user_id=bo.id, month="2025-11"),
        }

    food, travel, found = run_db(scenario)

    assert found["ann_nov"].amount == Decimal("300")
    assert found["ann_sep"] is None
    assert found["bo_nov"] is None
    assert found["map"] == {food.id: Decimal("80"), travel.id: Decimal("0")}
    assert found["bo_map"] == {}
