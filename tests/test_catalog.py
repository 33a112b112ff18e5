"""
Tests for menu browsing, maintenance and order-history suggestions.
"""
from decimal import Decimal

import pytest
from sqlalchemy import update

from app.core.exceptions import NotFound
from app.models import MenuItem, Order, OrderStatus, User, UserRole, dump_line_items
from app.services.catalog import CatalogService
from tests.conftest import auth, line


async def add_order(session, items, customer_id=None):
    order = Order(
        items=dump_line_items(items),
        status=OrderStatus.PREPARING,
        customer_id=customer_id,
        customer_name="Guest",
        original_price=Decimal("0"),
        discount_amount=Decimal("0"),
        final_price=Decimal("0"),
    )
    session.add(order)
    await session.commit()
    return order


class TestBrowse:

    async def test_list_menu(self, client, menu):
        response = await client.get("/api/menus")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [d["name"] for d in data] == list(menu)
        assert data[0]["price"] == "5.50"

    async def test_search_matches_name_and_description(self, client, menu):
        response = await client.get("/api/menus", params={"q": "SOUP"})

        names = {d["name"] for d in response.json()["data"]}
        assert names == {"Tomato Soup", "Lentil Soup", "Miso Bowl"}

    async def test_search_without_hits(self, client, menu):
        response = await client.get("/api/menus", params={"q": "pizza"})
        assert response.json()["data"] == []

    async def test_search_treats_wildcards_literally(self, client, menu):
        response = await client.get("/api/menus", params={"q": "%"})
        assert response.json()["data"] == []

    async def test_get_item(self, client, menu):
        item = menu["Greek Salad"]

        response = await client.get(f"/api/menus/{item.id}")

        assert response.status_code == 200
        assert response.json()["data"]["category"] == "Salads"

    async def test_get_missing_item(self, client, menu):
        response = await client.get("/api/menus/9999")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Menu item not found"}


class TestMaintenance:

    async def test_staff_creates_item_with_defaults(self, client, staff_token):
        response = await client.post(
            "/api/menus",
            headers=auth(staff_token),
            json={"name": "  Chili  ", "price": 7.5, "category": None},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Chili"
        assert data["price"] == "7.50"
        assert data["category"] == "General"
        assert data["stock"] == 100
        assert data["is_available"] is True

    async def test_admin_updates_item(self, client, admin_token, menu):
        item = menu["Veggie Burger"]

        response = await client.put(
            f"/api/menus/{item.id}",
            headers=auth(admin_token),
            json={"name": "Bean Burger", "price": "10.25", "category": "Mains", "is_available": False},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Bean Burger"
        assert data["price"] == "10.25"
        assert data["is_available"] is False

    async def test_update_missing_item(self, client, staff_token):
        response = await client.put(
            "/api/menus/404", headers=auth(staff_token), json={"name": "X", "price": 1}
        )
        assert response.status_code == 404

    async def test_delete_item(self, client, staff_token, menu):
        item = menu["Miso Bowl"]

        response = await client.delete(f"/api/menus/{item.id}", headers=auth(staff_token))

        assert response.status_code == 200
        assert response.json()["data"] == {"id": item.id}
        assert (await client.get(f"/api/menus/{item.id}")).status_code == 404

    @pytest.mark.parametrize(
        "body",
        [
            {"name": "", "price": 3},
            {"name": "Tea"},
            {"name": "Tea", "price": -1},
            {"name": "Tea", "price": "abc"},
        ],
    )
    async def test_invalid_item(self, client, staff_token, body):
        response = await client.post("/api/menus", headers=auth(staff_token), json=body)

        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_student_cannot_create(self, client, student_token):
        response = await client.post(
            "/api/menus", headers=auth(student_token), json={"name": "Tea", "price": 2}
        )
        assert response.status_code == 403

    async def test_anonymous_cannot_delete(self, client, menu):
        item = menu["Miso Bowl"]
        response = await client.delete(f"/api/menus/{item.id}")
        assert response.status_code == 401


class TestTrending:

    async def test_falls_back_to_available_items(self, client, session, menu):
        hidden = MenuItem(name="Secret Stew", price=Decimal("4.00"), is_available=False)
        session.add(hidden)
        await session.commit()

        response = await client.get("/api/menus/trending")

        data = response.json()["data"]
        assert len(data) == 5
        assert all(d["order_count"] == 0 for d in data)
        assert all(d["is_available"] for d in data)
        assert "Secret Stew" not in {d["name"] for d in data}

    async def test_fallback_never_empty_when_nothing_available(self, client, session, menu):
        await session.execute(update(MenuItem).values(is_available=False))
        await session.commit()

        response = await client.get("/api/menus/trending")

        data = response.json()["data"]
        assert response.status_code == 200
        assert len(data) == 5
        assert not any(d["is_available"] for d in data)

    async def test_fallback_tops_up_with_unavailable_dishes(self, session, menu):
        keep = {menu["Tomato Soup"].id, menu["Greek Salad"].id}
        await session.execute(
            update(MenuItem).where(MenuItem.id.not_in(keep)).values(is_available=False)
        )
        await session.commit()

        ranked = await CatalogService(session).trending()

        assert len(ranked) == 5
        assert {item.id for item, _ in ranked[:2]} == keep
        assert len({item.id for item, _ in ranked}) == 5

    async def test_ranks_by_occurrences(self, client, session, menu):
        soup, salad, burger = menu["Tomato Soup"], menu["Caesar Salad"], menu["Veggie Burger"]
        await add_order(session, [line(soup), line(soup), line(salad)])
        await add_order(session, [line(salad), line(burger)])
        await add_order(session, [line(soup)])

        response = await client.get("/api/menus/trending")

        data = response.json()["data"]
        assert [(d["name"], d["order_count"]) for d in data] == [
            ("Tomato Soup", 3),
            ("Caesar Salad", 2),
            ("Veggie Burger", 1),
        ]

    async def test_ties_break_by_id(self, session, menu):
        greek, caesar = menu["Greek Salad"], menu["Caesar Salad"]
        await add_order(session, [line(greek), line(caesar)])

        ranked = await CatalogService(session).trending()

        assert [item.id for item, _ in ranked] == sorted([greek.id, caesar.id])

    async def test_deleted_dishes_drop_out(self, session, menu):
        soup = menu["Lentil Soup"]
        await add_order(session, [line(soup), {"id": 999, "name": "Gone", "price": 1}])

        ranked = await CatalogService(session).trending()

        assert [(item.name, count) for item, count in ranked] == [("Lentil Soup", 1)]


class TestPersonalized:

    async def test_recommendations_from_favourite_category(self, client, student_token, menu):
        await client.post(
            "/api/orders",
            headers=auth(student_token),
            json={"items": [line(menu["Tomato Soup"]), line(menu["Lentil Soup"]), line(menu["Greek Salad"])]},
        )

        response = await client.get("/api/menus/recommendations", headers=auth(student_token))

        assert [d["name"] for d in response.json()["data"]] == ["Miso Bowl"]

    async def test_recommendations_without_history(self, client, faculty_token, menu):
        response = await client.get("/api/menus/recommendations", headers=auth(faculty_token))

        data = response.json()["data"]
        assert len(data) == 5
        assert {d["name"] for d in data} <= set(menu)

    async def test_favourite_category_exhausted(self, client, student_token, menu):
        soups = [menu["Tomato Soup"], menu["Lentil Soup"], menu["Miso Bowl"]]
        await client.post(
            "/api/orders", headers=auth(student_token), json={"items": [line(s) for s in soups]}
        )

        response = await client.get("/api/menus/recommendations", headers=auth(student_token))

        assert len(response.json()["data"]) == 5

    async def test_favourite_category_tie_goes_to_smallest_name(self, session, menu):
        user = User(name="T", email="t@campus.edu", password_hash="x", role=UserRole.STUDENT)
        session.add(user)
        await session.commit()
        await add_order(session, [line(menu["Tomato Soup"]), line(menu["Caesar Salad"])], customer_id=user.id)

        picks = await CatalogService(session).recommendations(user)

        assert [item.name for item in picks] == ["Greek Salad"]

    async def test_reorder_lists_distinct_dishes(self, client, student_token, staff_token, menu):
        soup, burger = menu["Tomato Soup"], menu["Veggie Burger"]
        for items in ([line(soup), line(soup)], [line(burger), line(soup)]):
            await client.post("/api/orders", headers=auth(student_token), json={"items": items})
        await client.delete(f"/api/menus/{burger.id}", headers=auth(staff_token))

        response = await client.get("/api/menus/reorder", headers=auth(student_token))

        assert [d["name"] for d in response.json()["data"]] == ["Tomato Soup"]

    async def test_reorder_requires_login(self, client):
        response = await client.get("/api/menus/reorder")
        assert response.status_code == 401

    async def test_get_missing_through_service(self, session):
        with pytest.raises(NotFound):
            await CatalogService(session).get(12345)
