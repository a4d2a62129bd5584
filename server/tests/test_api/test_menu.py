# Menu endpoint tests

import pytest

from db.backend import BackendError, BackendUnavailableError

CATEGORY_ROWS = [
    {"key": "classic", "label": "Классика", "full_label": "Классические пиццы",
     "image_url": "/c.svg", "fallback_background": "#000", "sort": 10},
    {"key": "drinks", "label": "Напитки", "full_label": None, "image_url": None,
     "fallback_background": None, "sort": 20},
]

ITEM_ROWS = [
    {"id": "p1", "title": "Маргарита", "description": "Томаты", "category": "pizza", "price": 590,
     "image_url": "/p1.jpg"},
    {"id": "d1", "title": "Морс", "description": None, "category": "drinks", "price": "120", "image_url": None},
    {"id": "p2", "title": "Пепперони", "description": "", "category": "classic", "price": 690, "image_url": None},
]


@pytest.mark.usefixtures("backend_env")
class TestMenuRead:
    """GET /api/menu"""

    def test_menu_success(self, client, fake_backend):
        fake_backend.select_results["menu_categories"] = CATEGORY_ROWS
        fake_backend.select_results["menu_items"] = ITEM_ROWS

        response = client.get("/api/menu")

        assert response.status_code == 200
        data = response.json()
        assert data["categories"][0] == {
            "key": "classic", "label": "Классика", "fullLabel": "Классические пиццы",
            "imageUrl": "/c.svg", "background": "#000", "sort": 10,
        }
        assert data["categories"][1]["fullLabel"] == "Напитки"
        assert data["items"][0] == {
            "id": "p1", "title": "Маргарита", "desc": "Томаты", "category": "classic",
            "priceFrom": 590, "image": "/p1.jpg",
        }
        assert data["items"][1]["priceFrom"] == 120
        assert data["items"][1]["desc"] == ""

    def test_queries_only_active_rows(self, client, fake_backend):
        client.get("/api/menu")

        selects = {call[1]: call[2] for call in fake_backend.calls_of("select")}
        assert selects["menu_categories"]["filters"] == {"is_active": True}
        assert selects["menu_items"]["filters"] == {"is_active": True}
        assert selects["menu_categories"]["access_token"] is None

    def test_category_failure_degrades_to_derived_categories(self, client, fake_backend):
        fake_backend.select_results["menu_categories"] = BackendError(
            "column menu_categories.full_label does not exist", code="42703", status=400
        )
        fake_backend.select_results["menu_items"] = ITEM_ROWS

        response = client.get("/api/menu")

        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 3
        assert [category["key"] for category in data["categories"]] == ["classic", "drinks"]
        assert [category["sort"] for category in data["categories"]] == [10, 20]
        assert data["categories"][0]["label"] == "Классика"

    def test_item_failure_returns_diagnostics(self, client, fake_backend):
        fake_backend.select_results["menu_items"] = BackendError("permission denied for table menu_items",
                                                                 code="42501", status=403)

        response = client.get("/api/menu")

        assert response.status_code == 502
        data = response.json()
        assert data["code"] == "MENU_LOAD_FAILED"
        assert data["failures"] == [{
            "query": "items", "table": "menu_items", "code": "42501",
            "message": "permission denied for table menu_items",
        }]

    def test_both_failures_are_listed(self, client, fake_backend):
        fake_backend.select_results["menu_categories"] = BackendUnavailableError("timed out", code="TIMEOUT")
        fake_backend.select_results["menu_items"] = BackendUnavailableError("timed out", code="TIMEOUT")

        response = client.get("/api/menu")

        assert response.status_code == 502
        assert [failure["query"] for failure in response.json()["failures"]] == ["categories", "items"]

    def test_invalid_rows_are_dropped(self, client, fake_backend):
        fake_backend.select_results["menu_items"] = ITEM_ROWS + [
            {"id": "x1", "title": "", "category": "classic", "price": 1},
            {"id": "x2", "title": "Broken", "category": "classic", "price": "abc"},
        ]

        response = client.get("/api/menu")

        assert [item["id"] for item in response.json()["items"]] == ["p1", "d1", "p2"]


class TestMenuConfiguration:

    @pytest.mark.usefixtures("no_backend_env")
    def test_missing_configuration(self, client, fake_backend):
        response = client.get("/api/menu")

        assert response.status_code == 500
        assert response.json()["code"] == "MISCONFIGURED_ENV"
        assert fake_backend.instances == []
