"""
Integration tests for API endpoints using a SQLite test DB.
"""
import httpx
import pytest

from alist_audit.services import feed_client, library


@pytest.fixture()
def feed(monkeypatch, sample_feed):
    """Route the sync's Letterboxd fetch through an httpx.MockTransport."""
    state = {"status": 200, "text": sample_feed, "error": None}

    def handler(request):
        if state["error"] is not None:
            raise state["error"]
        return httpx.Response(state["status"], text=state["text"])

    def fake_fetch(username, client=None):
        mock = httpx.Client(transport=httpx.MockTransport(handler))
        return feed_client.fetch_feed(username, client=mock)

    monkeypatch.setattr(library, "fetch_feed", fake_fetch)
    return state


def _add(client, title, watch_date, flagged=True, **extra):
    r = client.post(
        "/movies",
        json={"title": title, "watch_date": watch_date, "counts_toward_membership": flagged, **extra},
    )
    assert r.status_code == 201, r.text
    return r.json()


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestMovies:
    def test_add_and_list(self, client):
        body = _add(client, "Anora", "2025-01-16", rating=4.6, notes="Date night")
        assert body["added_manually"] is True
        assert body["watch_date"] == "2025-01-16"

        r = client.get("/movies")
        assert r.status_code == 200
        assert [m["title"] for m in r.json()] == ["Anora"]

    def test_filter_and_sort_params(self, client):
        _add(client, "B film", "2025-01-02", flagged=False)
        _add(client, "a film", "2025-01-01")
        r = client.get("/movies", params={"filter": "flagged"})
        assert [m["title"] for m in r.json()] == ["a film"]
        r = client.get("/movies", params={"sort": "title"})
        assert [m["title"] for m in r.json()] == ["a film", "B film"]

    def test_bad_filter_rejected(self, client):
        r = client.get("/movies", params={"filter": "amc-only"})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_blank_title_rejected(self, client):
        r = client.post("/movies", json={"title": "   ", "watch_date": "2025-01-01"})
        assert r.status_code == 422

    def test_non_finite_rating_rejected(self, client):
        r = client.post("/movies", json={"title": "X", "watch_date": "2025-01-01", "rating": "nan"})
        assert r.status_code == 422

    def test_rating_out_of_range_rejected(self, client):
        r = client.post("/movies", json={"title": "X", "watch_date": "2025-01-01", "rating": 7})
        assert r.status_code == 422

    def test_toggle_and_notes(self, client):
        movie = _add(client, "Civil War", "2024-12-02", flagged=False)
        r = client.post(f"/movies/{movie['id']}/toggle")
        assert r.json()["counts_toward_membership"] is True
        r = client.patch(f"/movies/{movie['id']}/notes", json={"notes": "Prime"})
        assert r.json()["notes"] == "Prime"

    def test_toggle_unknown_is_404(self, client):
        r = client.post("/movies/nope/toggle")
        assert r.status_code == 404
        assert r.json()["code"] == "MOVIE_NOT_FOUND"

    def test_bulk_operations(self, client):
        a = _add(client, "A", "2025-01-01", flagged=False)
        b = _add(client, "B", "2025-01-02", flagged=False)
        r = client.post(
            "/movies/bulk-update",
            json={"ids": [a["id"], b["id"]], "counts_toward_membership": True},
        )
        assert r.json() == {"affected": 2}
        r = client.post("/movies/bulk-delete", json={"ids": [a["id"]]})
        assert r.json() == {"affected": 1}
        assert [m["id"] for m in client.get("/movies").json()] == [b["id"]]

    def test_bulk_empty_selection(self, client):
        r = client.post("/movies/bulk-delete", json={"ids": []})
        assert r.status_code == 422
        assert r.json()["code"] == "EMPTY_SELECTION"

    def test_recent_and_clear(self, client):
        for i in range(7):
            _add(client, f"Film {i}", f"2025-01-0{i + 1}")
        recent = client.get("/movies/recent").json()
        assert [m["title"] for m in recent] == ["Film 6", "Film 5", "Film 4", "Film 3", "Film 2"]
        assert client.delete("/movies").json() == {"affected": 7}
        assert client.get("/movies").json() == []


class TestSettings:
    def test_defaults(self, client):
        body = client.get("/settings").json()
        assert body["a_list"] == {
            "subscription_cost": 23.95,
            "start_date": None,
            "avg_ticket_price": 18.5,
            "is_active": True,
        }
        assert body["preferences"]["default_view"] == "lifetime"
        assert body["letterboxd"]["username"] == ""

    def test_patch_is_partial(self, client):
        r = client.patch("/settings", json={"a_list": {"start_date": "2024-04-15"}})
        assert r.status_code == 200
        body = r.json()
        assert body["a_list"]["start_date"] == "2024-04-15"
        assert body["a_list"]["subscription_cost"] == 23.95

    def test_negative_cost_rejected(self, client):
        r = client.patch("/settings", json={"a_list": {"subscription_cost": -1}})
        assert r.status_code == 422

    @pytest.mark.parametrize("field", ["subscription_cost", "avg_ticket_price"])
    @pytest.mark.parametrize("value", ["inf", "nan", "-inf"])
    def test_non_finite_amount_rejected(self, client, field, value):
        r = client.patch("/settings", json={"a_list": {field: value}})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

        _add(client, "Anora", "2025-01-16")
        r = client.get("/stats", params={"today": "2025-01-20"})
        assert r.status_code == 200
        assert r.json()["lifetime"]["ticket_value"] == 18.5

    def test_reset(self, client):
        client.patch("/settings", json={"a_list": {"is_active": False}, "preferences": {"default_view": "month"}})
        body = client.post("/settings/reset").json()
        assert body["a_list"]["is_active"] is True
        assert body["preferences"]["default_view"] == "lifetime"


class TestStats:
    @pytest.fixture()
    def scenario_a(self, client):
        client.patch("/settings", json={"a_list": {
            "subscription_cost": 23.95,
            "avg_ticket_price": 18.5,
            "start_date": "2024-04-15",
            "is_active": True,
        }})
        for day in ["2024-04-20", "2024-06-05", "2024-09-14", "2024-11-09", "2025-01-04", "2025-01-16"]:
            _add(client, f"Film {day}", day)
        _add(client, "Not at the cinema", "2025-01-19", flagged=False)
        return client

    def test_scenario_a(self, scenario_a):
        r = scenario_a.get("/stats", params={"today": "2025-01-20"})
        assert r.status_code == 200
        body = r.json()
        assert body["today"] == "2025-01-20"
        assert body["lifetime"]["trip_count"] == 6
        assert body["lifetime"]["active_months"] == 10
        assert body["lifetime"]["ticket_value"] == 111.0
        assert body["lifetime"]["savings"] == -128.5
        assert body["months_active"] == 10
        assert body["avg_savings_per_movie"] == -21.42
        assert body["utilization_rate"] == 16.67
        assert body["break_even_months"] is None
        assert body["weekly_quota"] == 4
        assert body["monthly_quota"] == 12

    def test_scenario_b_inactive(self, scenario_a):
        scenario_a.patch("/settings", json={"a_list": {"is_active": False}})
        body = scenario_a.get("/stats", params={"today": "2025-01-20"}).json()
        assert body["lifetime"]["savings"] == 0
        assert body["lifetime"]["trip_count"] == 6
        assert body["break_even_months"] is None

    def test_single_scope(self, scenario_a):
        r = scenario_a.get("/stats/year", params={"today": "2025-01-20"})
        assert r.status_code == 200
        body = r.json()
        assert body["scope"] == "year"
        assert body["window_start"] == "2025-01-01"
        assert body["trip_count"] == 2
        assert body["savings"] == 13.05

    def test_unknown_scope(self, client):
        assert client.get("/stats/decade").status_code == 422

    def test_empty(self, client):
        body = client.get("/stats").json()
        assert body["avg_savings_per_movie"] == 0
        assert body["utilization_rate"] == 0
        assert body["weekly_free_used"] == 0
        assert body["break_even_months"] is None


class TestSync:
    def test_sync_then_resync_preserves_flags(self, client, feed):
        r = client.post("/sync", json={"username": "@cinefan"})
        assert r.status_code == 200, r.text
        body = r.json()
        assert body["added"] == 2
        assert body["source"] == "https://letterboxd.com/cinefan/rss/"

        client.post("/movies/dune-part-two-2024-11-09/toggle")
        r = client.post("/sync", json={})
        assert r.json()["updated"] == 2

        movies = {m["id"]: m for m in client.get("/movies").json()}
        assert movies["dune-part-two-2024-11-09"]["counts_toward_membership"] is True
        assert client.get("/settings").json()["letterboxd"]["username"] == "cinefan"

    def test_sync_without_username(self, client, feed):
        r = client.post("/sync", json={})
        assert r.status_code == 400
        assert r.json()["code"] == "USERNAME_MISSING"

    def test_sync_upstream_error(self, client, feed):
        feed["status"] = 404
        r = client.post("/sync", json={"username": "ghost"})
        assert r.status_code == 502
        body = r.json()
        assert body["code"] == "FEED_UPSTREAM_ERROR"
        assert body["details"]["status_code"] == 404

    def test_sync_unreachable(self, client, feed):
        feed["error"] = httpx.ConnectError("down")
        r = client.post("/sync", json={"username": "cinefan"})
        assert r.status_code == 503
        assert r.json()["code"] == "FEED_UNREACHABLE"


class TestExport:
    def test_json(self, client):
        _add(client, "Anora", "2025-01-16")
        body = client.get("/export/json").json()
        assert body["settings"]["aList"]["subscriptionCost"] == 23.95
        assert body["movies"][0]["title"] == "Anora"
        assert body["movies"][0]["addedManually"] is True

    def test_csv(self, client):
        _add(client, "Crouching Tiger, Hidden Dragon", "2025-01-02", flagged=False)
        r = client.get("/export/csv")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/csv")
        assert "alist-savings.csv" in r.headers["content-disposition"]
        assert r.text.split("\n") == [
            "title,watchDate,countsTowardMembership,rating,addedManually",
            "Crouching Tiger  Hidden Dragon,2025-01-02,false,,true",
        ]
