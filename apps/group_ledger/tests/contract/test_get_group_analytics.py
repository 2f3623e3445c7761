from __future__ import annotations

from fastapi.testclient import TestClient

HEADERS = {"X-User-Id": "caio"}


def test_analytics_report_for_date_range(
    client: TestClient, seeded_group: dict[str, str]
) -> None:
    response = client.get(
        f"/v1/groups/{seeded_group['group_id']}/analytics",
        params={"start_date": "2026-02-11", "end_date": "2026-02-12"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["settlement"]["total_spent"] == "150.00"
    assert [(row["member_id"], row["status"]) for row in body["rows"]] == [
        ("ana", "debtor"),
        ("bia", "creditor"),
        ("caio", "balanced"),
    ]
    assert body["monthly"] == [
        {"month": "2026-02", "total": "150.00", "count": 2, "average": "75.00"}
    ]
    assert body["categories"] == [
        {"category": "utilities", "total": "100.00", "count": 1},
        {"category": "groceries", "total": "50.00", "count": 1},
    ]
    assert body["settlement"]["transfers"][0]["from_member_id"] == "ana"


def test_analytics_accepts_repeated_category_and_member_filters(
    client: TestClient, seeded_group: dict[str, str]
) -> None:
    response = client.get(
        f"/v1/groups/{seeded_group['group_id']}/analytics",
        params=[
            ("category", "groceries"),
            ("category", "utilities"),
            ("member_id", "ana"),
        ],
        headers=HEADERS,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["filters"]["categories"] == ["groceries", "utilities"]
    assert body["filters"]["member_ids"] == ["ana"]
    assert body["settlement"]["total_spent"] == "150.00"


def test_analytics_rejects_inverted_date_range(
    client: TestClient, seeded_group: dict[str, str]
) -> None:
    response = client.get(
        f"/v1/groups/{seeded_group['group_id']}/analytics",
        params={"start_date": "2026-03-01", "end_date": "2026-02-01"},
        headers=HEADERS,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"


def test_analytics_accepts_last_calendar_day_as_end_date(
    client: TestClient, seeded_group: dict[str, str]
) -> None:
    response = client.get(
        f"/v1/groups/{seeded_group['group_id']}/analytics",
        params={"start_date": "2026-02-01", "end_date": "9999-12-31"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["settlement"]["total_spent"] == "300.00"
