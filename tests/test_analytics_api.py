"""
Integration tests for the /analytics endpoints.
"""
import json


def _create(client, headers, **fields):
    data = {"resume_details": "Resume", "job_description": "JD", "company_name": "Acme"}
    data.update(fields)
    return client.post("/applications", json=data, headers=headers).json()


def test_summary(client, auth_headers):
    _create(client, auth_headers, status="applied")
    _create(client, auth_headers, status="applied")
    _create(client, auth_headers, status="interview", company_name="Beta")
    deleted = _create(client, auth_headers, status="applied")
    client.delete(f"/applications/{deleted['id']}", headers=auth_headers)

    response = client.get("/analytics/summary", params={"time_range": "month"}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total_applications"] == 3
    assert body["status_distribution"] == {"applied": 2, "interview": 1}
    assert body["response_rate"] == 50.0
    assert body["top_companies"][0] == {"name": "Acme", "count": 2}


def test_summary_rejects_unknown_range(client, auth_headers):
    response = client.get("/analytics/summary", params={"time_range": "decade"}, headers=auth_headers)
    assert response.status_code == 422


def test_trend(client, auth_headers):
    _create(client, auth_headers)

    response = client.get("/analytics/trend", params={"time_range": "week"}, headers=auth_headers)

    body = response.json()
    assert body["time_range"] == "week"
    assert len(body["points"]) == 7
    assert body["points"][-1]["applications"] == 1


def test_export_csv(client, auth_headers):
    _create(client, auth_headers, status="applied")

    response = client.get("/analytics/export", params={"format": "csv"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "jobgenie-analytics-" in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert lines[0] == "Metric,Value"
    assert lines[1] == "Total Applications,1"


def test_export_json(client, auth_headers):
    created = _create(client, auth_headers)

    response = client.get("/analytics/export", params={"format": "json"}, headers=auth_headers)

    payload = json.loads(response.content)
    assert payload["time_range"] == "month"
    assert payload["stats"]["total_applications"] == 1
    assert [a["id"] for a in payload["applications"]] == [created["id"]]
