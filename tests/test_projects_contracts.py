from __future__ import annotations

from fastapi.testclient import TestClient


def _seed_client_and_pm(client: TestClient, headers: dict[str, str]) -> tuple[int, int]:
    client_row = client.post(
        "/api/v1/clients",
        headers=headers,
        json={"client_code": "C-100", "name": "東京商事"},
    )
    employee_row = client.post(
        "/api/v1/employees",
        headers=headers,
        json={"employee_code": "E-100", "name": "佐藤 花子", "standard_unit_cost": 5000},
    )
    assert client_row.status_code == 201
    assert employee_row.status_code == 201
    return client_row.json()["data"]["client_id"], employee_row.json()["data"]["employee_id"]


def _project_payload(client_id: int, pm_id: int, **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "project_code": "PRJ-001",
        "client_id": client_id,
        "pm_employee_id": pm_id,
        "name": "基幹システム刷新",
        "service_type": "コンサル",
        "start_date": "2026-04-01",
        "contract_amount": 1200000,
    }
    payload.update(overrides)
    return payload


def test_project_crud_round_trip(client: TestClient, auth_headers) -> None:
    headers = auth_headers(role="manager")
    client_id, pm_id = _seed_client_and_pm(client, headers)

    created = client.post("/api/v1/projects", headers=headers, json=_project_payload(client_id, pm_id))
    assert created.status_code == 201
    project = created.json()["data"]
    assert project["status"] == "進行中"
    assert project["service_type"] == "コンサル"
    assert project["contract_amount"] == "1200000.00"
    assert project["end_date"] is None

    updated = client.put(
        f"/api/v1/projects/{project['project_id']}",
        headers=headers,
        json={"status": "完了", "end_date": "2026-09-30"},
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["status"] == "完了"
    assert updated.json()["data"]["end_date"] == "2026-09-30"
    assert updated.json()["data"]["name"] == "基幹システム刷新"

    fetched = client.get(f"/api/v1/projects/{project['project_id']}", headers=headers)
    assert fetched.json()["data"]["status"] == "完了"

    assert client.delete(f"/api/v1/projects/{project['project_id']}", headers=headers).status_code == 403
    removed = client.delete(f"/api/v1/projects/{project['project_id']}", headers=auth_headers(role="admin"))
    assert removed.status_code == 200
    assert removed.json()["data"]["message"] == "プロジェクトを削除しました"
    assert client.get(f"/api/v1/projects/{project['project_id']}", headers=headers).status_code == 404


def test_project_list_filters(client: TestClient, admin_headers) -> None:
    client_id, pm_id = _seed_client_and_pm(client, admin_headers)
    client.post("/api/v1/projects", headers=admin_headers, json=_project_payload(client_id, pm_id))
    client.post(
        "/api/v1/projects",
        headers=admin_headers,
        json=_project_payload(client_id, pm_id, project_code="PRJ-002", service_type="テスト", status="一時停止"),
    )

    by_type = client.get("/api/v1/projects", headers=admin_headers, params={"service_type": "テスト"})
    by_status = client.get("/api/v1/projects", headers=admin_headers, params={"status": "進行中"})
    by_pm = client.get("/api/v1/projects", headers=admin_headers, params={"pm_employee_id": pm_id})
    by_other_client = client.get("/api/v1/projects", headers=admin_headers, params={"client_id": client_id + 1})

    assert [row["project_code"] for row in by_type.json()["data"]] == ["PRJ-002"]
    assert [row["project_code"] for row in by_status.json()["data"]] == ["PRJ-001"]
    assert by_pm.json()["meta"]["total"] == 2
    assert by_other_client.json()["data"] == []


def test_project_rejects_end_date_before_start_date(client: TestClient, admin_headers) -> None:
    client_id, pm_id = _seed_client_and_pm(client, admin_headers)

    response = client.post(
        "/api/v1/projects",
        headers=admin_headers,
        json=_project_payload(client_id, pm_id, end_date="2026-03-31"),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_project_with_unknown_client_is_conflict(client: TestClient, admin_headers) -> None:
    _, pm_id = _seed_client_and_pm(client, admin_headers)

    response = client.post("/api/v1/projects", headers=admin_headers, json=_project_payload(9999, pm_id))

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_project_requires_service_type(client: TestClient, admin_headers) -> None:
    client_id, pm_id = _seed_client_and_pm(client, admin_headers)
    payload = _project_payload(client_id, pm_id)
    payload.pop("service_type")

    response = client.post("/api/v1/projects", headers=admin_headers, json=payload)

    assert response.status_code == 400


def test_contract_crud_round_trip(client: TestClient, auth_headers) -> None:
    headers = auth_headers(role="manager")
    client_id, pm_id = _seed_client_and_pm(client, headers)
    project_id = client.post(
        "/api/v1/projects", headers=headers, json=_project_payload(client_id, pm_id)
    ).json()["data"]["project_id"]

    created = client.post(
        "/api/v1/contracts",
        headers=headers,
        json={
            "project_id": project_id,
            "contract_number": "K-2026-001",
            "start_date": "2026-04-01",
            "contract_amount": 1200000,
        },
    )
    assert created.status_code == 201
    contract = created.json()["data"]
    assert contract["contract_status"] == "締結済"

    listed = client.get("/api/v1/contracts", headers=headers, params={"project_id": project_id})
    assert [row["contract_id"] for row in listed.json()["data"]] == [contract["contract_id"]]

    updated = client.put(
        f"/api/v1/contracts/{contract['contract_id']}",
        headers=headers,
        json={"contract_status": "期限切れ"},
    )
    assert updated.json()["data"]["contract_status"] == "期限切れ"
    assert updated.json()["data"]["contract_number"] == "K-2026-001"

    assert client.delete(f"/api/v1/contracts/{contract['contract_id']}", headers=headers).status_code == 403
    removed = client.delete(f"/api/v1/contracts/{contract['contract_id']}", headers=auth_headers(role="admin"))
    assert removed.json()["data"]["message"] == "契約を削除しました"
    assert client.get(f"/api/v1/contracts/{contract['contract_id']}", headers=headers).status_code == 404


def test_user_role_can_read_but_not_write_projects(client: TestClient, auth_headers) -> None:
    client_id, pm_id = _seed_client_and_pm(client, auth_headers())
    user_headers = auth_headers(role="user")

    assert client.get("/api/v1/projects", headers=user_headers).status_code == 200
    response = client.post("/api/v1/projects", headers=user_headers, json=_project_payload(client_id, pm_id))
    assert response.status_code == 403


def test_blank_project_code_and_contract_number_are_rejected(client: TestClient, admin_headers) -> None:
    client_id, pm_id = _seed_client_and_pm(client, admin_headers)

    blank_project = client.post(
        "/api/v1/projects", headers=admin_headers, json=_project_payload(client_id, pm_id, project_code="   ")
    )
    assert blank_project.status_code == 400
    assert blank_project.json()["error"]["code"] == "VALIDATION_ERROR"

    project_id = client.post(
        "/api/v1/projects", headers=admin_headers, json=_project_payload(client_id, pm_id)
    ).json()["data"]["project_id"]
    blank_contract = client.post(
        "/api/v1/contracts",
        headers=admin_headers,
        json={"project_id": project_id, "contract_number": " ", "start_date": "2026-04-01", "contract_amount": 1},
    )
    assert blank_contract.status_code == 400
    assert client.get("/api/v1/contracts", headers=admin_headers).json()["data"] == []
