from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session


def _create_employee(client: TestClient, headers: dict[str, str], **overrides: object) -> dict[str, object]:
    payload = {"employee_code": "E-001", "name": "山田 太郎", "department": "開発部"}
    payload.update(overrides)
    response = client.post("/api/v1/employees", headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_client_crud_round_trip(client: TestClient, auth_headers) -> None:
    headers = auth_headers(role="manager")

    created = client.post(
        "/api/v1/clients",
        headers=headers,
        json={"client_code": "C-001", "name": "株式会社テスト", "industry": "製造"},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["success"] is True
    client_id = body["data"]["client_id"]
    assert body["data"]["client_code"] == "C-001"

    listed = client.get("/api/v1/clients", headers=headers)
    assert listed.status_code == 200
    assert listed.json()["meta"] == {"total": 1}

    updated = client.put(
        f"/api/v1/clients/{client_id}",
        headers=headers,
        json={"payment_terms": "月末締め翌月末払い", "industry": None},
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["payment_terms"] == "月末締め翌月末払い"
    # Omitted and null fields keep their stored values.
    assert updated.json()["data"]["industry"] == "製造"
    assert updated.json()["data"]["name"] == "株式会社テスト"

    deleted = client.delete(f"/api/v1/clients/{client_id}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True, "data": {"message": "クライアントを削除しました"}}

    assert client.get(f"/api/v1/clients/{client_id}", headers=headers).status_code == 404
    assert client.get("/api/v1/clients", headers=headers).json()["data"] == []
    assert client.put(f"/api/v1/clients/{client_id}", headers=headers, json={"name": "x"}).status_code == 404
    assert client.delete(f"/api/v1/clients/{client_id}", headers=headers).status_code == 404


def test_client_missing_required_field_is_validation_error(client: TestClient, admin_headers) -> None:
    response = client.post("/api/v1/clients", headers=admin_headers, json={"name": "No Code"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(detail["field"] == "client_code" for detail in error["details"])


def test_duplicate_client_code_is_conflict(client: TestClient, admin_headers) -> None:
    payload = {"client_code": "C-DUP", "name": "First"}
    assert client.post("/api/v1/clients", headers=admin_headers, json=payload).status_code == 201

    response = client.post("/api/v1/clients", headers=admin_headers, json={**payload, "name": "Second"})

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_unknown_client_is_not_found(client: TestClient, admin_headers) -> None:
    response = client.get("/api/v1/clients/404", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "クライアントが見つかりません"},
    }


def test_employee_list_filters_by_department(client: TestClient, admin_headers) -> None:
    _create_employee(client, admin_headers, employee_code="E-1", department="開発部")
    _create_employee(client, admin_headers, employee_code="E-2", department="営業部")

    response = client.get("/api/v1/employees", headers=admin_headers, params={"department": "営業部"})

    assert response.status_code == 200
    codes = [row["employee_code"] for row in response.json()["data"]]
    assert codes == ["E-2"]


def test_employee_create_opens_cost_history(client: TestClient, admin_headers) -> None:
    employee = _create_employee(client, admin_headers, standard_unit_cost=5000)
    assert employee["standard_unit_cost"] == "5000.00"
    assert employee["standard_unit_cost_currency"] == "JPY"

    history = client.get(f"/api/v1/employees/{employee['employee_id']}/cost-history", headers=admin_headers)

    assert history.status_code == 200
    rows = history.json()["data"]
    assert len(rows) == 1
    assert rows[0]["standard_unit_cost"] == "5000.00"
    assert rows[0]["effective_from"] == date.today().isoformat()
    assert rows[0]["effective_to"] is None


def test_employee_without_cost_has_empty_history(client: TestClient, admin_headers) -> None:
    employee = _create_employee(client, admin_headers)

    history = client.get(f"/api/v1/employees/{employee['employee_id']}/cost-history", headers=admin_headers)

    assert history.json()["data"] == []
    assert history.json()["meta"] == {"total": 0}


def test_employee_cost_change_rolls_history_and_caps_at_three(client: TestClient, admin_headers) -> None:
    employee = _create_employee(client, admin_headers, standard_unit_cost=5000)
    employee_id = employee["employee_id"]

    for cost in (6000, 7000, 8000):
        response = client.put(
            f"/api/v1/employees/{employee_id}",
            headers=admin_headers,
            json={"standard_unit_cost": cost},
        )
        assert response.status_code == 200
        assert response.json()["data"]["standard_unit_cost"] == f"{cost}.00"

    rows = client.get(f"/api/v1/employees/{employee_id}/cost-history", headers=admin_headers).json()["data"]

    assert [row["standard_unit_cost"] for row in rows] == ["8000.00", "7000.00", "6000.00"]
    assert rows[0]["effective_to"] is None
    assert all(row["effective_to"] == date.today().isoformat() for row in rows[1:])


def test_employee_update_with_same_cost_keeps_history(client: TestClient, admin_headers) -> None:
    employee = _create_employee(client, admin_headers, standard_unit_cost=5000)
    employee_id = employee["employee_id"]

    response = client.put(
        f"/api/v1/employees/{employee_id}",
        headers=admin_headers,
        json={"standard_unit_cost": 5000, "position": "主任"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["position"] == "主任"
    rows = client.get(f"/api/v1/employees/{employee_id}/cost-history", headers=admin_headers).json()["data"]
    assert len(rows) == 1


def test_add_cost_history_closes_previous_and_evicts_oldest(client: TestClient, auth_headers) -> None:
    headers = auth_headers(role="manager")
    employee_id = _create_employee(client, headers)["employee_id"]

    for cost, effective_from in (
        (4000, "2025-01-01"),
        (4500, "2025-04-01"),
        (5000, "2025-07-01"),
        (5500, "2025-10-01"),
    ):
        response = client.post(
            f"/api/v1/employees/{employee_id}/cost-history",
            headers=headers,
            json={"standard_unit_cost": cost, "effective_from": effective_from},
        )
        assert response.status_code == 201
        assert response.json()["data"]["effective_from"] == effective_from
        assert response.json()["data"]["effective_to"] is None

    rows = client.get(f"/api/v1/employees/{employee_id}/cost-history", headers=headers).json()["data"]

    assert [(row["effective_from"], row["effective_to"]) for row in rows] == [
        ("2025-10-01", None),
        ("2025-07-01", "2025-10-01"),
        ("2025-04-01", "2025-07-01"),
    ]
    employee = client.get(f"/api/v1/employees/{employee_id}", headers=headers).json()["data"]
    assert employee["standard_unit_cost"] == "5500.00"


def test_cost_history_requires_fields_and_role(client: TestClient, auth_headers) -> None:
    employee_id = _create_employee(client, auth_headers(role="admin"))["employee_id"]
    url = f"/api/v1/employees/{employee_id}/cost-history"

    missing = client.post(url, headers=auth_headers(role="admin"), json={"standard_unit_cost": 1000})
    forbidden = client.post(
        url,
        headers=auth_headers(role="user"),
        json={"standard_unit_cost": 1000, "effective_from": "2025-01-01"},
    )

    assert missing.status_code == 400
    assert forbidden.status_code == 403


def test_cost_history_for_unknown_employee_is_not_found(client: TestClient, admin_headers) -> None:
    listed = client.get("/api/v1/employees/999/cost-history", headers=admin_headers)
    added = client.post(
        "/api/v1/employees/999/cost-history",
        headers=admin_headers,
        json={"standard_unit_cost": 1000, "effective_from": "2025-01-01"},
    )

    assert listed.status_code == 404
    assert added.status_code == 404
    assert added.json()["error"]["message"] == "社員が見つかりません"


def test_employee_delete_is_admin_only(client: TestClient, auth_headers) -> None:
    employee_id = _create_employee(client, auth_headers(role="manager"))["employee_id"]

    forbidden = client.delete(f"/api/v1/employees/{employee_id}", headers=auth_headers(role="manager"))
    deleted = client.delete(f"/api/v1/employees/{employee_id}", headers=auth_headers(role="admin"))

    assert forbidden.status_code == 403
    assert deleted.status_code == 200
    assert deleted.json()["data"]["message"] == "社員を削除しました"
    assert client.get(f"/api/v1/employees/{employee_id}", headers=auth_headers()).status_code == 404


def test_partner_crud_round_trip(client: TestClient, auth_headers) -> None:
    headers = auth_headers(role="manager")

    created = client.post(
        "/api/v1/partners",
        headers=headers,
        json={
            "partner_code": "P-001",
            "name": "鈴木 一郎",
            "company_name": "鈴木システム",
            "contract_unit_price": 40000,
            "contract_unit": "日額",
        },
    )
    assert created.status_code == 201
    partner = created.json()["data"]
    assert partner["contract_unit"] == "日額"
    assert partner["contract_unit_price"] == "40000.00"
    assert partner["contract_unit_currency"] == "JPY"

    updated = client.put(
        f"/api/v1/partners/{partner['partner_id']}",
        headers=headers,
        json={"contract_unit": "時給", "contract_unit_price": 5000},
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["contract_unit"] == "時給"
    assert updated.json()["data"]["company_name"] == "鈴木システム"

    assert client.delete(f"/api/v1/partners/{partner['partner_id']}", headers=headers).status_code == 403
    assert client.delete(f"/api/v1/partners/{partner['partner_id']}", headers=auth_headers()).status_code == 200
    assert client.get("/api/v1/partners", headers=headers).json()["data"] == []


def test_partner_rejects_unknown_contract_unit(client: TestClient, admin_headers) -> None:
    response = client.post(
        "/api/v1/partners",
        headers=admin_headers,
        json={
            "partner_code": "P-002",
            "name": "n",
            "company_name": "c",
            "contract_unit_price": 1,
            "contract_unit": "年額",
        },
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_blank_required_strings_are_validation_errors(client: TestClient, admin_headers) -> None:
    created = client.post("/api/v1/clients", headers=admin_headers, json={"client_code": "  ", "name": "   "})

    assert created.status_code == 400
    error = created.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert {detail["field"] for detail in error["details"]} == {"client_code", "name"}
    assert client.get("/api/v1/clients", headers=admin_headers).json()["data"] == []

    client_id = client.post(
        "/api/v1/clients", headers=admin_headers, json={"client_code": "C-050", "name": "北海道水産"}
    ).json()["data"]["client_id"]
    blank_update = client.put(f"/api/v1/clients/{client_id}", headers=admin_headers, json={"name": " "})
    assert blank_update.status_code == 400
    assert client.get(f"/api/v1/clients/{client_id}", headers=admin_headers).json()["data"]["name"] == "北海道水産"

    blank_employee = client.post("/api/v1/employees", headers=admin_headers, json={"employee_code": "\t", "name": "x"})
    assert blank_employee.status_code == 400


def test_surrounding_whitespace_is_trimmed(client: TestClient, admin_headers) -> None:
    response = client.post(
        "/api/v1/partners",
        headers=admin_headers,
        json={
            "partner_code": " P-010 ",
            "name": " 松本 翔 ",
            "company_name": "松本工房",
            "contract_unit_price": 700000,
            "contract_unit": "月額",
            "contact_tel": "   ",
        },
    )

    assert response.status_code == 201
    partner = response.json()["data"]
    assert partner["partner_code"] == "P-010"
    assert partner["name"] == "松本 翔"
    assert partner["contact_tel"] is None


def test_failed_employee_update_rolls_back_cost_history(client: TestClient, admin_headers) -> None:
    _create_employee(client, admin_headers, employee_code="E-1", standard_unit_cost=1000)
    employee_id = _create_employee(client, admin_headers, employee_code="E-2", standard_unit_cost=2000)["employee_id"]

    response = client.put(
        f"/api/v1/employees/{employee_id}",
        headers=admin_headers,
        json={"employee_code": "E-1", "standard_unit_cost": 3000},
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"
    rows = client.get(f"/api/v1/employees/{employee_id}/cost-history", headers=admin_headers).json()["data"]
    assert [(row["standard_unit_cost"], row["effective_to"]) for row in rows] == [("2000.00", None)]
    employee = client.get(f"/api/v1/employees/{employee_id}", headers=admin_headers).json()["data"]
    assert employee["employee_code"] == "E-2"
    assert employee["standard_unit_cost"] == "2000.00"


def test_failed_employee_create_leaves_no_rows(client: TestClient, admin_headers) -> None:
    _create_employee(client, admin_headers, employee_code="E-1", standard_unit_cost=1000)

    response = client.post(
        "/api/v1/employees",
        headers=admin_headers,
        json={"employee_code": "E-1", "name": "重複 太郎", "standard_unit_cost": 9000},
    )

    assert response.status_code == 409
    employees = client.get("/api/v1/employees", headers=admin_headers).json()["data"]
    assert [row["name"] for row in employees] == ["山田 太郎"]


def test_failed_cost_history_commit_rolls_back_close_and_eviction(
    client: TestClient,
    admin_headers,
    db_session: Session,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    employee_id = _create_employee(client, admin_headers)["employee_id"]
    url = f"/api/v1/employees/{employee_id}/cost-history"
    for cost, effective_from in ((4000, "2025-01-01"), (4500, "2025-04-01"), (5000, "2025-07-01")):
        assert client.post(
            url, headers=admin_headers, json={"standard_unit_cost": cost, "effective_from": effective_from}
        ).status_code == 201

    def failing_commit() -> None:
        raise IntegrityError("COMMIT", None, Exception("constraint failed"))

    monkeypatch.setattr(db_session, "commit", failing_commit)
    response = client.post(url, headers=admin_headers, json={"standard_unit_cost": 5500, "effective_from": "2025-10-01"})

    assert response.status_code == 409
    rows = client.get(url, headers=admin_headers).json()["data"]
    assert [(row["effective_from"], row["effective_to"]) for row in rows] == [
        ("2025-07-01", None),
        ("2025-04-01", "2025-07-01"),
        ("2025-01-01", "2025-04-01"),
    ]
    employee = client.get(f"/api/v1/employees/{employee_id}", headers=admin_headers).json()["data"]
    assert employee["standard_unit_cost"] == "5000.00"


def test_back_dated_cost_history_keeps_new_row_and_closes_it(client: TestClient, admin_headers) -> None:
    employee_id = _create_employee(client, admin_headers)["employee_id"]
    url = f"/api/v1/employees/{employee_id}/cost-history"
    for cost, effective_from in ((4500, "2025-04-01"), (5000, "2025-07-01"), (5500, "2025-10-01")):
        client.post(url, headers=admin_headers, json={"standard_unit_cost": cost, "effective_from": effective_from})

    response = client.post(url, headers=admin_headers, json={"standard_unit_cost": 4000, "effective_from": "2024-01-01"})

    assert response.status_code == 201
    assert response.json()["data"]["effective_to"] == "2025-04-01"
    rows = client.get(url, headers=admin_headers).json()["data"]
    assert [(row["effective_from"], row["effective_to"]) for row in rows] == [
        ("2025-10-01", None),
        ("2025-07-01", "2025-10-01"),
        ("2024-01-01", "2025-04-01"),
    ]
    assert sum(1 for row in rows if row["effective_to"] is None) == 1
