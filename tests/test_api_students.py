API = "/api/v1"


def create(client, **overrides):
    payload = {"name": "Anu Joseph", "register_number": "23127001", "department": "BCA"}
    payload.update(overrides)
    return client.post(f"{API}/students", json=payload)


def test_create_infers_class_year(client):
    resp = create(client)

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["class_year"] == 2023
    assert data["is_active"] is True


def test_create_keeps_explicit_class_year(client):
    resp = create(client, register_number="X-100", class_year=2021)

    assert resp.status_code == 201
    assert resp.json()["data"]["class_year"] == 2021


def test_create_without_inferable_year_is_bad_request(client):
    resp = create(client, register_number="X-100")

    assert resp.status_code == 400


def test_create_blank_name_is_rejected(client):
    assert create(client, name="   ").status_code == 422


def test_duplicate_register_number(client):
    create(client)

    resp = create(client, name="Someone Else")

    assert resp.status_code == 409
    assert resp.json()["details"]["error_code"] == "DUPLICATE_KEY"


def test_search(client):
    create(client)
    create(client, name="Bala Murugan", register_number="22127005", department="Bsc IT")

    by_name = client.get(f"{API}/students/search", params={"q": "bala"}).json()["data"]
    assert [s["register_number"] for s in by_name] == ["22127005"]

    exact = client.get(f"{API}/students/search", params={"register_number": "23127001", "q": "bala"}).json()["data"]
    assert [s["name"] for s in exact] == ["Anu Joseph"]

    missing = client.get(f"{API}/students/search", params={"register_number": "00000000"}).json()["data"]
    assert missing == []


def test_search_requires_query(client):
    resp = client.get(f"{API}/students/search")

    assert resp.status_code == 400


def test_list_and_filter(client):
    create(client)
    create(client, name="Bala Murugan", register_number="22127005", department="Bsc IT")

    everyone = client.get(f"{API}/students").json()["data"]
    assert [s["name"] for s in everyone] == ["Anu Joseph", "Bala Murugan"]

    year_2022 = client.get(f"{API}/students", params={"year": 2022}).json()["data"]
    assert [s["register_number"] for s in year_2022] == ["22127005"]


def test_stats_standardize_departments(client):
    create(client, department="Bsc IT")
    create(client, name="Bala Murugan", register_number="22127005", department="BSC IT")
    create(client, name="Chitra Devi", register_number="23127009", department="BCA")

    stats = client.get(f"{API}/students/stats").json()["data"]

    assert stats["total"] == 3
    assert stats["active"] == 3
    assert stats["by_department"] == {"BSc IT": 2, "BCA": 1}
    assert stats["by_year"] == {"2022": 1, "2023": 2}


def test_update_student(client):
    student_id = create(client).json()["data"]["id"]

    resp = client.put(f"{API}/students/{student_id}", json={"phone_number": "9876543210"})

    assert resp.status_code == 200
    assert resp.json()["data"]["phone_number"] == "9876543210"
    assert resp.json()["data"]["register_number"] == "23127001"


def test_get_missing_student(client):
    resp = client.get(f"{API}/students/9999")

    assert resp.status_code == 404
    assert resp.json()["details"]["error_code"] == "RECORD_NOT_FOUND"


def test_deactivated_student_cannot_check_in(client):
    student_id = create(client).json()["data"]["id"]

    resp = client.delete(f"{API}/students/{student_id}")
    assert resp.status_code == 200
    assert resp.json()["data"]["is_active"] is False

    check_in = client.post(f"{API}/attendance", json={"student_id": student_id})
    assert check_in.status_code == 404

    scan = client.post(f"{API}/attendance/scan", json={"register_number": "23127001"})
    assert scan.status_code == 404


def test_update_rejects_null_for_required_columns(client):
    student_id = create(client).json()["data"]["id"]

    for field in ("class_year", "is_active", "email", "name"):
        resp = client.put(f"{API}/students/{student_id}", json={field: None})
        assert resp.status_code == 422, field
        assert resp.json()["message"] == "Validation error"

    unchanged = client.get(f"{API}/students/{student_id}").json()["data"]
    assert unchanged["class_year"] == 2023
    assert unchanged["is_active"] is True


def test_update_blank_department_is_bad_request(client):
    student_id = create(client).json()["data"]["id"]

    resp = client.put(f"{API}/students/{student_id}", json={"department": "  "})

    assert resp.status_code == 400
