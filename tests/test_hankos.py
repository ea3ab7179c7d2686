import pytest

from conftest import PNG_BASE64, auth_headers, create_hanko, create_user, upload_pdf
from hankosign.errors import ValidationError
from hankosign.modules.hankos.services.hanko_service import HankoService

@pytest.fixture
def owner_headers(client, db_session):
    create_user(db_session, "owner@hankosign.jp", name="山田太郎")
    return auth_headers(client, "owner@hankosign.jp")

def test_create_hanko_uploads_image(client, owner_headers, storage):
    hanko = create_hanko(client, owner_headers, name="山田", type="MITOMEIN", size=80)
    assert hanko["name"] == "山田"
    assert hanko["type"] == "MITOMEIN"
    assert hanko["size"] == 80
    assert hanko["is_registered"] is False

    keys = list(storage.objects)
    assert len(keys) == 1
    assert keys[0].startswith(f"hankos/{hanko['user_id']}/hanko_")
    assert keys[0].endswith(".png")
    assert storage.objects[keys[0]][1] == "image/png"
    assert hanko["image_url"].endswith(keys[0])

def test_create_hanko_default_size(client, owner_headers):
    assert create_hanko(client, owner_headers)["size"] == 60

def test_jitsuin_with_registration_number_is_registered(client, owner_headers):
    hanko = create_hanko(client, owner_headers, type="JITSUIN", registration_number="REG-001")
    assert hanko["is_registered"] is True
    assert hanko["registration_number"] == "REG-001"

def test_registration_number_only_for_jitsuin(client, owner_headers, storage):
    payload = {"name": "銀行", "type": "GINKOIN", "image_data": PNG_BASE64, "registration_number": "REG-1"}
    resp = client.post("/api/hankos", json=payload, headers=owner_headers)
    assert resp.status_code == 400
    assert storage.objects == {}

@pytest.mark.parametrize("payload", [
    {"name": "", "type": "MITOMEIN", "image_data": PNG_BASE64},
    {"name": "x" * 51, "type": "MITOMEIN", "image_data": PNG_BASE64},
    {"name": "山田", "image_data": PNG_BASE64},
    {"name": "山田", "type": "HANKO", "image_data": PNG_BASE64},
    {"name": "山田", "type": "MITOMEIN", "image_data": PNG_BASE64, "size": 10},
    {"name": "山田", "type": "MITOMEIN", "image_data": PNG_BASE64, "size": 501},
    {"name": "山田", "type": "MITOMEIN", "image_data": "A" * 500_001},
])
def test_invalid_hanko_rejected(client, owner_headers, storage, payload):
    resp = client.post("/api/hankos", json=payload, headers=owner_headers)
    assert resp.status_code == 400
    assert storage.objects == {}

def test_empty_name_message(client, owner_headers):
    resp = client.post("/api/hankos", json={"name": "  ", "type": "MITOMEIN", "image_data": PNG_BASE64},
                       headers=owner_headers)
    assert resp.json()["detail"] == "Please enter a hanko name"

def test_undecodable_image_persists_nothing(client, owner_headers, storage):
    resp = client.post("/api/hankos", json={"name": "山田", "type": "MITOMEIN", "image_data": "not base64!!"},
                       headers=owner_headers)
    assert resp.status_code == 400
    assert storage.objects == {}
    assert client.get("/api/hankos", headers=owner_headers).json()["hankos"] == []

def test_decode_image_accepts_data_url():
    assert HankoService.decode_image(f"data:image/png;base64,{PNG_BASE64}").startswith(b"\x89PNG")
    assert HankoService.decode_image(PNG_BASE64).startswith(b"\x89PNG")
    with pytest.raises(ValidationError):
        HankoService.decode_image("%%%")

def test_list_only_own_hankos_newest_first(client, db_session, owner_headers):
    create_user(db_session, "other@hankosign.jp")
    other_headers = auth_headers(client, "other@hankosign.jp")
    first = create_hanko(client, owner_headers, name="一")
    second = create_hanko(client, owner_headers, name="二")
    create_hanko(client, other_headers, name="他")

    hankos = client.get("/api/hankos", headers=owner_headers).json()["hankos"]
    assert [h["id"] for h in hankos] == [second["id"], first["id"]]

def test_delete_requires_id(client, owner_headers):
    resp = client.delete("/api/hankos", headers=owner_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Hanko ID is required"

def test_delete_own_hanko(client, owner_headers, storage):
    hanko = create_hanko(client, owner_headers)
    assert len(storage.objects) == 1
    resp = client.delete(f"/api/hankos?id={hanko['id']}", headers=owner_headers)
    assert resp.status_code == 200
    assert client.get("/api/hankos", headers=owner_headers).json()["hankos"] == []
    assert storage.objects == {}

def test_delete_hanko_survives_storage_failure(client, owner_headers, storage):
    hanko = create_hanko(client, owner_headers)
    storage.fail_delete = True
    resp = client.delete(f"/api/hankos?id={hanko['id']}", headers=owner_headers)
    assert resp.status_code == 200
    assert client.get("/api/hankos", headers=owner_headers).json()["hankos"] == []

def test_cannot_delete_someone_elses_hanko(client, db_session, owner_headers):
    hanko = create_hanko(client, owner_headers)
    create_user(db_session, "thief@hankosign.jp")
    resp = client.delete(f"/api/hankos?id={hanko['id']}", headers=auth_headers(client, "thief@hankosign.jp"))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Hanko not found"

def test_delete_missing_hanko(client, owner_headers):
    assert client.delete("/api/hankos?id=9999", headers=owner_headers).status_code == 404

def test_hanko_used_in_signature_cannot_be_deleted(client, owner_headers):
    hanko = create_hanko(client, owner_headers)
    document = upload_pdf(client, owner_headers)
    client.post("/api/signatures", json={"document_id": document["id"], "hanko_id": hanko["id"],
                                          "position_x": 10, "position_y": 20}, headers=owner_headers)
    resp = client.delete(f"/api/hankos?id={hanko['id']}", headers=owner_headers)
    assert resp.status_code == 400

def test_hankos_require_authentication(client):
    assert client.get("/api/hankos").status_code == 401
