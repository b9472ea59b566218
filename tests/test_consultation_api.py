from datetime import datetime, timedelta, timezone

from conftest import auth_headers, create_user
from visadocs.api.routes import appointment_routes
from visadocs.api.routes.template_routes import content_disposition
from visadocs.db.postgres import get_db_session
from visadocs.models import Update

APPOINTMENT = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "phone_number": "+61 400 000 000",
    "preferred_contact": "whatsapp",
    "subject": "Visa refusal review",
    "message": "I was refused and want to reapply.",
}


# ============================================================
# APPOINTMENTS
# ============================================================

def test_book_and_list_appointments(client, user_headers):
    created = client.post("/api/appointments", json=APPOINTMENT, headers=user_headers)
    assert created.status_code == 201
    assert created.json()["status"] == "pending"

    mine = client.get("/api/appointments", headers=user_headers).json()
    assert [a["subject"] for a in mine] == ["Visa refusal review"]

    other = auth_headers(create_user("other"))
    assert client.get("/api/appointments", headers=other).json() == []
    assert client.get(f"/api/appointments/{created.json()['id']}", headers=other).status_code == 403


def test_confirmation_email_is_sent_after_the_response(client, user_headers, monkeypatch):
    sent = []
    monkeypatch.setattr(appointment_routes, "send_appointment_confirmation", lambda *args: sent.append(args))

    created = client.post("/api/appointments", json=APPOINTMENT, headers=user_headers)
    assert created.status_code == 201
    assert sent == [("jane@example.com", "Jane Doe", "Visa refusal review", "whatsapp")]


def test_invalid_contact_method(client, user_headers):
    response = client.post("/api/appointments", json={**APPOINTMENT, "preferred_contact": "fax"}, headers=user_headers)
    assert response.status_code == 422


def test_cancel_appointment(client, user_headers, admin_headers):
    appointment = client.post("/api/appointments", json=APPOINTMENT, headers=user_headers).json()
    url = f"/api/appointments/{appointment['id']}/cancel"

    assert client.patch(url, headers=user_headers).json()["status"] == "cancelled"
    again = client.patch(url, headers=user_headers)
    assert again.status_code == 400

    other = client.post("/api/appointments", json=APPOINTMENT, headers=user_headers).json()
    done = client.patch(
        f"/api/admin/appointments/{other['id']}/status", json={"status": "completed"}, headers=admin_headers
    )
    assert done.json()["status"] == "completed"
    assert client.patch(f"/api/appointments/{other['id']}/cancel", headers=user_headers).status_code == 400


# ============================================================
# DOCUMENT TEMPLATES
# ============================================================

def _upload_template(client, admin_headers, **form):
    data = {"title": "Statement of Purpose", "category": "sop", "countries": "Australia, Canada",
            "visa_types": '["student"]'}
    data.update(form)
    return client.post(
        "/api/admin/document-templates",
        data=data,
        files={"file": ("sop.docx", b"PK\x03\x04 template body",
                        "application/vnd.openxmlformats-officedocument.wordprocessingml.document")},
        headers=admin_headers,
    )


def test_template_lifecycle(client, admin_headers, user_headers):
    created = _upload_template(client, admin_headers)
    assert created.status_code == 201
    template = created.json()
    assert template["countries"] == ["Australia", "Canada"]
    assert template["visa_types"] == ["student"]
    assert template["file_name"] == "sop.docx"

    listing = client.get("/api/document-templates?country=Canada", headers=user_headers).json()
    assert [t["id"] for t in listing] == [template["id"]]
    assert client.get("/api/document-templates?country=India", headers=user_headers).json() == []

    download = client.get(f"/api/document-templates/{template['id']}/download", headers=user_headers)
    assert download.status_code == 200
    assert download.content == b"PK\x03\x04 template body"
    assert "sop.docx" in download.headers["content-disposition"]
    assert client.get(f"/api/document-templates/{template['id']}", headers=user_headers).json()["download_count"] == 1

    toggled = client.patch(f"/api/admin/document-templates/{template['id']}/toggle", headers=admin_headers)
    assert toggled.json()["is_active"] is False
    assert client.get("/api/document-templates", headers=user_headers).json() == []
    assert client.get(f"/api/document-templates/{template['id']}", headers=user_headers).status_code == 404

    edited = client.put(
        f"/api/admin/document-templates/{template['id']}", json={"title": "SOP guide"}, headers=admin_headers
    )
    assert edited.json()["title"] == "SOP guide"

    assert client.delete(f"/api/admin/document-templates/{template['id']}", headers=admin_headers).status_code == 200
    assert client.get("/api/admin/document-templates", headers=admin_headers).json() == []


def test_template_rejects_unsupported_type(client, admin_headers):
    response = client.post(
        "/api/admin/document-templates",
        data={"title": "Script"},
        files={"file": ("run.exe", b"MZ", "application/octet-stream")},
        headers=admin_headers,
    )
    assert response.status_code == 415


def test_students_cannot_manage_templates(client, user_headers):
    assert _upload_template(client, user_headers).status_code == 403


def test_download_non_latin_file_name(client, admin_headers, user_headers):
    created = client.post(
        "/api/admin/document-templates",
        data={"title": "Visa form", "category": "forms"},
        files={"file": ("签证表.pdf", b"%PDF-1.4 form", "application/pdf")},
        headers=admin_headers,
    )
    assert created.status_code == 201
    assert created.json()["file_name"] == "签证表.pdf"

    download = client.get(f"/api/document-templates/{created.json()['id']}/download", headers=user_headers)
    assert download.status_code == 200
    assert download.content == b"%PDF-1.4 form"
    disposition = download.headers["content-disposition"]
    assert 'filename="___.pdf"' in disposition
    assert "filename*=UTF-8''%E7%AD%BE%E8%AF%81%E8%A1%A8.pdf" in disposition


def test_content_disposition_escapes_quotes():
    header = content_disposition('my "final" sop.docx')
    assert header.startswith('attachment; filename="my _final_ sop.docx"; ')
    assert header.endswith("filename*=UTF-8''my%20%22final%22%20sop.docx")


# ============================================================
# UPDATES
# ============================================================

def test_updates_visibility_and_read_state(client, admin_headers, user_headers):
    def post(**fields):
        body = {"title": "Update", "content": "Body", **fields}
        response = client.post("/api/admin/updates", json=body, headers=admin_headers)
        assert response.status_code == 201
        return response.json()

    general = post(title="Intake dates", priority="high")
    post(title="Staff only", target_audience="admins")
    post(title="Old news", expires_at=(datetime.now(timezone.utc) - timedelta(days=1)).isoformat())

    visible = client.get("/api/updates", headers=user_headers).json()
    assert [u["title"] for u in visible] == ["Intake dates"]
    assert visible[0]["is_read"] is False
    assert client.get("/api/updates/unread-count", headers=user_headers).json() == {"unread_count": 1}

    view_url = f"/api/updates/{general['id']}/view"
    assert client.post(view_url, headers=user_headers).json()["message"] == "Marked as read"
    assert client.post(view_url, headers=user_headers).json()["message"] == "Already marked as read"

    assert client.get("/api/updates/unread-count", headers=user_headers).json() == {"unread_count": 0}
    assert client.get("/api/updates", headers=user_headers).json()[0]["is_read"] is True

    with get_db_session() as db:
        assert db.get(Update, general["id"]).view_count == 1


def test_admin_update_edit_and_delete(client, admin_headers):
    update = client.post("/api/admin/updates", json={"title": "Draft", "content": "x"}, headers=admin_headers).json()
    edited = client.put(
        f"/api/admin/updates/{update['id']}", json={"is_active": False, "priority": "urgent"}, headers=admin_headers
    ).json()
    assert edited["is_active"] is False
    assert edited["priority"] == "urgent"

    assert client.delete(f"/api/admin/updates/{update['id']}", headers=admin_headers).status_code == 200
    assert client.get("/api/admin/updates", headers=admin_headers).json() == []
    assert client.post(f"/api/updates/{update['id']}/view", headers=admin_headers).status_code == 404
