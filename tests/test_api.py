import io
import os

from sqlalchemy.exc import OperationalError

from institute.core.config import settings


def _register(client, **fields):
    body = {"enrollmentNo": "ESL001", "password": "pw", "name": "Aarav Sharma", "course": "DCA"}
    body.update(fields)
    response = client.post("/api/students", json=body)
    assert response.status_code == 201, response.text
    return response.json()["student"]


def _error_code(response):
    body = response.json()
    assert body["success"] is False
    return body["error"]["code"]


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


class TestStudents:
    def test_register_returns_camel_case_without_password(self, client):
        student = _register(client, batchTime="10am", email="")
        assert student["enrollmentNo"] == "ESL001"
        assert student["batchTime"] == "10am"
        assert student["paidFee"] == 0
        assert student["status"] == "Active"
        assert student["email"] is None
        assert "password" not in student

    def test_duplicate_enrollment_conflicts(self, client):
        _register(client)
        response = client.post("/api/students", json={"enrollmentNo": "ESL001", "password": "x"})
        assert response.status_code == 409
        assert _error_code(response) == "CONFLICT"

    def test_missing_required_fields(self, client):
        response = client.post("/api/students", json={"name": "No Enrollment"})
        assert response.status_code == 422
        assert _error_code(response) == "VALIDATION_ERROR"

    def test_get_update_delete(self, client):
        student = _register(client)
        url = f"/api/students/{student['id']}"

        assert client.get(url).json()["name"] == "Aarav Sharma"

        updated = client.put(url, json={"phone": "9999999999", "paidFee": 100000})
        assert updated.status_code == 200
        assert updated.json()["phone"] == "9999999999"
        assert updated.json()["paidFee"] == 0
        assert updated.json()["name"] == "Aarav Sharma"

        assert client.delete(url).json() == {"message": "Student deleted"}
        missing = client.get(url)
        assert missing.status_code == 404
        assert _error_code(missing) == "NOT_FOUND"

    def test_update_to_taken_enrollment_conflicts(self, client):
        _register(client, enrollmentNo="ESL001")
        other = _register(client, enrollmentNo="ESL002")
        response = client.put(f"/api/students/{other['id']}", json={"enrollmentNo": "ESL001"})
        assert response.status_code == 409

    def test_list_newest_first(self, client):
        first = _register(client, enrollmentNo="ESL001")
        second = _register(client, enrollmentNo="ESL002")
        ids = [s["id"] for s in client.get("/api/students").json()]
        assert ids == [second["id"], first["id"]]

    def test_search_is_case_insensitive_and_capped(self, client):
        for n in range(12):
            _register(client, enrollmentNo=f"ESL{n:03d}", name=f"Rahul {n}")
        _register(client, enrollmentNo="XYZ100", name="Meera")

        assert len(client.get("/api/students/search", params={"query": "rahul"}).json()) == 10
        hits = client.get("/api/students/search", params={"query": "xyz1"}).json()
        assert [s["name"] for s in hits] == ["Meera"]

    def test_search_treats_wildcards_literally(self, client):
        _register(client, enrollmentNo="ESL001", name="Plain")
        assert client.get("/api/students/search", params={"query": "%"}).json() == []
        assert client.get("/api/students/search", params={"query": "_"}).json() == []

    def test_photo_upload(self, client):
        student = _register(client)
        response = client.post(
            f"/api/students/{student['id']}/photo",
            files={"photo": ("face.png", io.BytesIO(b"\x89PNG fake"), "image/png")},
        )
        assert response.status_code == 200, response.text
        photo_url = response.json()["photoUrl"]
        assert photo_url.startswith("/uploads/") and photo_url.endswith(".png")
        assert client.get(photo_url).content == b"\x89PNG fake"

    def test_photo_upload_rejects_non_images(self, client):
        student = _register(client)
        response = client.post(
            f"/api/students/{student['id']}/photo",
            files={"photo": ("notes.txt", io.BytesIO(b"hello"), "text/plain")},
        )
        assert response.status_code == 422

    def test_photo_upload_rejects_html_disguised_as_image(self, client):
        student = _register(client)
        response = client.post(
            f"/api/students/{student['id']}/photo",
            files={"photo": ("x.html", io.BytesIO(b"<script>alert(1)</script>"), "image/png")},
        )
        assert response.status_code == 422
        assert client.get(f"/api/students/{student['id']}").json()["photoUrl"] is None

    def test_photo_extension_follows_content_type(self, client):
        student = _register(client)
        response = client.post(
            f"/api/students/{student['id']}/photo",
            files={"photo": ("face", io.BytesIO(b"\xff\xd8 fake"), "image/jpeg")},
        )
        assert response.status_code == 200, response.text
        photo_url = response.json()["photoUrl"]
        assert photo_url.endswith(".jpg")
        assert client.get(photo_url).headers["content-type"] == "image/jpeg"

    def test_photo_file_removed_when_save_fails(self, client, db, monkeypatch):
        student = _register(client)
        before = set(os.listdir(settings.UPLOAD_DIR))

        def failing_commit():
            raise OperationalError("UPDATE students", {}, Exception("connection reset"))

        monkeypatch.setattr(db, "commit", failing_commit)
        response = client.post(
            f"/api/students/{student['id']}/photo",
            files={"photo": ("face.png", io.BytesIO(b"\x89PNG fake"), "image/png")},
        )
        monkeypatch.undo()

        assert response.status_code == 503
        assert set(os.listdir(settings.UPLOAD_DIR)) == before


class TestFees:
    def test_collect_history_void(self, client):
        student = _register(client)

        first = client.post("/api/fees/collect", json={"studentId": student["id"], "amount": 5000, "date": "2024-01-01"})
        assert first.status_code == 200, first.text
        assert first.json()["paidFee"] == 5000
        assert first.json()["transaction"]["narration"] == "Fee Payment"

        second = client.post("/api/fees/collect", json={"studentId": student["id"], "amount": "3000", "narration": "Second installment"})
        assert second.json()["paidFee"] == 8000

        history = client.get(f"/api/fees/history/{student['id']}").json()
        assert [tx["amount"] for tx in history] == [3000, 5000]

        voided = client.delete(f"/api/fees/transaction/{history[0]['id']}")
        assert voided.json() == {"message": "Deleted"}
        assert client.get(f"/api/students/{student['id']}").json()["paidFee"] == 5000
        assert len(client.get(f"/api/fees/history/{student['id']}").json()) == 1

    def test_collect_for_unknown_student(self, client):
        response = client.post("/api/fees/collect", json={"studentId": 404, "amount": 10})
        assert response.status_code == 404

    def test_collect_rejects_non_numeric_amount(self, client):
        student = _register(client)
        response = client.post("/api/fees/collect", json={"studentId": student["id"], "amount": "lots"})
        assert response.status_code == 422
        assert "amount" in response.json()["error"]["details"]

    def test_collect_rejects_oversized_amount(self, client):
        student = _register(client)
        response = client.post("/api/fees/collect", json={"studentId": student["id"], "amount": 1e30})
        assert response.status_code == 422
        assert _error_code(response) == "VALIDATION_ERROR"
        assert client.get(f"/api/students/{student['id']}").json()["paidFee"] == 0

    def test_void_unknown_transaction(self, client):
        response = client.delete("/api/fees/transaction/31337")
        assert response.status_code == 404

    def test_reconcile(self, client):
        student = _register(client)
        client.post("/api/fees/collect", json={"studentId": student["id"], "amount": 1200})
        body = client.post(f"/api/fees/reconcile/{student['id']}").json()
        assert body == {"studentId": student["id"], "previousPaidFee": 1200, "paidFee": 1200, "repaired": False}

    def test_deleting_student_removes_history(self, client):
        student = _register(client)
        client.post("/api/fees/collect", json={"studentId": student["id"], "amount": 1200})
        client.delete(f"/api/students/{student['id']}")
        assert client.get(f"/api/fees/history/{student['id']}").json() == []


class TestCourses:
    def test_crud_and_name_lookup(self, client):
        created = client.post("/api/courses", json={"courseName": "Tally Prime", "duration": "3 Months", "fees": 4500, "subjects": ["GST"]})
        assert created.status_code == 201
        course = created.json()["course"]

        found = client.get("/api/courses/name/%20tally%20prime%20")
        assert found.status_code == 200
        assert found.json()["id"] == course["id"]

        assert client.get("/api/courses/name/Tally").status_code == 404

        updated = client.put(f"/api/courses/{course['id']}", json={"fees": 5000})
        assert updated.json()["fees"] == 5000
        assert updated.json()["subjects"] == ["GST"]

        assert len(client.get("/api/courses").json()) == 1
        assert client.delete(f"/api/courses/{course['id']}").json() == {"message": "Course deleted"}
        assert client.get("/api/courses").json() == []

    def test_update_missing_course(self, client):
        assert client.put("/api/courses/9", json={"fees": 1}).status_code == 404


class TestCertificates:
    def _issue(self, client, student, **fields):
        body = {
            "certificateNo": "ESL/2024/001",
            "studentId": student["id"],
            "studentName": student["name"],
            "enrollmentNo": student["enrollmentNo"],
            "courseName": "DCA",
            "marks": {"theory": 90, "practical": 88, "project": 92, "viva": 85},
            "percentage": 88.75,
        }
        body.update(fields)
        return client.post("/api/certificates/issue", json=body)

    def test_issue_verify_and_conflict(self, client):
        student = _register(client, batchTime="10am", sessionStart="2023-01-01", sessionEnd="2023-06-01")

        issued = self._issue(client, student, certificateNo="CERT-1")
        assert issued.status_code == 201, issued.text
        assert issued.json()["data"]["grade"] == "A"

        again = self._issue(client, student, certificateNo="CERT-2")
        assert again.status_code == 409
        assert len(client.get("/api/certificates").json()) == 1

        verified = client.get("/api/certificates/verify/CERT-1")
        assert verified.status_code == 200
        data = verified.json()["data"]
        assert verified.json()["success"] is True
        assert data["batch"] == "10am"
        assert data["session"] == "2023-01-01 - 2023-06-01"
        assert data["fatherName"] == "N/A"
        assert data["studentPhoto"] is None
        assert data["marks"]["viva"] == 85

    def test_certificate_outlives_student(self, client):
        student = _register(client, batchTime="10am")
        self._issue(client, student, certificateNo="CERT-9")
        client.delete(f"/api/students/{student['id']}")

        data = client.get("/api/certificates/verify/CERT-9").json()["data"]
        assert data["studentName"] == "Aarav Sharma"
        assert data["studentId"] is None
        assert data["batch"] == "N/A"

    def test_verify_unknown(self, client):
        response = client.get("/api/certificates/verify/NOPE")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Invalid Certificate"

    def test_delete(self, client):
        student = _register(client)
        cert = self._issue(client, student).json()["data"]
        assert client.delete(f"/api/certificates/{cert['id']}").status_code == 200
        assert client.delete(f"/api/certificates/{cert['id']}").status_code == 404


def test_stats(client):
    client.post("/api/courses", json={"courseName": "DCA", "fees": 6000})
    student = _register(client)
    client.post("/api/fees/collect", json={"studentId": student["id"], "amount": 1000})

    assert client.get("/api/stats").json() == {"totalStudents": 1, "totalCerts": 0, "totalFees": 5000.0}
