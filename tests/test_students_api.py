"""Student roster endpoints."""

from sqlalchemy import select

from student_records.core.config import settings
from student_records.models.mark import Mark
from student_records.models.student import StudentStatus
from tests.conftest import make_mark, make_student

API = settings.API_V1_PREFIX

NEW_STUDENT = {
    "admission_number": "ADM100",
    "first_name": "Meera",
    "last_name": "Nair",
    "roll_number": "R-100",
    "gender": "female",
    "date_of_birth": "2012-06-14",
    "email": "meera@example.com",
    "class_id": 6,
    "section": "B",
    "academic_year": "2024-2025",
}


def test_create_student(logged_in_client):
    response = logged_in_client.post(f"{API}/students", json=NEW_STUDENT)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] > 0
    assert body["status"] == "active"
    assert body["date_of_birth"] == "2012-06-14"


def test_duplicate_admission_number_conflicts(logged_in_client):
    logged_in_client.post(f"{API}/students", json=NEW_STUDENT)
    duplicate = {**NEW_STUDENT, "roll_number": "R-101"}

    response = logged_in_client.post(f"{API}/students", json=duplicate)

    assert response.status_code == 409
    assert response.json()["error"]["message"] == "Admission number or roll number already exists"


def test_duplicate_roll_number_conflicts(logged_in_client):
    logged_in_client.post(f"{API}/students", json=NEW_STUDENT)
    duplicate = {**NEW_STUDENT, "admission_number": "ADM101"}

    assert logged_in_client.post(f"{API}/students", json=duplicate).status_code == 409


def test_create_student_validation(logged_in_client):
    response = logged_in_client.post(f"{API}/students", json={"first_name": "Meera"})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_list_students_search_and_filters(logged_in_client, db):
    make_student(db, "ADM001", first_name="Asha", last_name="Verma", class_id=5)
    make_student(db, "ADM002", first_name="Ravi", last_name="Kumar", roll_number="R-7", class_id=6)
    make_student(db, "ADM003", first_name="Zoya", last_name="Khan", class_id=5, status=StudentStatus.INACTIVE)

    by_name = logged_in_client.get(f"{API}/students", params={"search": "ravi"}).json()
    by_roll = logged_in_client.get(f"{API}/students", params={"search": "R-7"}).json()
    by_class = logged_in_client.get(f"{API}/students", params={"class_id": 5}).json()
    inactive = logged_in_client.get(f"{API}/students", params={"status": "inactive"}).json()
    everyone = logged_in_client.get(f"{API}/students").json()

    assert [s["admission_number"] for s in by_name["items"]] == ["ADM002"]
    assert [s["admission_number"] for s in by_roll["items"]] == ["ADM002"]
    assert by_class["total"] == 2
    assert [s["first_name"] for s in inactive["items"]] == ["Zoya"]
    assert everyone["total"] == 3
    assert [s["admission_number"] for s in everyone["items"]] == ["ADM003", "ADM002", "ADM001"]


def test_list_students_pagination(logged_in_client, db):
    for n in range(5):
        make_student(db, f"ADM00{n}")

    page = logged_in_client.get(f"{API}/students", params={"page": 2, "page_size": 2}).json()

    assert page["total"] == 5
    assert page["total_pages"] == 3
    assert len(page["items"]) == 2


def test_get_missing_student(logged_in_client):
    response = logged_in_client.get(f"{API}/students/999")

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Student not found"


def test_update_student_replaces_fields(logged_in_client, student):
    payload = {**NEW_STUDENT, "admission_number": student.admission_number, "status": "graduated"}

    response = logged_in_client.put(f"{API}/students/{student.id}", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["first_name"] == "Meera"
    assert body["status"] == "graduated"


def test_student_details_lists_marks(logged_in_client, db, student, subjects):
    make_mark(db, student, subjects["math"], 70, exam_type="Midterm", exam_date=None)
    make_mark(db, student, subjects["science"], 40, 50)

    body = logged_in_client.get(f"{API}/students/{student.id}/details").json()

    assert body["student"]["admission_number"] == student.admission_number
    assert len(body["marks"]) == 2
    assert {m["subject_name"] for m in body["marks"]} == {"Mathematics", "Science"}


def test_delete_student_removes_marks(logged_in_client, db, student, subjects):
    make_mark(db, student, subjects["math"], 70)

    response = logged_in_client.delete(f"{API}/students/{student.id}")

    assert response.status_code == 200
    assert response.json()["message"] == "Student deleted successfully!"
    assert logged_in_client.get(f"{API}/students/{student.id}").status_code == 404
    assert db.execute(select(Mark)).scalars().all() == []


def test_list_active_subjects(logged_in_client, subjects):
    body = logged_in_client.get(f"{API}/subjects").json()

    assert [s["subject_code"] for s in body] == ["MATH", "SCI"]
