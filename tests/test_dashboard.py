"""Dashboard snapshot."""

from sqlalchemy.exc import OperationalError

from student_records.models.student import StudentStatus
from student_records.schemas.dashboard import DashboardSnapshot
from student_records.services.dashboard import DashboardService, summarize_dashboard
from tests.conftest import make_mark, make_student


class UnavailableSession:
    def __init__(self):
        self.rolled_back = False

    def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    def rollback(self):
        self.rolled_back = True


def test_summarize_dashboard_passes_values_through():
    snapshot = summarize_dashboard(3, 7, [], [], [{"class_id": 5, "section": "A", "count": 3}])

    assert snapshot.total_students == 3
    assert snapshot.total_marks_entries == 7
    assert snapshot.students_by_class[0].count == 3


def test_dashboard_on_store_failure_is_empty(caplog):
    session = UnavailableSession()

    snapshot = DashboardService(session).get_dashboard()

    assert snapshot == DashboardSnapshot()
    assert snapshot.total_students == 0
    assert snapshot.total_marks_entries == 0
    assert snapshot.recent_students == []
    assert snapshot.recent_marks == []
    assert snapshot.students_by_class == []
    assert session.rolled_back
    assert "Error fetching dashboard stats" in caplog.text


def test_dashboard_counts(db, subjects):
    asha = make_student(db, "ADM001")
    make_student(db, "ADM002", first_name="Ravi", section="B")
    make_student(db, "ADM003", first_name="Old", status=StudentStatus.GRADUATED)
    make_mark(db, asha, subjects["math"], 85)
    make_mark(db, asha, subjects["science"], 30, 50)

    snapshot = DashboardService(db).get_dashboard()

    assert snapshot.total_students == 2
    assert snapshot.total_marks_entries == 2
    assert len(snapshot.recent_students) == 3
    assert {m.first_name for m in snapshot.recent_marks} == {"Asha"}
    assert [(c.class_id, c.section, c.count) for c in snapshot.students_by_class] == [
        (5, "A", 1),
        (5, "B", 1),
    ]
