# Entry point shared by the import API actions and the import_students command

from ..domain_core import Department, Speciality
from .store import OrmStudentStore
from .student_import import import_students


def run_student_import(rows, user=None):
    """Reconcile rows against the current departments/specialities and build the API payload."""
    result = import_students(
        rows,
        departments=Department.objects.order_by("name", "id"),
        specialities=Speciality.objects.order_by("name", "id"),
        store=OrmStudentStore(),
        added_by=user if user is not None and user.is_authenticated else None,
    )
    return {"success": True, "message": result.message, "results": result.as_dict()}
