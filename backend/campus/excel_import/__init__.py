from .student_import import ImportResult, StudentReconciler, import_students

__all__ = ['ImportResult', 'StudentReconciler', 'import_students']
