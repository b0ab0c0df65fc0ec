# ORM-backed persistence collaborator for the student reconciler

from django.db import transaction

from ..domain_students import Student


class OrmStudentStore:
    """Find / insert / update students through the Django ORM.

    Each row is wrapped in ``atomic()`` (a savepoint inside the request
    transaction) so a failing row rolls back only its own writes.
    """

    model = Student

    def atomic(self):
        return transaction.atomic()

    def find_by_roll_number(self, roll_number):
        return self.model.objects.filter(roll_number=roll_number).first()

    def create(self, **values):
        student = self.model(**values)
        student.full_clean()
        student.save()
        return student

    def update(self, student, changes):
        for name, value in changes.items():
            setattr(student, name, value)
        student.full_clean()
        student.save()
        return student
