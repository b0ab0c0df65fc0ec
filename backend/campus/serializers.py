"""Serializers for departments, specialities, students, fees and staff"""
from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from . import fee_utils
from .models import Department, Speciality, Student, Fee, FeeStatus, FEE_COMPONENT_FIELDS, Employee

# Fee dates arrive as DD-MM-YYYY from the front end; ISO is accepted too
FEE_DATE_FORMATS = ['%d-%m-%Y', 'iso-8601']


class DepartmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ['id', 'name', 'description', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {'name': {'validators': []}}

    def validate_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError("Department name is required.")
        queryset = Department.objects.filter(name__iexact=value)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("Department already exists")
        return value


class SpecialitySerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(source='department.name', read_only=True)

    class Meta:
        model = Speciality
        fields = ['id', 'name', 'department', 'department_name', 'total_seats', 'created_at', 'updated_at']
        read_only_fields = ['id', 'department_name', 'created_at', 'updated_at']
        validators = []

    def validate_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError("Speciality name is required.")
        return value

    def validate(self, attrs):
        name = attrs.get('name', getattr(self.instance, 'name', None))
        department = attrs.get('department', getattr(self.instance, 'department', None))
        queryset = Speciality.objects.filter(name__iexact=name, department=department)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("Speciality already exists in this department")
        return attrs


class SpecialitySeatsSerializer(serializers.ModelSerializer):
    class Meta:
        model = Speciality
        fields = ['total_seats']


class StudentSerializer(serializers.ModelSerializer):
    """
    Serializer for Student model
    - department / speciality are written as ids and echoed back with their names
    - added_by is taken from the request user on create
    """
    department_name = serializers.CharField(source='department.name', read_only=True)
    speciality_name = serializers.CharField(source='speciality.name', read_only=True, default=None)
    added_by_username = serializers.CharField(source='added_by.username', read_only=True, default=None)

    class Meta:
        model = Student
        fields = [
            'id', 'roll_number', 'name', 'section', 'phone', 'email', 'address',
            'parent_name', 'parent_phone', 'admission_date', 'date_of_birth',
            'department', 'department_name', 'speciality', 'speciality_name',
            'total_fee', 'fee_type', 'tuition_fee', 'hostel_fee', 'security_fee',
            'miscellaneous_fee', 'ac_charge', 'is_active',
            'added_by_username', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'department_name', 'speciality_name', 'added_by_username',
            'created_at', 'updated_at',
        ]
        extra_kwargs = {'roll_number': {'validators': []}}

    def validate_roll_number(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError("Roll number is required.")
        queryset = Student.objects.filter(roll_number=value)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError(f"Student with this roll number already exists: {value}")
        return value

    def validate(self, attrs):
        department = attrs.get('department', getattr(self.instance, 'department', None))
        speciality = attrs.get('speciality', getattr(self.instance, 'speciality', None))
        if speciality and department and speciality.department_id != department.pk:
            raise serializers.ValidationError(
                {'speciality': "Speciality does not belong to the selected department."}
            )
        negative = {
            name: "Amount cannot be negative."
            for name in ('total_fee',) + FEE_COMPONENT_FIELDS
            if attrs.get(name) is not None and attrs[name] < 0
        }
        if negative:
            raise serializers.ValidationError(negative)
        return attrs

    def create(self, validated_data):
        request = self.context.get('request')
        if request and getattr(request, 'user', None) and request.user.is_authenticated:
            validated_data['added_by'] = request.user
        return super().create(validated_data)


class FeeSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.name', read_only=True)
    roll_number = serializers.CharField(source='student.roll_number', read_only=True)
    added_by_username = serializers.CharField(source='added_by.username', read_only=True, default=None)
    updated_by_username = serializers.CharField(source='updated_by.username', read_only=True, default=None)
    remaining_amount = serializers.SerializerMethodField()
    due_date = serializers.DateField(input_formats=FEE_DATE_FORMATS)
    paid_date = serializers.DateField(input_formats=FEE_DATE_FORMATS, required=False, allow_null=True)

    class Meta:
        model = Fee
        fields = [
            'id', 'student', 'student_name', 'roll_number', 'fee_type', 'amount',
            'due_date', 'paid_date', 'paid_amount', 'remaining_amount', 'status', 'description',
            'payment_method', 'transaction_id', 'added_by_username',
            'updated_by_username', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'student_name', 'roll_number', 'status', 'added_by_username',
            'updated_by_username', 'created_at', 'updated_at',
        ]

    def get_remaining_amount(self, obj):
        return f"{fee_utils.get_remaining_amount(obj):.2f}"

    def validate_amount(self, value):
        if value is None or value <= 0:
            raise serializers.ValidationError("Amount must be greater than zero.")
        return value

    def validate_paid_amount(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Paid amount cannot be negative.")
        return value

    def create(self, validated_data):
        """
        Create fee record
        - any paid amount marks the fee paid (paid date defaults to today)
        - otherwise the fee starts pending with nothing paid
        """
        paid_amount = validated_data.get('paid_amount')
        if paid_amount and paid_amount > 0:
            validated_data['status'] = FeeStatus.PAID
            validated_data['paid_date'] = validated_data.get('paid_date') or timezone.localdate()
        else:
            validated_data['status'] = FeeStatus.PENDING
            validated_data['paid_amount'] = 0

        request = self.context.get('request')
        if request and getattr(request, 'user', None) and request.user.is_authenticated:
            validated_data['added_by'] = request.user
        return super().create(validated_data)

    def update(self, instance, validated_data):
        """
        Update fee record
        - status follows the new amounts and due date (paid, overdue or pending)
        - a fee that becomes fully paid gets today as paid date unless one is given
        """
        request = self.context.get('request')
        if request and getattr(request, 'user', None) and request.user.is_authenticated:
            validated_data['updated_by'] = request.user
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.status = fee_utils.get_fee_status(instance)
        if fee_utils.is_fee_fully_paid(instance) and not instance.paid_date:
            instance.paid_date = timezone.localdate()
        instance.save()
        return instance


class DashboardSerializer(serializers.Serializer):
    total_students = serializers.IntegerField()
    total_fees = serializers.IntegerField()
    pending_fees = serializers.IntegerField()
    overdue_fees = serializers.IntegerField()
    paid_fees = serializers.IntegerField()
    full_fees_paid_students = serializers.IntegerField()
    pending_students = serializers.IntegerField()
    total_amount_collected = serializers.DecimalField(max_digits=14, decimal_places=2)
    pending_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class EmployeeSerializer(serializers.ModelSerializer):
    """Staff account serializer.

    - ``password`` is write-only; required on create, optional on update.
    - ``access_permissions`` (``["students", "fees"]``) is a write-only shortcut
      for the two permission flags.
    - The backing auth user keeps username = email in sync.
    """
    password = serializers.CharField(write_only=True, required=False, min_length=8)
    access_permissions = serializers.ListField(
        child=serializers.ChoiceField(choices=['students', 'fees']),
        write_only=True,
        required=False,
    )
    department_names = serializers.SerializerMethodField()
    display_permissions = serializers.CharField(read_only=True)
    added_by_username = serializers.CharField(source='added_by.username', read_only=True, default=None)

    class Meta:
        model = Employee
        fields = [
            'id', 'name', 'email', 'password', 'departments', 'department_names',
            'student_management', 'fee_management', 'access_permissions',
            'display_permissions', 'is_active', 'added_by_username',
            'date_of_adding', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'department_names', 'display_permissions', 'is_active',
            'added_by_username', 'date_of_adding', 'created_at', 'updated_at',
        ]
        extra_kwargs = {'email': {'validators': []}, 'departments': {'required': False}}

    def get_department_names(self, obj):
        return [department.name for department in obj.departments.all()]

    def validate_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError("Employee name is required.")
        return value

    def validate_email(self, value):
        value = (value or '').strip().lower()
        queryset = Employee.objects.filter(email__iexact=value)
        users = User.objects.filter(username__iexact=value)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
            users = users.exclude(pk=self.instance.user_id)
        if queryset.exists():
            raise serializers.ValidationError("Employee with this email already exists")
        if users.exists():
            raise serializers.ValidationError("A user account with this email already exists")
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': "Password is required."})
        permissions = attrs.pop('access_permissions', None)
        if permissions is not None:
            attrs['student_management'] = 'students' in permissions
            attrs['fee_management'] = 'fees' in permissions
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        departments = validated_data.pop('departments', [])
        request = self.context.get('request')
        if request and getattr(request, 'user', None) and request.user.is_authenticated:
            validated_data['added_by'] = request.user
        with transaction.atomic():
            user = User.objects.create_user(
                username=validated_data['email'],
                email=validated_data['email'],
                password=password,
            )
            employee = Employee.objects.create(user=user, **validated_data)
            employee.departments.set(departments)
        return employee

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        departments = validated_data.pop('departments', None)
        with transaction.atomic():
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            instance.save()
            if departments is not None:
                instance.departments.set(departments)

            user = instance.user
            user.username = instance.email
            user.email = instance.email
            if password:
                user.set_password(password)
            user.save()
        return instance
