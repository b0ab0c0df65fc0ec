from django.contrib import admin

from .models import Department, Speciality, Student, Fee, Employee, UserActivityLog, ErrorLog


class SpecialityInline(admin.TabularInline):
    model = Speciality
    extra = 0
    fields = ('name', 'total_seats')


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'description', 'created_at')
    search_fields = ('name',)
    inlines = [SpecialityInline]


@admin.register(Speciality)
class SpecialityAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'department', 'total_seats')
    list_filter = ('department',)
    search_fields = ('name', 'department__name')


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('roll_number', 'name', 'department', 'speciality', 'total_fee', 'fee_type', 'is_active')
    list_filter = ('department', 'is_active', 'fee_type')
    search_fields = ('roll_number', 'name', 'phone', 'parent_name')
    autocomplete_fields = ('department', 'speciality')
    readonly_fields = ('added_by', 'created_at', 'updated_at')


@admin.register(Fee)
class FeeAdmin(admin.ModelAdmin):
    list_display = ('id', 'student', 'fee_type', 'amount', 'paid_amount', 'due_date', 'status')
    list_filter = ('status', 'fee_type')
    search_fields = ('student__roll_number', 'student__name', 'transaction_id')
    date_hierarchy = 'due_date'
    readonly_fields = ('added_by', 'updated_by', 'created_at', 'updated_at')


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'student_management', 'fee_management', 'is_active', 'date_of_adding')
    list_filter = ('is_active', 'student_management', 'fee_management')
    search_fields = ('name', 'email')
    filter_horizontal = ('departments',)
    readonly_fields = ('user', 'added_by', 'date_of_adding', 'created_at', 'updated_at')

@admin.register(UserActivityLog)
class UserActivityLogAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'user', 'action', 'method', 'path', 'status_code', 'remote_addr')
    list_filter = ('action', 'method')
    search_fields = ('path', 'user__username')


@admin.register(ErrorLog)
class ErrorLogAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'user', 'exception_type', 'method', 'path')
    search_fields = ('path', 'message', 'exception_type')
    readonly_fields = ('stack',)
