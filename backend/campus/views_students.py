"""Views for Student Management and bulk spreadsheet import"""
import logging

from django.db.models import Q
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .excel_import.runner import run_student_import
from .excel_import.sheet_reader import UnsupportedSheetError, read_sheet
from .models import Student
from .serializers import StudentSerializer, FeeSerializer

logger = logging.getLogger(__name__)


class StudentViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Students

    Endpoints:
    - GET /api/students/ - List active students (filters: department, search)
    - POST /api/students/ - Add a student
    - GET/PUT/PATCH/DELETE /api/students/{id}/
    - GET /api/students/{id}/fees/ - Fee records of one student
    - POST /api/students/import-excel/ - Reconcile {"students": [row, ...]}
    - POST /api/students/import-file/ - Same, from an uploaded .xlsx/.csv
    """
    queryset = Student.objects.select_related("department", "speciality", "added_by").all()
    serializer_class = StudentSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != "list":
            return queryset

        params = self.request.query_params
        queryset = queryset.filter(is_active=True)

        department = params.get("department")
        if department and department.isdigit():
            queryset = queryset.filter(department_id=department)

        search = params.get("search", "").strip()
        if search:
            queryset = queryset.filter(
                Q(roll_number__icontains=search) | Q(name__icontains=search)
            )
        return queryset.order_by("-created_at", "-id")

    def list(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        serializer = self.get_serializer(queryset, many=True)
        return Response({
            "message": f"Found {len(serializer.data)} active students",
            "count": len(serializer.data),
            "data": serializer.data,
        })

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return Response(
            {
                "success": True,
                "message": f"Student '{serializer.data['name']}' added successfully",
                "data": serializer.data,
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return Response({
            "success": True,
            "message": f"Student '{serializer.data['name']}' updated successfully",
            "data": serializer.data,
        })

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        deleted = {"id": instance.pk, "name": instance.name, "roll_number": instance.roll_number}
        self.perform_destroy(instance)
        return Response({
            "success": True,
            "message": f"Student '{deleted['name']}' deleted successfully",
            "deleted_student": deleted,
        }, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"], url_path="fees")
    def fees(self, request, pk=None):
        student = self.get_object()
        fees = student.fees.select_related("added_by", "updated_by").order_by("-created_at", "-id")
        return Response({
            "message": f"Found {fees.count()} fee records for {student.name}",
            "student": {
                "id": student.pk,
                "name": student.name,
                "roll_number": student.roll_number,
                "section": student.section,
            },
            "fees": FeeSerializer(fees, many=True).data,
        })

    @action(detail=False, methods=["post"], url_path="import-excel")
    def import_excel(self, request):
        rows = request.data.get("students") if hasattr(request.data, "get") else None
        if not isinstance(rows, list) or not rows:
            return Response({"message": "No student data provided"}, status=status.HTTP_400_BAD_REQUEST)
        if not all(isinstance(row, dict) for row in rows):
            return Response(
                {"message": "Each student row must be an object of column -> value"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            return Response(run_student_import(rows, request.user))
        except Exception as e:
            logger.exception("Student import failed")
            return Response(
                {"message": "Import failed", "error": str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

    @action(detail=False, methods=["post"], url_path="import-file", parser_classes=[MultiPartParser, FormParser])
    def import_file(self, request):
        uploaded_file = request.FILES.get("file")
        if not uploaded_file:
            return Response({"error": "No file provided in request"}, status=status.HTTP_400_BAD_REQUEST)
        sheet_name = request.data.get("sheet_name") or 0
        try:
            rows = read_sheet(uploaded_file, filename=uploaded_file.name, sheet_name=sheet_name)
        except UnsupportedSheetError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.error(f"Error reading sheet {uploaded_file.name}: {str(e)}")
            return Response({"error": f"Could not read sheet: {e}"}, status=status.HTTP_400_BAD_REQUEST)
        if not rows:
            return Response({"message": "No student data provided"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            return Response(run_student_import(rows, request.user))
        except Exception as e:
            logger.exception("Student import failed for %s", uploaded_file.name)
            return Response(
                {"message": "Import failed", "error": str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
