"""Department and speciality viewsets.

Includes:
  - DepartmentViewSet
  - SpecialityViewSet (plus by-department listing and seat updates)
"""

from __future__ import annotations

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Department, Speciality
from .serializers import DepartmentSerializer, SpecialitySerializer, SpecialitySeatsSerializer


class DepartmentViewSet(viewsets.ModelViewSet):
    queryset = Department.objects.all().order_by("name")
    serializer_class = DepartmentSerializer
    permission_classes = [IsAuthenticated]

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({"data": serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return Response(
            {"message": "Department added successfully", "data": serializer.data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return Response({"message": "Department updated successfully", "data": serializer.data})

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        if instance.students.exists():
            return Response(
                {"message": "Department has students and cannot be deleted"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        self.perform_destroy(instance)
        return Response({"message": "Department deleted successfully"}, status=status.HTTP_200_OK)


class SpecialityViewSet(viewsets.ModelViewSet):
    queryset = Speciality.objects.all().select_related("department").order_by("name")
    serializer_class = SpecialitySerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = super().get_queryset()
        department = self.request.query_params.get("department")
        if department and department.isdigit():
            return qs.filter(department_id=department)
        return qs

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({"data": serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return Response(
            {"message": "Speciality added successfully", "data": serializer.data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return Response({"message": "Speciality updated successfully", "data": serializer.data})

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.perform_destroy(instance)
        return Response({"message": "Speciality deleted successfully"}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path=r"by-department/(?P<department_id>\d+)")
    def by_department(self, request, department_id=None):
        specialities = Speciality.objects.filter(department_id=department_id).order_by("name")
        serializer = self.get_serializer(specialities, many=True)
        return Response({"data": serializer.data})

    @action(detail=True, methods=["put", "patch"], url_path="seats")
    def seats(self, request, pk=None):
        instance = self.get_object()
        serializer = SpecialitySeatsSerializer(instance, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({
            "message": "Speciality seats updated successfully",
            "data": self.get_serializer(instance).data,
        })


__all__ = ["DepartmentViewSet", "SpecialityViewSet"]
