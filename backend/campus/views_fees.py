"""Views for fee records and the fee dashboard"""
from datetime import timedelta
from decimal import Decimal

from django.db.models import Case, Count, DecimalField, F, Q, Sum, Value, When
from django.db.models.functions import Coalesce
from django.utils import timezone
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Fee, FeeStatus, Student
from .serializers import FeeSerializer, DashboardSerializer

UPCOMING_WINDOW_DAYS = 7


class FeeViewSet(viewsets.ModelViewSet):
    """
    ViewSet for fee records

    Endpoints:
    - GET /api/fees/ - List fees (filters: student, status)
    - POST /api/fees/ - Add a fee (dates as DD-MM-YYYY or ISO)
    - PUT/PATCH /api/fees/{id}/ - Update a fee
    - PUT /api/fees/{id}/pay/ - Mark a fee fully paid today
    - DELETE /api/fees/{id}/
    - GET /api/fees/due/ - Every fee not yet paid
    - GET /api/fees/upcoming/ - Pending fees due within the next week
    """
    queryset = Fee.objects.select_related("student", "student__department", "added_by", "updated_by").all()
    serializer_class = FeeSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        student = params.get("student")
        if student and student.isdigit():
            queryset = queryset.filter(student_id=student)

        fee_status = params.get("status")
        if fee_status in FeeStatus.values:
            queryset = queryset.filter(status=fee_status)

        return queryset.order_by("-created_at", "-id")

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({
            "success": True,
            "message": f"Found {len(serializer.data)} fee records",
            "count": len(serializer.data),
            "data": serializer.data,
        })

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        fee = serializer.instance
        return Response(
            {
                "success": True,
                "message": f"Fee '{fee.fee_type}' added successfully for {fee.student.name}",
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
        return Response({"success": True, "message": "Fee updated successfully", "data": serializer.data})

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        student_name = instance.student.name
        self.perform_destroy(instance)
        return Response(
            {"success": True, "message": f"Fee record deleted for {student_name}"},
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["put", "post"], url_path="pay")
    def pay(self, request, pk=None):
        fee = self.get_object()
        fee.status = FeeStatus.PAID
        fee.paid_amount = fee.amount
        fee.paid_date = timezone.localdate()
        fee.updated_by = request.user if request.user.is_authenticated else None
        fee.save()
        return Response({
            "success": True,
            "message": f"Payment received for {fee.student.name}",
            "data": self.get_serializer(fee).data,
        })

    @action(detail=False, methods=["get"], url_path="due")
    def due(self, request):
        fees = self.get_queryset().exclude(status=FeeStatus.PAID)
        return Response({"success": True, "data": self.get_serializer(fees, many=True).data})

    @action(detail=False, methods=["get"], url_path="upcoming")
    def upcoming(self, request):
        today = timezone.localdate()
        fees = self.get_queryset().filter(
            status=FeeStatus.PENDING,
            due_date__gte=today,
            due_date__lte=today + timedelta(days=UPCOMING_WINDOW_DAYS),
        )
        return Response({"success": True, "data": self.get_serializer(fees, many=True).data})


class DashboardView(APIView):
    """Headline fee numbers: counts per status, students fully paid vs pending, amounts."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        zero = Value(Decimal("0"), output_field=DecimalField(max_digits=14, decimal_places=2))
        # a paid fee with no recorded paid amount counts at its full amount
        collected = Case(
            When(paid_amount__gt=0, then=F("paid_amount")),
            default=F("amount"),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
        fee_collected = Case(
            When(fees__paid_amount__gt=0, then=F("fees__paid_amount")),
            default=F("fees__amount"),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
        fee_counts = Fee.objects.aggregate(
            total_fees=Count("id"),
            pending_fees=Count("id", filter=~Q(status=FeeStatus.PAID)),
            overdue_fees=Count("id", filter=Q(status=FeeStatus.OVERDUE)),
            paid_fees=Count("id", filter=Q(status=FeeStatus.PAID)),
            total_amount_collected=Coalesce(Sum(collected, filter=Q(status=FeeStatus.PAID)), zero),
            pending_amount=Coalesce(Sum("amount", filter=~Q(status=FeeStatus.PAID)), zero),
        )

        students = Student.objects.annotate(
            paid_total=Coalesce(Sum(fee_collected, filter=Q(fees__status=FeeStatus.PAID)), zero),
        )
        full_paid = 0
        pending = 0
        for student in students.only("id", "total_fee"):
            if student.total_fee and student.total_fee > 0:
                if student.paid_total >= student.total_fee:
                    full_paid += 1
                else:
                    pending += 1

        data = {
            "total_students": Student.objects.count(),
            "full_fees_paid_students": full_paid,
            "pending_students": pending,
            **fee_counts,
        }
        return Response({"success": True, **DashboardSerializer(data).data})
