"""
Views for the clinic API.

ViewSets:
    PatientViewSet: Patient CRUD
    AppointmentViewSet: Appointment CRUD, filterable by patient
    PriceListItemViewSet: Price list CRUD
    TreatmentPlanViewSet: Plan CRUD with add-item and apply-discount actions

Endpoints:
    /api/v1/clinic/patients/
    /api/v1/clinic/appointments/?patient=<id>
    /api/v1/clinic/price-list/
    /api/v1/clinic/treatment-plans/?patient=<id>
    POST /api/v1/clinic/treatment-plans/{id}/items/
    POST /api/v1/clinic/treatment-plans/{id}/apply-discount/

Permissions:
    All endpoints require an authenticated clinic user.
"""

from __future__ import annotations

from django.db.models import ProtectedError
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from authentication.permissions import IsClinicStaff
from clinic.discounts import build_discount
from clinic.models import Appointment, Patient, PriceListItem, TreatmentPlan
from clinic.serializers import (
    AddTreatmentItemSerializer,
    AppointmentSerializer,
    ApplyDiscountSerializer,
    PatientSerializer,
    PriceListItemSerializer,
    TreatmentItemSerializer,
    TreatmentPlanSerializer,
)
from clinic.services import TreatmentPlanService
from core.exceptions import ConflictError

PATIENT_FILTER = OpenApiParameter(
    name="patient",
    type=str,
    location=OpenApiParameter.QUERY,
    description="Only return rows for this patient id",
    required=False,
)


class ProtectedDeleteMixin:
    """Turn ProtectedError into a 409 for rows still referenced by payments."""

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError as e:
            raise ConflictError(
                f"{instance._meta.verbose_name.capitalize()} has recorded payments "
                "and cannot be deleted.",
                error_code="HAS_PAYMENTS",
                details={"id": str(instance.pk)},
            ) from e


@extend_schema_view(
    list=extend_schema(summary="List patients", tags=["Clinic - Patients"]),
    retrieve=extend_schema(summary="Get patient", tags=["Clinic - Patients"]),
    create=extend_schema(summary="Create patient", tags=["Clinic - Patients"]),
    update=extend_schema(summary="Update patient", tags=["Clinic - Patients"]),
    partial_update=extend_schema(summary="Update patient", tags=["Clinic - Patients"]),
    destroy=extend_schema(summary="Delete patient", tags=["Clinic - Patients"]),
)
class PatientViewSet(ProtectedDeleteMixin, viewsets.ModelViewSet):
    permission_classes = [IsClinicStaff]
    serializer_class = PatientSerializer
    queryset = Patient.objects.all()


@extend_schema_view(
    list=extend_schema(
        summary="List appointments",
        parameters=[PATIENT_FILTER],
        tags=["Clinic - Appointments"],
    ),
)
class AppointmentViewSet(ProtectedDeleteMixin, viewsets.ModelViewSet):
    permission_classes = [IsClinicStaff]
    serializer_class = AppointmentSerializer

    def get_queryset(self):
        queryset = Appointment.objects.select_related("patient")
        patient_id = self.request.query_params.get("patient")
        if patient_id:
            queryset = queryset.filter(patient_id=patient_id)
        return queryset


class PriceListItemViewSet(viewsets.ModelViewSet):
    permission_classes = [IsClinicStaff]
    serializer_class = PriceListItemSerializer
    queryset = PriceListItem.objects.all()


@extend_schema_view(
    list=extend_schema(
        summary="List treatment plans",
        parameters=[PATIENT_FILTER],
        tags=["Clinic - Treatment plans"],
    ),
)
class TreatmentPlanViewSet(viewsets.ModelViewSet):
    """
    Treatment plans and their items.

    Items are added through the items action so that name and price are
    snapshotted from the price list; they are not writable directly.
    """

    permission_classes = [IsClinicStaff]
    serializer_class = TreatmentPlanSerializer

    def get_queryset(self):
        queryset = TreatmentPlan.objects.select_related("patient").prefetch_related(
            "items"
        )
        patient_id = self.request.query_params.get("patient")
        if patient_id:
            queryset = queryset.filter(patient_id=patient_id)
        return queryset

    @extend_schema(
        summary="Add a price list entry to a plan",
        request=AddTreatmentItemSerializer,
        responses={
            201: TreatmentItemSerializer,
            400: OpenApiResponse(description="Invalid quantity or retired entry"),
        },
        tags=["Clinic - Treatment plans"],
    )
    @action(detail=True, methods=["post"])
    def items(self, request, pk=None):
        plan = self.get_object()
        serializer = AddTreatmentItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = TreatmentPlanService.add_item(
            plan,
            serializer.validated_data["price_list_item"],
            serializer.validated_data["quantity"],
        )
        if not result.success:
            return Response(result.to_response(), status=status.HTTP_400_BAD_REQUEST)

        return Response(
            TreatmentItemSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        summary="Apply a discount to every item of a plan",
        request=ApplyDiscountSerializer,
        responses={
            200: TreatmentPlanSerializer,
            400: OpenApiResponse(description="Invalid discount or empty plan"),
        },
        tags=["Clinic - Treatment plans"],
    )
    @action(detail=True, methods=["post"], url_path="apply-discount")
    def apply_discount(self, request, pk=None):
        plan = self.get_object()
        serializer = ApplyDiscountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        discount = build_discount(
            serializer.validated_data["kind"],
            serializer.validated_data["value"],
        )
        result = TreatmentPlanService.apply_discount(plan.id, discount)
        if not result.success:
            return Response(result.to_response(), status=status.HTTP_400_BAD_REQUEST)

        plan = self.get_queryset().get(pk=plan.pk)
        return Response(TreatmentPlanSerializer(plan).data)
