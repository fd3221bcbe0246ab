"""
DRF views for the payments app.

This module provides API views for:
- Recording, listing and deleting payments
- Patient payment history and balance summaries
- Outstanding balances
- Revenue reports
- Manual recalculation of appointment paid amounts

Related files:
    - services.py: PaymentService
    - reconciler.py: PaymentReconciler
    - serializers.py: Request/response serializers
    - urls.py: URL routing

Endpoints:
    GET /api/v1/payments/ - List payments (start_date, end_date)
    POST /api/v1/payments/ - Record a payment
    GET /api/v1/payments/{id}/ - Get a payment
    DELETE /api/v1/payments/{id}/ - Delete a payment
    GET /api/v1/payments/patients/{patient_id}/ - Patient payment history
    GET /api/v1/payments/patients/{patient_id}/summary/ - Patient balance
    GET /api/v1/payments/outstanding/ - Patients who owe money
    GET /api/v1/payments/reports/revenue/ - Revenue for a date range
    GET /api/v1/payments/reports/revenue/monthly/ - Revenue per month
    GET /api/v1/payments/reports/financial/ - Financial report
    POST /api/v1/payments/admin/recalculate/ - Recalculate all patients
    POST /api/v1/payments/admin/recalculate/{patient_id}/ - Recalculate one

Security:
    - All endpoints require an authenticated clinic user
    - Reports require a doctor or system admin
    - Deleting payments and recalculation require a system admin

Errors from the service layer propagate to the exception handler.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsClinicStaff, IsDoctorOrAdmin, IsSystemAdmin
from payments.exceptions import PaymentNotFound
from payments.reconciler import PaymentReconciler
from payments.serializers import (
    AddPaymentSerializer,
    DateRangeSerializer,
    FinancialReportSerializer,
    MonthlyRevenueSerializer,
    OutstandingBalanceSerializer,
    PatientPaymentSummarySerializer,
    PaymentRecordSerializer,
    ReconciliationResultSerializer,
    RevenueSerializer,
    YearSerializer,
)
from payments.services import PaymentService

PAYMENTS_TAG = ["Payments"]
REPORTS_TAG = ["Payments - Reports"]


class PaymentListView(APIView):
    """
    List or record payments.

    GET /api/v1/payments/?start_date=2024-01-01&end_date=2024-01-31
    POST /api/v1/payments/
    """

    permission_classes = [IsClinicStaff]

    @extend_schema(
        summary="List payments",
        parameters=[DateRangeSerializer],
        responses={200: PaymentRecordSerializer(many=True)},
        tags=PAYMENTS_TAG,
    )
    def get(self, request):
        query = DateRangeSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        payments = PaymentService.get_all_payments(
            start_date=query.validated_data.get("start_date"),
            end_date=query.validated_data.get("end_date"),
        )
        return Response(PaymentRecordSerializer(payments, many=True).data)

    @extend_schema(
        summary="Record a payment",
        request=AddPaymentSerializer,
        responses={
            201: PaymentRecordSerializer,
            400: OpenApiResponse(description="Invalid payment"),
            404: OpenApiResponse(description="Patient or appointment not found"),
            503: OpenApiResponse(description="Payment could not be saved"),
        },
        tags=PAYMENTS_TAG,
    )
    def post(self, request):
        serializer = AddPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = PaymentService.add_payment(
            serializer.to_params(),
            actor_id=request.user.id,
        )
        return Response(
            PaymentRecordSerializer(record).data,
            status=status.HTTP_201_CREATED,
        )


class PaymentDetailView(APIView):
    """
    Get or delete a single payment.

    GET /api/v1/payments/{id}/
    DELETE /api/v1/payments/{id}/ (system admin only)
    """

    def get_permissions(self):
        if self.request.method == "DELETE":
            return [IsSystemAdmin()]
        return [IsClinicStaff()]

    @extend_schema(
        summary="Get payment",
        responses={200: PaymentRecordSerializer, 404: OpenApiResponse()},
        tags=PAYMENTS_TAG,
    )
    def get(self, request, payment_id):
        record = PaymentService.get_payment_by_id(payment_id)
        if record is None:
            raise PaymentNotFound(
                "Payment not found.",
                details={"payment_id": str(payment_id)},
            )
        return Response(PaymentRecordSerializer(record).data)

    @extend_schema(
        summary="Delete payment",
        responses={204: None, 404: OpenApiResponse()},
        tags=PAYMENTS_TAG,
    )
    def delete(self, request, payment_id):
        PaymentService.delete_payment(payment_id, actor_id=request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PatientPaymentsView(APIView):
    """
    Payment history for a patient, newest first.

    GET /api/v1/payments/patients/{patient_id}/
    """

    permission_classes = [IsClinicStaff]

    @extend_schema(
        summary="Patient payment history",
        responses={200: PaymentRecordSerializer(many=True)},
        tags=PAYMENTS_TAG,
    )
    def get(self, request, patient_id):
        payments = PaymentService.get_patient_payments(patient_id)
        return Response(PaymentRecordSerializer(payments, many=True).data)


class PatientPaymentSummaryView(APIView):
    """
    Cost, paid and remaining balance for a patient.

    GET /api/v1/payments/patients/{patient_id}/summary/
    """

    permission_classes = [IsClinicStaff]

    @extend_schema(
        summary="Patient payment summary",
        responses={200: PatientPaymentSummarySerializer, 404: OpenApiResponse()},
        tags=PAYMENTS_TAG,
    )
    def get(self, request, patient_id):
        summary = PaymentService.get_patient_payment_summary(patient_id)
        return Response(PatientPaymentSummarySerializer(summary).data)


class OutstandingBalanceView(APIView):
    """
    Active patients with a positive remaining balance, largest first.

    GET /api/v1/payments/outstanding/
    """

    permission_classes = [IsClinicStaff]

    @extend_schema(
        summary="Outstanding balances",
        responses={200: OutstandingBalanceSerializer(many=True)},
        tags=PAYMENTS_TAG,
    )
    def get(self, request):
        summaries = PaymentService.get_patients_with_outstanding_balance()
        return Response(OutstandingBalanceSerializer(summaries, many=True).data)


class RevenueView(APIView):
    """GET /api/v1/payments/reports/revenue/?start_date=&end_date="""

    permission_classes = [IsDoctorOrAdmin]

    @extend_schema(
        summary="Revenue for a date range",
        parameters=[DateRangeSerializer],
        responses={200: RevenueSerializer},
        tags=REPORTS_TAG,
    )
    def get(self, request):
        query = DateRangeSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        start_date = query.validated_data.get("start_date")
        end_date = query.validated_data.get("end_date")

        total = PaymentService.get_total_revenue(start_date, end_date)
        return Response(
            RevenueSerializer(
                {"start_date": start_date, "end_date": end_date, "total_revenue": total}
            ).data
        )


class MonthlyRevenueView(APIView):
    """GET /api/v1/payments/reports/revenue/monthly/?year="""

    permission_classes = [IsDoctorOrAdmin]

    @extend_schema(
        summary="Revenue per month",
        parameters=[YearSerializer],
        responses={200: MonthlyRevenueSerializer},
        tags=REPORTS_TAG,
    )
    def get(self, request):
        query = YearSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        year = query.validated_data["year"]

        months = PaymentService.get_revenue_by_month(year)
        return Response(MonthlyRevenueSerializer({"year": year, "months": months}).data)


class FinancialReportView(APIView):
    """GET /api/v1/payments/reports/financial/?year="""

    permission_classes = [IsDoctorOrAdmin]

    @extend_schema(
        summary="Financial report",
        parameters=[YearSerializer],
        responses={200: FinancialReportSerializer},
        tags=REPORTS_TAG,
    )
    def get(self, request):
        query = YearSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        report = PaymentService.get_financial_report(query.validated_data["year"])
        return Response(FinancialReportSerializer(report).data)


class RecalculateAllView(APIView):
    """
    Recalculate paid amounts for every patient.

    POST /api/v1/payments/admin/recalculate/

    Returns:
        {"processed": <number of patients>}
    """

    permission_classes = [IsSystemAdmin]

    @extend_schema(
        summary="Recalculate all payment totals",
        request=None,
        responses={200: OpenApiResponse(description="Number of patients processed")},
        tags=PAYMENTS_TAG,
    )
    def post(self, request):
        processed = PaymentReconciler.recalculate_all()
        return Response({"processed": processed})


class RecalculatePatientView(APIView):
    """POST /api/v1/payments/admin/recalculate/{patient_id}/"""

    permission_classes = [IsSystemAdmin]

    @extend_schema(
        summary="Recalculate payment totals for a patient",
        request=None,
        responses={200: ReconciliationResultSerializer, 404: OpenApiResponse()},
        tags=PAYMENTS_TAG,
    )
    def post(self, request, patient_id):
        result = PaymentReconciler.recalculate_payment_totals(patient_id)
        return Response(ReconciliationResultSerializer(result).data)
