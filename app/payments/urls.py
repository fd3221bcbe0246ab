"""
URL configuration for the payments app.

Routes:
    - GET/POST / - List or record payments
    - GET/DELETE /{payment_id}/ - Get or delete a payment
    - GET /patients/{patient_id}/ - Patient payment history
    - GET /patients/{patient_id}/summary/ - Patient balance summary
    - GET /outstanding/ - Outstanding balances
    - GET /reports/revenue/ - Revenue for a date range
    - GET /reports/revenue/monthly/ - Revenue per month
    - GET /reports/financial/ - Financial report
    - POST /admin/recalculate/ - Recalculate all patients
    - POST /admin/recalculate/{patient_id}/ - Recalculate one patient

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.
"""

from django.urls import path

from payments import views

app_name = "payments"

urlpatterns = [
    path("", views.PaymentListView.as_view(), name="payment-list"),
    path("outstanding/", views.OutstandingBalanceView.as_view(), name="outstanding"),
    path(
        "patients/<uuid:patient_id>/",
        views.PatientPaymentsView.as_view(),
        name="patient-payments",
    ),
    path(
        "patients/<uuid:patient_id>/summary/",
        views.PatientPaymentSummaryView.as_view(),
        name="patient-summary",
    ),
    # Reports
    path("reports/revenue/", views.RevenueView.as_view(), name="revenue"),
    path(
        "reports/revenue/monthly/",
        views.MonthlyRevenueView.as_view(),
        name="revenue-monthly",
    ),
    path(
        "reports/financial/",
        views.FinancialReportView.as_view(),
        name="financial-report",
    ),
    # Maintenance
    path(
        "admin/recalculate/",
        views.RecalculateAllView.as_view(),
        name="recalculate-all",
    ),
    path(
        "admin/recalculate/<uuid:patient_id>/",
        views.RecalculatePatientView.as_view(),
        name="recalculate-patient",
    ),
    path(
        "<uuid:payment_id>/",
        views.PaymentDetailView.as_view(),
        name="payment-detail",
    ),
]
