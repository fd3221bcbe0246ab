"""
URL configuration for clinic API.

Routes:
    /patients/                          - Patient CRUD
    /appointments/                      - Appointment CRUD
    /price-list/                        - Price list CRUD
    /treatment-plans/                   - Treatment plan CRUD
    /treatment-plans/{id}/items/        - Add item (POST)
    /treatment-plans/{id}/apply-discount/ - Discount all items (POST)
"""

from rest_framework.routers import DefaultRouter

from clinic.views import (
    AppointmentViewSet,
    PatientViewSet,
    PriceListItemViewSet,
    TreatmentPlanViewSet,
)

router = DefaultRouter()
router.register(r"patients", PatientViewSet, basename="patient")
router.register(r"appointments", AppointmentViewSet, basename="appointment")
router.register(r"price-list", PriceListItemViewSet, basename="price-list-item")
router.register(r"treatment-plans", TreatmentPlanViewSet, basename="treatment-plan")

app_name = "clinic"
urlpatterns = router.urls
