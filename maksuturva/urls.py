from django.urls import path
from . import views
app_name = "maksuturva"
urlpatterns = [
    path("status/<int:order_id>", views.payment_status_view, name="payment_status"),
]
