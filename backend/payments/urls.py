from django.urls import path

from . import views

app_name = "payments"

urlpatterns = [
    path("orders/<int:order_id>/", views.pay_order, name="pay-order"),
]
