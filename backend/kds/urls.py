from django.urls import path
from . import views

app_name = 'kds'

urlpatterns = [
    path('tickets/', views.open_tickets, name='open-tickets'),
    path('tickets/<int:ticket_id>/', views.update_ticket, name='update-ticket'),
    path('items/<int:item_id>/', views.update_item, name='update-item'),
]
