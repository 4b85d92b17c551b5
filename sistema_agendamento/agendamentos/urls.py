from django.urls import path
from . import views
app_name = 'agendamentos'
urlpatterns = [
    path('clientes/', views.clients, name='clients'),
    path('clientes/<int:pk>/', views.client_detail, name='client_detail'),
    path('profissionais/', views.professionals, name='professionals'),
    path('profissionais/<int:pk>/', views.professional_detail, name='professional_detail'),
    path('agendamentos/', views.appointments, name='appointments'),
    path('agendamentos/<int:pk>/', views.appointment_detail, name='appointment_detail'),
]
