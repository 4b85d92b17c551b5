from django.contrib import admin
from .models import Client, Professional, Appointment
@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ('name','email','phone','national_id')
    search_fields = ('name','email','national_id')
@admin.register(Professional)
class ProfessionalAdmin(admin.ModelAdmin):
    list_display = ('name','specialty','registration')
    list_filter = ('specialty',)
@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('scheduled_at','client','professional','notes')
    list_filter = ('professional',)
    search_fields = ('client__name','professional__name')
    list_select_related = ('client','professional')
