from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _
from .models import User

@admin.register(User)
class CustomUserAdmin(UserAdmin):

    fieldsets = UserAdmin.fieldsets + (
        (_('Titulación'), {'fields': ('role', 'cedula')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        (_('Titulación'), {'fields': ('role', 'cedula')}),
    )
    list_display = ('username', 'email', 'first_name', 'last_name', 'role', 'is_staff')
    list_filter = ('role', 'is_staff', 'is_superuser')
    search_fields = ('username', 'first_name', 'last_name', 'cedula')
