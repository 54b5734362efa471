from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from authentication.models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ("email", "username", "display_name", "role", "is_active", "date_joined")
    list_filter = ("role", "is_active", "is_staff", "is_superuser")
    search_fields = ("email", "username", "display_name")
    ordering = ("-date_joined",)
    fieldsets = UserAdmin.fieldsets + (
        ("Marketplace", {"fields": ("display_name", "role", "rating", "review_count", "external_uid")}),
    )
