from django.contrib import admin

from src.users.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    ordering = ("email",)
    list_display = ("email", "username", "role", "status", "failed_login_attempts", "is_staff")
    list_filter = ("role", "status", "is_staff")
    search_fields = ("email", "username", "first_name", "last_name")

    fieldsets = (
        (None, {"fields": ("email", "username")}),
        ("Personal info", {"fields": ("first_name", "last_name", "preferred_language", "additional_languages")}),
        ("Access", {"fields": ("role", "status", "status_reason", "is_staff", "is_superuser")}),
        ("Lockout", {"fields": ("failed_login_attempts", "locked_until")}),
        ("Important dates", {"fields": ("last_login", "created_at", "updated_at")}),
    )

    readonly_fields = ("created_at", "updated_at", "last_login")
