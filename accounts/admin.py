from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, CandidateProfile, RecruiterProfile


class CandidateProfileInline(admin.StackedInline):
    model = CandidateProfile
    can_delete = False
    extra = 0


class RecruiterProfileInline(admin.StackedInline):
    model = RecruiterProfile
    can_delete = False
    extra = 0


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'role', 'first_name', 'last_name', 'date_joined')
    list_filter = ('role', 'is_active')
    search_fields = ('email', 'first_name', 'last_name')
    ordering = ('-date_joined',)
    readonly_fields = ('role',)
    fieldsets = BaseUserAdmin.fieldsets + (('Portal', {'fields': ('role',)}),)

    def get_inlines(self, request, obj):
        if obj is None:
            return []
        if obj.is_candidate():
            return [CandidateProfileInline]
        if obj.is_recruiter():
            return [RecruiterProfileInline]
        return []


@admin.register(RecruiterProfile)
class RecruiterProfileAdmin(admin.ModelAdmin):
    list_display = ('company_name', 'company_email', 'user')
    search_fields = ('company_name', 'company_email', 'user__email')
