from django.contrib import admin
from .models import Job, Application, ApplicationEvent


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('title', 'recruiter', 'location', 'job_type', 'status', 'created_at')
    list_filter = ('status', 'job_type')
    search_fields = ('title', 'description', 'location')


class ApplicationEventInline(admin.TabularInline):
    model = ApplicationEvent
    extra = 0
    can_delete = False
    readonly_fields = ('from_status', 'to_status', 'actor', 'actor_label', 'created_at')

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ('candidate', 'job', 'status', 'applied_at')
    list_filter = ('status',)
    search_fields = ('candidate__email', 'job__title')
    # status moves go through the API so they are validated and logged
    readonly_fields = ('status', 'resume_url', 'applied_at')
    inlines = [ApplicationEventInline]
