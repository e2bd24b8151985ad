from django.contrib import admin

from .models import Attempt, Answer


@admin.register(Attempt)
class AttemptAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'exam', 'status', 'score', 'evaluation_status', 'evaluated_by']
    list_filter = ['status', 'evaluation_status']
    search_fields = ['user__email', 'exam__title']


admin.site.register(Answer)
