from django.contrib import admin

from .models import Exam, Question, TestSeries


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ['title', 'teacher', 'test_series', 'total_marks', 'negative_marking', 'is_free', 'is_active']
    list_filter = ['is_free', 'is_active', 'negative_marking']
    search_fields = ['title']


admin.site.register(TestSeries)
admin.site.register(Question)
