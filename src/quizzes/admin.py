from django.contrib import admin

from src.quizzes.models import Quiz, QuizAttempt, QuizOption, QuizQuestion


class QuizOptionInline(admin.TabularInline):
    model = QuizOption
    extra = 0


@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    list_display = ("__str__", "difficulty", "category", "is_public", "is_active", "created_at")
    list_filter = ("difficulty", "is_public", "is_active")


@admin.register(QuizQuestion)
class QuizQuestionAdmin(admin.ModelAdmin):
    list_display = ("quiz", "question_type", "points", "order", "is_active")
    inlines = [QuizOptionInline]


@admin.register(QuizAttempt)
class QuizAttemptAdmin(admin.ModelAdmin):
    list_display = ("quiz", "user", "attempt_number", "percentage", "passed", "is_completed")
    list_filter = ("passed", "is_completed")
    raw_id_fields = ("quiz", "user")
