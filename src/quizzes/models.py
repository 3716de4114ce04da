from django.db import models
from django.utils import timezone

from src.common.models import BaseModel, SoftDeletableModel


class QuizDifficulty(models.TextChoices):
    BEGINNER = "BEGINNER", "Beginner"
    INTERMEDIATE = "INTERMEDIATE", "Intermediate"
    ADVANCED = "ADVANCED", "Advanced"


class QuestionType(models.TextChoices):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE", "Multiple choice"
    TRUE_FALSE = "TRUE_FALSE", "True / False"


class Quiz(SoftDeletableModel):
    title = models.JSONField(default=dict)
    description = models.JSONField(default=dict, blank=True)
    passing_score_percentage = models.PositiveSmallIntegerField(default=70)
    time_limit_minutes = models.PositiveIntegerField(null=True, blank=True)
    max_attempts = models.PositiveIntegerField(default=0, help_text="0 means unlimited")
    is_public = models.BooleanField(default=True, db_index=True)
    tags = models.JSONField(default=list, blank=True)
    difficulty = models.CharField(max_length=16, choices=QuizDifficulty.choices, default=QuizDifficulty.BEGINNER)
    category = models.CharField(max_length=100, blank=True, db_index=True)

    class Meta:
        db_table = "quizzes"
        ordering = ["-created_at"]
        verbose_name_plural = "quizzes"

    def __str__(self):
        return self.title.get("en") or str(self.id)


class QuizQuestion(BaseModel):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="questions")
    text = models.JSONField(default=dict)
    explanation = models.JSONField(default=dict, blank=True)
    question_type = models.CharField(max_length=16, choices=QuestionType.choices,
                                     default=QuestionType.MULTIPLE_CHOICE)
    points = models.PositiveIntegerField(default=1)
    order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "quiz_questions"
        ordering = ["order", "created_at"]


class QuizOption(BaseModel):
    question = models.ForeignKey(QuizQuestion, on_delete=models.CASCADE, related_name="options")
    text = models.JSONField(default=dict)
    is_correct = models.BooleanField(default=False)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "quiz_options"
        ordering = ["order", "created_at"]


class QuizAttempt(BaseModel):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="attempts")
    user = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="quiz_attempts")
    attempt_number = models.PositiveIntegerField(default=1)
    started_at = models.DateTimeField(default=timezone.now)
    completed_at = models.DateTimeField(null=True, blank=True)
    total_score = models.PositiveIntegerField(default=0)
    max_score = models.PositiveIntegerField(default=0)
    percentage = models.FloatField(default=0)
    passed = models.BooleanField(default=False)
    time_taken_seconds = models.PositiveIntegerField(null=True, blank=True)
    is_completed = models.BooleanField(default=False)

    class Meta:
        db_table = "quiz_attempts"
        ordering = ["-started_at"]
        constraints = [
            models.UniqueConstraint(fields=["quiz", "user", "attempt_number"], name="quiz_attempt_number_unique"),
        ]


class QuizResult(BaseModel):
    attempt = models.ForeignKey(QuizAttempt, on_delete=models.CASCADE, related_name="results")
    question = models.ForeignKey(QuizQuestion, on_delete=models.CASCADE, related_name="+")
    selected_option = models.ForeignKey(QuizOption, on_delete=models.SET_NULL, null=True, blank=True,
                                        related_name="+")
    is_correct = models.BooleanField(default=False)
    points_earned = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "quiz_results"
