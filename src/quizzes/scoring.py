from dataclasses import dataclass, field

from src.core.exceptions import DomainValidationError


@dataclass
class AnswerScore:
    question: object
    option: object
    is_correct: bool
    points_earned: int


@dataclass
class AttemptScore:
    total_score: int = 0
    max_score: int = 0
    answers: list[AnswerScore] = field(default_factory=list)

    @property
    def percentage(self) -> float:
        if not self.max_score:
            return 0.0
        return round(self.total_score / self.max_score * 100, 2)

    def passed(self, passing_score_percentage: int) -> bool:
        return self.percentage >= passing_score_percentage


def _options(question) -> list:
    options = question.options
    return list(options.all()) if hasattr(options, "all") else list(options)


def score_answers(questions, answers: dict[str, str]) -> AttemptScore:
    """
    Score answers (question id -> option id) against the active questions of a quiz.

    Every active question counts towards the maximum; only answered ones produce a result.
    Answers to unknown questions are ignored.
    """
    score = AttemptScore()
    for question in questions:
        score.max_score += question.points
        option_id = answers.get(str(question.id))
        if option_id is None:
            continue

        option = next((o for o in _options(question) if str(o.id) == str(option_id)), None)
        if option is None:
            raise DomainValidationError(
                message="Selected option does not belong to the question",
                code="INVALID_OPTION",
                errors={"answers": [f"invalid option for question {question.id}"]},
            )

        points = question.points if option.is_correct else 0
        score.total_score += points
        score.answers.append(
            AnswerScore(question=question, option=option, is_correct=option.is_correct, points_earned=points)
        )
    return score
