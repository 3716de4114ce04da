import pytest

from src.moderation.content_filter import (
    Recommendation,
    analyze_content,
    has_excessive_capitals,
    has_excessive_repetition,
)


@pytest.mark.parametrize(
    "text,score,recommendation",
    [
        ("Great topic about Intore dancers", 1.0, Recommendation.APPROVE),
        ("", 1.0, Recommendation.APPROVE),
        ("This is urgent", 0.9, Recommendation.APPROVE),
        ("Click here for free money, act now", 0.7, Recommendation.FLAG),
        ("I hate all tourists", 0.7, Recommendation.FLAG),
        ("see www.example.com or mail me@site.com or call 0788123456", 0.8, Recommendation.FLAG),
        ("Buy now! Winner of the lottery, urgent, limited time, act now", 0.4, Recommendation.REJECT),
    ],
)
def test_analyze_content_scores(text, score, recommendation):
    analysis = analyze_content(text)
    assert analysis.confidence_score == score
    assert analysis.recommendation == recommendation


def test_reason_lists_every_flag():
    analysis = analyze_content("Click here for free money, act now")
    assert analysis.reason.startswith("Content may need review: ")
    assert "free money" in analysis.reason
    assert len(analysis.flags) == 3
    assert analyze_content("Murakoze").reason == "Content appears appropriate"


def test_score_never_drops_below_zero():
    text = " ".join(["spam advertisement commercial lottery winner urgent guaranteed suspicious"] * 4)
    text += " kill all tourists"
    assert analyze_content(text).confidence_score == 0.0


def test_repetition_and_capitals():
    assert has_excessive_repetition("dance dance dance dance")
    assert not has_excessive_repetition("the the the the the")
    assert has_excessive_capitals("THIS IS SHOUTING")
    assert not has_excessive_capitals("SHORT")
    assert not has_excessive_capitals("1234567890!!")
