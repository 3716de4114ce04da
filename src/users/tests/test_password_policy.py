import pytest

from src.core.exceptions import DomainValidationError
from src.users.models import UserStatus, user_status_can_transition
from src.users.validators import has_repeated_chars, has_sequential_chars, password_errors, validate_password_policy


def test_strong_password_passes():
    assert password_errors("Herit@ge2024!") == []
    validate_password_policy("Kigali#Mu5eum")


@pytest.mark.parametrize(
    "password,fragment",
    [
        ("Sh0rt!", "at least 8"),
        ("nouppercase1!", "uppercase"),
        ("NOLOWERCASE1!", "lowercase"),
        ("NoDigitsHere!", "number"),
        ("NoSpecial1x", "special"),
        ("Pass1234!x", "sequential"),
        ("Paaaa5word!", "repeated"),
    ],
)
def test_each_rule_reports_its_own_message(password, fragment):
    assert any(fragment in e for e in password_errors(password))


def test_empty_password():
    assert password_errors("") == ["Password cannot be empty"]


def test_common_password_is_rejected_case_insensitively():
    assert any("too common" in e for e in password_errors("PASSWORD"))


def test_validate_password_policy_raises_with_field_errors():
    with pytest.raises(DomainValidationError) as exc:
        validate_password_policy("weak")
    assert exc.value.code == "WEAK_PASSWORD"
    assert exc.value.errors["password"]


def test_sequence_and_repeat_helpers():
    assert has_sequential_chars("xx987")
    assert has_sequential_chars("CBA")
    assert not has_sequential_chars("a1b2c3")
    assert has_repeated_chars("1111")
    assert not has_repeated_chars("111")


def test_user_status_transitions():
    assert user_status_can_transition(UserStatus.ACTIVE, UserStatus.SUSPENDED)
    assert user_status_can_transition(UserStatus.SUSPENDED, UserStatus.ACTIVE)
    assert user_status_can_transition(UserStatus.DELETED, UserStatus.ACTIVE)
    assert not user_status_can_transition(UserStatus.DISABLED, UserStatus.ACTIVE)
    assert not user_status_can_transition(UserStatus.ACTIVE, UserStatus.ACTIVE)


def test_non_ascii_digits_do_not_break_sequence_check():
    assert not has_sequential_chars("x²³⁴y")
    assert password_errors("Qw!zMp²²²9x") == []
    # superscripts are not numbers for the digit rule
    assert any("number" in e for e in password_errors("Qw!zMp²²²x"))
