import re

from src.core.exceptions import DomainValidationError

MIN_LENGTH = 8
MAX_LENGTH = 128
SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'
COMMON_PASSWORDS = frozenset(
    {"password", "123456", "qwerty", "admin", "welcome", "letmein", "monkey", "dragon", "baseball", "football"}
)
MAX_REPEATED = 3

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
ASCII_DIGITS = frozenset("0123456789")
_SPECIAL = re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")


def _is_run(a: int, b: int, c: int) -> bool:
    return (b == a + 1 and c == b + 1) or (b == a - 1 and c == b - 1)


def has_sequential_chars(password: str) -> bool:
    """Three ascending or descending digits ("123", "987") or letters ("abc", "CBA")."""
    for i in range(len(password) - 2):
        a, b, c = password[i], password[i + 1], password[i + 2]
        if a in ASCII_DIGITS and b in ASCII_DIGITS and c in ASCII_DIGITS:
            if _is_run(int(a), int(b), int(c)):
                return True
        if a.isalpha() and b.isalpha() and c.isalpha():
            if _is_run(ord(a.lower()), ord(b.lower()), ord(c.lower())):
                return True
    return False


def has_repeated_chars(password: str) -> bool:
    """More than MAX_REPEATED identical characters in a row."""
    run = 1
    for prev, cur in zip(password, password[1:]):
        run = run + 1 if cur == prev else 1
        if run > MAX_REPEATED:
            return True
    return False


def password_errors(password: str | None) -> list[str]:
    if not password:
        return ["Password cannot be empty"]

    errors = []
    if len(password) < MIN_LENGTH:
        errors.append(f"Password must be at least {MIN_LENGTH} characters long")
    if len(password) > MAX_LENGTH:
        errors.append(f"Password must not exceed {MAX_LENGTH} characters")
    if not _UPPER.search(password):
        errors.append("Password must contain at least one uppercase letter")
    if not _LOWER.search(password):
        errors.append("Password must contain at least one lowercase letter")
    if not _DIGIT.search(password):
        errors.append("Password must contain at least one number")
    if not _SPECIAL.search(password):
        errors.append(f"Password must contain at least one special character ({SPECIAL_CHARACTERS})")
    if password.lower() in COMMON_PASSWORDS:
        errors.append("Password is too common. Please choose a stronger password")
    if has_sequential_chars(password):
        errors.append("Password contains sequential characters (e.g., '123', 'abc')")
    if has_repeated_chars(password):
        errors.append("Password contains too many repeated characters")
    return errors


def validate_password_policy(password: str | None) -> None:
    errors = password_errors(password)
    if errors:
        raise DomainValidationError(
            message="Password does not meet the security requirements",
            code="WEAK_PASSWORD",
            errors={"password": errors},
        )
