from ninja_extra.throttling import UserRateThrottle


class PasswordChangeThrottle(UserRateThrottle):
    """
    Rate limit password changes per account.
    Guards the current-password check against brute forcing with a stolen access token.
    """
    rate = "5/hour"
    scope = "password_change"
