from django.utils.html import escape

PRODUCT_NAME = "Heritage Guard"


def _layout(title: str, body: str) -> str:
    return f"""
        <div style="font-family: Arial, sans-serif; color: #333; padding: 20px; border: 1px solid #ddd; border-radius: 8px; max-width: 600px; margin: auto;">
            <h2 style="color: #2e6b3f; border-bottom: 2px solid #2e6b3f; padding-bottom: 10px;">{escape(title)}</h2>
            {body}
            <p style="font-size: 0.9em; color: #666; margin-top: 20px;">
                This message was sent automatically by {PRODUCT_NAME}. Please do not reply.
            </p>
        </div>
    """


def welcome_email(*, name: str) -> tuple[str, str]:
    subject = f"Welcome to {PRODUCT_NAME}"
    body = (
        f"<p>Hello {escape(name)},</p>"
        "<p>Your account has been created. You can now join the community forum, "
        "take quizzes and explore Rwanda's heritage sites.</p>"
    )
    return subject, _layout(subject, body)


def account_locked_email(*, name: str, minutes: int) -> tuple[str, str]:
    subject = f"[{PRODUCT_NAME}] Your account has been locked"
    body = (
        f"<p>Hello {escape(name)},</p>"
        "<p>We locked your account after several failed sign-in attempts. "
        f"You can try again in {minutes} minutes or contact an administrator.</p>"
        "<p>If this was not you, change your password as soon as you regain access.</p>"
    )
    return subject, _layout(subject, body)
