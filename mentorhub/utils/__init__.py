__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "issue_user_token",
    "decode_access_token",
    "authenticate_user",
    "get_current_user",
    "oauth2_scheme",
    "is_email_enabled",
    "send_email",
    "send_otp_email",
    "parse_duration_hours",
]


def __getattr__(name):
    if name in {
        "verify_password",
        "get_password_hash",
        "create_access_token",
        "issue_user_token",
        "decode_access_token",
        "authenticate_user",
        "get_current_user",
        "oauth2_scheme",
    }:
        from . import security as _security
        return getattr(_security, name)
    if name in {"is_email_enabled", "send_email", "send_otp_email"}:
        from . import email as _email
        return getattr(_email, name)
    if name == "parse_duration_hours":
        from . import duration as _duration
        return getattr(_duration, name)
    raise AttributeError(f"module 'mentorhub.utils' has no attribute '{name}'")
