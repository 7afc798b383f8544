import re
from typing import Optional

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"
PHONE_PATTERN = r"^[0-9]{10}$"

EMAIL_MESSAGE = "Please provide a valid email address with a proper domain (e.g., example@domain.com)"
PASSWORD_MESSAGE = (
    "Password must be at least 8 characters long and contain at least one uppercase letter, "
    "one lowercase letter, one number, and one special character (@$!%*?&)"
)
PHONE_MESSAGE = "Phone number must be exactly 10 digits (numbers only)"


def validate_email(email: Optional[str]) -> bool:
    return bool(email) and re.match(EMAIL_PATTERN, email) is not None


def validate_password(password: Optional[str]) -> bool:
    return bool(password) and re.match(PASSWORD_PATTERN, password) is not None


def validate_phone(phone: Optional[str]) -> bool:
    # Phone is optional
    if not phone:
        return True
    return re.match(PHONE_PATTERN, phone) is not None


def validation_rules() -> dict:
    return {
        "email": {"pattern": EMAIL_PATTERN, "message": EMAIL_MESSAGE},
        "password": {
            "pattern": PASSWORD_PATTERN,
            "message": PASSWORD_MESSAGE,
            "requirements": [
                "At least 8 characters long",
                "At least one uppercase letter (A-Z)",
                "At least one lowercase letter (a-z)",
                "At least one number (0-9)",
                "At least one special character (@$!%*?&)",
            ],
        },
        "phone": {
            "pattern": PHONE_PATTERN,
            "message": PHONE_MESSAGE,
            "requirements": [
                "Exactly 10 digits",
                "Numbers only (no spaces, dashes, or special characters)",
                "Phone number is optional",
            ],
        },
    }
