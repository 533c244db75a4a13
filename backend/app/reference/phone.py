"""
Phone number validation by dialling code
"""
import re
from typing import Dict, NamedTuple, Optional

PHONE_NUMBER_REGEX = re.compile(r"^[\d\s\-().+]+$")

DEFAULT_MIN_DIGITS = 6
DEFAULT_MAX_DIGITS = 15


class PhoneRule(NamedTuple):
    min_digits: int
    max_digits: int


# digit count of the national number (country code excluded)
PHONE_RULES: Dict[str, PhoneRule] = {
    "+1": PhoneRule(10, 10),     # US, Canada
    "+44": PhoneRule(10, 11),    # UK
    "+81": PhoneRule(9, 11),     # Japan
    "+86": PhoneRule(10, 11),    # China
    "+91": PhoneRule(10, 10),    # India
    "+49": PhoneRule(10, 12),    # Germany
    "+33": PhoneRule(9, 9),      # France
    "+39": PhoneRule(9, 12),     # Italy
    "+34": PhoneRule(9, 9),      # Spain
    "+61": PhoneRule(9, 9),      # Australia
    "+55": PhoneRule(10, 11),    # Brazil
    "+52": PhoneRule(10, 10),    # Mexico
    "+82": PhoneRule(9, 10),     # South Korea
    "+65": PhoneRule(8, 8),      # Singapore
    "+971": PhoneRule(9, 9),     # UAE
    "+966": PhoneRule(9, 9),     # Saudi Arabia
    "+972": PhoneRule(9, 9),     # Israel
    "+20": PhoneRule(9, 10),     # Egypt
    "+90": PhoneRule(10, 10),    # Turkey
    "+92": PhoneRule(10, 11),    # Pakistan
    "+880": PhoneRule(10, 11),   # Bangladesh
    "+62": PhoneRule(9, 12),     # Indonesia
    "+60": PhoneRule(9, 10),     # Malaysia
    "+63": PhoneRule(10, 10),    # Philippines
    "+84": PhoneRule(9, 10),     # Vietnam
    "+353": PhoneRule(9, 9),     # Ireland
    "+31": PhoneRule(9, 9),      # Netherlands
    "+32": PhoneRule(9, 9),      # Belgium
    "+41": PhoneRule(9, 9),      # Switzerland
    "+43": PhoneRule(10, 13),    # Austria
    "+48": PhoneRule(9, 9),      # Poland
    "+46": PhoneRule(9, 10),     # Sweden
    "+47": PhoneRule(8, 8),      # Norway
    "+45": PhoneRule(8, 8),      # Denmark
    "+358": PhoneRule(9, 10),    # Finland
    "+420": PhoneRule(9, 9),     # Czech Republic
    "+351": PhoneRule(9, 9),     # Portugal
    "+27": PhoneRule(9, 9),      # South Africa
    "+234": PhoneRule(10, 11),   # Nigeria
    "+254": PhoneRule(9, 9),     # Kenya
    "+233": PhoneRule(9, 9),     # Ghana
    "+54": PhoneRule(10, 11),    # Argentina
    "+56": PhoneRule(9, 9),      # Chile
    "+57": PhoneRule(10, 10),    # Colombia
    "+51": PhoneRule(9, 9),      # Peru
    "+58": PhoneRule(10, 11),    # Venezuela
    "+593": PhoneRule(9, 9),     # Ecuador
    "+373": PhoneRule(8, 8),     # Moldova
    "+94": PhoneRule(9, 9),      # Sri Lanka
}


def digits_only(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def validate_phone_number(phone: Optional[str], country_code: Optional[str]) -> Optional[str]:
    """
    Validate a national phone number for a dialling code.

    Returns None when valid, otherwise the message to show.
    """
    trimmed = (phone or "").strip()
    if not trimmed:
        return "Phone number is required"

    if not PHONE_NUMBER_REGEX.match(trimmed):
        return "Phone number can only contain digits, spaces, hyphens, parentheses, and +"

    digits = digits_only(trimmed)
    if not digits:
        return "Phone number must contain digits"

    code = (country_code or "").strip()
    if code and not code.startswith("+"):
        code = f"+{code}"
    rule = PHONE_RULES.get(code)
    if rule:
        if len(digits) < rule.min_digits:
            return f"Phone number must have at least {rule.min_digits} digits for {code}"
        if len(digits) > rule.max_digits:
            return f"Phone number must have at most {rule.max_digits} digits for {code}"
        return None

    if len(digits) < DEFAULT_MIN_DIGITS:
        return f"Phone number must have at least {DEFAULT_MIN_DIGITS} digits"
    if len(digits) > DEFAULT_MAX_DIGITS:
        return f"Phone number must have at most {DEFAULT_MAX_DIGITS} digits"
    return None
