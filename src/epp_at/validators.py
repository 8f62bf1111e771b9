"""
EPP Input Validator

Client-side checks run before a command goes on the wire.
"""

import re

from epp_at.exceptions import EPPValidationError

# Domain name pattern (labels of 1-63 chars, no leading/trailing hyphen)
DOMAIN_NAME_PATTERN = re.compile(
    r'^[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)*$'
)

CONTACT_ID_PATTERN = re.compile(r'^[a-zA-Z0-9\-_]+$')

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

# E.164 after separators are stripped
PHONE_PATTERN = re.compile(r'^\+[1-9]\d{1,14}$')

COUNTRY_CODE_PATTERN = re.compile(r'^[A-Z]{2}$')

POSTAL_CODE_PATTERN = re.compile(r'^[a-zA-Z0-9\s\-]+$')

# Registry-assigned contact handle
AUTO_CONTACT_ID = "AUTO"


def validate_domain_name(name: str) -> None:
    if not name:
        raise EPPValidationError("Domain name cannot be empty")
    if len(name) > 253:
        raise EPPValidationError("Domain name too long: maximum 253 characters", name)
    if not DOMAIN_NAME_PATTERN.match(name):
        raise EPPValidationError(f"Invalid domain name format: {name}", name)


def validate_email(email: str) -> None:
    if not email:
        raise EPPValidationError("Email address cannot be empty")
    if not EMAIL_PATTERN.match(email):
        raise EPPValidationError(f"Invalid email address: {email}", email)


def validate_contact_id(contact_id: str) -> None:
    """Contact handles are 3-16 chars of [A-Za-z0-9_-], or AUTO."""
    if not contact_id:
        raise EPPValidationError("Contact ID cannot be empty")
    if contact_id == AUTO_CONTACT_ID:
        return
    if not 3 <= len(contact_id) <= 16:
        raise EPPValidationError("Contact ID must be between 3 and 16 characters", contact_id)
    if not CONTACT_ID_PATTERN.match(contact_id):
        raise EPPValidationError(
            "Contact ID can only contain alphanumeric characters, hyphens, and underscores",
            contact_id,
        )


def validate_phone(phone: str) -> None:
    """Phone numbers are optional; when given they must be +E.164."""
    if not phone:
        return
    cleaned = re.sub(r'[\s\-().]', '', phone)
    if not PHONE_PATTERN.match(cleaned):
        raise EPPValidationError(
            "Invalid phone number format: must be in international format (+country.number)",
            phone,
        )


def validate_country_code(cc: str) -> None:
    if not cc:
        raise EPPValidationError("Country code cannot be empty")
    if not COUNTRY_CODE_PATTERN.match(cc):
        raise EPPValidationError("Country code must be two uppercase letters", cc)


def validate_postal_code(pc: str) -> None:
    if not pc:
        raise EPPValidationError("Postal code cannot be empty")
    if len(pc) > 16:
        raise EPPValidationError("Postal code too long: maximum 16 characters", pc)
    if not POSTAL_CODE_PATTERN.match(pc):
        raise EPPValidationError("Postal code contains invalid characters", pc)


def validate_auth_info(auth_info: str) -> None:
    if not auth_info:
        raise EPPValidationError("Auth info cannot be empty")
    if len(auth_info) < 6:
        raise EPPValidationError("Auth info must be at least 6 characters long")
    if len(auth_info) > 64:
        raise EPPValidationError("Auth info too long: maximum 64 characters")
