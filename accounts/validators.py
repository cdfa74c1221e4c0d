import re

from django.core.validators import RegexValidator
from rest_framework import serializers

PHONE_PATTERN = r'^[0-9]{10}\Z'
PHONE_MESSAGE = "Phone number must be exactly 10 digits"

phone_validator = RegexValidator(regex=PHONE_PATTERN, message=PHONE_MESSAGE)


def validate_phone(value):
    if not re.fullmatch(r'[0-9]{10}', value or ''):
        raise serializers.ValidationError(PHONE_MESSAGE)
    return value


def validate_password_strength(value):
    if len(value) < 8:
        raise serializers.ValidationError("Password must be at least 8 characters")
    if not re.search(r'[A-Z]', value):
        raise serializers.ValidationError("Password must contain at least one uppercase letter")
    if not re.search(r'[a-z]', value):
        raise serializers.ValidationError("Password must contain at least one lowercase letter")
    if not re.search(r'[0-9]', value):
        raise serializers.ValidationError("Password must contain at least one number")
    return value


def required_text(max_length, required_message, label='Text'):
    """Build a trimmed CharField with the portal's length messages."""
    return serializers.CharField(
        max_length=max_length,
        error_messages={
            'blank': required_message,
            'required': required_message,
            'max_length': f"{label} must be less than {max_length} characters",
        },
    )


def optional_text(max_length, label='Text'):
    return serializers.CharField(
        max_length=max_length,
        required=False,
        allow_blank=True,
        error_messages={'max_length': f"{label} must be less than {max_length} characters"},
    )


def optional_url(max_length=500):
    return serializers.URLField(
        max_length=max_length,
        required=False,
        allow_blank=True,
        allow_null=True,
        error_messages={
            'invalid': "Invalid URL",
            'max_length': f"URL must be less than {max_length} characters",
        },
    )


def email_field(required=True):
    return serializers.EmailField(
        max_length=255,
        required=required,
        error_messages={
            'invalid': "Invalid email address",
            'blank': "Invalid email address",
            'required': "Invalid email address",
            'max_length': "Email must be less than 255 characters",
        },
    )
