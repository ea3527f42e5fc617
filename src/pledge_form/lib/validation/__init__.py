"""Validation library for the registration steps.

Public API:
    - FormPolicy: Variant switches (phone, signers, attachments required)
    - StepDescriptor / DEFAULT_STEPS: The five form steps
    - StepValidator / validate_step: Per-step FieldErrorSet computation
    - sanitize_phone / parse_signer_count: Keystroke sanitizers
"""

from pledge_form.lib.validation.rules import (
    ALLOWED_IMAGE_EXTENSIONS,
    is_allowed_image,
    is_valid_phone,
    is_valid_zipcode,
    parse_signer_count,
    sanitize_phone,
)
from pledge_form.lib.validation.steps import (
    DEFAULT_STEPS,
    FieldErrorSet,
    FormPolicy,
    StepDescriptor,
    StepValidator,
    validate_address,
    validate_attachments,
    validate_contact,
    validate_identity,
    validate_step,
)

__all__ = [
    "ALLOWED_IMAGE_EXTENSIONS",
    "DEFAULT_STEPS",
    "FieldErrorSet",
    "FormPolicy",
    "StepDescriptor",
    "StepValidator",
    "is_allowed_image",
    "is_valid_phone",
    "is_valid_zipcode",
    "parse_signer_count",
    "sanitize_phone",
    "validate_address",
    "validate_attachments",
    "validate_contact",
    "validate_identity",
    "validate_step",
]
