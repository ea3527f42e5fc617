"""Per-step validation of a ``PartialSubmission``.

Each validator returns a freshly built ``FieldErrorSet`` (field name to
message).  An empty set means the step passes.  Validators never raise for
bad input; they only describe it.
"""

from collections.abc import Callable
from dataclasses import dataclass

from pledge_form.lib.validation.rules import (
    allowed_image_extensions_display,
    is_allowed_image,
    is_blank,
    is_valid_phone,
    is_valid_zipcode,
)
from pledge_form.schemas.submission import ORGANIZATION_OPTIONS, OTHER_ORGANIZATION, PartialSubmission

FieldErrorSet = dict[str, str]


@dataclass(frozen=True)
class FormPolicy:
    """Which optional requirements the active form variant enforces.

    Attributes:
        phone_required: Step 3 requires a phone number.
        signers_required: Step 3 requires a positive signer count.
        attachments_required: Step 4 requires both images.
    """

    phone_required: bool = True
    signers_required: bool = True
    attachments_required: bool = True

    @classmethod
    def for_create(cls) -> "FormPolicy":
        return cls()

    @classmethod
    def for_edit(cls) -> "FormPolicy":
        """Edits keep the stored images, so attachments become optional."""
        return cls(attachments_required=False)

    @classmethod
    def for_submission(cls, submission: PartialSubmission) -> "FormPolicy":
        return cls.for_edit() if submission.is_edit else cls.for_create()


StepValidatorFn = Callable[[PartialSubmission, FormPolicy], FieldErrorSet]


def validate_identity(submission: PartialSubmission, policy: FormPolicy) -> FieldErrorSet:
    """Step 1: names and organization."""
    errors: FieldErrorSet = {}
    if is_blank(submission.first_name):
        errors["first_name"] = "First name is required"
    if is_blank(submission.last_name):
        errors["last_name"] = "Last name is required"

    choice = submission.organization_choice
    if choice == OTHER_ORGANIZATION:
        if is_blank(submission.organization_other):
            errors["organization_other"] = "Please enter your organization"
    elif not choice:
        errors["organization_choice"] = "Please select an organization"
    elif choice not in ORGANIZATION_OPTIONS:
        errors["organization_choice"] = "Unknown organization choice"
    return errors


def validate_address(submission: PartialSubmission, policy: FormPolicy) -> FieldErrorSet:
    """Step 2: street address and the four location fields."""
    errors: FieldErrorSet = {}
    required = {
        "address_line1": "Address is required",
        "district": "Sub-district (tambon) is required",
        "amphoe": "District (amphoe) is required",
        "province": "Province is required",
        "zipcode": "Postal code is required",
    }
    for field, message in required.items():
        if is_blank(getattr(submission, field)):
            errors[field] = message

    if "zipcode" not in errors and not is_valid_zipcode(submission.zipcode):
        errors["zipcode"] = "Postal code must be exactly 5 digits"
    return errors


def validate_contact(submission: PartialSubmission, policy: FormPolicy) -> FieldErrorSet:
    """Step 3: phone number and signer count.

    Duplicate phone numbers are not checked here; that is an advisory remote
    lookup and the backend has the final say at submit time.
    """
    errors: FieldErrorSet = {}
    phone = submission.phone_number
    if not phone:
        if policy.phone_required:
            errors["phone_number"] = "Phone number is required"
    elif not is_valid_phone(phone):
        errors["phone_number"] = f"Phone number must be exactly 10 digits (got {len(phone)})"

    if policy.signers_required:
        signers = submission.number_of_signers
        if signers is None:
            errors["number_of_signers"] = "Number of signers is required"
        elif signers <= 0:
            errors["number_of_signers"] = "Number of signers must be greater than 0"
    return errors


def validate_attachments(submission: PartialSubmission, policy: FormPolicy) -> FieldErrorSet:
    """Step 4: two images, required only when the policy says so."""
    errors: FieldErrorSet = {}
    for field, label in (("image1", "Image 1"), ("image2", "Image 2")):
        value = getattr(submission, field)
        if is_blank(value):
            if policy.attachments_required:
                errors[field] = f"{label} is required"
        elif not is_allowed_image(value):
            errors[field] = f"{label} must be one of: {allowed_image_extensions_display()}"
    return errors


def validate_confirmation(submission: PartialSubmission, policy: FormPolicy) -> FieldErrorSet:
    """Step 5: review only."""
    return {}


@dataclass(frozen=True)
class StepDescriptor:
    """One step of the form: its position, labels and validator."""

    ordinal: int
    title: str
    description: str
    validator: StepValidatorFn


DEFAULT_STEPS: tuple[StepDescriptor, ...] = (
    StepDescriptor(1, "Personal information", "Name and organization", validate_identity),
    StepDescriptor(2, "Address", "Contact address", validate_address),
    StepDescriptor(3, "Contact", "Phone number and number of signers", validate_contact),
    StepDescriptor(4, "Images", "Supporting photos", validate_attachments),
    StepDescriptor(5, "Confirm", "Review before sending", validate_confirmation),
)


class StepValidator:
    """Validates a submission against the step at a given ordinal.

    Args:
        steps: Step descriptors ordered by ordinal, starting at 1.
    """

    def __init__(self, steps: tuple[StepDescriptor, ...] = DEFAULT_STEPS) -> None:
        if [s.ordinal for s in steps] != list(range(1, len(steps) + 1)):
            msg = "Step ordinals must run 1..N without gaps"
            raise ValueError(msg)
        self._steps = steps

    @property
    def steps(self) -> tuple[StepDescriptor, ...]:
        return self._steps

    @property
    def total_steps(self) -> int:
        return len(self._steps)

    def descriptor(self, step: int) -> StepDescriptor | None:
        if 1 <= step <= len(self._steps):
            return self._steps[step - 1]
        return None

    def validate(self, step: int, submission: PartialSubmission, policy: FormPolicy) -> FieldErrorSet:
        """Recompute the full error set for ``step``; unknown steps pass."""
        descriptor = self.descriptor(step)
        if descriptor is None:
            return {}
        return descriptor.validator(submission, policy)

    def first_invalid_step(
        self, submission: PartialSubmission, policy: FormPolicy, through: int | None = None
    ) -> tuple[int, FieldErrorSet] | None:
        """Find the earliest failing step among ``1..through`` (all steps by default)."""
        last = self.total_steps if through is None else min(through, self.total_steps)
        for step in range(1, last + 1):
            errors = self.validate(step, submission, policy)
            if errors:
                return step, errors
        return None


def validate_step(step: int, submission: PartialSubmission, policy: FormPolicy | None = None) -> FieldErrorSet:
    """Validate ``step`` of the default five-step form.

    Args:
        step: Step ordinal (1-5).
        submission: Submission to check.
        policy: Variant policy; derived from the submission (create/edit) when omitted.

    Returns:
        Field errors for the step; empty when it passes.
    """
    return StepValidator().validate(step, submission, policy or FormPolicy.for_submission(submission))
