"""Form validation rules.

Pure functions: no I/O, no state. Each validator reports every rule that
fails, in a fixed order, so a form can show all problems at once.
"""

import re
from dataclasses import dataclass, field

from domain.entities.group import DISCIPLINE_VALUES, ContactInfo, GroupDraft, GroupPatch

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500
CITY_MIN_LENGTH = 2
APPROX_MEMBERS_MIN = 1
APPROX_MEMBERS_MAX = 10_000

CAPTION_MAX_LENGTH = 500
COMMENT_MAX_LENGTH = 500
IMAGE_FORMATS = ("jpg", "jpeg", "png", "webp")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_TOO_SHORT = f"Name must be at least {NAME_MIN_LENGTH} characters"
NAME_TOO_LONG = f"Name cannot be longer than {NAME_MAX_LENGTH} characters"
CITY_TOO_SHORT = f"City must be at least {CITY_MIN_LENGTH} characters"
DESCRIPTION_TOO_LONG = f"Description cannot be longer than {DESCRIPTION_MAX_LENGTH} characters"
APPROX_MEMBERS_TOO_LOW = "Member count must be greater than 0"
APPROX_MEMBERS_TOO_HIGH = "Member count seems too high"
INVALID_EMAIL = "Contact email is not valid"
COMMENT_EMPTY = "Comment cannot be empty"
COMMENT_TOO_LONG = f"Comment cannot be longer than {COMMENT_MAX_LENGTH} characters"
CAPTION_TOO_LONG = f"Caption cannot be longer than {CAPTION_MAX_LENGTH} characters"
IMAGE_REQUIRED = "An image is required"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _name_errors(name: str) -> list[str]:
    errors = []
    trimmed = (name or "").strip()
    if len(trimmed) < NAME_MIN_LENGTH:
        errors.append(NAME_TOO_SHORT)
    if len(trimmed) > NAME_MAX_LENGTH:
        errors.append(NAME_TOO_LONG)
    return errors


def _city_errors(city: str | None) -> list[str]:
    trimmed = (city or "").strip()
    if trimmed and len(trimmed) < CITY_MIN_LENGTH:
        return [CITY_TOO_SHORT]
    return []


def _description_errors(description: str | None) -> list[str]:
    if description and len(description) > DESCRIPTION_MAX_LENGTH:
        return [DESCRIPTION_TOO_LONG]
    return []


def _approx_members_errors(value: int) -> list[str]:
    if value < APPROX_MEMBERS_MIN:
        return [APPROX_MEMBERS_TOO_LOW]
    if value > APPROX_MEMBERS_MAX:
        return [APPROX_MEMBERS_TOO_HIGH]
    return []


def _discipline_errors(disciplines: list[str]) -> list[str]:
    values = {str(getattr(d, "value", d)).strip() for d in disciplines if d}
    unknown = sorted(values - DISCIPLINE_VALUES)
    return [f"Unknown discipline: {d}" for d in unknown]


def _contact_errors(contact: ContactInfo | None) -> list[str]:
    if contact is None:
        return []
    email = (contact.email or "").strip()
    if email and not EMAIL_RE.match(email):
        return [INVALID_EMAIL]
    return []


def validate_group(draft: GroupDraft) -> ValidationResult:
    """Validate a group before it is created."""
    errors: list[str] = []
    errors += _name_errors(draft.name)
    errors += _city_errors(draft.city)
    errors += _description_errors(draft.description)
    errors += _approx_members_errors(draft.approx_members)
    errors += _discipline_errors(draft.disciplines)
    errors += _contact_errors(draft.contact)
    return ValidationResult(errors)


def validate_group_patch(patch: GroupPatch) -> ValidationResult:
    """Validate only the fields a patch actually changes."""
    errors: list[str] = []
    if patch.name is not None:
        errors += _name_errors(patch.name)
    if patch.city is not None:
        errors += _city_errors(patch.city)
    if patch.description is not None:
        errors += _description_errors(patch.description)
    if patch.approx_members is not None:
        errors += _approx_members_errors(patch.approx_members)
    if patch.disciplines is not None:
        errors += _discipline_errors(patch.disciplines)
    errors += _contact_errors(patch.contact)
    return ValidationResult(errors)


def validate_caption(caption: str | None) -> ValidationResult:
    if caption and len(caption) > CAPTION_MAX_LENGTH:
        return ValidationResult([CAPTION_TOO_LONG])
    return ValidationResult()


def validate_comment(text: str | None) -> ValidationResult:
    trimmed = (text or "").strip()
    if not trimmed:
        return ValidationResult([COMMENT_EMPTY])
    if len(text or "") > COMMENT_MAX_LENGTH:
        return ValidationResult([COMMENT_TOO_LONG])
    return ValidationResult()


def validate_image_format(uri: str) -> ValidationResult:
    """Check the file extension against the accepted formats."""
    extension = uri.rsplit(".", 1)[-1].lower() if "." in uri else ""
    if extension not in IMAGE_FORMATS:
        return ValidationResult(
            [f"Unsupported image format. Accepted formats: {', '.join(IMAGE_FORMATS)}"]
        )
    return ValidationResult()
