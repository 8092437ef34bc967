from pydantic import Field

from .base import BaseDomainModel


class ValidationResult(BaseDomainModel):
    """
    Outcome of a data-entry validator.

    Validators never raise for invalid input; callers branch on
    ``is_valid`` and display ``errors``, keyed by the wire field name
    (e.g. ``salePrice``) or by a duplicate key such as ``duplicateName``.
    """

    is_valid: bool
    errors: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_errors(cls, errors: dict[str, str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors)
