import re
from collections.abc import Iterable
from datetime import date

from bikeshop.domain.customer import CustomerDomain
from bikeshop.domain.product import ProductDomain
from bikeshop.domain.sale import SaleDomain
from bikeshop.domain.sales_person import SalesPersonDomain
from bikeshop.domain.validation import ValidationResult


PHONE_PATTERN = re.compile(r"^\d{3}-\d{3}-\d{4}$")

# Keys that depend on other records and must be re-checked on every change.
DUPLICATE_SENSITIVE_FIELDS: dict[str, tuple[str, ...]] = {
    "customer": (),
    "salesperson": ("phone", "duplicateName"),
    "product": ("duplicateProduct",),
    "sale": (),
}


def _digits(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def format_phone_number(phone: str) -> str:
    """
    Normalizes a phone number to the canonical ddd-ddd-dddd form.

    Args:
        phone (str): Raw input, e.g. '1234567890' or '(123) 456 7890'.

    Returns:
        str: The canonical form when the input has exactly 10 digits,
            otherwise the input unchanged.
    """
    digits = _digits(phone)
    if len(digits) != 10:
        return phone
    return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"


def validate_phone_format(phone: str) -> str | None:
    """
    Checks a phone number for presence, length and display format.

    Args:
        phone (str): The phone number as entered.

    Returns:
        str | None: The error message, or None when the phone is valid.
    """
    digits = _digits(phone)
    if not digits:
        return "Phone number is required"
    if len(digits) != 10:
        return "Phone number must be 10 digits in length"
    if not PHONE_PATTERN.match(phone):
        return "Phone number must be in xxx-xxx-xxxx format"
    return None


def _require(value: str, message: str) -> str | None:
    if not (value or "").strip():
        return message
    return None


def _require_name(value: str, label: str) -> str | None:
    stripped = (value or "").strip()
    if not stripped:
        return f"{label} is required"
    if len(stripped) < 2:
        return f"{label} must be at least 2 characters"
    return None


def _check_start_date(start_date: date | None, today: date) -> str | None:
    if start_date is None:
        return "Start date is required"
    if start_date > today:
        return "Start date cannot be in the future"
    return None


def _collect(errors: dict[str, str], key: str, message: str | None) -> None:
    if message:
        errors[key] = message


def validate_customer(data: CustomerDomain, today: date | None = None) -> ValidationResult:
    """
    Validates a customer draft before it is written to the store.

    Args:
        data (CustomerDomain): The candidate record.
        today (date | None): Reference date for future checks. Defaults to today.

    Returns:
        ValidationResult: is_valid plus a field -> message map.
    """
    today = today or date.today()
    errors: dict[str, str] = {}

    _collect(errors, "firstName", _require(data.first_name, "First name is required"))
    _collect(errors, "lastName", _require(data.last_name, "Last name is required"))
    _collect(errors, "phone", validate_phone_format(data.phone))
    _collect(errors, "address", _require(data.address, "Address is required"))
    _collect(errors, "startDate", _check_start_date(data.start_date, today))

    return ValidationResult.from_errors(errors)


def validate_salesperson(
    data: SalesPersonDomain,
    existing_salespersons: Iterable[SalesPersonDomain],
    current_id: int | None = None,
    today: date | None = None,
) -> ValidationResult:
    """
    Validates a salesperson draft, including duplicate detection.

    The name and phone duplicate checks are independent, so a draft that
    collides on both reports both errors. The record being edited
    (``current_id``) never counts as its own duplicate.

    Args:
        data (SalesPersonDomain): The candidate record.
        existing_salespersons (Iterable[SalesPersonDomain]): Records already in the store.
        current_id (int | None): Id of the record being edited, if any.
        today (date | None): Reference date for future checks. Defaults to today.

    Returns:
        ValidationResult: is_valid plus a field -> message map.
    """
    today = today or date.today()
    errors: dict[str, str] = {}

    _collect(errors, "firstName", _require_name(data.first_name, "First name"))
    _collect(errors, "lastName", _require_name(data.last_name, "Last name"))
    _collect(errors, "phone", validate_phone_format(data.phone))

    if data.first_name and data.last_name and data.phone:
        others = [sp for sp in existing_salespersons if sp.id != current_id]
        phone_digits = _digits(data.phone)

        if any(_digits(sp.phone) == phone_digits for sp in others):
            errors["phone"] = "Phone number already exists"
        if any(sp.first_name == data.first_name and sp.last_name == data.last_name for sp in others):
            errors["duplicateName"] = "Salesperson with this first and last name already exists"

    _collect(errors, "address", _require(data.address, "Address is required"))
    _collect(errors, "startDate", _check_start_date(data.start_date, today))

    if data.termination_date is not None:
        if data.start_date is not None and data.termination_date < data.start_date:
            errors["terminationDate"] = "Termination date cannot be before start date"
        if data.termination_date > today:
            errors["terminationDate"] = "Termination date cannot be in the future"

    _collect(errors, "manager", _require_name(data.manager, "Manager name"))

    return ValidationResult.from_errors(errors)


def validate_product(
    data: ProductDomain,
    existing_products: Iterable[ProductDomain],
    current_id: int | None = None,
) -> ValidationResult:
    """
    Validates a product draft, including the (name, manufacturer) duplicate rule.

    Args:
        data (ProductDomain): The candidate record.
        existing_products (Iterable[ProductDomain]): Records already in the store.
        current_id (int | None): Id of the record being edited, if any.

    Returns:
        ValidationResult: is_valid plus a field -> message map.
    """
    errors: dict[str, str] = {}

    _collect(errors, "name", _require(data.name, "Name is required"))
    _collect(errors, "manufacturer", _require(data.manufacturer, "Manufacturer is required"))
    _collect(errors, "style", _require(data.style, "Style is required"))

    if data.purchase_price <= 0:
        errors["purchasePrice"] = "Purchase price must be greater than 0"

    if data.sale_price <= 0:
        errors["salePrice"] = "Sale price must be greater than 0"
    elif data.sale_price <= data.purchase_price:
        errors["salePrice"] = "Sale price must be greater than purchase price"

    if data.qty_on_hand < 0:
        errors["qtyOnHand"] = "Quantity cannot be negative"

    if data.commission_percentage < 0:
        errors["commissionPercentage"] = "Commission percentage cannot be negative"
    elif data.commission_percentage > 100:
        errors["commissionPercentage"] = "Commission percentage cannot exceed 100%"

    if data.name and data.manufacturer:
        name = data.name.lower()
        manufacturer = data.manufacturer.lower()
        duplicate = any(
            p.id != current_id
            and p.name.lower() == name
            and p.manufacturer.lower() == manufacturer
            for p in existing_products
        )
        if duplicate:
            errors["duplicateProduct"] = "A product with this name and manufacturer already exists"

    return ValidationResult.from_errors(errors)


def validate_sale(data: SaleDomain, today: date | None = None) -> ValidationResult:
    """
    Validates a sale draft: three selections and a past-or-present date.

    Args:
        data (SaleDomain): The candidate sale (ids of 0 mean "nothing selected").
        today (date | None): Reference date for future checks. Defaults to today.

    Returns:
        ValidationResult: is_valid plus a field -> message map.
    """
    today = today or date.today()
    errors: dict[str, str] = {}

    if not data.product_id:
        errors["productId"] = "Product selection is required"
    if not data.sales_person_id:
        errors["salesPersonId"] = "Salesperson selection is required"
    if not data.customer_id:
        errors["customerId"] = "Customer selection is required"

    if data.sale_date is None:
        errors["date"] = "Sale date is required"
    elif data.sale_date > today:
        errors["date"] = "Sale date cannot be in the future"

    return ValidationResult.from_errors(errors)


def revalidate_fields(
    current_errors: dict[str, str],
    result: ValidationResult,
    fields: Iterable[str],
) -> dict[str, str]:
    """
    Merges a fresh validation result into an error map for the touched fields only.

    Used on every field change: the caller re-runs the validator on the
    whole draft, then refreshes only the edited field plus the entity's
    duplicate-sensitive keys, leaving errors on untouched fields as they
    were until submit.

    Args:
        current_errors (dict[str, str]): Errors currently displayed.
        result (ValidationResult): Output of the validator on the current draft.
        fields (Iterable[str]): Error keys to refresh.

    Returns:
        dict[str, str]: The updated error map (a new dict).
    """
    errors = dict(current_errors)
    for key in fields:
        if key in result.errors:
            errors[key] = result.errors[key]
        else:
            errors.pop(key, None)
    return errors
