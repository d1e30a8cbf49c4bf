"""Request Pricing — validates line items and derives item and request totals.

Invariants:
    - At least one item per request
    - quantity is a positive int <= MAX_QUANTITY (fits a 32-bit INTEGER column)
    - unit_price, total_price and total_amount are positive and <= MAX_AMOUNT
      (fit NUMERIC(12, 2)); unit_price has <= 2 decimal places
    - total_price == quantity * unit_price and total_amount == sum(total_price), exact
    - Amounts are quantized to CENT; no float arithmetic anywhere

Design Decisions:
    - Decimal over float: the stored total must equal the sum of stored item totals
    - Magnitude checked before quantize: quantize raises InvalidOperation once a
      value needs more digits than the decimal context holds
"""

from decimal import Decimal, InvalidOperation

from approvals.core.entities import NewPurchaseItem, PricedItem
from approvals.core.errors import WorkflowValidationError

CENT = Decimal("0.01")
MAX_QUANTITY = 2_147_483_647
MAX_AMOUNT = Decimal("9999999999.99")


def price_items(items: list[NewPurchaseItem]) -> list[PricedItem]:
    """Validate items and attach per-item totals."""
    if not items:
        raise WorkflowValidationError(
            "A purchase request needs at least one item", "items",
        )
    return [_price_item(i, item) for i, item in enumerate(items)]


def request_total(items: list[PricedItem]) -> Decimal:
    total = sum((item.total_price for item in items), Decimal("0"))
    if total > MAX_AMOUNT:
        raise WorkflowValidationError(
            f"Request total cannot exceed {MAX_AMOUNT}", "items",
        )
    return total.quantize(CENT)


def _price_item(index: int, item: NewPurchaseItem) -> PricedItem:
    field = f"items.{index}"
    if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) \
            or item.quantity <= 0:
        raise WorkflowValidationError(
            "Item quantity must be a positive integer", f"{field}.quantity",
        )
    if item.quantity > MAX_QUANTITY:
        raise WorkflowValidationError(
            f"Item quantity cannot exceed {MAX_QUANTITY}", f"{field}.quantity",
        )
    unit_price = _as_money(item.unit_price, f"{field}.unit_price")
    total_price = unit_price * item.quantity
    if total_price > MAX_AMOUNT:
        raise WorkflowValidationError(
            f"Item total cannot exceed {MAX_AMOUNT}", field,
        )
    return PricedItem(
        description=item.description,
        quantity=item.quantity,
        unit_price=unit_price,
        total_price=total_price.quantize(CENT),
    )


def _as_money(value, field: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise WorkflowValidationError("Unit price must be a number", field)
    if not amount.is_finite() or amount <= 0:
        raise WorkflowValidationError("Unit price must be positive", field)
    if amount > MAX_AMOUNT:
        raise WorkflowValidationError(f"Unit price cannot exceed {MAX_AMOUNT}", field)
    if amount != amount.quantize(CENT):
        raise WorkflowValidationError(
            "Unit price cannot have more than 2 decimal places", field,
        )
    return amount.quantize(CENT)
