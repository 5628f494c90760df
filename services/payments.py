from errors import InvalidPartialPayment, ValidationError
from models.payment_line import money, PAYMENT_STATUSES

UNPAID = 'unpaid'
PARTIALLY_PAID = 'partially_paid'
FULLY_PAID = 'fully_paid'

# tolerance when comparing amount paid with the line total
PAID_TOLERANCE = 0.01


def normalize_status(status):
    status = (status or UNPAID).strip()
    if status == 'paid':
        return FULLY_PAID
    if status not in PAYMENT_STATUSES:
        raise ValidationError(f'Unknown payment status: {status}')
    return status


def resolve_amount_paid(status, quantity, price, amount_paid=0):
    """Return (status, amount_paid) with the amount forced to agree with the status."""
    status = normalize_status(status)
    total = money((quantity or 0) * (price or 0))
    if status == UNPAID:
        return status, 0.0
    if status == FULLY_PAID:
        return status, total
    amount_paid = money(amount_paid)
    if amount_paid >= total:
        raise InvalidPartialPayment(
            f'For partial payment, amount paid ({amount_paid:.2f}) must be less than total amount ({total:.2f})')
    if amount_paid <= 0:
        raise InvalidPartialPayment('For partial payment, amount paid must be greater than 0')
    return status, amount_paid


def derive_payment_status(amount_paid, total):
    if amount_paid <= 0 or total <= 0:
        return UNPAID
    if abs(amount_paid - total) < PAID_TOLERANCE:
        return FULLY_PAID
    return PARTIALLY_PAID


def apply_payment(line, status, amount_paid):
    """Set status and amount paid on a product line after resolving them."""
    line.payment_status, line.amount_paid = resolve_amount_paid(
        status, line.quantity, line.price, amount_paid)
    return line
