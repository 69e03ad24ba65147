from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
TOLERANCE = Decimal("0.01")


def to_money(value) -> Decimal:
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Charges:
    units: Decimal
    meter_bill: Decimal
    total: Decimal


def derive_charges(
    previous_meter_reading,
    current_meter_reading,
    unit_price,
    rent_paid,
) -> Charges:
    previous = Decimal(str(previous_meter_reading))
    current = Decimal(str(current_meter_reading))
    if current < previous:
        raise ValueError(
            "current_meter_reading must not be less than previous_meter_reading"
        )

    units = current - previous
    meter_bill = units * Decimal(str(unit_price))
    total = Decimal(str(rent_paid)) + meter_bill
    return Charges(
        units=to_money(units),
        meter_bill=to_money(meter_bill),
        total=to_money(total),
    )


def verify_charges(
    *,
    previous_meter_reading,
    current_meter_reading,
    unit_price,
    rent_paid,
    units,
    meter_bill,
    total,
) -> Charges:
    expected = derive_charges(
        previous_meter_reading, current_meter_reading, unit_price, rent_paid
    )
    supplied = {"units": units, "meter_bill": meter_bill, "total": total}
    for field, value in supplied.items():
        wanted = getattr(expected, field)
        if abs(Decimal(str(value)) - wanted) > TOLERANCE:
            raise ValueError(f"{field} should be {wanted}, got {value}")
    return expected
