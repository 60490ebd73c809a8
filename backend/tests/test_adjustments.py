from decimal import Decimal

import pytest

from models.cart import CartLine, LineStatus
from models.discount import DiscountKind
from services import adjustments, billing, cart_store, kitchen, sessions, split_ledger
from services.errors import NotFoundError, OrderingError

VAT = Decimal("0.14")


@pytest.fixture
def confirmed(db, table, menu):
    pizza = cart_store.add_item(db, table, "Alice", menu["pizza"])
    platter = cart_store.add_item(db, table, "Bob", menu["platter"])
    cart_store.confirm_cart(db, table)
    db.commit()
    return {"pizza": pizza.id, "platter": platter.id}


def test_voided_line_leaves_the_bill_and_the_kitchen(db, table, confirmed):
    lines = adjustments.void_lines(db, table, [confirmed["pizza"]], "sent back cold")
    db.commit()

    assert lines[0].status == LineStatus.VOIDED
    assert lines[0].void_reason == "sent back cold"
    assert lines[0].voided_at is not None

    bill = billing.compute_session_bill(db, table, VAT)
    assert (bill.subtotal, bill.line_count) == (Decimal("100.00"), 1)
    assert billing.compute_diner_bill(db, table, "Alice", VAT).total == Decimal("0.00")
    assert [line.id for line in kitchen.kitchen_queue(db)] == [confirmed["platter"]]
    assert [line.id for line in cart_store.list_orders(db, table)] == [confirmed["platter"]]


def test_voiding_a_split_line_clears_every_share(db, table, menu):
    shared = cart_store.add_item(db, table, "Alice", menu["platter"], is_shared=True)
    split_ledger.create_split(db, shared.id, ["Alice", "Bob"])
    cart_store.confirm_cart(db, table)
    db.commit()

    adjustments.void_lines(db, table, [shared.id])
    db.commit()

    assert db.get(CartLine, shared.id).void_reason == "manager_override"
    for name in ("Alice", "Bob"):
        assert billing.compute_diner_bill(db, table, name, VAT).shared_total == Decimal("0.00")


def test_only_confirmed_lines_of_the_session_can_be_voided(db, table, menu, confirmed):
    pending = cart_store.add_item(db, table, "Carol", menu["lemonade"])
    db.commit()
    with pytest.raises(NotFoundError):
        adjustments.void_lines(db, table, [pending.id])
    db.rollback()

    adjustments.void_lines(db, table, [confirmed["pizza"]])
    db.commit()
    with pytest.raises(NotFoundError):
        adjustments.void_lines(db, table, [confirmed["pizza"]])
    db.rollback()

    other = sessions.open_session(db, 12)
    db.commit()
    with pytest.raises(NotFoundError):
        adjustments.void_lines(db, other.id, [confirmed["platter"]])
    db.rollback()


def test_fixed_discount_comes_off_before_vat(db, table, confirmed):
    adjustments.apply_discount(db, table, DiscountKind.FIXED, Decimal("10.00"), "birthday")
    db.commit()

    bill = billing.compute_session_bill(db, table, VAT)
    assert bill.subtotal == Decimal("132.00")
    assert bill.discount == Decimal("10.00")
    assert (bill.vat, bill.total) == (Decimal("17.08"), Decimal("139.08"))


def test_percentage_discount_is_shared_in_proportion(db, table, confirmed):
    adjustments.apply_discount(db, table, "percentage", 50)
    db.commit()

    bill = billing.compute_session_bill(db, table, VAT)
    assert (bill.discount, bill.total) == (Decimal("66.00"), Decimal("75.24"))

    alice = billing.compute_diner_bill(db, table, "Alice", VAT)
    bob = billing.compute_diner_bill(db, table, "Bob", VAT)
    assert (alice.subtotal, alice.discount, alice.total) == (Decimal("32.00"), Decimal("16.00"), Decimal("18.24"))
    assert (bob.discount, bob.total) == (Decimal("50.00"), Decimal("57.00"))
    assert alice.total + bob.total == bill.total


def test_discounts_stack_and_never_go_below_zero(db, table, confirmed):
    adjustments.apply_discount(db, table, DiscountKind.FIXED, Decimal("100.00"))
    adjustments.apply_discount(db, table, DiscountKind.PERCENTAGE, Decimal("50"))
    db.commit()

    bill = billing.compute_session_bill(db, table, VAT)
    assert bill.discount == bill.subtotal == Decimal("132.00")
    assert bill.total == Decimal("0.00")


def test_invalid_discounts(db, table):
    with pytest.raises(OrderingError):
        adjustments.apply_discount(db, table, DiscountKind.FIXED, Decimal("0"))
    with pytest.raises(OrderingError):
        adjustments.apply_discount(db, table, DiscountKind.PERCENTAGE, Decimal("120"))
    with pytest.raises(OrderingError):
        adjustments.apply_discount(db, table, "voucher", Decimal("5"))
    with pytest.raises(OrderingError):
        adjustments.adjust_bill(db, table)
