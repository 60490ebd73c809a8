from decimal import Decimal

import pytest

from services import billing, cart_store, payments, split_ledger
from services.errors import NotFoundError, PaymentError

VAT = Decimal("0.14")


def test_vat_on_a_single_diner_bill(db, table, menu):
    line = cart_store.add_item(db, table, "Alice", menu["platter"])
    cart_store.set_quantity(db, line.id, 2)
    cart_store.confirm_cart(db, table)
    db.commit()

    bill = billing.compute_session_bill(db, table, VAT)
    assert (bill.subtotal, bill.vat, bill.total) == (Decimal("200.00"), Decimal("28.00"), Decimal("228.00"))
    assert bill.line_count == 1

    alice = billing.compute_diner_bill(db, table, "Alice", VAT)
    assert alice.personal_total == Decimal("200.00")
    assert alice.total == Decimal("228.00")


def test_only_confirmed_lines_are_billed(db, table, menu):
    cart_store.add_item(db, table, "Alice", menu["pizza"])
    cart_store.confirm_cart(db, table)
    cart_store.add_item(db, table, "Alice", menu["lemonade"])
    db.commit()

    assert billing.compute_session_bill(db, table, VAT).subtotal == Decimal("32.00")
    assert billing.compute_diner_bill(db, table, "Alice", VAT).subtotal == Decimal("32.00")


def test_shared_line_full_price_on_table_share_on_diner(db, table, menu):
    shared = cart_store.add_item(db, table, "Alice", menu["platter"], is_shared=True)
    split_ledger.create_split(db, shared.id, ["Alice", "Bob", "Carol"])
    cart_store.add_item(db, table, "Alice", menu["pizza"])
    cart_store.add_item(db, table, "Bob", menu["lemonade"])
    cart_store.confirm_cart(db, table)
    db.commit()

    table_bill = billing.compute_session_bill(db, table, VAT)
    assert table_bill.subtotal == Decimal("144.00")

    alice = billing.compute_diner_bill(db, table, "Alice", VAT)
    assert alice.personal_total == Decimal("32.00")
    assert alice.shared_total == Decimal("33.33")
    assert alice.subtotal == Decimal("65.33")

    dave = billing.compute_diner_bill(db, table, "Dave", VAT)
    assert dave.subtotal == Decimal("0.00")

    diner_bills = billing.compute_all_diner_bills(db, table, VAT)
    assert [b.diner_name for b in diner_bills] == ["Alice", "Bob", "Carol", "Dave"]
    # Every cent of the table bill is owed by somebody, up to per-diner rounding
    drift = abs(sum(b.subtotal for b in diner_bills) - table_bill.subtotal)
    assert drift <= Decimal("0.01") * len(diner_bills)


def test_shared_flag_without_split_bills_to_owner(db, table, menu):
    cart_store.add_item(db, table, "Bob", menu["platter"], is_shared=True)
    cart_store.confirm_cart(db, table)
    db.commit()

    assert billing.compute_diner_bill(db, table, "Bob", VAT).personal_total == Decimal("100.00")
    assert billing.compute_diner_bill(db, table, "Alice", VAT).subtotal == Decimal("0.00")


def test_bills_are_repeatable(db, table, menu):
    shared = cart_store.add_item(db, table, "Alice", menu["platter"], is_shared=True)
    split_ledger.create_split(db, shared.id, ["Alice", "Bob"])
    cart_store.confirm_cart(db, table)
    db.commit()

    assert billing.compute_session_bill(db, table, VAT) == billing.compute_session_bill(db, table, VAT)
    assert billing.compute_diner_bill(db, table, "Bob", VAT) == billing.compute_diner_bill(db, table, "Bob", VAT)


def test_vat_rate_is_injected(db, table, menu):
    cart_store.add_item(db, table, "Alice", menu["platter"])
    cart_store.confirm_cart(db, table)
    db.commit()

    assert billing.compute_session_bill(db, table, Decimal("0.20")).total == Decimal("120.00")
    assert billing.compute_session_bill(db, table, Decimal("0")).vat == Decimal("0.00")


def test_unknown_diner_has_no_bill(db, table):
    with pytest.raises(NotFoundError):
        billing.compute_diner_bill(db, table, "Zed", VAT)


def test_payments_settle_a_diner(db, table, menu):
    cart_store.add_item(db, table, "Alice", menu["pizza"])
    cart_store.confirm_cart(db, table)
    db.commit()

    payments.record_payment(db, table, "Alice", VAT, amount=Decimal("20.00"))
    db.commit()
    status = payments.diner_status(db, table, "Alice", VAT)
    assert status.bill_total == Decimal("36.48")
    assert status.outstanding == Decimal("16.48")
    assert not status.is_paid

    with pytest.raises(PaymentError):
        payments.record_payment(db, table, "Alice", VAT, amount=Decimal("50.00"))
    db.rollback()

    payment = payments.record_payment(db, table, "Alice", VAT, tip=Decimal("3.50"))
    db.commit()
    assert payment.amount == Decimal("16.48")
    assert payments.diner_status(db, table, "Alice", VAT).is_paid

    with pytest.raises(PaymentError):
        payments.record_payment(db, table, "Alice", VAT)
    db.rollback()


def test_nothing_to_pay_without_orders(db, table):
    with pytest.raises(PaymentError):
        payments.record_payment(db, table, "Dave", VAT)
    overview = payments.payment_overview(db, table, VAT)
    assert [s.outstanding for s in overview] == [Decimal("0.00")] * 4


def test_diner_personal_totals_and_split_prices_add_up_to_table_subtotal(db, table, menu):
    platter = cart_store.add_item(db, table, "Alice", menu["platter"], is_shared=True)
    split_ledger.create_split(db, platter.id, ["Alice", "Bob", "Carol"])
    lemonade = cart_store.add_item(db, table, "Bob", menu["lemonade"], is_shared=True)
    split_ledger.create_split(db, lemonade.id, ["Bob", "Dave"])
    # Marked shared but never split: stays personal to Carol
    cart_store.add_item(db, table, "Carol", menu["pizza"], is_shared=True)
    cart_store.add_item(db, table, "Alice", menu["pizza"])
    cart_store.confirm_cart(db, table)
    db.commit()

    table_bill = billing.compute_session_bill(db, table, VAT)
    personal = sum(b.personal_total for b in billing.compute_all_diner_bills(db, table, VAT))
    shared = sum(Decimal(split_ledger.get_split(db, line_id).original_price) for line_id in (platter.id, lemonade.id))

    assert personal == Decimal("64.00")
    assert shared == Decimal("112.00")
    assert personal + shared == table_bill.subtotal == Decimal("176.00")
