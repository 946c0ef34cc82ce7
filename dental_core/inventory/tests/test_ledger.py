# dental_core/inventory/tests/test_ledger.py
import uuid

import pytest

from dental_core.audit.models import AuditEntry
from dental_core.common.api.exceptions import InvalidQuantity, NotFound, StockInsufficient
from dental_core.inventory.models import InventoryItem, InventoryTransaction, InventoryTransactionKind
from dental_core.inventory.selectors import low_stock_items
from dental_core.inventory.services import InventoryLedger

pytestmark = pytest.mark.django_db


def test_decrement_returns_new_quantity(tenant, item):
    new_qty = InventoryLedger.decrement_if_sufficient(tenant_id=tenant.id, item_id=item.id, amount=4)
    assert new_qty == 6
    item.refresh_from_db()
    assert item.quantity == 6


def test_decrement_to_exactly_zero(tenant, make_item):
    it = make_item(quantity=3)
    assert InventoryLedger.decrement_if_sufficient(tenant_id=tenant.id, item_id=it.id, amount=3) == 0


def test_decrement_insufficient_leaves_row_untouched(tenant, make_item):
    it = make_item(quantity=1)

    with pytest.raises(StockInsufficient) as exc:
        InventoryLedger.decrement_if_sufficient(tenant_id=tenant.id, item_id=it.id, amount=2)

    assert exc.value.available == 1
    assert exc.value.requested == 2
    it.refresh_from_db()
    assert it.quantity == 1


def test_decrement_other_tenant_item_is_not_found(other_tenant, item):
    with pytest.raises(NotFound):
        InventoryLedger.decrement_if_sufficient(tenant_id=other_tenant.id, item_id=item.id, amount=1)
    item.refresh_from_db()
    assert item.quantity == 10


def test_decrement_unknown_item_is_not_found(tenant):
    with pytest.raises(NotFound):
        InventoryLedger.decrement_if_sufficient(tenant_id=tenant.id, item_id=uuid.uuid4(), amount=1)


@pytest.mark.parametrize("amount", [0, -3])
def test_decrement_rejects_non_positive_amount(tenant, item, amount):
    with pytest.raises(InvalidQuantity):
        InventoryLedger.decrement_if_sufficient(tenant_id=tenant.id, item_id=item.id, amount=amount)


def test_adjust_writes_audit_and_movement(tenant, item, inventory_manager):
    updated = InventoryLedger.adjust(
        tenant_id=tenant.id,
        item_id=item.id,
        delta=-3,
        reason="Expired stock",
        actor_user_id=inventory_manager.id,
    )
    assert updated.quantity == 7

    entry = AuditEntry.objects.get(subject_id=item.id, action="inventory.adjusted")
    assert entry.tenant_id == tenant.id
    assert entry.actor_user_id == inventory_manager.id
    assert entry.reason == "Expired stock"
    assert entry.metadata == {"quantity_before": 10, "quantity_after": 7, "delta": -3}

    txn = InventoryTransaction.objects.get(item=item)
    assert txn.kind == InventoryTransactionKind.ADJUSTED
    assert txn.quantity_delta == -3
    assert txn.quantity_after == 7


def test_adjust_below_zero_is_rejected_without_effects(tenant, item):
    with pytest.raises(InvalidQuantity):
        InventoryLedger.adjust(tenant_id=tenant.id, item_id=item.id, delta=-11, reason="Count", actor_user_id=None)

    item.refresh_from_db()
    assert item.quantity == 10
    assert not AuditEntry.objects.filter(subject_id=item.id).exists()


def test_adjust_zero_delta_is_rejected(tenant, item):
    with pytest.raises(InvalidQuantity):
        InventoryLedger.adjust(tenant_id=tenant.id, item_id=item.id, delta=0, reason="Noop", actor_user_id=None)


def test_adjust_requires_reason(tenant, item):
    with pytest.raises(InvalidQuantity):
        InventoryLedger.adjust(tenant_id=tenant.id, item_id=item.id, delta=5, reason="  ", actor_user_id=None)


def test_adjust_other_tenant_is_not_found(other_tenant, item):
    with pytest.raises(NotFound):
        InventoryLedger.adjust(tenant_id=other_tenant.id, item_id=item.id, delta=1, reason="x", actor_user_id=None)


def test_low_stock_is_derived_from_quantity(tenant, make_item):
    it = make_item(quantity=3, reorder_threshold=2)
    assert not it.is_low_stock
    assert list(low_stock_items(tenant_id=tenant.id)) == []

    InventoryLedger.decrement_if_sufficient(tenant_id=tenant.id, item_id=it.id, amount=1)
    it.refresh_from_db()
    assert it.is_low_stock
    assert [i.id for i in low_stock_items(tenant_id=tenant.id)] == [it.id]


def test_low_stock_scoped_to_tenant(tenant, other_tenant, make_item):
    make_item(quantity=0, reorder_threshold=5, tenant_id=other_tenant.id)
    assert low_stock_items(tenant_id=tenant.id).count() == 0


def test_crossing_threshold_publishes_after_commit(
    tenant, make_item, captured_events, django_capture_on_commit_callbacks
):
    it = make_item(quantity=5, reorder_threshold=3)

    with django_capture_on_commit_callbacks(execute=True):
        InventoryLedger.adjust(tenant_id=tenant.id, item_id=it.id, delta=-1, reason="Count", actor_user_id=None)
    assert captured_events == []

    with django_capture_on_commit_callbacks(execute=True):
        InventoryLedger.adjust(tenant_id=tenant.id, item_id=it.id, delta=-1, reason="Count", actor_user_id=None)

    assert [name for name, _ in captured_events] == ["inventory.low_stock"]
    assert captured_events[0][1]["inventory_item_id"] == str(it.id)
    assert captured_events[0][1]["quantity"] == 3


def test_create_item_records_initial_stock(tenant, admin_user):
    it = InventoryLedger.create_item(
        tenant_id=tenant.id,
        actor_user_id=admin_user.id,
        name="Lidocaine",
        quantity=20,
        reorder_threshold=5,
    )
    assert InventoryItem.objects.get(id=it.id).quantity == 20
    txn = InventoryTransaction.objects.get(item=it)
    assert txn.kind == InventoryTransactionKind.RECEIVED
    assert txn.quantity_after == 20
