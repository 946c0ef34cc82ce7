# dental_core/prescriptions/tests/test_fulfill.py
import uuid

import pytest

from dental_core.audit.models import AuditEntry
from dental_core.common.api.exceptions import InvalidState, NotFound, StockInsufficient
from dental_core.inventory.models import InventoryTransaction, InventoryTransactionKind
from dental_core.prescriptions.models import PrescriptionStatus
from dental_core.prescriptions.services import PrescriptionService, stock_demand

pytestmark = pytest.mark.django_db


def _line(item, quantity, name="Amoxicillin"):
    return {"name": name, "dosage": "500mg", "quantity": quantity, "inventory_item_id": str(item.id)}


def test_fulfill_decrements_stock_and_fills(tenant, item, make_prescription, inventory_manager):
    rx = make_prescription([_line(item, 2)])

    result = PrescriptionService.fulfill(prescription_id=rx.id, tenant_id=tenant.id, actor_user_id=inventory_manager.id)

    assert result["status"] == PrescriptionStatus.FILLED
    assert result["prescription_id"] == str(rx.id)
    assert result["dispensed_at"] is not None

    item.refresh_from_db()
    assert item.quantity == 8

    rx.refresh_from_db()
    assert rx.status == PrescriptionStatus.FILLED
    assert rx.dispensed_by_user_id == inventory_manager.id

    entry = AuditEntry.objects.get(subject_id=rx.id, action="prescription.filled")
    assert entry.from_state == "PENDING"
    assert entry.to_state == "FILLED"
    assert entry.metadata["deltas"] == [
        {"inventory_item_id": str(item.id), "delta": -2, "quantity_after": 8}
    ]

    txn = InventoryTransaction.objects.get(item=item)
    assert txn.kind == InventoryTransactionKind.DISPENSED
    assert txn.reference == f"prescription:{rx.id}"


def test_second_fulfill_is_invalid_state_without_double_deduction(tenant, item, make_prescription):
    rx = make_prescription([_line(item, 2)])
    PrescriptionService.fulfill(prescription_id=rx.id, tenant_id=tenant.id, actor_user_id=None)

    with pytest.raises(InvalidState):
        PrescriptionService.fulfill(prescription_id=rx.id, tenant_id=tenant.id, actor_user_id=None)

    item.refresh_from_db()
    assert item.quantity == 8


def test_insufficient_line_rolls_back_every_deduction(tenant, make_item, make_prescription):
    # ids fix the lock order: plenty is decremented before scarce fails
    plenty = make_item(name="Ibuprofen", quantity=10, id=uuid.UUID(int=1))
    scarce = make_item(name="Chlorhexidine", quantity=1, id=uuid.UUID(int=2))
    rx = make_prescription([_line(plenty, 3, "Ibuprofen"), _line(scarce, 2, "Chlorhexidine")])

    with pytest.raises(StockInsufficient) as exc:
        PrescriptionService.fulfill(prescription_id=rx.id, tenant_id=tenant.id, actor_user_id=None)

    assert exc.value.details["available"] == 1
    assert exc.value.details["requested"] == 2

    plenty.refresh_from_db()
    scarce.refresh_from_db()
    rx.refresh_from_db()
    assert plenty.quantity == 10
    assert scarce.quantity == 1
    assert rx.status == PrescriptionStatus.PENDING
    assert not AuditEntry.objects.filter(subject_id=rx.id, action="prescription.filled").exists()
    assert not InventoryTransaction.objects.exists()


def test_sequential_fulfills_cannot_oversell(tenant, make_item, make_prescription):
    it = make_item(quantity=10)
    first = make_prescription([_line(it, 6)])
    second = make_prescription([_line(it, 6)])

    PrescriptionService.fulfill(prescription_id=first.id, tenant_id=tenant.id, actor_user_id=None)
    with pytest.raises(StockInsufficient) as exc:
        PrescriptionService.fulfill(prescription_id=second.id, tenant_id=tenant.id, actor_user_id=None)

    assert exc.value.details == {"available": 4, "requested": 6, "inventory_item_id": str(it.id)}
    it.refresh_from_db()
    second.refresh_from_db()
    assert it.quantity == 4
    assert second.status == PrescriptionStatus.PENDING


def test_lines_for_same_item_are_summed(tenant, make_item, make_prescription):
    it = make_item(quantity=5)
    rx = make_prescription([_line(it, 2), _line(it, 2)])

    PrescriptionService.fulfill(prescription_id=rx.id, tenant_id=tenant.id, actor_user_id=None)

    it.refresh_from_db()
    assert it.quantity == 1
    assert InventoryTransaction.objects.filter(item=it).count() == 1


def test_summed_demand_can_exceed_stock(tenant, make_item, make_prescription):
    it = make_item(quantity=3)
    rx = make_prescription([_line(it, 2), _line(it, 2)])

    with pytest.raises(StockInsufficient):
        PrescriptionService.fulfill(prescription_id=rx.id, tenant_id=tenant.id, actor_user_id=None)

    it.refresh_from_db()
    assert it.quantity == 3


def test_lines_without_inventory_item_are_not_stock_tracked(tenant, make_prescription):
    rx = make_prescription([{"name": "Warm salt rinse", "dosage": "3x daily", "quantity": 1}])

    result = PrescriptionService.fulfill(prescription_id=rx.id, tenant_id=tenant.id, actor_user_id=None)

    assert result["status"] == PrescriptionStatus.FILLED
    assert not InventoryTransaction.objects.exists()


def test_fulfill_from_other_tenant_is_not_found(other_tenant, item, make_prescription):
    rx = make_prescription([_line(item, 1)])

    with pytest.raises(NotFound):
        PrescriptionService.fulfill(prescription_id=rx.id, tenant_id=other_tenant.id, actor_user_id=None)

    item.refresh_from_db()
    assert item.quantity == 10


def test_fulfill_unknown_prescription(tenant):
    with pytest.raises(NotFound):
        PrescriptionService.fulfill(prescription_id=uuid.uuid4(), tenant_id=tenant.id, actor_user_id=None)


def test_fulfill_publishes_after_commit(tenant, item, make_prescription, captured_events, django_capture_on_commit_callbacks):
    rx = make_prescription([_line(item, 1)])

    with django_capture_on_commit_callbacks(execute=True):
        PrescriptionService.fulfill(prescription_id=rx.id, tenant_id=tenant.id, actor_user_id=None)

    assert ("prescription.filled", {
        "tenant_id": str(tenant.id),
        "prescription_id": str(rx.id),
        "patient_id": str(rx.patient_id),
    }) in captured_events


def test_failed_fulfill_publishes_nothing(tenant, make_item, make_prescription, captured_events, django_capture_on_commit_callbacks):
    it = make_item(quantity=0)
    rx = make_prescription([_line(it, 1)])

    with django_capture_on_commit_callbacks(execute=True):
        with pytest.raises(StockInsufficient):
            PrescriptionService.fulfill(prescription_id=rx.id, tenant_id=tenant.id, actor_user_id=None)

    assert captured_events == []


def test_stock_demand_orders_by_item_id():
    a, b = sorted([uuid.uuid4(), uuid.uuid4()])
    demand = stock_demand(
        [
            {"inventory_item_id": str(b), "quantity": 1},
            {"inventory_item_id": None, "quantity": 9},
            {"inventory_item_id": str(a), "quantity": 2},
            {"inventory_item_id": str(b), "quantity": 4},
        ]
    )
    assert list(demand.items()) == [(a, 2), (b, 5)]
