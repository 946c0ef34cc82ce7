# dental_core/prescriptions/services.py
from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from dental_core.appointments.models import Appointment
from dental_core.audit.services import AuditService
from dental_core.common.api.exceptions import InvalidState, NotFound
from dental_core.common.events import publish_on_commit
from dental_core.inventory.models import InventoryItem, InventoryTransactionKind
from dental_core.inventory.selectors import existing_item_ids
from dental_core.inventory.services import InventoryLedger
from dental_core.patients.selectors import patient_exists
from dental_core.prescriptions.models import MEDICATIONS_VERSION, Prescription, PrescriptionStatus

logger = logging.getLogger(__name__)


def _normalize_lines(medications: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not medications:
        raise ValidationError({"medications": "At least one medication line is required."})

    lines = []
    for idx, raw in enumerate(medications):
        quantity = int(raw.get("quantity") or 0)
        if quantity < 1:
            raise ValidationError({"medications": f"Line {idx + 1}: quantity must be at least 1."})
        item_id = raw.get("inventory_item_id")
        lines.append(
            {
                "name": str(raw.get("name") or "").strip(),
                "dosage": str(raw.get("dosage") or "").strip(),
                "quantity": quantity,
                "instructions": str(raw.get("instructions") or "").strip(),
                "inventory_item_id": str(item_id) if item_id else None,
            }
        )
    return lines


def stock_demand(medications: List[Dict[str, Any]]) -> "OrderedDict[UUID, int]":
    """
    Total quantity per inventory item, keyed in ascending item id order.

    Lines without an inventory item are not stock-tracked. Several lines naming the
    same item are summed so each row is decremented exactly once.
    """
    demand: Dict[UUID, int] = {}
    for line in medications or []:
        item_id = line.get("inventory_item_id")
        if not item_id:
            continue
        key = UUID(str(item_id))
        demand[key] = demand.get(key, 0) + int(line.get("quantity") or 0)
    return OrderedDict((k, demand[k]) for k in sorted(demand))


class PrescriptionService:
    """
    Prescription state machine: PENDING -> FILLED | CANCELLED.
    """

    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        actor_user_id: int | None,
        patient_id: UUID,
        medications: List[Dict[str, Any]],
        instructions: str = "",
        valid_until: Optional[date] = None,
        appointment_id: Optional[UUID] = None,
    ) -> Prescription:
        if not patient_exists(tenant_id=tenant_id, patient_id=patient_id):
            raise NotFound("Patient")

        if appointment_id is not None:
            appt_ok = Appointment.objects.filter(
                id=appointment_id, tenant_id=tenant_id, patient_id=patient_id
            ).exists()
            if not appt_ok:
                raise NotFound("Appointment")

        lines = _normalize_lines(medications)

        referenced = set(stock_demand(lines))
        if referenced and existing_item_ids(tenant_id=tenant_id, item_ids=referenced) != referenced:
            raise NotFound("Inventory item")

        rx = Prescription.objects.create(
            tenant_id=tenant_id,
            patient_id=patient_id,
            doctor_user_id=actor_user_id,
            appointment_id=appointment_id,
            medications=lines,
            medications_version=MEDICATIONS_VERSION,
            instructions=instructions or "",
            valid_until=valid_until,
            status=PrescriptionStatus.PENDING,
        )

        AuditService.log(
            action="prescription.created",
            subject_type="prescription",
            subject_id=rx.id,
            tenant_id=tenant_id,
            actor_user_id=actor_user_id,
            to_state=rx.status,
            metadata={"patient_id": str(patient_id), "lines": len(lines)},
        )
        return rx

    @staticmethod
    @transaction.atomic
    def fulfill(*, prescription_id: UUID, tenant_id: UUID, actor_user_id: int | None) -> dict:
        """
        Dispense a PENDING prescription: decrement every stock-tracked line and move to
        FILLED, all in one transaction. Any failing line (StockInsufficient, NotFound)
        propagates and rolls back every deduction made so far.

        The prescription row is locked first, so a concurrent second fulfill waits and
        then observes FILLED (InvalidState) instead of deducting twice.
        """
        rx = Prescription.objects.select_for_update().filter(id=prescription_id, tenant_id=tenant_id).first()
        if rx is None:
            raise NotFound("Prescription")

        if rx.status != PrescriptionStatus.PENDING:
            raise InvalidState(f"Prescription is {rx.status}; only PENDING prescriptions can be fulfilled.")

        demand = stock_demand(rx.medications)

        deltas = []
        for item_id, amount in demand.items():
            new_quantity = InventoryLedger.decrement_if_sufficient(
                tenant_id=tenant_id,
                item_id=item_id,
                amount=amount,
            )
            deltas.append({"inventory_item_id": str(item_id), "delta": -amount, "quantity_after": new_quantity})

        items = InventoryItem.objects.in_bulk(list(demand))
        for d in deltas:
            InventoryLedger.record_movement(
                item=items[UUID(d["inventory_item_id"])],
                kind=InventoryTransactionKind.DISPENSED,
                quantity_delta=d["delta"],
                quantity_after=d["quantity_after"],
                actor_user_id=actor_user_id,
                reference=f"prescription:{rx.id}",
            )

        from_status = rx.status
        rx.status = PrescriptionStatus.FILLED
        rx.dispensed_at = timezone.now()
        rx.dispensed_by_user_id = actor_user_id
        rx.save(update_fields=["status", "dispensed_at", "dispensed_by_user_id", "updated_at"])

        AuditService.log(
            action="prescription.filled",
            subject_type="prescription",
            subject_id=rx.id,
            tenant_id=tenant_id,
            actor_user_id=actor_user_id,
            from_state=from_status,
            to_state=rx.status,
            metadata={"deltas": deltas},
        )

        logger.info("prescription %s filled (%d stock lines)", rx.id, len(deltas))
        publish_on_commit(
            "prescription.filled",
            {"tenant_id": str(tenant_id), "prescription_id": str(rx.id), "patient_id": str(rx.patient_id)},
        )

        return {
            "prescription_id": str(rx.id),
            "status": rx.status,
            "dispensed_at": rx.dispensed_at,
        }

    @staticmethod
    @transaction.atomic
    def cancel(
        *,
        prescription_id: UUID,
        tenant_id: UUID,
        reason: str,
        actor_user_id: int | None,
    ) -> Prescription:
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError({"reason": "This field is required."})

        rx = Prescription.objects.select_for_update().filter(id=prescription_id, tenant_id=tenant_id).first()
        if rx is None:
            raise NotFound("Prescription")

        if rx.status != PrescriptionStatus.PENDING:
            raise InvalidState(f"Prescription is {rx.status}; only PENDING prescriptions can be cancelled.")

        from_status = rx.status
        rx.status = PrescriptionStatus.CANCELLED
        rx.cancelled_at = timezone.now()
        rx.cancelled_by_user_id = actor_user_id
        rx.cancel_reason = reason[:500]
        rx.save(update_fields=["status", "cancelled_at", "cancelled_by_user_id", "cancel_reason", "updated_at"])

        AuditService.log(
            action="prescription.cancelled",
            subject_type="prescription",
            subject_id=rx.id,
            tenant_id=tenant_id,
            actor_user_id=actor_user_id,
            from_state=from_status,
            to_state=rx.status,
            reason=reason,
        )

        logger.info("prescription %s cancelled", rx.id)
        publish_on_commit(
            "prescription.cancelled",
            {"tenant_id": str(tenant_id), "prescription_id": str(rx.id), "patient_id": str(rx.patient_id)},
        )
        return rx
