# dental_core/iam/tests/test_capabilities.py
from dental_core.iam import capabilities as caps
from dental_core.iam.capabilities import merge_capabilities


def test_merge_dedupes_by_action():
    merged = merge_capabilities(["DOCTOR", "NURSE"])
    actions = [c.action for c in merged]
    assert len(actions) == len(set(actions))
    assert merged.has(caps.PRESCRIPTIONS_CREATE)
    assert merged.has(caps.CLINICAL_VIEW)


def test_first_role_wins_display_metadata():
    doctor_first = merge_capabilities(["DOCTOR", "NURSE"]).get(caps.APPOINTMENTS_VIEW)
    nurse_first = merge_capabilities(["NURSE", "DOCTOR"]).get(caps.APPOINTMENTS_VIEW)

    assert doctor_first.label == "My Appointments"
    assert doctor_first.href == "/appointments/mine"
    assert nurse_first.label == "Appointments"
    assert nurse_first.href == "/appointments"


def test_union_is_order_independent_for_actions():
    a = merge_capabilities(["RECEPTIONIST", "INVENTORY_MANAGER"]).actions
    b = merge_capabilities(["INVENTORY_MANAGER", "RECEPTIONIST"]).actions
    assert a == b


def test_unknown_roles_are_ignored():
    merged = merge_capabilities(["NOT_A_ROLE", "NURSE"])
    assert merged.actions == merge_capabilities(["NURSE"]).actions


def test_empty_roles_grant_nothing():
    merged = merge_capabilities([])
    assert len(merged) == 0
    assert not merged.has(caps.PATIENTS_VIEW)


def test_navigation_keeps_merge_order_and_only_display_entries():
    nav = merge_capabilities(["RECEPTIONIST"]).navigation()
    assert [c.href for c in nav] == ["/dashboard", "/appointments", "/patients", "/support"]
    assert all(c.label for c in nav)


def test_patient_role_is_portal_only():
    merged = merge_capabilities(["PATIENT"])
    assert merged.has(caps.PORTAL_TIMELINE)
    assert not merged.has(caps.PATIENTS_VIEW)
    assert not merged.has(caps.PRESCRIPTIONS_VIEW)


def test_nurse_cannot_dispense():
    assert not merge_capabilities(["NURSE"]).has(caps.PRESCRIPTIONS_DISPENSE)
    assert merge_capabilities(["INVENTORY_MANAGER"]).has(caps.PRESCRIPTIONS_DISPENSE)


def test_dispensing_belongs_to_pharmacy_and_front_desk_roles():
    for role in ("CLINIC_OWNER", "ADMIN", "INVENTORY_MANAGER", "RECEPTIONIST", "BILLING_STAFF"):
        assert merge_capabilities([role]).has(caps.PRESCRIPTIONS_DISPENSE), role
    for role in ("DOCTOR", "NURSE", "PATIENT"):
        assert not merge_capabilities([role]).has(caps.PRESCRIPTIONS_DISPENSE), role


def test_later_role_fills_in_navigation_for_bare_grants():
    merged = merge_capabilities(["DOCTOR", "ADMIN"])
    nav = {c.action: c for c in merged.navigation()}

    # DOCTOR grants inventory:view without a nav entry; ADMIN's entry is shown.
    assert nav[caps.INVENTORY_VIEW].href == "/inventory"
    # Both roles show these; DOCTOR was listed first.
    assert nav[caps.APPOINTMENTS_VIEW].href == "/appointments/mine"
    assert nav[caps.PATIENTS_VIEW].section == "clinical"
    assert "/dashboard" in [c.href for c in merged.navigation()]


def test_filled_in_navigation_keeps_first_grant_position():
    actions = [c.action for c in merge_capabilities(["DOCTOR", "ADMIN"])]
    assert actions.index(caps.INVENTORY_VIEW) < actions.index(caps.DASHBOARD_VIEW)
