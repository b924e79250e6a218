from datetime import datetime, timedelta

import pytest

from b2b_pricing.core.exceptions import RuleLockedError, RuleNotFoundError
from b2b_pricing.enums.commercial import CalculationType, RuleType
from b2b_pricing.enums.roles import UserRole
from b2b_pricing.schemas.pricing_rule import (
    PricingRuleCreate,
    PricingRuleUpdate,
    PricingRuleVersionCreate,
)
from b2b_pricing.services.pricing_rule_service import (
    create_pricing_rule,
    create_rule_version,
    get_pricing_rule,
    get_pricing_rules,
    lock_pricing_rule,
    update_pricing_rule,
)


def _create(db, **overrides):
    payload = dict(
        name="Gaddi guarantee fee",
        rule_type=RuleType.COMMISSION,
        calculation_type=CalculationType.PERCENTAGE,
        value=2.0,
        target_role=UserRole.GADDI,
        priority=10,
        effective_from=datetime.utcnow() - timedelta(days=1),
    )
    payload.update(overrides)
    return create_pricing_rule(db, PricingRuleCreate(**payload))


def test_create_assigns_rule_id_and_stores_enum_values(db):
    rule = _create(db)

    assert rule.rule_id.startswith("RULE_")
    assert rule.rule_type == "COMMISSION"
    assert rule.target_role == "GADDI"
    assert rule.is_locked is False
    assert get_pricing_rule(db, rule.rule_id) is not None


def test_create_keeps_supplied_rule_id(db):
    rule = _create(db, rule_id="GADDI_FEE_2026")

    assert rule.rule_id == "GADDI_FEE_2026"


def test_list_orders_rules_by_priority(db):
    low = _create(db, name="low", priority=1)
    high = _create(db, name="high", priority=99)

    ids = [rule.rule_id for rule in get_pricing_rules(db)]
    assert ids.index(high.rule_id) < ids.index(low.rule_id)


def test_unlocked_rule_can_be_edited_in_place(db):
    rule = _create(db)

    updated = update_pricing_rule(db, rule.rule_id, PricingRuleUpdate(value=2.5, priority=12))

    assert updated.value == pytest.approx(2.5)
    assert updated.priority == 12
    assert updated.name == "Gaddi guarantee fee"


def test_locked_rule_refuses_in_place_edit(db):
    rule = _create(db, is_locked=True)

    with pytest.raises(RuleLockedError):
        update_pricing_rule(db, rule.rule_id, PricingRuleUpdate(value=3.0))


def test_update_unknown_rule(db):
    with pytest.raises(RuleNotFoundError):
        update_pricing_rule(db, "RULE_MISSING", PricingRuleUpdate(value=1.0))


def test_lock_is_idempotent(db):
    rule = _create(db)

    assert lock_pricing_rule(db, rule.rule_id).is_locked is True
    assert lock_pricing_rule(db, rule.rule_id).is_locked is True


def test_locked_row_cannot_be_changed_behind_the_service(db):
    rule = lock_pricing_rule(db, _create(db).rule_id)

    rule.value = 9.0
    with pytest.raises(RuleLockedError):
        db.commit()
    db.rollback()


def test_locked_row_cannot_be_unlocked(db):
    rule = lock_pricing_rule(db, _create(db).rule_id)

    rule.is_locked = False
    with pytest.raises(RuleLockedError):
        db.commit()
    db.rollback()


def test_new_version_copies_locked_rule_and_leaves_it_alone(db):
    original = lock_pricing_rule(db, _create(db, min_order_value=5000.0).rule_id)

    version = create_rule_version(db, original.rule_id, PricingRuleVersionCreate(value=1.5))

    assert version.rule_id != original.rule_id
    assert version.supersedes_rule_id == original.rule_id
    assert version.is_locked is False
    assert version.value == pytest.approx(1.5)
    assert version.min_order_value == pytest.approx(5000.0)
    assert version.target_role == "GADDI"

    db.refresh(original)
    assert original.value == pytest.approx(2.0)
    assert original.is_locked is True


def test_new_version_of_unknown_rule(db):
    with pytest.raises(RuleNotFoundError):
        create_rule_version(db, "RULE_MISSING", PricingRuleVersionCreate())
