from datetime import datetime, timedelta, timezone

import pytest

from b2b_pricing.enums.roles import UserRole
from b2b_pricing.schemas.checkout import Buyer
from b2b_pricing.services.pricing_engine.rule_selector import (
    is_in_effect,
    select_applicable_rules,
    targets_buyer,
)
from b2b_pricing.services.pricing_engine.rule_store import InMemoryRuleStore

AS_OF = datetime(2026, 6, 15, 12, 0, 0)


def _rule(rule_id, **overrides):
    record = {
        "rule_id": rule_id,
        "name": f"Rule {rule_id}",
        "rule_type": "DISCOUNT",
        "calculation_type": "PERCENTAGE",
        "value": 5.0,
        "target_role": None,
        "priority": 0,
        "min_order_value": 0.0,
        "effective_from": AS_OF - timedelta(days=30),
        "effective_to": None,
        "is_locked": False,
    }
    record.update(overrides)
    return record


def _ids(rules):
    return [rule.rule_id for rule in rules]


def test_future_and_expired_rules_are_not_selected():
    store = InMemoryRuleStore([
        _rule("CURRENT"),
        _rule("FUTURE", effective_from=AS_OF + timedelta(days=1)),
        _rule("EXPIRED", effective_to=AS_OF - timedelta(seconds=1)),
    ])
    buyer = Buyer(role=UserRole.RETAILER)

    assert _ids(select_applicable_rules(store, buyer, AS_OF)) == ["CURRENT"]


def test_effective_bounds_are_inclusive():
    store = InMemoryRuleStore([
        _rule("STARTS_NOW", effective_from=AS_OF),
        _rule("ENDS_NOW", effective_to=AS_OF),
    ])
    buyer = Buyer(role=UserRole.RETAILER)

    assert set(_ids(select_applicable_rules(store, buyer, AS_OF))) == {"STARTS_NOW", "ENDS_NOW"}


def test_aware_as_of_is_compared_in_utc():
    rule = InMemoryRuleStore([_rule("R", effective_from=AS_OF)]).list_active_rule_pool()[0]
    ist = timezone(timedelta(hours=5, minutes=30))

    # 17:00 IST is 11:30 UTC, before the rule starts
    assert not is_in_effect(rule, datetime(2026, 6, 15, 17, 0, tzinfo=ist))
    assert is_in_effect(rule, datetime(2026, 6, 15, 18, 0, tzinfo=ist))


def test_untargeted_rule_applies_to_everyone():
    rule = InMemoryRuleStore([_rule("ALL")]).list_active_rule_pool()[0]
    for role in (UserRole.RETAILER, UserRole.CORPORATE, UserRole.GADDI):
        assert targets_buyer(rule, Buyer(role=role))


def test_role_targeted_rule_needs_matching_role():
    store = InMemoryRuleStore([_rule("CORP", target_role="CORPORATE")])

    assert _ids(select_applicable_rules(store, Buyer(role=UserRole.CORPORATE), AS_OF)) == ["CORP"]
    assert select_applicable_rules(store, Buyer(role=UserRole.RETAILER), AS_OF) == []


@pytest.mark.parametrize("gaddi_id, expected", [("G-17", ["GADDI"]), ("", []), (None, [])])
def test_gaddi_rule_follows_gaddi_link(gaddi_id, expected):
    store = InMemoryRuleStore([_rule("GADDI", target_role="GADDI")])
    buyer = Buyer(role=UserRole.RETAILER, gaddi_id=gaddi_id)

    assert _ids(select_applicable_rules(store, buyer, AS_OF)) == expected


def test_agent_rule_skipped_without_assigned_agent():
    store = InMemoryRuleStore([_rule("AGENT", target_role="AGENT")])
    buyer = Buyer(role=UserRole.RETAILER, gaddi_id="G-1", assigned_distributor_id="D-1")

    assert select_applicable_rules(store, buyer, AS_OF) == []


def test_buyer_can_match_several_pipeline_rules_at_once():
    store = InMemoryRuleStore([
        _rule("AGENT", target_role="AGENT", rule_type="COMMISSION", priority=3),
        _rule("GADDI", target_role="GADDI", rule_type="COMMISSION", priority=2),
        _rule("DIST", target_role="DISTRIBUTOR", priority=1),
        _rule("OWN_ROLE", target_role="RETAILER", priority=0),
    ])
    buyer = Buyer(
        role=UserRole.RETAILER,
        assigned_agent_id="A-1",
        gaddi_id="G-1",
        assigned_distributor_id="D-1",
    )

    assert _ids(select_applicable_rules(store, buyer, AS_OF)) == ["AGENT", "GADDI", "DIST", "OWN_ROLE"]


def test_sorted_by_priority_regardless_of_pool_order():
    store = InMemoryRuleStore([
        _rule("LOW", priority=1),
        _rule("HIGH", priority=50),
        _rule("MID", priority=10),
    ])

    assert _ids(select_applicable_rules(store, Buyer(role=UserRole.RETAILER), AS_OF)) == ["HIGH", "MID", "LOW"]


def test_priority_ties_are_broken_by_rule_id():
    # deliberate choice over pool order, see DESIGN.md
    forward = InMemoryRuleStore([_rule("B", priority=5), _rule("A", priority=5), _rule("C", priority=5)])
    backward = InMemoryRuleStore([_rule("C", priority=5), _rule("A", priority=5), _rule("B", priority=5)])
    buyer = Buyer(role=UserRole.RETAILER)

    assert _ids(select_applicable_rules(forward, buyer, AS_OF)) == ["A", "B", "C"]
    assert _ids(select_applicable_rules(backward, buyer, AS_OF)) == ["A", "B", "C"]
