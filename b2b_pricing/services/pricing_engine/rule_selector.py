from datetime import datetime, timezone
from typing import List

from b2b_pricing.enums.roles import UserRole
from b2b_pricing.schemas.checkout import Buyer
from b2b_pricing.schemas.rule_definition import RuleDefinition
from b2b_pricing.services.pricing_engine.rule_store import RuleStore

# Roles a buyer can be linked to rather than hold.
PIPELINE_ROLES = (UserRole.AGENT, UserRole.GADDI, UserRole.DISTRIBUTOR)


def to_naive_utc(moment: datetime) -> datetime:
    """Stored timestamps are naive UTC."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def is_in_effect(rule: RuleDefinition, as_of: datetime) -> bool:
    as_of = to_naive_utc(as_of)
    if to_naive_utc(rule.effective_from) > as_of:
        return False
    if rule.effective_to is not None and to_naive_utc(rule.effective_to) < as_of:
        return False
    return True


def targets_buyer(rule: RuleDefinition, buyer: Buyer) -> bool:
    if rule.target_role is None:
        return True
    if rule.target_role == buyer.role:
        return True
    if rule.target_role in PIPELINE_ROLES:
        return buyer.pipeline_link(rule.target_role) is not None
    return False


def _priority_order(rule: RuleDefinition):
    # ties fall back to rule id so the order never depends on the store
    return (-rule.priority, rule.rule_id)


def select_applicable_rules(
    store: RuleStore,
    buyer: Buyer,
    as_of: datetime,
) -> List[RuleDefinition]:
    """
    Rules in effect at ``as_of`` that target the buyer's role or one of the
    buyer's pipeline links, highest priority first.

    Every match is kept; a buyer linked to both an agent and a Gaddi gets
    both pipeline rules as well as any rule aimed at their own role.
    """
    pool = store.list_active_rule_pool()
    applicable = [
        rule
        for rule in pool
        if is_in_effect(rule, as_of) and targets_buyer(rule, buyer)
    ]
    return sorted(applicable, key=_priority_order)
