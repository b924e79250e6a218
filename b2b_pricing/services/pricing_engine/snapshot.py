import logging
from datetime import datetime
from time import perf_counter
from typing import List, Optional, Sequence

from b2b_pricing.core.config import settings
from b2b_pricing.core.exceptions import MalformedRuleError
from b2b_pricing.enums.commercial import SettlementMode
from b2b_pricing.schemas.checkout import (
    AppliedRule,
    Buyer,
    CartLine,
    OrderSnapshot,
    Pipeline,
)
from b2b_pricing.schemas.rule_definition import RULE_CLASSES, rule_type_of
from b2b_pricing.services.pricing_engine.rule_selector import select_applicable_rules
from b2b_pricing.services.pricing_engine.rule_store import RuleStore

logger = logging.getLogger(__name__)

# Bump when the computation below changes; stored snapshots keep their tag.
PRICING_VERSION = "v1.0"

DEFAULT_SETTLEMENT_MODE = SettlementMode.AUTO_LEDGER


def base_total_of(cart: Sequence[CartLine]) -> float:
    return sum(line.line_total for line in cart)


def compute_snapshot(
    store: RuleStore,
    cart: Sequence[CartLine],
    buyer: Buyer,
    as_of: datetime,
    settlement_mode: Optional[SettlementMode] = None,
) -> OrderSnapshot:
    """
    Price a cart for a buyer at ``as_of``.

    Rules run in priority order against a running total:
    - DISCOUNT subtracts, MARKUP and SHIPPING add.
    - COMMISSION is recorded with a positive amount but leaves the total alone.
    - Percentages are taken of the base total, so they never compound.
    - A rule whose min_order_value is above the base total is skipped and
      not recorded.

    Any malformed rule fails the whole computation. An empty cart is priced
    normally and comes out at zero.
    """
    start = perf_counter()

    base_total = base_total_of(cart)
    rules = select_applicable_rules(store, buyer, as_of)

    current_total = base_total
    applied_rules: List[AppliedRule] = []

    for rule in rules:
        if not isinstance(rule, RULE_CLASSES):
            raise MalformedRuleError(
                getattr(rule, "rule_id", None),
                f"unsupported rule type {getattr(rule, 'rule_type', None)!r}",
            )

        if not rule.meets_minimum(base_total):
            continue

        amount = rule.signed_amount(rule.rule_amount(base_total))
        if rule.adjusts_total:
            current_total += amount

        applied_rules.append(
            AppliedRule(
                rule_id=rule.rule_id,
                rule_name=rule.name,
                amount=amount,
                type=rule_type_of(rule),
            )
        )

    snapshot = OrderSnapshot(
        base_total=base_total,
        final_total=current_total,
        applied_rules=tuple(applied_rules),
        settlement_mode=settlement_mode or DEFAULT_SETTLEMENT_MODE,
        pipeline=Pipeline(
            agent_id=buyer.assigned_agent_id or None,
            gaddi_id=buyer.gaddi_id or None,
            distributor_id=buyer.assigned_distributor_id or None,
        ),
        pricing_version=PRICING_VERSION,
    )

    duration_ms = (perf_counter() - start) * 1000.0
    if duration_ms > settings.SLOW_PRICING_MS:
        logger.warning(
            "Pricing for buyer %s took %.2f ms (%d lines, %d rules)",
            buyer.user_id,
            duration_ms,
            len(cart),
            len(rules),
        )
    logger.info(
        "Priced cart for buyer %s: base=%.2f final=%.2f applied=%d",
        buyer.user_id,
        snapshot.base_total,
        snapshot.final_total,
        len(applied_rules),
    )
    return snapshot
