import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from b2b_pricing.core.exceptions import RuleLockedError, RuleNotFoundError
from b2b_pricing.models.pricing_rule import PricingRule
from b2b_pricing.schemas.pricing_rule import (
    PricingRuleCreate,
    PricingRuleUpdate,
    PricingRuleVersionCreate,
)

logger = logging.getLogger(__name__)

# Fields carried over when a locked rule gets a new version.
VERSIONED_FIELDS = (
    "name",
    "rule_type",
    "calculation_type",
    "value",
    "pipeline_definition",
    "target_role",
    "priority",
    "min_order_value",
    "effective_from",
    "effective_to",
)


def _generate_rule_id() -> str:
    return f"RULE_{uuid.uuid4().hex[:8].upper()}"


def _column_values(data: dict) -> dict:
    """Enums are stored by value."""
    return {
        key: getattr(value, "value", value)
        for key, value in data.items()
    }


def create_pricing_rule(db: Session, rule: PricingRuleCreate) -> PricingRule:
    values = _column_values(rule.model_dump())
    values["rule_id"] = values.get("rule_id") or _generate_rule_id()

    db_rule = PricingRule(**values)
    db.add(db_rule)
    db.commit()
    db.refresh(db_rule)
    logger.info("Created pricing rule %s (%s)", db_rule.rule_id, db_rule.rule_type)
    return db_rule


def get_pricing_rules(db: Session, skip: int = 0, limit: int = 100) -> List[PricingRule]:
    return (
        db.query(PricingRule)
        .order_by(PricingRule.priority.desc(), PricingRule.rule_id)
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_pricing_rule(db: Session, rule_id: str) -> Optional[PricingRule]:
    return db.query(PricingRule).filter(PricingRule.rule_id == rule_id).first()


def _require_rule(db: Session, rule_id: str) -> PricingRule:
    db_rule = get_pricing_rule(db, rule_id)
    if not db_rule:
        raise RuleNotFoundError(rule_id)
    return db_rule


def update_pricing_rule(db: Session, rule_id: str, rule_update: PricingRuleUpdate) -> PricingRule:
    """In-place edit, allowed only while the rule is unlocked."""
    db_rule = _require_rule(db, rule_id)
    if db_rule.is_locked:
        logger.warning("Refused in-place edit of locked rule %s", rule_id)
        raise RuleLockedError(rule_id)

    for key, value in _column_values(rule_update.model_dump(exclude_unset=True)).items():
        setattr(db_rule, key, value)

    db.commit()
    db.refresh(db_rule)
    return db_rule


def lock_pricing_rule(db: Session, rule_id: str) -> PricingRule:
    db_rule = _require_rule(db, rule_id)
    if db_rule.is_locked:
        return db_rule

    db_rule.is_locked = True
    db.commit()
    db.refresh(db_rule)
    logger.info("Locked pricing rule %s", rule_id)
    return db_rule


def create_rule_version(
    db: Session,
    rule_id: str,
    changes: PricingRuleVersionCreate,
) -> PricingRule:
    """
    Append a new rule derived from an existing one.

    The source row is never touched; the copy starts unlocked and records
    which rule it supersedes.
    """
    source = _require_rule(db, rule_id)

    values = {field: getattr(source, field) for field in VERSIONED_FIELDS}
    overrides = _column_values(changes.model_dump(exclude_unset=True))
    new_rule_id = overrides.pop("rule_id", None) or _generate_rule_id()
    values.update(overrides)
    values.setdefault("is_locked", False)

    db_rule = PricingRule(
        rule_id=new_rule_id,
        supersedes_rule_id=source.rule_id,
        **values,
    )
    db.add(db_rule)
    db.commit()
    db.refresh(db_rule)
    logger.info("Created rule %s as a new version of %s", new_rule_id, source.rule_id)
    return db_rule
