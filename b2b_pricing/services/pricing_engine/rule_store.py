"""
Read access to the pool of pricing rules.

A store hands back every rule it knows about, whatever its dates or target
role; filtering belongs to the selector. Records are parsed into
``RuleDefinition`` values on the way out, so a bad record stops the read.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from b2b_pricing.core.exceptions import MalformedRuleError, RuleFetchFailure
from b2b_pricing.models.pricing_rule import PricingRule
from b2b_pricing.schemas.rule_definition import (
    RuleDefinition,
    RuleDefinitionBase,
    rule_definition_adapter,
)

logger = logging.getLogger(__name__)

RULE_FIELDS = (
    "rule_id",
    "name",
    "rule_type",
    "calculation_type",
    "value",
    "target_role",
    "priority",
    "min_order_value",
    "effective_from",
    "effective_to",
    "is_locked",
)


def _describe_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )


def parse_rule_pool(records: Iterable[Any]) -> List[RuleDefinition]:
    rules: List[RuleDefinition] = []
    for record in records:
        if isinstance(record, RuleDefinitionBase):
            rules.append(record)
            continue
        try:
            rules.append(rule_definition_adapter.validate_python(record))
        except ValidationError as exc:
            rule_id = record.get("rule_id") if isinstance(record, dict) else None
            reason = _describe_errors(exc)
            logger.error("Rejecting rule pool, rule %s is malformed: %s", rule_id, reason)
            raise MalformedRuleError(rule_id, reason) from exc
    return rules


def rule_row_to_record(row: PricingRule) -> Dict[str, Any]:
    return {field: getattr(row, field) for field in RULE_FIELDS}


class RuleStore(ABC):
    @abstractmethod
    def list_active_rule_pool(self) -> List[RuleDefinition]:
        """Every rule the store knows about, in no particular order."""


class SqlRuleStore(RuleStore):
    """Rule pool backed by the ``pricing_rules`` table."""

    def __init__(self, db: Session):
        self.db = db

    def list_active_rule_pool(self) -> List[RuleDefinition]:
        try:
            rows = self.db.query(PricingRule).order_by(PricingRule.id).all()
        except SQLAlchemyError as exc:
            logger.error("Pricing rule pool read failed: %s", exc)
            raise RuleFetchFailure("Pricing rule pool could not be read") from exc

        logger.debug("Read %d pricing rules", len(rows))
        return parse_rule_pool(rule_row_to_record(row) for row in rows)


class InMemoryRuleStore(RuleStore):
    """Fixed rule pool, for fixtures and tests."""

    def __init__(self, records: Iterable[Any] = ()):
        self._records = tuple(records)

    def list_active_rule_pool(self) -> List[RuleDefinition]:
        return parse_rule_pool(self._records)
