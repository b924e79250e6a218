"""
Validated, read-only view of a pricing rule as the engine sees it.

Raw records are parsed into one of four classes keyed on ``rule_type``.
An unknown tag or a non-numeric ``value`` fails validation here, before
any rule is applied.
"""
from datetime import datetime
from typing import Annotated, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from b2b_pricing.enums.commercial import CalculationType, RuleType
from b2b_pricing.enums.roles import UserRole


class RuleDefinitionBase(BaseModel):
    rule_id: str
    name: str
    calculation_type: CalculationType
    value: float = Field(allow_inf_nan=False)
    target_role: Optional[UserRole] = None
    priority: int = 0
    min_order_value: float = Field(default=0.0, allow_inf_nan=False)
    effective_from: datetime
    effective_to: Optional[datetime] = None
    is_locked: bool = False

    # COMMISSION is recorded but never moves the buyer's total
    adjusts_total: ClassVar[bool] = True

    class Config:
        frozen = True

    @field_validator("target_role", mode="before")
    @classmethod
    def _blank_role_means_everyone(cls, value):
        if value == "":
            return None
        return value

    @field_validator("value", "min_order_value", mode="before")
    @classmethod
    def _reject_booleans(cls, value):
        # bool is an int subclass and would otherwise pass as 0.0 or 1.0
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        return value

    @field_validator("min_order_value", mode="before")
    @classmethod
    def _missing_threshold_is_zero(cls, value):
        return 0.0 if value is None else value

    def rule_amount(self, base_total: float) -> float:
        """Unsigned amount; percentages always apply to the pre-rule base."""
        if self.calculation_type == CalculationType.PERCENTAGE:
            return base_total * (self.value / 100)
        return self.value

    def signed_amount(self, rule_amount: float) -> float:
        return rule_amount

    def meets_minimum(self, base_total: float) -> bool:
        return not (self.min_order_value > 0 and base_total < self.min_order_value)


class DiscountRule(RuleDefinitionBase):
    rule_type: Literal["DISCOUNT"]

    def signed_amount(self, rule_amount: float) -> float:
        # 0.0 - x rather than -x, so a zero discount is stored as 0.0, not -0.0
        return 0.0 - rule_amount


class CommissionRule(RuleDefinitionBase):
    rule_type: Literal["COMMISSION"]
    adjusts_total: ClassVar[bool] = False


class MarkupRule(RuleDefinitionBase):
    rule_type: Literal["MARKUP"]


class ShippingRule(RuleDefinitionBase):
    rule_type: Literal["SHIPPING"]


RuleDefinition = Annotated[
    Union[DiscountRule, CommissionRule, MarkupRule, ShippingRule],
    Field(discriminator="rule_type"),
]

rule_definition_adapter = TypeAdapter(RuleDefinition)


def rule_type_of(rule: RuleDefinitionBase) -> RuleType:
    return RuleType(rule.rule_type)


RULE_CLASSES = (DiscountRule, CommissionRule, MarkupRule, ShippingRule)
