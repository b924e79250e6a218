from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from b2b_pricing.enums.commercial import RuleType, CalculationType
from b2b_pricing.enums.roles import UserRole


class PricingRuleBase(BaseModel):
    name: str
    rule_type: RuleType
    calculation_type: CalculationType = CalculationType.PERCENTAGE
    value: float = Field(allow_inf_nan=False)
    pipeline_definition: Optional[str] = "DIRECT"
    target_role: Optional[UserRole] = None
    priority: int = 0
    min_order_value: float = Field(default=0.0, ge=0)
    effective_from: datetime
    effective_to: Optional[datetime] = None
    is_locked: bool = False


class PricingRuleCreate(PricingRuleBase):
    rule_id: Optional[str] = None


class PricingRuleUpdate(BaseModel):
    name: Optional[str] = None
    rule_type: Optional[RuleType] = None
    calculation_type: Optional[CalculationType] = None
    value: Optional[float] = Field(default=None, allow_inf_nan=False)
    pipeline_definition: Optional[str] = None
    target_role: Optional[UserRole] = None
    priority: Optional[int] = None
    min_order_value: Optional[float] = Field(default=None, ge=0)
    effective_from: Optional[datetime] = None
    effective_to: Optional[datetime] = None
    is_locked: Optional[bool] = None


class PricingRuleVersionCreate(PricingRuleUpdate):
    """Changes applied on top of a copy of a locked rule."""
    rule_id: Optional[str] = None


class PricingRuleResponse(PricingRuleBase):
    id: int
    rule_id: str
    supersedes_rule_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
