from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from b2b_pricing.enums.commercial import PaymentCategory, RuleType, SettlementMode
from b2b_pricing.enums.roles import UserRole


class CartLine(BaseModel):
    product_id: str
    variant_id: str
    price_per_piece: float = Field(ge=0, allow_inf_nan=False)
    pieces_per_set: int = Field(gt=0)
    quantity_sets: int = Field(gt=0)

    class Config:
        frozen = True

    @property
    def line_total(self) -> float:
        return self.price_per_piece * self.pieces_per_set * self.quantity_sets


class Buyer(BaseModel):
    user_id: Optional[str] = None
    role: UserRole
    assigned_agent_id: Optional[str] = None
    gaddi_id: Optional[str] = None
    assigned_distributor_id: Optional[str] = None

    class Config:
        frozen = True

    @classmethod
    def from_user(cls, user) -> "Buyer":
        return cls(
            user_id=str(user.id),
            role=user.role,
            assigned_agent_id=user.assigned_agent_id,
            gaddi_id=user.gaddi_id,
            assigned_distributor_id=user.assigned_distributor_id,
        )

    def pipeline_link(self, role: UserRole) -> Optional[str]:
        """Id of the intermediary of the given role, or None if unlinked."""
        link = {
            UserRole.AGENT: self.assigned_agent_id,
            UserRole.GADDI: self.gaddi_id,
            UserRole.DISTRIBUTOR: self.assigned_distributor_id,
        }.get(role)
        return link or None


class Pipeline(BaseModel):
    agent_id: Optional[str] = None
    gaddi_id: Optional[str] = None
    distributor_id: Optional[str] = None

    class Config:
        frozen = True


class AppliedRule(BaseModel):
    rule_id: str
    rule_name: str
    amount: float
    type: RuleType

    class Config:
        frozen = True


class OrderSnapshot(BaseModel):
    base_total: float
    final_total: float
    applied_rules: Tuple[AppliedRule, ...] = ()
    settlement_mode: SettlementMode = SettlementMode.AUTO_LEDGER
    pipeline: Pipeline = Pipeline()
    pricing_version: str

    class Config:
        frozen = True

    @property
    def commission_total(self) -> float:
        return sum(
            entry.amount
            for entry in self.applied_rules
            if entry.type == RuleType.COMMISSION
        )


class CheckoutRequest(BaseModel):
    items: List[CartLine]
    payment_method: Optional[PaymentCategory] = None
