from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from b2b_pricing.database.connection import get_db
from b2b_pricing.core.exceptions import RuleLockedError, RuleNotFoundError
from b2b_pricing.schemas.pricing_rule import (
    PricingRuleCreate, PricingRuleUpdate, PricingRuleVersionCreate, PricingRuleResponse
)
from b2b_pricing.services.pricing_rule_service import (
    create_pricing_rule, get_pricing_rules, get_pricing_rule,
    update_pricing_rule, lock_pricing_rule, create_rule_version
)
from b2b_pricing.dependencies.auth import require_auth, require_admin


router = APIRouter(prefix="/pricing-rules", tags=["Commercial Rules"])

@router.post("/", response_model=PricingRuleResponse, dependencies=[Depends(require_admin)])
def create_rule(rule: PricingRuleCreate, db: Session = Depends(get_db)):
    if rule.rule_id and get_pricing_rule(db, rule.rule_id):
        raise HTTPException(status_code=400, detail="Rule id already exists")
    return create_pricing_rule(db, rule)

@router.get("/", response_model=list[PricingRuleResponse], dependencies=[Depends(require_auth)])
def list_rules(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return get_pricing_rules(db, skip=skip, limit=limit)

@router.get("/{rule_id}", response_model=PricingRuleResponse, dependencies=[Depends(require_auth)])
def get_rule(rule_id: str, db: Session = Depends(get_db)):
    rule = get_pricing_rule(db, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Rule not found")
    return rule

@router.put("/{rule_id}", response_model=PricingRuleResponse, dependencies=[Depends(require_admin)])
def update_rule(rule_id: str, rule: PricingRuleUpdate, db: Session = Depends(get_db)):
    try:
        return update_pricing_rule(db, rule_id, rule)
    except RuleNotFoundError:
        raise HTTPException(status_code=404, detail="Rule not found")
    except RuleLockedError as exc:
        raise HTTPException(status_code=409, detail=str(exc))

@router.post("/{rule_id}/lock", response_model=PricingRuleResponse, dependencies=[Depends(require_admin)])
def lock_rule(rule_id: str, db: Session = Depends(get_db)):
    try:
        return lock_pricing_rule(db, rule_id)
    except RuleNotFoundError:
        raise HTTPException(status_code=404, detail="Rule not found")

@router.post("/{rule_id}/versions", response_model=PricingRuleResponse, dependencies=[Depends(require_admin)])
def new_rule_version(rule_id: str, changes: PricingRuleVersionCreate, db: Session = Depends(get_db)):
    if changes.rule_id and get_pricing_rule(db, changes.rule_id):
        raise HTTPException(status_code=400, detail="Rule id already exists")
    try:
        return create_rule_version(db, rule_id, changes)
    except RuleNotFoundError:
        raise HTTPException(status_code=404, detail="Rule not found")
