from enum import Enum


class RuleType(str, Enum):
    DISCOUNT = "DISCOUNT"
    COMMISSION = "COMMISSION"
    MARKUP = "MARKUP"
    SHIPPING = "SHIPPING"


class CalculationType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


class SettlementMode(str, Enum):
    AUTO_LEDGER = "AUTO_LEDGER"
    MANUAL_AUDIT = "MANUAL_AUDIT"


class PaymentCategory(str, Enum):
    RAZORPAY = "RAZORPAY"
    GADDI = "GADDI"
    AGENT = "AGENT"
    DISTRIBUTOR = "DISTRIBUTOR"
    LEDGER = "LEDGER"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    GUARANTEED = "GUARANTEED"
    READY = "READY"
    DISPATCHED = "DISPATCHED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
