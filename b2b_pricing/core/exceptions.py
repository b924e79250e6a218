"""Exceptions raised by the pricing engine and the layers around it."""


class PricingError(Exception):
    """Base exception for anything that blocks pricing an order."""
    pass


class RuleFetchFailure(PricingError):
    """The rule pool could not be read from the store."""
    pass


class MalformedRuleError(PricingError):
    """A rule record has an unknown type tag or a non-numeric value."""

    def __init__(self, rule_id, reason):
        self.rule_id = rule_id
        self.reason = reason
        super().__init__(f"Malformed pricing rule {rule_id!r}: {reason}")


class RuleNotFoundError(Exception):
    """No pricing rule with the given id."""
    pass


class RuleLockedError(Exception):
    """A locked rule was about to be changed in place."""

    def __init__(self, rule_id):
        self.rule_id = rule_id
        super().__init__(
            f"Pricing rule {rule_id!r} is locked; create a new version instead"
        )


class OrderNotFoundError(Exception):
    """No order with the given id."""
    pass


class SnapshotImmutableError(Exception):
    """An attached order snapshot was about to be rewritten."""

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Pricing snapshot of order {order_id!r} is write-once")
