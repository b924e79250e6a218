from enum import Enum


class UserRole(str, Enum):
    RETAILER = "RETAILER"
    LOCAL_TRADER = "LOCAL_TRADER"
    DISTRIBUTOR = "DISTRIBUTOR"
    GADDI = "GADDI"
    AGENT = "AGENT"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"
    DISPATCH = "DISPATCH"
    CORPORATE = "CORPORATE"
    INTERNATIONAL = "INTERNATIONAL"


ADMIN_ROLES = {UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value}
