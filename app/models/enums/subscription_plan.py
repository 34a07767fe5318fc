import enum

class SubscriptionPlan(str, enum.Enum):
    basic = "basic"
    premium = "premium"
    enterprise = "enterprise"
