import enum


class Realm(str, enum.Enum):
    MEMBER = "member"
    ADMIN = "admin"


class SubscriptionStatus(str, enum.Enum):
    # mirrors the payment provider's subscription statuses we care about
    ACTIVE = "active"
    INCOMPLETE = "incomplete"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
