from enum import Enum


class EquipmentDomain(str, Enum):
    GENERAL = "general"
    ELECTRICAL = "electrical"
    PUBLIC = "public"
    CATALOG = "catalog"

    def __str__(self):
        return self.value


class AdditionalItemType(str, Enum):
    ADDITIONAL = "additional"
    ACCESSORY = "accessory"

    def __str__(self):
        return self.value


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    def __str__(self):
        return self.value


class CalculationType(str, Enum):
    MOTOHOURS = "motohours"
    KILOMETERS = "kilometers"

    def __str__(self):
        return self.value


class IntervalUnit(str, Enum):
    MOTOHOURS = "motohours"
    KILOMETERS = "kilometers"
    MONTHS = "months"

    def __str__(self):
        return self.value


class TierFallback(str, Enum):
    FIRST = "first"
    LAST = "last"

    def __str__(self):
        return self.value
