from enum import Enum


class PropertyType(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"


class PaymentMode(str, Enum):
    ONLINE = "online"
    CASH = "cash"


class DateFilter(str, Enum):
    LAST_30_DAYS = "30days"
    LAST_6_MONTHS = "6months"
    LAST_YEAR = "1year"
    CUSTOM = "custom"
