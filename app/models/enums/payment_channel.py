from enum import Enum


class PaymentChannel(str, Enum):
    gcash = "gcash"
    cash = "cash"
