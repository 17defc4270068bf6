from enum import Enum


class DiscountKind(str, Enum):
    none = "none"
    percent = "percent"
    amount = "amount"

    @classmethod
    def parse(cls, value) -> "DiscountKind":
        """Map a stored/raw value onto a kind; unknown values mean no discount."""
        if isinstance(value, cls):
            return value
        text = str(value if value is not None else "none").strip().lower()
        try:
            return cls(text)
        except ValueError:
            return cls.none
