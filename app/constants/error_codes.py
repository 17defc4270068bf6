from enum import Enum


class ErrorCode(str, Enum):
    # generic
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # customer sessions / reservations
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_INVALID_STATE = "SESSION_INVALID_STATE"

    # promo bookings
    PROMO_BOOKING_NOT_FOUND = "PROMO_BOOKING_NOT_FOUND"

    # add-on orders
    ADD_ON_ORDER_NOT_FOUND = "ADD_ON_ORDER_NOT_FOUND"
    ADD_ON_ORDER_EMPTY_ITEMS = "ADD_ON_ORDER_EMPTY_ITEMS"

    # consignment
    CONSIGNMENT_ITEM_NOT_FOUND = "CONSIGNMENT_ITEM_NOT_FOUND"
    CONSIGNMENT_SALE_NOT_FOUND = "CONSIGNMENT_SALE_NOT_FOUND"
    CONSIGNMENT_SALE_VOIDED = "CONSIGNMENT_SALE_VOIDED"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    VOID_REASON_REQUIRED = "VOID_REASON_REQUIRED"
