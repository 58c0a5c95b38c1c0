import enum


class Status(enum.Enum):
    SUCCESS = "00"
    FAILURE = "01"
    PRODUCT_NOT_FOUND = "02"
    QUANTITY_EXCEEDED = "03"
    EMPTY_CART = "04"
    INVALID_PARAMS = "05"
    UNAUTHORIZED = "06"
    FORBIDDEN = "07"
    CONFLICT = "08"
    NOT_FOUND = "09"
    UNKNOWN_ERROR = "99"
