import enum


class UserRole(enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"
