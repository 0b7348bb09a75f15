from enum import Enum


class ContractStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    SENT = "SENT"
    SIGNED = "SIGNED"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


class SignerRole(str, Enum):
    TENANT = "TENANT"
    ROOMMATE = "ROOMMATE"
    GUARANTOR = "GUARANTOR"
    ADMIN = "ADMIN"
