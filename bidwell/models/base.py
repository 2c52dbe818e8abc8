"""
Column helpers shared by the models
"""
import uuid


def new_id() -> str:
    return str(uuid.uuid4())


def enum_values(enum_cls):
    """Persist enum values ("active") rather than member names ("ACTIVE")"""
    return [member.value for member in enum_cls]


# Largest amount (cents) an Integer money column holds on every backend (int4)
MAX_AMOUNT_CENTS = 2**31 - 1
