# Staff roles
# Total order over permission levels used to gate back-office operations

from typing import Dict, Optional

ROLE_RANK: Dict[str, int] = {
    "guest": 0,
    "courier": 10,
    "manager": 20,
    "engineer": 30,
    "admin": 40,
}

DEFAULT_ROLE = "guest"


def normalize_role(role: Optional[str]) -> str:
    """Map None and unknown values to guest"""
    if isinstance(role, str) and role.strip().lower() in ROLE_RANK:
        return role.strip().lower()
    return DEFAULT_ROLE


def role_rank(role: Optional[str]) -> int:
    return ROLE_RANK[normalize_role(role)]


def has_access(role: Optional[str], min_role: str) -> bool:
    """
    Check whether a role reaches the required level.

    Args:
        role: Role of the caller; None or unknown counts as guest
        min_role: Minimum role for the operation

    Returns:
        True when rank(role) >= rank(min_role)
    """
    if min_role not in ROLE_RANK:
        raise ValueError(f"Unknown role: {min_role}")
    return role_rank(role) >= ROLE_RANK[min_role]
