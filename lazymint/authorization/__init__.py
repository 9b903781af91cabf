"""
Authorization module initialization
"""

from .roles import MINTER_ROLE, AuthorizationOracle, InMemoryRoleRegistry

__all__ = [
    "MINTER_ROLE",
    "AuthorizationOracle",
    "InMemoryRoleRegistry",
]
