"""
Access Control Bootstrap Use Cases

Catalog seeding and legacy membership provisioning.
"""

from .backfill_legacy_memberships_use_case import BackfillLegacyMembershipsUseCase
from .dtos import BackfillResponse, ProvisionedMembershipResponse, SeedAccessControlResponse
from .provision_membership_use_case import ProvisionMembershipUseCase
from .seed_access_control_use_case import SeedAccessControlUseCase, upsert_system_role

__all__ = [
    "SeedAccessControlUseCase",
    "ProvisionMembershipUseCase",
    "BackfillLegacyMembershipsUseCase",
    "upsert_system_role",
    "SeedAccessControlResponse",
    "ProvisionedMembershipResponse",
    "BackfillResponse",
]
