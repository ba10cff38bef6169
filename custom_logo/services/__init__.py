"""Service exports."""

from .errors import (
    LogoError,
    LogoNotFoundError,
    LogoPermissionError,
    LogoIOError,
    HashValidationError,
)
from .roles import (
    LogoRole,
    MatchPattern,
    RoleSpec,
    RoleTable,
    default_role_table,
    validate_hash_segment,
)
from .override_store import OverrideStore
from .distribution import LogoDistributor, DistributionReport, RoleResult
from .interception import AssetInterceptor, InterceptMatch, ResolvedAsset

__all__ = [
    "LogoError",
    "LogoNotFoundError",
    "LogoPermissionError",
    "LogoIOError",
    "HashValidationError",
    "LogoRole",
    "MatchPattern",
    "RoleSpec",
    "RoleTable",
    "default_role_table",
    "validate_hash_segment",
    "OverrideStore",
    "LogoDistributor",
    "DistributionReport",
    "RoleResult",
    "AssetInterceptor",
    "InterceptMatch",
    "ResolvedAsset",
]
