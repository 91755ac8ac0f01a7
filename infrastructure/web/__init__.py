"""Web-facing infrastructure: cross-origin policies."""

from .cors import (
    CUSTOM_POLICY_NAME,
    DEFAULT_POLICY_NAME,
    CorsPolicy,
    CorsPolicyBuilder,
    CorsPolicyTable,
    CorsSettings,
    build_cors_policies,
    install_cors,
)

__all__ = [
    "CUSTOM_POLICY_NAME",
    "DEFAULT_POLICY_NAME",
    "CorsPolicy",
    "CorsPolicyBuilder",
    "CorsPolicyTable",
    "CorsSettings",
    "build_cors_policies",
    "install_cors",
]
