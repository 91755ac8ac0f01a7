"""Cross-origin resource sharing (CORS) policies.

Policies are declared at start-up into a ``CorsPolicyTable``: one default
policy plus any number of named ones. Every policy is checked when it is
added, so an insecure policy stops the application from starting. Enforcement
on the wire is left to Starlette's ``CORSMiddleware``; ``install_cors`` feeds it
a policy from the table.
"""

from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Union

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_pascal

from core.errors import InsecureCorsConfigurationError

WILDCARD = "*"
DEFAULT_POLICY_NAME = "__DefaultCorsPolicy"
CUSTOM_POLICY_NAME = "MyCustomPolicy"


class CorsPolicy(BaseModel):
    """What cross-origin requests a policy lets through.

    ``"*"`` in a list means "any". A single string is read as a one-element list,
    so ``AllowedOrigins: "*"`` in configuration equals ``AllowedOrigins: ["*"]``.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True)

    allowed_headers: Tuple[str, ...] = ()
    allowed_methods: Tuple[str, ...] = ()
    allowed_origins: Tuple[str, ...] = ()
    exposed_headers: Tuple[str, ...] = ()
    allow_credentials: bool = False
    preflight_max_age: int = Field(600, ge=0, description="Seconds browsers may cache preflight responses")

    @field_validator("allowed_headers", "allowed_methods", "allowed_origins", "exposed_headers", mode="before")
    @classmethod
    def _single_value_as_tuple(cls, value: Any) -> Any:
        if isinstance(value, str):
            return (value,)
        return value

    @property
    def allows_any_header(self) -> bool:
        return WILDCARD in self.allowed_headers

    @property
    def allows_any_method(self) -> bool:
        return WILDCARD in self.allowed_methods

    @property
    def allows_any_origin(self) -> bool:
        return WILDCARD in self.allowed_origins

    def validate_security(self, name: str) -> "CorsPolicy":
        """Reject credentials combined with a wildcard origin.

        Raises:
            InsecureCorsConfigurationError: If the policy is insecure
        """
        if self.allow_credentials and self.allows_any_origin:
            raise InsecureCorsConfigurationError(name)
        return self

    def to_middleware_kwargs(self) -> Dict[str, Any]:
        """Arguments for Starlette's ``CORSMiddleware``."""
        return {
            "allow_origins": list(self.allowed_origins),
            "allow_methods": list(self.allowed_methods),
            "allow_headers": list(self.allowed_headers),
            "allow_credentials": self.allow_credentials,
            "expose_headers": list(self.exposed_headers),
            "max_age": self.preflight_max_age,
        }


class CorsPolicyBuilder:
    """Fluent construction of a ``CorsPolicy``."""

    def __init__(self):
        self._values: Dict[str, Any] = {}

    def allow_any_header(self) -> "CorsPolicyBuilder":
        return self.with_headers(WILDCARD)

    def with_headers(self, *headers: str) -> "CorsPolicyBuilder":
        self._values["allowed_headers"] = tuple(headers)
        return self

    def allow_any_method(self) -> "CorsPolicyBuilder":
        return self.with_methods(WILDCARD)

    def with_methods(self, *methods: str) -> "CorsPolicyBuilder":
        self._values["allowed_methods"] = tuple(m if m == WILDCARD else m.upper() for m in methods)
        return self

    def allow_any_origin(self) -> "CorsPolicyBuilder":
        return self.with_origins(WILDCARD)

    def with_origins(self, *origins: str) -> "CorsPolicyBuilder":
        self._values["allowed_origins"] = tuple(origins)
        return self

    def with_exposed_headers(self, *headers: str) -> "CorsPolicyBuilder":
        self._values["exposed_headers"] = tuple(headers)
        return self

    def allow_credentials(self) -> "CorsPolicyBuilder":
        self._values["allow_credentials"] = True
        return self

    def disallow_credentials(self) -> "CorsPolicyBuilder":
        self._values["allow_credentials"] = False
        return self

    def set_preflight_max_age(self, seconds: int) -> "CorsPolicyBuilder":
        self._values["preflight_max_age"] = seconds
        return self

    def build(self) -> CorsPolicy:
        return CorsPolicy(**self._values)


PolicySpec = Union[CorsPolicy, Callable[[CorsPolicyBuilder], Any]]


class CorsPolicyTable:
    """Validated CORS policies keyed by name."""

    def __init__(self, default_policy_name: str = DEFAULT_POLICY_NAME):
        self.default_policy_name = default_policy_name
        self._policies: Dict[str, CorsPolicy] = {}
        self._frozen = False

    def add_policy(self, name: str, policy: PolicySpec) -> "CorsPolicyTable":
        """Add or replace a policy.

        Args:
            name: Policy name
            policy: A policy, or a callable configuring a ``CorsPolicyBuilder``

        Raises:
            InsecureCorsConfigurationError: If the policy is insecure
        """
        if self._frozen:
            raise RuntimeError(f"Cannot add CORS policy '{name}': the policy table is frozen")
        if not isinstance(policy, CorsPolicy):
            builder = CorsPolicyBuilder()
            policy(builder)
            policy = builder.build()
        self._policies[name] = policy.validate_security(name)
        logger.debug(f"Added CORS policy '{name}'")
        return self

    def add_default_policy(self, policy: PolicySpec) -> "CorsPolicyTable":
        return self.add_policy(self.default_policy_name, policy)

    def get_policy(self, name: Optional[str] = None) -> Optional[CorsPolicy]:
        """Return the named policy, or the default one when ``name`` is None."""
        return self._policies.get(name or self.default_policy_name)

    def freeze(self) -> "CorsPolicyTable":
        self._frozen = True
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._policies)

    def items(self) -> Iterator[Tuple[str, CorsPolicy]]:
        return iter(list(self._policies.items()))

    def __contains__(self, name: str) -> bool:
        return name in self._policies

    def __len__(self) -> int:
        return len(self._policies)


class CorsSettings(BaseModel):
    """Named policies read from the ``CorsSettings`` configuration section."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True)

    policies: Dict[str, CorsPolicy] = Field(default_factory=dict)


def build_cors_policies(settings: Optional[CorsSettings] = None) -> CorsPolicyTable:
    """Build the frozen policy table.

    The default policy allows any header, method and origin, without
    credentials. ``MyCustomPolicy`` starts empty and denies every cross-origin
    request until configured. Named policies from ``settings`` are added last
    and replace built-in ones of the same name.

    Raises:
        InsecureCorsConfigurationError: If any policy is insecure
    """
    table = CorsPolicyTable()
    table.add_default_policy(lambda policy: policy.allow_any_header().allow_any_method().allow_any_origin())
    table.add_policy(CUSTOM_POLICY_NAME, CorsPolicy())
    for name, policy in (settings or CorsSettings()).policies.items():
        table.add_policy(name, policy)
    return table.freeze()


def install_cors(app: FastAPI, table: CorsPolicyTable, policy_name: Optional[str] = None) -> FastAPI:
    """Enforce a policy from ``table`` on every response of ``app``.

    Raises:
        KeyError: If the policy does not exist
    """
    policy = table.get_policy(policy_name)
    if policy is None:
        raise KeyError(f"Unknown CORS policy: {policy_name or table.default_policy_name}")
    app.add_middleware(CORSMiddleware, **policy.to_middleware_kwargs())
    logger.info(f"Installed CORS policy '{policy_name or table.default_policy_name}'")
    return app
