"""Recommended version tuples per ecosystem. Immutable; injected into validators."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from scaffold_sentinel.domain.constants import NODE_MINIMUM_LTS_MAJOR
from scaffold_sentinel.domain.entities import NodeVersionConfig


@dataclass(frozen=True)
class EcosystemProfile:
    """What an ecosystem expects of its version configuration."""
    name: str
    recommended: NodeVersionConfig
    image_family: str
    minimum_major: int


@dataclass(frozen=True)
class CompatibilityMatrix:
    profiles: Mapping[str, EcosystemProfile] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "profiles", MappingProxyType(dict(self.profiles)))

    def profile(self, ecosystem: str) -> EcosystemProfile:
        try:
            return self.profiles[ecosystem]
        except KeyError:
            raise KeyError(f"no compatibility profile for ecosystem {ecosystem!r}") from None

    def recommended(self, ecosystem: str) -> NodeVersionConfig:
        return self.profile(ecosystem).recommended

    @classmethod
    def default(cls) -> "CompatibilityMatrix":
        return cls(
            profiles={
                "nodejs": EcosystemProfile(
                    name="Node.js",
                    recommended=NodeVersionConfig(
                        runtime=">=20.0.0",
                        types_package="^20.17.0",
                        build_tool_version=">=10.0.0",
                        image="node:20-alpine",
                        is_lts=True,
                        description="Node.js 20 LTS - Recommended for production use",
                    ),
                    image_family="node",
                    minimum_major=NODE_MINIMUM_LTS_MAJOR,
                ),
            }
        )
