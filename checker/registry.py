"""Rule registry built once at startup."""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from .errors import ConfigError, DuplicateRuleIDError, RegistryFrozenError
from .project import ProjectType
from .rules import RuleDescriptor
from .severity import Severity

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Catalog of rule descriptors keyed by rule ID."""

    def __init__(self, descriptors: Iterable[RuleDescriptor] = ()) -> None:
        self._descriptors: Dict[str, RuleDescriptor] = {}
        self._frozen = False
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: RuleDescriptor) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register {descriptor.rule_id}: registry is frozen")
        if descriptor.rule_id in self._descriptors:
            raise DuplicateRuleIDError(descriptor.rule_id)
        self._descriptors[descriptor.rule_id] = descriptor

    def freeze(self) -> "RuleRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, rule_id: str) -> RuleDescriptor:
        return self._descriptors[rule_id]

    def applicable_rules(self, project_type: ProjectType) -> Tuple[RuleDescriptor, ...]:
        """Return the descriptors matching ``project_type`` sorted by rule ID."""

        return tuple(descriptor for descriptor in self if descriptor.applies_to(project_type))

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._descriptors

    def __iter__(self) -> Iterator[RuleDescriptor]:
        return iter(self._descriptors[rule_id] for rule_id in sorted(self._descriptors))

    def __len__(self) -> int:
        return len(self._descriptors)


def load_rules() -> Tuple[RuleDescriptor, ...]:
    from .rules import library, sketch

    return sketch.RULES + library.RULES


def build_registry(
    descriptors: Optional[Iterable[RuleDescriptor]] = None,
    disabled: Iterable[str] = (),
    overrides: Optional[Mapping[str, Severity]] = None,
) -> RuleRegistry:
    """Build and freeze the registry, honouring disabled rules and severity overrides."""

    descriptors = tuple(load_rules() if descriptors is None else descriptors)
    overrides = dict(overrides or {})
    disabled = set(disabled)

    known = {descriptor.rule_id for descriptor in descriptors}
    unknown = sorted((disabled | set(overrides)) - known)
    if unknown:
        raise ConfigError(f"Unknown rule IDs in configuration: {', '.join(unknown)}")

    registry = RuleRegistry()
    for descriptor in descriptors:
        if descriptor.rule_id in disabled:
            logger.debug("Rule %s disabled by configuration", descriptor.rule_id)
            continue
        if descriptor.rule_id in overrides:
            descriptor = dataclasses.replace(descriptor, severity=overrides[descriptor.rule_id])
        registry.register(descriptor)
    return registry.freeze()
