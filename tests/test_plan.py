"""Tests for resolution steps and plan validation."""

from unittest.mock import MagicMock

import pytest
from templatekit.core.errors import ConfigurationError
from templatekit.orchestration.context import NameScheme
from templatekit.orchestration.steps import ResolutionPlan, ResolutionStep, default_plan
from templatekit.resources.handles import Dependency


def _step(dependency, lookup="resolve", requires=(), name="thing.eth"):
    return ResolutionStep(
        dependency=dependency,
        lookup=lookup,
        deploy=MagicMock(),
        canonical_name=name if lookup != "record" else None,
        requires=requires,
    )


class TestDefaultPlan:
    def test_fixed_order(self):
        plan = default_plan(NameScheme())

        assert plan.dependencies == [
            Dependency.NAMING_REGISTRY,
            Dependency.PRIMARY_REGISTRY,
            Dependency.SECONDARY_REGISTRY,
            Dependency.IDENTITY_REGISTRAR,
            Dependency.RESOURCE_FACTORY,
            Dependency.TOKEN_FACTORY,
        ]
        assert len(plan) == 6

    def test_canonical_names(self):
        steps = {step.dependency: step for step in default_plan(NameScheme())}

        assert steps[Dependency.NAMING_REGISTRY].lookup == "record"
        assert steps[Dependency.PRIMARY_REGISTRY].canonical_name == "aragonpm.eth"
        assert steps[Dependency.SECONDARY_REGISTRY].canonical_name == "open.aragonpm.eth"
        assert steps[Dependency.IDENTITY_REGISTRAR].canonical_name == "aragonid.eth"
        assert steps[Dependency.IDENTITY_REGISTRAR].lookup == "owner"
        assert steps[Dependency.RESOURCE_FACTORY].claim_after_deploy is True
        assert steps[Dependency.TOKEN_FACTORY].claim_after_deploy is True

    def test_declared_inputs(self):
        steps = {step.dependency: step for step in default_plan(NameScheme())}

        assert steps[Dependency.PRIMARY_REGISTRY].requires == (Dependency.NAMING_REGISTRY,)
        assert steps[Dependency.SECONDARY_REGISTRY].requires == (Dependency.PRIMARY_REGISTRY,)
        assert steps[Dependency.IDENTITY_REGISTRAR].requires == (Dependency.NAMING_REGISTRY,)
        assert steps[Dependency.RESOURCE_FACTORY].requires == ()
        assert steps[Dependency.TOKEN_FACTORY].requires == ()

    def test_custom_domain(self):
        plan = default_plan(NameScheme(primary_domain="pkg.test", secondary_label="community"))
        names = [step.canonical_name for step in plan]

        assert "pkg.test" in names
        assert "community.pkg.test" in names


class TestPlanValidation:
    def test_forward_reference_rejected(self):
        with pytest.raises(ConfigurationError, match="requires primary_registry"):
            ResolutionPlan(
                [
                    _step(Dependency.NAMING_REGISTRY, lookup="record"),
                    _step(Dependency.SECONDARY_REGISTRY, requires=(Dependency.PRIMARY_REGISTRY,)),
                    _step(Dependency.PRIMARY_REGISTRY, requires=(Dependency.NAMING_REGISTRY,)),
                ]
            )

    def test_naming_registry_is_implicit_requirement(self):
        with pytest.raises(ConfigurationError, match="requires naming_registry"):
            ResolutionPlan([_step(Dependency.TOKEN_FACTORY)])

    def test_duplicate_rejected(self):
        with pytest.raises(ConfigurationError, match="more than once"):
            ResolutionPlan(
                [
                    _step(Dependency.NAMING_REGISTRY, lookup="record"),
                    _step(Dependency.TOKEN_FACTORY),
                    _step(Dependency.TOKEN_FACTORY),
                ]
            )

    def test_named_lookup_needs_canonical_name(self):
        with pytest.raises(ConfigurationError, match="no canonical name"):
            ResolutionPlan(
                [
                    _step(Dependency.NAMING_REGISTRY, lookup="record"),
                    _step(Dependency.TOKEN_FACTORY, name=None),
                ]
            )

    def test_valid_subset(self):
        plan = ResolutionPlan(
            [
                _step(Dependency.NAMING_REGISTRY, lookup="record"),
                _step(Dependency.RESOURCE_FACTORY),
            ]
        )

        assert plan.dependencies == [Dependency.NAMING_REGISTRY, Dependency.RESOURCE_FACTORY]
