"""Fetch-or-deploy provisioning of templates and their dependencies."""

from templatekit.orchestration.apps import AppReconciler, AppReport, AppStatus
from templatekit.orchestration.context import NameScheme, ProvisioningContext, build_context
from templatekit.orchestration.deployer import TemplateDeployer
from templatekit.orchestration.policy import ResolutionPolicy
from templatekit.orchestration.recorder import RegistrationRecorder
from templatekit.orchestration.results import DeploymentResult
from templatekit.orchestration.state import ResolutionState, ResolvedInputs, Tier
from templatekit.orchestration.steps import ResolutionPlan, ResolutionStep, default_plan

__all__ = [
    "AppReconciler",
    "AppReport",
    "AppStatus",
    "DeploymentResult",
    "NameScheme",
    "ProvisioningContext",
    "RegistrationRecorder",
    "ResolutionPlan",
    "ResolutionPolicy",
    "ResolutionState",
    "ResolutionStep",
    "ResolvedInputs",
    "TemplateDeployer",
    "Tier",
    "build_context",
    "default_plan",
]
