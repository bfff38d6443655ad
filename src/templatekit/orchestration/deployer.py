"""Fetch-or-deploy orchestration of a template and its dependencies."""

from __future__ import annotations

import structlog

from templatekit.config.loader import DeployOptions
from templatekit.logging import bind_context
from templatekit.orchestration.apps import AppReconciler
from templatekit.orchestration.context import ProvisioningContext
from templatekit.orchestration.policy import ResolutionPolicy
from templatekit.orchestration.recorder import RegistrationRecorder
from templatekit.orchestration.results import DeploymentResult
from templatekit.orchestration.state import ResolutionState
from templatekit.orchestration.steps import ResolutionPlan, default_plan
from templatekit.resources.handles import ResourceHandle, ResourceKind

logger = structlog.get_logger()


class TemplateDeployer:
    """Resolves every dependency in order, reconciles apps, then deploys the template.

    Strictly sequential: each step consumes the handles of the steps before
    it, and the first failure aborts the run.
    """

    def __init__(
        self,
        ctx: ProvisioningContext,
        options: DeployOptions | None = None,
        plan: ResolutionPlan | None = None,
    ) -> None:
        self._ctx = ctx
        self._options = options or DeployOptions()
        self._plan = plan or default_plan(ctx.names)
        self._policy = ResolutionPolicy(ctx, self._options)

    @property
    def plan(self) -> ResolutionPlan:
        return self._plan

    def deploy(self, template_name: str, resource_type: str) -> DeploymentResult:
        log = bind_context(template=template_name, network=self._ctx.environment.network)
        log.info("template_deploy_started", local=self._ctx.environment.is_local)

        state = self.resolve_all()
        apps = AppReconciler(self._ctx).reconcile(self._options.apps, state)
        template = self.deploy_template(resource_type, state)

        recorder = RegistrationRecorder(self._ctx, state)
        record = recorder.register_template(template_name, template)

        log.info("template_deploy_finished", address=template.address)
        return DeploymentResult(
            template_name=template_name,
            template=template,
            record=record,
            record_path=recorder.record_path,
            dependencies={dependency: state.get(dependency) for dependency in state},
            tiers=state.tiers,
            apps=apps,
            template_registered=recorder.registered,
        )

    def resolve_all(self) -> ResolutionState:
        state = ResolutionState()
        for step in self._plan:
            self._policy.resolve(step, state)
        return state

    def deploy_template(self, resource_type: str, state: ResolutionState) -> ResourceHandle:
        """Instantiate the template with every resolved dependency address, in plan order."""
        args = tuple(state.get(dependency) for dependency in self._plan.dependencies)
        address = self._ctx.ledger.deploy_contract(
            resource_type,
            [handle.address for handle in args],
            self._ctx.owner,
        )
        logger.info("template_deployed", resource_type=resource_type, address=address)
        return ResourceHandle(
            address=address,
            kind=ResourceKind.TEMPLATE,
            resource_type=resource_type,
            constructor_args=args,
        )
