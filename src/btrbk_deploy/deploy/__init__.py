"""Deployment artifacts: rendered configs, systemd units and access rules."""

from .plan import Artifact, DeploymentPlan, build_plan, render_instance, write_plan

__all__ = [
    "Artifact",
    "DeploymentPlan",
    "build_plan",
    "render_instance",
    "write_plan",
]
