# src/autopilot_estimator/cli.py
"""Autopilot migration estimate CLI."""

import asyncio
import sys
import traceback
import click
import structlog
from pydantic import ValidationError

from autopilot_estimator.config.settings import Settings
from autopilot_estimator.core.exceptions import ConfigurationException, EstimatorException
from autopilot_estimator.core.utils import setup_logging
from autopilot_estimator.discovery.estimation_orchestrator import EstimationOrchestrator
from autopilot_estimator.reporting.json_export import write_json
from autopilot_estimator.reporting.tables import render_node_table, render_workload_table

logger = structlog.get_logger(__name__)


@click.command()
@click.option('--quiet', is_flag=True, help='Generate no output to stdout')
@click.option('--json', 'json_output', is_flag=True, help='Generate json file with the results')
@click.option('--json-file', default='./output.json', show_default=True, help='json file location')
@click.option('--context', default=None, help='Kubernetes context to estimate (default: current context)')
@click.option('--kubeconfig', default=None, help='Path to kubeconfig file')
@click.option('--region', default=None, help='Pricing region (default: derived from the context)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def estimate(quiet, json_output, json_file, context, kubeconfig, region, verbose, debug):
    """
    Estimate what the workloads of a standard GKE cluster would cost on Autopilot.

    Every running pod is priced from its current usage: usage is raised to
    the Autopilot minimum requests, mapped to a compute class (Regular,
    Balanced, Scale-Out or Scale-Out Arm) and billed with the region's
    on-demand or spot unit prices. Totals include the cluster fee and the
    1 and 3 year committed use discounts.

    Example:
        autopilot-estimate --json --json-file ./estimate.json
    """

    async def run_estimation():
        try:
            try:
                settings = Settings.create_from_env()
            except ValidationError as e:
                raise ConfigurationException(f"Invalid settings: {e}")
            log_level = "DEBUG" if debug else settings.log_level.value

            setup_logging(
                config_path=settings.log_config_path,
                log_level=log_level,
                log_format=settings.log_format.value,
            )

            if kubeconfig:
                settings.kubernetes.kubeconfig_path = kubeconfig
            if context:
                settings.kubernetes.context = context
            if region:
                settings.billing.region = region

            config = {
                "kubernetes": settings.kubernetes.model_dump(),
                "billing": settings.billing.model_dump(),
                "estimation": settings.estimation.model_dump(),
            }

            if verbose and not quiet:
                click.echo(f"Billing service: {settings.billing.service_id} ({settings.billing.currency_code})")
                click.echo(f"Excluded namespaces: {', '.join(settings.kubernetes.excluded_namespaces)}")

            logger.info("Starting Autopilot estimate", context=settings.kubernetes.context, region=settings.billing.region)

            async with EstimationOrchestrator(config) as orchestrator:
                result = await orchestrator.run_estimation()

            if not quiet:
                click.echo(click.style(
                    f"Cluster {result.cluster_name!r} in {result.region}",
                    bold=True, fg="bright_white", bg="magenta"
                ))
                click.echo()
                click.echo(click.style(
                    f"Total nodes at {result.region}: {len(result.nodes)}",
                    bold=True, fg="bright_white", bg="red"
                ))
                click.echo(render_node_table(result.nodes))
                click.echo()
                click.echo(click.style(
                    f"Total workloads on {result.cluster_name}: {result.total_workloads}",
                    bold=True, fg="blue", bg="bright_yellow"
                ))
                click.echo(render_workload_table(result.nodes, result.summary))

            if json_output:
                output_path = write_json(result, json_file)
                if not quiet:
                    click.echo(f"Results saved to: {output_path}")

            return 0

        except EstimatorException as e:
            logger.error("Autopilot estimate failed", error=str(e))
            click.echo(f"Error: {e}", err=True)
            if debug:
                click.echo(traceback.format_exc(), err=True)
            return 1
        except Exception as e:
            click.echo(f"Estimation failed: {e}", err=True)
            if debug:
                click.echo(traceback.format_exc(), err=True)
            return 1

    exit_code = asyncio.run(run_estimation())
    sys.exit(exit_code)


if __name__ == '__main__':
    estimate()
