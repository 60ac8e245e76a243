# src/customcert/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import typer
from kubernetes import client as k8s_client

from customcert.certs.material import CertificateError, load_certificate
from customcert.config.loader import load_settings
from customcert.config.models import Settings
from customcert.k8s.client import ResourceClient
from customcert.k8s.credentials import ClusterEndpoint, load_endpoint
from customcert.k8s.errors import CredentialsError, ResourceError
from customcert.logging.log import init_logging
from customcert.observers.dispatcher import EventBus
from customcert.observers.events import CertificateLoaded, SideEffectFailed, new_ctx
from customcert.observers.jsonfile import JsonFileObserver
from customcert.observers.logger import LoggerObserver
from customcert.orchestrator import Action, CertificateOrchestrator, RunReport
from customcert.provisioning.kapp_secret import create_kapp_secret
from customcert.provisioning.side_files import write_provisioning_files


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(
    help="TKG Custom Certificate Handler: manage the lifecycle of custom CA certificates in a TKG cluster",
    add_completion=False,
)

VALID_ACTIONS = {a.value for a in Action}


# ------------------------------------------------------------------------------
# Helpers (extracted logic)
# ------------------------------------------------------------------------------

def run_action(
    *,
    action: Action,
    cert_path: Path,
    settings: Settings,
    bus: EventBus,
    run_ctx: dict,
    kubeconfig: Optional[str] = None,
    context: Optional[str] = None,
    endpoint_loader: Callable[..., ClusterEndpoint] = load_endpoint,
) -> RunReport:
    """
    Load inputs, run the append-only side effects, then the orchestrator.

    Side effects (provisioning files, kapp-controller secret) are
    best-effort; their failures are reported as events and the run goes on.
    """
    cert = load_certificate(cert_path)
    bus.emit(CertificateLoaded(path=str(cert.path), size=len(cert.content), **run_ctx))

    endpoint = endpoint_loader(kubeconfig, context)

    if action is Action.APPEND:
        for err in write_provisioning_files(cert, settings.provisioning_dir, cert_name=settings.cert_name):
            bus.emit(SideEffectFailed(name="side-files", error=err, **run_ctx))

        with endpoint.api_client() as api:
            err = create_kapp_secret(
                k8s_client.CoreV1Api(api),
                cert,
                name=settings.secret_name,
                namespace=settings.secret_namespace,
            )
        if err:
            bus.emit(SideEffectFailed(name="kapp-secret", error=err, **run_ctx))

    rc = ResourceClient(endpoint, timeout=settings.request_timeout_s)
    orchestrator = CertificateOrchestrator(rc, settings, bus=bus, run_ctx=run_ctx)
    return orchestrator.run(action, cert)


# ------------------------------------------------------------------------------
# Command
# ------------------------------------------------------------------------------

@app.command()
def manage(
    ctx: typer.Context,
    action: str = typer.Option(
        ...,
        "--action",
        "-a",
        help="Select an action [append or delete] to execute, either to append certs or delete them",
    ),
    cert: Path = typer.Option(
        ...,
        "--cert",
        "-c",
        help="Provide a certificate path, e.g. ./tkg-custom-ca.crt",
    ),
    kubeconfig: Optional[str] = typer.Option(None, "--kubeconfig", help="Path to kubeconfig (default: ~/.kube/config)"),
    context: Optional[str] = typer.Option(None, "--context", help="kubeconfig context to use"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print DEBUG output to the console"),
):
    """
    Append a custom CA to, or delete it from, every kubeadm bootstrap config
    and roll the MachineDeployments.
    """
    if action not in VALID_ACTIONS:
        typer.echo("Invalid option")
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    settings = load_settings()
    logger, run_id, _ = init_logging(settings.log_dir, action=action, verbose=verbose)

    bus = EventBus(
        [
            LoggerObserver(logger),
            JsonFileObserver(settings.log_dir / f"{run_id}.jsonl"),
        ]
    )
    run_ctx = new_ctx(env=action, context=context, run_id=run_id)

    try:
        report = run_action(
            action=Action(action),
            cert_path=cert,
            settings=settings,
            bus=bus,
            run_ctx=run_ctx,
            kubeconfig=kubeconfig,
            context=context,
        )
    except (CertificateError, CredentialsError) as exc:
        logger.error(str(exc))
        raise typer.Exit(code=1)
    except ResourceError as exc:
        logger.error(f"{exc.kind.value}: {exc}")
        logger.error("Run aborted; objects already updated stay updated. Re-run the same action to converge.")
        raise typer.Exit(code=1)

    typer.echo(report.summary())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
