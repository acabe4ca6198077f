#!/usr/bin/env python3
"""
kubexec - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Runs the API server

All business logic is in the modules, following black box principles.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from kubexec import __version__
from kubexec.config.provider import ConfigProvider, EnvConfigProvider
from kubexec.errors import FileReadError, ResourceListingError
from kubexec.logging_config import get_logging_config
from kubexec.modules.api import (
    CheckResponse,
    ExecRequest,
    FileContentResponse,
    FileRequest,
    UniqueImagesResponse,
    UniquePodsResponse,
    UtilityRequest,
)
from kubexec.modules.auth import ApiKeyAuth
from kubexec.modules.cluster import load_cluster_clients
from kubexec.modules.discovery import KubernetesResourceLister, ResourceDeduplicator
from kubexec.modules.executor import ExecutionGateway, ExecutionOutcome, KubernetesExecChannel
from kubexec.modules.probe import FileProbe
from kubexec.modules.ratelimit import TokenBucket

logger = logging.getLogger("kubexec.api")


@dataclass
class Services:
    """Module instances shared by the request handlers."""
    gateway: ExecutionGateway
    probe: FileProbe
    deduplicator: ResourceDeduplicator
    auth: ApiKeyAuth
    rate_limiter: Optional[TokenBucket] = None


def build_services(config_provider: ConfigProvider) -> Services:
    """Wire modules together from configuration."""
    exec_config = config_provider.get_exec_config()
    rate_config = config_provider.get_rate_limit_config()
    auth_config = config_provider.get_auth_config()

    clients = load_cluster_clients(config_provider.get_cluster_config())

    channel = KubernetesExecChannel(
        clients.core_v1, clients.namespace, poll_interval=exec_config.poll_interval
    )
    gateway = ExecutionGateway(channel, default_timeout=exec_config.timeout_seconds)
    lister = KubernetesResourceLister(clients.core_v1, clients.apps_v1, clients.namespace)

    return Services(
        gateway=gateway,
        probe=FileProbe(gateway, attempt_timeout=exec_config.probe_timeout_seconds),
        deduplicator=ResourceDeduplicator(lister),
        auth=ApiKeyAuth(auth_config.api_keys, require_auth=auth_config.require_auth),
        rate_limiter=TokenBucket(rate_config.rate, rate_config.burst) if rate_config.enabled else None,
    )


def create_app(
    services: Optional[Services] = None,
    config_provider: Optional[ConfigProvider] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        services: Pre-built modules (tests); built from config at startup when None
        config_provider: Configuration source, environment by default
    """
    config_provider = config_provider or EnvConfigProvider()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifecycle - initialize and cleanup resources.
        """
        logger.info("Starting kubexec API...")
        app.state.services = services or build_services(config_provider)

        limiter = app.state.services.rate_limiter
        if limiter:
            limiter.start()

        logger.info("kubexec API started successfully")

        yield

        logger.info("Shutting down kubexec API...")
        if limiter:
            limiter.stop()
        logger.info("kubexec API shutdown complete")

    app = FastAPI(
        title="kubexec API",
        description="Run commands in pod containers and discover distinct workloads",
        version=__version__,
        debug=config_provider.get_api_config().debug,
        lifespan=lifespan,
    )

    def get_services(request: Request) -> Services:
        services_ = getattr(request.app.state, "services", None)
        if services_ is None:
            raise HTTPException(503, "Service not initialized")
        return services_

    def verify_api_key(
        x_api_key: Optional[str] = Header(None, description="API key for authentication"),
        services_: Services = Depends(get_services),
    ) -> Optional[str]:
        """Verify API key and return service identity."""
        is_valid, service_identity = services_.auth.verify_api_key(x_api_key)
        if not is_valid:
            raise HTTPException(401, "Invalid API key")
        return service_identity

    @app.exception_handler(ResourceListingError)
    async def resource_listing_error_handler(request: Request, exc: ResourceListingError):
        logger.error(f"Resource listing failed: {exc}")
        return JSONResponse(
            status_code=502,
            content={"detail": str(exc), "kind": exc.kind, "namespace": exc.namespace},
        )

    @app.exception_handler(FileReadError)
    async def file_read_error_handler(request: Request, exc: FileReadError):
        return JSONResponse(
            status_code=404,
            content={
                "detail": str(exc),
                "path": exc.path,
                "outcome": exc.outcome.model_dump(by_alias=True) if exc.outcome else None,
            },
        )

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.post("/exec", response_model=ExecutionOutcome)
    def execute_command(
        request: ExecRequest,
        identity: Optional[str] = Depends(verify_api_key),
        services_: Services = Depends(get_services),
    ):
        """Execute a command in a container and return the classified outcome."""
        if services_.rate_limiter:
            services_.rate_limiter.acquire()

        logger.info(f"Exec in {request.pod}/{request.container} requested by {identity or 'anonymous'}")
        return services_.gateway.execute(
            request.pod,
            request.container,
            request.command,
            stdin=request.stdin,
            timeout=request.timeout_seconds,
        )

    @app.get("/pods/unique", response_model=UniquePodsResponse)
    def unique_pods(
        identity: Optional[str] = Depends(verify_api_key),
        services_: Services = Depends(get_services),
    ):
        """List one representative pod per replica group plus standalone pods."""
        return UniquePodsResponse.from_result(services_.deduplicator.unique_pods())

    @app.get("/images/unique", response_model=UniqueImagesResponse)
    def unique_images(
        identity: Optional[str] = Depends(verify_api_key),
        services_: Services = Depends(get_services),
    ):
        """List distinct container images in the namespace."""
        container_count, images = services_.deduplicator.unique_images()
        return UniqueImagesResponse(container_count=container_count, images=images)

    @app.post("/files/read", response_model=FileContentResponse)
    def read_file(
        request: FileRequest,
        identity: Optional[str] = Depends(verify_api_key),
        services_: Services = Depends(get_services),
    ):
        """Read a file inside a container."""
        content = services_.probe.read_file(request.pod, request.container, request.path)
        return FileContentResponse(
            pod=request.pod, container=request.container, path=request.path, content=content
        )

    @app.post("/files/readable", response_model=CheckResponse)
    def file_readable(
        request: FileRequest,
        identity: Optional[str] = Depends(verify_api_key),
        services_: Services = Depends(get_services),
    ):
        """Check whether a file is readable inside a container."""
        result = services_.probe.is_readable(request.pod, request.container, request.path)
        return CheckResponse(
            pod=request.pod, container=request.container, subject=request.path, result=result
        )

    @app.post("/files/exists", response_model=CheckResponse)
    def file_exists(
        request: FileRequest,
        identity: Optional[str] = Depends(verify_api_key),
        services_: Services = Depends(get_services),
    ):
        """Check whether a file exists inside a container."""
        result = services_.probe.exists(request.pod, request.container, request.path)
        return CheckResponse(
            pod=request.pod, container=request.container, subject=request.path, result=result
        )

    @app.post("/utilities/check", response_model=CheckResponse)
    def utility_available(
        request: UtilityRequest,
        identity: Optional[str] = Depends(verify_api_key),
        services_: Services = Depends(get_services),
    ):
        """Check whether a utility can be started inside a container."""
        result = services_.probe.has_utility(request.pod, request.container, request.utility)
        return CheckResponse(
            pod=request.pod, container=request.container, subject=request.utility, result=result
        )

    return app


def main():
    """Main entry point."""
    config_provider = EnvConfigProvider()
    api_config = config_provider.get_api_config()

    logging_config = get_logging_config(api_config.log_level)
    log_config.dictConfig(logging_config)

    uvicorn.run(
        create_app(config_provider=config_provider),
        host=api_config.host,
        port=api_config.port,
        log_config=logging_config,
    )


if __name__ == "__main__":
    main()
