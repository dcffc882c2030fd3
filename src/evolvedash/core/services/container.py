"""
Composition root.

Builds every long-lived object from the configuration and hands them out as
one `Services` bundle. The database connection is opened here and closed
when the context manager exits; nothing else holds a global handle.

Usage:
    with open_services(config, project_dir) as services:
        services.orchestrator.submit("Add a clock panel")
"""

import logging
import sqlite3
import time
from collections.abc import Iterator
from contextlib import closing, contextmanager
from dataclasses import dataclass
from pathlib import Path

from evolvedash.core.config.models import DashConfig
from evolvedash.core.db import init_db
from evolvedash.core.discovery import ComponentScanner, FeatureRegistry, GenerationManifest
from evolvedash.core.harness import GeneratorBackend
from evolvedash.core.oplog import OperationLog
from evolvedash.core.requests import FeatureRequestLog
from evolvedash.core.services.dashboard import DashboardService
from evolvedash.core.services.generator import GeneratorService, build_backend
from evolvedash.core.services.orchestrator import RequestOrchestrator
from evolvedash.core.spec import SpecStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the API and CLI need, wired together."""

    config: DashConfig
    project_dir: Path
    conn: sqlite3.Connection
    request_log: FeatureRequestLog
    spec_store: SpecStore
    manifest: GenerationManifest
    registry: FeatureRegistry
    generator: GeneratorService
    oplog: OperationLog
    orchestrator: RequestOrchestrator
    dashboard: DashboardService
    started_at: float

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self.started_at


@contextmanager
def open_services(
    config: DashConfig,
    project_dir: Path,
    backend: GeneratorBackend | None = None,
) -> Iterator[Services]:
    """
    Build the service graph for a project and close it on exit.

    Args:
        config: Loaded configuration
        project_dir: Project root that relative paths resolve against
        backend: Generator backend to use instead of the configured one

    Yields:
        Services bundle
    """
    storage = config.storage
    components_dir = config.resolve(project_dir, config.discovery.components_dir)
    db_path = storage.db_path
    if db_path != ":memory:":
        db_path = str(config.resolve(project_dir, db_path))

    with closing(init_db(db_path)) as conn:
        spec_store = SpecStore(config.resolve(project_dir, storage.spec_path))
        if storage.create_spec_if_missing:
            spec_store.initialize()

        manifest = GenerationManifest(config.resolve(project_dir, storage.manifest_path))
        registry = FeatureRegistry(ComponentScanner(components_dir, config.discovery, manifest))
        registry.refresh()

        generator = GeneratorService(
            backend or build_backend(config.generator, components_dir),
            components_dir=components_dir,
            project_dir=project_dir,
            timeout_seconds=config.generator.timeout_seconds,
        )
        request_log = FeatureRequestLog(conn)
        oplog = OperationLog(capacity=config.oplog.capacity)

        services = Services(
            config=config,
            project_dir=project_dir,
            conn=conn,
            request_log=request_log,
            spec_store=spec_store,
            manifest=manifest,
            registry=registry,
            generator=generator,
            oplog=oplog,
            orchestrator=RequestOrchestrator(
                request_log,
                spec_store,
                generator,
                registry,
                manifest,
                oplog,
                max_description_length=config.requests.max_description_length,
            ),
            dashboard=DashboardService(
                request_log,
                registry,
                spec_store,
                recent_limit=config.requests.recent_limit,
            ),
            started_at=time.monotonic(),
        )
        logger.info(
            "Services ready: project=%s generator=%s components=%d",
            project_dir,
            generator.name,
            len(registry),
        )
        yield services
