"""Container inventory monitoring."""
from typing import List
from flask import current_app

from hoststats.stats.models import ContainerRecord
from hoststats.stats.utils import merge_containers, parse_container_lines
from .base import CommandMonitor

RUNNING_COMMAND = ['docker', 'ps', '--format', '{{json .}}']
ALL_COMMAND = ['docker', 'ps', '-a', '--format', '{{json .}}']


class DockerMonitor(CommandMonitor):
    """Monitor containers known to the local docker engine."""

    def collect_containers(self) -> List[ContainerRecord]:
        """List all containers with a running flag cross-checked against `docker ps`."""
        running = parse_container_lines(self.query(RUNNING_COMMAND))
        everything = parse_container_lines(self.query(ALL_COMMAND))
        containers = merge_containers(everything, running)
        current_app.logger.debug(f"[DOCKER] {len(containers)} containers, {sum(c.running for c in containers)} running")
        return containers
