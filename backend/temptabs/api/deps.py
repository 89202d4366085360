"""Route dependencies resolving services from the process container."""

from temptabs.services.badge_coordinator import BadgeCleanupCoordinator
from temptabs.services.container import Container, get_container
from temptabs.services.temptabs_service import TempTabsService


def container_dep() -> Container:
    return get_container()


def service_dep() -> TempTabsService:
    return get_container().service


def coordinator_dep() -> BadgeCleanupCoordinator:
    return get_container().coordinator
