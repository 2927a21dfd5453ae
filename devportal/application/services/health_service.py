"""Component health URL resolution.

A project configures a URL template in its metadata; the template is
specialized per component and landscape:

- ``{landscape_domain}``: the landscape's domain
- ``{health_suffix}``: component metadata ``health_suffix`` (empty if missing)
- ``{subdomain}``: component metadata ``subdomain``; when absent the segment
  and one adjacent dot are dropped
- ``{component_name}``: the component's name

Example:
    ``https://{subdomain}.{component_name}.cfapps.{landscape_domain}/health``
    resolves to ``https://api.cfapps.eu10.example.com/health`` for component
    ``api`` without a subdomain in landscape domain ``eu10.example.com``.
"""

from uuid import UUID

from devportal.application.cache import (
    CacheWrapper,
    KeyPrefix,
    NoOpCache,
    TTLConfig,
    build_key,
)
from devportal.application.schemas import HealthTarget
from devportal.application.services.component_service import ComponentService
from devportal.application.services.landscape_service import LandscapeService
from devportal.application.services.project_service import ProjectService
from devportal.config import get_logger, settings
from devportal.domain.errors import HealthDisabledError, HealthNotConfiguredError
from devportal.domain.metadata import get_bool, get_str, load_metadata
from devportal.domain.repositories.interfaces import CacheServiceProtocol

logger = get_logger(__name__)


def render_health_template(
    template: str,
    *,
    landscape_domain: str,
    component_name: str,
    subdomain: str = "",
    health_suffix: str = "",
) -> str:
    """Substitute every health URL placeholder in ``template``."""
    url = template.replace("{landscape_domain}", landscape_domain)
    url = url.replace("{health_suffix}", health_suffix)
    if subdomain.strip():
        url = url.replace("{subdomain}", subdomain)
    else:
        for token in ("{subdomain}.", ".{subdomain}", "{subdomain}"):
            url = url.replace(token, "")
    return url.replace("{component_name}", component_name)


class ComponentHealthService:
    """Builds health check targets for a component deployed in a landscape."""

    def __init__(
        self,
        component_service: ComponentService,
        landscape_service: LandscapeService,
        project_service: ProjectService,
        cache: CacheServiceProtocol | None = None,
        ttl_config: TTLConfig | None = None,
    ) -> None:
        self._components = component_service
        self._landscapes = landscape_service
        self._projects = project_service
        self._cache = cache or NoOpCache()
        self._ttl = ttl_config or TTLConfig.from_settings(settings.cache.ttl)
        self._targets = CacheWrapper[HealthTarget](self._cache, HealthTarget)

    async def build_health_url(self, component_id: UUID, landscape_id: UUID) -> HealthTarget:
        """Resolve the health endpoint of a component in a landscape.

        Raises:
            NotFoundError: component, landscape or project does not exist
            HealthDisabledError: component metadata sets ``health`` to false
            HealthNotConfiguredError: the project has no health URL template
        """

        async def fetch() -> HealthTarget:
            component = await self._components.get_entity(component_id)
            landscape = await self._landscapes.get_landscape_by_id(landscape_id)

            meta = load_metadata(component.metadata)
            if get_bool(meta, "health") is False:
                raise HealthDisabledError()

            template, success_regex = await self._projects.get_health_metadata(
                component.project_id
            )
            if not template.strip():
                raise HealthNotConfiguredError()

            url = render_health_template(
                template,
                landscape_domain=landscape.domain,
                component_name=component.name,
                subdomain=get_str(meta, "subdomain") or "",
                health_suffix=get_str(meta, "health_suffix") or "",
            )
            logger.debug("Resolved health URL", component_id=str(component_id), url=url)
            return HealthTarget(url=url, success_regex=success_regex)

        key = build_key(KeyPrefix.COMPONENT_HEALTH, component_id, landscape_id)
        return await self._targets.get_or_fetch(key, self._ttl.component_health, fetch)
