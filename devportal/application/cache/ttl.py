"""Cache lifetimes per entity and query shape."""

from datetime import timedelta

from attrs import define

from devportal.config.settings import CacheTTLConfig


def _seconds(value: float) -> timedelta:
    return timedelta(seconds=value)


@define(frozen=True, slots=True)
class TTLConfig:
    """Cache TTLs; landscape data changes rarely, health checks must stay fresh."""

    landscape_list: timedelta = timedelta(minutes=5)
    landscape_by_id: timedelta = timedelta(minutes=5)
    landscape_by_name: timedelta = timedelta(minutes=5)
    landscape_by_project: timedelta = timedelta(minutes=5)
    landscape_search: timedelta = timedelta(minutes=2)
    component_list: timedelta = timedelta(minutes=5)
    component_by_id: timedelta = timedelta(minutes=5)
    component_health: timedelta = timedelta(seconds=30)
    team: timedelta = timedelta(minutes=10)
    component: timedelta = timedelta(minutes=10)
    plugin: timedelta = timedelta(minutes=5)
    user: timedelta = timedelta(minutes=5)
    default: timedelta = timedelta(minutes=5)

    @classmethod
    def from_settings(cls, config: CacheTTLConfig) -> "TTLConfig":
        """Build from the seconds-based settings group."""
        return cls(
            landscape_list=_seconds(config.landscape_list),
            landscape_by_id=_seconds(config.landscape_by_id),
            landscape_by_name=_seconds(config.landscape_by_name),
            landscape_by_project=_seconds(config.landscape_by_project),
            landscape_search=_seconds(config.landscape_search),
            component_list=_seconds(config.component_list),
            component_by_id=_seconds(config.component_by_id),
            component_health=_seconds(config.component_health),
            team=_seconds(config.team),
            component=_seconds(config.component),
            plugin=_seconds(config.plugin),
            user=_seconds(config.user),
            default=_seconds(config.default),
        )
