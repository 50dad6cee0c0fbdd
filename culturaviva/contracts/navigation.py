"""Route, RouteStep, PositionFix, NavigationSnapshot — live navigation models.

Route and RouteStep mirror the directions backend payload (wire names
``distance``, ``duration``, ``instruction``...), with geometry already
converted to ``(latitude, longitude)`` order.

NavigationSnapshot is a **calculated** view of a running session —
never persisted.
"""

from datetime import datetime, timezone

from pydantic import Field

from culturaviva.contracts.common import ApiModel, Destination, GeoPoint
from culturaviva.contracts.enums import NavigationState, RouteType, TravelProfile
from culturaviva.contracts.result import ServiceError


class RouteStep(ApiModel):
    """A single turn-by-turn instruction. Index in ``Route.steps`` is its ordinal."""

    instruction_text: str = Field(..., alias="instruction")
    distance_meters: float = Field(..., ge=0, alias="distance")
    duration_seconds: float = Field(..., ge=0, alias="duration")
    maneuver_type: int | None = Field(default=None, alias="type")
    street_name: str | None = Field(default=None, alias="name")


class Route(ApiModel):
    """A computed path from the user's position to the destination."""

    route_type: RouteType = Field(default=RouteType.ROUTE, alias="type")
    distance_meters: float = Field(..., ge=0, alias="distance", description="Total path length")
    duration_seconds: float = Field(
        ..., ge=0, alias="duration", description="Estimated travel time"
    )
    geometry: list[GeoPoint] = Field(
        ..., min_length=2, description="Path polyline in (lat, lng) order"
    )
    steps: list[RouteStep] = Field(default_factory=list)


class PositionFix(ApiModel):
    """One reading from the device location provider."""

    point: GeoPoint
    accuracy_meters: float = Field(default=0.0, ge=0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))


class ProgressUpdate(ApiModel):
    """Result of feeding one position into the progress estimator."""

    remaining_distance_meters: float = Field(..., ge=0)
    step_index: int = Field(..., ge=0)
    arrived: bool
    just_arrived: bool = Field(
        default=False, description="True only on the update where arrival first happens"
    )


class NavigationSnapshot(ApiModel):
    """Serializable view of a NavigationSession at one instant."""

    destination: Destination
    profile: TravelProfile
    state: NavigationState
    route: Route | None = None
    user_position: GeoPoint | None = None
    accuracy_meters: float | None = Field(default=None, ge=0)
    remaining_distance_meters: float | None = Field(default=None, ge=0)
    current_step_index: int = Field(default=0, ge=0)
    current_step: RouteStep | None = None
    is_tracking: bool = False
    has_arrived: bool = False
    is_locating: bool = False
    is_loading_route: bool = False
    error: ServiceError | None = None
    banner: ServiceError | None = Field(
        default=None, description="Non-fatal notice; session keeps last-known data"
    )
    external_map_url: str
