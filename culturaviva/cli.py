"""CLI entry point: replay a recorded GPS track through a navigation session.

Usage:
    python -m culturaviva.cli --track walk.json --dest-lat -3.7319 --dest-lng -38.5267 \
        --name "Theatro José de Alencar" --profile walking

The track is a JSON list of ``{"lat": .., "lng": .., "accuracy": ..}`` fixes.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

import httpx

from culturaviva.config import Settings
from culturaviva.contracts.common import Destination, GeoPoint
from culturaviva.contracts.enums import NavigationState, TravelProfile
from culturaviva.contracts.navigation import NavigationSnapshot, PositionFix
from culturaviva.services.navigation.directions_client import DirectionsClient
from culturaviva.services.navigation.formatting import format_distance, format_duration
from culturaviva.services.navigation.location import PushLocationProvider
from culturaviva.services.navigation.session import NavigationSession, RouteSource

logger = logging.getLogger(__name__)

PROFILES = {
    "walking": TravelProfile.WALKING,
    "driving": TravelProfile.DRIVING,
    "cycling": TravelProfile.CYCLING,
}


def load_track(path: Path) -> list[PositionFix]:
    """Read a JSON track file into position fixes."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON list of fixes")
    return [
        PositionFix(
            point=GeoPoint(latitude=item["lat"], longitude=item["lng"]),
            accuracy_meters=item.get("accuracy", 0.0),
        )
        for item in raw
    ]


async def replay(
    track: list[PositionFix],
    destination: Destination,
    directions: RouteSource,
    profile: TravelProfile = TravelProfile.WALKING,
    settings: Settings | None = None,
    interval_s: float = 0.0,
) -> NavigationSnapshot:
    """Open a session at the first fix, navigate, and feed the remaining fixes."""
    if not track:
        raise ValueError("Track is empty")

    last_step: list[int] = [-1]

    def on_change(snapshot: NavigationSnapshot) -> None:
        step = snapshot.current_step
        if not snapshot.is_tracking or step is None:
            return
        if snapshot.current_step_index != last_step[0]:
            last_step[0] = snapshot.current_step_index
            logger.info("Step %d: %s", snapshot.current_step_index + 1, step.instruction_text)

    provider = PushLocationProvider(max_age_s=float("inf"))
    session = NavigationSession(
        destination,
        directions,
        provider,
        profile=profile,
        settings=settings,
        on_change=on_change,
        haptics=lambda: logger.info("Arrival cue for %s", destination.name),
    )
    try:
        provider.publish(track[0])
        snapshot = await session.open()
        if snapshot.route is None or snapshot.state != NavigationState.ROUTE_READY:
            message = snapshot.error.message if snapshot.error else snapshot.state
            logger.error("Cannot navigate: %s", message)
            logger.info("Open in an external map: %s", session.external_map_url)
            return snapshot

        logger.info(
            "Route: %s, %s, %d steps",
            format_distance(snapshot.route.distance_meters),
            format_duration(snapshot.route.duration_seconds),
            len(snapshot.route.steps),
        )
        session.start_navigation()

        for index, fix in enumerate(track[1:], start=1):
            if session.has_arrived:
                break
            provider.publish(fix)
            snapshot = session.snapshot()
            remaining = snapshot.remaining_distance_meters or 0
            logger.debug("Fix %d: %s to go", index, format_distance(remaining))
            if interval_s:
                await asyncio.sleep(interval_s)

        snapshot = session.snapshot()
        if snapshot.has_arrived:
            logger.info("Arrived at %s", destination.name)
        else:
            logger.info(
                "Track ended %s from %s",
                format_distance(snapshot.remaining_distance_meters or 0),
                destination.name,
            )
        return snapshot
    finally:
        session.close()


async def _run(args: argparse.Namespace) -> NavigationSnapshot:
    settings = Settings.from_env()
    if args.api_url:
        settings.api_base_url = args.api_url.rstrip("/")
    track = load_track(args.track)[args.start_index:]
    destination = Destination(latitude=args.dest_lat, longitude=args.dest_lng, name=args.name)
    async with httpx.AsyncClient(timeout=settings.http_timeout_s) as http_client:
        directions = DirectionsClient(http_client, settings.api_base_url)
        return await replay(
            track,
            destination,
            directions,
            profile=PROFILES[args.profile],
            settings=settings,
            interval_s=args.interval,
        )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Cultura Viva navigation replay")
    parser.add_argument("--track", type=Path, required=True, help="JSON track file")
    parser.add_argument("--dest-lat", type=float, required=True, help="Destination latitude")
    parser.add_argument("--dest-lng", type=float, required=True, help="Destination longitude")
    parser.add_argument("--name", type=str, default="Destino", help="Destination name")
    parser.add_argument("--profile", choices=sorted(PROFILES), default="walking")
    parser.add_argument("--start-index", type=int, default=0, help="Skip the first N fixes")
    parser.add_argument("--interval", type=float, default=0.0, help="Seconds between fixes")
    parser.add_argument("--api-url", type=str, default=None, help="Override backend URL")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    snapshot = asyncio.run(_run(args))
    if not snapshot.has_arrived:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
