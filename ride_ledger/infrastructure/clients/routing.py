"""Geocoding and driving-directions HTTP client (Mapbox-style API)"""

import httpx
from typing import List, Optional
from urllib.parse import quote
from ride_ledger.domain.models import Coordinates, PlaceSuggestion
from ride_ledger.domain.exceptions import RoutingAPIError
from ride_ledger.config import settings

# Shorter queries return no suggestions without calling the provider
MIN_QUERY_LENGTH = 3


class RoutingClient:
    """Client for the external geocoding/routing provider"""

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.routing_api_base).rstrip("/")
        self.access_token = access_token if access_token is not None else settings.routing_access_token
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def forward_geocode(
        self,
        query: str,
        country: str | None = None,
        limit: int | None = None,
    ) -> List[PlaceSuggestion]:
        """
        Ranked address matches for free text.

        Raises:
            RoutingAPIError: On timeout, HTTP errors, or invalid response
        """
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/geocoding/v5/mapbox.places/{quote(query, safe='')}.json",
                    params={
                        "access_token": self.access_token,
                        "country": country or settings.geocoding_country,
                        "limit": limit or settings.geocoding_limit,
                    },
                )
                response.raise_for_status()
                data = response.json()

                return [
                    PlaceSuggestion(
                        place_name=feature["place_name"],
                        coordinates=(
                            float(feature["geometry"]["coordinates"][0]),
                            float(feature["geometry"]["coordinates"][1]),
                        ),
                    )
                    for feature in data.get("features", [])
                ]

            except httpx.TimeoutException as e:
                raise RoutingAPIError(f"Geocoding API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise RoutingAPIError(f"Geocoding API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise RoutingAPIError(f"Geocoding API unreachable: {e}") from e
            except (KeyError, IndexError, ValueError, TypeError) as e:
                raise RoutingAPIError(f"Invalid geocoding data: {e}") from e

    async def route_distance(self, origin: Coordinates, destination: Coordinates) -> Optional[float]:
        """
        Driving distance in meters of the primary route.

        Returns None when the provider finds no route between the points.

        Raises:
            RoutingAPIError: On timeout, HTTP errors, or invalid response
        """
        waypoints = f"{origin[0]},{origin[1]};{destination[0]},{destination[1]}"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/directions/v5/mapbox/driving/{waypoints}",
                    params={
                        "access_token": self.access_token,
                        "geometries": "geojson",
                        "overview": "full",
                    },
                )
                response.raise_for_status()
                routes = response.json().get("routes") or []

                if not routes:
                    return None
                return float(routes[0]["distance"])

            except httpx.TimeoutException as e:
                raise RoutingAPIError(f"Directions API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise RoutingAPIError(f"Directions API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise RoutingAPIError(f"Directions API unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise RoutingAPIError(f"Invalid directions data: {e}") from e
