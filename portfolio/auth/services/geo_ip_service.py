"""
GeoIP lookup service for IP-to-location mapping.

Queries an ip-api.com compatible JSON endpoint. Lookups are best-effort:
every failure yields the "Unknown" location and is never raised.
"""

import ipaddress
import logging
from typing import Optional, TypedDict

import httpx

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


class LocationInfo(TypedDict):
    """Geographic location information."""
    city: str
    region: str
    country: str
    isp: str


def unknown_location() -> LocationInfo:
    return LocationInfo(city=UNKNOWN, region=UNKNOWN, country=UNKNOWN, isp=UNKNOWN)


class GeoIPService:
    """
    IP-to-location lookup service over HTTP.
    """

    _FIELDS = "status,message,country,regionName,city,isp"

    def __init__(
        self,
        api_url: str = "http://ip-api.com/json/{ip}",
        timeout: float = 3.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize GeoIP service.

        Args:
            api_url: URL template with an ``{ip}`` placeholder
            timeout: Per-request timeout in seconds
            http_client: Shared client; a short-lived one is opened per lookup if omitted
        """
        self._api_url = api_url
        self._timeout = timeout
        self._http_client = http_client

    async def lookup(self, ip_address: str) -> LocationInfo:
        """
        Get location for an IP address.

        Args:
            ip_address: Normalized IPv4 or IPv6 address

        Returns:
            dict with city, region, country and isp; "Unknown" for any field
            the lookup could not provide. Private, loopback and unparseable
            addresses are not sent to the remote service.
        """
        if not ip_address or not self._is_public_ip(ip_address):
            return unknown_location()

        url = self._api_url.format(ip=ip_address)

        try:
            if self._http_client is not None:
                response = await self._http_client.get(
                    url, params={"fields": self._FIELDS}, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url, params={"fields": self._FIELDS})

            if response.status_code != 200:
                logger.debug(f"GeoIP lookup returned HTTP {response.status_code}")
                return unknown_location()

            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"GeoIP lookup failed: {e}")
            return unknown_location()

        if not isinstance(data, dict) or data.get("status") != "success":
            logger.debug(f"GeoIP lookup unsuccessful: {data}")
            return unknown_location()

        return LocationInfo(
            city=data.get("city") or UNKNOWN,
            region=data.get("regionName") or UNKNOWN,
            country=data.get("country") or UNKNOWN,
            isp=data.get("isp") or UNKNOWN,
        )

    def _is_public_ip(self, ip_address: str) -> bool:
        """Check that an address parses and is globally routable."""
        try:
            ip = ipaddress.ip_address(ip_address)
        except ValueError:
            return False
        return not (ip.is_private or ip.is_loopback or ip.is_link_local)
