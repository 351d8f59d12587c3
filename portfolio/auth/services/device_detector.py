"""
Device detection from User-Agent strings.

Extracts device class, OS, and browser information for session tracking.
"""

import re
from typing import Optional, Tuple, TypedDict


class DeviceInfo(TypedDict):
    """Device information extracted from User-Agent."""
    deviceType: str
    browser: str
    browserVersion: Optional[str]
    os: str
    osVersion: Optional[str]
    displayName: str


_DEVICE_ICONS = {
    "mobile": "📱",
    "tablet": "📲",
    "desktop": "💻",
}


def normalize_ip(ip_address: Optional[str]) -> str:
    """
    Reduce a raw client address to a single plain IP.

    Takes the first hop of a comma-separated forwarded-for chain, trims
    whitespace, and strips an IPv4-mapped IPv6 prefix.
    """
    if not ip_address:
        return ""

    ip = ip_address.split(",")[0].strip()
    if ip.startswith("::ffff:"):
        ip = ip[len("::ffff:"):]
    return ip


class DeviceDetector:
    """
    Extracts device type and details from User-Agent header.

    All checks are case-insensitive substring tests; within each family the
    first matching rule wins.
    """

    def detect(self, user_agent: str) -> DeviceInfo:
        """
        Parse User-Agent and return device information.

        Args:
            user_agent: HTTP User-Agent header value

        Returns:
            dict with fields:
                - deviceType: "mobile" | "tablet" | "desktop"
                - browser / browserVersion: e.g. "Google Chrome", "120"
                - os / osVersion: e.g. "macOS", "10.15.7"
                - displayName: e.g. "💻 Google Chrome 120 on macOS 10.15.7"
        """
        if not user_agent:
            return DeviceInfo(
                deviceType="desktop",
                browser="Unknown",
                browserVersion=None,
                os="Unknown",
                osVersion=None,
                displayName=f"{_DEVICE_ICONS['desktop']} Unknown browser on Unknown OS",
            )

        ua = user_agent.lower()

        browser, browser_version = self._detect_browser(ua)
        os_name, os_version = self._detect_os(ua)
        device_type = self._detect_device_type(ua)

        browser_label = f"{browser} {browser_version}" if browser_version else browser
        os_label = f"{os_name} {os_version}" if os_version else os_name

        return DeviceInfo(
            deviceType=device_type,
            browser=browser,
            browserVersion=browser_version,
            os=os_name,
            osVersion=os_version,
            displayName=f"{_DEVICE_ICONS[device_type]} {browser_label} on {os_label}",
        )

    def _detect_browser(self, ua: str) -> Tuple[str, Optional[str]]:
        """Detect browser name and major version."""
        if "edg" in ua:
            return "Microsoft Edge", _search(r"edg[a-z]*/(\d+)", ua)
        if "chrome" in ua:
            return "Google Chrome", _search(r"chrome/(\d+)", ua)
        if "firefox" in ua:
            return "Mozilla Firefox", _search(r"firefox/(\d+)", ua)
        if "safari" in ua:
            return "Safari", _search(r"version/(\d+)", ua)
        if "opera" in ua or "opr/" in ua:
            return "Opera", _search(r"(?:opr|opera)[/ ](\d+)", ua)
        return "Unknown", None

    def _detect_os(self, ua: str) -> Tuple[str, Optional[str]]:
        """Detect operating system name and version."""
        if "windows nt 10.0" in ua:
            return "Windows", "10/11"
        if "windows nt 6.3" in ua:
            return "Windows", "8.1"
        if "windows nt 6.2" in ua:
            return "Windows", "8"
        if "windows nt 6.1" in ua:
            return "Windows", "7"
        if "windows" in ua:
            return "Windows", None
        # iOS user agents also say "like Mac OS X"
        if "mac os x" in ua and "iphone" not in ua and "ipad" not in ua:
            version = _search(r"mac os x (\d+(?:[._]\d+)*)", ua)
            return "macOS", version.replace("_", ".") if version else None
        if "android" in ua:
            return "Android", _search(r"android (\d+(?:\.\d+)*)", ua)
        if "iphone" in ua or "ipad" in ua:
            version = _search(r"os (\d+(?:_\d+)*) like mac os x", ua)
            return "iOS", version.replace("_", ".") if version else None
        if "linux" in ua:
            return "Linux", None
        if "cros" in ua:
            return "Chrome OS", None
        return "Unknown", None

    def _detect_device_type(self, ua: str) -> str:
        """Detect device type (mobile, tablet, desktop)."""
        if "tablet" in ua or "ipad" in ua:
            return "tablet"
        if "mobile" in ua or "android" in ua:
            return "mobile"
        return "desktop"


def _search(pattern: str, text: str) -> Optional[str]:
    match = re.search(pattern, text)
    return match.group(1) if match else None
