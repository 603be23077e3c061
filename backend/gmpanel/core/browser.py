"""User-Agent based browser and platform detection."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

# order matters: Edge and Opera also announce themselves as Chrome/Safari
_BROWSERS = (
    ("Edge", re.compile(r"Edg(?:e|A|iOS)?/([\d.]+)")),
    ("Opera", re.compile(r"(?:OPR|Opera)/([\d.]+)")),
    ("Yandex", re.compile(r"YaBrowser/([\d.]+)")),
    ("Firefox", re.compile(r"(?:Firefox|FxiOS)/([\d.]+)")),
    ("Chrome", re.compile(r"(?:Chrome|CriOS)/([\d.]+)")),
    ("Safari", re.compile(r"Version/([\d.]+).*Safari/")),
    ("Internet Explorer", re.compile(r"(?:MSIE |Trident/.*rv:)([\d.]+)")),
)

_WINDOWS_VERSIONS = {
    "10.0": "10",
    "6.3": "8.1",
    "6.2": "8",
    "6.1": "7",
    "6.0": "Vista",
    "5.1": "XP",
}

_PLATFORMS = (
    ("Windows", re.compile(r"Windows NT ([\d.]+)")),
    ("iOS", re.compile(r"(?:iPhone|iPad|iPod).*? OS ([\d_]+)")),
    ("macOS", re.compile(r"Mac OS X ([\d_.]+)")),
    ("Android", re.compile(r"Android ([\d.]+)")),
    ("Linux", re.compile(r"Linux()")),
)


@dataclass(frozen=True)
class BrowserInfo:
    browser_name: Optional[str] = None
    browser_family: Optional[str] = None
    os_name: Optional[str] = None
    os_family: Optional[str] = None


def _major(version: str) -> str:
    return version.replace("_", ".").split(".")[0]


def detect(user_agent: Optional[str]) -> BrowserInfo:
    if not user_agent:
        return BrowserInfo()

    browser_name = browser_family = None
    for family, pattern in _BROWSERS:
        match = pattern.search(user_agent)
        if match:
            browser_family = family
            browser_name = f"{family} {_major(match.group(1))}"
            break

    os_name = os_family = None
    for family, pattern in _PLATFORMS:
        match = pattern.search(user_agent)
        if not match:
            continue
        os_family = family
        version = match.group(1)
        if family == "Windows":
            os_name = f"Windows {_WINDOWS_VERSIONS.get(version, version)}"
        elif version:
            os_name = f"{family} {version.replace('_', '.')}"
        else:
            os_name = family
        break

    return BrowserInfo(
        browser_name=browser_name,
        browser_family=browser_family,
        os_name=os_name,
        os_family=os_family,
    )
