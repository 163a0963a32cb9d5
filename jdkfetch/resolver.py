"""
Release listing lookup.

Adoptium publishes one GitHub repository per JDK major version
(temurin<version>-binaries). Its releases are listed newest first and
each release carries the binaries for all platforms as assets.
"""

import enum
import json
from collections import namedtuple

from jdkfetch import config
from jdkfetch import log
from jdkfetch.error import AssetNotFoundError
from jdkfetch.matcher import AssetMatcher


ReleaseAsset = namedtuple("ReleaseAsset", ["name", "download_url"])


class ResolutionStatus(enum.Enum):
    FOUND = "found"
    NO_MATCH = "no-match"
    UNAVAILABLE = "unavailable"


class Resolution(namedtuple("Resolution", ["status", "asset", "status_code", "reason"])):
    """ Outcome of a release lookup. Only FOUND carries an asset. """

    @property
    def found(self):
        return self.status is ResolutionStatus.FOUND

    @staticmethod
    def make_found(asset):
        return Resolution(ResolutionStatus.FOUND, asset, 200, None)

    @staticmethod
    def make_no_match(reason):
        return Resolution(ResolutionStatus.NO_MATCH, None, 200, reason)

    @staticmethod
    def make_unavailable(reason, status_code=None):
        return Resolution(ResolutionStatus.UNAVAILABLE, None, status_code, reason)


def parse_releases(text):
    """
    Parses a release listing into an ordered list of asset lists.

    Releases without an assets array, and assets missing a name or a
    download URL, are skipped. Raises ValueError if the document isn't
    a JSON array.
    """
    releases = json.loads(text)
    if not isinstance(releases, list):
        raise ValueError("expected a JSON array of releases")

    result = []
    for release in releases:
        assets = release.get("assets") if isinstance(release, dict) else None
        if not isinstance(assets, list):
            continue
        result.append([
            ReleaseAsset(asset["name"], asset["browser_download_url"])
            for asset in assets
            if isinstance(asset, dict)
            and isinstance(asset.get("name"), str)
            and isinstance(asset.get("browser_download_url"), str)
        ])
    return result


class ReleaseResolver(object):
    def __init__(self, http, api_url=None, token=None):
        self._http = http
        self._api_url = (api_url or config.get_api_url()).rstrip("/")
        self._token = token if token is not None else config.get_github_token()

    def listing_url(self, version):
        return f"{self._api_url}/temurin{version}-binaries/releases"

    def _headers(self):
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def lookup(self, version, platform):
        """
        Finds the first asset matching the version and platform.

        Releases are searched in listed order, and assets within each
        release in listed order. The first match wins.

        Returns:
            A Resolution. Listing failures are reported as UNAVAILABLE,
            never raised. Transport errors propagate as NetworkError.
        """
        matcher = AssetMatcher(version, platform)
        url = self.listing_url(matcher.version)

        response = self._http.fetch(url, headers=self._headers())
        if response.status_code != 200:
            log.error("Failed to fetch releases. HTTP Status Code: {}", response.status_code)
            return Resolution.make_unavailable(
                f"release listing '{url}' returned status {response.status_code}",
                response.status_code)

        try:
            releases = parse_releases(response.text)
        except ValueError as e:
            log.error("Failed to parse release listing from {}: {}", url, e)
            return Resolution.make_unavailable(f"release listing '{url}' is malformed: {e}", 200)

        log.debug("Searching {} releases for {}", len(releases), matcher.token)
        for assets in releases:
            for asset in assets:
                if matcher.matches(asset.name):
                    log.verbose("Found {} at {}", asset.name, asset.download_url)
                    return Resolution.make_found(asset)

        return Resolution.make_no_match(f"no asset matching '{matcher.token}' in {len(releases)} releases")

    def resolve(self, version, platform):
        """ Returns the matching ReleaseAsset or raises AssetNotFoundError. """
        resolution = self.lookup(version, platform)
        if not resolution.found:
            raise AssetNotFoundError(
                f"No JDK {version} download found for {platform}: {resolution.reason}",
                resolution=resolution)
        return resolution.asset
