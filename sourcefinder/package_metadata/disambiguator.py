"""
Disambiguation of repository links shared by several artifacts (monorepos)
"""

import json

from sourcefinder.common.errors import FetchError
from sourcefinder.common.models import select_git_credential
from sourcefinder.package_metadata.fetcher import is_success
from sourcefinder.package_metadata.source_urls import repo_matches_artifact

GITHUB_HOST = "github.com"
DEFAULT_GITHUB_API_URL = "https://api.github.com"


def _json_or_none(response):
    try:
        return json.loads(response.content)
    except (TypeError, ValueError):
        return None


class SourceDisambiguator:
    """
    Checks a repository for a subdirectory named after the artifact

    Used when a link inherited from a parent manifest names a repository
    other than the artifact, which usually means the repository hosts several
    artifacts side by side
    """

    def __init__(self, transport, credentials=(), api_url=DEFAULT_GITHUB_API_URL, logger=None):
        """
        Args:
            transport (RequestsTransport): Object performing single GET requests
            credentials (tuple): Parsed credentials; the github.com git-source one is used
            api_url (str): GitHub REST API base URL
            logger (Logger): Optional logger instance
        """
        self.transport = transport
        self.credentials = tuple(credentials or ())
        self.api_url = api_url.rstrip("/")
        self.logger = logger

    def disambiguate(self, source, artifact):
        """
        Confirm or narrow a repository link for an artifact

        Args:
            source (Source): Link found in a parent manifest
            artifact (str): Artifact name of the dependency

        Returns:
            Source: the link unchanged when its name matches or cannot be checked,
            or narrowed to the matching subdirectory.
            None: when the repository has no such subdirectory or cannot be listed
        """
        logger = self.logger
        if repo_matches_artifact(source, artifact):
            return source
        if source.host != GITHUB_HOST:
            logger and logger.debug(f"Cannot list {source.url}; keeping link for {artifact}")
            return source

        headers = self._headers()
        try:
            sha = self._latest_commit(source, headers)
            if sha is None:
                return None
            entries = self._root_contents(source, sha, headers)
        except FetchError as e:
            logger and logger.warning(f"Could not list {source.url}, keeping unverified link: {e}")
            return source
        if entries is None:
            return None

        for entry in entries:
            if not isinstance(entry, dict):
                continue
            if entry.get("type") == "dir" and entry.get("name") == artifact:
                logger and logger.debug(f"Found directory '{artifact}' in {source.url}")
                return source.with_directory(entry["name"])

        logger and logger.debug(f"No directory named '{artifact}' in {source.url}")
        return None

    def _headers(self):
        headers = {"Accept": "application/vnd.github+json"}
        credential = select_git_credential(self.credentials, GITHUB_HOST)
        if credential and credential.password:
            headers["Authorization"] = f"token {credential.password}"
        return headers

    def _latest_commit(self, source, headers):
        """
        Return the SHA at the head of the default branch, or None if the repo is inaccessible
        """
        url = f"{self.api_url}/repos/{source.owner}/{source.repo}/commits/HEAD"
        response = self.transport.get(url, headers=headers)
        if not is_success(response):
            self.logger and self.logger.debug(f"Repository lookup failed (HTTP {response.status_code}): {url}")
            return None
        data = _json_or_none(response)
        if not isinstance(data, dict) or not data.get("sha"):
            return None
        return data["sha"]

    def _root_contents(self, source, sha, headers):
        """
        Return the root directory listing at a commit, or None if it cannot be read
        """
        url = f"{self.api_url}/repos/{source.owner}/{source.repo}/contents/"
        response = self.transport.get(url, headers=headers, params={"ref": sha})
        if not is_success(response):
            self.logger and self.logger.debug(f"Contents listing failed (HTTP {response.status_code}): {url}")
            return None
        data = _json_or_none(response)
        if not isinstance(data, list):
            return None
        return data
