"""
Recognition of source repository links on code hosting platforms
"""

import re
from dataclasses import dataclass, replace
from typing import Optional
from urllib.parse import urlparse

SUPPORTED_HOSTS = ("github.com", "gitlab.com", "bitbucket.org")

# Module-internal regex patterns for repository URL parsing
_RE_SCM_PREFIX = re.compile(r"^scm:[a-z]+:", re.IGNORECASE)
_RE_SCP_LIKE = re.compile(r"^(?:[\w.-]+@)?([\w.-]+\.[a-z]{2,}):(?!//)(.+)$", re.IGNORECASE)
_RE_SOURCE = re.compile(
    r"(?<![\w.-])(?:www\.)?(?P<host>github\.com|gitlab\.com|bitbucket\.org)[/:]"
    r"(?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+)",
    re.IGNORECASE,
)
_RE_PATH_SEGMENT = re.compile(r"^[A-Za-z0-9_.-]+$")


@dataclass(frozen=True)
class Source:
    """
    A repository on a hosting platform, optionally narrowed to a directory
    """

    host: str
    owner: str
    repo: str
    directory: Optional[str] = None

    @property
    def url(self):
        return f"https://{self.host}/{self.owner}/{self.repo}"

    @property
    def url_with_directory(self):
        if not self.directory:
            return self.url
        return f"{self.url}/tree/HEAD/{self.directory}"

    def with_directory(self, directory):
        return replace(self, directory=directory)


def _strip_fragment(url_str):
    """
    Remove fragment part after '#' from repo URL string

    Args:
        url_str (str): Repository URL string

    Returns:
        URL string without fragment
    """
    if "#" in url_str:
        return url_str.split("#")[0]
    return url_str


def _normalize_git_prefixes(url_str):
    """
    Convert SCM connection strings and git-protocol URLs to https forms

    Handles 'scm:git:' prefixes, 'git+', 'git://', 'ssh://git@host/...' and
    scp-like 'git@host:owner/repo'

    Args:
        url_str (str): Repository URL string

    Returns:
        Normalized URL string
    """
    u = _RE_SCM_PREFIX.sub("", url_str.strip())
    if u.startswith("git+"):
        u = u[4:]
    if u.startswith("git://"):
        u = "https://" + u[6:]
    elif u.startswith("ssh://"):
        u = "https://" + u[6:].split("@", 1)[-1]
    else:
        scp = _RE_SCP_LIKE.match(u)
        if scp:
            u = f"https://{scp.group(1)}/{scp.group(2).lstrip('/')}"
    return u


def _strip_dot_git(name):
    """
    Remove trailing '.git' suffix and stray trailing dots

    Args:
        name (str): Repository name

    Returns:
        Repository name without suffix
    """
    name = name.rstrip(".")
    if name.lower().endswith(".git"):
        name = name[:-4]
    return name.rstrip(".")


def _make_source(host, owner, repo):
    repo = _strip_dot_git(repo)
    if not repo or owner in (".", ".."):
        return None
    return Source(host=host.lower(), owner=owner, repo=repo)


def _source_from_match(match):
    return _make_source(match.group("host"), match.group("owner"), match.group("repo"))


def source_from_url(url):
    """
    Recognise a repository link in a single manifest value

    Args:
        url (str): URL or SCM connection string

    Returns:
        Source or None if the value does not point at a supported hosting platform
    """
    if not url or not isinstance(url, str):
        return None
    try:
        parsed = urlparse(_normalize_git_prefixes(_strip_fragment(url)))
        host = (parsed.hostname or "").lower()
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https"):
        return None
    if host.startswith("www."):
        host = host[4:]
    if host not in SUPPORTED_HOSTS:
        return None
    segments = [s for s in parsed.path.split("/") if s]
    if len(segments) < 2 or not all(_RE_PATH_SEGMENT.match(s) for s in segments[:2]):
        return None
    return _make_source(host, segments[0], segments[1])


def find_sources_in_text(text):
    """
    Yield every repository link found anywhere in a block of text

    Args:
        text (str): Raw document text

    Yields:
        Source objects in order of appearance
    """
    if not text:
        return
    for match in _RE_SOURCE.finditer(text):
        source = _source_from_match(match)
        if source:
            yield source


def repo_matches_artifact(source, artifact):
    """
    Whether a repository name identifies the artifact itself

    Args:
        source (Source): Repository link
        artifact (str): Artifact name

    Returns:
        bool
    """
    return source.repo.lower() == artifact.lower()
