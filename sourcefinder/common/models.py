"""
Data model for dependencies, package coordinates and credentials
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from sourcefinder.common.input_validation import InputValidator

MAVEN_REPO_SOURCE_TYPE = "maven_repo"
REGISTRY_CREDENTIAL_TYPE = "maven_repository"
GIT_SOURCE_CREDENTIAL_TYPE = "git_source"


@dataclass(frozen=True)
class Coordinate:
    """
    A {group, artifact, version} triple identifying one manifest in a registry
    """

    group: str
    artifact: str
    version: str

    @property
    def name(self):
        return f"{self.group}:{self.artifact}"

    def validate(self):
        """
        Check that every segment is safe to place in a registry URL

        Returns:
            The coordinate itself

        Raises:
            ValidationError: If a segment is empty or contains path characters
        """
        InputValidator.validate_coordinate_part(self.group, "group")
        InputValidator.validate_coordinate_part(self.artifact, "artifact")
        InputValidator.validate_coordinate_part(self.version, "version")
        return self

    def __str__(self):
        return f"{self.group}:{self.artifact}:{self.version}"


@dataclass(frozen=True)
class RequirementSource:
    """Registry that supplied a requirement, e.g. {'type': 'maven_repo', 'url': ...}"""

    type: str
    url: Optional[str] = None


@dataclass(frozen=True)
class Requirement:
    file: str
    requirement: Optional[str] = None
    groups: Tuple[str, ...] = ()
    source: Optional[RequirementSource] = None


@dataclass(frozen=True)
class Dependency:
    """
    A dependency identified by group and artifact at a given version

    Instances are immutable; memoized resolution results are keyed on cache_key
    """

    group: str
    artifact: str
    version: str
    requirements: Tuple[Requirement, ...] = field(default_factory=tuple)
    package_manager: str = "maven"

    @classmethod
    def from_name(cls, name, version, requirements=(), package_manager="maven"):
        """
        Build a dependency from a Maven 'group:artifact' name

        Args:
            name (str): Dependency name such as 'com.google.guava:guava'
            version (str): Dependency version
            requirements (iterable): Requirement objects or plain dicts
            package_manager (str): Package manager identifier

        Returns:
            Dependency instance

        Raises:
            ValueError: If the name is not of the form 'group:artifact'
        """
        group, sep, artifact = name.partition(":")
        if not sep or not group or not artifact or ":" in artifact:
            raise ValueError(f"Expected 'group:artifact', got '{name}'")
        reqs = tuple(_coerce_requirement(r) for r in requirements)
        return cls(group=group, artifact=artifact, version=version, requirements=reqs, package_manager=package_manager)

    @property
    def name(self):
        return f"{self.group}:{self.artifact}"

    @property
    def coordinate(self):
        return Coordinate(self.group, self.artifact, self.version)

    @property
    def declared_registry_urls(self):
        """Registry URLs declared by the requirements, in declaration order"""
        urls = []
        for req in self.requirements:
            source = req.source
            if source and source.type == MAVEN_REPO_SOURCE_TYPE and source.url:
                urls.append(source.url)
        return tuple(urls)

    @property
    def cache_key(self):
        declared = self.declared_registry_urls
        return (self.group, self.artifact, self.version, declared[0] if declared else None)


def _coerce_requirement(value):
    if isinstance(value, Requirement):
        return value
    source = value.get("source")
    if isinstance(source, dict):
        source = RequirementSource(type=source.get("type"), url=source.get("url"))
    return Requirement(
        file=value.get("file", ""),
        requirement=value.get("requirement"),
        groups=tuple(value.get("groups") or ()),
        source=source,
    )


# Credentials


@dataclass(frozen=True)
class RegistryCredential:
    """Credential for an artifact registry, keyed by registry URL"""

    url: str
    username: Optional[str] = None
    password: Optional[str] = None

    type = REGISTRY_CREDENTIAL_TYPE

    @property
    def basic_auth(self):
        if self.username and self.password:
            return (self.username, self.password)
        return None

    def matches(self, base_url):
        """
        Whether this credential applies to requests against base_url

        Matches exactly, or as a prefix ending at a path boundary; trailing
        slashes are ignored on both sides
        """
        if not base_url or not self.url:
            return False
        own = self.url.rstrip("/")
        other = base_url.rstrip("/")
        return other == own or other.startswith(own + "/")


@dataclass(frozen=True)
class GitSourceCredential:
    """Credential for a git hosting platform, keyed by host"""

    host: str
    username: Optional[str] = None
    password: Optional[str] = None

    type = GIT_SOURCE_CREDENTIAL_TYPE

    def matches(self, host):
        return bool(host) and self.host.lower() == host.lower()


def parse_credentials(raw_credentials, logger=None):
    """
    Turn plain credential dicts into tagged credential objects

    Credential objects already of the right class are passed through; entries
    of unknown type and entries that are not mappings are skipped

    Args:
        raw_credentials (list): Dicts such as {'type': 'git_source', 'host': 'github.com', ...}
        logger (Logger): Optional logger instance

    Returns:
        tuple: RegistryCredential and GitSourceCredential instances
    """
    parsed = []
    for entry in raw_credentials or ():
        if isinstance(entry, (RegistryCredential, GitSourceCredential)):
            parsed.append(entry)
            continue
        if not isinstance(entry, dict):
            logger and logger.warning(f"Ignoring malformed credential entry: {type(entry).__name__}")
            continue
        cred_type = entry.get("type")
        if cred_type == REGISTRY_CREDENTIAL_TYPE and entry.get("url"):
            parsed.append(
                RegistryCredential(url=entry["url"], username=entry.get("username"), password=entry.get("password"))
            )
        elif cred_type == GIT_SOURCE_CREDENTIAL_TYPE and entry.get("host"):
            parsed.append(
                GitSourceCredential(host=entry["host"], username=entry.get("username"), password=entry.get("password"))
            )
        else:
            logger and logger.debug(f"Ignoring credential of unsupported type: {cred_type}")
    return tuple(parsed)


def select_registry_credential(credentials, base_url):
    """
    Return the first registry credential matching base_url, or None

    Args:
        credentials (iterable): Parsed credentials
        base_url (str): Registry base URL the request targets

    Returns:
        RegistryCredential or None
    """
    for credential in credentials:
        if isinstance(credential, RegistryCredential) and credential.matches(base_url):
            return credential
    return None


def select_git_credential(credentials, host):
    """
    Return the first git-source credential for host, or None

    Args:
        credentials (iterable): Parsed credentials
        host (str): Hosting platform host, e.g. 'github.com'

    Returns:
        GitSourceCredential or None
    """
    for credential in credentials:
        if isinstance(credential, GitSourceCredential) and credential.matches(host):
            return credential
    return None
