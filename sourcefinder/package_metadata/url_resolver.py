"""
Source URL resolution for dependencies hosted in Maven-style registries

Entry points are MavenSourceFinder.source_url() for one dependency and
resolve_source_urls() for a batch
"""

from concurrent.futures import ThreadPoolExecutor

from sourcefinder.common.config import ResolverSettings
from sourcefinder.common.input_validation import ValidationError
from sourcefinder.common.models import parse_credentials
from sourcefinder.package_metadata.addressing import manifest_url, registry_base_url
from sourcefinder.package_metadata.cache import ResolutionCache
from sourcefinder.package_metadata.disambiguator import SourceDisambiguator
from sourcefinder.package_metadata.fetcher import DocumentFetcher, RequestsTransport
from sourcefinder.package_metadata.manifest import parse_manifest
from sourcefinder.package_metadata.properties import resolve_placeholders
from sourcefinder.package_metadata.source_urls import find_sources_in_text, repo_matches_artifact, source_from_url


def build_transport(settings):
    """
    Create the default requests-backed transport for the given settings

    Args:
        settings (ResolverSettings): Resolver settings

    Returns:
        RequestsTransport
    """
    return RequestsTransport(timeout=settings.REQUEST_TIMEOUT, user_agent=settings.USER_AGENT)


class MavenSourceFinder:
    """
    Finds the source repository of one dependency from its registry manifest

    The lookup walks the manifest, then its parents, and runs at most once per
    finder; later calls return the memoized result without network activity
    """

    def __init__(self, dependency, credentials=(), transport=None, settings=None, logger=None, cache=None):
        """
        Args:
            dependency (Dependency): Dependency to resolve
            credentials (list): Credential dicts or parsed credential objects
            transport (RequestsTransport): Optional transport; defaults to a requests session
            settings (ResolverSettings): Optional settings; defaults to environment-derived ones
            logger (Logger): Optional logger instance
            cache (ResolutionCache): Optional cache shared between finders
        """
        self.dependency = dependency
        self.credentials = parse_credentials(credentials, logger)
        self.settings = settings or ResolverSettings()
        self.transport = transport or build_transport(self.settings)
        self.logger = logger
        self.cache = cache if cache is not None else ResolutionCache()
        self.fetcher = DocumentFetcher(
            self.transport, self.credentials, max_redirects=self.settings.MAX_REDIRECTS, logger=logger
        )
        self.disambiguator = SourceDisambiguator(
            self.transport, self.credentials, api_url=self.settings.GITHUB_API_URL, logger=logger
        )

    def source_url(self):
        """
        Return the dependency's source repository URL

        Returns:
            str or None: Repository URL, or None if no source is documented

        Raises:
            FetchError: If a registry could not be reached
        """
        source = self.source()
        return source.url_with_directory if source else None

    def source(self):
        """
        Return the dependency's source repository as a Source object (memoized)

        Returns:
            Source or None
        """
        return self.cache.get_or_resolve(self.dependency.cache_key, self._look_up_source)

    def _look_up_source(self):
        dependency = self.dependency
        logger = self.logger
        base_url = registry_base_url(dependency, self.settings.DEFAULT_REGISTRY_URL, logger)
        logger and logger.debug(f"Resolving source for {dependency.name}:{dependency.version} via {base_url}")

        found = self._walk(dependency.coordinate, base_url, visited=frozenset(), depth=0)
        if found is None:
            logger and logger.debug(f"No source documented for {dependency.name}")
            return None

        source, inherited = found
        if inherited:
            source = self.disambiguator.disambiguate(source, dependency.artifact)
        if source:
            logger and logger.debug(f"Resolved {dependency.name} -> {source.url_with_directory}")
        return source

    def _walk(self, coordinate, base_url, visited, depth):
        """
        Look for a source link in a manifest, then recursively in its parents

        Args:
            coordinate (Coordinate): Manifest to inspect
            base_url (str): Registry base URL, shared by the whole chain
            visited (frozenset): Coordinates already inspected in this walk
            depth (int): Number of parent hops taken so far

        Returns:
            tuple or None: (Source, inherited_from_parent) or None
        """
        logger = self.logger
        if coordinate in visited:
            logger and logger.warning(f"Parent manifest cycle at {coordinate}")
            return None
        max_depth = self.settings.MAX_PARENT_DEPTH
        if depth > max_depth:
            logger and logger.warning(f"Parent chain for {self.dependency.name} exceeds {max_depth} levels")
            return None

        try:
            url = manifest_url(coordinate, base_url, self.settings.MANIFEST_EXTENSION)
        except ValidationError as e:
            logger and logger.warning(f"Skipping invalid coordinate {coordinate}: {e}")
            return None

        content = self.fetcher.fetch(url, base_url)
        if content is None:
            return None

        document = parse_manifest(content, logger)
        if document is None:
            logger and logger.debug(f"Could not parse manifest at {url}")
            return None
        if document.coordinate is not None and document.coordinate != coordinate:
            logger and logger.debug(f"Manifest at {url} describes {document.coordinate}, expected {coordinate}")

        source = self._source_in_manifest(document)
        if source:
            return source, depth > 0

        if document.parent is None:
            return None
        logger and logger.debug(f"No source link in {coordinate}; trying parent {document.parent}")
        return self._walk(document.parent, base_url, visited | {coordinate}, depth + 1)

    def _source_in_manifest(self, document):
        """
        Extract the first usable source link from a parsed manifest

        Declared fields are tried in priority order; failing those, any link
        embedded in the document whose repository is named after the artifact
        """
        for source_field in document.source_fields:
            value = source_field.value
            if source_field.has_placeholders:
                value = resolve_placeholders(value, document.properties, self.logger)
            if value is None:
                continue
            source = source_from_url(value)
            if source:
                return source

        for source in find_sources_in_text(document.text):
            if repo_matches_artifact(source, self.dependency.artifact):
                return source
        return None


def resolve_source_url(dependency, credentials=(), transport=None, settings=None, logger=None):
    """
    Resolve the source repository URL of a single dependency

    Args:
        dependency (Dependency): Dependency to resolve
        credentials (list): Credential dicts or parsed credential objects
        transport (RequestsTransport): Optional transport
        settings (ResolverSettings): Optional settings
        logger (Logger): Optional logger instance

    Returns:
        str or None

    Raises:
        FetchError: If a registry could not be reached
    """
    finder = MavenSourceFinder(dependency, credentials, transport=transport, settings=settings, logger=logger)
    return finder.source_url()


def resolve_source_urls(dependencies, credentials=(), transport=None, settings=None, logger=None, cache=None):
    """
    Resolve source URLs for many dependencies concurrently

    Resolutions share one transport and one cache, so duplicates in the
    input are fetched once

    Args:
        dependencies (iterable): Dependency objects
        credentials (list): Credential dicts or parsed credential objects
        transport (RequestsTransport): Optional transport shared by all workers
        settings (ResolverSettings): Optional settings
        logger (Logger): Optional logger instance
        cache (ResolutionCache): Optional pre-populated cache

    Returns:
        dict: Mapping of 'group:artifact:version' to URL or None

    Raises:
        FetchError: If any registry could not be reached
    """
    settings = settings or ResolverSettings()
    transport = transport or build_transport(settings)
    cache = cache if cache is not None else ResolutionCache()
    credentials = parse_credentials(credentials, logger)
    dependencies = list(dependencies)

    def _resolve(dependency):
        finder = MavenSourceFinder(
            dependency, credentials, transport=transport, settings=settings, logger=logger, cache=cache
        )
        return finder.source_url()

    results = {}
    with ThreadPoolExecutor(max_workers=settings.MAX_WORKERS) as executor:
        for dependency, url in zip(dependencies, executor.map(_resolve, dependencies)):
            results[f"{dependency.name}:{dependency.version}"] = url
    return results
