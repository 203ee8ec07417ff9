"""
Registry addressing: from a package coordinate to a manifest document URL
"""

from sourcefinder.common.input_validation import InputValidator, ValidationError


def registry_base_url(dependency, default_url, logger=None):
    """
    Pick the registry base URL declared by the dependency's requirements

    Declared sources that are not valid http(s) URLs are skipped

    Args:
        dependency (Dependency): Dependency being resolved
        default_url (str): Public registry used when nothing usable is declared
        logger (Logger): Optional logger instance

    Returns:
        str: Base URL without trailing slash
    """
    for url in dependency.declared_registry_urls:
        try:
            InputValidator.validate_url(url)
        except ValidationError as e:
            logger and logger.debug(f"Ignoring unusable registry source for {dependency.name}: {e}")
            continue
        return url.rstrip("/")
    return default_url.rstrip("/")


def manifest_url(coordinate, base_url, extension="pom"):
    """
    Build the URL of the manifest document for a coordinate

    Args:
        coordinate (Coordinate): Group/artifact/version triple
        base_url (str): Registry base URL
        extension (str): Manifest file extension

    Returns:
        str: e.g. '<base>/com/google/guava/guava/23.3-jre/guava-23.3-jre.pom'

    Raises:
        ValidationError: If a coordinate segment is unsafe to place in a URL
    """
    coordinate.validate()
    group_path = coordinate.group.replace(".", "/")
    artifact = coordinate.artifact
    version = coordinate.version
    return f"{base_url.rstrip('/')}/{group_path}/{artifact}/{version}/{artifact}-{version}.{extension}"
