"""
CLI entry point

Resolves the source repository URL of a single Maven dependency and prints it
on stdout. Exit status is 0 when a URL was found, 2 when the registry documents
no source, and 1 on errors (unreachable registry, invalid input)
"""

import argparse
import json
import sys

from pydantic import ValidationError as SettingsValidationError

from sourcefinder.common.config import ResolverSettings, load_settings
from sourcefinder.common.errors import FetchError
from sourcefinder.common.input_validation import InputValidator, ValidationError
from sourcefinder.common.models import MAVEN_REPO_SOURCE_TYPE, Dependency
from sourcefinder.common.utils import Logger
from sourcefinder.package_metadata.url_resolver import MavenSourceFinder

EXIT_FOUND = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def parse_args(argv=None):
    """
    Parse command line arguments

    Args:
        argv (list): Optional argument list; defaults to sys.argv

    Returns:
        Parsed arguments object
    """
    parser = argparse.ArgumentParser(description="Find the source repository of a Maven dependency")
    parser.add_argument("name", help="Dependency name as group:artifact, e.g. com.google.guava:guava")
    parser.add_argument("version", help="Dependency version, e.g. 23.3-jre")
    parser.add_argument("-r", "--registry", help="Registry base URL the dependency comes from")
    parser.add_argument("--credentials", help="Path to a JSON file holding a list of credential objects")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose debug logging")
    parser.add_argument("-c", "--config", help="JSON string with configuration overrides")
    return parser.parse_args(argv)


def _load_credentials(path):
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list) or not all(isinstance(entry, dict) for entry in data):
        raise ValueError("Credentials file must contain a JSON list of objects")
    return data


def _load_overrides(raw):
    overrides = json.loads(raw)
    if not isinstance(overrides, dict):
        raise ValueError("Configuration overrides must be a JSON object")
    unknown = sorted(set(overrides) - set(ResolverSettings.model_fields))
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
    return overrides


def main(argv=None):
    """
    Main entry point for the sourcefinder CLI application

    Args:
        argv (list): Optional argument list; defaults to sys.argv

    Returns:
        int: Process exit status
    """
    args = parse_args(argv)
    logger = Logger(verbose=args.verbose)

    try:
        overrides = _load_overrides(args.config) if args.config else None
        settings = load_settings(overrides)
        credentials = _load_credentials(args.credentials) if args.credentials else []
        if args.registry:
            InputValidator.validate_url(args.registry)
    except (ValueError, OSError, SettingsValidationError, ValidationError) as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_ERROR

    requirements = []
    if args.registry:
        requirements.append({"file": "pom.xml", "source": {"type": MAVEN_REPO_SOURCE_TYPE, "url": args.registry}})

    try:
        dependency = Dependency.from_name(args.name, args.version, requirements)
        dependency.coordinate.validate()
        url = MavenSourceFinder(dependency, credentials, settings=settings, logger=logger).source_url()
    except (ValueError, ValidationError) as e:
        logger.error(str(e))
        return EXIT_ERROR
    except FetchError as e:
        logger.error(f"{e.error_type.value}: {e}", exception=e)
        return EXIT_ERROR

    if url is None:
        logger.info(f"No source URL found for {args.name}:{args.version}")
        return EXIT_NOT_FOUND
    print(url)
    return EXIT_FOUND


if __name__ == "__main__":
    sys.exit(main())
