"""
Validation functions for registry URLs and package coordinates
"""

import re
from urllib.parse import urlparse


class ValidationError(Exception):
    """Raised when input validation fails"""

    pass


class InputValidator:
    """
    Provides input validation methods for values that end up in request URLs
    """

    MAX_URL_LENGTH = 2048
    MAX_SEGMENT_LENGTH = 256
    ALLOWED_URL_SCHEMES = {"https", "http"}

    # Maven groupId/artifactId/version characters
    COORDINATE_PART_PATTERN = re.compile(r"^[A-Za-z0-9_.+~-]+$")

    @classmethod
    def validate_url(cls, url, allowed_schemes=None):
        """
        Validate a registry or API base URL

        Args:
            url (str): URL to validate
            allowed_schemes (set): Optional set of allowed URL schemes

        Returns:
            Validated URL string

        Raises:
            ValidationError: If validation fails
        """
        if not url or not isinstance(url, str):
            raise ValidationError("URL cannot be empty")

        if len(url) > cls.MAX_URL_LENGTH:
            raise ValidationError(f"URL too long: {len(url)} > {cls.MAX_URL_LENGTH}")

        if any(char in url for char in ["\0", "\n", "\r", " "]):
            raise ValidationError(f"URL contains invalid characters: {url!r}")

        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise ValidationError(f"Invalid URL format: {e}")

        schemes = allowed_schemes or cls.ALLOWED_URL_SCHEMES
        if parsed.scheme not in schemes:
            raise ValidationError(f"URL scheme '{parsed.scheme}' not allowed. " f"Allowed schemes: {schemes}")

        if not parsed.netloc:
            raise ValidationError(f"URL has no host: {url}")

        return url

    @classmethod
    def validate_coordinate_part(cls, value, label="coordinate"):
        """
        Validate one segment of a group/artifact/version coordinate

        Args:
            value (str): Segment value
            label (str): Segment name used in error messages

        Returns:
            Validated segment

        Raises:
            ValidationError: If validation fails
        """
        if not value or not isinstance(value, str):
            raise ValidationError(f"{label} cannot be empty")

        if len(value) > cls.MAX_SEGMENT_LENGTH:
            raise ValidationError(f"{label} too long: {len(value)} > {cls.MAX_SEGMENT_LENGTH}")

        if ".." in value:
            raise ValidationError(f"{label} contains parent directory traversal: {value}")

        if not cls.COORDINATE_PART_PATTERN.match(value):
            raise ValidationError(f"{label} contains invalid characters: {value!r}")

        return value
