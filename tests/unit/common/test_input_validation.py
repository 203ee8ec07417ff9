import pytest

from sourcefinder.common.input_validation import InputValidator, ValidationError


class TestUrlValidation:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url",
        ["https://repo.maven.apache.org/maven2", "http://localhost:8081/repository/maven-public/"],
    )
    def test_accepts_registry_urls(self, url):
        assert InputValidator.validate_url(url) == url

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url",
        [
            "",
            None,
            "file:///etc/passwd",
            "https://",
            "https://repo.example.org/with space",
            "https://repo.example.org/\nInjected: header",
            "https://example.org/" + "a" * 3000,
        ],
    )
    def test_rejects_unusable_urls(self, url):
        with pytest.raises(ValidationError):
            InputValidator.validate_url(url)

    @pytest.mark.unit
    def test_custom_schemes(self):
        assert InputValidator.validate_url("ftp://mirror.example.org", {"ftp"}) == "ftp://mirror.example.org"


class TestCoordinateValidation:
    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["com.google.guava", "guava", "23.3-jre", "1.0+build~1", "my_lib"])
    def test_accepts_maven_segments(self, value):
        assert InputValidator.validate_coordinate_part(value) == value

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["", "..", "1.0/../../etc", "a/b", "a b", "a?b=c", "x" * 257])
    def test_rejects_path_breaking_segments(self, value):
        with pytest.raises(ValidationError):
            InputValidator.validate_coordinate_part(value, "version")

    @pytest.mark.unit
    def test_error_names_the_segment(self):
        with pytest.raises(ValidationError, match="artifact"):
            InputValidator.validate_coordinate_part("", "artifact")
