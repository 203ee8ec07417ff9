import pytest

from sourcefinder.common.models import (
    Coordinate,
    Dependency,
    GitSourceCredential,
    RegistryCredential,
    Requirement,
    RequirementSource,
    parse_credentials,
    select_git_credential,
    select_registry_credential,
)

RAW_CREDENTIALS = [
    {"type": "git_source", "host": "github.com", "username": "x-access-token", "password": "token"},
    {"type": "maven_repository", "url": "https://custom.registry.org/maven2"},
    {
        "type": "maven_repository",
        "url": "https://private.registry.org/maven2/",
        "username": "dependabot",
        "password": "dependabotPassword",
    },
    {"type": "npm_registry", "registry": "npm.example.org", "token": "secret"},
]


class TestDependency:
    @pytest.mark.unit
    def test_from_name(self):
        dependency = Dependency.from_name(
            "com.google.guava:guava",
            "23.3-jre",
            [
                {
                    "file": "pom.xml",
                    "requirement": "23.3-jre",
                    "groups": [],
                    "source": {"type": "maven_repo", "url": "u"},
                }
            ],
        )

        assert dependency.group == "com.google.guava"
        assert dependency.artifact == "guava"
        assert dependency.name == "com.google.guava:guava"
        assert dependency.coordinate == Coordinate("com.google.guava", "guava", "23.3-jre")
        assert dependency.requirements == (
            Requirement(file="pom.xml", requirement="23.3-jre", groups=(), source=RequirementSource("maven_repo", "u")),
        )

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["guava", ":guava", "com.google:", "a:b:c"])
    def test_from_name_rejects_bad_names(self, name):
        with pytest.raises(ValueError):
            Dependency.from_name(name, "1.0")

    @pytest.mark.unit
    def test_cache_key_includes_declared_registry(self):
        default = Dependency.from_name("g:a", "1")
        custom = Dependency.from_name("g:a", "1", [{"file": "pom.xml", "source": {"type": "maven_repo", "url": "r"}}])

        assert default.cache_key == ("g", "a", "1", None)
        assert custom.cache_key == ("g", "a", "1", "r")
        assert default.cache_key != custom.cache_key

    @pytest.mark.unit
    def test_is_immutable(self):
        dependency = Dependency.from_name("g:a", "1")

        with pytest.raises(AttributeError):
            dependency.version = "2"


class TestCredentials:
    @pytest.mark.unit
    def test_parse_credentials_builds_tagged_variants(self):
        credentials = parse_credentials(RAW_CREDENTIALS)

        assert [type(c) for c in credentials] == [GitSourceCredential, RegistryCredential, RegistryCredential]
        assert credentials[0].type == "git_source"
        assert credentials[1].basic_auth is None
        assert credentials[2].basic_auth == ("dependabot", "dependabotPassword")

    @pytest.mark.unit
    def test_parse_credentials_passes_objects_through(self):
        credential = GitSourceCredential(host="github.com", password="t")

        assert parse_credentials([credential]) == (credential,)
        assert parse_credentials(None) == ()

    @pytest.mark.unit
    def test_parse_credentials_skips_non_mappings(self):
        credentials = parse_credentials(["x", 3, None, RAW_CREDENTIALS[0]])

        assert credentials == (GitSourceCredential(host="github.com", username="x-access-token", password="token"),)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "base_url,expected_url",
        [
            ("https://custom.registry.org/maven2", "https://custom.registry.org/maven2"),
            ("https://custom.registry.org/maven2/", "https://custom.registry.org/maven2"),
            ("https://private.registry.org/maven2", "https://private.registry.org/maven2/"),
            ("https://private.registry.org/maven2/releases", "https://private.registry.org/maven2/"),
            ("https://custom.registry.org/maven22", None),
            ("https://repo.maven.apache.org/maven2", None),
        ],
    )
    def test_select_registry_credential(self, base_url, expected_url):
        credential = select_registry_credential(parse_credentials(RAW_CREDENTIALS), base_url)

        assert (credential.url if credential else None) == expected_url

    @pytest.mark.unit
    def test_select_git_credential_by_host(self):
        credentials = parse_credentials(RAW_CREDENTIALS)

        assert select_git_credential(credentials, "GitHub.com").password == "token"
        assert select_git_credential(credentials, "gitlab.com") is None
