import pytest

from sourcefinder.common.models import Coordinate
from sourcefinder.package_metadata.manifest import SourceFieldKind, parse_manifest
from tests.support.fixtures import load_fixture


@pytest.mark.unit
def test_parent_coordinate_and_builtin_properties():
    document = parse_manifest(load_fixture("poms", "okhttp-3.10.0.xml"))

    assert document.parent == Coordinate("com.squareup.okhttp3", "parent", "3.10.0")
    # Group and version are inherited from the parent block
    assert document.coordinate == Coordinate("com.squareup.okhttp3", "okhttp", "3.10.0")
    assert document.properties["project.artifactId"] == "okhttp"
    assert document.properties["project.parent.artifactId"] == "parent"
    assert document.properties["pom.version"] == "3.10.0"
    assert document.source_fields == ()


@pytest.mark.unit
def test_source_fields_in_priority_order():
    document = parse_manifest(load_fixture("poms", "parent-3.10.0.xml"))

    kinds = [field.kind for field in document.source_fields]
    assert kinds == [
        SourceFieldKind.PROJECT_URL,
        SourceFieldKind.SCM_URL,
        SourceFieldKind.SCM_CONNECTION,
        SourceFieldKind.SCM_DEVELOPER_CONNECTION,
        SourceFieldKind.ISSUE_URL,
    ]
    assert document.source_fields[0].value == "https://github.com/square/okhttp"
    assert document.properties["okio.version"] == "1.14.0"


@pytest.mark.unit
def test_declared_properties_override_builtins():
    pom = (
        b"<project><groupId>g</groupId><artifactId>a</artifactId><version>1</version>"
        b"<properties><project.version>2</project.version></properties></project>"
    )

    assert parse_manifest(pom).properties["project.version"] == "2"


@pytest.mark.unit
def test_placeholder_fields_are_marked():
    document = parse_manifest(load_fixture("poms", "nested_property_url_pom.xml"))

    assert document.source_fields[0].value == "${repo.url}"
    assert document.source_fields[0].has_placeholders
    assert document.properties["repo.url"] == "${base}/${project.artifactId}"


@pytest.mark.unit
def test_non_namespaced_pom():
    document = parse_manifest(load_fixture("poms", "scm_connection_pom.xml"))

    assert document.coordinate == Coordinate("com.fasterxml.jackson.core", "jackson-core", "2.9.5")
    assert [field.kind for field in document.source_fields] == [
        SourceFieldKind.PROJECT_URL,
        SourceFieldKind.SCM_DEVELOPER_CONNECTION,
    ]


@pytest.mark.unit
def test_incomplete_parent_is_ignored():
    pom = b"<project><parent><groupId>g</groupId><artifactId>p</artifactId></parent></project>"

    assert parse_manifest(pom).parent is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "content",
    [
        b"",
        load_fixture("poms", "malformed.xml"),
        b"<html><body>Not a POM</body></html>",
        b"\x00\x01\x02binary",
        b"<?xml version='1.0'?><!-- only a comment -->",
    ],
)
def test_unusable_documents_yield_none(content):
    assert parse_manifest(content) is None


@pytest.mark.unit
def test_document_text_is_kept_for_link_scan():
    document = parse_manifest(load_fixture("poms", "guava-23.3-jre.xml"))

    assert "https://github.com/google/guava" in document.text
