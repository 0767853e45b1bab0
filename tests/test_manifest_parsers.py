"""Tests for the package.json, pom.xml, Gradle and requirements.txt parsers."""

import pytest

from workspace_graph.errors import ManifestParseError
from workspace_graph.models import DependencyKind, PackageManager
from workspace_graph.manifests import (
    parse_gradle,
    parse_manifest,
    parse_package_json,
    parse_pom,
    parse_requirements,
)


def _names(manifest, kind=None):
    return [
        (d.name, d.version) for d in manifest.dependencies
        if kind is None or d.kind is kind
    ]


class TestPackageJson:
    def test_sections(self):
        manifest = parse_package_json("""{
            "name": "web",
            "version": "1.4.0",
            "dependencies": {"react": "^18.2.0", "ui": "2.0.0"},
            "devDependencies": {"jest": "^29.0.0"},
            "peerDependencies": {"tokens": "1.x"}
        }""")
        assert manifest.package_manager is PackageManager.NPM
        assert manifest.package_name == "web"
        assert manifest.package_version == "1.4.0"
        assert _names(manifest, DependencyKind.DIRECT) == [("react", "^18.2.0"), ("ui", "2.0.0")]
        assert _names(manifest, DependencyKind.DEV) == [("jest", "^29.0.0")]
        assert _names(manifest, DependencyKind.PEER) == [("tokens", "1.x")]

    def test_minimal(self):
        manifest = parse_package_json("{}")
        assert manifest.package_name is None
        assert manifest.dependencies == []

    def test_empty_version_defaults_to_latest(self):
        manifest = parse_package_json('{"dependencies": {"left-pad": ""}}')
        assert _names(manifest) == [("left-pad", "latest")]

    def test_blank_version_defaults_to_latest(self):
        manifest = parse_package_json('{"dependencies": {"ui": "  ", "tokens": null}}')
        assert _names(manifest) == [("ui", "latest"), ("tokens", "latest")]

    def test_non_string_top_level_fields(self):
        manifest = parse_package_json('{"name": ["web"], "version": 1, "dependencies": {"ui": "2.0.0"}}')
        assert manifest.package_name is None
        assert manifest.package_version == "1"
        assert _names(manifest) == [("ui", "2.0.0")]

    def test_blank_names_skipped(self):
        manifest = parse_package_json('{"name": "  ", "dependencies": {" ": "1.0.0", "ui": "2.0.0"}}')
        assert manifest.package_name is None
        assert _names(manifest) == [("ui", "2.0.0")]

    def test_invalid_json(self):
        with pytest.raises(ManifestParseError, match="invalid JSON"):
            parse_package_json("{not json")

    def test_top_level_must_be_object(self):
        with pytest.raises(ManifestParseError):
            parse_package_json("[]")

    def test_section_must_be_object(self):
        with pytest.raises(ManifestParseError, match="devDependencies"):
            parse_package_json('{"devDependencies": ["jest"]}')


POM = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>billing</artifactId>
  <version>3.1.0</version>
  <dependencies>
    <dependency>
      <groupId>com.acme</groupId>
      <artifactId>ledger</artifactId>
      <version>2.0.0</version>
    </dependency>
    <dependency>
      <groupId>junit</groupId>
      <artifactId>junit</artifactId>
      <version>4.13.2</version>
      <scope>test</scope>
    </dependency>
    <dependency>
      <groupId>org.slf4j</groupId>
      <artifactId>slf4j-api</artifactId>
    </dependency>
  </dependencies>
</project>
"""


class TestPom:
    def test_namespaced_pom(self):
        manifest = parse_pom(POM)
        assert manifest.package_manager is PackageManager.MAVEN
        assert manifest.package_name == "billing"
        assert manifest.package_version == "3.1.0"
        assert _names(manifest, DependencyKind.DIRECT) == [
            ("com.acme:ledger", "2.0.0"),
            ("org.slf4j:slf4j-api", "latest"),
        ]
        assert _names(manifest, DependencyKind.DEV) == [("junit:junit", "4.13.2")]

    def test_scope_kept(self):
        manifest = parse_pom(POM)
        assert [d.scope for d in manifest.dependencies] == ["compile", "test", "compile"]

    def test_without_namespace(self):
        manifest = parse_pom(
            "<project><artifactId>app</artifactId><dependencies><dependency>"
            "<groupId>g</groupId><artifactId>a</artifactId><version>1</version>"
            "</dependency></dependencies></project>"
        )
        assert manifest.package_name == "app"
        assert manifest.package_version is None
        assert _names(manifest) == [("g:a", "1")]

    def test_invalid_xml(self):
        with pytest.raises(ManifestParseError, match="invalid XML"):
            parse_pom("<project>", "service/pom.xml")


class TestGradle:
    def test_groovy_dsl(self):
        manifest = parse_gradle("""
            dependencies {
                implementation 'com.acme:ledger:2.0.0'
                api "com.acme:money:1.1.0"
                compile 'org.legacy:thing:0.9'
                testImplementation 'junit:junit:4.13.2'
            }
        """)
        assert manifest.package_manager is PackageManager.GRADLE
        assert _names(manifest, DependencyKind.DIRECT) == [
            ("com.acme:ledger", "2.0.0"),
            ("com.acme:money", "1.1.0"),
            ("org.legacy:thing", "0.9"),
        ]
        assert _names(manifest, DependencyKind.DEV) == [("junit:junit", "4.13.2")]

    def test_kotlin_dsl(self):
        manifest = parse_gradle("""
            dependencies {
                implementation("com.acme:ledger:2.0.0")
                testCompile("org.mockito:mockito-core")
            }
        """)
        assert _names(manifest, DependencyKind.DIRECT) == [("com.acme:ledger", "2.0.0")]
        assert _names(manifest, DependencyKind.DEV) == [("org.mockito:mockito-core", "latest")]

    def test_project_dependency_skipped(self):
        manifest = parse_gradle("implementation project(':core')\nimplementation 'nogroup'")
        assert manifest.dependencies == []


class TestRequirements:
    def test_operators_and_comments(self):
        manifest = parse_requirements(
            "# pinned\n"
            "requests==2.31.0\n"
            "httpx>=0.27  # client\n"
            "pydantic~=2.5\n"
            "uvicorn[standard]>=0.20\n"
            "click\n"
            "tomli<2.0; python_version < '3.11'\n"
            "-r base.txt\n"
            "--index-url https://example.invalid/simple\n"
            "\n"
        )
        assert manifest.package_manager is PackageManager.PIP
        assert _names(manifest) == [
            ("requests", "2.31.0"),
            ("httpx", "0.27"),
            ("pydantic", "2.5"),
            ("uvicorn", "0.20"),
            ("click", "latest"),
            ("tomli", "2.0"),
        ]
        assert all(d.kind is DependencyKind.DIRECT for d in manifest.dependencies)

    def test_empty(self):
        assert parse_requirements("").dependencies == []


class TestParseManifest:
    def test_dispatch(self):
        assert parse_manifest(PackageManager.NPM, '{"name": "x"}').package_name == "x"
        assert parse_manifest(PackageManager.MAVEN, POM).package_name == "billing"
        assert parse_manifest(PackageManager.GRADLE, "api 'a:b:1'").dependencies[0].name == "a:b"
        assert parse_manifest(PackageManager.PIP, "six").dependencies[0].name == "six"

    def test_path_in_error(self):
        with pytest.raises(ManifestParseError) as exc_info:
            parse_manifest(PackageManager.NPM, "nope", "apps/web/package.json")
        assert exc_info.value.path == "apps/web/package.json"

    def test_unknown_manager(self):
        with pytest.raises(ManifestParseError):
            parse_manifest(PackageManager.UNKNOWN, "")

    def test_github_source_shares_detection_order(self):
        from workspace_graph.manifests import MANIFEST_FILES, github, registry
        assert github.MANIFEST_FILES is registry.MANIFEST_FILES is MANIFEST_FILES
        assert [path for path, _ in MANIFEST_FILES][0] == "package.json"
