"""
Project name detection tests.
"""

from pathlib import Path

import pytest

from codemarks.infrastructure.project_detection import detect_project_name


class TestManifests:
    """Each supported build manifest."""

    @pytest.mark.parametrize(
        "filename, content, expected",
        [
            ("Cargo.toml", '[package]\nname = "rusty"\nversion = "0.1.0"\n', "rusty"),
            ("package.json", '{"name": "noder", "version": "1.0.0"}', "noder"),
            ("go.mod", "module github.com/acme/gopher\n\ngo 1.22\n", "gopher"),
            ("build.sbt", 'scalaVersion := "3.3.1"\nname := "scaler"\n', "scaler"),
            (
                "pom.xml",
                "<project><parent><artifactId>parent-pom</artifactId></parent>"
                "<artifactId>javer</artifactId></project>",
                "javer",
            ),
            ("settings.gradle", "rootProject.name = 'gradler'\n", "gradler"),
            ("mix.exs", "def project do\n  [app: :elixirer, version: \"0.1.0\"]\nend\n", "elixirer"),
            ("pyproject.toml", '[project]\nname = "pythoner"\n', "pythoner"),
            ("setup.py", "from setuptools import setup\nsetup(name='legacy-py')\n", "legacy-py"),
        ],
    )
    def test_manifest(self, make_tree, filename, content, expected):
        root = make_tree({filename: content})
        assert detect_project_name(root) == expected

    def test_cargo_wins_over_package_json(self, make_tree):
        root = make_tree(
            {
                "Cargo.toml": '[package]\nname = "rusty"\n',
                "package.json": '{"name": "noder"}',
            }
        )
        assert detect_project_name(root) == "rusty"

    def test_unusable_manifest_falls_through(self, make_tree):
        root = make_tree(
            {
                "Cargo.toml": "this is [not toml",
                "package.json": '{"version": "1.0.0"}',
                "pyproject.toml": '[project]\nname = "pythoner"\n',
            }
        )
        assert detect_project_name(root) == "pythoner"


class TestFallbacks:

    def test_directory_name(self, make_tree):
        root = make_tree({"main.c": "int main() {}\n"}, name="plain-dir")
        assert detect_project_name(root) == "plain-dir"

    def test_nonexistent_path_uses_last_component(self):
        assert detect_project_name(Path("/this/path/does/not/exist")) == "exist"
