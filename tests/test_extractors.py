"""Tests for the manifest, package-version and build-number extractors."""

from __future__ import annotations

import pytest

from core.errors import InvalidUrl, MalformedDocument, MalformedReference
from core.services.extractors import (
    derive_build_number,
    extract_manifest_ref,
    extract_package_version,
)
from tests.fakes import components_json, package_config

COMPONENT = "Microsoft.CodeAnalysis.LanguageServices"


# ---------------------------------------------------------------------------
# extract_manifest_ref
# ---------------------------------------------------------------------------

class TestExtractManifestRef:

    def test_splits_url_and_manifest(self):
        ref = extract_manifest_ref(
            components_json("https://x/y/9.9.9;pkg.vsman"),
            COMPONENT,
        )
        assert ref.artifact_url == "https://x/y/9.9.9"
        assert ref.manifest_file_name == "pkg.vsman"

    def test_ignores_sibling_components(self):
        doc = (
            '{"Components": {'
            '"Other": {"url": "https://a/1;a.vsman"},'
            f'"{COMPONENT}": {{"url": "https://b/2;b.vsman"}}'
            "}}"
        )
        ref = extract_manifest_ref(doc, COMPONENT)
        assert ref.artifact_url == "https://b/2"

    def test_missing_component_includes_name(self):
        with pytest.raises(MalformedReference, match="Missing.Component"):
            extract_manifest_ref(components_json("https://x/1;a.vsman"), "Missing.Component")

    def test_missing_components_root(self):
        with pytest.raises(MalformedReference):
            extract_manifest_ref('{"Other": {}}', COMPONENT)

    def test_non_string_url(self):
        doc = '{"Components": {"%s": {"url": 42}}}' % COMPONENT
        with pytest.raises(MalformedReference, match="42"):
            extract_manifest_ref(doc, COMPONENT)

    @pytest.mark.parametrize(
        "raw",
        [
            "https://x/y/9.9.9",
            "https://x/y/9.9.9;a.vsman;b.vsman",
        ],
    )
    def test_wrong_number_of_parts(self, raw):
        with pytest.raises(MalformedReference) as excinfo:
            extract_manifest_ref(components_json(raw), COMPONENT)
        assert raw in str(excinfo.value)

    def test_manifest_without_extension(self):
        raw = "https://x/y/9.9.9;pkg.json"
        with pytest.raises(MalformedReference, match="Not a .vsman file") as excinfo:
            extract_manifest_ref(components_json(raw), COMPONENT)
        assert raw in str(excinfo.value)

    def test_extension_is_configurable(self):
        ref = extract_manifest_ref(
            components_json("https://x/1;pkg.json"),
            COMPONENT,
            manifest_extension=".json",
        )
        assert ref.manifest_file_name == "pkg.json"

    def test_invalid_json(self):
        with pytest.raises(MalformedReference, match="not valid JSON"):
            extract_manifest_ref("{not json", COMPONENT)


# ---------------------------------------------------------------------------
# extract_package_version
# ---------------------------------------------------------------------------

class TestExtractPackageVersion:

    def test_returns_matching_version(self):
        assert extract_package_version(package_config("3.9.0-beta"), "VS.ExternalAPIs.Roslyn") == "3.9.0-beta"

    def test_absent_returns_none(self):
        assert extract_package_version(package_config("1.2.3"), "Not.There") is None

    def test_first_match_in_document_order(self):
        doc = (
            "<root>"
            '<group><package id="Pkg" version="1.0" /></group>'
            '<package id="Pkg" version="2.0" />'
            "</root>"
        )
        assert extract_package_version(doc, "Pkg") == "1.0"

    def test_id_match_is_case_sensitive(self):
        doc = '<packages><package id="pkg" version="1.0" /></packages>'
        assert extract_package_version(doc, "Pkg") is None

    def test_root_element_can_be_a_package(self):
        assert extract_package_version('<package id="Pkg" version="4.0" />', "Pkg") == "4.0"

    def test_malformed_xml(self):
        with pytest.raises(MalformedDocument):
            extract_package_version("<packages><package id='x'></packages>", "x")


# ---------------------------------------------------------------------------
# derive_build_number
# ---------------------------------------------------------------------------

class TestDeriveBuildNumber:

    def test_last_path_segment(self):
        assert derive_build_number("https://host/a/b/12345.67.8") == "12345.67.8"

    def test_ignores_query_and_fragment(self):
        assert derive_build_number("https://host/a/20210301.1?x=1#frag") == "20210301.1"

    def test_trailing_slash(self):
        assert derive_build_number("https://host/a/20210301.1/") == "20210301.1"

    @pytest.mark.parametrize(
        "url",
        [
            "not a url",
            "https://host",
            "https://host/",
            "/relative/only/1.2.3",
            "https://[::1/a/b",
        ],
    )
    def test_invalid(self, url):
        with pytest.raises(InvalidUrl):
            derive_build_number(url)
