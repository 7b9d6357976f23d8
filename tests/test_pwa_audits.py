"""
Tests for the manifest-based audits: installability, splash screen,
themed omnibox and short name length.
"""

import pytest

from page_audit.artifacts.manifest_values import NO_MANIFEST_REASON, compute_manifest_values
from page_audit.audits import installability, short_name_length, splash_screen, themed_omnibox
from page_audit.core.models import ServiceWorkerVersion


@pytest.fixture
def manifest_with(example_manifest_data):
    """Пример manifest с заменёнными (или удалёнными через None) полями."""
    def factory(**overrides):
        data = dict(example_manifest_data)
        for key, value in overrides.items():
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
        return data
    return factory


@pytest.fixture
def manifest_artifacts(settings, manifest_from, example_manifest_data):
    """Фабрика артефактов для manifest-аудитов."""
    def factory(manifest_data=None, manifest=..., **extra):
        if manifest is ...:
            manifest = manifest_from(manifest_data if manifest_data is not None else example_manifest_data)
        artifacts = {
            "Manifest": manifest,
            "ManifestValues": compute_manifest_values(manifest, settings),
            "URL": "https://example.com/",
            "ServiceWorker": [
                ServiceWorkerVersion(status="activated", scriptURL="https://example.com/sw.js"),
            ],
            "ThemeColor": "#2196F3",
        }
        artifacts.update(extra)
        return artifacts
    return factory


# ═══════════════════════════════════════════════════════
# webapp-install-banner
# ═══════════════════════════════════════════════════════

class TestInstallability:

    def test_passes(self, settings, manifest_artifacts):
        result = installability.evaluate(manifest_artifacts(), settings)

        assert result.raw_value is True
        assert result.debug_string is None
        assert result.extended_info["failures"] == []

    def test_no_manifest(self, settings, manifest_artifacts):
        result = installability.evaluate(manifest_artifacts(manifest=None, ServiceWorker=[]), settings)

        assert result.raw_value is False
        assert "Manifest is available" in result.debug_string
        assert installability.SERVICE_WORKER_REQUIREMENT in result.debug_string

    def test_empty_icons_with_service_worker(self, settings, manifest_artifacts, manifest_with):
        result = installability.evaluate(manifest_artifacts(manifest_with(icons=[])), settings)

        assert result.raw_value is False
        assert "icons" in result.debug_string
        assert "Service Worker" not in result.debug_string

    def test_missing_start_url_and_short_name(self, settings, manifest_artifacts, manifest_with):
        result = installability.evaluate(
            manifest_artifacts(manifest_with(start_url=None, short_name=None)), settings,
        )

        assert result.debug_string.startswith("Unsatisfied requirements: ")
        assert "`start_url`" in result.debug_string
        assert "`short_name`" in result.debug_string

    def test_no_service_worker(self, settings, manifest_artifacts):
        result = installability.evaluate(manifest_artifacts(ServiceWorker=[]), settings)

        assert result.raw_value is False
        assert result.debug_string == f"Unsatisfied requirements: {installability.SERVICE_WORKER_REQUIREMENT}."

    def test_display_is_not_required(self, settings, manifest_artifacts, manifest_with):
        result = installability.evaluate(manifest_artifacts(manifest_with(display="browser")), settings)
        assert result.raw_value is True


class TestServiceWorkerOrigin:

    def test_same_origin_any_path(self):
        versions = [ServiceWorkerVersion(status="activated", scriptURL="https://example.com/deep/path/sw.js")]
        assert installability.has_service_worker(versions, "https://example.com/app/index.html")

    def test_default_port_is_same_origin(self):
        versions = [ServiceWorkerVersion(status="activated", scriptURL="https://example.com:443/sw.js")]
        assert installability.has_service_worker(versions, "https://example.com/")

    @pytest.mark.parametrize("script_url", [
        "https://other.com/sw.js",
        "http://example.com/sw.js",
        "https://example.com:8443/sw.js",
    ])
    def test_other_origin(self, script_url):
        versions = [ServiceWorkerVersion(status="activated", scriptURL=script_url)]
        assert not installability.has_service_worker(versions, "https://example.com/")

    @pytest.mark.parametrize("status", ["new", "installing", "installed", "activating", "redundant"])
    def test_not_activated(self, status):
        versions = [ServiceWorkerVersion(status=status, scriptURL="https://example.com/sw.js")]
        assert not installability.has_service_worker(versions, "https://example.com/")

    def test_any_activated_version_counts(self):
        versions = [
            ServiceWorkerVersion(status="redundant", scriptURL="https://example.com/old-sw.js"),
            ServiceWorkerVersion(status="activated", scriptURL="https://example.com/sw.js"),
        ]
        assert installability.has_service_worker(versions, "https://example.com/")


# ═══════════════════════════════════════════════════════
# splash-screen
# ═══════════════════════════════════════════════════════

class TestSplashScreen:

    def test_passes(self, settings, manifest_artifacts):
        assert splash_screen.evaluate(manifest_artifacts(), settings).raw_value is True

    def test_unparseable_manifest(self, settings, manifest_artifacts, manifest_parser):
        result = splash_screen.evaluate(manifest_artifacts(manifest=manifest_parser("{,}")), settings)

        assert result.raw_value is False
        assert "Manifest is parsed as JSON (ERROR: file isn't valid JSON" in result.debug_string

    def test_lists_each_missing_requirement(self, settings, manifest_artifacts, manifest_with):
        manifest = manifest_with(name=None, background_color="no-such-color")
        result = splash_screen.evaluate(manifest_artifacts(manifest), settings)

        assert result.raw_value is False
        assert "Manifest contains `name`" in result.debug_string
        assert "'no-such-color' is not a valid CSS color" in result.debug_string
        assert "theme_color" not in result.debug_string
        assert len(result.extended_info["failures"]) == 2

    def test_requires_512px_icon(self, settings, manifest_artifacts, manifest_with, example_manifest_data):
        icons = [i for i in example_manifest_data["icons"] if i["sizes"] != "512x512"]
        result = splash_screen.evaluate(manifest_artifacts(manifest_with(icons=icons)), settings)

        assert result.raw_value is False
        assert "512px" in result.debug_string


# ═══════════════════════════════════════════════════════
# themed-omnibox
# ═══════════════════════════════════════════════════════

class TestThemedOmnibox:

    def test_passes(self, settings, manifest_artifacts):
        assert themed_omnibox.evaluate(manifest_artifacts(), settings).raw_value is True

    def test_missing_meta_tag(self, settings, manifest_artifacts):
        result = themed_omnibox.evaluate(manifest_artifacts(ThemeColor=None), settings)

        assert result.raw_value is False
        assert themed_omnibox.NO_META_TAG in result.debug_string

    def test_invalid_meta_tag(self, settings, manifest_artifacts):
        result = themed_omnibox.evaluate(manifest_artifacts(ThemeColor="not a color"), settings)

        assert result.raw_value is False
        assert result.debug_string == f"Unsatisfied requirements: {themed_omnibox.INVALID_META_TAG}."

    def test_no_manifest_still_checks_meta(self, settings, manifest_artifacts):
        result = themed_omnibox.evaluate(manifest_artifacts(manifest=None, ThemeColor=None), settings)

        assert result.extended_info["failures"] == [NO_MANIFEST_REASON, themed_omnibox.NO_META_TAG]

    def test_manifest_without_theme_color(self, settings, manifest_artifacts, manifest_with):
        result = themed_omnibox.evaluate(manifest_artifacts(manifest_with(theme_color=None)), settings)

        assert result.raw_value is False
        assert "Manifest contains a valid `theme_color`" in result.debug_string
        assert themed_omnibox.NO_META_TAG not in result.debug_string

    def test_other_manifest_failures_ignored(self, settings, manifest_artifacts, manifest_with):
        result = themed_omnibox.evaluate(manifest_artifacts(manifest_with(icons=[], name=None)), settings)
        assert result.raw_value is True


# ═══════════════════════════════════════════════════════
# manifest-short-name-length
# ═══════════════════════════════════════════════════════

class TestShortNameLength:

    def test_passes(self, settings, manifest_artifacts):
        result = short_name_length.evaluate(manifest_artifacts(), settings)

        assert result.raw_value is True
        assert result.extended_info["short_name"] == "Airhorner"

    def test_too_long(self, settings, manifest_artifacts, manifest_with):
        result = short_name_length.evaluate(
            manifest_artifacts(manifest_with(short_name="Airhorner Deluxe Edition")), settings,
        )

        assert result.raw_value is False
        assert result.debug_string.endswith("(24 characters, maximum is 12)")
        assert result.extended_info["short_name"] == "Airhorner Deluxe Edition"

    def test_limit_comes_from_checklist_settings(self, settings, manifest_artifacts, manifest_with):
        artifacts = manifest_artifacts(manifest_with(short_name="Airhorner Deluxe Edition"))
        tuned = settings.model_copy(update={"short_name_max_length": 30})
        artifacts["ManifestValues"] = compute_manifest_values(artifacts["Manifest"], tuned)

        result = short_name_length.evaluate(artifacts, settings)

        assert result.raw_value is True
        assert "12" not in short_name_length.DEFINITION.help_text

    def test_falls_back_to_name(self, settings, manifest_artifacts, manifest_with):
        result = short_name_length.evaluate(
            manifest_artifacts(manifest_with(short_name=None, name="Horn")), settings,
        )
        assert result.raw_value is True
        assert result.extended_info["short_name"] == "Horn"

    def test_no_names(self, settings, manifest_artifacts, manifest_with):
        result = short_name_length.evaluate(
            manifest_artifacts(manifest_with(short_name=None, name=None)), settings,
        )
        assert result.raw_value is False
        assert "neither `short_name` nor `name` is set" in result.debug_string

    def test_no_manifest(self, settings, manifest_artifacts):
        result = short_name_length.evaluate(manifest_artifacts(manifest=None), settings)

        assert result.raw_value is False
        assert result.debug_string == NO_MANIFEST_REASON
