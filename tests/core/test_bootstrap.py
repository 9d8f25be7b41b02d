# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for populating a registry from config files."""

from pathlib import Path

import pytest

from secureheaders.core.bootstrap import configure_from, configure_from_file
from secureheaders.core.config import Config
from secureheaders.headers.base import OPT_OUT
from secureheaders.kernel.exceptions import ConfigurationError, NotYetConfiguredError, XFrameOptionsConfigError
from secureheaders.registry import NOOP_CONFIGURATION, ConfigurationRegistry

CONFIG_YAML = """\
secure_headers:
  script_hashes_file: {hashes}
  default:
    hsts:
      max_age: 31536000
      include_subdomains: true
    x_frame_options: DENY
    secure_cookies: true
    csp:
      default_src: ["'self'"]
      script_src: ["'self'", "cdn.example.com"]
  overrides:
    api:
      csp: opt_out
      x_download_options: opt_out
    embeddable:
      base: api
      x_frame_options: ALLOW-FROM https://partner.example.com
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    hashes = tmp_path / "script_hashes.yml"
    hashes.write_text("app/views/layout.html:\n  - \"'sha256-abc'\"\n")
    path = tmp_path / "secure-headers.yaml"
    path.write_text(CONFIG_YAML.format(hashes=hashes))
    return path


class TestConfigureFromFile:
    def test_registers_default_and_overrides(self, config_file):
        registry = configure_from_file(config_file, registry=ConfigurationRegistry())
        assert sorted(registry.names()) == ["api", "default", "embeddable", NOOP_CONFIGURATION]

    def test_default_settings_applied(self, config_file):
        registry = configure_from_file(config_file, registry=ConfigurationRegistry())
        default = registry.get()
        assert default.cached_headers["Strict-Transport-Security"] == (
            "Strict-Transport-Security",
            "max-age=31536000; includeSubdomains",
        )
        assert default.cached_headers["X-Frame-Options"] == ("X-Frame-Options", "DENY")
        assert default.secure_cookies is True
        assert default.cached_headers["Content-Security-Policy"]["modern"] == (
            "Content-Security-Policy",
            "default-src 'self'; script-src 'self' cdn.example.com",
        )

    def test_opt_out_string_maps_to_sentinel(self, config_file):
        registry = configure_from_file(config_file, registry=ConfigurationRegistry())
        api = registry.get("api")
        assert api.csp is OPT_OUT
        assert api.x_download_options is OPT_OUT
        assert "Content-Security-Policy" not in api.cached_headers
        assert "X-Download-Options" not in api.cached_headers

    def test_override_base_chain(self, config_file):
        registry = configure_from_file(config_file, registry=ConfigurationRegistry())
        embeddable = registry.get("embeddable")
        assert embeddable.x_frame_options == "ALLOW-FROM https://partner.example.com"
        assert "Content-Security-Policy" not in embeddable.cached_headers
        assert registry.get().x_frame_options == "DENY"

    def test_script_hashes_loaded(self, config_file):
        registry = configure_from_file(config_file, registry=ConfigurationRegistry())
        assert registry.script_hashes == {"app/views/layout.html": ["'sha256-abc'"]}

    def test_env_var_overrides_setting(self, config_file, monkeypatch):
        monkeypatch.setenv("SECURE_HEADERS_DEFAULT_X_FRAME_OPTIONS", "SAMEORIGIN")
        monkeypatch.setenv("SECURE_HEADERS_DEFAULT_SECURE_COOKIES", "false")
        registry = configure_from_file(config_file, registry=ConfigurationRegistry())
        assert registry.get().x_frame_options == "SAMEORIGIN"
        assert registry.get().secure_cookies is False


class TestConfigureFrom:
    def test_empty_config_registers_library_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        registry = configure_from(Config({}), ConfigurationRegistry())
        assert registry.get().hsts == "max-age=631138519"
        assert registry.script_hashes == {}

    def test_unknown_setting_rejected(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = Config({"secure_headers": {"default": {"x_powered_by": "PHP"}}})
        registry = ConfigurationRegistry()
        with pytest.raises(ConfigurationError):
            configure_from(config, registry)
        with pytest.raises(NotYetConfiguredError):
            registry.get()

    def test_invalid_value_rejected(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = Config({"secure_headers": {"default": {"x_frame_options": "ALLOWALL"}}})
        with pytest.raises(XFrameOptionsConfigError):
            configure_from(config, ConfigurationRegistry())

    def test_override_with_unknown_base(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = Config({"secure_headers": {"overrides": {"b": {"base": "a"}}}})
        with pytest.raises(NotYetConfiguredError):
            configure_from(config, ConfigurationRegistry())

    def test_dynamic_csp_setting(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = Config({"secure_headers": {"default": {"dynamic_csp": {"default_src": ["'self'"]}}}})
        registry = configure_from(config, ConfigurationRegistry())
        assert registry.get().cached_headers["Content-Security-Policy"]["legacy"] == (
            "Content-Security-Policy",
            "default-src 'self'",
        )
