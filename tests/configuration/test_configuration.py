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
"""Tests for Configuration: defaults, validation, compilation and freezing."""

import pytest

from secureheaders.configuration import Configuration
from secureheaders.headers import content_security_policy as csp
from secureheaders.headers import strict_transport_security, x_frame_options
from secureheaders.headers.base import OPT_OUT
from secureheaders.headers.content_security_policy import Policy
from secureheaders.kernel.exceptions import (
    ConfigurationError,
    FrozenConfigurationError,
    IllegalPolicyModificationError,
    XFrameOptionsConfigError,
)
from secureheaders.useragent import FAMILIES, FIREFOX, LEGACY, MODERN, UserAgent

FIREFOX_UA = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
SIMPLE_HEADERS = {
    "Strict-Transport-Security",
    "X-Frame-Options",
    "X-Content-Type-Options",
    "X-XSS-Protection",
    "X-Download-Options",
    "X-Permitted-Cross-Domain-Policies",
}


def _compiled(builder=None) -> Configuration:
    config = Configuration(builder)
    config.validate_config()
    config.cache_headers()
    return config


class TestDefaults:
    def test_new_configuration_has_explicit_defaults(self):
        config = Configuration()
        assert config.hsts == strict_transport_security.DEFAULT_VALUE
        assert config.x_frame_options == "SAMEORIGIN"
        assert config.hpkp is OPT_OUT
        assert config.csp == csp.default_policy()
        assert config.dynamic_csp is None
        assert config.secure_cookies is None

    def test_default_csp_is_not_shared_between_instances(self):
        first, second = Configuration(), Configuration()
        first.csp.directives["default_src"].append("example.com")
        assert second.csp.directives["default_src"] == ["https:"]

    def test_builder_receives_configuration(self):
        seen = []
        config = Configuration(seen.append)
        assert seen == [config]

    def test_csp_mapping_is_coerced(self):
        config = Configuration(lambda c: setattr(c, "csp", {"default_src": ["'self'"], "report_only": True}))
        assert config.csp == Policy(directives={"default_src": ["'self'"]}, report_only=True)


class TestDynamicCsp:
    def test_current_csp_prefers_dynamic(self):
        config = Configuration()
        config.dynamic_csp = {"default_src": ["'self'"]}
        assert config.current_csp() == Policy(directives={"default_src": ["'self'"]})

    def test_current_csp_falls_back_to_static(self):
        config = Configuration()
        assert config.current_csp() is config.csp

    def test_setting_csp_while_dynamic_is_active_raises(self):
        config = Configuration()
        config.dynamic_csp = {"default_src": ["'self'"]}
        with pytest.raises(IllegalPolicyModificationError):
            config.csp = {"default_src": ["'none'"]}

    def test_dynamic_policy_is_validated(self):
        config = Configuration()
        config.dynamic_csp = {"script_src": ["'self'"]}
        with pytest.raises(ConfigurationError):
            config.validate_config()

    def test_assigned_policy_is_copied(self):
        policy = Policy(directives={"default_src": ["'self'"]})
        config = Configuration()
        config.csp = policy
        config.dynamic_csp = policy
        policy.directives["default_src"].append("evil.example.com")
        assert config.csp.directives["default_src"] == ["'self'"]
        assert config.dynamic_csp.directives["default_src"] == ["'self'"]

    def test_dynamic_policy_is_compiled(self):
        config = Configuration()
        config.dynamic_csp = {"default_src": ["'self'"]}
        config.cache_headers()
        assert config.cached_headers["Content-Security-Policy"][MODERN] == (
            "Content-Security-Policy",
            "default-src 'self'",
        )


class TestValidation:
    def test_runs_every_validator(self, monkeypatch):
        calls = []
        from secureheaders.headers import ALL_HEADER_KINDS

        for kind in ALL_HEADER_KINDS:
            monkeypatch.setattr(kind, "validate", lambda value, key=kind.CONFIG_KEY: calls.append(key))
        Configuration().validate_config()
        assert calls == [kind.CONFIG_KEY for kind in ALL_HEADER_KINDS]

    def test_surfaces_header_specific_error(self):
        config = Configuration(lambda c: setattr(c, "x_frame_options", "ALLOWALL"))
        with pytest.raises(XFrameOptionsConfigError):
            config.validate_config()


class TestCacheHeaders:
    def test_end_to_end_example(self):
        def build(config):
            config.hsts = {"max_age": 100}
            config.csp = {"default_src": ["'self'"]}

        config = _compiled(build)
        assert config.cached_headers["Strict-Transport-Security"] == strict_transport_security.make_header(
            {"max_age": 100}
        )
        assert config.cached_headers["Strict-Transport-Security"] == ("Strict-Transport-Security", "max-age=100")
        assert config.cached_headers["Content-Security-Policy"]["modern"] == (
            "Content-Security-Policy",
            "default-src 'self'",
        )

    def test_default_configuration_caches_enabled_headers(self):
        config = _compiled()
        assert set(config.cached_headers) == SIMPLE_HEADERS | {"Content-Security-Policy"}
        assert "Public-Key-Pins" not in config.cached_headers

    def test_compile_is_idempotent(self):
        config = _compiled(lambda c: setattr(c, "hsts", {"max_age": 100, "preload": True}))
        first = dict(config.cached_headers)
        config.cache_headers()
        assert dict(config.cached_headers) == first

    @pytest.mark.parametrize(
        ("key", "header"),
        [
            ("hsts", "Strict-Transport-Security"),
            ("x_frame_options", "X-Frame-Options"),
            ("x_content_type_options", "X-Content-Type-Options"),
            ("x_xss_protection", "X-XSS-Protection"),
            ("x_download_options", "X-Download-Options"),
            ("x_permitted_cross_domain_policies", "X-Permitted-Cross-Domain-Policies"),
            ("hpkp", "Public-Key-Pins"),
            ("csp", "Content-Security-Policy"),
        ],
    )
    def test_opted_out_header_has_no_entry(self, key, header):
        config = _compiled(lambda c: setattr(c, key, OPT_OUT))
        assert header not in config.cached_headers

    def test_every_family_is_rendered_with_its_user_agent(self, monkeypatch):
        calls = []
        real = csp.make_header

        def recording(policy, user_agent=None):
            calls.append(user_agent)
            return real(policy, user_agent)

        monkeypatch.setattr(csp, "make_header", recording)
        config = _compiled()
        variations = config.cached_headers["Content-Security-Policy"]
        assert tuple(variations) == FAMILIES
        assert calls == [UserAgent.for_family(family) for family in FAMILIES]
        for family in FAMILIES:
            assert variations[family] == real(config.csp, UserAgent.for_family(family))

    def test_none_setting_uses_default(self):
        config = _compiled(lambda c: setattr(c, "x_frame_options", None))
        assert config.cached_headers["X-Frame-Options"] == ("X-Frame-Options", "SAMEORIGIN")

    def test_none_hpkp_falls_back_to_opt_out(self):
        config = _compiled(lambda c: setattr(c, "hpkp", None))
        assert "Public-Key-Pins" not in config.cached_headers

    def test_dynamic_opt_out_disables_csp(self):
        config = Configuration()
        config.dynamic_csp = OPT_OUT
        config.cache_headers()
        assert "Content-Security-Policy" not in config.cached_headers


class TestFreeze:
    def test_frozen_configuration_rejects_assignment(self):
        config = _compiled().freeze()
        assert config.frozen
        with pytest.raises(FrozenConfigurationError):
            config.hsts = "max-age=1"
        with pytest.raises(FrozenConfigurationError):
            config.secure_cookies = True

    def test_frozen_cache_is_read_only(self):
        config = _compiled().freeze()
        with pytest.raises(TypeError):
            config.cached_headers["X-Frame-Options"] = ("X-Frame-Options", "DENY")
        with pytest.raises(TypeError):
            config.cached_headers["Content-Security-Policy"][MODERN] = ("Content-Security-Policy", "")

    def test_frozen_configuration_rejects_mutating_methods(self):
        config = _compiled().freeze()
        with pytest.raises(FrozenConfigurationError):
            config.opt_out("hsts")
        with pytest.raises(FrozenConfigurationError):
            config.rebuild_csp_header_cache(FIREFOX_UA)
        with pytest.raises(FrozenConfigurationError):
            config.cache_headers()
        assert "Strict-Transport-Security" in config.cached_headers


class TestDup:
    def test_dup_is_deep(self):
        original = _compiled(lambda c: setattr(c, "hpkp", {"max_age": 1, "pins": [{"sha256": "a"}, {"sha256": "b"}]}))
        original.freeze()
        duplicate = original.dup()

        duplicate.csp.directives["default_src"].append("evil.example.com")
        duplicate.hpkp["pins"].append({"sha256": "c"})
        duplicate.opt_out("hsts")

        assert original.csp.directives["default_src"] == ["https:"]
        assert len(original.hpkp["pins"]) == 2
        assert "Strict-Transport-Security" in original.cached_headers

    def test_dup_is_mutable_and_keeps_opt_out_identity(self):
        original = _compiled(lambda c: c.opt_out("x_download_options")).freeze()
        duplicate = original.dup()
        assert not duplicate.frozen
        assert duplicate.x_download_options is OPT_OUT
        assert dict(duplicate.cached_headers) == dict(original.cached_headers)

    def test_dup_copies_dynamic_csp_and_secure_cookies(self):
        original = Configuration()
        original.dynamic_csp = {"default_src": ["'self'"]}
        original.secure_cookies = True
        duplicate = original.dup()
        assert duplicate.dynamic_csp == original.dynamic_csp
        assert duplicate.dynamic_csp is not original.dynamic_csp
        assert duplicate.secure_cookies is True


class TestOptOut:
    def test_removes_cached_entry(self):
        config = _compiled()
        config.opt_out("x_frame_options")
        assert config.x_frame_options is OPT_OUT
        assert "X-Frame-Options" not in config.cached_headers

    def test_csp_opt_out_disables_dynamic_csp(self):
        config = _compiled()
        config.dynamic_csp = {"default_src": ["'self'"]}
        config.opt_out("csp")
        assert config.csp is OPT_OUT
        assert config.dynamic_csp is OPT_OUT
        assert config.current_csp() is OPT_OUT
        assert "Content-Security-Policy" not in config.cached_headers

    def test_unknown_header(self):
        with pytest.raises(ConfigurationError):
            Configuration().opt_out("x_powered_by")


class TestRequestTimeUpdates:
    def test_update_x_frame_options(self):
        config = _compiled()
        config.update_x_frame_options("DENY")
        assert config.x_frame_options == "DENY"
        assert config.cached_headers["X-Frame-Options"] == x_frame_options.make_header("DENY")

    def test_update_x_frame_options_validates(self):
        with pytest.raises(XFrameOptionsConfigError):
            _compiled().update_x_frame_options("sometimes")

    def test_rebuild_csp_renders_only_requested_family(self):
        config = _compiled()
        config.dynamic_csp = {"default_src": ["'self'"], "child_src": ["'self'"]}
        config.rebuild_csp_header_cache(FIREFOX_UA)
        assert dict(config.cached_headers["Content-Security-Policy"]) == {
            FIREFOX: ("Content-Security-Policy", "default-src 'self'"),
        }

    def test_rebuild_with_opted_out_policy_leaves_empty_entry(self):
        config = _compiled()
        config.dynamic_csp = OPT_OUT
        config.rebuild_csp_header_cache(FIREFOX_UA)
        assert dict(config.cached_headers["Content-Security-Policy"]) == {}
        assert "Content-Security-Policy" not in config.header_hash(FIREFOX_UA)


class TestHeaderHash:
    def test_selects_family_variant(self):
        config = _compiled(lambda c: setattr(c, "csp", {"default_src": ["'self'"], "child_src": ["'self'"]}))
        assert config.header_hash(FIREFOX_UA)["Content-Security-Policy"] == "default-src 'self'"
        assert config.header_hash(None)["Content-Security-Policy"] == "default-src 'self'; child-src 'self'"

    def test_legacy_family(self):
        config = _compiled(lambda c: setattr(c, "csp", {"default_src": ["'self'"], "form_action": ["'self'"]}))
        assert config.header_hash(UserAgent.for_family(LEGACY))["Content-Security-Policy"] == "default-src 'self'"

    def test_includes_simple_headers(self):
        headers = _compiled().header_hash(None)
        assert headers["X-Content-Type-Options"] == "nosniff"
        assert set(headers) == SIMPLE_HEADERS | {"Content-Security-Policy"}
