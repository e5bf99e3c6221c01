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
"""Tests for path composition and the global prefix."""

import pytest

from routhr.kernel.exceptions import InvalidPrefixExclusionException, MissingParameterException
from routhr.web.methods import RequestMethod
from routhr.web.paths import GlobalPrefixConfig, PrefixExclusion, compose_path


class TestComposePath:
    @pytest.mark.parametrize(
        ("prefix", "path", "expected"),
        [
            ("/api", "/test", "/api/test"),
            ("api", "test", "/api/test"),
            ("api", "/test", "/api/test"),
            ("/api", "test", "/api/test"),
        ],
    )
    def test_slash_combinations(self, prefix, path, expected):
        assert compose_path(prefix, path) == expected

    def test_trailing_slash_is_not_deduplicated(self):
        assert compose_path("/api/", "/test") == "/api//test"

    def test_no_prefix_keeps_rooted_path(self):
        assert compose_path(None, "/test") == "/test"
        assert compose_path("", "/test") == "/test"

    def test_no_prefix_roots_relative_path(self):
        assert compose_path(None, "test") == "/test"

    def test_root_prefix_counts_as_no_prefix(self):
        assert compose_path("/", "/test") == "/test"
        assert compose_path("/", "test") == "/test"
        assert compose_path("/", "/") == "/"

    def test_empty_path(self):
        assert compose_path("api", "") == "/api/"
        assert compose_path("/api", None) == "/api/"
        assert compose_path(None, None) == "/"

    def test_prefix_with_default_method_path(self):
        assert compose_path("products", "/") == "/products/"


class TestPrefixExclusion:
    def test_parse_mapping(self):
        exclusion = PrefixExclusion.parse({"path": "/health", "method": "get"})
        assert exclusion == PrefixExclusion("/health", RequestMethod.GET)

    def test_parse_passes_instances_through(self):
        exclusion = PrefixExclusion("/health", RequestMethod.GET)
        assert PrefixExclusion.parse(exclusion) is exclusion

    def test_missing_path(self):
        with pytest.raises(InvalidPrefixExclusionException, match="missing 'path'"):
            PrefixExclusion.parse({"method": "GET"})

    def test_missing_method(self):
        with pytest.raises(InvalidPrefixExclusionException, match="missing 'method'") as info:
            PrefixExclusion.parse({"path": "/health"})
        assert info.value.context["missing"] == "method"

    def test_unknown_method(self):
        with pytest.raises(InvalidPrefixExclusionException, match="Unsupported route method"):
            PrefixExclusion.parse({"path": "/health", "method": "TRACE"})

    def test_non_mapping_entry(self):
        with pytest.raises(InvalidPrefixExclusionException):
            PrefixExclusion.parse("/health")


class TestGlobalPrefixConfig:
    def test_apply_prefixes_route(self):
        config = GlobalPrefixConfig.build("api/v1")
        assert config.apply("/other", RequestMethod.GET) == "/api/v1/other"

    def test_excluded_route_is_left_alone(self):
        config = GlobalPrefixConfig.build("api/v1", [{"path": "/test", "method": "GET"}])
        assert config.apply("/test", RequestMethod.GET) == "/test"

    def test_exclusion_matches_method_exactly(self):
        config = GlobalPrefixConfig.build("api/v1", [{"path": "/test", "method": "GET"}])
        assert config.apply("/test", RequestMethod.POST) == "/api/v1/test"

    def test_exclusion_matches_path_exactly(self):
        config = GlobalPrefixConfig.build("api/v1", [{"path": "/test", "method": "GET"}])
        assert config.apply("/test/", RequestMethod.GET) == "/api/v1/test/"

    def test_missing_prefix(self):
        with pytest.raises(MissingParameterException):
            GlobalPrefixConfig.build(None)

    def test_malformed_exclusion_rejected(self):
        with pytest.raises(InvalidPrefixExclusionException):
            GlobalPrefixConfig.build("api", [{"path": "/test"}])
