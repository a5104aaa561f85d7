"""Tests for RouteBuilder."""

import random

import pytest

from api_mapper._internal.routing.builder import RouteBuilder
from api_mapper.exceptions import ApiMapperConfigError, RoutePlaceholderMissingError
from api_mapper.providers import NOT_FOUND, CallableProvider, ConstantProvider


class LastChoice:
    """Deterministic random source picking the last candidate."""

    def choice(self, seq):
        return seq[-1]


class TestRouteBuilderWithoutPlaceholders:
    """Tests for routes without placeholders."""

    def test_appends_parameters_as_query(self):
        """Should join base URL, route and encoded parameters."""
        builder = RouteBuilder("http://test")
        url = builder.build_url("ticket/list", {"a": "1", "b": "x y"})
        assert url == "http://test/ticket/list?a=1&b=x+y"

    def test_no_query_without_parameters(self):
        """Should not add a question mark when there are no parameters."""
        builder = RouteBuilder("http://test/")
        assert builder.build_url("/ticket/list") == "http://test/ticket/list"

    def test_default_base_url(self):
        """Should default to http://localhost."""
        assert RouteBuilder().build_url("ping") == "http://localhost/ping"

    def test_keeps_base_path(self):
        """Should keep the path of the base URL."""
        builder = RouteBuilder("http://test/api/v2")
        assert builder.build_url("tickets") == "http://test/api/v2/tickets"


class TestRouteBuilderPlaceholders:
    """Tests for placeholder substitution."""

    def test_ticket_list_route(self):
        """Should resolve from parameters and route providers."""
        builder = RouteBuilder("http://test")
        builder.add_route_provider("{token}", ConstantProvider("abc"))
        resolved = builder.build("{token}/ticket/list/{root}", {"{root}": "12", "key1": "value2"})
        assert resolved.path == "abc/ticket/list/12"
        assert resolved.url == "http://test/abc/ticket/list/12?key1=value2"
        assert resolved.parameters == {"key1": "value2"}

    def test_parameters_are_consumed(self):
        """Placeholder parameters should not leak into the query string."""
        builder = RouteBuilder("http://test")
        url = builder.build_url("ticket/{id}", {"{id}": "12"})
        assert url == "http://test/ticket/12"

    def test_caller_parameters_not_mutated(self):
        """Should work on a copy of the parameters."""
        parameters = {"{id}": "12", "page": "2"}
        RouteBuilder("http://test").build("ticket/{id}", parameters)
        assert parameters == {"{id}": "12", "page": "2"}

    def test_parameter_wins_over_provider(self):
        """Explicit parameters should be used before providers."""
        calls = []
        builder = RouteBuilder("http://test")
        builder.add_route_provider("{id}", CallableProvider(lambda route: calls.append(route) or "99"))
        assert builder.build_url("ticket/{id}", {"{id}": "12"}) == "http://test/ticket/12"
        assert calls == []

    def test_values_are_url_encoded(self):
        """Substituted values should be percent-encoded, slashes included."""
        builder = RouteBuilder("http://test")
        url = builder.build_url("files/{name}", {"{name}": "a b/c&d"})
        assert url == "http://test/files/a%20b%2Fc%26d"

    def test_non_string_values(self):
        """Should stringify values before substitution."""
        builder = RouteBuilder("http://test")
        assert builder.build_url("ticket/{id}", {"{id}": 12}) == "http://test/ticket/12"

    def test_provider_empty_string_is_a_value(self):
        """An empty string from a provider should resolve the placeholder."""
        builder = RouteBuilder("http://test")
        builder.add_route_provider("{prefix}", ConstantProvider(""))
        assert builder.build_url("{prefix}/tickets") == "http://test/tickets"

    def test_providers_receive_original_route(self):
        """Every lookup should see the original, unsubstituted route."""
        seen = []
        builder = RouteBuilder("http://test")
        builder.add_route_provider("{a}", CallableProvider(lambda route: seen.append(route) or "1"))
        builder.add_route_provider("{b}", CallableProvider(lambda route: seen.append(route) or "2"))
        builder.add_query_provider("q", CallableProvider(lambda route: seen.append(route) or "3"))
        url = builder.build_url("{a}/x/{b}")
        assert url == "http://test/1/x/2?q=3"
        assert seen == ["{a}/x/{b}", "{a}/x/{b}", "{a}/x/{b}"]

    def test_repeated_placeholder_uses_same_value(self):
        """A placeholder used twice should be resolved once."""
        builder = RouteBuilder("http://test")
        url = builder.build_url("{id}/children/{id}", {"{id}": "7"})
        assert url == "http://test/7/children/7"


class TestRouteBuilderMissingPlaceholder:
    """Tests for unresolvable placeholders."""

    def test_no_parameter_and_no_provider(self):
        """Should raise naming the placeholder and route."""
        builder = RouteBuilder("http://test")
        with pytest.raises(RoutePlaceholderMissingError) as exc_info:
            builder.build_url("{token}/ticket/list", {"key": "v"})
        assert exc_info.value.placeholder == "{token}"
        assert exc_info.value.route == "{token}/ticket/list"

    def test_provider_returns_not_found(self):
        """Should raise when the provider has no value."""
        builder = RouteBuilder("http://test")
        builder.add_route_provider("{token}", ConstantProvider(NOT_FOUND))
        with pytest.raises(RoutePlaceholderMissingError):
            builder.build_url("{token}/ticket/list")

    def test_provider_errors_propagate(self):
        """Provider exceptions should not be wrapped."""

        def explode(route):
            raise RuntimeError("boom")

        builder = RouteBuilder("http://test")
        builder.add_route_provider("{token}", CallableProvider(explode))
        with pytest.raises(RuntimeError, match="boom"):
            builder.build_url("{token}/ticket/list")


class TestRouteBuilderQueryProviders:
    """Tests for query providers."""

    def test_adds_missing_query_parameters(self):
        """Should append provider values after caller parameters."""
        builder = RouteBuilder("http://test")
        builder.add_query_provider("lang", ConstantProvider("en"))
        url = builder.build_url("tickets", {"page": "2"})
        assert url == "http://test/tickets?page=2&lang=en"

    def test_never_overwrites_caller_parameters(self):
        """Explicit caller values should win over providers."""
        builder = RouteBuilder("http://test")
        builder.add_query_provider("page", ConstantProvider("1"))
        resolved = builder.build("tickets", {"page": "5"})
        assert resolved.url == "http://test/tickets?page=5"
        assert resolved.parameters == {"page": "5"}

    def test_skips_not_found(self):
        """NOT_FOUND should not add a parameter."""
        builder = RouteBuilder("http://test")
        builder.add_query_provider("lang", ConstantProvider(NOT_FOUND))
        assert builder.build_url("tickets") == "http://test/tickets"

    def test_registration_order(self):
        """Provider values should follow registration order."""
        builder = RouteBuilder("http://test")
        builder.add_query_provider("b", ConstantProvider("2"))
        builder.add_query_provider("a", ConstantProvider("1"))
        assert builder.build_url("x") == "http://test/x?b=2&a=1"

    def test_set_query_providers_replaces(self):
        """set_query_providers should replace the registry."""
        builder = RouteBuilder("http://test")
        builder.add_query_provider("a", ConstantProvider("1"))
        builder.set_query_providers({"b": ConstantProvider("2")})
        assert list(builder.query_providers) == ["b"]
        assert builder.build_url("x") == "http://test/x?b=2"

    def test_sequence_values_repeat_key(self):
        """List values should produce repeated keys."""
        builder = RouteBuilder("http://test")
        assert builder.build_url("x", {"tag": ["a", "b"]}) == "http://test/x?tag=a&tag=b"

    def test_idempotent(self):
        """Identical inputs should produce identical URLs."""
        builder = RouteBuilder("http://test")
        builder.add_route_provider("{token}", ConstantProvider("abc"))
        builder.add_query_provider("lang", ConstantProvider("en"))
        parameters = {"{id}": "3", "q": "a b"}
        assert builder.build_url("{token}/t/{id}", parameters) == builder.build_url(
            "{token}/t/{id}", parameters
        )


class TestRouteBuilderBaseUrls:
    """Tests for base URL selection."""

    def test_uses_random_source_per_build(self):
        """Should ask the random source on every build."""
        builder = RouteBuilder(["http://a", "http://b"], rng=LastChoice())
        assert builder.build_url("x") == "http://b/x"

    def test_seeded_random_is_reproducible(self):
        """Same seed should give the same sequence of base URLs."""
        candidates = ["http://a", "http://b", "http://c"]
        first = RouteBuilder(candidates, rng=random.Random(7))
        second = RouteBuilder(candidates, rng=random.Random(7))
        urls = [first.build_url("x") for _ in range(10)]
        assert urls == [second.build_url("x") for _ in range(10)]
        assert all(url.split("/x")[0] in candidates for url in urls)

    def test_empty_candidates_rejected(self):
        """Should refuse an empty list of base URLs."""
        with pytest.raises(ApiMapperConfigError):
            RouteBuilder([])

    def test_base_urls_property(self):
        """Should expose the candidates."""
        assert RouteBuilder(("http://a", "http://b")).base_urls == ["http://a", "http://b"]


class TestRouteBuilderValueFormatting:
    """Tests for None and boolean values."""

    def test_none_placeholder_is_empty(self):
        """A None value should substitute as an empty segment."""
        builder = RouteBuilder("http://test")
        builder.add_route_provider("{p}", ConstantProvider(None))
        assert builder.build_url("{p}/x", {"flag": True}) == "http://test/x?flag=1"

    def test_boolean_placeholder(self):
        """Booleans should substitute as 1 and 0."""
        builder = RouteBuilder("http://test")
        url = builder.build_url("{on}/{off}", {"{on}": True, "{off}": False})
        assert url == "http://test/1/0"

    def test_none_query_value_is_dropped(self):
        """A None query value should not reach the query string."""
        builder = RouteBuilder("http://test")
        builder.add_query_provider("lang", ConstantProvider(None))
        resolved = builder.build("x", {"page": "2", "q": None})
        assert resolved.url == "http://test/x?page=2"

    def test_none_provider_value_kept_in_parameters(self):
        """None from a query provider counts as found but is not serialized."""
        builder = RouteBuilder("http://test")
        builder.add_query_provider("lang", ConstantProvider(None))
        assert builder.build("x").parameters == {"lang": None}

    def test_boolean_query_values(self):
        """Booleans in the query should be written as 1 and 0."""
        builder = RouteBuilder("http://test")
        assert builder.build_url("x", {"a": True, "b": False}) == "http://test/x?a=1&b=0"

    def test_none_inside_sequence_is_dropped(self):
        """None items in a list value should be skipped."""
        builder = RouteBuilder("http://test")
        assert builder.build_url("x", {"tag": ["a", None, True]}) == "http://test/x?tag=a&tag=1"


class TestRouteBuilderRouteQuery:
    """Tests for routes that already carry a query string."""

    def test_merges_with_route_query(self):
        """Parameters should be appended to an existing query with &."""
        builder = RouteBuilder("http://test")
        assert builder.build_url("x?y=1", {"a": "b"}) == "http://test/x?y=1&a=b"

    def test_route_query_kept_without_parameters(self):
        """The route query should be kept as is when nothing is added."""
        builder = RouteBuilder("http://test")
        assert builder.build_url("x?y=1") == "http://test/x?y=1"

    def test_question_mark_in_value_is_encoded(self):
        """A ? inside a placeholder value should not start the query."""
        builder = RouteBuilder("http://test")
        url = builder.build_url("files/{name}", {"{name}": "a?b", "page": "2"})
        assert url == "http://test/files/a%3Fb?page=2"
