"""Tests for navdeck.routing.router — client-side path router."""

import logging

import pytest

from navdeck.config import NavigationMode, RouterConfig
from navdeck.events import NavigationChange
from navdeck.host.headless import HeadlessHost
from navdeck.host.protocol import HostEvent
from navdeck.routing.router import Router

LINKS = """
<nav>
  <a id="internal" href="/ai-tools"><span id="label">AI tools</span></a>
  <a id="external" href="https://example.com/">Example</a>
  <a id="fragment" href="#top">Top</a>
  <a id="script" href="javascript:void(0)">Script</a>
  <a id="blank" href="/creation" target="_blank">New tab</a>
  <a id="nohref">No href</a>
  <p id="plain">Not a link</p>
</nav>
"""


def _router(
    url: str = "/",
    config: RouterConfig | None = None,
    html: str = "",
) -> tuple[HeadlessHost, Router, list[NavigationChange]]:
    host = HeadlessHost(html, url=url)
    router = Router(host, config)
    changes: list[NavigationChange] = []
    router.changes.subscribe(changes.append)
    return host, router, changes


class TestResolution:
    def test_literal_route_beats_catch_all(self) -> None:
        _, router, changes = _router()
        calls: list[str] = []
        router.add("/", lambda: calls.append("H1"))
        router.add("/ai-tools", lambda: calls.append("H2"))
        router.add("(.*)", lambda: calls.append("H3"))
        router.init()
        calls.clear()
        changes.clear()

        router.navigate("/ai-tools")

        assert calls == ["H2"]
        assert changes == [NavigationChange(current_route="/ai-tools", previous_route="/")]

    def test_not_found_handler_runs_once(self) -> None:
        _, router, _ = _router(url="/missing")
        calls: list[str] = []
        router.add("/", lambda: calls.append("home"))
        router.not_found(lambda: calls.append("H0"))

        router.init()

        assert calls == ["H0"]

    def test_exact_match_precedence(self) -> None:
        _, router, _ = _router(url="/about")
        calls: list[str] = []
        router.add("/a.*", lambda: calls.append("pattern"))
        router.add("/about", lambda: calls.append("exact"))

        router.init()

        assert calls == ["exact"]

    def test_registration_order_tie_break(self) -> None:
        _, router, _ = _router(url="/abc")
        calls: list[str] = []
        router.add("/a.*", lambda: calls.append("first"))
        router.add("/ab.*", lambda: calls.append("second"))

        router.init()

        assert calls == ["first"]

    def test_pattern_is_anchored(self) -> None:
        _, router, _ = _router(url="/x/ai-tools/y")
        calls: list[str] = []
        router.add("/ai-tools", lambda: calls.append("ai"))
        router.not_found(lambda: calls.append("missing"))

        router.init()

        assert calls == ["missing"]

    def test_no_handler_and_no_not_found_still_publishes(self) -> None:
        _, router, changes = _router(url="/nowhere")
        router.add("/", lambda: None)

        router.init()

        assert router.current_route == "/nowhere"
        assert changes == [NavigationChange(current_route="/nowhere", previous_route=None)]

    def test_reregistering_overwrites_in_place(self) -> None:
        _, router, _ = _router()
        calls: list[str] = []
        router.add("/", lambda: calls.append("old")).add("/x", lambda: None)
        router.add("/", lambda: calls.append("new"))

        router.init()

        assert calls == ["new"]
        assert router.table.patterns == ["/", "/x"]

    def test_add_and_not_found_chain(self) -> None:
        _, router, _ = _router()
        assert router.add("/", lambda: None) is router
        assert router.not_found(lambda: None) is router


class TestMalformedPatterns:
    def test_invalid_regex_never_matches_and_never_raises(self) -> None:
        _, router, _ = _router(url="/xyz")
        calls: list[str] = []
        router.add("([", lambda: calls.append("broken"))
        router.add("/x.*", lambda: calls.append("good"))

        router.init()

        assert calls == ["good"]

    def test_invalid_regex_routes_to_not_found(self) -> None:
        _, router, _ = _router(url="/c")
        calls: list[str] = []
        router.add("/c[", lambda: calls.append("broken"))
        router.not_found(lambda: calls.append("missing"))

        router.init()

        assert calls == ["missing"]

    def test_invalid_regex_still_matches_literally(self) -> None:
        _, router, _ = _router(url="/c[")
        calls: list[str] = []
        router.add("/c[", lambda: calls.append("literal"))

        router.init()

        assert calls == ["literal"]

    def test_invalid_regex_logs_debug_diagnostic(self, caplog: pytest.LogCaptureFixture) -> None:
        _, router, _ = _router(url="/nothing")
        router.add("([", lambda: None)

        with caplog.at_level(logging.DEBUG, logger="navdeck.router"):
            router.init()

        assert "not a valid regular expression" in caplog.text


class TestRouteState:
    def test_state_updated_before_handler_runs(self) -> None:
        _, router, _ = _router()
        seen: list[str | None] = []
        router.add("/", lambda: None)
        router.add("/ai-tools", lambda: seen.append(router.current_route))
        router.init()

        router.navigate("/ai-tools")

        assert seen == ["/ai-tools"]

    def test_previous_route_trails_by_one(self) -> None:
        _, router, changes = _router()
        router.add(".*", lambda: None)
        router.init()

        for path in ("/a", "/b", "/c"):
            router.navigate(path)

        assert [(c.previous_route, c.current_route) for c in changes] == [
            (None, "/"),
            ("/", "/a"),
            ("/a", "/b"),
            ("/b", "/c"),
        ]
        assert router.previous_route == "/b"

    def test_subscriber_sees_final_state(self) -> None:
        _, router, _ = _router()
        observed: list[tuple[str | None, str | None]] = []
        router.add(".*", lambda: None)
        router.changes.subscribe(lambda c: observed.append((router.current_route, c.current_route)))

        router.init()
        router.navigate("/data-analysis")

        assert observed[-1] == ("/data-analysis", "/data-analysis")

    def test_failing_handler_still_publishes(self, caplog: pytest.LogCaptureFixture) -> None:
        _, router, changes = _router()

        def boom() -> None:
            raise ValueError("broken handler")

        router.add("/", boom)
        with caplog.at_level(logging.ERROR, logger="navdeck.router"):
            router.init()

        assert changes == [NavigationChange(current_route="/", previous_route=None)]
        assert "Route handler for '/' failed" in caplog.text


class TestHistoryMode:
    def test_navigate_pushes_entry(self) -> None:
        host, router, _ = _router()
        router.add(".*", lambda: None)
        router.init()

        router.navigate("/ai-tools")

        assert host.location.pathname == "/ai-tools"
        assert len(host.history) == 2

    def test_navigate_replace(self) -> None:
        host, router, _ = _router()
        router.add(".*", lambda: None)
        router.init()

        router.navigate("/ai-tools", replace=True)

        assert host.location.pathname == "/ai-tools"
        assert len(host.history) == 1
        assert router.current_route == "/ai-tools"

    def test_navigate_to_current_path_is_noop(self) -> None:
        host, router, changes = _router(config=RouterConfig(mode=NavigationMode.HISTORY, base_path=""))
        router.add(".*", lambda: None)
        router.init()
        router.navigate("/data-analysis")
        changes.clear()
        entries = len(host.history)

        router.navigate("/data-analysis")

        assert changes == []
        assert len(host.history) == entries

    def test_back_and_forward_resolve(self) -> None:
        host, router, _ = _router()
        router.add(".*", lambda: None)
        router.init()
        router.navigate("/a")
        router.navigate("/b")

        host.history.back()
        host.run_pending()
        assert router.current_route == "/a"
        assert router.previous_route == "/b"

        host.history.forward()
        host.run_pending()
        assert router.current_route == "/b"


class TestBasePath:
    def test_base_path_stripped(self) -> None:
        _, router, _ = _router(url="/links/ai-tools", config=RouterConfig(base_path="/links"))
        assert router.get_current_path() == "/ai-tools"

    def test_base_path_root(self) -> None:
        _, router, _ = _router(url="/links", config=RouterConfig(base_path="/links"))
        assert router.get_current_path() == "/"

    def test_base_path_prefix_must_be_whole_segment(self) -> None:
        _, router, _ = _router(url="/linksfarm", config=RouterConfig(base_path="/links"))
        assert router.get_current_path() == "/linksfarm"

    def test_navigate_prepends_base_path(self) -> None:
        host, router, _ = _router(url="/links/", config=RouterConfig(base_path="/links"))
        router.add(".*", lambda: None)
        router.init()

        router.navigate("/creation")

        assert host.location.pathname == "/links/creation"
        assert router.current_route == "/creation"


class TestHashMode:
    def test_current_path_defaults_to_root(self) -> None:
        _, router, _ = _router(config=RouterConfig(mode=NavigationMode.HASH))
        assert router.get_current_path() == "/"

    def test_current_path_from_fragment(self) -> None:
        _, router, _ = _router(url="/#/creation", config=RouterConfig(mode=NavigationMode.HASH))
        assert router.get_current_path() == "/creation"

    def test_navigate_resolves_on_hashchange(self) -> None:
        host, router, _ = _router(config=RouterConfig(mode=NavigationMode.HASH))
        calls: list[str] = []
        router.add("/", lambda: None)
        router.add("/creation", lambda: calls.append("creation"))
        router.init()

        router.navigate("/creation")
        assert host.location.hash == "#/creation"
        assert calls == []

        host.run_pending()
        assert calls == ["creation"]
        assert router.current_route == "/creation"

    def test_navigate_replace_resolves_immediately(self) -> None:
        host, router, _ = _router(config=RouterConfig(mode=NavigationMode.HASH))
        router.add(".*", lambda: None)
        router.init()

        router.navigate("/info-gap", replace=True)

        assert router.current_route == "/info-gap"
        assert len(host.history) == 1

    def test_hash_mode_does_not_intercept_clicks(self) -> None:
        host, router, _ = _router(config=RouterConfig(mode=NavigationMode.HASH), html=LINKS)
        router.add(".*", lambda: None)
        router.init()

        event = host.click(host.document.find(id="internal"))

        assert event.default_prevented is False
        assert host.listener_count(HostEvent.CLICK) == 0


class TestClickInterception:
    def _started(self) -> tuple[HeadlessHost, Router, list[str]]:
        host, router, _ = _router(html=LINKS)
        calls: list[str] = []
        router.add("/", lambda: None)
        router.add("/ai-tools", lambda: calls.append("ai"))
        router.add("/creation", lambda: calls.append("creation"))
        router.init()
        return host, router, calls

    def test_internal_link_becomes_navigation(self) -> None:
        host, router, calls = self._started()

        event = host.click(host.document.find(id="label"))

        assert event.default_prevented is True
        assert calls == ["ai"]
        assert host.page_loads == 0
        assert router.current_route == "/ai-tools"

    @pytest.mark.parametrize("link_id", ["external", "script", "blank", "nohref", "plain"])
    def test_links_left_to_platform(self, link_id: str) -> None:
        host, router, calls = self._started()

        event = host.click(host.document.find(id=link_id))

        assert event.default_prevented is False
        assert calls == []
        assert router.current_route == "/"

    def test_fragment_link_not_intercepted(self) -> None:
        host, _, calls = self._started()

        event = host.click(host.document.find(id="fragment"))

        assert event.default_prevented is False
        assert calls == []
        assert host.location.hash == "#top"

    def test_external_link_performs_full_navigation(self) -> None:
        host, _, _ = self._started()
        host.click(host.document.find(id="external"))
        assert host.page_loads == 1

    def test_relative_link_under_base_path(self) -> None:
        html = '<a id="rel" href="ai-tools">AI</a>'
        host, router, _ = _router(url="/app/", config=RouterConfig(base_path="/app"), html=html)
        router.add("/", lambda: None).add("/ai-tools", lambda: None)
        router.init()

        event = host.click(host.document.find(id="rel"))

        assert event.default_prevented is True
        assert router.current_route == "/ai-tools"
        assert host.location.pathname == "/app/ai-tools"

    def test_relative_link_to_current_page_is_a_noop(self) -> None:
        html = '<a id="rel" href="ai-tools">AI</a>'
        host, router, changes = _router(url="/ai-tools", html=html)
        router.add("/ai-tools", lambda: None)
        router.init()

        event = host.click(host.document.find(id="rel"))

        assert event.default_prevented is True
        assert len(changes) == 1
        assert len(host.history) == 1

    def test_query_and_fragment_are_dropped(self) -> None:
        html = '<a id="q" href="/creation?ref=nav#top">Creation</a>'
        host, router, _ = _router(html=html)
        router.add("/creation", lambda: None)
        router.init()

        host.click(host.document.find(id="q"))

        assert router.current_route == "/creation"

    def test_link_outside_base_path_left_to_platform(self) -> None:
        html = '<a id="out" href="/elsewhere">Elsewhere</a>'
        host, router, _ = _router(url="/app/", config=RouterConfig(base_path="/app"), html=html)
        router.init()

        event = host.click(host.document.find(id="out"))

        assert event.default_prevented is False
        assert host.page_loads == 1


class TestLifecycle:
    def test_init_twice_does_not_double_wire(self, caplog: pytest.LogCaptureFixture) -> None:
        host, router, changes = _router()
        router.add("/", lambda: None)
        router.init()
        with caplog.at_level(logging.WARNING, logger="navdeck.router"):
            router.init()

        assert host.listener_count(HostEvent.CLICK) == 1
        assert host.listener_count(HostEvent.POPSTATE) == 1
        assert len(changes) == 2
        assert "called twice" in caplog.text

    def test_destroy_detaches_listeners(self) -> None:
        host, router, _ = _router()
        router.init()
        router.destroy()

        assert host.listener_count(HostEvent.CLICK) == 0
        assert host.listener_count(HostEvent.POPSTATE) == 0
        assert router.initialized is False

    def test_destroy_hash_mode(self) -> None:
        host, router, _ = _router(config=RouterConfig(mode=NavigationMode.HASH))
        router.init()
        router.destroy()
        assert host.listener_count(HostEvent.HASHCHANGE) == 0
