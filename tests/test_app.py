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
"""Tests for the Routhr application object."""

from pathlib import Path

import pytest
from starlette.testclient import TestClient

from routhr import Routhr
from routhr.core.config import Config
from routhr.kernel.exceptions import (
    ConfigurationException,
    DuplicateRegistrationException,
    InvalidPrefixExclusionException,
    MiddlewareConflictException,
    MissingParameterException,
    NoRoutesException,
    UnsupportedMethodException,
)
from routhr.web.adapters.starlette.server import StarletteServer
from routhr.web.context import RouteContext
from routhr.web.mappings import Get, Middleware, Post, Route
from routhr.web.methods import RequestMethod
from routhr.web.routes import RouteDescriptor


class StubServer(StarletteServer):
    """StarletteServer that records listen() calls instead of serving."""

    def __init__(self):
        super().__init__(request_logging=False)
        self.listened: list[tuple[int, str]] = []

    def listen(self, port, callback=None, host="127.0.0.1"):
        self.listened.append((port, host))
        if callback is not None:
            callback()


def recorder(name, calls):
    async def middleware(request, call_next):
        calls.append((name, RouteContext.current() is not None))
        return await call_next(request)

    return middleware


CALLS: list = []


@Route("products", middleware=recorder("class", CALLS))
class ProductController:
    @Get("list")
    def list_products(self, request):
        return {"items": ["a"], "route_id": request.state.routhr.id}

    @Post("/", middleware=recorder("method", CALLS))
    def create(self, request):
        CALLS.append(("handler", True))
        return {"created": True}

    def helper(self, request):
        return "not routed"


class HealthController:
    @Get("/health")
    def health(self, request):
        return "up"

    @Get("/status")
    def status(self, request):
        return "ok"


class Conflicted:
    @Get("/dup", middleware=recorder("x", []))
    @Middleware([recorder("y", [])])
    def handler(self, request):
        pass


def _app(**kwargs) -> Routhr:
    return Routhr(3003, server=StubServer(), **kwargs)


class TestConstruction:
    def test_defaults_from_config(self):
        app = Routhr(server=StubServer())
        assert app.port == 3000
        assert app.host == "127.0.0.1"
        assert app.silent is False
        assert app.nolog is False

    def test_explicit_arguments_win(self):
        config = Config({"routhr": {"port": 8080, "silent": True}})
        app = Routhr(9000, server=StubServer(), config=config, silent=False)
        assert app.port == 9000
        assert app.silent is False

    def test_config_values(self):
        config = Config({"routhr": {"port": 8080, "silent": True, "nolog": True}})
        app = Routhr(server=StubServer(), config=config)
        assert app.port == 8080
        assert app.silent is True
        assert app.nolog is True

    def test_global_prefix_from_config(self):
        config = Config({"routhr": {"global-prefix": "api"}})
        app = Routhr(server=StubServer(), config=config)
        assert app.global_prefix is not None
        assert app.global_prefix.prefix == "api"

    def test_default_server(self):
        assert isinstance(Routhr().server, StarletteServer)


class TestUseRoutes:
    def test_registers_routes(self):
        app = _app()
        app.use_routes([{"path": "/hello", "method": "GET", "handler": lambda request: {"message": "Hello World"}}])
        assert [r.path for r in app.routes] == ["/hello"]
        resp = TestClient(app.build()).get("/hello")
        assert resp.json() == {"message": "Hello World"}

    def test_accepts_descriptors(self):
        app = _app()
        app.use_routes([RouteDescriptor("/a", RequestMethod.POST, lambda request: "a")])
        assert TestClient(app.build()).post("/a").text == "a"

    def test_global_prefix_not_applied(self):
        app = _app().set_global_prefix("api")
        app.use_routes([RouteDescriptor("/a", "GET", lambda request: "a")])
        assert app.routes[0].path == "/a"

    def test_twice_raises(self):
        app = _app().use_routes([RouteDescriptor("/a", "GET", lambda request: "a")])
        with pytest.raises(DuplicateRegistrationException):
            app.use_routes([RouteDescriptor("/b", "GET", lambda request: "b")])

    def test_missing_routes(self):
        with pytest.raises(MissingParameterException):
            _app().use_routes(None)

    def test_missing_handler(self):
        with pytest.raises(MissingParameterException, match="handler"):
            _app().use_routes([{"path": "/a", "method": "GET"}])

    def test_unsupported_method(self):
        with pytest.raises(UnsupportedMethodException):
            _app().use_routes([RouteDescriptor("/a", "TRACE", lambda request: "a")])

    def test_failed_registration_leaves_app_and_server_in_step(self):
        app = _app()
        with pytest.raises(UnsupportedMethodException):
            app.use_routes(
                [
                    RouteDescriptor("/a", "GET", lambda request: "a"),
                    RouteDescriptor("/b", "FETCH", lambda request: "b"),
                ]
            )
        assert app.routes == ()
        assert app.server.routes == []

        app.use_routes([RouteDescriptor("/a", "GET", lambda request: "a")])
        assert [r.path for r in app.routes] == ["/a"]
        assert [r.path for r in app.server.routes] == ["/a"]

    def test_single_middleware_and_list_conflict(self):
        route = RouteDescriptor(
            "/a", "GET", lambda request: "a", middleware=recorder("x", []), middleware_list=[recorder("y", [])]
        )
        with pytest.raises(MiddlewareConflictException):
            _app().use_routes([route])


class TestUseControllers:
    def setup_method(self):
        CALLS.clear()

    def test_end_to_end(self):
        app = _app().use_controllers([ProductController])
        client = TestClient(app.build())
        resp = client.get("/products/list")
        assert resp.status_code == 200
        assert resp.json()["items"] == ["a"]
        assert resp.json()["route_id"].startswith("ru")

    def test_route_list(self):
        app = _app().use_controllers([ProductController, HealthController])
        assert [(r.path, r.method) for r in app.routes] == [
            ("/products/list", RequestMethod.GET),
            ("/products/", RequestMethod.POST),
            ("/health", RequestMethod.GET),
            ("/status", RequestMethod.GET),
        ]

    def test_context_seed_runs_before_class_then_method_middleware(self):
        app = _app().use_controllers([ProductController])
        TestClient(app.build()).post("/products/")
        assert CALLS == [("class", True), ("method", True), ("handler", True)]

    def test_twice_raises(self):
        app = _app().use_controllers([HealthController])
        with pytest.raises(DuplicateRegistrationException, match="already been registered"):
            app.use_controllers([ProductController])

    def test_after_routes_raises(self):
        app = _app().use_routes([RouteDescriptor("/a", "GET", lambda request: "a")])
        with pytest.raises(DuplicateRegistrationException, match="after routes"):
            app.use_controllers([HealthController])

    def test_middleware_conflict_names_path(self):
        with pytest.raises(MiddlewareConflictException, match="/dup"):
            _app().use_controllers([Conflicted])

    def test_global_prefix_with_exclusion(self):
        app = _app().set_global_prefix("api/v1", exclude=[{"path": "/health", "method": "GET"}])
        app.use_controllers([HealthController])
        assert [r.path for r in app.routes] == ["/health", "/api/v1/status"]
        client = TestClient(app.build())
        assert client.get("/health").text == "up"
        assert client.get("/api/v1/status").text == "ok"
        assert client.get("/status").status_code == 404

    def test_failed_controller_registration_can_be_retried(self):
        class Described:
            @Get("/ok")
            def ok(self, request):
                return "ok"

            def describe_routes(self):
                return [RouteDescriptor("/bad", "FETCH", lambda request: "bad")]

        app = _app()
        with pytest.raises(UnsupportedMethodException):
            app.use_controllers([Described])
        assert app.routes == ()
        assert app.server.routes == []

        app.use_controllers([HealthController])
        assert [r.path for r in app.server.routes] == ["/health", "/status"]


class TestGlobalPrefix:
    def test_set_twice_raises(self):
        app = _app().set_global_prefix("api")
        with pytest.raises(DuplicateRegistrationException):
            app.set_global_prefix("v2")

    def test_after_controllers_raises(self):
        app = _app().use_controllers([HealthController])
        with pytest.raises(ConfigurationException, match="before controllers"):
            app.set_global_prefix("api")

    def test_malformed_exclusion(self):
        with pytest.raises(InvalidPrefixExclusionException):
            _app().set_global_prefix("api", exclude=[{"path": "/health"}])

    def test_missing_prefix(self):
        with pytest.raises(MissingParameterException):
            _app().set_global_prefix(None)


class TestSilentMode:
    def test_duplicate_controllers_ignored(self):
        app = _app(silent=True).use_controllers([HealthController])
        app.use_controllers([ProductController])
        assert [r.path for r in app.routes] == ["/health", "/status"]

    def test_conflicting_route_is_dropped(self):
        app = _app(silent=True).use_controllers([Conflicted, HealthController])
        assert [r.path for r in app.routes] == ["/health", "/status"]

    def test_malformed_exclusion_leaves_prefix_unset(self):
        app = _app(silent=True).set_global_prefix("api", exclude=[{"method": "GET"}])
        assert app.global_prefix is None

    def test_start_without_routes(self):
        app = _app(silent=True)
        app.start()
        assert app.server.listened == [(3003, "127.0.0.1")]


class TestHostErrors:
    def test_static_failure_is_recorded(self, tmp_path):
        app = _app().static("/assets", str(tmp_path / "missing"))
        assert len(app.registration_errors) == 1
        assert app.registration_errors[0].context["primitive"] == "static"

    def test_route_failure_is_recorded(self):
        app = _app().use_routes(
            [
                RouteDescriptor("relative", "GET", lambda request: "x"),
                RouteDescriptor("/ok", "GET", lambda request: "ok"),
            ]
        )
        assert [r.path for r in app.routes] == ["/ok"]
        assert len(app.registration_errors) == 1


class TestDelegation:
    def test_use_requires_middleware(self):
        with pytest.raises(MissingParameterException):
            _app().use(None)

    def test_use(self):
        async def tag(request, call_next):
            response = await call_next(request)
            response.headers["X-App"] = "1"
            return response

        app = _app().use(tag).use_routes([RouteDescriptor("/a", "GET", lambda request: "a")])
        assert TestClient(app.build()).get("/a").headers["X-App"] == "1"

    def test_use_middleware_reading_body(self):
        async def body_logger(request, call_next):
            assert await request.json() == {"n": 1}
            return await call_next(request)

        app = _app().use(body_logger)
        echo = {"path": "/echo", "method": "POST", "handler": lambda request: request.state.routhr.parsed_body}
        app.use_routes([echo])
        assert TestClient(app.build()).post("/echo", json={"n": 1}).json() == {"n": 1}

    def test_set_requires_name(self):
        with pytest.raises(MissingParameterException):
            _app().set(None, "x")

    def test_engine_and_render(self, tmp_path):
        (tmp_path / "hello.tpl").write_text("Hi {who}")
        rendered = []
        app = (
            _app()
            .set("views", str(tmp_path))
            .set("view engine", "tpl")
            .engine("tpl", lambda file_path, options: Path(file_path).read_text().format(**options))
        )
        assert app.render("hello", {"who": "there"}, rendered.append) == "Hi there"
        assert rendered == ["Hi there"]


class TestLifecycle:
    def test_start_without_routes_raises(self):
        with pytest.raises(NoRoutesException, match="No routes have been registered."):
            _app().start()

    def test_start_serves(self):
        started = []
        app = _app().use_controllers([HealthController])
        app.start(callback=lambda: started.append(True))
        assert app.server.listened == [(3003, "127.0.0.1")]
        assert started == [True]
        assert app.started

    def test_start_with_port(self):
        app = _app().use_controllers([HealthController]).start(4000)
        assert app.server.listened[0][0] == 4000

    def test_listen_is_deprecated_alias(self):
        app = _app().use_controllers([HealthController])
        with pytest.warns(DeprecationWarning):
            app.listen()
        assert app.server.listened == [(3003, "127.0.0.1")]

    def test_listen_without_routes_raises(self):
        with pytest.warns(DeprecationWarning), pytest.raises(NoRoutesException):
            _app().listen()

    def test_no_registration_after_start(self):
        app = _app().use_controllers([HealthController]).start()
        with pytest.raises(ConfigurationException, match="after the application has started"):
            app.use_routes([RouteDescriptor("/late", "GET", lambda request: "late")])
