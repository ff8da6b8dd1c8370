"""
Unit tests for the ``python -m flightdeck`` entry point.
"""

import sys
import textwrap

import pytest

from flightdeck import Application
from flightdeck.__main__ import load_application, main


@pytest.fixture
def app_module(tmp_path, monkeypatch):
    """Write an importable module defining an app and a factory."""
    source = textwrap.dedent(f"""
        from flightdeck import AppConfig, Application

        app = Application(AppConfig(session_dir={str(tmp_path / "sessions")!r}))

        @app.get("/")
        def home(request, response, context):
            response.write("home")

        @app.get("/user/:username")
        def user(request, response, context):
            response.write(request.path_params["username"])

        class Holder:
            app = app

        def create_app():
            return Application(AppConfig(session_dir={str(tmp_path / "other")!r}))

        not_an_app = 42
    """)
    (tmp_path / "cli_site.py").write_text(source)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "cli_site", raising=False)
    return "cli_site"


class TestLoadApplication:
    """Tests for load_application()."""

    def test_attribute(self, app_module):
        app = load_application(f"{app_module}:app")
        assert isinstance(app, Application)
        assert len(app.router) == 2

    def test_dotted_attribute(self, app_module):
        assert load_application(f"{app_module}:Holder.app") is load_application(f"{app_module}:app")

    def test_factory_is_called(self, app_module):
        app = load_application(f"{app_module}:create_app")
        assert len(app.router) == 0

    @pytest.mark.parametrize("target", ["cli_site", ":app", "cli_site:"])
    def test_bad_target(self, app_module, target):
        with pytest.raises(ValueError):
            load_application(target)

    def test_not_an_application(self, app_module):
        with pytest.raises(TypeError):
            load_application(f"{app_module}:not_an_app")


class TestMain:
    """Tests for main()."""

    def test_list_routes(self, app_module, capsys):
        assert main([f"{app_module}:app", "--list-routes"]) == 0

        out = capsys.readouterr().out
        assert "Registered Routes:" in out
        assert "/user/:username" in out

    def test_overrides_applied_before_serving(self, app_module, monkeypatch, tmp_path):
        served = []
        monkeypatch.setattr(Application, "run", lambda self, provider=None: served.append(self))

        assert main([f"{app_module}:app", "--session-dir", str(tmp_path / "cli"), "-l", "DEBUG"]) == 0

        app = served[0]
        assert app.store.session_dir == tmp_path / "cli"
        assert app.config.log_level == "DEBUG"

    def test_missing_module_exits_2(self, capsys):
        assert main(["no_such_module_here:app"]) == 2
        assert "cannot load" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "flightdeck" in capsys.readouterr().out
