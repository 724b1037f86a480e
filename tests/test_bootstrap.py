"""Tests for validation, bootstrap and the full configure() sequence."""

import pytest

import mpdterm.bootstrap
from mpdterm.bootstrap import Startup, configure, create_directories
from mpdterm.errors import ConfigFileError, EnvironmentVariableError, ResourceError, ValidationError
from mpdterm.options import Terminate
from mpdterm.screens import ScreenType


class TestScreens:
    def test_known_screen(self, environ):
        startup = configure(["--screen", "playlist"], environ)
        assert isinstance(startup, Startup)
        assert startup.config.startup_screen is ScreenType.PLAYLIST

    def test_screens_override_file(self, tmp_path, environ):
        path = tmp_path / "conf"
        path.write_text("startup_screen = browser\nstartup_slave_screen = clock\n")
        assert configure(["-c", str(path)], environ).config.startup_screen is ScreenType.BROWSER
        startup = configure(["-c", str(path), "-s", "media_library", "-S", "visualizer"], environ)
        assert startup.config.startup_screen is ScreenType.MEDIA_LIBRARY
        assert startup.config.startup_slave_screen is ScreenType.VISUALIZER

    def test_unknown_screen(self, environ):
        with pytest.raises(ValidationError) as exc_info:
            configure(["--screen", "bogus"], environ)
        assert str(exc_info.value) == "Unknown screen: bogus"

    def test_unknown_slave_screen(self, environ):
        with pytest.raises(ValidationError) as exc_info:
            configure(["--slave-screen", "nope"], environ)
        assert str(exc_info.value) == "Unknown slave screen: nope"


class TestValidation:
    def test_empty_host_on_command_line(self, environ):
        with pytest.raises(ValidationError, match="Host must not be empty"):
            configure(["--host", ""], environ)

    @pytest.mark.parametrize("host", ["", "secret@"])
    def test_empty_host_from_environment(self, environ, host):
        with pytest.raises(ValidationError, match="Host must not be empty"):
            configure([], {**environ, "MPD_HOST": host})

    def test_port_out_of_range(self, environ):
        with pytest.raises(ValidationError, match="Port out of range"):
            configure(["--port", "0"], environ)

    def test_environment_port_out_of_range(self, environ):
        with pytest.raises(ValidationError):
            configure([], {**environ, "MPD_PORT": "99999"})


class TestBindingsPath:
    def test_derived_from_ncmpcpp_directory(self, tmp_path, home, environ):
        path = tmp_path / "conf"
        path.write_text('ncmpcpp_directory = "~/app"\n')
        startup = configure(["-c", str(path)], environ)
        assert startup.config.bindings_path == home / "app" / "bindings"

    def test_explicit_bindings_expanded(self, home, environ):
        startup = configure(["--bindings", "~/keys"], environ)
        assert startup.config.bindings_path == home / "keys"

    def test_bindings_loaded_from_resolved_path(self, home, environ):
        (home / "keys").write_text('def_key "x"\n  quit\n')
        startup = configure(["-b", "~/keys"], environ)
        assert startup.bindings.actions("x") == ["quit"]

    def test_missing_bindings_use_defaults(self, environ):
        startup = configure([], environ)
        assert startup.bindings.actions("q") == ["quit"]


class TestDirectories:
    def test_directories_created(self, home, environ):
        startup = configure([], environ)
        assert (home / ".ncmpcpp").is_dir()
        assert (home / ".lyrics").is_dir()
        assert startup.config.ncmpcpp_directory == home / ".ncmpcpp"

    def test_existing_directories_kept(self, home, environ):
        (home / ".ncmpcpp").mkdir()
        (home / ".ncmpcpp" / "keep").write_text("x")
        configure([], environ)
        assert (home / ".ncmpcpp" / "keep").read_text() == "x"

    def test_creation_failure_is_fatal(self, tmp_path, home, environ):
        blocker = home / "blocker"
        blocker.write_text("not a directory")
        path = tmp_path / "conf"
        path.write_text('lyrics_directory = "~/blocker/lyrics"\n')
        with pytest.raises(ResourceError, match="cannot create directory"):
            configure(["-c", str(path)], environ)

    def test_creation_logged(self, environ, log_messages):
        configure([], environ)
        assert any("Created directory" in m for m in log_messages)

    def test_create_directories_idempotent(self, environ):
        config = configure([], environ).config
        create_directories(config)
        assert config.lyrics_directory.is_dir()


class TestShortCircuit:
    def test_help_touches_nothing(self, monkeypatch, home, environ):
        """Test that --help skips file reads, directory creation and bindings load."""

        def fail(*args, **kwargs):
            raise AssertionError("must not run after --help")

        monkeypatch.setattr(mpdterm.bootstrap, "resolve_config", fail)
        monkeypatch.setattr(mpdterm.bootstrap, "create_directories", fail)
        monkeypatch.setattr(mpdterm.bootstrap, "load_bindings", fail)
        assert isinstance(configure(["--help"], environ), Terminate)
        assert isinstance(configure(["--version"], environ), Terminate)
        assert list(home.iterdir()) == []

    def test_help_without_home(self):
        assert isinstance(configure(["--help"], {}), Terminate)


class TestFailurePropagation:
    def test_missing_home(self):
        with pytest.raises(EnvironmentVariableError):
            configure([], {})

    def test_no_directories_on_config_error(self, tmp_path, home, environ):
        path = tmp_path / "conf"
        path.write_text("bogus\n")
        with pytest.raises(ConfigFileError):
            configure(["-c", str(path)], environ)
        assert list(home.iterdir()) == []
