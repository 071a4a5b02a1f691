"""Tests for navhistory.config module."""

import pytest

from navhistory import ConfigError, HistoryOptions, MemoryPlatform, create_history

ENV_VARS = ("NAVHISTORY_BASENAME", "NAVHISTORY_FORCE_REFRESH", "NAVHISTORY_KEY_LENGTH")


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        # setenv + delenv registers a restore-to-unset on teardown, even for
        # values a .env file loads later
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestDefaults:
    def test_defaults(self):
        opts = HistoryOptions()
        assert opts.basename == ""
        assert opts.force_refresh is False
        assert opts.key_length == 6
        assert opts.get_user_confirmation is None

    def test_invalid_key_length(self):
        with pytest.raises(ConfigError):
            HistoryOptions(key_length=0)

    def test_confirmation_must_be_callable(self):
        with pytest.raises(ConfigError):
            HistoryOptions(get_user_confirmation="yes")

    def test_merged(self):
        opts = HistoryOptions(basename="/a").merged(key_length=8)
        assert (opts.basename, opts.key_length) == ("/a", 8)

    def test_merged_rejects_unknown(self):
        with pytest.raises(ConfigError, match="bogus"):
            HistoryOptions().merged(bogus=1)


class TestFromEnv:
    def test_reads_variables(self, clean_env):
        clean_env.setenv("NAVHISTORY_BASENAME", "/app")
        clean_env.setenv("NAVHISTORY_FORCE_REFRESH", "yes")
        clean_env.setenv("NAVHISTORY_KEY_LENGTH", "12")

        opts = HistoryOptions.from_env(load_dotenv=False)

        assert opts.basename == "/app"
        assert opts.force_refresh is True
        assert opts.key_length == 12

    def test_missing_variables_keep_defaults(self, clean_env):
        assert HistoryOptions.from_env(load_dotenv=False) == HistoryOptions()

    @pytest.mark.parametrize(
        "name, value",
        [("NAVHISTORY_FORCE_REFRESH", "maybe"), ("NAVHISTORY_KEY_LENGTH", "six")],
    )
    def test_invalid_values(self, clean_env, name, value):
        clean_env.setenv(name, value)
        with pytest.raises(ConfigError, match=name):
            HistoryOptions.from_env(load_dotenv=False)

    def test_custom_prefix(self, clean_env):
        clean_env.setenv("MYAPP_BASENAME", "/x")
        assert HistoryOptions.from_env(prefix="MYAPP_", load_dotenv=False).basename == "/x"

    def test_loads_dotenv_from_cwd(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("NAVHISTORY_BASENAME=/from-dotenv\n")
        clean_env.chdir(tmp_path)

        assert HistoryOptions.from_env().basename == "/from-dotenv"


def test_options_drive_history():
    platform = MemoryPlatform("/base/page")
    history = create_history(platform, HistoryOptions(basename="/base", key_length=3))

    history.push({"pathname": "/next"})

    assert platform.location.pathname == "/base/next"
    assert history.location.pathname == "/next"
    assert len(history.location.key) == 3
