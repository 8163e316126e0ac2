from __future__ import annotations

import pytest

from playpublish.config import MissingConfigurationError, read_env_var, require_env_vars


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.delenv("MISSING_A", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_blank_values_count_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    assert read_env_var("EXAMPLE_VAR") is None
    with pytest.raises(MissingConfigurationError):
        require_env_vars(["EXAMPLE_VAR"])


def test_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "from-env")

    assert read_env_var("EXAMPLE_VAR", overrides={"EXAMPLE_VAR": "from-flag"}) == "from-flag"
    assert read_env_var("EXAMPLE_VAR", overrides={"EXAMPLE_VAR": None}) == "from-env"
