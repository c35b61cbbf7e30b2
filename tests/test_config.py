"""Tests for run options."""

from __future__ import annotations

import pytest

from transync.config import PollingPolicy, SynchronizeOptions, TransportOptions
from transync.diagnostics import ConfigurationError

from tests.helpers.packages import message


def _transport(**overrides: object) -> TransportOptions:
    values: dict[str, object] = {
        "organization_name": "acme",
        "project_name": "editor",
        "auth_token": "secret-token",
        "packages": {"core": "packages/core"},
        "cwd": "/repo",
    }
    values.update(overrides)
    return TransportOptions(**values)  # type: ignore[arg-type]


class TestPollingPolicy:
    """Test timing validation."""

    def test_defaults(self) -> None:
        """Default timing: 3 s delay, 10 attempts, 0.1 s stagger."""
        policy = PollingPolicy()

        assert policy.poll_delay == 3.0
        assert policy.max_poll_attempts == 10
        assert policy.issuance_stagger == 0.1

    @pytest.mark.parametrize(
        "kwargs",
        [{"poll_delay": -1}, {"issuance_stagger": -0.5}, {"max_poll_attempts": 0}],
    )
    def test_invalid_values(self, kwargs: dict[str, float]) -> None:
        """Negative delays and a ceiling below one are rejected."""
        with pytest.raises(ConfigurationError):
            PollingPolicy(**kwargs)  # type: ignore[arg-type]


class TestSynchronizeOptions:
    """Test synchronization options."""

    def test_with_source_messages(self) -> None:
        """Already extracted messages are accepted and frozen."""
        options = SynchronizeOptions(
            package_paths=["packages/foo"],
            core_package_path="packages/core",
            source_messages=[message("Bold")],
        )

        assert options.package_paths == ("packages/foo",)
        assert isinstance(options.source_messages, tuple)

    def test_requires_core_package(self) -> None:
        """The core package is mandatory."""
        with pytest.raises(ConfigurationError, match='"core_package_path"'):
            SynchronizeOptions(package_paths=[], core_package_path="", source_messages=[])

    @pytest.mark.parametrize("both", [True, False])
    def test_exactly_one_message_source(self, both: bool) -> None:
        """Either an extractor or messages, never both nor neither."""
        with pytest.raises(ConfigurationError, match="Exactly one"):
            SynchronizeOptions(
                package_paths=[],
                core_package_path="packages/core",
                extractor=(lambda content, file_path, on_error: ()) if both else None,
                source_messages=[] if both else None,
            )


class TestTransportOptions:
    """Test transfer options."""

    @pytest.mark.parametrize(
        "name", ["organization_name", "project_name", "auth_token", "packages", "cwd"]
    )
    def test_required_options(self, name: str) -> None:
        """Every connection option is required."""
        empty: object = {} if name == "packages" else ""

        with pytest.raises(ConfigurationError, match=f'Missing required option "{name}"'):
            _transport(**{name: empty})

    def test_polling_policy_built_from_options(self) -> None:
        """Timing options form the polling policy."""
        options = _transport(poll_delay=0.5, max_poll_attempts=3, issuance_stagger=0)

        assert options.polling == PollingPolicy(
            poll_delay=0.5, max_poll_attempts=3, issuance_stagger=0
        )

    def test_invalid_timing_rejected(self) -> None:
        """Invalid timing fails at construction."""
        with pytest.raises(ConfigurationError):
            _transport(max_poll_attempts=0)

    def test_repr_hides_token(self) -> None:
        """The auth token never appears in repr()."""
        text = repr(_transport())

        assert "secret-token" not in text
        assert "***" in text

    def test_packages_are_read_only(self) -> None:
        """The package mapping cannot be changed."""
        options = _transport()

        with pytest.raises(TypeError):
            options.packages["table"] = "packages/table"  # type: ignore[index]
