"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from cloverlens.config.models import (
    CloverLensConfig,
    CoverageConfig,
    LogOutputConfig,
    TimeoutsConfig,
)


class TestCoverageConfig:
    """Tests for CoverageConfig validation."""

    def test_defaults(self) -> None:
        config = CoverageConfig()

        assert config.test_command == "phpunit"
        assert config.config_path is None
        assert config.only_changesets is False
        assert config.php_binary == "php"
        assert config.drivers == ["xdebug"]

    def test_test_command_is_stripped(self) -> None:
        assert CoverageConfig(test_command="  bin/phpunit ").test_command == "bin/phpunit"

    def test_empty_test_command(self) -> None:
        with pytest.raises(ValidationError):
            CoverageConfig(test_command="   ")

    def test_drivers_are_normalized(self) -> None:
        config = CoverageConfig(drivers=[" Xdebug", "PCOV", ""])
        assert config.drivers == ["xdebug", "pcov"]

    def test_at_least_one_driver(self) -> None:
        with pytest.raises(ValidationError):
            CoverageConfig(drivers=[])


class TestTimeoutsConfig:
    """Tests for TimeoutsConfig validation."""

    def test_defaults(self) -> None:
        config = TimeoutsConfig()
        assert config.run_sec == 1800
        assert config.idle_sec == 300

    @pytest.mark.parametrize("field", ["run_sec", "idle_sec"])
    @pytest.mark.parametrize("value", [0, -5])
    def test_must_be_positive(self, field: str, value: float) -> None:
        with pytest.raises(ValidationError):
            TimeoutsConfig(**{field: value})


class TestLogOutputConfig:
    """Tests for LogOutputConfig validation."""

    @pytest.mark.parametrize("destination", ["stderr", "stdout"])
    def test_stream_destinations(self, destination: str) -> None:
        assert LogOutputConfig(destination=destination).destination == destination

    def test_absolute_file_destination(self) -> None:
        assert LogOutputConfig(destination="/var/log/cloverlens.log").destination == (
            "/var/log/cloverlens.log"
        )

    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/cloverlens.log")


class TestCloverLensConfig:
    """Tests for the root config model."""

    def test_sections(self) -> None:
        config = CloverLensConfig()

        assert config.logging.level == "INFO"
        assert len(config.logging.outputs) == 1
        assert config.coverage.test_command == "phpunit"
        assert config.timeouts.run_sec == 1800

    def test_roundtrip_through_dump(self) -> None:
        config = CloverLensConfig(coverage=CoverageConfig(config_path="phpunit.xml"))
        assert CloverLensConfig.model_validate(config.model_dump()) == config
