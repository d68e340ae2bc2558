"""Unit tests for polytenant.infra.observability.logging."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
import structlog

from polytenant.foundation.application import (
    BindingRegistry,
    TenancyRuntime,
    TenantRegistry,
)
from polytenant.foundation.application.capabilities import BUILTIN_CAPABILITIES
from polytenant.infra.observability import lifespan_contribution
from polytenant.infra.observability.logging import (
    REDACTED_VALUE,
    LoggingSettings,
    SensitiveDataProcessor,
    TenantContextProcessor,
    configure_logging,
    get_logger,
    get_logging_settings,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture()
def runtime() -> TenancyRuntime:
    tenants = TenantRegistry(["AcMe", "Beta", "WayneEnt"])
    bindings = BindingRegistry(tenants)
    for capability in BUILTIN_CAPABILITIES:
        bindings.register_default(capability, lambda tenant: object())
    bindings.freeze(BUILTIN_CAPABILITIES)
    return TenancyRuntime(tenants, bindings)


@pytest.fixture()
def restore_logging() -> Iterator[None]:
    """Undo configure_logging() side effects on the root logger and structlog."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestLoggingSettings:
    @pytest.mark.unit
    def test_default_values(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            settings = LoggingSettings()
            assert settings.log_level == "INFO"
            assert settings.environment == "development"

    @pytest.mark.unit
    def test_use_json_logs(self) -> None:
        assert LoggingSettings(environment="production").use_json_logs is True
        assert LoggingSettings(environment="development").use_json_logs is False

    @pytest.mark.unit
    def test_log_level_normalized(self) -> None:
        settings = LoggingSettings(log_level="debug")
        assert settings.log_level == "DEBUG"
        assert settings.log_level_int == logging.DEBUG

    @pytest.mark.unit
    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValueError, match="log_level"):
            LoggingSettings(log_level="INVALID")

    @pytest.mark.unit
    def test_from_env_vars(self) -> None:
        env = {"LOG_LEVEL": "WARNING", "ENVIRONMENT": "production"}
        with patch.dict("os.environ", env, clear=True):
            settings = LoggingSettings()
            assert settings.log_level == "WARNING"
            assert settings.environment == "production"


class TestSensitiveDataProcessor:
    @pytest.mark.unit
    def test_redacts_exact_and_substring_matches(self) -> None:
        processor = SensitiveDataProcessor()
        event_dict: dict[str, object] = {
            "event": "login",
            "password": "secret123",
            "refresh_token": "abc",
            "API_KEY": "k",
        }
        result = processor(None, "info", event_dict)
        assert result["password"] == REDACTED_VALUE
        assert result["refresh_token"] == REDACTED_VALUE
        assert result["API_KEY"] == REDACTED_VALUE

    @pytest.mark.unit
    def test_preserves_non_sensitive(self) -> None:
        processor = SensitiveDataProcessor()
        result = processor(None, "info", {"event": "test", "tenant_id": "AcMe"})
        assert result["tenant_id"] == "AcMe"


class TestTenantContextProcessor:
    @pytest.mark.unit
    def test_no_context_leaves_event_untouched(self) -> None:
        result = TenantContextProcessor()(None, "info", {"event": "startup"})
        assert result == {"event": "startup"}

    @pytest.mark.unit
    def test_adds_tenant_and_correlation_id(self, runtime: TenancyRuntime) -> None:
        with runtime.job_scope("WayneEnt", correlation_id="corr-1"):
            result = TenantContextProcessor()(None, "info", {"event": "order_created"})
        assert result["tenant_id"] == "WayneEnt"
        assert result["correlation_id"] == "corr-1"

    @pytest.mark.unit
    def test_unresolved_tenant_omitted(self, runtime: TenancyRuntime) -> None:
        with runtime.request_scope(correlation_id="corr-2"):
            result = TenantContextProcessor()(None, "info", {"event": "status_checked"})
        assert "tenant_id" not in result
        assert result["correlation_id"] == "corr-2"

    @pytest.mark.unit
    def test_explicit_values_win(self, runtime: TenancyRuntime) -> None:
        with runtime.job_scope("Beta"):
            result = TenantContextProcessor()(
                None, "info", {"event": "variant_skipped", "tenant_id": "Globex"}
            )
        assert result["tenant_id"] == "Globex"


class TestConfigureLogging:
    @pytest.mark.unit
    @pytest.mark.usefixtures("restore_logging")
    def test_configure_with_default_settings(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            get_logging_settings.cache_clear()
            configure_logging()
        get_logging_settings.cache_clear()
        assert logging.getLogger().level == logging.INFO

    @pytest.mark.unit
    @pytest.mark.usefixtures("restore_logging")
    def test_stdlib_records_render_as_json_with_tenant(
        self, runtime: TenancyRuntime, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(LoggingSettings(log_level="INFO", environment="production"))

        with runtime.job_scope("AcMe", correlation_id="corr-9"):
            logging.getLogger("polytenant.domain.orders").info(
                "order_created", extra={"order_guid": "g-1", "password": "hunter2"}
            )

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "order_created"
        assert payload["order_guid"] == "g-1"
        assert payload["tenant_id"] == "AcMe"
        assert payload["correlation_id"] == "corr-9"
        assert payload["password"] == REDACTED_VALUE
        assert payload["level"] == "info"

    @pytest.mark.unit
    @pytest.mark.usefixtures("restore_logging")
    def test_structlog_events_render_as_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingSettings(log_level="INFO", environment="production"))
        get_logger("polytenant.test").info("status_checked", section="cache")

        payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert payload["event"] == "status_checked"
        assert payload["section"] == "cache"
        assert payload["logger"] == "polytenant.test"

    @pytest.mark.unit
    @pytest.mark.usefixtures("restore_logging")
    def test_level_filters_records(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingSettings(log_level="WARNING", environment="production"))
        logging.getLogger("polytenant.test").info("too_quiet")
        assert "too_quiet" not in capsys.readouterr().out


class TestLifespanContribution:
    @pytest.mark.unit
    def test_starts_early(self) -> None:
        assert lifespan_contribution.priority == 50

    @pytest.mark.unit
    @pytest.mark.asyncio(loop_scope="function")
    @pytest.mark.usefixtures("restore_logging")
    async def test_configures_logging_on_startup(self) -> None:
        with patch("polytenant.infra.observability.configure_logging") as mock_configure:
            async with lifespan_contribution.hook(object()):
                mock_configure.assert_called_once_with()
