"""Tests for the engine session lifecycle."""

import os
from unittest.mock import MagicMock

import pytest

from tray_denoiser.engine import EngineError
from tray_denoiser.model_locator import ModelLocator
from tray_denoiser.session import EngineSession, EngineSessionController, SessionState


@pytest.fixture
def controller(engine: MagicMock, locator: ModelLocator) -> EngineSessionController:
    return EngineSessionController(engine, locator=locator)


class TestInitialState:
    def test_starts_idle_with_no_device_or_model(self, controller: EngineSessionController) -> None:
        assert controller.session == EngineSession(SessionState.IDLE, None, None)
        assert controller.is_running is False


class TestStart:
    def test_start_records_device_and_model(
        self, controller: EngineSessionController, engine: MagicMock, model_root: str
    ) -> None:
        model_path = os.path.join(model_root, "models", "denoiser_model.onnx")

        assert controller.start() is True

        engine.start.assert_called_once_with(1, model_path)
        assert controller.session == EngineSession(SessionState.RUNNING, 1, model_path)

    def test_start_twice_calls_engine_once(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        controller.start()
        assert controller.start() is True

        assert engine.start.call_count == 1
        assert engine.list_devices.call_count == 1
        assert controller.is_running is True

    def test_failed_start_stays_idle(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        engine.start.side_effect = EngineError("device busy")

        assert controller.start() is False

        assert controller.session == EngineSession()

    def test_retry_after_failure_resolves_again(
        self, engine: MagicMock, model_root: str
    ) -> None:
        locator = MagicMock(wraps=ModelLocator(install_root=model_root))
        controller = EngineSessionController(engine, locator=locator)
        engine.start.side_effect = [EngineError("device busy"), None]

        assert controller.start() is False
        engine.list_devices.return_value = ["USB Mic"]
        assert controller.start() is True

        assert engine.list_devices.call_count == 2
        assert locator.resolve.call_count == 2
        assert engine.start.call_args_list[1].args[0] == 0
        assert controller.session.mic_index == 0

    def test_device_enumeration_failure_is_a_start_failure(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        engine.list_devices.side_effect = RuntimeError("PortAudio not initialized")

        assert controller.start() is False

        engine.start.assert_not_called()
        assert controller.is_running is False

    def test_empty_device_list_still_attempts_index_zero(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        engine.list_devices.return_value = []
        engine.start.side_effect = EngineError("Invalid input device index 0")

        assert controller.start() is False

        assert engine.start.call_args.args[0] == 0
        assert controller.is_running is False

    def test_missing_model_still_reaches_engine(
        self, engine: MagicMock, tmp_path: object
    ) -> None:
        locator = ModelLocator(install_root=str(tmp_path))
        controller = EngineSessionController(engine, locator=locator)
        asset = locator.resolve()

        controller.start()

        assert asset.present is False
        engine.start.assert_called_once_with(1, asset.path)

    def test_require_model_blocks_start_when_missing(
        self, engine: MagicMock, tmp_path: object
    ) -> None:
        locator = ModelLocator(install_root=str(tmp_path))
        controller = EngineSessionController(engine, locator=locator, require_model=True)

        assert controller.start() is False

        engine.start.assert_not_called()
        assert controller.is_running is False

    def test_require_model_allows_start_when_present(
        self, engine: MagicMock, locator: ModelLocator
    ) -> None:
        controller = EngineSessionController(engine, locator=locator, require_model=True)

        assert controller.start() is True
        engine.start.assert_called_once()

    def test_custom_device_selector(self, engine: MagicMock, locator: ModelLocator) -> None:
        controller = EngineSessionController(engine, locator=locator, select_device=lambda names: 0)

        controller.start()

        assert controller.session.mic_index == 0


class TestStop:
    def test_stop_while_idle_does_not_reach_engine(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        assert controller.stop() is True

        engine.stop.assert_not_called()
        assert controller.is_running is False

    def test_stop_clears_session(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        controller.start()

        assert controller.stop() is True

        engine.stop.assert_called_once_with()
        assert controller.session == EngineSession()

    def test_failed_stop_stays_running(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        controller.start()
        running = controller.session
        engine.stop.side_effect = EngineError("stream stuck")

        assert controller.stop() is False

        assert controller.session == running

    def test_stop_can_be_retried_after_failure(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        controller.start()
        engine.stop.side_effect = [EngineError("stream stuck"), None]

        controller.stop()
        assert controller.stop() is True

        assert engine.stop.call_count == 2
        assert controller.is_running is False

    def test_start_stop_start_cycle(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        controller.start()
        controller.stop()
        controller.start()

        assert engine.start.call_count == 2
        assert engine.stop.call_count == 1
        assert controller.is_running is True


class TestListeners:
    def test_listener_sees_each_transition(
        self, controller: EngineSessionController
    ) -> None:
        seen: list[SessionState] = []
        controller.add_listener(lambda session: seen.append(session.state))

        controller.start()
        controller.start()
        controller.stop()
        controller.stop()

        assert seen == [SessionState.RUNNING, SessionState.IDLE]

    def test_listener_not_called_on_failure(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        listener = MagicMock()
        controller.add_listener(listener)
        engine.start.side_effect = EngineError("device busy")

        controller.start()

        listener.assert_not_called()


class TestShutdown:
    def test_shutdown_stops_running_session(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        controller.start()

        controller.shutdown()

        engine.stop.assert_called_once_with()
        assert controller.is_running is False

    def test_shutdown_while_idle_is_noop(
        self, controller: EngineSessionController, engine: MagicMock
    ) -> None:
        controller.shutdown()

        engine.stop.assert_not_called()
