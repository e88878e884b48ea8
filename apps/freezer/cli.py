from __future__ import annotations

import argparse
import logging
import threading
from dataclasses import dataclass
from pathlib import Path

import uvicorn

from apps.freezer.adapters import build_gateways
from apps.freezer.api import create_app
from apps.freezer.config import AppConfig
from apps.freezer.controller import CaptureSessionController
from apps.freezer.hotkey import HotkeyListener
from apps.freezer.logging_utils import configure_logging
from apps.freezer.presentation import LoggingPresenter
from apps.freezer.settings import CredentialStore
from apps.freezer.state import SessionState, get_session_state
from packages.contracts.errors import FreezerError
from packages.perception import CloudVisionProvider, OcrCache, OcrPipeline

logger = logging.getLogger("freezer.cli")


@dataclass(slots=True)
class Runtime:
    config: AppConfig
    state: SessionState
    credentials: CredentialStore
    controller: CaptureSessionController
    presenter: LoggingPresenter


def build_pipeline(config: AppConfig, credentials: CredentialStore) -> OcrPipeline:
    provider = CloudVisionProvider(
        api_key=credentials.get_api_key,
        endpoint=config.ocr_endpoint,
        timeout_seconds=config.ocr_timeout_seconds,
    )
    cache = OcrCache(config.ocr_cache_dir) if config.dev_mode else None
    return OcrPipeline(provider=provider, cache=cache)


def build_runtime(config: AppConfig, state: SessionState | None = None) -> Runtime:
    state = state or get_session_state()
    credentials = CredentialStore(config.settings_path)
    presenter = LoggingPresenter()
    state.subscribe(presenter.render)
    controller = CaptureSessionController(
        gateways=build_gateways(config.dev_mode, config.fixture_image),
        ocr=build_pipeline(config, credentials),
        state=state,
        presenter=presenter,
        step_timeout=config.step_timeout_seconds,
    )
    return Runtime(config=config, state=state, credentials=credentials, controller=controller, presenter=presenter)


def _config_from_args(args: argparse.Namespace) -> AppConfig:
    config = AppConfig.from_env()
    if args.dev:
        config.dev_mode = True
    if getattr(args, "hotkey", None):
        config.hotkey = args.hotkey
    if getattr(args, "port", None):
        config.api_port = args.port
    if getattr(args, "fixture_image", None):
        config.fixture_image = Path(args.fixture_image)
    return config


def _cmd_run(args: argparse.Namespace) -> None:
    runtime = build_runtime(_config_from_args(args))
    config = runtime.config

    server = uvicorn.Server(
        uvicorn.Config(
            create_app(runtime.state, runtime.credentials),
            host="127.0.0.1",
            port=config.api_port,
            log_level="warning",
        )
    )
    server_thread = threading.Thread(target=server.run, name="freezer-api", daemon=True)
    server_thread.start()

    listener = HotkeyListener(config.hotkey, runtime.controller.on_hotkey)
    listener.start()
    logger.info(
        "ready hotkey=%s dev_mode=%s api=http://127.0.0.1:%s",
        config.hotkey,
        config.dev_mode,
        config.api_port,
    )
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        logger.info("shutting down")
    finally:
        listener.stop()
        runtime.controller.shutdown(timeout=config.ocr_timeout_seconds + 5)
        runtime.controller.close()
        server.should_exit = True
        server_thread.join(timeout=5)


def _cmd_ocr(args: argparse.Namespace) -> None:
    config = _config_from_args(args)
    pipeline = build_pipeline(config, CredentialStore(config.settings_path))
    try:
        result = pipeline.run(Path(args.image).read_bytes())
    except (FreezerError, OSError) as exc:
        raise SystemExit(f"OCR failed: {exc}") from exc
    print(result.model_dump_json(by_alias=True, indent=2))


def _cmd_settings_show(args: argparse.Namespace) -> None:
    store = CredentialStore(_config_from_args(args).settings_path)
    key = store.get_api_key()
    print({"google_cloud_api_key": "configured" if key else "missing", "path": str(store.path)})


def _cmd_settings_set_key(args: argparse.Namespace) -> None:
    store = CredentialStore(_config_from_args(args).settings_path)
    store.set_api_key(args.value)
    print({"google_cloud_api_key": "configured", "path": str(store.path)})


def _cmd_settings_clear_key(args: argparse.Namespace) -> None:
    store = CredentialStore(_config_from_args(args).settings_path)
    store.set_api_key(None)
    print({"google_cloud_api_key": "missing", "path": str(store.path)})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pause the foreground application and OCR its frame")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--dev", action="store_true", help="use fixture gateways and the OCR cache")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run")
    run.add_argument("--hotkey")
    run.add_argument("--port", type=int)
    run.add_argument("--fixture-image")
    run.set_defaults(func=_cmd_run)

    ocr = sub.add_parser("ocr")
    ocr.add_argument("--image", required=True)
    ocr.set_defaults(func=_cmd_ocr)

    settings = sub.add_parser("settings")
    settings_sub = settings.add_subparsers(dest="settings_command", required=True)
    show = settings_sub.add_parser("show")
    show.set_defaults(func=_cmd_settings_show)
    set_key = settings_sub.add_parser("set-key")
    set_key.add_argument("value")
    set_key.set_defaults(func=_cmd_settings_set_key)
    clear_key = settings_sub.add_parser("clear-key")
    clear_key.set_defaults(func=_cmd_settings_clear_key)

    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    configure_logging(verbose=args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
