# pushcollector/cli.py
"""Command line entry point for configuring and running a push registration."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .Auth.user import User
from .Auth.user_store import UserStore
from .config import Configuration, ConfigurationService, get_config_dir
from .const import CONFIG_FILE, USER_FILE
from .Device.device_info import PlatformDeviceInfo, StaticDeviceInfo
from .exceptions import PushCollectorError
from .PushInitiator.register_service import RegisterService
from .PushInitiator.response_codes import RegistrationOutcome

_LOGGER = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(
        prog="pushcollector",
        description="Subscribe a user to a push initiator.",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        help="Directory holding the configuration and user files.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    configure = sub.add_parser("configure", help="Store the push initiator settings.")
    configure.add_argument("--url", required=True, help="Push initiator base URL.")
    configure.add_argument("--app-id", required=True, help="Provider application ID.")
    gateway = configure.add_mutually_exclusive_group()
    gateway.add_argument(
        "--public",
        dest="public",
        action="store_true",
        default=False,
        help="Use the public push proxy gateway (type=public).",
    )
    gateway.add_argument(
        "--bds",
        dest="public",
        action="store_false",
        help="Use the enterprise gateway (type=bds, default).",
    )

    sub.add_parser("show-config", help="Print the stored configuration.")

    subscribe = sub.add_parser("subscribe", help="Register a user with the push initiator.")
    subscribe.add_argument("--username", required=True)
    subscribe.add_argument("--password", required=True)
    subscribe.add_argument("--token", required=True, help="Device push token.")
    subscribe.add_argument("--os-version", help="Override the reported OS version.")
    subscribe.add_argument("--model", help="Override the reported device model.")

    return parser.parse_args(argv)


def _config_service(config_dir: Path | None) -> ConfigurationService:
    return ConfigurationService((config_dir or get_config_dir()) / CONFIG_FILE)


async def async_run_subscribe(
    args: argparse.Namespace, service: RegisterService
) -> RegistrationOutcome:
    """Run one registration and close the service afterwards."""
    try:
        return await service.async_subscribe(
            User(user_id=args.username, password=args.password), args.token
        )
    finally:
        await service.close()


def _build_register_service(args: argparse.Namespace) -> RegisterService:
    device_info: PlatformDeviceInfo | StaticDeviceInfo = PlatformDeviceInfo()
    if args.os_version is not None or args.model is not None:
        platform_info = PlatformDeviceInfo()
        device_info = StaticDeviceInfo(
            os_version_value=(
                args.os_version if args.os_version is not None else platform_info.os_version()
            ),
            model_value=args.model if args.model is not None else platform_info.model(),
        )
    config_dir = args.config_dir or get_config_dir()
    return RegisterService(
        _config_service(args.config_dir),
        UserStore(config_dir / USER_FILE),
        device_info=device_info,
        log_debug_verbose=args.verbose,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line interface and return the process exit code."""

    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "configure":
            service = _config_service(args.config_dir)
            service.save(
                Configuration(
                    push_initiator_url=args.url,
                    provider_application_id=args.app_id,
                    using_public_push_proxy_gateway=args.public,
                )
            )
            print(f"Configuration written to {service.path}")
            return 0

        if args.command == "show-config":
            configuration = _config_service(args.config_dir).configuration()
            print(json.dumps(configuration.as_dict(), indent=2))
            return 0

        outcome = asyncio.run(async_run_subscribe(args, _build_register_service(args)))
    except PushCollectorError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    print(f"code: {outcome.code}")
    if outcome.description:
        print(f"description: {outcome.description}")
    return 0 if outcome.success else 1
