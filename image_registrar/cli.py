"""
Command Line Interface for Image Registrar

Provides commands for:
- plan: Show the block device mappings the image would be registered with
- register: Register the image in AWS and wait for it to become available
"""

import argparse
import json
import signal
import sys
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger

from .cloud import AWSImageService
from .configs import ConfigLoader, StepAction
from .pipeline import LoguruSink, PipelineState, StepInput
from .registration import StepRegisterImage, reconcile
from .utils.logger import configure_logger


def _load_snapshot_ids(path: Optional[str]) -> Dict[str, str]:
    if not path:
        return {}
    return ConfigLoader.load_snapshot_ids(path)


# === Plan Command ===

def plan_command(args) -> int:
    """Plan command handler"""
    configure_logger(args.verbose)

    try:
        config = ConfigLoader.load_from_file(args.config)
        snapshot_ids = _load_snapshot_ids(args.snapshots)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        return 1

    devices = reconcile(
        config.ami_devices(),
        config.launch_devices(),
        snapshot_ids,
        config.launch_omit_map(),
        config.ami_root_device,
    )
    print(json.dumps([device.to_api() for device in devices], indent=2))
    return 0


# === Register Command ===

def register_command(args) -> int:
    """Register command handler"""
    configure_logger(args.verbose)

    try:
        config = ConfigLoader.load_from_file(args.config)
        snapshot_ids = _load_snapshot_ids(args.snapshots)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        return 1

    region = args.region or config.region
    if not region:
        logger.error("No region given; pass --region or set region in the config")
        return 1

    service = AWSImageService(region, config.credentials, config.polling)
    inputs = StepInput(config=config, service=service, snapshot_ids=snapshot_ids, ui=LoguruSink())
    state = PipelineState()

    def on_interrupt(signum, frame):
        logger.warning("Interrupted, cancelling...")
        state.cancel()

    previous_handler = signal.signal(signal.SIGINT, on_interrupt)

    step = StepRegisterImage(config)
    try:
        output = step.run(inputs, state)
    finally:
        signal.signal(signal.SIGINT, previous_handler)
        step.cleanup(inputs, state)

    if args.output:
        with open(args.output, "w") as f:
            json.dump(output.to_dict(), f, indent=2)
        logger.info(f"Results saved to {args.output}")

    if output.action == StepAction.HALT:
        return 1
    logger.success(f"AMI ready: {output.amis.get(region)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-registrar",
        description="Register an AMI from prepared EBS snapshots",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("-c", "--config", required=True, help="Build configuration (.toml or .json)")
        p.add_argument("-s", "--snapshots", help="JSON file mapping device names to snapshot ids")
        p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    plan_parser = subparsers.add_parser("plan", help="Print the merged block device mappings")
    add_common(plan_parser)
    plan_parser.set_defaults(func=plan_command)

    register_parser = subparsers.add_parser("register", help="Register the AMI")
    add_common(register_parser)
    register_parser.add_argument("--region", help="Target region (overrides the config)")
    register_parser.add_argument("-o", "--output", help="Write the step result as JSON")
    register_parser.set_defaults(func=register_command)

    return parser


def main(argv=None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
