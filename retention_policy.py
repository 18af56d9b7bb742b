#!/usr/bin/env python3
import argparse
import os
import signal
import sys
from retention.repositories import ConfigRepository
from retention.services.retention_policy_service import RetentionPolicyService
from retention.services.scheduled_runner import ScheduledRunner
from retention.utils.logging import setup_logger


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Nexus Retention Policy')
    parser.add_argument('--config', default=os.environ.get("CONFIG_FILE", "config.yaml"), help='Path to the configuration file')
    parser.add_argument('--dry-run', action='store_true', help='Run in dry-run mode without deleting any component')
    parser.add_argument('--verbose', action='store_true', help='Report images that match no rule')
    parser.add_argument('--once', action='store_true', help='Run once even if a schedule is configured')
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logger = setup_logger("RetentionPolicy")

    try:
        logger.info(f"Loading configuration from {args.config}")
        config = ConfigRepository(args.config).load()
        service = RetentionPolicyService(config, dry_run=args.dry_run, verbose=args.verbose)

        if not config.schedule or args.once:
            summary = service.run()
            logger.info(f"Retention policy applied. Deleted: {summary.deleted}, kept: {summary.kept}")
            return 0

        runner = ScheduledRunner(config.schedule, service.run)
        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, lambda signum, frame: runner.stop())
        logger.info(f"Scheduled execution ({config.schedule}). Press Ctrl+C to stop")
        runner.run_forever()
        logger.info("Shutting down gracefully")
        return 0
    except Exception as e:
        logger.error(f"Retention policy run failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
