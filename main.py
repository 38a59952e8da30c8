#!/usr/bin/env python3
"""
Remote health-check agent.

Polls http://<host>/_stats, prints a warning line for each exceeded threshold
and exits with status 1 after too many consecutive failed polls.

Usage:
  python3 main.py --host srv.msk01.gigacorp.local --interval 60
"""
import argparse
import logging
import sys

from config import load_config
from monitors import PollLoop, StatsFetcher
from utils.logger import clear_old_logs, getLogger, set_global_log_level


logger = getLogger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Remote health-check agent")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--url", help="Full stats URL, e.g. http://10.0.0.5/_stats")
    target.add_argument("--host", help="Monitored host; the URL becomes http://<host>/_stats")
    parser.add_argument("--host-header", dest="host_header", help="Override the Host header sent with the request")
    parser.add_argument("--interval", dest="poll_interval", type=float, help="Poll interval in seconds")
    parser.add_argument("--timeout", dest="request_timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--client-timeout", dest="client_timeout", type=float,
                        help="Hard upper bound for one fetch, including connection setup")
    parser.add_argument("--failure-budget", dest="failure_budget", type=int,
                        help="Consecutive failures tolerated before exiting")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--log-retention-days", dest="log_retention_days", type=int, default=7,
                        help="Delete log files older than this many days at startup")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = vars(parser.parse_args(argv))
    set_global_log_level(getattr(logging, args.pop("log_level")))
    removed = clear_old_logs(days=args.pop("log_retention_days"))
    if removed:
        logger.info("Removed %d old log file(s)", removed)
    try:
        config = load_config(**args)
    except ValueError as e:
        parser.error(str(e))

    fetcher = StatsFetcher(config)
    try:
        status = PollLoop(config, fetcher=fetcher).run()
        logger.info("Exiting with status %d", status)
        return status
    finally:
        fetcher.close()


if __name__ == "__main__":
    sys.exit(main())
