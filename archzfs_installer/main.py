from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from .config import InstallerConfig, load_config
from .controller import PipelineController
from .errors import InstallerError
from .exit_policy import EXIT_OK, exit_code_for, report_failure
from .lib.prompt import Prompter
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import Outcome
from .recipes import load_recipes
from .runner import StepRunner

logger = logging.getLogger(__name__)

MENU = {
    "1": ("zfs", "ZFS"),
    "2": ("chroot", "Chroot"),
    "3": ("user", "User"),
    "4": ("transfer", "Transfer"),
}


def build_controller(
    config: InstallerConfig,
    *,
    prompter: Prompter,
    echo: TextIO,
) -> PipelineController:
    runner = StepRunner(delay_s=config.step_delay_s, dry_run=config.dry_run, echo=echo)
    return PipelineController(
        config,
        runner=runner,
        prompter=prompter,
        recipes=load_recipes(config.recipes_path),
    )


def choose_from_menu(prompter: Prompter) -> Optional[str]:
    prompter.say("Choose an option:")
    for key, (_group, title) in MENU.items():
        prompter.say(f"{key}. {title}")
    choice = prompter.ask("Enter your choice: ").strip()
    entry = MENU.get(choice)
    if entry is None:
        prompter.say("Invalid choice")
        return None
    return entry[0]


def run_groups(controller: PipelineController, groups: List[str]) -> Outcome:
    """Run the selected stage groups in order, stopping at the first failure."""

    dispatch = {
        "zfs": controller.run_zfs,
        "chroot": controller.run_chroot,
        "user": controller.run_user,
        "transfer": controller.run_transfer,
    }
    outcome = Outcome.success()
    for group in groups:
        logger.info("=== Stage group: %s ===", group)
        outcome = dispatch[group]()
        if not outcome.ok:
            break
    return outcome


def main(
    argv: Optional[list[str]] = None,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    p = argparse.ArgumentParser(prog="archzfs-installer", allow_abbrev=False)
    p.add_argument("--zfs", dest="groups", action="append_const", const="zfs",
                   help="Partition a disk, build the ZFS pool and install the base system")
    p.add_argument("--chroot", dest="groups", action="append_const", const="chroot",
                   help="Configure the system from inside the new root")
    p.add_argument("--user", dest="groups", action="append_const", const="user",
                   help="Set up the user environment on the installed system")
    p.add_argument("--transfer", dest="groups", action="append_const", const="transfer",
                   help=argparse.SUPPRESS)
    p.add_argument("--config", default=None, help="Path to installer config (yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--step-delay", type=float, default=None, help="Seconds to pause after each step")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--reboot", action="store_true", help="Offer a reboot after the ZFS group")

    args, unknown = p.parse_known_args(argv)

    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr

    for arg in unknown:
        err.write(f"Invalid Flag Passed: {arg}\n")

    configure_logging(log_path=args.log)

    try:
        config = load_config(args.config).with_overrides(
            step_delay_s=args.step_delay,
            dry_run=True if args.dry_run else None,
            reboot_after_install=True if args.reboot else None,
        )
        prompter = Prompter(stdin=stdin, stdout=out)
        controller = build_controller(config, prompter=prompter, echo=out)

        groups: List[str] = list(args.groups or [])
        if not groups and not unknown:
            choice = choose_from_menu(prompter)
            if choice is None:
                return EXIT_OK
            groups = [choice]

        outcome = run_groups(controller, groups)
    except (InstallerError, OSError, ValueError) as e:
        logger.error("Installer failed: %s", e)
        outcome = Outcome.failure(reason=str(e))

    if not outcome.ok:
        report_failure(outcome, err)
    return exit_code_for(outcome)


if __name__ == "__main__":
    raise SystemExit(main())
