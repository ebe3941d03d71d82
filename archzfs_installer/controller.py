from __future__ import annotations

import logging
import shlex
from enum import Enum
from functools import partial
from typing import Callable, List, Optional, Sequence

from .config import InstallerConfig
from .credentials import collect_credentials, collect_user_setup
from .errors import PromptError, RecipeError, SelectionError, StepFailure
from .lib.devices import DeviceCatalog
from .lib.net import fetch_script
from .lib.prompt import Prompter
from .pipeline import Outcome, Runner, Stage, Step, run_stage
from .recipes import RecipeBook
from .state import Credentials, PipelineState

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    INSTALL_TOOL = "install_tool"
    SELECT_DEVICE = "select_device"
    PARTITION = "partition"
    BUILD_FILESYSTEM = "build_filesystem"
    BOOTSTRAP_BASE = "bootstrap_base"
    IN_ROOT_CONFIGURE = "in_root_configure"
    CONFIGURE_USER = "configure_user"
    TRANSFER = "transfer"
    REBOOT = "reboot"
    TERMINATED_OK = "terminated_ok"
    TERMINATED_FAILED = "terminated_failed"


USER_STAGES = ("CreateHome", "InstallPackages", "InstallDotfiles", "EnableServices")
PROFILE_STAGE = "ApplyProfile"

Action = Callable[[], Outcome]


class PipelineController:
    """Runs the stage groups in their fixed order and owns the PipelineState.

    Every public method returns an Outcome; deciding the process exit status
    is left to the caller.
    """

    def __init__(
        self,
        config: InstallerConfig,
        *,
        runner: Runner,
        prompter: Prompter,
        recipes: RecipeBook,
        catalog: Optional[DeviceCatalog] = None,
        fetcher: Callable[..., str] = fetch_script,
        state: Optional[PipelineState] = None,
    ) -> None:
        self.config = config
        self.runner = runner
        self.prompter = prompter
        self.recipes = recipes
        self.catalog = catalog if catalog is not None else DeviceCatalog(config.device_dir)
        self.fetcher = fetcher
        self.state = state if state is not None else PipelineState()
        self.phase = Phase.IDLE
        self.completed: List[str] = []

    # Stage groups

    def run_zfs(self, *, reboot: Optional[bool] = None) -> Outcome:
        """Disk group: tooling, device, partitions, pool, base system."""

        outcome = self._sequence(
            [
                self.install_tool,
                self.select_device,
                partial(self._run_recipe, Phase.PARTITION, "Partition"),
                partial(self._run_recipe, Phase.BUILD_FILESYSTEM, "BuildFilesystem"),
                partial(self._run_recipe, Phase.BOOTSTRAP_BASE, "BootstrapBase"),
            ]
        )
        if not outcome.ok:
            return outcome

        want_reboot = self.config.reboot_after_install if reboot is None else reboot
        if want_reboot:
            return self._sequence([self._offer_reboot])
        return outcome

    def run_chroot(self) -> Outcome:
        return self._sequence(
            [
                self._collect_credentials,
                partial(self._run_recipe, Phase.IN_ROOT_CONFIGURE, "InRootConfigure"),
            ]
        )

    def run_user(self) -> Outcome:
        actions: List[Action] = [self._collect_user_setup]
        actions += [partial(self.run_user_stage, name) for name in USER_STAGES]
        actions.append(self._apply_profile_if_requested)
        return self._sequence(actions)

    def run_user_stage(self, name: str) -> Outcome:
        """Run one user-environment sub-stage on its own."""

        if name not in USER_STAGES and name != PROFILE_STAGE:
            raise ValueError(f"Unknown user stage: {name}")
        return self._run_recipe(Phase.CONFIGURE_USER, name)

    def run_transfer(self) -> Outcome:
        self.phase = Phase.TRANSFER
        logger.info("Transfer: nothing to do")
        self.phase = Phase.TERMINATED_OK
        return Outcome.success()

    # Individual stages

    def install_tool(self) -> Outcome:
        """Fetch the ZFS bootstrap script and run it as a single step."""

        self.phase = Phase.INSTALL_TOOL
        url = self.config.bootstrap_url
        try:
            script = self.fetcher(url, dry_run=self.config.dry_run)
        except StepFailure as e:
            fetch = Step(label="fetch bootstrap script", command=f"curl -fsSL {shlex.quote(url)}")
            return Outcome.failure(step=fetch, exit_status=e.exit_status, output=e.output)

        step = Step(label="run ZFS bootstrap script", command=f"bash -c {shlex.quote(script.strip())}")
        return self._run_built(Stage(name="InstallTool", steps=(step,)))

    def select_device(self) -> Outcome:
        self.phase = Phase.SELECT_DEVICE
        candidates = self.catalog.list_candidate_devices()
        device = self.catalog.prompt_selection(
            candidates,
            self.prompter,
            attempts=self.config.selection_attempts,
        )
        self.state.fix("selected_device", device)
        self.completed.append("SelectDevice")
        return Outcome.success(device)

    # Internals

    def _params(self) -> dict:
        return {**self.config.params(), **self.state.params()}

    def _run_recipe(self, phase: Phase, name: str) -> Outcome:
        self.phase = phase
        stage = self.recipes.build(name, self._params())
        return self._run_built(stage)

    def _run_built(self, stage: Stage) -> Outcome:
        outcome = run_stage(stage, runner=self.runner)
        if outcome.ok:
            self.completed.append(stage.name)
        return outcome

    def _sequence(self, actions: Sequence[Action]) -> Outcome:
        outcome = Outcome.success()
        for action in actions:
            try:
                outcome = action()
            except (SelectionError, PromptError, RecipeError) as e:
                logger.error("%s: %s", self.phase.value, e)
                outcome = Outcome.failure(reason=str(e))
            if not outcome.ok:
                logger.error("Pipeline aborted during %s", self.phase.value)
                self.phase = Phase.TERMINATED_FAILED
                return outcome
        self.phase = Phase.TERMINATED_OK
        return outcome

    def _collect_credentials(self) -> Outcome:
        creds = self.state.credentials
        if creds is None:
            self.state.fix("credentials", collect_credentials(self.prompter))
        elif creds.password is None or creds.platform is None:
            full = collect_credentials(self.prompter, username=creds.username)
            self.state.complete_credentials(password=full.password, platform=full.platform)
        return Outcome.success()

    def _collect_user_setup(self) -> Outcome:
        s = self.state
        if s.credentials is not None and s.dotfiles_source is not None and s.apply_profile is not None:
            return Outcome.success()

        known = self.state.credentials.username if self.state.credentials else None
        setup = collect_user_setup(
            self.prompter,
            default_dotfiles=self.config.default_dotfiles,
            username=known,
        )
        if self.state.credentials is None:
            self.state.fix("credentials", Credentials(username=setup.username))
        if self.state.dotfiles_source is None:
            self.state.fix("dotfiles_source", setup.dotfiles_source)
        if self.state.apply_profile is None:
            self.state.fix("apply_profile", setup.apply_profile)
        return Outcome.success()

    def _apply_profile_if_requested(self) -> Outcome:
        if not self.state.apply_profile:
            logger.info("Skipping %s (not requested)", PROFILE_STAGE)
            return Outcome.success()
        return self.run_user_stage(PROFILE_STAGE)

    def _offer_reboot(self) -> Outcome:
        self.phase = Phase.REBOOT
        if not self.prompter.confirm("Reboot now? [y/N]: "):
            logger.info("Reboot declined")
            return Outcome.success()
        return self._run_recipe(Phase.REBOOT, "Reboot")
