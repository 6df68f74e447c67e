"""ToolingSession — one Gradle invocation that dumps the dependency tree."""

from __future__ import annotations

import json
import subprocess
import tempfile
import textwrap
from dataclasses import dataclass
from pathlib import Path

import structlog

from gradle_inspector.engines.tooling.distribution import resolve_gradle_command
from gradle_inspector.engines.tooling.models import RawModel
from gradle_inspector.exceptions import ToolingFailure

log = structlog.get_logger("gradle_inspector.engine")

INIT_SCRIPT = Path(__file__).parent / "resources" / "init.gradle"
TASK_NAME = "gradleInspectorDependencyTree"
OUTPUT_PROPERTY = "gradleInspector.outputFile"


@dataclass
class ToolingResult:
    """Outcome of a Gradle run. The captured streams are diagnostics only."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ToolingSession:
    """Scoped access to Gradle for a single project directory.

    Entering the session writes the init script and reserves the model output
    file; leaving it removes both, whatever the outcome of the run.
    """

    def __init__(
        self,
        project_dir: Path,
        *,
        gradle_command: str,
        timeout: float = 1800.0,
    ) -> None:
        self.project_dir = project_dir
        self.gradle_command = gradle_command
        self.timeout = timeout
        self.init_script: Path | None = None
        self.output_file: Path | None = None
        self._workdir: Path | None = None

    # ── lifecycle ──────────────────────────────────────────────────────────

    def __enter__(self) -> ToolingSession:
        self._workdir = Path(tempfile.mkdtemp(prefix="gradle-inspector-"))
        try:
            self.init_script = self._extract_init_script(self._workdir)
        except BaseException:
            self.close()
            raise
        self.output_file = self._workdir / "model.json"
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        """Remove the temporary files; failures are logged, never raised."""
        for path in (self.init_script, self.output_file):
            if path is None:
                continue
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                log.warning("tooling.temp_file_not_deleted", path=str(path), error=str(exc))
        if self._workdir is not None:
            try:
                self._workdir.rmdir()
            except OSError as exc:
                log.warning(
                    "tooling.temp_file_not_deleted", path=str(self._workdir), error=str(exc)
                )
        self.init_script = None
        self.output_file = None
        self._workdir = None

    # ── public ─────────────────────────────────────────────────────────────

    def run(self) -> ToolingResult:
        """Run the dependency-tree task as a single blocking call."""
        init_script, output_file = self._session_files()
        cmd = [
            self.gradle_command,
            "--init-script",
            str(init_script),
            "--console=plain",
            f"-D{OUTPUT_PROPERTY}={output_file}",
            "-Dorg.gradle.daemon.idletimeout=1000",
            "-Dorg.gradle.configuration-cache=false",
            TASK_NAME,
        ]
        log.info("tooling.run", project_dir=str(self.project_dir), command=cmd[0])
        try:
            proc = subprocess.run(
                cmd,
                cwd=self.project_dir,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise ToolingFailure(
                f"Gradle timed out after {self.timeout}s in '{self.project_dir}'."
            ) from exc
        except OSError as exc:
            raise ToolingFailure(f"Unable to run '{self.gradle_command}': {exc}") from exc

        return ToolingResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)

    def fetch_model(self) -> RawModel:
        """Run Gradle and load the dependency-tree model it wrote."""
        _, output_file = self._session_files()
        result = self.run()

        if result.stdout:
            log.debug(
                "tooling.stdout",
                project_dir=str(self.project_dir),
                output=textwrap.indent(result.stdout, "\t"),
            )
        if result.stderr:
            log.warning(
                "tooling.stderr",
                project_dir=str(self.project_dir),
                output=textwrap.indent(result.stderr, "\t"),
            )

        if not result.ok:
            raise ToolingFailure(
                f"Gradle failed (exit {result.returncode}) in '{self.project_dir}'.",
                output=result.stderr[-2000:],
            )

        try:
            data = json.loads(output_file.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ToolingFailure(
                f"Gradle did not write a dependency model for '{self.project_dir}'."
            ) from exc
        except (OSError, ValueError) as exc:
            raise ToolingFailure(
                f"Unable to read the dependency model for '{self.project_dir}': {exc}"
            ) from exc

        if not isinstance(data, dict):
            raise ToolingFailure(f"Malformed dependency model for '{self.project_dir}'.")
        return RawModel.from_dict(data)

    # ── internal ───────────────────────────────────────────────────────────

    def _session_files(self) -> tuple[Path, Path]:
        if self.init_script is None or self.output_file is None:
            raise RuntimeError("ToolingSession must be entered before it is run")
        return self.init_script, self.output_file

    @staticmethod
    def _extract_init_script(workdir: Path) -> Path:
        target = workdir / "init.gradle"
        target.write_text(INIT_SCRIPT.read_text(encoding="utf-8"), encoding="utf-8")
        log.debug("tooling.init_script_extracted", path=str(target))
        return target


def load_dependency_tree(
    project_dir: Path,
    *,
    gradle_version: str | None = None,
    timeout: float = 1800.0,
    gradle_home: Path,
    cache_dir: Path,
) -> RawModel:
    """Open a session for *project_dir* and return its raw dependency model.

    Raises :class:`ToolingFailure` when Gradle cannot be run or produces no
    usable model.
    """
    command = resolve_gradle_command(
        project_dir, gradle_version, gradle_home=gradle_home, cache_dir=cache_dir
    )
    with ToolingSession(project_dir, gradle_command=command, timeout=timeout) as session:
        return session.fetch_model()
