import logging
import shutil
import subprocess

from pocodegen.classes import CommandResult

logger = logging.getLogger(__name__)


def which(tool: str) -> str | None:
    return shutil.which(tool)


def run(*args: str, timeout: float | None = None) -> CommandResult:
    command = [str(arg) for arg in args]
    logger.info(f"Running: {' '.join(command)}")
    try:
        completed = subprocess.run(
            command, capture_output=True, text=True, timeout=timeout, check=False
        )
    except FileNotFoundError as ex:
        logger.error(f"Command not found: {command[0]} ({ex})")
        return CommandResult(command, None, "", str(ex))
    except subprocess.TimeoutExpired as ex:
        logger.error(f"Command timed out after {timeout}s: {' '.join(command)}")
        return CommandResult(
            command, None, _as_text(ex.stdout), _as_text(ex.stderr)
        )

    if completed.returncode != 0:
        logger.error(f"Command failed ({completed.returncode}): {' '.join(command)}")
        if completed.stderr:
            logger.error(completed.stderr.strip())
    return CommandResult(
        command, completed.returncode, completed.stdout, completed.stderr
    )


def _as_text(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
