"""Output and failure reporting for acaupdater."""

import os
import sys
import uuid
from typing import Mapping, Optional

from acaupdater.constants import OUTPUT_CONTAINER_APP, OUTPUT_STATUS
from acaupdater.models import Outcome


class ResultReporter:
    """Publishes step outputs and the failure signal to the invoking CI system.

    Under GitHub Actions outputs are appended to the ``GITHUB_OUTPUT`` file and
    failures become ``::error::`` workflow commands. Elsewhere outputs are
    printed as ``name=value`` lines on stdout.
    """

    def __init__(self, logger, environ: Optional[Mapping[str, str]] = None, stdout=None, stderr=None):
        self.logger = logger
        self.environ = os.environ if environ is None else environ
        self.stdout = sys.stdout if stdout is None else stdout
        self.stderr = sys.stderr if stderr is None else stderr

    @property
    def in_github_actions(self) -> bool:
        return self.environ.get("GITHUB_ACTIONS") == "true"

    def report(self, outcome: Outcome):
        self.set_output(OUTPUT_STATUS, outcome.status)
        self.set_output(OUTPUT_CONTAINER_APP, outcome.to_json())

    def set_output(self, name: str, value: str):
        output_file = self.environ.get("GITHUB_OUTPUT")
        if output_file:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            with open(output_file, "a", encoding="utf-8") as file_obj:
                file_obj.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            self.logger.debug("Wrote output '%s' to %s", name, output_file)
            return

        self.stdout.write(f"{name}={value}\n")
        self.stdout.flush()

    def fail(self, message: str):
        if self.in_github_actions:
            # workflow commands are line based
            escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
            self.stderr.write(f"::error::{escaped}\n")
            self.stderr.flush()
