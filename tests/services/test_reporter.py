import io
import json

from acaupdater.models import Outcome
from acaupdater.services.reporter import ResultReporter


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


def _outcome():
    return Outcome(
        status="Succeeded",
        container_app={"location": "eastus", "template": {"containers": [{"name": "main"}]}},
    )


def _read_outputs(path):
    outputs = {}
    lines = path.read_text(encoding="utf-8").splitlines()
    index = 0
    while index < len(lines):
        name, delimiter = lines[index].split("<<", 1)
        end = lines.index(delimiter, index + 1)
        outputs[name] = "\n".join(lines[index + 1 : end])
        index = end + 1
    return outputs


def test_report_appends_to_github_output_file(tmp_path):
    output_file = tmp_path / "github_output"
    output_file.write_text("", encoding="utf-8")
    stdout = io.StringIO()
    reporter = ResultReporter(DummyLogger(), environ={"GITHUB_OUTPUT": str(output_file)}, stdout=stdout)

    reporter.report(_outcome())

    outputs = _read_outputs(output_file)
    assert outputs["status"] == "Succeeded"
    assert json.loads(outputs["container-app"])["location"] == "eastus"
    assert stdout.getvalue() == ""


def test_report_prints_name_value_lines_outside_actions():
    stdout = io.StringIO()
    reporter = ResultReporter(DummyLogger(), environ={}, stdout=stdout)

    reporter.report(_outcome())

    lines = stdout.getvalue().splitlines()
    assert lines[0] == "status=Succeeded"
    assert lines[1].startswith("container-app=")
    assert json.loads(lines[1].split("=", 1)[1])["template"]["containers"][0]["name"] == "main"


def test_fail_emits_error_annotation_under_github_actions():
    stderr = io.StringIO()
    reporter = ResultReporter(DummyLogger(), environ={"GITHUB_ACTIONS": "true"}, stderr=stderr)

    reporter.fail("Resource group rg1 does not exist.\nSuggested action: check it")

    assert stderr.getvalue() == (
        "::error::Resource group rg1 does not exist.%0ASuggested action: check it\n"
    )


def test_fail_is_silent_outside_github_actions():
    stderr = io.StringIO()
    reporter = ResultReporter(DummyLogger(), environ={}, stderr=stderr)

    reporter.fail("boom")

    assert stderr.getvalue() == ""
