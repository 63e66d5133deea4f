"""Tests for reporters/_base.py."""

import io

import pytest

from jarcheck.application.reporters import BaseReporter
from jarcheck.domain.model.check_result import CheckResult
from tests.factories import make_result


class MissingCountReporter(BaseReporter):
    def render(self, result: CheckResult) -> str:
        return f"{len(result.missing)}\n"


class TestBaseReporter:
    """Tests for the render/report split."""

    def test_abstract_without_render(self) -> None:
        with pytest.raises(TypeError):
            BaseReporter()  # type: ignore[abstract]

    def test_report_writes_render_output(self) -> None:
        output = io.StringIO()
        MissingCountReporter(output).report(
            make_result(resolved=False, missing=["a.A", "a.B"])
        )
        assert output.getvalue() == "2\n"

    def test_defaults_to_current_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The stream is looked up at report time, not at construction."""
        MissingCountReporter().report(make_result())
        assert capsys.readouterr().out == "0\n"
