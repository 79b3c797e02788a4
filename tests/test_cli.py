"""
Tests for the command line entry point.
"""

from unittest.mock import MagicMock

from dockgen.cli import build_parser, main
from dockgen.domain.models import PipelineResult, StackVariant


def _pipeline(result: PipelineResult) -> MagicMock:
    pipeline = MagicMock()
    pipeline.run.return_value = result
    return pipeline


class TestParser:
    """Test argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args(["github.com/o/r"])
        assert args.repository == "github.com/o/r"
        assert args.token is None
        assert args.no_build is False
        assert args.no_ai is False

    def test_flags(self):
        args = build_parser().parse_args(["github.com/o/r", "--token", "t", "--no-build", "--no-ai"])
        assert args.token == "t"
        assert args.no_build and args.no_ai


class TestMain:
    """Test main() with an injected pipeline."""

    def test_success(self):
        pipeline = _pipeline(
            PipelineResult(success=True, stack=StackVariant.NEXTJS, dockerfile="FROM node\n", built=True)
        )
        assert main(["github.com/o/r", "--token", "t"], pipeline=pipeline) == 0
        pipeline.run.assert_called_once_with("github.com/o/r", "t", build=True)

    def test_no_build(self):
        pipeline = _pipeline(PipelineResult(success=True, stack=StackVariant.REACT, dockerfile="FROM node\n"))
        assert main(["github.com/o/r", "--no-build"], pipeline=pipeline) == 0
        pipeline.run.assert_called_once_with("github.com/o/r", None, build=False)

    def test_output_file(self, tmp_path):
        target = tmp_path / "Dockerfile"
        pipeline = _pipeline(PipelineResult(success=True, stack=StackVariant.REACT, dockerfile="FROM nginx\n"))

        main(["github.com/o/r", "--output", str(target)], pipeline=pipeline)

        assert target.read_text() == "FROM nginx\n"

    def test_failure_exit_code(self, capsys):
        pipeline = _pipeline(
            PipelineResult(success=False, error="EngineUnavailable", diagnostic="Docker daemon is not running.")
        )

        assert main(["github.com/o/r"], pipeline=pipeline) == 1
        assert "EngineUnavailable" in capsys.readouterr().out
