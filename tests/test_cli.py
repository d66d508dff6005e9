"""Tests for the wikidoc2pod command line."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from wikidoc2pod import cli
from wikidoc2pod.cli import build_parser, main, parse_keywords
from wikidoc2pod.config import WIKIDOC2POD_VERSION
from wikidoc2pod.pod_filter import generated_header


class TestParseKeywords:
    def test_parses_pairs(self) -> None:
        assert parse_keywords(["VERSION=1.0", "NAME=a=b"]) == {"VERSION": "1.0", "NAME": "a=b"}

    @pytest.mark.parametrize("definition", ["VERSION", "=1.0"])
    def test_rejects_malformed(self, definition: str) -> None:
        with pytest.raises(ValueError, match="KEY=VALUE"):
            parse_keywords([definition])


class TestMain:
    """Tests for main function."""

    def test_converts_file(self, tmp_path: Path, perl_module: str) -> None:
        source = tmp_path / "Foo.pm"
        target = tmp_path / "Foo.pod"
        source.write_text(perl_module, encoding="utf-8")

        assert main([str(source), str(target)]) == 0

        pod = target.read_text(encoding="utf-8")
        assert pod.startswith(generated_header())
        assert "=head1 SYNOPSIS" in pod

    def test_comment_blocks_and_keywords(self, tmp_path: Path) -> None:
        source = tmp_path / "Foo.pm"
        target = tmp_path / "Foo.pod"
        source.write_text("#### = VERSION\n####\n#### This is %%VERSION%%.\nsub x {}\n", encoding="utf-8")

        assert main(["-c", "-l", "4", "-d", "VERSION=2.0", str(source), str(target)]) == 0

        assert target.read_text(encoding="utf-8") == (
            generated_header() + "=head1 VERSION\n\nThis is 2.0.\n\n"
        )

    def test_no_comments_overrides_default(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """--no-comments turns comment blocks off when the environment enables them."""
        monkeypatch.setattr(cli, "WIKIDOC2POD_COMMENT_BLOCKS", True)
        source = tmp_path / "Foo.pm"
        target = tmp_path / "Foo.pod"
        source.write_text("### = Title\nsub x {}\n", encoding="utf-8")

        assert build_parser().parse_args([]).comments is True
        assert main(["--no-comments", str(source), str(target)]) == 0

        assert target.read_text(encoding="utf-8") == generated_header()

    def test_verbose_logs_debug_to_stderr(
        self, tmp_path: Path, perl_module: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        source = tmp_path / "Foo.pm"
        source.write_text(perl_module, encoding="utf-8")

        assert main(["-v", str(source), str(tmp_path / "Foo.pod")]) == 0

        err = capsys.readouterr().err
        assert "Translating wikidoc region" in err
        assert "Converted" in err

    def test_standard_streams(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("=begin wikidoc\n* a\n=end wikidoc\n"))

        assert main(["-", "-"]) == 0

        assert capsys.readouterr().out == generated_header() + "=over\n\n=item *\n\na\n\n=back\n\n"

    def test_missing_input_returns_error(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main([str(tmp_path / "missing.pm")]) == 1

        assert "Couldn't open input file" in capsys.readouterr().err

    def test_bad_define_is_usage_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["-d", "novalue"])

        assert exc_info.value.code == 2
        assert "KEY=VALUE" in capsys.readouterr().err

    def test_bad_length_is_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["-l", "0"])

        assert exc_info.value.code == 2

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert WIKIDOC2POD_VERSION in capsys.readouterr().out
