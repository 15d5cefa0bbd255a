from __future__ import annotations

from pathlib import Path

import pytest

from dirtree import cli


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def _sample_tree(root: Path) -> Path:
    _write(root / "a.txt", "a" * 10)
    _write(root / "sub" / "b.txt", "b" * 20)
    return root.resolve()


def test_flat_report_to_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = _sample_tree(tmp_path)

    result = cli.main(["--path", str(tmp_path)])
    assert result == 0

    out = capsys.readouterr().out
    assert f"root: {root}\n" in out
    assert "max_depth: 1\n" in out
    assert "num_childs_recursive: 3\n" in out
    assert "(num_childs_dir, num_child_file, num_child_other): (1, 2, 0)\n" in out
    assert f"|----[F]    0.0 [MB]    {root / 'sub' / 'b.txt'}" in out


def test_display_depth_limits_flat_report(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _sample_tree(tmp_path)

    cli.main(["--path", str(tmp_path), "--display-depth", "0"])

    out = capsys.readouterr().out
    assert str(root / "a.txt") in out
    assert str(root / "sub" / "b.txt") not in out


def test_nested_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = _sample_tree(tmp_path)

    cli.main(["--path", str(tmp_path), "--nested", "--indent-style", "flat"])

    out = capsys.readouterr().out
    assert f"path: {root}\n" in out
    assert f"--------[F]    0.0 [MB]    {root / 'sub' / 'b.txt'}" in out


def test_nested_max_level_zero_lists_no_children(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _sample_tree(tmp_path)

    cli.main(["--path", str(tmp_path), "--nested", "--max-level", "0"])

    out = capsys.readouterr().out
    assert "num_childs_recursive: 3\n" in out
    assert str(root / "a.txt") not in out


def test_max_level_requires_nested(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--path", str(tmp_path), "--max-level", "1"])
    assert excinfo.value.code == 2


@pytest.mark.parametrize(
    "extra",
    [
        ["--display-depth", "-1"],
        ["--rows-per-depth", "many"],
        ["--indent-char", "ab"],
        ["--indent-style", "zigzag"],
        ["--append"],
    ],
)
def test_invalid_arguments_exit_two(tmp_path: Path, extra: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--path", str(tmp_path), *extra])
    assert excinfo.value.code == 2


def test_missing_root_still_reports(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    result = cli.main(["--path", str(tmp_path / "missing")])
    assert result == 0

    out = capsys.readouterr().out
    assert "max_depth: -2\n" in out
    assert "unavailable" in out
    assert "[O]" in out


def test_output_file_and_append(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _sample_tree(tmp_path / "tree")
    report = tmp_path / "report.txt"

    cli.main(["--path", str(tmp_path / "tree"), "--output", str(report)])
    cli.main(["--path", str(tmp_path / "tree"), "--output", str(report), "--append"])

    assert capsys.readouterr().out == ""
    assert report.read_text().count("root: ") == 2

    cli.main(["--path", str(tmp_path / "tree"), "--output", str(report)])
    assert report.read_text().count("root: ") == 1


def test_unwritable_output_fails(tmp_path: Path) -> None:
    _sample_tree(tmp_path)

    with pytest.raises(SystemExit, match="cannot write report"):
        cli.main(["--path", str(tmp_path), "--output", str(tmp_path / "sub")])


def test_timing_goes_to_stderr(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _sample_tree(tmp_path)

    cli.main(["--path", str(tmp_path), "--timing"])

    captured = capsys.readouterr()
    assert "elapsed time:" in captured.err
    assert "elapsed time:" not in captured.out


def test_help_exits_zero() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--help"])
    assert excinfo.value.code == 0
