from pathlib import Path

import pytest
from conftest import go_func, go_spec, go_types

from gocopycat.cli import main


def _report(path: str) -> dict:
    return {
        "packages": [
            {
                "name": "pkg",
                "files": [
                    {
                        "path": path,
                        "decls": [
                            go_types(go_spec("Config")),
                            go_func("Load", params=[(["name"], "string")], results=[([], "*Config"), ([], "error")]),
                        ],
                    }
                ],
            }
        ]
    }


def _gopath_tree(tmp_path: Path) -> tuple[Path, Path]:
    root = tmp_path / "src"
    pkg_dir = root / "example.org" / "pkg"
    pkg_dir.mkdir(parents=True)
    return root, pkg_dir


def test_copy_to_stdout(fake_go_report, capsys, tmp_path: Path):
    fake_go_report(_report("/src/pkg/pkg.go"))

    main(["copy", "--dir", str(tmp_path), "--pkg", "pkg"])

    assert capsys.readouterr().out == (
        "type Config = pkg.Config\n\nfunc Load(name string) (*Config, error) {\n\tpkg.Load(name)\n}\n"
    )


def test_copy_to_dir_with_gopath_resolution(fake_go_report, capsys, tmp_path: Path):
    root, pkg_dir = _gopath_tree(tmp_path)
    fake_go_report(_report(str(pkg_dir / "pkg.go")))
    dest = tmp_path / "facade"
    dest.mkdir()

    main(
        [
            "copy",
            "--from",
            str(pkg_dir),
            "--to",
            str(dest),
            "--resolve",
            "gopath",
            "--root",
            str(root),
            "--return-results",
            "--package-clause",
        ]
    )

    assert (dest / "pkg.go").read_text(encoding="utf-8") == (
        "package pkg\n"
        "\n"
        'import "example.org/pkg"\n'
        "\n"
        "type Config = pkg.Config\n"
        "\n"
        "func Load(name string) (*Config, error) {\n"
        "\treturn pkg.Load(name)\n"
        "}\n"
    )
    assert capsys.readouterr().out == f"wrote: {dest / 'pkg.go'}\n"


def test_copy_resolution_failure_exits(fake_go_report, tmp_path: Path):
    root, _ = _gopath_tree(tmp_path)
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    calls = fake_go_report(_report("/src/pkg/pkg.go"))

    with pytest.raises(SystemExit) as exc:
        main(["copy", "--dir", str(elsewhere), "--resolve", "gopath", "--root", str(root)])

    assert "gocopycat:" in str(exc.value.code)
    assert "not under" in str(exc.value.code)
    assert calls == []


def test_copy_parse_failure_exits(fake_go_report, tmp_path: Path):
    fake_go_report({}, returncode=1, stderr=b"pkg.go:1:1: expected 'package', found 'EOF'")

    with pytest.raises(SystemExit) as exc:
        main(["copy", "--dir", str(tmp_path)])

    assert "expected 'package'" in str(exc.value.code)


def test_import_path_and_resolve_are_exclusive(tmp_path: Path):
    with pytest.raises(SystemExit) as exc:
        main(["copy", "--dir", str(tmp_path), "--import-path", "x/y", "--resolve", "module"])

    assert exc.value.code == 2


def test_resolve_command_gopath(capsys, tmp_path: Path):
    root, pkg_dir = _gopath_tree(tmp_path)

    main(["resolve", "--dir", str(pkg_dir), "--root", str(root)])

    assert capsys.readouterr().out == "example.org/pkg\npkg\n"


def test_resolve_command_module(capsys, tmp_path: Path):
    mod_dir = tmp_path / "gomod"
    sub_dir = mod_dir / "sub"
    sub_dir.mkdir(parents=True)
    (mod_dir / "go.mod").write_text("module example.com/m\n", encoding="utf-8")

    main(["resolve", "--dir", str(sub_dir), "--module"])

    assert capsys.readouterr().out == "example.com/m/sub\nsub\n"


def test_version_prints_something(capsys):
    main(["version"])

    assert capsys.readouterr().out.strip()
