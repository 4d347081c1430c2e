from __future__ import annotations

import json
import subprocess
import tempfile
from pathlib import Path
from typing import Any

from ..errors import ParseError
from .symbols import Declaration, Field, FuncDecl, OtherDecl, ParsedFile, ParsedPackage, TypeDecl, TypeSpec


def parse_dir(
    source_dir: Path,
    *,
    include_tests: bool = False,
    env: dict[str, str] | None = None,
) -> list[ParsedPackage]:
    """Parse every Go file in `source_dir`, grouped by declared package name.

    Parsing is delegated to the Go toolchain (`go/parser` with comments) through
    a small helper program; the helper's JSON report is decoded into read-only
    records. Packages come back sorted by name and files sorted by path so that
    repeated runs on an unchanged directory produce identical results.
    """
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        raise ParseError(f"source directory not found: {source_dir}")
    source_dir = source_dir.resolve()

    with tempfile.TemporaryDirectory(prefix="gocopycat-goparse-") as td:
        helper_dir = Path(td)
        (helper_dir / "go.mod").write_text(
            "\n".join(
                [
                    "module gocopycat.goparse",
                    "",
                    "go 1.18",
                    "",
                ]
            ),
            encoding="utf-8",
        )
        (helper_dir / "main.go").write_text(_parser_go_source(), encoding="utf-8")

        cmd = ["go", "run", ".", "--dir", str(source_dir)]
        if include_tests:
            cmd.append("--tests")
        stdout = _run(cmd, cwd=helper_dir, env=env)

    obj = _decode_report(stdout)
    packages: list[ParsedPackage] = []
    for item in obj.get("packages") or []:
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            continue
        name = item["name"]
        files = [_file_from_json(name, f) for f in item.get("files") or [] if isinstance(f, dict)]
        files.sort(key=lambda f: f.path.as_posix())
        packages.append(ParsedPackage(name=name, files=tuple(files)))
    packages.sort(key=lambda p: p.name)
    return packages


def _run(cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None) -> str:
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=False,
            check=False,
        )
    except FileNotFoundError as e:
        raise ParseError(
            "Go toolchain not found (`go` is missing from PATH). "
            "Install Go and ensure `go` is available on PATH."
        ) from e

    stdout = (proc.stdout or b"").decode("utf-8", errors="replace")
    stderr = (proc.stderr or b"").decode("utf-8", errors="replace")
    if proc.returncode != 0:
        out = "\n".join([s for s in [stdout.strip("\n"), stderr.strip("\n")] if s])
        raise ParseError(f"go parse failed\n{out}")
    return stdout


def _decode_report(out: str) -> dict[str, Any]:
    # Go may print toolchain messages ahead of the report; start at the first object.
    start = out.find("{")
    if start == -1:
        raise ParseError(f"failed to parse go parse output\n{out}")
    try:
        obj = json.loads(out[start:])
    except Exception as e:  # noqa: BLE001 - boundary parse
        raise ParseError(f"failed to parse go parse output: {e}\n{out}") from e
    if not isinstance(obj, dict):
        raise ParseError("go parse output is not a JSON object")
    return obj


def _strings(v: Any) -> tuple[str, ...]:
    if not isinstance(v, list):
        return ()
    return tuple(x for x in v if isinstance(x, str))


def _fields(v: Any) -> tuple[Field, ...]:
    if not isinstance(v, list):
        return ()
    out: list[Field] = []
    for f in v:
        if not isinstance(f, dict) or not isinstance(f.get("type"), str):
            continue
        out.append(Field(names=_strings(f.get("names")), type=f["type"]))
    return tuple(out)


def _decl_from_json(d: dict[str, Any]) -> Declaration | None:
    kind = d.get("kind")
    if kind == "func":
        name = d.get("name")
        if not isinstance(name, str):
            return None
        recv = d.get("recv")
        return FuncDecl(
            name=name,
            recv=recv if isinstance(recv, str) and recv else None,
            type_params=_fields(d.get("type_params")),
            params=_fields(d.get("params")),
            results=_fields(d.get("results")),
            doc=_strings(d.get("doc")),
        )
    if kind == "gen":
        token = d.get("token")
        if token != "type":
            return OtherDecl(token=str(token))
        specs: list[TypeSpec] = []
        for s in d.get("specs") or []:
            if not isinstance(s, dict) or not isinstance(s.get("name"), str):
                continue
            specs.append(
                TypeSpec(
                    name=s["name"],
                    doc=_strings(s.get("doc")),
                    comment=_strings(s.get("comment")),
                    type_params=_fields(s.get("type_params")),
                )
            )
        return TypeDecl(specs=tuple(specs), doc=_strings(d.get("doc")), grouped=bool(d.get("grouped")))
    return None


def _file_from_json(package: str, f: dict[str, Any]) -> ParsedFile:
    decls: list[Declaration] = []
    for d in f.get("decls") or []:
        if not isinstance(d, dict):
            continue
        decl = _decl_from_json(d)
        if decl is not None:
            decls.append(decl)
    return ParsedFile(path=Path(str(f.get("path", ""))), package=package, decls=tuple(decls))


def _parser_go_source() -> str:
    # Keep this file stdlib-only so `go run` doesn't need network access.
    return r'''
package main

import (
	"bytes"
	"encoding/json"
	"flag"
	"fmt"
	"go/ast"
	"go/format"
	"go/parser"
	"go/token"
	"io/fs"
	"os"
	"sort"
	"strings"
)

type outField struct {
	Names []string `json:"names"`
	Type  string   `json:"type"`
}

type outSpec struct {
	Name       string     `json:"name"`
	Doc        []string   `json:"doc"`
	Comment    []string   `json:"comment"`
	TypeParams []outField `json:"type_params"`
}

type outDecl struct {
	Kind       string     `json:"kind"`
	Token      string     `json:"token,omitempty"`
	Grouped    bool       `json:"grouped,omitempty"`
	Doc        []string   `json:"doc"`
	Specs      []outSpec  `json:"specs,omitempty"`
	Name       string     `json:"name,omitempty"`
	Recv       string     `json:"recv,omitempty"`
	TypeParams []outField `json:"type_params,omitempty"`
	Params     []outField `json:"params,omitempty"`
	Results    []outField `json:"results,omitempty"`
}

type outFile struct {
	Path  string    `json:"path"`
	Decls []outDecl `json:"decls"`
}

type outPkg struct {
	Name  string    `json:"name"`
	Files []outFile `json:"files"`
}

type outObj struct {
	Packages []outPkg `json:"packages"`
}

func main() {
	var dir string
	var tests bool
	flag.StringVar(&dir, "dir", "", "Go source directory to parse")
	flag.BoolVar(&tests, "tests", false, "Include _test.go files")
	flag.Parse()

	if dir == "" {
		fmt.Fprintln(os.Stderr, "missing --dir")
		os.Exit(2)
	}

	filter := func(fi fs.FileInfo) bool {
		return tests || !strings.HasSuffix(fi.Name(), "_test.go")
	}

	fset := token.NewFileSet()
	pkgs, err := parser.ParseDir(fset, dir, filter, parser.ParseComments)
	if err != nil {
		fmt.Fprintf(os.Stderr, "failed to parse directory %s: %v\n", dir, err)
		os.Exit(1)
	}

	names := make([]string, 0, len(pkgs))
	for name := range pkgs {
		names = append(names, name)
	}
	sort.Strings(names)

	out := outObj{Packages: make([]outPkg, 0, len(names))}
	for _, name := range names {
		p := pkgs[name]
		paths := make([]string, 0, len(p.Files))
		for path := range p.Files {
			paths = append(paths, path)
		}
		sort.Strings(paths)

		op := outPkg{Name: name, Files: make([]outFile, 0, len(paths))}
		for _, path := range paths {
			op.Files = append(op.Files, outFile{Path: path, Decls: decls(fset, p.Files[path])})
		}
		out.Packages = append(out.Packages, op)
	}

	enc := json.NewEncoder(os.Stdout)
	enc.SetEscapeHTML(false)
	_ = enc.Encode(out)
}

func decls(fset *token.FileSet, file *ast.File) []outDecl {
	out := make([]outDecl, 0, len(file.Decls))
	for _, d := range file.Decls {
		switch v := d.(type) {
		case *ast.GenDecl:
			od := outDecl{
				Kind:    "gen",
				Token:   v.Tok.String(),
				Grouped: v.Lparen.IsValid(),
				Doc:     comments(v.Doc),
			}
			if v.Tok == token.TYPE {
				for _, s := range v.Specs {
					ts, ok := s.(*ast.TypeSpec)
					if !ok || ts.Name == nil {
						continue
					}
					od.Specs = append(od.Specs, outSpec{
						Name:       ts.Name.Name,
						Doc:        comments(ts.Doc),
						Comment:    comments(ts.Comment),
						TypeParams: fields(fset, ts.TypeParams),
					})
				}
			}
			out = append(out, od)
		case *ast.FuncDecl:
			od := outDecl{
				Kind:       "func",
				Name:       v.Name.Name,
				Doc:        comments(v.Doc),
				TypeParams: fields(fset, v.Type.TypeParams),
				Params:     fields(fset, v.Type.Params),
				Results:    fields(fset, v.Type.Results),
			}
			if v.Recv != nil && len(v.Recv.List) > 0 {
				od.Recv = render(fset, v.Recv.List[0].Type)
			}
			out = append(out, od)
		}
	}
	return out
}

func fields(fset *token.FileSet, fl *ast.FieldList) []outField {
	out := []outField{}
	if fl == nil {
		return out
	}
	for _, f := range fl.List {
		names := make([]string, 0, len(f.Names))
		for _, n := range f.Names {
			names = append(names, n.Name)
		}
		out = append(out, outField{Names: names, Type: render(fset, f.Type)})
	}
	return out
}

func comments(cg *ast.CommentGroup) []string {
	out := []string{}
	if cg == nil {
		return out
	}
	for _, c := range cg.List {
		out = append(out, c.Text)
	}
	return out
}

func render(fset *token.FileSet, n ast.Node) string {
	var buf bytes.Buffer
	if err := format.Node(&buf, fset, n); err != nil {
		return ""
	}
	return buf.String()
}
'''
