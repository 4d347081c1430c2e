import json
import subprocess

import pytest


@pytest.fixture
def fake_go_report(monkeypatch):
    """Replace the Go parse helper with a canned JSON report.

    Returns an installer; the installer returns the list of commands that were run.
    """
    calls: list[list[str]] = []

    def install(report: dict, *, prefix: bytes = b"", returncode: int = 0, stderr: bytes = b""):
        payload = prefix + json.dumps(report).encode("utf-8")

        def fake_run(*args, **kwargs):  # noqa: ANN001
            calls.append(list(args[0]))
            return subprocess.CompletedProcess(
                args=args[0], returncode=returncode, stdout=payload, stderr=stderr
            )

        monkeypatch.setattr(subprocess, "run", fake_run)
        return calls

    return install


def go_func(name: str, *, recv: str = "", params=(), results=(), type_params=(), doc=()) -> dict:
    """Build one `func` entry of a parse report. Fields are (names, type) pairs."""
    return {
        "kind": "func",
        "name": name,
        "recv": recv,
        "doc": list(doc),
        "type_params": [{"names": list(n), "type": t} for n, t in type_params],
        "params": [{"names": list(n), "type": t} for n, t in params],
        "results": [{"names": list(n), "type": t} for n, t in results],
    }


def go_types(*specs: dict, doc=(), grouped: bool = False) -> dict:
    return {"kind": "gen", "token": "type", "grouped": grouped, "doc": list(doc), "specs": list(specs)}


def go_spec(name: str, *, doc=(), comment=()) -> dict:
    return {"name": name, "doc": list(doc), "comment": list(comment), "type_params": []}


def go_other(token: str) -> dict:
    return {"kind": "gen", "token": token, "doc": []}
