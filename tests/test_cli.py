import json
import os
import sys
import subprocess
from pathlib import Path

import pytest

from encsig.scenario import parse_message

ROOT = Path(__file__).resolve().parents[1]
PY = sys.executable

def _env():
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join([str(ROOT), env.get("PYTHONPATH", "")])
    return env

def run(args, cwd=None) -> str:
    r = subprocess.run(args, cwd=cwd, env=_env(), capture_output=True, text=True)
    assert r.returncode == 0, (
        f"CMD failed:\n{args}\nSTDOUT:\n{r.stdout}\nSTDERR:\n{r.stderr}"
    )
    return r.stdout

def run_expect_fail(args, cwd=None) -> str:
    r = subprocess.run(args, cwd=cwd, env=_env(), capture_output=True, text=True)
    assert r.returncode != 0, (
        f"Expected fail but succeeded:\n{args}\nSTDOUT:\n{r.stdout}\nSTDERR:\n{r.stderr}"
    )
    return r.stdout + "\n" + r.stderr

CLI = [PY, "-m", "encsig.scenario"]


def test_run_toy_scenario():
    out = run(CLI + ["run", "--curve", "TOY101", "--message", "42", "-v"])
    assert "[VERIFY] result=PASS" in out
    assert "[SOLVER-DBG] row: 1*m + 1*mask" in out
    assert "[SOLVER] recovered plaintext: 42" in out
    assert "[SCENARIO] match" in out


def test_run_degenerate_k_fails():
    msg = run_expect_fail(CLI + ["run", "--curve", "TOY101", "--k", "0", "--message", "42"])
    assert "AttackInapplicable" in msg


def test_run_plaintext_too_large_fails():
    msg = run_expect_fail(CLI + ["run", "--curve", "TOY101", "--message", "pwn"])
    assert "EncodingError" in msg


def test_challenge_then_solve(tmp_path: Path):
    blob = tmp_path / "keys" / "challenge.json"
    run(CLI + ["challenge", "--curve", "TOY1000003", "--message", "h", "--out", str(blob)])
    assert blob.exists()

    out = run(CLI + ["solve", "--challenge", str(blob), "--bytes"])
    assert "[SOLVER] recovered plaintext: h" in out


def test_solve_rejects_tampered_blob(tmp_path: Path):
    blob = tmp_path / "challenge.json"
    run(CLI + ["challenge", "--curve", "TOY1000003", "--message", "31337", "--out", str(blob)])

    data = json.loads(blob.read_text(encoding="utf-8"))
    data["c2"], data["c1"] = data["c1"], data["c2"]
    blob.write_text(json.dumps(data), encoding="utf-8")

    msg = run_expect_fail(CLI + ["solve", "--challenge", str(blob)])
    assert "VerificationFailed" in msg


def test_run_on_bn254():
    pytest.importorskip("charm")
    out = run(CLI + ["run", "--domain-bits", "24", "--message", "ok"])
    assert "challenge built on BN254" in out
    assert "[SOLVER] recovered plaintext: ok" in out


def test_message_space_blob_on_bn254(tmp_path: Path):
    pytest.importorskip("charm")
    blob = tmp_path / "blob.json"
    run(CLI + ["challenge", "--pick", "3", "--out", str(blob)])
    out = run(CLI + ["solve", "--challenge", str(blob), "--candidates"])
    assert "msg found = MESSAGE_SPACE[3] = 8492374892742" in out


def test_parse_message_decimal_only():
    assert parse_message("42") == 42
    assert parse_message("²") == "²".encode("utf-8")
    assert parse_message("4a") == b"4a"


def test_run_bad_toy_curve_is_tagged():
    msg = run_expect_fail(CLI + ["run", "--curve", "TOYabc", "--message", "42"])
    assert "[SCHEME] setup FAILED" in msg
    assert "Traceback" not in msg


def test_run_unicode_digit_message_is_tagged():
    msg = run_expect_fail(CLI + ["run", "--curve", "TOY101", "--message", "²"])
    assert "EncodingError" in msg
    assert "Traceback" not in msg
