"""Tests for framework and risk tagging."""

from __future__ import annotations

from codeindex.extract.tags import (
    GO_FRAMEWORKS,
    PYTHON_FRAMEWORKS,
    detect_frameworks_by_prefix,
    detect_frameworks_by_substring,
    go_risk_tags,
    python_risk_tags,
    typescript_risk_tags,
)


def test_prefix_detection_keeps_table_order() -> None:
    imports = ["google.golang.org/grpc/codes", "github.com/spf13/cobra", "net/http"]

    assert detect_frameworks_by_prefix(imports, GO_FRAMEWORKS) == ["stdlib-http", "cobra", "grpc"]


def test_prefix_detection_requires_prefix() -> None:
    assert detect_frameworks_by_prefix(["example.com/net/http"], GO_FRAMEWORKS) == []


def test_substring_detection_is_case_insensitive() -> None:
    assert detect_frameworks_by_substring(["Flask_Login", "numpy.linalg"], PYTHON_FRAMEWORKS) == ["flask", "numpy"]


def test_go_risk_tags_from_imports_and_text() -> None:
    tags = go_risk_tags("const apiToken = \"x\"\nch := make(chan int)\n", ["os/exec", "database/sql", "unsafe"])

    assert tags == ["concurrency", "database", "secrets", "subprocess", "unsafe"]


def test_python_risk_tags_scan_source_text() -> None:
    tags = python_risk_tags("result = eval(expr)\npassword = read()\n", [])

    assert tags == ["code-execution", "secrets"]


def test_typescript_risk_tags_are_case_sensitive_on_text() -> None:
    assert "xss-risk" in typescript_risk_tags("el.innerHTML = value", [])
    assert "xss-risk" not in typescript_risk_tags("el.innerhtml = value", [])
