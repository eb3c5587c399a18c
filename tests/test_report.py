from __future__ import annotations

from j_dep_updates.models import ClassificationResult, Coordinate
from j_dep_updates.report import INFO_PAD_SIZE, format_line, render_updates


def _result(artifact_id: str, current: str, latest: str | None = None, group_id: str = "junit"):
    return ClassificationResult(
        coordinate=Coordinate(group_id=group_id, artifact_id=artifact_id),
        current=current,
        latest=latest,
    )


def test_short_line_is_dot_padded() -> None:
    [line] = format_line(_result("junit", "4.11", "4.13.2"))
    assert len(line) == INFO_PAD_SIZE
    assert line.startswith("  junit:junit ....")
    assert line.endswith(". 4.11 -> 4.13.2")


def test_line_without_update_shows_current_only() -> None:
    [line] = format_line(_result("junit", "4.13.2"))
    assert line.endswith(". 4.13.2")
    assert "->" not in line


def test_long_line_wraps_onto_two_lines() -> None:
    result = _result("a" * 50, "1.0.0", "2.0.0", group_id="org.example.very.long")
    first, second = format_line(result)
    assert first == f"  org.example.very.long:{'a' * 50} ..."
    assert second == " 1.0.0 -> 2.0.0".rjust(INFO_PAD_SIZE)
    assert len(second) == INFO_PAD_SIZE


def test_line_exactly_at_budget_stays_on_one_line() -> None:
    # left is 2 + len(key) + 1, right is " 1.0"; total + 3 == 72
    key_len = INFO_PAD_SIZE - 3 - 4 - 3
    group_id = "g"
    artifact_id = "x" * (key_len - len(group_id) - 1)
    lines = format_line(_result(artifact_id, "1.0", group_id=group_id))
    assert len(lines) == 1
    assert lines[0].endswith(" 1.0")


def test_one_more_column_wraps() -> None:
    key_len = INFO_PAD_SIZE - 3 - 4 - 3 + 1
    artifact_id = "x" * (key_len - 2)
    assert len(format_line(_result(artifact_id, "1.0", group_id="g"))) == 2


def test_render_updates_only() -> None:
    lines = render_updates(
        [_result("junit", "4.11", "4.13.2"), _result("hamcrest", "1.3")],
        "Dependencies",
        project_id="demo",
    )
    assert lines[0] == "[demo]: The following dependencies in Dependencies have newer versions:"
    assert "junit:junit" in lines[1]
    assert lines[2] == ""
    assert len(lines) == 3


def test_render_without_updates() -> None:
    lines = render_updates([_result("junit", "4.13.2")], "Dependency Management", project_id="demo")
    assert lines == ["[demo]: No dependencies in Dependency Management have newer versions.", ""]


def test_render_verbose_lists_current_before_updates() -> None:
    lines = render_updates(
        [_result("junit", "4.11", "4.13.2"), _result("hamcrest", "1.3")],
        "Dependencies",
        verbose=True,
        project_id="demo",
    )
    assert lines[0] == "[demo]: The following dependencies in Dependencies are using the newest version:"
    assert "junit:hamcrest" in lines[1]
    assert lines[2] == ""
    assert lines[3] == "[demo]: The following dependencies in Dependencies have newer versions:"
    assert "junit:junit" in lines[4]
    assert lines[5] == ""


def test_render_verbose_when_nothing_is_current() -> None:
    lines = render_updates(
        [_result("junit", "4.11", "4.13.2")], "Dependencies", verbose=True, project_id="demo"
    )
    assert lines[0] == "[demo]: No dependencies in Dependencies are using the newest version."
    assert lines[1] == ""
    assert lines[2].startswith("[demo]: The following dependencies")


def test_render_empty_section() -> None:
    assert render_updates([], "Dependencies", verbose=True, project_id="demo") == []


def test_buckets_partition_results() -> None:
    results = [
        _result("a", "1.0", "2.0"),
        _result("b", "1.0"),
        _result("c", "1.0", "1.1"),
        _result("d", "3.0"),
    ]
    lines = render_updates(results, "Dependencies", verbose=True, project_id="demo")
    body = [line for line in lines if line.startswith("  ")]
    assert len(body) == len(results)
    for key in ("junit:a", "junit:b", "junit:c", "junit:d"):
        assert sum(key + " " in line for line in body) == 1
    current_block = lines[1:3]
    assert "junit:b" in current_block[0] and "junit:d" in current_block[1]
