import pytest

from kubefields.output.color import (
    BRIGHT_PALETTE,
    ColorManager,
    colorize,
    colorize_line,
    extract_manager_name,
    format_output,
    resolve_color,
)

ESC = "\x1b["


def test_palette_has_eight_colors():
    assert len(BRIGHT_PALETTE) == 8


def test_assignment_is_first_encounter_order():
    manager = ColorManager()
    assert manager.style_for("kubectl") == BRIGHT_PALETTE[0]
    assert manager.style_for("helm") == BRIGHT_PALETTE[1]
    assert manager.style_for("kubectl") == BRIGHT_PALETTE[0]


def test_palette_cycles():
    manager = ColorManager()
    styles = [manager.style_for(f"m{i}") for i in range(10)]
    assert styles[8] == styles[0]
    assert styles[9] == styles[1]


def test_assignment_is_deterministic():
    text = "a: 1  # helm\nb: 2  # kubectl (5m ago)\nc: 3  # helm"
    assert colorize(text, ColorManager()) == colorize(text, ColorManager())


@pytest.mark.parametrize("comment, name", [
    ("# kubectl-apply (5m ago)", "kubectl-apply"),
    ("# kube-controller-manager /status (2h ago)", "kube-controller-manager"),
    ("# helm", "helm"),
    ("helm (update)", "helm"),
])
def test_extract_manager_name(comment, name):
    assert extract_manager_name(comment) == name


def test_inline_comment_is_colored_content_is_not():
    manager = ColorManager()
    line = colorize_line("  replicas: 3  # kubectl (5m ago)", manager)

    assert line.startswith("  replicas: 3  ")
    assert ESC not in line[:len("  replicas: 3  ")]
    assert manager.wrap("# kubectl (5m ago)", "kubectl") in line
    assert line.endswith("\x1b[0m")


def test_head_comment_is_colored_after_indent():
    manager = ColorManager()
    line = colorize_line("    # helm (1d ago)", manager)

    assert line == "    " + manager.wrap("# helm (1d ago)", "helm")


def test_plain_lines_untouched():
    manager = ColorManager()
    assert colorize_line("kind: Deployment", manager) == "kind: Deployment"
    assert manager.assigned == {}


def test_resolve_color_flags(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    assert resolve_color("always", False) is True
    assert resolve_color("never", True) is False
    assert resolve_color("auto", True) is False


def test_resolve_color_auto_follows_tty(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert resolve_color("auto", True) is True
    assert resolve_color("auto", False) is False


def test_empty_no_color_is_ignored(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "")
    assert resolve_color("auto", True) is True


def test_format_output_aligns_then_colors():
    text = "a: 1 # helm\nlonger: 2 # helm"
    plain = format_output(text, color_enabled=False)
    assert plain == "a: 1       # helm\nlonger: 2  # helm"

    colored = format_output(text, color_enabled=True, manager=ColorManager())
    assert ESC in colored
    assert colored.startswith("a: 1       ")


def test_block_scalar_comment_lines_stay_plain():
    text = (
        "data:\n"
        "  script: |\n"
        "    # install dependencies\n"
        "    apt-get update\n"
        "  # helm\n"
        "  key: value\n"
    )
    lines = colorize(text, ColorManager()).split("\n")

    assert lines[2] == "    # install dependencies"
    assert ESC in lines[4]


def test_stacked_head_comments_above_sequence_item():
    text = "items:\n# helm\n# kubectl\n- name: a\n"
    lines = colorize(text, ColorManager()).split("\n")

    assert ESC in lines[1]
    assert ESC in lines[2]


def test_head_comment_needs_a_node_below():
    text = "# helm\n\nkind: Pod\n"
    assert colorize(text, ColorManager()) == text
