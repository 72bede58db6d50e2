import pytest

from yamlmend.core.models import LineRole, ReconstructState, SourceLine
from yamlmend.healing.classifier import LineClassifier
from yamlmend.healing.normalizer import normalize
from yamlmend.healing.reconstructor import IndentReconstructor, healing_report


def reconstruct(text, **kwargs):
    lines = LineClassifier().classify(normalize(text))
    return IndentReconstructor(**kwargs).reconstruct(lines)


def indents(text):
    return [len(line) - len(line.lstrip(" ")) for line in text.split("\n") if line.strip()]


@pytest.mark.parametrize("line, role", [
    ("", LineRole.BLANK),
    ("   ", LineRole.BLANK),
    ("spec:", LineRole.MAPPING_KEY),
    ("  - name:", LineRole.MAPPING_KEY),
    ("- 1", LineRole.LIST_ITEM),
    ("    -   nginx", LineRole.LIST_ITEM),
    ("-1", LineRole.OTHER),
    ("---", LineRole.OTHER),
    ("key: value", LineRole.OTHER),
    ("# comment", LineRole.OTHER),
])
def test_classifier_roles(line, role):
    assert LineClassifier().classify_line(0, line).role is role


def test_classifier_measures_indent_and_content():
    line = LineClassifier().classify_line(3, "    - item")
    assert line.index == 3
    assert line.indent == 4
    assert line.content == "- item"
    assert line.raw == "    - item"


def test_classifier_keeps_trailing_blank_line():
    lines = LineClassifier().classify("a:\n- 1\n")
    assert len(lines) == 3
    assert lines[-1].role is LineRole.BLANK


def test_scenario_list_under_flush_left_key():
    assert reconstruct("a:\n- 1\n- 2\n") == "a:\n  - 1\n  - 2\n"


def test_scenario_tab_indented_list():
    assert reconstruct("a:\n\t- 1\n") == "a:\n  - 1\n"


def test_scenario_top_level_list_is_flattened():
    assert reconstruct("- 1\n  - 2\n- 3\n") == "- 1\n- 2\n- 3\n"


@pytest.mark.parametrize("key_indent", [0, 2, 4])
@pytest.mark.parametrize("item_indent", [0, 1, 2, 3, 7])
def test_list_item_after_key_lands_two_columns_deeper(key_indent, item_indent):
    text = " " * key_indent + "key:\n" + " " * item_indent + "- x"
    out = reconstruct(text).split("\n")
    assert out[1] == " " * (key_indent + 2) + "- x"


@pytest.mark.parametrize("text", [
    "a:\n- 1\n    - 2\n  - 3\n",
    "root:\n  child:\n  - 1\n      - 2\n - 3\n",
    "- a\n     - b\n   - c\n",
])
def test_contiguous_run_shares_one_indent(text):
    out = reconstruct(text)
    item_indents = [
        len(line) - len(line.lstrip(" "))
        for line in out.split("\n")
        if line.strip().startswith("- ")
    ]
    assert len(set(item_indents)) == 1


def test_keys_and_scalars_keep_their_indent():
    text = "spec:\n  replicas: 3\n  selector:\n    app: web\n"
    assert reconstruct(text) == text


def test_sibling_key_closes_previous_mapping():
    out = reconstruct("a:\n- 1\nb:\n      - 2\n")
    assert out == "a:\n  - 1\nb:\n  - 2\n"


def test_dash_key_opens_nested_mapping():
    out = reconstruct("items:\n- name:\n      - x\n")
    assert out == "items:\n- name:\n  - x\n"


def test_other_line_clears_run():
    out = reconstruct("- a\nplain\n   - b\n")
    assert indents(out) == [0, 0, 0]


def test_blank_line_keeps_run_by_default():
    out = reconstruct("a:\n  - 1\n\n- 2\n")
    assert out == "a:\n  - 1\n\n  - 2\n"


def test_blank_line_can_reset_run():
    out = reconstruct("a:\n  - 1\n\n- 2\n", reset_list_on_blank=True)
    assert out == "a:\n  - 1\n\n- 2\n"


def test_blank_lines_are_emitted_verbatim():
    assert reconstruct("a: 1\n\n\nb: 2") == "a: 1\n\n\nb: 2"


def test_empty_input():
    assert reconstruct("") == ""


def test_step_is_pure_and_threads_state():
    reconstructor = IndentReconstructor()
    classifier = LineClassifier()
    start = ReconstructState()

    state, out = reconstructor.step(start, classifier.classify_line(0, "a:"))
    assert out == "a:"
    assert state.mapping_stack == (0,)
    assert state.key_opened
    assert start == ReconstructState()

    state, out = reconstructor.step(state, classifier.classify_line(1, "- 1"))
    assert out == "  - 1"
    assert state.run_indent == 2
    assert state.run_start == 1

    state, out = reconstructor.step(state, classifier.classify_line(2, "- 2"))
    assert out == "  - 2"
    assert state.run_indent == 2
    assert state.run_start == 1
    assert state.mapping_stack == ()

    state, out = reconstructor.step(state, classifier.classify_line(3, "b: 3"))
    assert out == "b: 3"
    assert not state.in_run


def test_mapping_stack_stays_strictly_increasing():
    reconstructor = IndentReconstructor()
    lines = LineClassifier().classify("a:\n  b:\n    c:\n  d:\n      e:\nf:\n")
    state = ReconstructState()
    for line in lines:
        state, _ = reconstructor.step(state, line)
        stack = state.mapping_stack
        assert all(lower < upper for lower, upper in zip(stack, stack[1:]))


def test_blank_step_returns_raw_line():
    line = SourceLine(index=0, raw="", indent=0, content="", role=LineRole.BLANK)
    state = ReconstructState(mapping_stack=(0,), run_indent=2, run_start=1)
    assert IndentReconstructor().step(state, line) == (state, "")


def test_healing_report_counts_changed_lines():
    report = healing_report("a:\n- 1\n- 2", "a:\n  - 1\n  - 2", "OK")
    assert report.total_lines == 3
    assert report.lines_changed == 2
    assert report.changes[0].line == 2
    assert report.changes[0].indent_original == 0
    assert report.changes[0].indent_fixed == 2
