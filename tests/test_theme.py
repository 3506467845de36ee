import os

from projecthub import theme
from projecthub.models import ProjectStatus, TaskStatus


def test_theme_file_exists():
    assert os.path.isfile(theme.THEME_FILE)


def test_set_theme():
    try:
        theme.set_theme(page_title="ProjectHub test")
    except Exception as e:
        assert False, f"set_theme raised an exception: {e}"


def test_status_css_has_one_rule_per_token():
    css = theme.status_css()
    tokens = {m.value for m in ProjectStatus} | {m.value for m in TaskStatus}
    for token in tokens:
        assert css.count(f".ph-status-{token} ") == 1


def test_load_css_includes_file_and_status_rules():
    css = theme.load_css()
    assert ".ph-card" in css
    assert ".ph-status-unknown" in css
    assert ".ph-status-DONE" in css
