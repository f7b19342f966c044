"""Tests for scripts/describe_includes.py."""

import importlib.util
import json
import logging
import sys
import types
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "describe_includes.py"


@pytest.fixture
def describe():
    spec = importlib.util.spec_from_file_location("describe_includes", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    yield module
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()


@pytest.fixture
def trees_module(monkeypatch, blog):
    module = types.ModuleType("blog_trees")
    module.posts = blog.posts_tree
    module.build_posts = lambda: blog.posts_tree
    module.not_a_tree = object()
    monkeypatch.setitem(sys.modules, "blog_trees", module)
    return module


def test_prints_json_directive(describe, trees_module, capsys):
    assert describe.main(["blog_trees:posts"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output == {"posts": {"comments": {"author": {}}, "tags": {}}}


def test_prints_paths_from_factory(describe, trees_module, capsys):
    assert describe.main(["blog_trees:build_posts", "--paths"]) == 0

    assert capsys.readouterr().out.split() == ["comments", "comments.author", "tags"]


def test_check_reports_unsupported(describe, trees_module, capsys):
    assert describe.main(["blog_trees:posts", "--check", "comments.author", "comments.likes"]) == 1

    assert capsys.readouterr().out.strip() == "unsupported: comments.likes"


def test_rejects_non_trees(describe, trees_module):
    with pytest.raises(TypeError):
        describe.load_tree("blog_trees:not_a_tree")

    with pytest.raises(ValueError):
        describe.load_tree("blog_trees")
