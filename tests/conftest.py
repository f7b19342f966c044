"""Shared fixtures: an in-memory blog and a polymorphic office directory."""

from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, List, Optional
from unittest.mock import Mock

import pytest

from sideloader import RelationTree, reset_settings


@dataclass
class User:
    id: int
    name: str = ""


@dataclass
class Comment:
    id: int
    post_id: int
    author_id: int
    author: Optional[User] = None


@dataclass
class Post:
    id: int
    title: str = ""
    comments: Optional[List[Comment]] = None
    tags: Any = None


@dataclass
class Business:
    id: int
    name: str = ""
    employees: Optional[list] = None


@dataclass
class Government:
    id: int
    name: str = ""


@dataclass
class Employee:
    id: int
    business_id: int


@dataclass
class Office:
    id: int
    organization_type: str
    organization_id: int
    organization: Any = None


@pytest.fixture(autouse=True)
def fresh_settings():
    """Each test starts from environment defaults"""
    reset_settings()
    yield
    reset_settings()


def _where(records, attribute, keys):
    return [record for record in records if getattr(record, attribute) in keys]


@pytest.fixture
def blog():
    """
    posts -> comments (has_many) -> author (belongs_to) -> users
    posts -> tags (custom assign, always empty)
    """
    users = [User(100, "ann"), User(101, "bob")]
    posts = [Post(1, "first"), Post(2, "second")]
    comments = [
        Comment(10, post_id=1, author_id=100),
        Comment(11, post_id=1, author_id=101),
        Comment(12, post_id=2, author_id=100),
    ]

    users_tree = RelationTree("users")
    comments_tree = RelationTree("comments")
    posts_tree = RelationTree("posts")

    fetch_comments = Mock(side_effect=lambda ps: _where(comments, "post_id", {p.id for p in ps}))
    fetch_authors = Mock(side_effect=lambda cs: _where(users, "id", {c.author_id for c in cs}))
    fetch_tags = Mock(return_value=[])
    assign_tags = Mock()

    posts_tree.register_relation(
        "comments",
        kind="has_many",
        foreign_key="post_id",
        target=comments_tree,
        configure=lambda node: node.set_fetch(fetch_comments)
    )
    comments_tree.register_relation(
        "author",
        kind="belongs_to",
        foreign_key="author_id",
        target=users_tree,
        configure=lambda node: node.set_fetch(fetch_authors)
    )

    tags = posts_tree.register_relation("tags")
    tags.set_fetch(fetch_tags)
    tags.set_assign(assign_tags)

    return SimpleNamespace(
        users=users,
        posts=posts,
        comments=comments,
        users_tree=users_tree,
        comments_tree=comments_tree,
        posts_tree=posts_tree,
        fetch_comments=fetch_comments,
        fetch_authors=fetch_authors,
        fetch_tags=fetch_tags,
        assign_tags=assign_tags,
    )


@pytest.fixture
def offices():
    """offices -> organization, polymorphic over Business / Government"""
    businesses = [Business(1, "acme"), Business(2, "globex")]
    governments = [Government(1, "council")]
    employees = [Employee(7, business_id=1), Employee(8, business_id=2)]
    records = [
        Office(1, "Business", 1),
        Office(2, "Government", 1),
        Office(3, "Unknown", 99),
        Office(4, "Business", 2),
    ]

    businesses_tree = RelationTree("businesses")
    governments_tree = RelationTree("governments")
    offices_tree = RelationTree("offices")

    fetch_employees = Mock(side_effect=lambda bs: _where(employees, "business_id", {b.id for b in bs}))
    businesses_tree.register_relation("employees", foreign_key="business_id").set_fetch(fetch_employees)

    fetch_businesses = Mock(side_effect=lambda os: _where(businesses, "id", {o.organization_id for o in os}))
    fetch_governments = Mock(side_effect=lambda os: _where(governments, "id", {o.organization_id for o in os}))

    organization = offices_tree.register_relation(
        "organization",
        kind="belongs_to",
        foreign_key="organization_id",
        polymorphic=True
    )
    organization.group_by(lambda office: office.organization_type)
    organization.register_group("Business", target=businesses_tree).set_fetch(fetch_businesses)
    organization.register_group("Government", target=governments_tree).set_fetch(fetch_governments)

    return SimpleNamespace(
        records=records,
        businesses=businesses,
        governments=governments,
        employees=employees,
        offices_tree=offices_tree,
        businesses_tree=businesses_tree,
        governments_tree=governments_tree,
        organization=organization,
        fetch_businesses=fetch_businesses,
        fetch_governments=fetch_governments,
        fetch_employees=fetch_employees,
    )
