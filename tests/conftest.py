"""Pytest configuration and shared fixtures for MindFlow tests."""

import pytest

from mindflow import Item, ItemStyle, LayoutDirection, MindMapLayout, MindMapSession


@pytest.fixture
def two_child_tree():
    """Root R with two leaf children A and B."""
    return Item(
        id="R",
        label="Root",
        children=[Item(id="A", label="Alpha"), Item(id="B", label="Beta")],
    )


@pytest.fixture
def four_child_tree():
    """Root with four leaf children c0..c3."""
    return Item(
        id="root",
        label="Center",
        children=[Item(id=f"c{i}", label=f"Child {i}") for i in range(4)],
    )


@pytest.fixture
def deep_tree():
    """Three levels with uneven branching and a styled node."""
    return Item(
        id="root",
        label="Project",
        children=[
            Item(
                id="a",
                label="Research",
                children=[
                    Item(id="a1", label="Papers"),
                    Item(id="a2", label="Interviews"),
                    Item(id="a3", label="Competitors"),
                ],
            ),
            Item(
                id="b",
                label="Design",
                children=[Item(id="b1", label="Wireframes")],
                style=ItemStyle(font_size=20, background_color="#fef3c7"),
            ),
            Item(
                id="c",
                label="Build",
                children=[
                    Item(
                        id="c1",
                        label="Backend",
                        children=[
                            Item(id="c1a", label="API"),
                            Item(id="c1b", label="DB"),
                        ],
                    ),
                    Item(id="c2", label="Frontend"),
                ],
            ),
            Item(id="d", label="Launch"),
        ],
    )


@pytest.fixture
def layout_engine():
    """Default MindMapLayout instance."""
    return MindMapLayout()


@pytest.fixture
def session_factory():
    """Build a session on a tree, optionally in a given direction."""

    def make(root, direction=None, active=None):
        if direction is not None:
            root.layout_direction = LayoutDirection(direction)
        session = MindMapSession(root)
        if active is not None:
            session.navigation.select(active)
        return session

    return make
