"""Shared fixtures for the cartonplan test-suite."""

import sys
import os

import pytest

# Ensure the project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import CartonGroup, Container, EngineConfig, Item


@pytest.fixture
def config():
    """Default engine config."""
    return EngineConfig()


@pytest.fixture
def cube_container():
    """A 1 m cube, unrestricted."""
    return Container(id="c1", type_label="test", length=1000, width=1000, height=1000)


@pytest.fixture
def euro_container():
    """Euro pallet footprint with 1.2 m load height."""
    return Container(id="euro-1", type_label="Euro Pallet", length=1200,
                     width=800, height=1200, weight_limit=1000)


@pytest.fixture
def mixed_groups():
    """Three carton groups of different sizes."""
    return [
        CartonGroup("A", "Large", 400, 300, 250, quantity=12, weight=8.0),
        CartonGroup("B", "Medium", 300, 200, 150, quantity=20, weight=4.0),
        CartonGroup("C", "Small", 200, 150, 100, quantity=30, weight=1.5),
    ]


@pytest.fixture
def mixed_items():
    """Free-form items for the general engine."""
    return [
        Item("i1", 400, 300, 200, 20.0),
        Item("i2", 300, 300, 300, 5.0),
        Item("i3", 500, 200, 100, 12.0),
        Item("i4", 200, 200, 200, 2.0),
        Item("i5", 600, 400, 300, 40.0),
        Item("i6", 250, 150, 100, 1.0),
        Item("i7", 350, 250, 150, 7.5),
        Item("i8", 100, 100, 100, 0.5),
    ]
