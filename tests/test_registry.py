#!/usr/bin/env python3
"""
Tests for controller/listener declarations and table construction.

Run with: pytest tests/test_registry.py -v
"""
import logging
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.runtime.descriptors import (
    ControllerDescriptor,
    ListenerDescriptor,
    controller,
    delete,
    describe_controller,
    describe_listener,
    get,
    get_controller_descriptor,
    get_listener_descriptor,
    listener,
    patch,
    post,
    put,
)
from src.runtime.exceptions import RuntimeConfigurationError
from src.runtime.registry import register, split_destination


def _items_controller():
    @controller("/api/items")
    class ItemsController:
        @get("/:id")
        def get_item(self, event):
            return {"id": 1}

        @get()
        def list_items(self, event):
            return []

        @post()
        def create_item(self, event):
            return {}

        @put("/:id")
        def replace_item(self, event):
            return {}

        @patch("/:id")
        def update_item(self, event):
            return {}

        @delete("/:id")
        def delete_item(self, event):
            return None

    return ItemsController


# =============================================================================
# TEST: Descriptors
# =============================================================================

class TestDescriptors:
    """Tests for decorators and explicit descriptor builders."""

    def test_controller_decorator_collects_routes(self):
        """Test @controller gathers verb-marked methods."""
        cls = _items_controller()
        descriptor = get_controller_descriptor(cls)

        assert isinstance(descriptor, ControllerDescriptor)
        assert descriptor.base_path == "/api/items"
        assert descriptor.routes["GET"] == {"/:id": "get_item", "": "list_items"}
        assert descriptor.routes["POST"] == {"": "create_item"}
        assert descriptor.routes["PUT"] == {"/:id": "replace_item"}
        assert descriptor.routes["PATCH"] == {"/:id": "update_item"}
        assert descriptor.routes["DELETE"] == {"/:id": "delete_item"}
        print("✓ @controller collects routes")

    def test_full_routes_prefix_base_path(self):
        """Test base path prefixing of local routes."""
        descriptor = ControllerDescriptor("/api/items", {"GET": {"/:id": "get_item"}})
        assert descriptor.full_routes() == {"GET": {"/api/items/:id": "/api/items|get_item"}}
        print("✓ full_routes() prefixes base path")

    def test_describe_controller_without_decorators(self):
        """Test the explicit builder."""
        class Plain:
            def show(self, event):
                return {}

        describe_controller(Plain, "/plain", {"get": {"/:id": "show"}})
        assert get_controller_descriptor(Plain).routes == {"GET": {"/:id": "show"}}
        print("✓ describe_controller() attaches a descriptor")

    def test_listener_forms(self):
        """Test event-name, wrapped and keyword match configs."""
        @listener("user.created")
        class Named:
            def handle(self, event):
                return None

        @listener({"match": {"source": "aws.events"}})
        class Wrapped:
            def handle(self, event):
                return None

        @listener(match={"detail-type": "Order*"})
        class Keyword:
            def handle(self, event):
                return None

        assert get_listener_descriptor(Named) == ListenerDescriptor(event_name="user.created")
        assert get_listener_descriptor(Named).kind == "eventName"
        assert get_listener_descriptor(Wrapped).match == {"source": "aws.events"}
        assert get_listener_descriptor(Wrapped).kind == "pattern"
        assert get_listener_descriptor(Keyword).match == {"detail-type": "Order*"}
        print("✓ listener() accepts all config forms")

    def test_invalid_listener_config(self):
        """Test rejection of unusable configs."""
        class Bad:
            pass

        with pytest.raises(TypeError):
            describe_listener(Bad, 42)

    def test_descriptor_not_inherited(self):
        """Test subclasses do not inherit a parent's declaration."""
        parent = _items_controller()

        class Child(parent):
            pass

        assert get_controller_descriptor(Child) is None
        print("✓ Descriptors are per-class")


# =============================================================================
# TEST: Registration
# =============================================================================

class TestRegister:
    """Tests for register()."""

    def test_route_table_round_trip(self):
        """Test /api/items + /:id -> /api/items/:id -> (/api/items, get_item)."""
        cls = _items_controller()
        registry = register([cls])
        table = registry.route_table

        destination = table.destination("GET", "/api/items/:id")
        assert destination == "/api/items|get_item"
        assert split_destination(destination) == ("/api/items", "get_item")
        assert table.lookup("GET", "/api/items/:id") == (cls, "get_item")
        assert table.lookup("GET", "/api/items") == (cls, "list_items")
        assert table.lookup("DELETE", "/api/items/:id") == (cls, "delete_item")
        assert table.lookup("GET", "/api/other") is None
        assert table.lookup(None, None) is None
        assert len(table) == 6
        print("✓ Route table round trip")

    def test_merges_multiple_controllers(self):
        """Test route fragments from several controllers share one table."""
        items = _items_controller()

        @controller("/api/users")
        class UsersController:
            @get("/:id")
            def get_user(self, event):
                return {}

        registry = register([items, UsersController])
        assert registry.route_table.lookup("GET", "/api/users/:id") == (UsersController, "get_user")
        assert registry.route_table.lookup("GET", "/api/items/:id") == (items, "get_item")
        print("✓ Controllers merged into one table")

    def test_listener_tables(self):
        """Test event-name map and ordered pattern list."""
        @listener("a")
        class A1:
            def handle(self, event):
                return 1

        @listener("a")
        class A2:
            def handle(self, event):
                return 2

        @listener(match={"x": "*"})
        class P1:
            def handle(self, event):
                return 3

        @listener(match={"y": "*"})
        class P2:
            def handle(self, event):
                return 4

        registry = register([_items_controller()], [A1, P1, A2, P2])
        table = registry.listener_table

        assert table.for_name("a") is A2
        assert [cls for _, cls in table.patterns] == [P1, P2]
        assert table.has_patterns is True
        assert table.first_match({"x": 1, "y": 1}) is P1
        assert table.first_match({"y": 1}) is P2
        assert table.first_match({"z": 1}) is None
        print("✓ Listener tables built in registration order")

    def test_tables_are_read_only(self):
        """Test tables cannot be mutated after registration."""
        registry = register([_items_controller()])
        with pytest.raises(TypeError):
            registry.route_table.routes["GET"]["/x"] = "y"
        with pytest.raises(TypeError):
            registry.listener_table.by_name["x"] = object
        print("✓ Tables are read-only")

    def test_registries_are_independent(self):
        """Test two registrations never share state."""
        @listener("only.first")
        class First:
            def handle(self, event):
                return None

        first = register([_items_controller()], [First])
        second = register([_items_controller()], [])

        assert first.listener_table.for_name("only.first") is First
        assert second.listener_table.for_name("only.first") is None
        print("✓ Registries are independent")

    def test_undeclared_classes_skipped_with_warning(self, caplog):
        """Test undecorated controllers/listeners are skipped, not fatal."""
        class NoRoutes:
            pass

        class NoListener:
            pass

        with caplog.at_level(logging.WARNING):
            registry = register([NoRoutes, _items_controller()], [NoListener])

        assert len(registry.route_table) == 6
        assert registry.listener_table.has_patterns is False
        assert "NoRoutes" in caplog.text
        assert "NoListener" in caplog.text
        print("✓ Undeclared classes skipped with warnings")


# =============================================================================
# TEST: Configuration Errors
# =============================================================================

class TestRegisterErrors:
    """Tests for fatal registration errors."""

    @pytest.mark.parametrize("controllers", [[], None, ()])
    def test_no_controllers(self, controllers):
        with pytest.raises(RuntimeConfigurationError, match="At least one controller is required"):
            register(controllers)

    def test_non_class_controller(self):
        cls = _items_controller()
        with pytest.raises(RuntimeConfigurationError, match="Controller at index 1 must be a class constructor"):
            register([cls, cls()])

    def test_listeners_not_a_list(self):
        with pytest.raises(RuntimeConfigurationError, match="Listeners must be an array"):
            register([_items_controller()], "not-a-list")

    def test_non_class_listener(self):
        @listener("ok")
        class Ok:
            def handle(self, event):
                return None

        with pytest.raises(RuntimeConfigurationError, match="Listener at index 1 must be a class constructor"):
            register([_items_controller()], [Ok, lambda e: e])

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            register([])
