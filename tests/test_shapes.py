"""Tests for the shape adapters."""

import pytest

from dataknobs_canon.definitions import validate_num
from dataknobs_canon.exceptions import ConfigurationError, InvalidDefinitionError
from dataknobs_canon.outcome import ValidationOutcome
from dataknobs_canon.shapes import (
    MappingAdapter,
    ScalarAdapter,
    SequenceAdapter,
    Shape,
    adapter_for,
    invoke_definition,
)
from dataknobs_canon.store import ResultStore


class TestShape:
    """Test the Shape enum."""

    def test_entry_names(self):
        """Test derived entry point names."""
        assert Shape.SCALAR.entry_name("num") == "num"
        assert Shape.SEQUENCE.entry_name("num") == "numArray"
        assert Shape.MAPPING.entry_name("num") == "numObject"

    def test_adapter_for(self):
        """Test each shape has an adapter."""
        assert isinstance(adapter_for(Shape.SCALAR), ScalarAdapter)
        assert isinstance(adapter_for(Shape.SEQUENCE), SequenceAdapter)
        assert isinstance(adapter_for(Shape.MAPPING), MappingAdapter)


class TestInvokeDefinition:
    """Test invoke_definition()."""

    def test_normalizes_result(self):
        """Test pair results are normalized."""
        assert invoke_definition(lambda v, o: (v * 2, True), 2, {}) == ValidationOutcome(4, True)

    def test_exception_is_rejection(self):
        """Test ordinary exceptions become failures."""
        outcome = invoke_definition(lambda v, o: v["missing"], {}, {})
        assert outcome == ValidationOutcome.failure({})

    def test_configuration_error_propagates(self):
        """Test configuration errors are not swallowed."""

        def misconfigured(value, options):
            raise ConfigurationError("bad options")

        with pytest.raises(ConfigurationError):
            invoke_definition(misconfigured, 1, {})

    def test_bad_return_type_propagates(self):
        """Test a definition returning garbage is a definition error."""
        with pytest.raises(InvalidDefinitionError):
            invoke_definition(lambda v, o: "yes", 1, {})


class TestScalarAdapter:
    """Test the scalar adapter."""

    def run(self, value, options):
        store = ResultStore()
        ScalarAdapter().run(store, validate_num, "f", value, options)
        return store

    def test_accepts_canonized(self, resolved):
        """Test the canonized value is stored."""
        assert self.run("42", resolved()).accepted == {"f": 42}

    def test_canonize_off(self, resolved):
        """Test the input is stored when canonize is off."""
        assert self.run("42", resolved(canonize=False)).accepted == {"f": "42"}

    def test_rejects_raw_input(self, resolved):
        """Test the raw input is stored on rejection, not the transformed one."""
        store = self.run(" x ", resolved(pre_transform=str.strip))
        assert store.rejected == {"f": " x "}

    def test_optional_default(self, resolved):
        """Test an optional None stores the default without calling the definition."""

        def never(value, options):
            raise AssertionError("definition called")

        store = ResultStore()
        ScalarAdapter().run(store, never, "f", None, resolved(optional=True, default_value=-1, canonize=False))
        assert store.accepted == {"f": -1}

    def test_return_none_gate(self, resolved):
        """Test accepted None values are skipped unless return_none."""
        store = ResultStore()
        ScalarAdapter().run(store, lambda v, o: (None, True), "f", 1, resolved(return_none=False))
        assert store.accepted == {} and store.rejected == {}

        ScalarAdapter().run(store, lambda v, o: (None, True), "f", 1, resolved())
        assert store.accepted == {"f": None}

    def test_return_none_gate_ignores_canonize(self, resolved):
        """Test the gate looks at the definition's value even when canonize is off."""
        store = ResultStore()
        options = resolved(canonize=False, return_none=False)
        ScalarAdapter().run(store, lambda v, o: (None, True), "f", "raw", options)
        assert store.accepted == {} and store.rejected == {}

        ScalarAdapter().run(store, lambda v, o: ("canonical", True), "f", None, options)
        assert store.accepted == {"f": None}

    def test_transform_order(self, resolved):
        """Test the four stages run around the definition in order."""
        calls = []

        def stage(name):
            def transform(value):
                calls.append(name)
                return value

            return transform

        options = resolved(
            pre_transform=stage("pre"),
            pre_transform_item=stage("pre_item"),
            post_transform_item=stage("post_item"),
            post_transform=stage("post"),
        )
        self.run("1", options)
        assert calls == ["pre", "pre_item", "post_item", "post"]

    def test_post_transforms_skipped_on_rejection(self, resolved):
        """Test post transforms only run for accepted values."""
        calls = []
        self.run("x", resolved(post_transform=calls.append))
        assert calls == []

    def test_post_transform_failure_rejects(self, resolved):
        """Test a failing post transform rejects with the raw input."""
        store = self.run("5", resolved(post_transform=lambda v: 1 / 0))
        assert store.accepted == {}
        assert store.rejected == {"f": "5"}


class TestSequenceAdapter:
    """Test the sequence adapter."""

    def run(self, value, options, definition=validate_num):
        store = ResultStore()
        SequenceAdapter().run(store, definition, "f", value, options)
        return store

    def test_canonizes_each_item(self, resolved):
        """Test each element is canonized into a new list."""
        data = ["1", 2, "3.5"]
        store = self.run(data, resolved())

        assert store.accepted == {"f": [1, 2, 3.5]}
        assert data == ["1", 2, "3.5"]

    def test_tuple_becomes_list(self, resolved):
        """Test tuples are accepted as lists."""
        assert self.run(("1",), resolved()).accepted == {"f": [1]}

    def test_short_circuit(self, resolved):
        """Test the first failing element rejects the whole field."""
        seen = []

        def tracking(value, options):
            seen.append(value)
            return validate_num(value, options)

        data = [1, 2, "bad", 4]
        store = self.run(data, resolved(strict=True), tracking)

        assert store.rejected == {"f": [1, 2, "bad", 4]}
        assert seen == [1, 2, "bad"]

    @pytest.mark.parametrize("value", ["123", b"12", {"a": 1}, 5])
    def test_non_sequences_rejected(self, resolved, value):
        """Test strings, mappings and scalars are not sequences."""
        assert self.run(value, resolved()).rejected == {"f": value}

    def test_item_transforms(self, resolved):
        """Test item transforms run per element."""
        options = resolved(pre_transform_item=str.strip, post_transform_item=lambda v: v * 10)
        assert self.run([" 1", "2 "], options).accepted == {"f": [10, 20]}

    def test_canonize_off_keeps_items(self, resolved):
        """Test elements are kept as given when canonize is off."""
        assert self.run(["1", "2"], resolved(canonize=False)).accepted == {"f": ["1", "2"]}

    def test_optional_container(self, resolved):
        """Test an optional None container stores the default."""
        assert self.run(None, resolved(optional=True, default_value=[])).accepted == {"f": []}

    def test_item_transform_failure(self, resolved):
        """Test a failing item transform rejects the raw list and stops iterating."""
        seen = []

        def tracking(value, options):
            seen.append(value)
            return validate_num(value, options)

        def explode_on_two(value):
            if value == 2:
                raise ValueError("no twos")
            return value

        data = ["1", "2", "3"]
        store = self.run(data, resolved(post_transform_item=explode_on_two), tracking)

        assert store.accepted == {}
        assert store.rejected == {"f": ["1", "2", "3"]}
        assert seen == ["1", "2"]

    def test_pre_item_transform_failure(self, resolved):
        """Test a failing pre-item transform rejects the raw list."""
        store = self.run([1, None], resolved(pre_transform_item=lambda v: v + 1))
        assert store.rejected == {"f": [1, None]}

    def test_post_transform_on_copy(self, resolved):
        """Test the whole-value post transform receives the canonized list."""
        assert self.run(["3", "1"], resolved(post_transform=sorted)).accepted == {"f": [1, 3]}


class TestMappingAdapter:
    """Test the mapping adapter."""

    def run(self, value, options, definition=validate_num):
        store = ResultStore()
        MappingAdapter().run(store, definition, "f", value, options)
        return store

    def test_short_circuit(self, resolved):
        """Test iteration stops at the first failing value."""
        seen = []

        def tracking(value, options):
            seen.append(value)
            return validate_num(value, options)

        data = {"a": 1, "b": "bad", "c": 3}
        store = self.run(data, resolved(), tracking)

        assert store.rejected == {"f": {"a": 1, "b": "bad", "c": 3}}
        assert seen == [1, "bad"]

    def test_item_transform_failure(self, resolved):
        """Test a failing post-item transform rejects the raw mapping and stops iterating."""
        seen = []

        def tracking(value, options):
            seen.append(value)
            return validate_num(value, options)

        def explode(value):
            raise KeyError(value)

        data = {"a": "1", "b": "2"}
        store = self.run(data, resolved(post_transform_item=explode), tracking)

        assert store.accepted == {}
        assert store.rejected == {"f": {"a": "1", "b": "2"}}
        assert seen == ["1"]

    def test_canonizes_values(self, resolved):
        """Test values are canonized and keys kept in order."""
        data = {"b": "2", "a": 1}
        store = self.run(data, resolved())

        assert store.accepted == {"f": {"b": 2, "a": 1}}
        assert list(store.accepted["f"]) == ["b", "a"]
        assert data == {"b": "2", "a": 1}

    def test_rejects_raw_mapping(self, resolved):
        """Test a failing value rejects the original mapping."""
        data = {"a": "1", "b": "x"}
        assert self.run(data, resolved()).rejected == {"f": {"a": "1", "b": "x"}}

    def test_sequence_is_not_mapping(self, resolved):
        """Test lists are rejected."""
        assert self.run([1], resolved()).rejected == {"f": [1]}
