"""Unit tests for the raw_bind -> derive_masked_fields -> commit_bind pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from micro_orm.mapping.builder import mapper
from micro_orm.mapping.hydrator import commit_bind, derive_masked_fields, hydrate, raw_bind
from micro_orm.mapping.plan import do_not_update


@dataclass
class Contact:
    id: Any = None
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""


def _full_name(value: Any, instance: Contact) -> str:
    return f"{instance.first_name} {instance.last_name}"


class TestRawBind:
    def test_binds_direct_columns(self) -> None:
        contact_map = mapper(Contact, "contacts").build()
        instance, data = raw_bind(contact_map, {"id": 1, "first_name": "Ann", "other": "x"})
        assert instance == Contact(id=1, first_name="Ann")
        assert data == {"id": 1, "first_name": "Ann", "other": "x"}

    def test_alias_overrides_property_column(self) -> None:
        contact_map = mapper(Contact, "contacts").alias("id", "contact_id").build()
        instance, data = raw_bind(contact_map, {"id": 99, "contact_id": 5})
        assert instance.id == 5
        assert data["id"] == 5

    def test_absent_alias_is_skipped(self) -> None:
        contact_map = mapper(Contact, "contacts").alias("id", "contact_id").build()
        instance, _ = raw_bind(contact_map, {"id": 99})
        assert instance.id == 99

    def test_row_is_not_mutated(self) -> None:
        contact_map = mapper(Contact, "contacts").alias("id", "contact_id").build()
        row = {"contact_id": 5}
        raw_bind(contact_map, row)
        assert row == {"contact_id": 5}


class TestDeriveMaskedFields:
    def test_mask_sees_bound_siblings(self) -> None:
        contact_map = (
            mapper(Contact, "contacts")
            .field("full_name", select_mask=_full_name, update_mask=do_not_update)
            .build()
        )
        instance, data = raw_bind(contact_map, {"first_name": "Ann", "last_name": "Lee"})
        derived = derive_masked_fields(contact_map, data, instance)
        assert derived == {"full_name": "Ann Lee"}
        # Not committed yet
        assert instance.full_name == ""

    def test_missing_column_reaches_mask_as_empty_string(self) -> None:
        seen: list[Any] = []

        def record(value: Any, instance: Any) -> Any:
            seen.append(value)
            return value

        contact_map = mapper(Contact, "contacts").field("last_name", "surname", select_mask=record)
        built = contact_map.build()
        instance, data = raw_bind(built, {"id": 1})
        assert derive_masked_fields(built, data, instance) == {"last_name": ""}
        assert seen == [""]

    def test_null_column_reaches_mask_as_empty_string(self) -> None:
        seen: list[Any] = []

        def shout(value: Any, instance: Any) -> Any:
            seen.append(value)
            return value.upper()

        built = mapper(Contact, "contacts").field("last_name", "surname", select_mask=shout).build()
        instance, data = raw_bind(built, {"id": 1, "surname": None})
        assert derive_masked_fields(built, data, instance) == {"last_name": ""}
        assert seen == [""]

    def test_reads_source_column(self) -> None:
        contact_map = mapper(Contact, "contacts").field("last_name", "surname").build()
        instance, data = raw_bind(contact_map, {"surname": "Lee"})
        assert derive_masked_fields(contact_map, data, instance) == {"last_name": "Lee"}


class TestCommitBind:
    def test_commits_derived_values(self) -> None:
        instance = Contact(first_name="Ann")
        commit_bind({"first_name": "Ann"}, {"full_name": "Ann X"}, instance)
        assert instance.full_name == "Ann X"

    def test_no_derived_values_is_noop(self) -> None:
        instance = Contact(first_name="Ann")
        commit_bind({"first_name": "Other"}, {}, instance)
        assert instance.first_name == "Ann"


class TestHydrate:
    def test_full_pipeline(self) -> None:
        contact_map = (
            mapper(Contact, "contacts")
            .field("full_name", select_mask=_full_name, update_mask=do_not_update)
            .field("last_name", "surname")
            .build()
        )
        contact = hydrate(contact_map, {"id": 2, "first_name": "Ann", "surname": "Lee"})
        assert contact.last_name == "Lee"
        # full_name was derived before last_name was committed from "surname"
        assert contact.full_name == "Ann "
        assert contact.id == 2
