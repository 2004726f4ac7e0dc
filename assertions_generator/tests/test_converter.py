#!/usr/bin/env python3

from collections.abc import Iterator, Sequence
from typing import Protocol

import pytest

from ..description import (
    ClassDescriptionError,
    ClassToClassDescriptionConverter,
    FieldDescription,
    GetterDescription,
    TypeName,
)
from .data.art_work import ArtWork
from .data.beans_with_exceptions import BeanWithDocumentedExceptions, BeanWithOneException, BeanWithTwoExceptions
from .data.lotr import FellowshipOfTheRing, TolkienCharacter
from .data.movie import Movie
from .data.nba import Player, PlayerAgent
from .data.nested_classes import OuterClass
from .data.team import Team
from .data.tree_enum import TreeEnum

NBA_MODULE = Player.__module__


@pytest.fixture
def converter():
    return ClassToClassDescriptionConverter()


class TestClassDescription:
    """Basic class information"""

    def test_should_build_player_description(self, converter):
        description = converter.convert(Player)

        assert description.class_name == "Player"
        assert description.class_name_with_outer_class == "Player"
        assert description.module_name == NBA_MODULE
        assert description.fully_qualified_name == f"{NBA_MODULE}.Player"
        assert description.super_type is None
        assert len(description.getters_descriptions) == 11
        assert len(description.fields_descriptions) == 0

    def test_player_getters(self, converter):
        description = converter.convert(Player)

        assert description.getters_descriptions.property_names() == [
            "name",
            "team",
            "size",
            "weight",
            "points",
            "assists",
            "rebounds",
            "previous_teams",
            "rookie",
            "highlights",
            "shirtNumber",
        ]

        name = description.getters_descriptions.get("name")
        assert name.accessor_name == "get_name"
        assert not name.is_property
        assert name.type_display(NBA_MODULE) == "Name"
        assert name.type_name == TypeName("Name", NBA_MODULE)
        assert not name.is_iterable_type
        assert not name.is_array_type
        assert name.element_type_name is None

        rookie = description.getters_descriptions.get("rookie")
        assert rookie.accessor_name == "is_rookie"
        assert rookie.is_boolean_type

        shirt_number = description.getters_descriptions.get("shirtNumber")
        assert shirt_number.accessor_name == "getShirtNumber"
        assert shirt_number.type_display() == "int"

    def test_player_collections(self, converter):
        description = converter.convert(Player)

        points = description.getters_descriptions.get("points")
        assert points.is_iterable_type
        assert not points.is_array_type
        assert points.type_display() == "list[int]"
        assert points.element_type_display() == "int"

        highlights = description.getters_descriptions.get("highlights")
        assert highlights.is_property
        assert highlights.accessor_name == "highlights"
        assert highlights.is_array_type
        assert not highlights.is_iterable_type
        assert highlights.type_display() == "tuple[str, ...]"
        assert highlights.element_type_display() == "str"

    def test_non_accessors_are_ignored(self, converter):
        names = converter.convert(Player).getters_descriptions.property_names()

        # Parameters, None returns, static and class methods, private members
        for excluded in ["stat", "nothing", "league", "roster_size", "contract"]:
            assert excluded not in names

    def test_should_build_interface_description(self, converter):
        description = converter.convert(PlayerAgent)

        assert description.class_name == "PlayerAgent"
        assert description.super_type is None
        assert len(description.getters_descriptions) == 1
        managed_player = description.getters_descriptions.get("managed_player")
        assert managed_player.type_display(NBA_MODULE) == "Player"
        assert managed_player.type_display("elsewhere") == f"{NBA_MODULE}.Player"

    def test_should_build_enum_description(self, converter):
        description = converter.convert(TreeEnum)

        assert description.class_name == "TreeEnum"
        assert len(description.getters_descriptions) == 1
        parent = description.getters_descriptions.get("parent")
        assert parent.is_iterable_type
        assert parent.element_type_name == TypeName.of_class(TreeEnum)
        assert parent.type_display(TreeEnum.__module__) == "TreeEnum | None"

    def test_should_build_fellowship_description(self, converter):
        description = converter.convert(FellowshipOfTheRing)

        assert len(description.getters_descriptions) == 1
        members = description.getters_descriptions.get("members")
        assert members.is_iterable_type
        assert members.element_type_name == TypeName.of_class(TolkienCharacter)
        assert members.element_type_display(TolkienCharacter.__module__) == "TolkienCharacter"


class TestFields:
    """Public field descriptions"""

    def test_should_build_team_fields(self, converter):
        description = converter.convert(Team)

        assert description.fields_descriptions.property_names() == [
            "name",
            "old_names",
            "west_coast",
            "rank",
            "players",
            "points",
            "victory_ratio",
        ]
        assert description.getters_descriptions.property_names() == ["division"]

    def test_team_field_types(self, converter):
        fields = converter.convert(Team).fields_descriptions

        assert fields.get("west_coast").is_boolean_type
        assert fields.get("victory_ratio").type_display() == "float"

        players = fields.get("players")
        assert players.is_iterable_type
        assert players.element_type_display(NBA_MODULE) == "Player"

        points = fields.get("points")
        assert points.is_array_type
        assert points.element_type_display() == "int"

    def test_private_and_class_level_fields_are_ignored(self, converter):
        names = converter.convert(Team).fields_descriptions.property_names()

        assert "_playbook" not in names
        assert "MAX_PLAYERS" not in names

    def test_field_descriptions_are_field_nodes(self, converter):
        description = converter.convert(Team)

        assert all(isinstance(f, FieldDescription) for f in description.fields_descriptions)
        assert all(isinstance(g, GetterDescription) for g in description.getters_descriptions)


class TestInheritance:
    """Inherited and declared properties"""

    def test_should_build_movie_description(self, converter):
        description = converter.convert(Movie)

        assert description.class_name == "Movie"
        assert description.super_type == TypeName.of_class(ArtWork)
        assert len(description.getters_descriptions) == 3
        assert len(description.fields_descriptions) == 4
        assert len(description.declared_getters_descriptions) == 2
        assert len(description.declared_fields_descriptions) == 3

    def test_declared_properties_are_own_members(self, converter):
        description = converter.convert(Movie)

        assert set(description.declared_getters_descriptions.property_names()) == {"running_minutes", "colored"}
        assert set(description.declared_fields_descriptions.property_names()) == {"duration", "producer", "cast"}
        assert "release_date" in description.getters_descriptions.property_names()
        assert "title" in description.fields_descriptions.property_names()

    def test_art_work_is_not_an_interface(self, converter):
        description = converter.convert(ArtWork)

        assert description.super_type is None
        assert description.getters_descriptions.property_names() == ["release_date"]
        assert description.fields_descriptions.property_names() == ["title"]
        assert description.getters_descriptions == description.declared_getters_descriptions

    def test_overriding_getter_is_described_once(self, converter):
        class Base:
            def get_value(self) -> int:
                return 1

        class Derived(Base):
            def get_value(self) -> bool:
                return True

        description = converter.convert(Derived)

        assert len(description.getters_descriptions) == 1
        assert description.getters_descriptions.get("value").is_boolean_type
        assert description.super_type == TypeName.of_class(Base)

    def test_interface_bases_are_not_super_types(self, converter):
        class Agent(PlayerAgent):
            def get_managed_player(self) -> Player:
                return Player(None, "Lakers")

        description = converter.convert(Agent)

        assert description.super_type is None
        assert description.declared_getters_descriptions.property_names() == ["managed_player"]

    def test_covariant_override_of_protocol_getter(self, converter):
        class Listing(Protocol):
            def get_my_list(self) -> Sequence[str]: ...

        class SortedListing(Listing):
            def get_my_list(self) -> list[str]:
                return []

        description = converter.convert(SortedListing)

        assert description.getters_descriptions.property_names() == ["my_list"]
        my_list = description.getters_descriptions.get("my_list")
        assert my_list.type_display() == "list[str]"
        assert my_list.element_type_display() == "str"

    def test_getter_reachable_through_two_protocols(self, converter):
        class Named(Protocol):
            def get_name(self) -> str: ...

        class Titled(Named, Protocol):
            def get_title(self) -> str: ...

        class Labelled(Named, Protocol):
            def get_label(self) -> str: ...

        class Badge(Titled, Labelled):
            def get_label(self) -> str:
                return "gold"

        description = converter.convert(Badge)

        assert description.super_type is None
        assert sorted(description.getters_descriptions.property_names()) == ["label", "name", "title"]
        assert description.getters_descriptions.property_names().count("name") == 1
        assert description.declared_getters_descriptions.property_names() == ["label"]


class TestNestedClasses:
    """Names of nested classes"""

    @pytest.mark.parametrize(
        "cls, class_name, with_outer_class, not_separated",
        [
            (
                OuterClass.StaticNestedPerson,
                "StaticNestedPerson",
                "OuterClass.StaticNestedPerson",
                "OuterClassStaticNestedPerson",
            ),
            (OuterClass.InnerPerson, "InnerPerson", "OuterClass.InnerPerson", "OuterClassInnerPerson"),
            (
                OuterClass.InnerPerson.IPInnerPerson,
                "IPInnerPerson",
                "OuterClass.InnerPerson.IPInnerPerson",
                "OuterClassInnerPersonIPInnerPerson",
            ),
        ],
    )
    def test_nested_class_names(self, converter, cls, class_name, with_outer_class, not_separated):
        description = converter.convert(cls)

        assert description.class_name == class_name
        assert description.class_name_with_outer_class == with_outer_class
        assert description.class_name_with_outer_class_not_separated_by_dots == not_separated
        assert description.fully_qualified_name == f"{OuterClass.__module__}.{with_outer_class}"
        assert len(description.getters_descriptions) == 1

    def test_local_class_is_named_as_top_level(self, converter):
        class Local:
            pass

        description = converter.convert(Local)

        assert description.class_name_with_outer_class == "Local"
        assert description.module_name == __name__

    @pytest.mark.parametrize("name, expected", [("", "AnonymousClass"), ("My Class!", "My_Class"), ("2D", "_2D")])
    def test_invalid_class_names_are_sanitized(self, converter, name, expected):
        description = converter.convert(type(name, (), {}))

        assert description.class_name == expected
        assert description.class_name_with_outer_class == expected


class TestExceptions:
    """Exceptions declared by accessors"""

    @pytest.mark.parametrize(
        "cls, expected",
        [
            (BeanWithOneException, [TypeName("OSError", "builtins")]),
            (BeanWithTwoExceptions, [TypeName("OSError", "builtins"), TypeName("KeyError", "builtins")]),
        ],
    )
    def test_declared_exceptions(self, converter, cls, expected):
        description = converter.convert(cls)

        assert len(description.getters_descriptions) == 4
        for getter in description.getters_descriptions:
            assert list(getter.exceptions) == expected, getter.property_name

    def test_bean_property_kinds(self, converter):
        getters = converter.convert(BeanWithOneException).getters_descriptions

        assert getters.get("booleanProperty") is None
        assert getters.get("boolean_property").is_boolean_type
        assert getters.get("array_property").is_array_type
        assert getters.get("iterable_property").is_iterable_type
        assert getters.get("iterable_property").is_property

    def test_docstring_exceptions(self, converter):
        getters = converter.convert(BeanWithDocumentedExceptions).getters_descriptions

        assert list(getters.get("string_property").exceptions) == [
            TypeName("OSError", "builtins"),
            TypeName("LookupError", "builtins"),
        ]
        assert getters.get("plain_property").exceptions == ()

    def test_overriding_getter_exceptions_win(self, converter):
        from ..markers import raises

        class Reader:
            @raises(OSError)
            def get_content(self) -> str:
                return ""

        class CachedReader(Reader):
            @raises(KeyError)
            def get_content(self) -> str:
                return ""

        getter = converter.convert(CachedReader).getters_descriptions.get("content")

        assert list(getter.exceptions) == [TypeName("KeyError", "builtins")]


class TestTypes:
    """Types of described properties"""

    def test_nested_tuples(self, converter):
        class Matrix:
            def get_cells(self) -> tuple[tuple[int, ...], ...]:
                return ((1,),)

            def get_rows(self) -> list[tuple[int, ...]]:
                return [(1,)]

        getters = converter.convert(Matrix).getters_descriptions

        cells = getters.get("cells")
        assert cells.is_array_type
        assert cells.type_display() == "tuple[tuple[int, ...], ...]"
        assert cells.element_type_display() == "tuple[int, ...]"

        rows = getters.get("rows")
        assert rows.is_iterable_type
        assert rows.type_display() == "list[tuple[int, ...]]"
        assert rows.element_type_display() == "tuple[int, ...]"

    def test_array_of_classes_from_another_module(self, converter):
        class Bench:
            def get_players(self) -> tuple[Player, ...]:
                return ()

        players = converter.convert(Bench).getters_descriptions.get("players")

        assert players.type_display(__name__) == f"tuple[{NBA_MODULE}.Player, ...]"
        assert players.element_type_display(NBA_MODULE) == "Player"

    def test_iterable_exception_chain(self, converter):
        class ChainedError(Exception):
            def __init__(self, *causes):
                super().__init__()
                self._causes = list(causes)

            def __iter__(self):
                return iter(self._causes)

        class DatabaseError(ChainedError):
            def get_exception_chain(self) -> ChainedError:
                return self

            def get_next(self) -> "DatabaseError":
                return self

        description = converter.convert(DatabaseError)
        chain = description.getters_descriptions.get("exception_chain")

        assert chain.is_iterable_type
        assert chain.element_type_display() == "object"
        assert description.super_type == TypeName.of_class(ChainedError)

    def test_iterator_annotation_gives_element_type(self, converter):
        class Causes(Exception):
            def __iter__(self) -> Iterator[OSError]:
                return iter(())

        class Failure:
            def get_causes(self) -> Causes:
                return Causes()

        causes = converter.convert(Failure).getters_descriptions.get("causes")

        assert causes.is_iterable_type
        assert causes.element_type_name == TypeName("OSError", "builtins")

    def test_missing_return_annotation_is_any(self, converter):
        class Untyped:
            def get_value(self):
                return 1

        value = converter.convert(Untyped).getters_descriptions.get("value")

        assert value.type_name == TypeName("Any", "typing")
        assert not value.is_iterable_type

    def test_unresolvable_annotation_is_kept_as_text(self, converter):
        class Ghost:
            def get_shadow(self) -> "UndefinedShadow":  # noqa: F821
                return None

        shadow = converter.convert(Ghost).getters_descriptions.get("shadow")

        assert shadow.type_display() == "UndefinedShadow"
        assert not shadow.is_iterable_type
        assert not shadow.is_array_type


class TestConverterContract:
    """Conversion is deterministic and only accepts classes"""

    def test_conversion_is_deterministic(self, converter):
        assert converter.convert(Team) == converter.convert(Team)
        assert hash(converter.convert(Movie)) == hash(converter.convert(Movie))

    def test_str_contains_fully_qualified_name(self, converter):
        assert str(converter.convert(Player)) == f"ClassDescription[{NBA_MODULE}.Player]"

    @pytest.mark.parametrize("not_a_class", [None, 42, "Player", list[int], Player(None, "Lakers")])
    def test_rejects_non_classes(self, converter, not_a_class):
        with pytest.raises(ClassDescriptionError):
            converter.convert(not_a_class)


if __name__ == "__main__":
    pytest.main([__file__])
