"""
Assertion generator.

Renders ClassDescription values into Python assertion modules with jinja2
templates: one ``<class>_assert.py`` module per class and an entry point
module exposing ``assert_that``.
"""

from __future__ import annotations

import collections
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2

from .. import __version__
from ..cli_utils import PROGRAM_NAME, reconstruct_command_line
from ..description import ClassDescription, FieldDescription, GetterDescription, TypeName
from ..utils import to_snake_case
from .config import GeneratorConfig

logger = logging.getLogger(__name__)

CURRENT_DIR = Path(__file__).parent.parent
TEMPLATES_DIR = CURRENT_DIR / "templates" / "python"

RUNTIME_MODULE = "assertions_generator.runtime"
RUNTIME_BASE_CLASS = "AbstractAssert"


@dataclass(frozen=True)
class GeneratedFile:
    """A rendered module and the file name it should be written to."""

    file_name: str
    content: str


def assert_class_name(description: ClassDescription) -> str:
    return f"{description.class_name_with_outer_class_not_separated_by_dots}Assert"


def assert_module_name(description: ClassDescription) -> str:
    return f"{to_snake_case(description.class_name_with_outer_class_not_separated_by_dots)}_assert"


class AssertionGenerator:
    """Generates assertion modules from class descriptions."""

    def __init__(self, config: GeneratorConfig | None = None):
        self.config = config or GeneratorConfig()
        self.jinja_env = jinja2.Environment(lstrip_blocks=True, trim_blocks=True, keep_trailing_newline=True)

        self.prefix = self.jinja_env.from_string(self._read_template("prefix.py.jinja2"))
        self.class_model = self.jinja_env.from_string(self._read_template("class.py.jinja2"))
        self.entry_point = self.jinja_env.from_string(self._read_template("entry_point.py.jinja2"))

    def _read_template(self, name: str) -> str:
        if self.config.templates_dir:
            override = Path(self.config.templates_dir) / name
            if override.exists():
                logger.debug("Using template override %s", override)
                return override.read_text(encoding="utf-8")
        return (TEMPLATES_DIR / name).read_text(encoding="utf-8")

    def _generate_command_comment(self) -> str:
        """Generate a simplified command line comment for the generated files"""
        if not self.config.add_generation_comment:
            return ""

        try:
            from .. import assertions_generator as cli_module  # noqa

            command_line = reconstruct_command_line(cli_module.assertions_generator)
        except (ImportError, AttributeError):
            command_line = PROGRAM_NAME

        return f"# Generated by {PROGRAM_NAME} v{__version__} : {command_line}"

    def generate(self, descriptions: list[ClassDescription]) -> list[GeneratedFile]:
        """Render the assertion modules for all descriptions, plus the entry point."""
        by_type = {description.type_name: description for description in descriptions}
        files = [
            GeneratedFile(f"{assert_module_name(description)}.py", self.generate_class(description, by_type))
            for description in descriptions
        ]
        if self.config.generate_entry_point and descriptions:
            files.append(
                GeneratedFile(f"{self.config.entry_point_module}.py", self.generate_entry_point(descriptions))
            )
        return files

    def generate_class(
        self,
        description: ClassDescription,
        generated: dict[TypeName, ClassDescription] | None = None,
    ) -> str:
        """
        Render the assertion module of one class.

        Args:
            description: The class to generate assertions for
            generated: Descriptions generated in the same run, by type name. In
                hierarchical mode the assertion class extends the one of its
                super type when the super type is among them.

        Returns:
            Python source code
        """
        generated = generated or {}
        parent = generated.get(description.super_type) if description.super_type is not None else None
        hierarchical = self.config.hierarchical and parent is not None

        if hierarchical:
            getters = description.declared_getters_descriptions
            fields = description.declared_fields_descriptions
        else:
            getters = description.getters_descriptions
            fields = description.fields_descriptions

        module = description.module_name
        properties = self._properties(list(getters), list(fields), module)

        imports = collections.defaultdict(set)
        imports[module].add(description.class_name_with_outer_class.split(".", 1)[0])
        imports["typing"].add("Self")
        module_imports: set[str] = set()
        for prop in [*getters, *fields]:
            for type_name in (prop.type_name, prop.element_type_name):
                if type_name is None:
                    continue
                for ref_module, top_level_name in type_name.iter_references():
                    if ref_module == module:
                        imports[module].add(top_level_name)
                    else:
                        module_imports.add(ref_module)

        if hierarchical:
            base_class = assert_class_name(parent)
            relative_imports = {f".{assert_module_name(parent)}": {base_class}}
        else:
            base_class = f"{RUNTIME_BASE_CLASS}[{description.class_name_with_outer_class}]"
            imports[RUNTIME_MODULE].add(RUNTIME_BASE_CLASS)
            relative_imports = {}

        prefix = self.prefix.render(
            generation_comment=self._generate_command_comment(),
            module_imports=sorted(module_imports),
            from_imports=self._assemble_from_imports(imports),
            relative_imports=self._assemble_from_imports(relative_imports),
        )
        body = self.class_model.render(
            class_name=description.class_name_with_outer_class,
            fully_qualified_name=description.fully_qualified_name,
            assert_class_name=assert_class_name(description),
            base_class=base_class,
            properties=properties,
        )
        return prefix + "\n\n" + body

    def generate_entry_point(self, descriptions: list[ClassDescription]) -> str:
        """Render the module registering every generated assertion class with assert_that()."""
        imports = collections.defaultdict(set)
        imports[RUNTIME_MODULE].add(RUNTIME_BASE_CLASS)
        relative_imports = collections.defaultdict(set)
        registrations = []
        for description in descriptions:
            imports[description.module_name].add(description.class_name_with_outer_class.split(".", 1)[0])
            relative_imports[f".{assert_module_name(description)}"].add(assert_class_name(description))
            registrations.append((description.class_name_with_outer_class, assert_class_name(description)))

        prefix = self.prefix.render(
            generation_comment=self._generate_command_comment(),
            module_imports=["functools"],
            from_imports=self._assemble_from_imports(imports),
            relative_imports=self._assemble_from_imports(relative_imports),
        )
        return prefix + "\n\n" + self.entry_point.render(registrations=registrations)

    def _properties(
        self,
        getters: list[GetterDescription],
        fields: list[FieldDescription],
        module: str,
    ) -> list[dict[str, Any]]:
        """Template context for each property; fields already covered by a getter are dropped."""
        properties = []
        method_names = set()
        for prop in [*getters, *fields]:
            method_name = to_snake_case(prop.property_name)
            if method_name in method_names:
                continue
            method_names.add(method_name)
            if isinstance(prop, GetterDescription):
                access = prop.accessor_name if prop.is_property else f"{prop.accessor_name}()"
                exceptions = [exception.display(module) for exception in prop.exceptions]
            else:
                access = prop.name
                exceptions = []
            properties.append(
                {
                    "name": prop.property_name,
                    "method_name": method_name,
                    "access": access,
                    "type": prop.type_display(module),
                    "element_type": prop.element_type_display(module),
                    "is_boolean": prop.is_boolean_type,
                    "is_iterable": prop.is_iterable_type,
                    "is_array": prop.is_array_type,
                    "exceptions": exceptions,
                }
            )
        return properties

    @staticmethod
    def _assemble_from_imports(imports: dict[str, set[str]]) -> list[str]:
        """Assemble ``from module import a, b`` statements sorted by module"""
        assembled = []
        for module in sorted(imports):
            names = sorted(imports[module])
            assembled.append(f"from {module} import {', '.join(names)}")
        return assembled
