"""
Deterministic label and GraphQL name derivation for lists.

Every name is a pure function of the list key and the optional overrides
given in the list config. Names are computed once when a list is created.
"""

import re
from dataclasses import asdict, dataclass
from typing import Any, Optional

import inflection
from django.utils.text import capfirst, slugify

from .exceptions import ListConfigurationError

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_WORD_SEPARATORS = re.compile(r"[\s_\-]")


def _inflect_last_word(label: str, inflect) -> str:
    head, separator, last = label.rpartition(" ")
    return f"{head}{separator}{inflect(last)}"


def pluralize(label: str) -> str:
    """Pluralize the last word of ``label`` (``Blog Post`` becomes ``Blog Posts``)."""
    return _inflect_last_word(label, inflection.pluralize)


def singularize(label: str) -> str:
    return _inflect_last_word(label, inflection.singularize)


def prevent_invalid_underscore_prefix(name: str) -> str:
    """GraphQL reserves the ``__`` prefix for introspection."""
    return re.sub(r"^__", "_", name)


def key_to_label(key: str) -> str:
    """
    Convert a list key into a human label.

    ``BlogPost`` becomes ``Blog Post``; the leading underscore of an
    auxiliary list key is kept (``_Tag_posts`` becomes ``_Tag Posts``).
    """
    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", key)
    words = [capfirst(word) for word in _WORD_SEPARATORS.split(spaced) if word]
    label = " ".join(words)
    if key.startswith("_"):
        label = f"_{label}"
    return label


def label_to_path(label: str) -> str:
    return slugify(label)


def label_to_class(label: str) -> str:
    return re.sub(r"\s+", "", label)


@dataclass(frozen=True)
class GraphQLNames:
    """Every GraphQL type, input and operation name emitted for one list."""

    output_type_name: str
    item_query_name: str
    list_query_name: str
    list_query_meta_name: str
    list_meta_name: str
    delete_mutation_name: str
    update_mutation_name: str
    create_mutation_name: str
    delete_many_mutation_name: str
    update_many_mutation_name: str
    create_many_mutation_name: str
    where_input_name: str
    where_unique_input_name: str
    update_input_name: str
    create_input_name: str
    update_many_input_name: str
    create_many_input_name: str
    relate_to_many_input_name: str
    relate_to_one_input_name: str

    @classmethod
    def build(cls, key: str, item_name: str, list_name: str) -> "GraphQLNames":
        return cls(
            output_type_name=key,
            item_query_name=item_name,
            list_query_name=f"all{list_name}",
            list_query_meta_name=f"_all{list_name}Meta",
            list_meta_name=prevent_invalid_underscore_prefix(f"_{list_name}Meta"),
            delete_mutation_name=f"delete{item_name}",
            update_mutation_name=f"update{item_name}",
            create_mutation_name=f"create{item_name}",
            delete_many_mutation_name=f"deleteMany{list_name}",
            update_many_mutation_name=f"updateMany{list_name}",
            create_many_mutation_name=f"createMany{list_name}",
            where_input_name=f"{item_name}WhereInput",
            where_unique_input_name=f"{item_name}WhereUniqueInput",
            update_input_name=f"{item_name}UpdateInput",
            create_input_name=f"{item_name}CreateInput",
            update_many_input_name=f"{list_name}UpdateInput",
            create_many_input_name=f"{list_name}CreateInput",
            relate_to_many_input_name=f"{item_name}RelateToManyInput",
            relate_to_one_input_name=f"{item_name}RelateToOneInput",
        )

    def as_dict(self) -> dict[str, str]:
        """camelCase mapping used in admin metadata."""
        return {_to_camel(name): value for name, value in asdict(self).items()}


def _to_camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)


def derive_list_names(
    key: str,
    *,
    label: Optional[str] = None,
    singular: Optional[str] = None,
    plural: Optional[str] = None,
    path: Optional[str] = None,
    item_query_name: Optional[str] = None,
    list_query_name: Optional[str] = None,
) -> tuple[dict[str, Any], GraphQLNames]:
    """
    Derive admin labels and GraphQL names for a list.

    Returns:
        Tuple of (admin_ui_labels, GraphQLNames)

    Raises:
        ListConfigurationError: If the key pluralizes ambiguously and no
            override disambiguates it, or the item and list names collide.
    """
    derived_label = key_to_label(key)
    derived_singular = singularize(derived_label)
    derived_plural = pluralize(derived_label)

    ambiguous = derived_plural == derived_label or derived_singular == derived_plural
    if ambiguous and not (plural or list_query_name):
        raise ListConfigurationError(
            f"Unable to use {derived_label} as a List name - it has an ambiguous "
            f"plural ({derived_plural}). Please choose another name for your list.",
            list_key=key,
        )

    admin_ui_labels = {
        "label": label or plural or derived_plural,
        "singular": singular or derived_singular,
        "plural": plural or derived_plural,
        "path": path or label_to_path(plural or derived_plural),
    }

    item_name = item_query_name or label_to_class(singular or derived_singular)
    list_name = list_query_name or label_to_class(plural or derived_plural)
    if item_name == list_name:
        raise ListConfigurationError(
            f"The item query name and list query name of the {key} list are both "
            f"'{item_name}'. Set 'item_query_name' or 'list_query_name' to tell them apart.",
            list_key=key,
        )

    return admin_ui_labels, GraphQLNames.build(key, item_name, list_name)
