"""
Attribute Extractor — Node attributes to AttributeRecord

All knowledge of raw attribute names lives in one alias table. Builders
only ever see semantic fields.

Matching is exact and case-sensitive: ``launcher:spanX`` is recognized,
``launcher:spanx`` is ignored. Unknown attributes are ignored.

Usage:
    record = extract_attributes(token.attributes)
    record.package_name   # value of launcher:packageName, or None
"""

from typing import Dict, Mapping

from .records import AttributeRecord, Container


DEFAULT_NAMESPACE = "launcher"

# Local attribute name -> AttributeRecord field
ATTRIBUTE_ALIASES: Dict[str, str] = {
    "screen": "screen",
    "x": "cell_x",
    "y": "cell_y",
    "packageName": "package_name",
    "className": "class_name",
    "spanX": "span_x",
    "spanY": "span_y",
    "title": "title",
}

# Localized titles are labeled title_<lang> (title_fr, title_de, ...)
LOCALIZED_TITLE_PREFIX = "title_"


def build_alias_table(namespace: str = DEFAULT_NAMESPACE) -> Dict[str, str]:
    """Qualify every alias with ``namespace:``."""
    return {f"{namespace}:{local}": key for local, key in ATTRIBUTE_ALIASES.items()}


_DEFAULT_TABLE = build_alias_table()


def extract_attributes(
    attributes: Mapping[str, str],
    namespace: str = DEFAULT_NAMESPACE,
    container: int = Container.DESKTOP,
) -> AttributeRecord:
    """
    Build a fresh AttributeRecord from one node's attributes.

    Pure function: no I/O, the input mapping is not modified.

    Args:
        attributes: Raw attribute name -> value, as produced by the reader
        namespace: Attribute prefix the document uses
        container: Container stamped on the record (callers may overwrite)

    Returns:
        AttributeRecord with recognized values filled in
    """
    table = _DEFAULT_TABLE if namespace == DEFAULT_NAMESPACE else build_alias_table(namespace)
    localized_prefix = f"{namespace}:{LOCALIZED_TITLE_PREFIX}"

    record = AttributeRecord(container=container)
    for name, value in attributes.items():
        key = table.get(name)
        if key is not None:
            setattr(record, key, value)
        elif name.startswith(localized_prefix):
            language = name[len(localized_prefix):]
            if language:
                record.titles_localized[language] = value
    return record
