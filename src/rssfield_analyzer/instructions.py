"""Turn a finalized mapping into per-slot XPath extraction instructions.

An ingestion pass can evaluate the generated expressions directly against
each ``item``/``entry`` element with lxml, without re-running the analysis.
"""

from dataclasses import dataclass

from lxml import etree

from rssfield_analyzer.exceptions import MissingMappingError
from rssfield_analyzer.extractor import (
    NAMESPACE_URIS,
    NAMESPACED_FIELDS,
    extract_images_from_html,
)
from rssfield_analyzer.models import MAPPING_SLOTS, Mappings

REQUIRED_SLOTS = ("title", "link", "description", "date")

FIRST_IMAGE = "first_image"

_UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ:"
_LOWER = "abcdefghijklmnopqrstuvwxyz_"
_EXTENSION_NAMESPACES = " or ".join(
    f"namespace-uri()='{NAMESPACE_URIS[prefix]}'" for prefix in ("content", "media", "itunes")
)


@dataclass(frozen=True)
class ParsingInstruction:
    """How to read one schema slot from an item element."""

    slot: str
    source_field: str
    xpath: str
    transform: str | None = None

    def to_dict(self) -> dict:
        return {
            "slot": self.slot,
            "source_field": self.source_field,
            "xpath": self.xpath,
            "transform": self.transform,
        }


def _namespaced_step(prefix: str, name: str) -> str:
    uri = NAMESPACE_URIS[prefix]
    return (
        f".//*[name()='{prefix}:{name}' or "
        f"(local-name()='{name}' and namespace-uri()='{uri}')]"
    )


def element_path(field_name: str) -> str:
    """XPath selecting the elements a discovered field was read from."""
    for name, prefix, local in NAMESPACED_FIELDS:
        if name == field_name:
            if prefix is None:
                return f".//*[local-name()='{local}']"
            return _namespaced_step(prefix, local)

    if field_name.startswith("auto_"):
        tag = field_name[len("auto_"):]
        return f".//*[translate(name(), '{_UPPER}', '{_LOWER}')='{tag}']"

    return f"*[local-name()='{field_name}' and not({_EXTENSION_NAMESPACES})]"


def _text_instruction(slot: str, field_name: str) -> ParsingInstruction:
    return ParsingInstruction(
        slot=slot,
        source_field=field_name,
        xpath=f"string(({element_path(field_name)})[1])",
    )


def _link_instruction(field_name: str) -> ParsingInstruction:
    first = f"({element_path(field_name)})[1]"
    return ParsingInstruction(
        slot="link",
        source_field=field_name,
        xpath=f"string(({first}/@href | {first}/text())[1])",
    )


def _image_instruction(mappings: Mappings) -> ParsingInstruction | None:
    image = mappings.get("image")
    if image is None:
        return None

    if image.kind == "media":
        xpath = f"string(({element_path(image.field)})[1]/@url)"
        return ParsingInstruction("image", image.field, xpath)

    if image.kind == "enclosure":
        xpath = "string((.//*[local-name()='enclosure'][starts-with(@type, 'image')])[1]/@url)"
        return ParsingInstruction("image", image.field, xpath)

    if image.kind == "itunes":
        xpath = f"string(({_namespaced_step('itunes', 'image')})[1]/@href)"
        return ParsingInstruction("image", image.field, xpath)

    if image.kind == "html_extraction":
        body = mappings.get("content") or mappings.get("description")
        if body is None:
            return None
        xpath = f"string(({element_path(body.field)})[1])"
        return ParsingInstruction("image", body.field, xpath, transform=FIRST_IMAGE)

    return None


def generate_parsing_instructions(mappings: Mappings) -> dict[str, ParsingInstruction | None]:
    """Build one extraction instruction per mapped schema slot.

    Raises:
        MissingMappingError: If title, link, description or date is unmapped.
    """
    missing = [slot for slot in REQUIRED_SLOTS if mappings.get(slot) is None]
    if missing:
        raise MissingMappingError(missing)

    instructions: dict[str, ParsingInstruction | None] = {}
    for slot in MAPPING_SLOTS:
        mapping = mappings.get(slot)
        if slot == "image":
            instructions[slot] = _image_instruction(mappings)
        elif mapping is None:
            instructions[slot] = None
        elif slot == "link":
            instructions[slot] = _link_instruction(mapping.field)
        else:
            instructions[slot] = _text_instruction(slot, mapping.field)
    return instructions


def apply_instructions(
    item: etree._Element,
    instructions: dict[str, ParsingInstruction | None],
) -> dict[str, str | None]:
    """Evaluate parsing instructions against one item element."""
    values: dict[str, str | None] = {}
    for slot, instruction in instructions.items():
        if instruction is None:
            values[slot] = None
            continue

        value = str(item.xpath(instruction.xpath)).strip()
        if instruction.transform == FIRST_IMAGE:
            images = extract_images_from_html(value)
            value = images[0]["src"] if images else ""
        values[slot] = value or None
    return values
