# === NAVMAP v1 ===
# {
#   "module": "DocsToApi.EventFunctions.exporters",
#   "purpose": "Serialise the event-function catalog as XML or JSON.",
#   "sections": [
#     {
#       "id": "catalog-to-xml",
#       "name": "catalog_to_xml",
#       "anchor": "function-catalog-to-xml",
#       "kind": "function"
#     },
#     {
#       "id": "catalog-to-dict",
#       "name": "catalog_to_dict",
#       "anchor": "function-catalog-to-dict",
#       "kind": "function"
#     },
#     {
#       "id": "write-catalog",
#       "name": "write_catalog",
#       "anchor": "function-write-catalog",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Catalog exporters.

Both formats describe the same tree::

    api (minimumVersion, maximumVersion)
      type (kind, name, ns, path, minimumVersion, maximumVersion)
        message (name)
          signature (minimumVersion, maximumVersion, static, coroutine, description, path)
            returns (type, array, byRef)
            parameters
              parameter (name, type, array, byRef, description)

XML is written with lxml; JSON mirrors the element names with nested objects
and lists.
"""

from __future__ import annotations

import json
from typing import Any, BinaryIO, Dict, List, Optional

from lxml import etree
from packaging.version import Version

from .model import ApiCatalog, ApiType, EventFunction, Shape
from .nodes import strip_xml_incompatible
from .parameters import Parameter
from .settings import OutputFormat
from .typenames import TypeName

__all__ = ["catalog_to_dict", "catalog_to_xml", "write_catalog"]


def _version(value: Optional[Version]) -> str:
    return str(value) if value is not None else ""


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _type_fields(type_name: TypeName) -> Dict[str, Any]:
    return {"type": type_name.name, "array": type_name.is_array, "byRef": type_name.is_by_ref}


def _parameter_dict(parameter: Parameter) -> Dict[str, Any]:
    fields = {"name": parameter.name}
    fields.update(_type_fields(parameter.type))
    fields["description"] = parameter.description
    return fields


def _shape_dict(shape: Shape) -> Dict[str, Any]:
    return {
        "minimumVersion": _version(shape.min_version),
        "maximumVersion": _version(shape.max_version),
        "static": shape.is_static,
        "coroutine": shape.is_coroutine,
        "description": shape.description,
        "path": shape.doc_path,
        "returns": _type_fields(shape.return_type),
        "parameters": [_parameter_dict(p) for p in shape.parameters],
    }


def _function_dict(function: EventFunction) -> Dict[str, Any]:
    return {"name": function.name, "signatures": [_shape_dict(s) for s in function.shapes]}


def _type_dict(api_type: ApiType) -> Dict[str, Any]:
    return {
        "kind": api_type.kind,
        "name": api_type.name,
        "ns": api_type.namespace,
        "path": api_type.path,
        "minimumVersion": _version(api_type.min_version),
        "maximumVersion": _version(api_type.max_version),
        "messages": [_function_dict(f) for f in api_type],
    }


def catalog_to_dict(catalog: ApiCatalog) -> Dict[str, Any]:
    """Return the JSON-ready representation of ``catalog``."""

    types: List[Dict[str, Any]] = [_type_dict(t) for t in catalog.types]
    return {
        "minimumVersion": _version(catalog.min_version),
        "maximumVersion": _version(catalog.max_version),
        "types": types,
    }


def _set_text(element: etree._Element, key: str, value: str) -> None:
    # lxml rejects attribute values holding control characters.
    element.set(key, strip_xml_incompatible(value))


def _set_type_attributes(element: etree._Element, type_name: TypeName) -> None:
    _set_text(element, "type", type_name.name)
    element.set("array", _flag(type_name.is_array))
    element.set("byRef", _flag(type_name.is_by_ref))


def catalog_to_xml(catalog: ApiCatalog) -> etree._Element:
    """Return the ``<api>`` element describing ``catalog``."""

    root = etree.Element("api")
    root.set("minimumVersion", _version(catalog.min_version))
    root.set("maximumVersion", _version(catalog.max_version))
    for api_type in catalog.types:
        type_element = etree.SubElement(root, "type")
        _set_text(type_element, "kind", api_type.kind)
        _set_text(type_element, "name", api_type.name)
        _set_text(type_element, "ns", api_type.namespace)
        _set_text(type_element, "path", api_type.path)
        type_element.set("minimumVersion", _version(api_type.min_version))
        type_element.set("maximumVersion", _version(api_type.max_version))
        for function in api_type:
            message = etree.SubElement(type_element, "message")
            _set_text(message, "name", function.name)
            for shape in function.shapes:
                signature = etree.SubElement(message, "signature")
                signature.set("minimumVersion", _version(shape.min_version))
                signature.set("maximumVersion", _version(shape.max_version))
                signature.set("static", _flag(shape.is_static))
                signature.set("coroutine", _flag(shape.is_coroutine))
                _set_text(signature, "description", shape.description)
                _set_text(signature, "path", shape.doc_path)
                _set_type_attributes(etree.SubElement(signature, "returns"), shape.return_type)
                parameters = etree.SubElement(signature, "parameters")
                for parameter in shape.parameters:
                    element = etree.SubElement(parameters, "parameter")
                    _set_text(element, "name", parameter.name)
                    _set_type_attributes(element, parameter.type)
                    _set_text(element, "description", parameter.description)
    return root


def write_catalog(
    catalog: ApiCatalog, stream: BinaryIO, fmt: OutputFormat | str = OutputFormat.XML
) -> None:
    """Serialise ``catalog`` to the binary ``stream`` in ``fmt``."""

    fmt = OutputFormat(fmt)
    if fmt is OutputFormat.JSON:
        payload = json.dumps(catalog_to_dict(catalog), indent=2, ensure_ascii=False)
        stream.write(payload.encode("utf-8"))
        stream.write(b"\n")
        return
    stream.write(
        etree.tostring(
            catalog_to_xml(catalog),
            pretty_print=True,
            xml_declaration=True,
            encoding="utf-8",
        )
    )
