"""Versioned catalog of engine event functions scraped from script reference HTML.

``DocsToApi.EventFunctions`` scans the rendered scripting reference of several
engine releases, extracts every documented event function ("message") of every
type, and merges the per-release observations into one model in which each
function carries the version ranges over which each of its signatures held.

Typical use::

    from DocsToApi.EventFunctions import ApiParser

    parser = ApiParser()
    for root, version in [("docs/5.6", "5.6"), ("docs/2017.1", "2017.1")]:
        parser.parse_folder(root, version)
    with open("api.xml", "wb") as stream:
        parser.export(stream)
"""

from __future__ import annotations

from .errors import (
    CLIValidationError,
    ConfigLoadError,
    DocsToApiError,
    DocumentationRootError,
    VersionOrderError,
)
from .examples import Dialect, ExampleSignature, parse_example
from .model import (
    ApiCatalog,
    ApiType,
    EventFunction,
    EventFunctionObservation,
    MergeResult,
    Shape,
    same_shape,
)
from .parameters import Parameter, ParameterRow, resolve_parameters
from .parser import ApiParser, ScanSummary
from .settings import OutputFormat, ScanSettings, load_settings
from .typenames import TypeName, resolve_type

__all__ = [
    "ApiCatalog",
    "ApiParser",
    "ApiType",
    "CLIValidationError",
    "ConfigLoadError",
    "Dialect",
    "DocsToApiError",
    "DocumentationRootError",
    "EventFunction",
    "EventFunctionObservation",
    "ExampleSignature",
    "MergeResult",
    "OutputFormat",
    "Parameter",
    "ParameterRow",
    "ScanSettings",
    "ScanSummary",
    "Shape",
    "TypeName",
    "VersionOrderError",
    "load_settings",
    "parse_example",
    "resolve_parameters",
    "resolve_type",
    "same_shape",
]
