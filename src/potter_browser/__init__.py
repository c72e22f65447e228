"""Browsing client for the Potter DB catalog API.

The package centers on a generic paginated loading engine: one
``PaginatedLoader`` per resource family fetches pages through a
``ResourceClient``, accumulates items and exposes an observable state.
"""

import importlib.metadata
import logging

from potter_browser.client import ResourceClient, ResourceFetcher, decode_envelope
from potter_browser.config import FrozenConfig, ResolvedConfig, config_scope, resolve_config
from potter_browser.core.keys import camelize_keys
from potter_browser.core.sorting import (
    SortDirection,
    SortOption,
    default_sort,
    sort_options,
    sort_token,
)
from potter_browser.core.types import (
    Failure,
    Item,
    LoaderState,
    LoadPhase,
    Links,
    Pagination,
    Recommendation,
    ResourceEnvelope,
    ResourceFamily,
    Result,
    Success,
)
from potter_browser.exceptions import (
    ConfigFileError,
    ConfigurationError,
    DecodeError,
    EmptyResourceError,
    HttpError,
    InvalidRequestError,
    PotterBrowserError,
    TransportError,
)
from potter_browser.loader import LoaderSession, PaginatedLoader, create_loaders
from potter_browser.recommendations import (
    RandomSource,
    RecommendationAggregator,
    RecommendationFeed,
)
from potter_browser.telemetry import InMemoryReporter, TelemetryContext, TelemetryReporter

try:
    __version__ = importlib.metadata.version("potter-browser")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Client
    "ResourceClient",
    "ResourceFetcher",
    "decode_envelope",
    # Loading engine
    "PaginatedLoader",
    "LoaderSession",
    "create_loaders",
    # Recommendations
    "RecommendationAggregator",
    "RecommendationFeed",
    "RandomSource",
    # Sorting
    "SortDirection",
    "SortOption",
    "default_sort",
    "sort_options",
    "sort_token",
    # Data types
    "ResourceFamily",
    "ResourceEnvelope",
    "Pagination",
    "Links",
    "Item",
    "LoaderState",
    "LoadPhase",
    "Recommendation",
    "Result",
    "Success",
    "Failure",
    "camelize_keys",
    # Configuration
    "resolve_config",
    "config_scope",
    "ResolvedConfig",
    "FrozenConfig",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
    "InMemoryReporter",
    # Exceptions
    "PotterBrowserError",
    "InvalidRequestError",
    "HttpError",
    "DecodeError",
    "TransportError",
    "EmptyResourceError",
    "ConfigurationError",
    "ConfigFileError",
]
