from .catalog import (
    AzureVirtualDesktopProperties,
    RemoteDesktopClientProperties,
    RemoteDesktopServiceProperties,
    RemoteDesktopUriProperties,
    TerminalServicesClientProperties,
)
from .errors import RdpError, SchemaError
from .schema import FieldSpec, PropertySet, property_set, schema_for
from .serializer import deserialize, serialize
from .uri import URI_SCHEME, serialize_uri

__version__ = "0.1.0"


__all__ = [
    "FieldSpec",
    "PropertySet",
    "property_set",
    "schema_for",
    "serialize",
    "deserialize",
    "serialize_uri",
    "URI_SCHEME",
    "RdpError",
    "SchemaError",
    "RemoteDesktopServiceProperties",
    "AzureVirtualDesktopProperties",
    "RemoteDesktopClientProperties",
    "TerminalServicesClientProperties",
    "RemoteDesktopUriProperties",
]
