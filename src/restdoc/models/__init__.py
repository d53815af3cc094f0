"""restdoc data models."""

from restdoc.models.config import ExtractConfig, RenderConfig, RestDocConfig
from restdoc.models.ir import (
    ArgumentLocation,
    ResourceArgument,
    ResourceClass,
    ResourceMethod,
    TransferClass,
    TransferClassMap,
    TransferEnumValue,
    TransferMember,
    dump_resource_methods,
    dump_transfer_classes,
    parse_resource_methods,
    parse_transfer_classes,
)
from restdoc.models.types import TypeDescriptor

__all__ = [
    # Config
    "ExtractConfig",
    "RenderConfig",
    "RestDocConfig",
    # Types
    "TypeDescriptor",
    # IR
    "ArgumentLocation",
    "ResourceArgument",
    "ResourceMethod",
    "ResourceClass",
    "TransferMember",
    "TransferEnumValue",
    "TransferClass",
    "TransferClassMap",
    # IR documents
    "dump_transfer_classes",
    "dump_resource_methods",
    "parse_transfer_classes",
    "parse_resource_methods",
]
