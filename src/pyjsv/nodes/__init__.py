# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Validator tree node variants."""

from __future__ import annotations

from .applicators import AllOfNode, AnyOfNode, IfThenElseNode, NotNode, OneOfNode
from .arrays import ContainsNode, ItemCountNode, ItemsNode, PrefixItemsNode, UnevaluatedItemsNode, UniqueItemsNode
from .base import BooleanNode, Node, NodeKind, SchemaNode
from .custom import CustomKeywordNode, KeywordValidator
from .objects import (
    AdditionalPropertiesNode,
    DependenciesNode,
    PatternPropertiesNode,
    PropertiesNode,
    PropertyCountNode,
    PropertyNamesNode,
    RequiredNode,
    UnevaluatedPropertiesNode,
)
from .references import DynamicRefNode, RefNode
from .scalars import BoundNode, ConstNode, EnumNode, FormatNode, LengthNode, MultipleOfNode, PatternNode, TypeNode

__all__ = [
    "AdditionalPropertiesNode",
    "AllOfNode",
    "AnyOfNode",
    "BooleanNode",
    "BoundNode",
    "ConstNode",
    "ContainsNode",
    "CustomKeywordNode",
    "DependenciesNode",
    "DynamicRefNode",
    "EnumNode",
    "FormatNode",
    "IfThenElseNode",
    "ItemCountNode",
    "ItemsNode",
    "KeywordValidator",
    "LengthNode",
    "MultipleOfNode",
    "Node",
    "NodeKind",
    "NotNode",
    "OneOfNode",
    "PatternNode",
    "PatternPropertiesNode",
    "PrefixItemsNode",
    "PropertiesNode",
    "PropertyCountNode",
    "PropertyNamesNode",
    "RefNode",
    "RequiredNode",
    "SchemaNode",
    "TypeNode",
    "UnevaluatedItemsNode",
    "UnevaluatedPropertiesNode",
    "UniqueItemsNode",
]
