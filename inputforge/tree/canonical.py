"""
Canonical encoding for structured input trees.

Deterministic JSON bytes used as the content address of a tree:
- object keys sorted, insertion order ignored
- no whitespace
- non-ASCII escaped, so any Python string (lone surrogates included) encodes
- one number type: 1.0 encodes as 1

Works on nodes by `kind` and walks with an explicit stack.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, List, Union

from ..contracts.enums import NodeKind


def _scalar_token(value: Any) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    # str, int and finite float; ScalarNode rejects everything else.
    return json.dumps(value, allow_nan=False)


def canonicalize(tree) -> bytes:
    out: List[str] = []
    stack: List[Union[str, Any]] = [tree]

    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
            continue

        if item.kind is NodeKind.SCALAR:
            out.append(_scalar_token(item.value))
            continue

        if item.kind is NodeKind.OBJECT:
            parts: List[Union[str, Any]] = ["{"]
            for i, (key, child) in enumerate(sorted(item.items(), key=lambda kv: kv[0])):
                parts.append(("," if i else "") + json.dumps(key) + ":")
                parts.append(child)
            parts.append("}")
        else:
            parts = ["["]
            for i, child in enumerate(item):
                if i:
                    parts.append(",")
                parts.append(child)
            parts.append("]")

        stack.extend(reversed(parts))

    return "".join(out).encode("ascii")


def compute_hash(tree) -> str:
    """SHA-256 hex digest of the canonical encoding."""
    return hashlib.sha256(canonicalize(tree)).hexdigest()
