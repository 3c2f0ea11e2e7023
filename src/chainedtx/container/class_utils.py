# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Class-name resolution for bean definitions that reference classes by name."""

from __future__ import annotations

import importlib

from chainedtx.container.exceptions import ClassResolutionError


def qualified_name(cls: type) -> str:
    """Return the dotted ``module.QualName`` of a class."""
    return f"{cls.__module__}.{cls.__qualname__}"


def resolve_class_name(class_name: str) -> type:
    """Import and return the class named by *class_name*.

    Accepts ``package.module.ClassName`` and ``package.module:ClassName``
    (nested classes as ``module:Outer.Inner``). Raises
    :class:`ClassResolutionError` when the module cannot be imported or the
    attribute is missing or is not a class.
    """
    if ":" in class_name:
        module_name, _, attr_path = class_name.partition(":")
        candidates = [(module_name, attr_path)]
    else:
        parts = class_name.split(".")
        # Try the longest importable module prefix first: a.b.C, then a.B.C ...
        candidates = [
            (".".join(parts[:i]), ".".join(parts[i:]))
            for i in range(len(parts) - 1, 0, -1)
        ]

    if not candidates or not all(candidates[0]):
        raise ClassResolutionError(class_name, "expected 'module.ClassName' or 'module:ClassName'")

    last_error = "module not found"
    for module_name, attr_path in candidates:
        try:
            target: object = importlib.import_module(module_name)
        except ImportError as exc:
            last_error = str(exc)
            continue
        try:
            for attr in attr_path.split("."):
                target = getattr(target, attr)
        except AttributeError as exc:
            raise ClassResolutionError(class_name, str(exc)) from exc
        if not isinstance(target, type):
            raise ClassResolutionError(class_name, f"'{attr_path}' is not a class")
        return target

    raise ClassResolutionError(class_name, last_error)
