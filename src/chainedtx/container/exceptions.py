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
"""Container exceptions — fatal errors during bean registration and creation."""

from __future__ import annotations

from chainedtx.kernel.exceptions import InfrastructureException


class BeanCreationException(InfrastructureException):
    """Fatal error during bean creation; the application cannot start.

    Analogous to Spring's BeanCreationException.
    """

    def __init__(self, subsystem: str, provider: str, reason: str) -> None:
        self.subsystem = subsystem
        self.provider = provider
        self.reason = reason
        message = f"Failed to configure {subsystem} with provider '{provider}': {reason}"
        super().__init__(message=message, code=f"BEAN_CREATION_{subsystem.upper()}")


class NoSuchBeanDefinitionError(BeanCreationException):
    """No bean definition is registered under the requested name."""

    def __init__(
        self,
        bean_name: str,
        *,
        suggestions: list[str] | None = None,
    ) -> None:
        self.bean_name = bean_name
        self.suggestions = suggestions or []

        headline = f"No bean named '{bean_name}' is registered"
        lines = [f"NoSuchBeanDefinitionError: {headline}"]
        if self.suggestions:
            lines.append("")
            lines.append(f"  Similar registered names: {', '.join(self.suggestions)}")

        BeanCreationException.__init__(
            self,
            subsystem="registry",
            provider=bean_name,
            reason=headline,
        )
        self.args = ("\n".join(lines),)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class ClassResolutionError(BeanCreationException):
    """A bean class name could not be imported."""

    def __init__(self, class_name: str, cause: str) -> None:
        self.class_name = class_name
        BeanCreationException.__init__(
            self,
            subsystem="class_resolution",
            provider=class_name,
            reason=f"Cannot resolve class '{class_name}': {cause}",
        )


class BeanIsAbstractError(BeanCreationException):
    """An abstract (template-only) definition was requested as a bean."""

    def __init__(self, bean_name: str) -> None:
        self.bean_name = bean_name
        BeanCreationException.__init__(
            self,
            subsystem="resolution",
            provider=bean_name,
            reason=f"Bean definition '{bean_name}' is abstract and cannot be instantiated",
        )


class BeanNotOfRequiredTypeError(BeanCreationException):
    """The bean registered under a name is not of the requested type."""

    def __init__(self, bean_name: str, required_type: type, actual_type: type) -> None:
        self.bean_name = bean_name
        self.required_type = required_type
        self.actual_type = actual_type
        BeanCreationException.__init__(
            self,
            subsystem="resolution",
            provider=bean_name,
            reason=(
                f"Bean '{bean_name}' is expected to be of type '{required_type.__name__}' "
                f"but was actually of type '{actual_type.__name__}'"
            ),
        )


class BeanCurrentlyInCreationError(BeanCreationException):
    """Circular dependency detected during bean creation.

    The ``chain`` attribute contains the bean names being created, in the
    order creation was attempted.
    """

    def __init__(self, *, chain: list[str], current: str) -> None:
        self.chain = chain
        self.current = current

        chain_str = " -> ".join([*chain, current])
        headline = f"Circular dependency: {chain_str}"

        lines = [f"BeanCurrentlyInCreationError: {headline}"]
        lines.append("")
        lines.append("  Suggestion: Break the cycle by removing one of the bean references")

        BeanCreationException.__init__(
            self,
            subsystem="resolution",
            provider=current,
            reason=headline,
        )
        self.args = ("\n".join(lines),)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""
