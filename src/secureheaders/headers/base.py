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
"""Shared pieces for header kinds: the opt-out sentinel and the header port."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class OptOut:
    """Sentinel telling the renderer to omit a header entirely.

    Exactly one instance exists. Copies and unpickled values resolve back to
    it so ``value is OPT_OUT`` stays valid across ``Configuration.dup()``.
    """

    _instance: OptOut | None = None

    def __new__(cls) -> OptOut:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OPT_OUT"

    def __bool__(self) -> bool:
        return True

    def __copy__(self) -> OptOut:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> OptOut:
        return self

    def __reduce__(self) -> str:
        return "OPT_OUT"


OPT_OUT = OptOut()


@runtime_checkable
class HeaderKind(Protocol):
    """Port every simple header module satisfies.

    Header modules are plain modules rather than classes; they are checked
    against this protocol structurally.
    """

    CONFIG_KEY: str
    HEADER_NAME: str
    DEFAULT_VALUE: Any

    def validate(self, value: Any) -> None: ...
    def make_header(self, value: Any = None) -> tuple[str, str]: ...
