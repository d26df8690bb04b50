"""
Auditor error types.

The audit core itself is total over well-formed inputs. These errors cover
the boundaries around it: the static lookup tables and the resource limits
enforced before an audit runs.
"""

from __future__ import annotations


class AutocompleteAuditorError(RuntimeError):
    """Base class for errors raised by the Autocomplete Auditor."""


class TableLoadError(AutocompleteAuditorError):
    """
    The autocomplete lookup tables could not be loaded.

    Raised when the data asset is missing, is not valid JSON, or fails
    schema validation.
    """


class InputLimitExceeded(AutocompleteAuditorError):
    """The submitted form collection exceeds the configured input limit."""

    def __init__(self, inputs_count: int, max_inputs: int) -> None:
        super().__init__(
            f"Form collection contains {inputs_count} inputs; "
            f"the configured maximum is {max_inputs}"
        )
        self.inputs_count = inputs_count
        self.max_inputs = max_inputs
