"""
Internal exception hierarchy.

These exceptions never escape `TransformEngine.run`. Each one is caught at the
boundary of the scope it invalidates (one template, one component, one adapter
call) and converted into a diagnostic.
"""


class SwitcherooError(Exception):
  """Base class for pipeline errors."""


class CssSyntaxError(SwitcherooError):
  """
  Raised when a style template is not well-formed CSS after placeholder substitution.
  """

  def __init__(self, message: str, offset: int = -1) -> None:
    super().__init__(message)
    self.offset = offset


class HostParseError(SwitcherooError):
  """Raised when the host TSX source (or a generated snippet) cannot be parsed."""


class AdapterContractError(SwitcherooError):
  """Raised when an adapter hook returns a value of the wrong shape."""


class WrapperSynthesisError(SwitcherooError):
  """Raised when a wrapper component cannot be generated for a styled declaration."""


class EditConflictError(SwitcherooError):
  """Raised when two generated edits overlap in the host source."""
