"""
Exceptions raised by the tree machinery.

Hierarchy:
    DocTreeError
        StructuralViolation   an element/child combination that breaks
                              the kind-compatibility rules, or a cycle
        TypeMismatch          an accessor called on the wrong element
                              kind, or an object of the wrong type
                              where an element or node was expected
        RangeError            an out-of-domain argument

The errors also derive from the closest builtin exception, so that
code catching ValueError, TypeError or IndexError keeps working.
"""


class DocTreeError(Exception):
    """Base class of the errors raised by doctree.

    Attributes:
        message: the error message
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StructuralViolation(DocTreeError, ValueError):
    """A tree operation would produce an illegal parent/child
    combination.

    Attributes:
        parent_type: the type name of the parent element, if known
        child_type: the type name of the offending child element
    """

    def __init__(
        self,
        message: str,
        parent_type: str | None = None,
        child_type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.parent_type = parent_type
        self.child_type = child_type


class TypeMismatch(DocTreeError, TypeError):
    """An operation was called on a node or value of the wrong kind.

    Attributes:
        expected: a description of the expected kind
        actual: a description of what was given
    """

    def __init__(
        self, message: str, expected: str = "", actual: str = ""
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class RangeError(DocTreeError, IndexError):
    """An argument is outside its admissible domain."""

    def __init__(self, message: str, value: object = None) -> None:
        super().__init__(message)
        self.value = value
