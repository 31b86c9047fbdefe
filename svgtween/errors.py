"""Exceptions raised by the tween engine."""
from __future__ import annotations


class SvgTweenError(Exception):
    """Base class for engine errors."""


class OutlineError(SvgTweenError, ValueError):
    """Outline data could not be parsed into move + cubic commands."""


class ManagedStateError(SvgTweenError):
    """Managed-state mode is enabled but no state provider was configured."""


class TargetNotFoundError(SvgTweenError, LookupError):
    """A selector referenced by a step resolved to no element."""
