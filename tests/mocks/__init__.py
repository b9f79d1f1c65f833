"""
Fake implementations for testing SwiftSetup components.

This package provides fakes for the external collaborators of the install
pipeline (network, child processes, the CI environment) to enable isolated,
deterministic testing.
"""

from .environment import RecordingEnvironment
from .network import FakeTransport
from .process import FakeProcessRunner, Rule

__all__ = [
    "FakeProcessRunner",
    "FakeTransport",
    "RecordingEnvironment",
    "Rule",
]
