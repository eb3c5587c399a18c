"""Custom exceptions for J-Dep Updates."""


class JDepError(Exception):
    """Base exception for J-Dep Updates."""


class PomNotFoundError(JDepError):
    """Raised when a pom.xml file cannot be found."""


class PomParseError(JDepError):
    """Raised when a pom.xml file cannot be parsed."""


class PomModelError(JDepError):
    """Raised when required Maven model fields are missing or invalid."""


class ConfigurationError(JDepError):
    """Raised when the project cannot be processed as configured.

    Typically a dependencyManagement entry without a version in a project
    that has no parent to inherit it from.
    """


class InvalidVersionSpecificationError(JDepError):
    """Raised when a version or version range string cannot be parsed."""


class MetadataRetrievalError(JDepError):
    """Raised when version metadata cannot be obtained from a repository."""
