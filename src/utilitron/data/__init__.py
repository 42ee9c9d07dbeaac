"""SQL query resources: include resolution, preprocessing and minification.

This package loads SQL text from resource providers, inlines include
directives, applies preprocessor flags and minifies the result.
"""

from utilitron.data.exceptions import (
    CyclicIncludeError,
    IncludePathError,
    PreprocessorError,
    QueryConfigurationError,
    QueryError,
    QueryNotFoundError,
)
from utilitron.data.include_resolver import IncludeResolver
from utilitron.data.minifier import QueryMinifier
from utilitron.data.preprocessor import QueryPreprocessor
from utilitron.data.repository import Repository, RepositoryConfiguration
from utilitron.data.resources import (
    DirectoryResourceProvider,
    InMemoryResourceProvider,
    PackageResourceProvider,
    ResourceProvider,
)

__all__ = [
    "CyclicIncludeError",
    "DirectoryResourceProvider",
    "InMemoryResourceProvider",
    "IncludePathError",
    "IncludeResolver",
    "PackageResourceProvider",
    "PreprocessorError",
    "QueryConfigurationError",
    "QueryError",
    "QueryMinifier",
    "QueryNotFoundError",
    "QueryPreprocessor",
    "Repository",
    "RepositoryConfiguration",
    "ResourceProvider",
]
