"""
Hub Mirror: copy multi-platform container images to another registry
namespace and write a script that restores their original names.
"""

__version__ = "1.0.0"
